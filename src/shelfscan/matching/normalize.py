from __future__ import annotations

import re
from typing import Iterable, Mapping

from shelfscan.matching.vocab import BRAND_ALIASES, PRODUCE_ALIASES, PRODUCE_QUERY_KEYWORDS

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")

MIN_TOKEN_LENGTH = 3


def normalize(text: str) -> str:
    """Canonical form used on both sides of every comparison.

    Lower-cases, maps ``&`` to ``and``, replaces anything outside ``[a-z0-9\\s]`` with a space
    and collapses whitespace. Never raises.
    """
    lowered = str(text).lower().strip().replace("&", "and")
    cleaned = _NON_ALNUM.sub(" ", lowered)
    return _WHITESPACE.sub(" ", cleaned).strip()


def _ordered_unique(items: Iterable[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for item in items:
        if item and item not in seen:
            seen[item] = None
    return tuple(seen)


def build_query_variants(
    raw_query: str,
    aliases: Mapping[str, Iterable[str]] | None = None,
) -> tuple[str, ...]:
    """Expand a brand-style query with its alias group.

    A query equal to a canonical name pulls in every alias of the group; a query equal to an
    alias pulls in the canonical name. The normalized query always comes first.
    """
    table = BRAND_ALIASES if aliases is None else aliases
    query = normalize(raw_query)
    variants = [query]
    for canonical, alias_list in table.items():
        canonical_norm = normalize(canonical)
        alias_norms = [normalize(a) for a in alias_list]
        if query == canonical_norm:
            variants.extend(alias_norms)
        if query in alias_norms:
            variants.append(canonical_norm)
    return _ordered_unique(variants)


def query_words(query: str, min_length: int = MIN_TOKEN_LENGTH) -> tuple[str, ...]:
    return _ordered_unique(w for w in normalize(query).split() if len(w) >= min_length)


def toggle_plural(term: str) -> str:
    # Naive on purpose: "glass" -> "glas" is accepted.
    if term.endswith("s"):
        return term[:-1]
    return term + "s"


def build_class_variants(
    query: str,
    produce_aliases: Mapping[str, Iterable[str]] | None = None,
) -> tuple[str, ...]:
    """Variants of a query against the object detector's class vocabulary."""
    table = PRODUCE_ALIASES if produce_aliases is None else produce_aliases
    normalized = normalize(query)
    if not normalized:
        return ()
    variants = [normalized, toggle_plural(normalized), *query_words(normalized)]
    for canonical, alias_list in table.items():
        alias_norms = {normalize(a) for a in alias_list}
        if alias_norms.intersection(variants):
            variants.append(normalize(canonical))
    return _ordered_unique(variants)


def is_produce_query(query: str, keywords: Iterable[str] | None = None) -> bool:
    """Heuristic: does the query look like fresh produce rather than a packaged brand?

    Bidirectional substring test against a fixed keyword list, so "pear" also fires on
    "spear" and unlisted produce names are missed.
    """
    normalized = normalize(query)
    if not normalized:
        return False
    for keyword in PRODUCE_QUERY_KEYWORDS if keywords is None else keywords:
        kw = normalize(keyword)
        if kw and (kw in normalized or normalized in kw):
            return True
    return False
