from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from shelfscan.matching.normalize import MIN_TOKEN_LENGTH, normalize
from shelfscan.matching.vocab import PRODUCE_ALIASES


def is_match(label: str, variants: Sequence[str]) -> bool:
    """Symmetric containment between a detector label and any query variant.

    Deliberately permissive: "coke" matches "diet coke" and "ban" matches "banana".
    """
    normalized = normalize(label)
    if not normalized:
        return False
    if normalized in variants:
        return True
    return any(v and (v in normalized or normalized in v) for v in variants)


def _contains(outer: str, inner: str, min_length: int) -> bool:
    return len(inner) >= min_length and inner in outer


def is_class_match(
    class_name: str,
    variants: Sequence[str],
    words: Sequence[str] = (),
    produce_aliases: Mapping[str, Iterable[str]] | None = None,
    min_length: int = MIN_TOKEN_LENGTH,
) -> bool:
    """Fallback-detector matching with a minimum token length on every containment test."""
    cls = normalize(class_name)
    if not cls:
        return False

    for variant in variants:
        if cls == variant:
            return True
        if _contains(cls, variant, min_length) or _contains(variant, cls, min_length):
            return True

    for word in words:
        if _contains(cls, word, min_length) or _contains(word, cls, min_length):
            return True

    table = PRODUCE_ALIASES if produce_aliases is None else produce_aliases
    aliases = table.get(cls)
    if aliases:
        alias_norms = {normalize(a) for a in aliases}
        if alias_norms.intersection(variants):
            return True
    return False
