"""Decision table for when the object detector backs up the label detector.

Each primary status maps to one rule; every rule ends in a ``MatchResult``. The produce gate
on ``UNMATCHED`` is the one asymmetric branch: brand-style queries keep the label detector's
confident "not found" instead of being matched against unrelated generic classes.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Sequence

from shelfscan.detection.primary import PrimaryOutcome, PrimaryStatus
from shelfscan.detectors.types import Detection
from shelfscan.matching.normalize import is_produce_query
from shelfscan.pipeline.result import MatchResult

NO_PRODUCTS_SERVICE_ERROR = (
    "No products detected. Try a clearer photo with better lighting, or check if the item is "
    "a packaged brand product or fresh produce."
)
NO_PRODUCTS_EMPTY = "No products detected. Try a clearer photo with better lighting."
NO_PRODUCTS_TRANSPORT = "No products detected. Try a clearer photo."
DETECTION_FAILED = "Detection failed. Please try again with a clearer image."


class FallbackTrigger(str, Enum):
    ALWAYS = "always"
    NEVER = "never"
    PRODUCE_QUERY = "produce_query"


class FallbackMerge(str, Enum):
    REPLACE = "replace"
    INTO_PRIMARY = "into_primary"


class FailureResolution(str, Enum):
    PRIMARY_RESULT = "primary_result"
    PRIMARY_ERROR = "primary_error"


@dataclass(frozen=True)
class PolicyRule:
    trigger: FallbackTrigger
    merge: FallbackMerge = FallbackMerge.REPLACE
    # None keeps the primary result when the object detector finds nothing.
    empty_error: str | None = None
    on_failure: FailureResolution = FailureResolution.PRIMARY_RESULT


DECISION_TABLE: dict[PrimaryStatus, PolicyRule] = {
    PrimaryStatus.SERVICE_ERROR: PolicyRule(
        trigger=FallbackTrigger.ALWAYS,
        empty_error=NO_PRODUCTS_SERVICE_ERROR,
        on_failure=FailureResolution.PRIMARY_ERROR,
    ),
    PrimaryStatus.MATCHED: PolicyRule(trigger=FallbackTrigger.NEVER),
    PrimaryStatus.UNMATCHED: PolicyRule(
        trigger=FallbackTrigger.PRODUCE_QUERY,
        merge=FallbackMerge.INTO_PRIMARY,
    ),
    PrimaryStatus.EMPTY: PolicyRule(
        trigger=FallbackTrigger.ALWAYS,
        empty_error=NO_PRODUCTS_EMPTY,
    ),
    PrimaryStatus.TRANSPORT_ERROR: PolicyRule(
        trigger=FallbackTrigger.ALWAYS,
        empty_error=NO_PRODUCTS_TRANSPORT,
        on_failure=FailureResolution.PRIMARY_ERROR,
    ),
}


def rule_for(outcome: PrimaryOutcome) -> PolicyRule:
    return DECISION_TABLE[outcome.status]


def should_run_fallback(outcome: PrimaryOutcome, produce_keywords: Iterable[str] | None = None) -> bool:
    trigger = rule_for(outcome).trigger
    if trigger is FallbackTrigger.ALWAYS:
        return True
    if trigger is FallbackTrigger.PRODUCE_QUERY:
        return is_produce_query(outcome.query, produce_keywords)
    return False


def primary_result(outcome: PrimaryOutcome) -> MatchResult:
    error = (outcome.message or DETECTION_FAILED) if outcome.failed else None
    return MatchResult(
        found=bool(outcome.matches),
        query=outcome.query,
        matches=outcome.matches,
        all_count=outcome.all_count,
        error=error,
        variants=outcome.variants,
        image_width=outcome.image_width,
        image_height=outcome.image_height,
    )


def resolve(
    outcome: PrimaryOutcome,
    fallback_matches: Sequence[Detection] | None,
    fallback_error: str | None = None,
) -> MatchResult:
    """Combine the primary outcome with the object detector's answer.

    Pass ``fallback_matches=None`` when the object detector failed and describe the failure in
    ``fallback_error``; an empty sequence means it ran and found nothing.
    """
    rule = rule_for(outcome)
    base = primary_result(outcome)

    if fallback_matches is None:
        if rule.on_failure is FailureResolution.PRIMARY_ERROR:
            message = outcome.message or fallback_error or DETECTION_FAILED
            return replace(base, found=False, matches=(), all_count=0, error=message)
        return base

    if not fallback_matches:
        if rule.empty_error is None:
            return base
        return replace(base, found=False, matches=(), all_count=0, error=rule.empty_error)

    matches = tuple(fallback_matches)
    if rule.merge is FallbackMerge.INTO_PRIMARY:
        return replace(base, found=True, matches=matches, used_fallback=True, error=None)
    return replace(
        base,
        found=True,
        matches=matches,
        all_count=len(matches),
        used_fallback=True,
        error=None,
    )
