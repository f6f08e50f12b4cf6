from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping

from shelfscan.detectors.base import LabelDetector
from shelfscan.detectors.types import Detection, DetectorOrigin
from shelfscan.errors import PrimaryDetectionUnavailable
from shelfscan.matching.evaluator import is_match
from shelfscan.matching.normalize import build_query_variants

LOGGER = logging.getLogger(__name__)


class PrimaryStatus(str, Enum):
    MATCHED = "matched"
    UNMATCHED = "unmatched"
    EMPTY = "empty"
    SERVICE_ERROR = "service_error"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class PrimaryOutcome:
    status: PrimaryStatus
    query: str
    variants: tuple[str, ...] = ()
    matches: tuple[Detection, ...] = ()
    all_count: int = 0
    message: str | None = None
    image_width: int | None = None
    image_height: int | None = None

    @property
    def match_count(self) -> int:
        return len(self.matches)

    @property
    def failed(self) -> bool:
        return self.status in {PrimaryStatus.SERVICE_ERROR, PrimaryStatus.TRANSPORT_ERROR}


def _to_detection(prediction: Mapping[str, Any]) -> Detection | None:
    try:
        return Detection(
            class_name=str(prediction["class"]),
            confidence=float(prediction["confidence"]),
            x=float(prediction["x"]),
            y=float(prediction["y"]),
            width=float(prediction["width"]),
            height=float(prediction["height"]),
            origin=DetectorOrigin.PRIMARY,
        )
    except (KeyError, TypeError, ValueError) as exc:
        LOGGER.warning("Dropping malformed label prediction %r: %s", prediction, exc)
        return None


def filter_label_matches(
    predictions: Iterable[Mapping[str, Any]],
    variants: tuple[str, ...],
) -> list[Detection]:
    matches = []
    for prediction in predictions:
        if not is_match(str(prediction.get("class", "")), variants):
            continue
        detection = _to_detection(prediction)
        if detection is not None:
            matches.append(detection)
    # sorted() is stable, so equal confidences keep the detector's order.
    return sorted(matches, key=lambda d: d.confidence, reverse=True)


@dataclass
class PrimaryDetectionAdapter:
    detector: LabelDetector
    brand_aliases: Mapping[str, list[str]] | None = None

    def detect(self, image_bytes: bytes, query: str) -> PrimaryOutcome:
        """Run the label detector once; failures come back as an outcome, never raised."""
        variants = build_query_variants(query, self.brand_aliases)
        try:
            response = self.detector.detect(image_bytes)
        except PrimaryDetectionUnavailable as exc:
            status = PrimaryStatus.SERVICE_ERROR if exc.status is not None else PrimaryStatus.TRANSPORT_ERROR
            LOGGER.warning("Primary detector unavailable (%s): %s", status.value, exc.message)
            return PrimaryOutcome(status=status, query=query, variants=variants, message=exc.message)

        matches = filter_label_matches(response.predictions, variants)
        all_count = len(response.predictions)
        if matches:
            status = PrimaryStatus.MATCHED
        elif all_count:
            status = PrimaryStatus.UNMATCHED
        else:
            status = PrimaryStatus.EMPTY
        LOGGER.info(
            "Primary detector: %d/%d predictions match %r", len(matches), all_count, query
        )
        return PrimaryOutcome(
            status=status,
            query=query,
            variants=variants,
            matches=tuple(matches),
            all_count=all_count,
            image_width=response.image_width,
            image_height=response.image_height,
        )
