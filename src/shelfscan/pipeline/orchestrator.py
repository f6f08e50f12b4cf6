from __future__ import annotations

import io
import logging
import threading
from dataclasses import dataclass, replace
from typing import Iterable

from PIL import Image, UnidentifiedImageError

from shelfscan.config.schema import RunConfig
from shelfscan.detection.fallback import FallbackDetectionAdapter
from shelfscan.detection.primary import PrimaryDetectionAdapter
from shelfscan.detectors.base import LabelDetector
from shelfscan.detectors.factory import create_label_detector, create_model_handle
from shelfscan.detectors.handle import ModelHandle
from shelfscan.errors import DetectionUnavailableError, InvalidInputError, RequestCancelled
from shelfscan.pipeline.policy import primary_result, resolve, rule_for, should_run_fallback
from shelfscan.pipeline.result import MatchResult

LOGGER = logging.getLogger(__name__)

MISSING_IMAGE = "Missing image. Please upload a photo of the shelf."
MISSING_QUERY = "Please enter a brand name or product first before uploading an image."


def validate_request(image_bytes: bytes | None, query: str | None) -> tuple[bytes, str]:
    if not image_bytes:
        raise InvalidInputError(MISSING_IMAGE)
    cleaned = (query or "").strip()
    if not cleaned:
        raise InvalidInputError(MISSING_QUERY)
    return image_bytes, cleaned


def _check_cancelled(cancel: threading.Event | None, step: str) -> None:
    if cancel is not None and cancel.is_set():
        LOGGER.info("Request cancelled before %s", step)
        raise RequestCancelled(f"Request cancelled before {step}")


def _probe_size(image_bytes: bytes) -> tuple[int | None, int | None]:
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            return img.size
    except (UnidentifiedImageError, OSError):
        LOGGER.debug("Could not read image size from upload")
        return None, None


@dataclass
class SearchPipeline:
    """Runs one product search: label detector first, object detector when the policy says so."""

    primary: PrimaryDetectionAdapter
    fallback: FallbackDetectionAdapter | None = None
    produce_keywords: Iterable[str] | None = None

    @classmethod
    def from_config(
        cls,
        config: RunConfig,
        label_detector: LabelDetector | None = None,
        handle: ModelHandle | None = None,
    ) -> "SearchPipeline":
        primary = PrimaryDetectionAdapter(
            detector=label_detector or create_label_detector(config.primary),
            brand_aliases=config.matching.brand_aliases,
        )
        fallback = None
        if config.fallback.enabled:
            fallback = FallbackDetectionAdapter(
                handle=handle or create_model_handle(config.fallback),
                cfg=config.fallback,
                produce_aliases=config.matching.produce_aliases,
            )
        return cls(primary=primary, fallback=fallback, produce_keywords=config.matching.produce_keywords)

    def run(
        self,
        image_bytes: bytes | None,
        query: str | None,
        cancel: threading.Event | None = None,
    ) -> MatchResult:
        data, cleaned = validate_request(image_bytes, query)

        _check_cancelled(cancel, "label detection")
        outcome = self.primary.detect(data, cleaned)
        if outcome.image_width is None or outcome.image_height is None:
            width, height = _probe_size(data)
            outcome = replace(outcome, image_width=width, image_height=height)

        _check_cancelled(cancel, "fallback decision")
        if self.fallback is None or not should_run_fallback(outcome, self.produce_keywords):
            LOGGER.info("Policy %s: returning label detector result", outcome.status.value)
            return primary_result(outcome)

        LOGGER.info(
            "Policy %s: running object detector (trigger=%s)",
            outcome.status.value,
            rule_for(outcome).trigger.value,
        )
        try:
            matches = self.fallback.detect(data, cleaned)
        except DetectionUnavailableError as exc:
            LOGGER.warning("Object detector failed: %s", exc.message)
            _check_cancelled(cancel, "merging results")
            return resolve(outcome, None, exc.message)

        _check_cancelled(cancel, "merging results")
        return resolve(outcome, matches)

    def search(
        self,
        image_bytes: bytes | None,
        query: str | None,
        cancel: threading.Event | None = None,
    ) -> MatchResult:
        """Like ``run`` but reports missing inputs as an errored result."""
        try:
            return self.run(image_bytes, query, cancel=cancel)
        except InvalidInputError as exc:
            return MatchResult.failure((query or "").strip(), str(exc))

    def close(self) -> None:
        self.primary.detector.close()
        if self.fallback is not None:
            self.fallback.handle.close()

    def __enter__(self) -> "SearchPipeline":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
