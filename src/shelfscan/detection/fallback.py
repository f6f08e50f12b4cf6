from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping

import numpy as np
from PIL import Image, UnidentifiedImageError

from shelfscan.config.schema import FallbackDetectorConfig
from shelfscan.detectors.handle import ModelHandle
from shelfscan.detectors.types import Detection, DetectorOrigin, HorizontalBand, RawDetection
from shelfscan.errors import FallbackDetectionError, ImageLoadError, ShelfScanError
from shelfscan.matching.evaluator import is_class_match
from shelfscan.matching.normalize import build_class_variants, normalize, query_words

LOGGER = logging.getLogger(__name__)

LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)


def load_image(source: bytes | Image.Image) -> Image.Image:
    if isinstance(source, Image.Image):
        return source.convert("RGB")
    if not source:
        raise ImageLoadError("Failed to load image: no data")
    try:
        with Image.open(io.BytesIO(source)) as img:
            return img.convert("RGB")
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageLoadError(f"Failed to load image: {exc}") from exc


def blur_score(image: Image.Image, sample_size: int = 100) -> float:
    """Luma variance over the top-left sample region; low values mean a soft image."""
    pixels = np.asarray(image.convert("RGB"), dtype=np.float64)[:sample_size, :sample_size]
    if pixels.size == 0:
        return 0.0
    luma = pixels @ LUMA_WEIGHTS
    return float(luma.var())


def effective_threshold(base: float, score: float, blur_threshold: float, damping: float) -> float:
    if score < blur_threshold:
        return base * damping
    return base


def horizontal_position(
    center_x: float, image_width: float, left_cutoff: float = 0.35, right_cutoff: float = 0.65
) -> HorizontalBand:
    relative = center_x / image_width
    if relative < left_cutoff:
        return HorizontalBand.LEFT
    if relative > right_cutoff:
        return HorizontalBand.RIGHT
    return HorizontalBand.CENTER


def rank_fallback_matches(
    detections: Iterable[Detection], priority_classes: Iterable[str]
) -> list[Detection]:
    priority = {normalize(c) for c in priority_classes}
    return sorted(
        detections,
        key=lambda d: (normalize(d.class_name) not in priority, -d.confidence),
    )


@dataclass
class FallbackDetectionAdapter:
    handle: ModelHandle
    cfg: FallbackDetectorConfig = field(default_factory=FallbackDetectorConfig)
    produce_aliases: Mapping[str, list[str]] | None = None

    def _adjust(self, raw: RawDetection, threshold: float, image_width: int) -> Detection | None:
        cls = raw.class_name.lower()
        if raw.width <= 0 or raw.height <= 0:
            LOGGER.debug("Dropping degenerate %s box %sx%s", cls, raw.width, raw.height)
            return None
        score = min(max(raw.score, 0.0), 1.0)
        if cls in self.cfg.disallowed_classes or score < threshold:
            return None
        boost = self.cfg.priority_classes.get(cls, 1.0)
        center_x, center_y = raw.center()
        return Detection(
            class_name=cls,
            confidence=min(score * boost, 1.0),
            x=center_x,
            y=center_y,
            width=raw.width,
            height=raw.height,
            origin=DetectorOrigin.FALLBACK,
            position=horizontal_position(
                center_x, image_width, self.cfg.left_cutoff, self.cfg.right_cutoff
            ),
        )

    def candidates(self, image: Image.Image, base_threshold: float | None = None) -> list[Detection]:
        """Every shelf-relevant detection above the blur-adjusted threshold, confidence desc."""
        base = self.cfg.base_threshold if base_threshold is None else base_threshold
        score = blur_score(image, self.cfg.blur_sample_size)
        threshold = effective_threshold(base, score, self.cfg.blur_threshold, self.cfg.blur_damping)
        if threshold < base:
            LOGGER.debug("Image looks blurry (score %.1f), threshold %.3f -> %.3f", score, base, threshold)

        model = self.handle.get()
        try:
            raw = model.predict(image, threshold)
        except ShelfScanError:
            raise
        except Exception as exc:
            raise FallbackDetectionError(f"Object detector failed: {exc}") from exc

        width = image.size[0]
        kept = [d for d in (self._adjust(r, threshold, width) for r in raw) if d is not None]
        kept.sort(key=lambda d: d.confidence, reverse=True)
        return kept

    def detect(
        self,
        image: bytes | Image.Image,
        query: str,
        base_threshold: float | None = None,
    ) -> list[Detection]:
        decoded = load_image(image)
        candidates = self.candidates(decoded, base_threshold)
        variants = build_class_variants(query, self.produce_aliases)
        words = query_words(query)
        matches = [
            d
            for d in candidates
            if is_class_match(d.class_name, variants, words, self.produce_aliases)
        ]
        LOGGER.info(
            "Fallback detector: %d/%d detections match %r", len(matches), len(candidates), query
        )
        return rank_fallback_matches(matches, self.cfg.priority_classes)
