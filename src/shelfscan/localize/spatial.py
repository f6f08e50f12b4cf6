"""Turn a detection box into words a shopper can act on."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from shelfscan.config.schema import LocalizerConfig
from shelfscan.detectors.types import Detection, HorizontalBand


class VerticalBand(str, Enum):
    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"


class DistanceHint(str, Enum):
    VERY_CLOSE = "very close"
    CLOSE = "close"
    A_BIT_FAR = "a bit far"
    FAR = "far"


@dataclass(frozen=True)
class LocationDescriptor:
    horizontal: HorizontalBand
    vertical: VerticalBand
    shelf_band: str
    distance_hint: DistanceHint
    phrase: str

    def to_dict(self) -> dict[str, str]:
        return {
            "horizontal": self.horizontal.value,
            "vertical": self.vertical.value,
            "shelfBand": self.shelf_band,
            "distanceHint": self.distance_hint.value,
            "phrase": self.phrase,
        }


def _third(value: float, cfg: LocalizerConfig) -> int:
    if value < cfg.first_third:
        return 0
    if value < cfg.second_third:
        return 1
    return 2


_HORIZONTAL = (HorizontalBand.LEFT, HorizontalBand.CENTER, HorizontalBand.RIGHT)
_VERTICAL = (VerticalBand.TOP, VerticalBand.MIDDLE, VerticalBand.BOTTOM)


def distance_hint(area_ratio: float, cfg: LocalizerConfig | None = None) -> DistanceHint:
    cfg = cfg or LocalizerConfig()
    if area_ratio > cfg.very_close_area:
        return DistanceHint.VERY_CLOSE
    if area_ratio > cfg.close_area:
        return DistanceHint.CLOSE
    if area_ratio > cfg.a_bit_far_area:
        return DistanceHint.A_BIT_FAR
    return DistanceHint.FAR


def describe_location(
    detection: Detection,
    image_width: float,
    image_height: float,
    cfg: LocalizerConfig | None = None,
) -> LocationDescriptor:
    """Image dimensions must be positive; the caller checks them."""
    cfg = cfg or LocalizerConfig()
    horizontal = _HORIZONTAL[_third(detection.x / image_width, cfg)]
    vertical = _VERTICAL[_third(detection.y / image_height, cfg)]
    shelf_band = f"{vertical.value} shelf area"
    area = (detection.width * detection.height) / (image_width * image_height)
    return LocationDescriptor(
        horizontal=horizontal,
        vertical=vertical,
        shelf_band=shelf_band,
        distance_hint=distance_hint(area, cfg),
        phrase=f"{vertical.value} {horizontal.value}, {shelf_band}",
    )
