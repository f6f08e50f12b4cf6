from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DetectorOrigin(str, Enum):
    PRIMARY = "primary"
    FALLBACK = "fallback"


class HorizontalBand(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass(frozen=True)
class Detection:
    class_name: str
    confidence: float
    x: float
    y: float
    width: float
    height: float
    origin: DetectorOrigin = DetectorOrigin.PRIMARY
    position: HorizontalBand | None = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Detection box must be positive, got {self.width}x{self.height}")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Detection confidence must be in [0, 1], got {self.confidence}")

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "class": self.class_name,
            "confidence": self.confidence,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "origin": self.origin.value,
        }
        if self.position is not None:
            payload["position"] = self.position.value
        return payload


@dataclass(frozen=True)
class RawDetection:
    """Object-detector output with a top-left anchored box in pixel units."""

    class_name: str
    score: float
    left: float
    top: float
    width: float
    height: float

    def center(self) -> tuple[float, float]:
        return self.left + self.width / 2.0, self.top + self.height / 2.0


@dataclass(frozen=True)
class LabelResponse:
    """Parsed answer of the hosted label detector."""

    predictions: list[dict[str, object]]
    image_width: int | None = None
    image_height: int | None = None
