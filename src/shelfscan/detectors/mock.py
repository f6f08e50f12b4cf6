from __future__ import annotations

from dataclasses import dataclass, field

from PIL.Image import Image

from shelfscan.detectors.base import LabelDetector, ObjectDetector
from shelfscan.detectors.types import LabelResponse, RawDetection
from shelfscan.errors import FallbackDetectionError, PrimaryDetectionUnavailable


@dataclass
class MockLabelDetector(LabelDetector):
    """Replays a fixed prediction list, or a fixed failure, for every image."""

    predictions: list[dict[str, object]] = field(default_factory=list)
    error: str | None = None
    status: int | None = None
    name: str = "mock"
    calls: int = 0

    def detect(self, image_bytes: bytes) -> LabelResponse:
        self.calls += 1
        if self.error is not None:
            raise PrimaryDetectionUnavailable(self.error, status=self.status)
        return LabelResponse(predictions=[dict(p) for p in self.predictions])


@dataclass
class MockObjectDetector(ObjectDetector):
    detections: list[RawDetection] = field(default_factory=list)
    error: str | None = None
    name: str = "mock"
    model_id: str = "mock-v1"
    thresholds: list[float] = field(default_factory=list)

    def predict(self, image: Image, threshold: float) -> list[RawDetection]:
        self.thresholds.append(threshold)
        if self.error is not None:
            raise FallbackDetectionError(self.error)
        return [d for d in self.detections if d.score >= threshold]
