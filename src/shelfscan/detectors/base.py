from __future__ import annotations

from abc import ABC, abstractmethod

from PIL.Image import Image

from shelfscan.detectors.types import LabelResponse, RawDetection


class LabelDetector(ABC):
    """Adapter contract for the hosted brand/label detector."""

    name: str

    @abstractmethod
    def detect(self, image_bytes: bytes) -> LabelResponse:
        """Raise ``PrimaryDetectionUnavailable`` on any failure."""
        raise NotImplementedError

    def close(self) -> None:
        return None

    def __enter__(self) -> "LabelDetector":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class ObjectDetector(ABC):
    """Adapter contract for a pretrained general-object detector."""

    name: str
    model_id: str

    @abstractmethod
    def predict(self, image: Image, threshold: float) -> list[RawDetection]:
        raise NotImplementedError

    def close(self) -> None:
        return None
