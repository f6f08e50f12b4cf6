from __future__ import annotations


class ShelfScanError(Exception):
    """Base class for every error raised by ShelfScan."""


class InvalidInputError(ShelfScanError):
    """A request is missing its image or its query."""


class DetectionUnavailableError(ShelfScanError):
    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class PrimaryDetectionUnavailable(DetectionUnavailableError):
    """The hosted label detector could not be reached or answered with an error."""


class FallbackDetectionError(DetectionUnavailableError):
    """The local object detector failed for this request."""


class ImageLoadError(FallbackDetectionError):
    pass


class ModelLoadError(FallbackDetectionError):
    pass


class RequestCancelled(ShelfScanError):
    """The caller aborted the request; no further detector steps run."""
