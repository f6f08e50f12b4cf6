from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import requests

from shelfscan.constants import ROBOFLOW_DETECT_URL
from shelfscan.detectors.base import LabelDetector
from shelfscan.detectors.types import LabelResponse
from shelfscan.errors import PrimaryDetectionUnavailable

LOGGER = logging.getLogger(__name__)


@dataclass
class RoboflowDetector(LabelDetector):
    """Client for a Roboflow hosted inference endpoint."""

    model: str | None
    version: str | None
    api_key: str | None
    endpoint: str = ROBOFLOW_DETECT_URL
    connect_timeout: float = 10.0
    read_timeout: float = 60.0
    name: str = "roboflow"
    session: Any = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = requests.Session()

    def _url(self) -> str:
        return f"{self.endpoint.rstrip('/')}/{self.model}/{self.version}"

    def detect(self, image_bytes: bytes) -> LabelResponse:
        if not self.api_key or not self.model or not self.version:
            raise PrimaryDetectionUnavailable("Missing Roboflow credentials")

        files = {"file": ("frame.jpg", image_bytes, "image/jpeg")}
        try:
            response = self.session.post(
                self._url(),
                params={"api_key": self.api_key},
                files=files,
                timeout=(self.connect_timeout, self.read_timeout),
            )
        except requests.exceptions.RequestException as exc:
            LOGGER.warning("Roboflow request failed: %s", type(exc).__name__)
            raise PrimaryDetectionUnavailable(f"Could not reach Roboflow: {type(exc).__name__}") from exc

        if not response.ok:
            raise PrimaryDetectionUnavailable(
                f"Roboflow error: {response.status_code} {response.text}".strip(),
                status=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise PrimaryDetectionUnavailable(
                "Roboflow returned a malformed response", status=response.status_code
            ) from exc
        return parse_label_response(payload)

    def close(self) -> None:
        self.session.close()


def _dimension(value: Any) -> int | None:
    try:
        size = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return size if size > 0 else None


def parse_label_response(payload: Any) -> LabelResponse:
    if not isinstance(payload, dict):
        raise PrimaryDetectionUnavailable("Roboflow returned a malformed response")
    predictions = payload.get("predictions") or []
    if not isinstance(predictions, list):
        raise PrimaryDetectionUnavailable("Roboflow returned a malformed response")
    image = payload.get("image")
    if not isinstance(image, dict):
        image = {}
    return LabelResponse(
        predictions=[p for p in predictions if isinstance(p, dict)],
        image_width=_dimension(image.get("width")),
        image_height=_dimension(image.get("height")),
    )
