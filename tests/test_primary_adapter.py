import pytest
import requests

from shelfscan.detection.primary import PrimaryDetectionAdapter, PrimaryStatus
from shelfscan.detectors.mock import MockLabelDetector
from shelfscan.detectors.roboflow import RoboflowDetector
from shelfscan.errors import PrimaryDetectionUnavailable


class FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, exc: Exception | None = None) -> None:
        self.response = response
        self.exc = exc
        self.calls: list[tuple[str, dict]] = []

    def post(self, url: str, **kwargs):
        self.calls.append((url, kwargs))
        if self.exc is not None:
            raise self.exc
        return self.response

    def close(self) -> None:
        return None


def _pred(cls: str, confidence: float, **box) -> dict:
    return {"class": cls, "confidence": confidence, "x": 50, "y": 40, "width": 10, "height": 20, **box}


def test_roboflow_detect_parses_predictions() -> None:
    payload = {"predictions": [_pred("coke", 0.9)], "image": {"width": 640, "height": 480}}
    session = FakeSession(FakeResponse(payload=payload))
    detector = RoboflowDetector(model="shelf-brands", version="3", api_key="secret", session=session)

    response = detector.detect(b"jpeg-bytes")

    assert response.predictions == [_pred("coke", 0.9)]
    assert (response.image_width, response.image_height) == (640, 480)
    url, kwargs = session.calls[0]
    assert url == "https://detect.roboflow.com/shelf-brands/3"
    assert kwargs["params"] == {"api_key": "secret"}
    assert kwargs["timeout"] == (10.0, 60.0)


def test_roboflow_http_error_keeps_status() -> None:
    session = FakeSession(FakeResponse(status_code=503, text="overloaded"))
    detector = RoboflowDetector(model="m", version="1", api_key="k", session=session)

    with pytest.raises(PrimaryDetectionUnavailable) as info:
        detector.detect(b"img")
    assert info.value.status == 503
    assert info.value.message == "Roboflow error: 503 overloaded"


def test_roboflow_transport_error_has_no_status() -> None:
    session = FakeSession(exc=requests.exceptions.ConnectionError("refused"))
    detector = RoboflowDetector(model="m", version="1", api_key="k", session=session)

    with pytest.raises(PrimaryDetectionUnavailable) as info:
        detector.detect(b"img")
    assert info.value.status is None
    assert "ConnectionError" in info.value.message


def test_roboflow_missing_credentials_never_calls_service() -> None:
    session = FakeSession(FakeResponse(payload={}))
    detector = RoboflowDetector(model=None, version="1", api_key="k", session=session)

    with pytest.raises(PrimaryDetectionUnavailable, match="Missing Roboflow credentials"):
        detector.detect(b"img")
    assert session.calls == []


def test_roboflow_unreadable_image_size_is_ignored() -> None:
    payload = {"predictions": [], "image": {"width": "unknown", "height": 480.0}}
    detector = RoboflowDetector(
        model="m", version="1", api_key="k", session=FakeSession(FakeResponse(payload=payload))
    )

    response = detector.detect(b"img")

    assert response.predictions == []
    assert (response.image_width, response.image_height) == (None, 480)
    bad = {"predictions": [], "image": {"width": None, "height": -5}}
    parsed = RoboflowDetector(
        model="m", version="1", api_key="k", session=FakeSession(FakeResponse(payload=bad))
    ).detect(b"img")
    assert (parsed.image_width, parsed.image_height) == (None, None)


def test_adapter_filters_and_sorts_stably() -> None:
    detector = MockLabelDetector(
        predictions=[
            _pred("Coke Zero", 0.6),
            _pred("Sprite", 0.95),
            _pred("coca-cola", 0.8),
            _pred("coke", 0.6),
        ]
    )
    outcome = PrimaryDetectionAdapter(detector).detect(b"img", "coke")

    assert outcome.status is PrimaryStatus.MATCHED
    assert [m.class_name for m in outcome.matches] == ["coca-cola", "Coke Zero", "coke"]
    assert outcome.match_count == 3
    assert outcome.all_count == 4
    assert outcome.variants == ("coke", "coca cola")


def test_adapter_unmatched_and_empty() -> None:
    unmatched = PrimaryDetectionAdapter(MockLabelDetector(predictions=[_pred("pepsi", 0.7)])).detect(b"i", "coke")
    assert unmatched.status is PrimaryStatus.UNMATCHED
    assert (unmatched.match_count, unmatched.all_count) == (0, 1)

    empty = PrimaryDetectionAdapter(MockLabelDetector()).detect(b"i", "coke")
    assert empty.status is PrimaryStatus.EMPTY
    assert (empty.match_count, empty.all_count) == (0, 0)


def test_adapter_reports_failures_as_outcomes() -> None:
    service = PrimaryDetectionAdapter(MockLabelDetector(error="Roboflow error: 500", status=500)).detect(b"i", "coke")
    assert service.status is PrimaryStatus.SERVICE_ERROR
    assert service.message == "Roboflow error: 500"
    assert service.failed

    transport = PrimaryDetectionAdapter(MockLabelDetector(error="Could not reach Roboflow")).detect(b"i", "coke")
    assert transport.status is PrimaryStatus.TRANSPORT_ERROR
    assert transport.failed


def test_adapter_drops_malformed_predictions_but_counts_them() -> None:
    detector = MockLabelDetector(predictions=[_pred("coke", 0.5, width=0), _pred("coke", 0.4)])
    outcome = PrimaryDetectionAdapter(detector).detect(b"img", "coke")

    assert outcome.match_count == 1
    assert outcome.all_count == 2
    assert outcome.matches[0].confidence == 0.4
