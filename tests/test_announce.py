from shelfscan.detectors.types import Detection
from shelfscan.pipeline.result import MatchResult
from shelfscan.reporting.announce import compose_announcement, locate_best


def _det(x: float, y: float) -> Detection:
    return Detection(class_name="coke", confidence=0.9, x=x, y=y, width=10, height=10)


def test_found_with_location() -> None:
    result = MatchResult(found=True, query="coke", matches=(_det(10, 10), _det(80, 80)), all_count=5)
    location = locate_best(result, 100, 100)

    assert location is not None
    assert compose_announcement(result, location) == (
        "Yes. I can see coke. It is top left, top shelf area. I found 2 of them."
    )


def test_found_without_location() -> None:
    result = MatchResult(found=True, query="apple", matches=(_det(10, 10),), all_count=1)
    assert locate_best(result) is None
    assert compose_announcement(result) == "Yes. I can see apple in front of you. I found one."


def test_locate_best_uses_result_dimensions() -> None:
    result = MatchResult(
        found=True, query="coke", matches=(_det(90, 10),), image_width=100, image_height=100
    )
    location = locate_best(result)
    assert location is not None
    assert location.phrase == "top right, top shelf area"


def test_not_found_and_error() -> None:
    assert compose_announcement(MatchResult(found=False, query="sprite")) == (
        "No. I cannot find sprite in front of you."
    )
    failed = MatchResult.failure("sprite", "No products detected. Try a clearer photo.")
    assert compose_announcement(failed) == "No products detected. Try a clearer photo."
    assert failed.to_dict()["error"] == "No products detected. Try a clearer photo."
    assert "error" not in MatchResult(found=False, query="sprite").to_dict()
