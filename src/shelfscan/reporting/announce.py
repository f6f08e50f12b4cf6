from __future__ import annotations

from shelfscan.config.schema import LocalizerConfig
from shelfscan.localize.spatial import LocationDescriptor, describe_location
from shelfscan.pipeline.result import MatchResult


def locate_best(
    result: MatchResult,
    image_width: float | None = None,
    image_height: float | None = None,
    cfg: LocalizerConfig | None = None,
) -> LocationDescriptor | None:
    best = result.best
    width = image_width or result.image_width
    height = image_height or result.image_height
    if best is None or not width or not height:
        return None
    return describe_location(best, width, height, cfg)


def _count_sentence(count: int) -> str:
    if count > 1:
        return f"I found {count} of them."
    return "I found one."


def compose_announcement(
    result: MatchResult,
    location: LocationDescriptor | None = None,
    brand: str | None = None,
) -> str:
    if result.error:
        return result.error
    name = (brand or result.query or "that brand").strip()
    if not result.found:
        return f"No. I cannot find {name} in front of you."
    many = _count_sentence(result.match_count or 1)
    if location is not None:
        return f"Yes. I can see {name}. It is {location.phrase}. {many}"
    return f"Yes. I can see {name} in front of you. {many}"
