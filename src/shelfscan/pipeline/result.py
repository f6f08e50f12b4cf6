from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from shelfscan.constants import RESULT_FORMAT_VERSION
from shelfscan.detectors.types import Detection


@dataclass(frozen=True)
class MatchResult:
    """Answer for one uploaded image.

    ``error`` is set only when ``found`` is false because something failed; a confirmed
    absence leaves it ``None``.
    """

    found: bool
    query: str
    matches: tuple[Detection, ...] = ()
    all_count: int = 0
    used_fallback: bool = False
    error: str | None = None
    variants: tuple[str, ...] = ()
    image_width: int | None = None
    image_height: int | None = None

    @property
    def match_count(self) -> int:
        return len(self.matches)

    @property
    def best(self) -> Detection | None:
        return self.matches[0] if self.matches else None

    @classmethod
    def failure(cls, query: str, message: str) -> "MatchResult":
        return cls(found=False, query=query, error=message)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "formatVersion": RESULT_FORMAT_VERSION,
            "found": self.found,
            "matchCount": self.match_count,
            "matches": [m.to_dict() for m in self.matches],
            "allCount": self.all_count,
            "query": self.query,
            "usedFallback": self.used_fallback,
            "variants": list(self.variants),
        }
        if self.error is not None:
            payload["error"] = self.error
        return payload
