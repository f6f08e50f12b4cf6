from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from shelfscan.constants import (
    DEFAULT_FALLBACK_MODEL_ID,
    ROBOFLOW_API_KEY_ENV,
    ROBOFLOW_DETECT_URL,
    ROBOFLOW_MODEL_ENV,
    ROBOFLOW_VERSION_ENV,
)
from shelfscan.matching.vocab import (
    BRAND_ALIASES,
    DISALLOWED_CLASSES,
    PRIORITY_CLASS_BOOSTS,
    PRODUCE_ALIASES,
    PRODUCE_QUERY_KEYWORDS,
)


class RuntimeConfig(BaseModel):
    log_level: str = "INFO"
    log_file: Path | None = None


class PrimaryDetectorConfig(BaseModel):
    name: str = "roboflow"
    endpoint: str = ROBOFLOW_DETECT_URL
    model: str | None = f"${{{ROBOFLOW_MODEL_ENV}}}"
    version: str | None = f"${{{ROBOFLOW_VERSION_ENV}}}"
    api_key: str | None = f"${{{ROBOFLOW_API_KEY_ENV}}}"
    connect_timeout: float = 10.0
    read_timeout: float = 60.0

    @field_validator("model", "version", "api_key", mode="before")
    @classmethod
    def _numeric_ids_as_text(cls, value: object) -> object:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class FallbackDetectorConfig(BaseModel):
    name: str = "detr"
    enabled: bool = True
    model_id: str = DEFAULT_FALLBACK_MODEL_ID
    device: str = "cpu"
    base_threshold: float = 0.35
    blur_threshold: float = 50.0
    blur_damping: float = 0.85
    blur_sample_size: int = 100
    left_cutoff: float = 0.35
    right_cutoff: float = 0.65
    disallowed_classes: list[str] = Field(default_factory=lambda: list(DISALLOWED_CLASSES))
    priority_classes: dict[str, float] = Field(default_factory=lambda: dict(PRIORITY_CLASS_BOOSTS))

    @field_validator("blur_damping")
    @classmethod
    def _damping_relaxes(cls, value: float) -> float:
        if not 0.0 < value <= 1.0:
            raise ValueError("blur_damping must be in (0, 1]")
        return value

    @field_validator("base_threshold")
    @classmethod
    def _threshold_range(cls, value: float) -> float:
        if not 0.0 <= value <= 1.0:
            raise ValueError("base_threshold must be in [0, 1]")
        return value


class MatchingConfig(BaseModel):
    brand_aliases: dict[str, list[str]] = Field(default_factory=lambda: dict(BRAND_ALIASES))
    produce_aliases: dict[str, list[str]] = Field(default_factory=lambda: dict(PRODUCE_ALIASES))
    produce_keywords: list[str] = Field(default_factory=lambda: list(PRODUCE_QUERY_KEYWORDS))


class LocalizerConfig(BaseModel):
    first_third: float = 0.33
    second_third: float = 0.66
    very_close_area: float = 0.08
    close_area: float = 0.03
    a_bit_far_area: float = 0.01


class RunConfig(BaseModel):
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
    primary: PrimaryDetectorConfig = Field(default_factory=PrimaryDetectorConfig)
    fallback: FallbackDetectorConfig = Field(default_factory=FallbackDetectorConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    localizer: LocalizerConfig = Field(default_factory=LocalizerConfig)
