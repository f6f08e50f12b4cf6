from __future__ import annotations

import os
from copy import deepcopy
from pathlib import Path
from typing import Any

from shelfscan.config.schema import RunConfig
from shelfscan.utils.io import read_yaml


def _coerce_value(raw: str) -> Any:
    lowered = raw.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    if lowered == "none":
        return None
    try:
        if "." in raw:
            return float(raw)
        return int(raw)
    except ValueError:
        pass
    if raw.startswith("[") and raw.endswith("]"):
        values = [v.strip() for v in raw[1:-1].split(",") if v.strip()]
        return [_coerce_value(v) for v in values]
    return raw


def _apply_override(doc: dict[str, Any], key: str, value: Any) -> None:
    parts = key.split(".")
    cursor = doc
    for part in parts[:-1]:
        if part not in cursor or not isinstance(cursor[part], dict):
            cursor[part] = {}
        cursor = cursor[part]
    cursor[parts[-1]] = value


def _expand_env(value: str | None) -> str | None:
    if value is None:
        return None
    expanded = os.path.expandvars(value)
    # Unset variables are left verbatim by expandvars.
    if not expanded or "$" in expanded:
        return None
    return expanded


def resolve_primary_env(config: RunConfig) -> RunConfig:
    primary = config.primary
    primary.model = _expand_env(primary.model)
    primary.version = _expand_env(primary.version)
    primary.api_key = _expand_env(primary.api_key)
    return config


def load_config(config_path: Path | None = None, overrides: list[str] | None = None) -> RunConfig:
    payload: dict[str, Any] = {}
    if config_path is not None and config_path.exists():
        payload = deepcopy(read_yaml(config_path))
    for item in overrides or []:
        if "=" not in item:
            raise ValueError(f"Invalid override '{item}'. Expected key=value")
        key, raw = item.split("=", 1)
        _apply_override(payload, key, _coerce_value(raw))
    return resolve_primary_env(RunConfig.model_validate(payload))
