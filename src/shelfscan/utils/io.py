from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def read_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        obj = yaml.safe_load(f)
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise ValueError(f"YAML file {path} must contain a mapping at the top level")
    return obj


def read_bytes(path: Path) -> bytes:
    with path.open("rb") as f:
        return f.read()


def dumps_json(payload: Any, indent: int = 2) -> str:
    return json.dumps(payload, indent=indent, ensure_ascii=True)
