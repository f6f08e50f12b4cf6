from pathlib import Path

import pytest
from pydantic import ValidationError

from shelfscan.config.loader import load_config


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_yaml_and_overrides(tmp_path: Path) -> None:
    cfg_path = _write(
        tmp_path / "cfg.yaml",
        "fallback:\n  base_threshold: 0.3\nprimary:\n  name: roboflow\n",
    )
    config = load_config(cfg_path, ["fallback.blur_damping=0.8", "primary.name=mock", "fallback.enabled=false"])

    assert config.fallback.base_threshold == 0.3
    assert config.fallback.blur_damping == 0.8
    assert config.primary.name == "mock"
    assert config.fallback.enabled is False
    assert config.fallback.priority_classes["apple"] == 1.15


def test_missing_file_uses_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "absent.yaml")
    assert config.fallback.base_threshold == 0.35
    assert config.localizer.a_bit_far_area == 0.01


def test_credentials_come_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ROBOFLOW_API_KEY", "abc123")
    monkeypatch.setenv("ROBOFLOW_VERSION", "4")
    monkeypatch.delenv("ROBOFLOW_MODEL", raising=False)

    config = load_config(tmp_path / "absent.yaml")
    assert config.primary.api_key == "abc123"
    assert config.primary.version == "4"
    assert config.primary.model is None


def test_numeric_model_version_is_kept_as_text(tmp_path: Path) -> None:
    cfg_path = _write(tmp_path / "cfg.yaml", "primary:\n  model: 2024\n  version: 3\n")

    config = load_config(cfg_path)
    assert (config.primary.model, config.primary.version) == ("2024", "3")

    config = load_config(tmp_path / "absent.yaml", ["primary.version=7", "primary.model=shelf-brands"])
    assert config.primary.version == "7"
    assert config.primary.model == "shelf-brands"


def test_invalid_values_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Expected key=value"):
        load_config(tmp_path / "absent.yaml", ["fallback.blur_damping"])
    with pytest.raises(ValidationError):
        load_config(tmp_path / "absent.yaml", ["fallback.blur_damping=1.5"])
