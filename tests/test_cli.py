import io
import json
from pathlib import Path

from PIL import Image
from typer.testing import CliRunner

from shelfscan.cli import app

runner = CliRunner()


def test_variants_command(tmp_path: Path) -> None:
    result = runner.invoke(app, ["variants", "coke", "--config", str(tmp_path / "none.yaml")])
    assert result.exit_code == 0
    assert "coke, coca cola" in result.output
    assert "produce query: False" in result.output


def test_locate_command() -> None:
    result = runner.invoke(
        app,
        ["locate", "--x", "10", "--y", "10", "--width", "10", "--height", "10",
         "--image-width", "100", "--image-height", "100"],
    )
    assert result.exit_code == 0
    assert '"phrase": "top left, top shelf area"' in result.output


def test_find_command_with_mock_detectors(tmp_path: Path) -> None:
    image_path = tmp_path / "shelf.png"
    buf = io.BytesIO()
    Image.new("RGB", (64, 48), (10, 10, 10)).save(buf, format="PNG")
    image_path.write_bytes(buf.getvalue())

    result = runner.invoke(
        app,
        [
            "find", str(image_path), "--query", "sprite",
            "--config", str(tmp_path / "none.yaml"),
            "--set", "primary.name=mock", "--set", "fallback.name=mock",
        ],
    )
    assert result.exit_code == 0
    assert "No products detected" in result.output
