from __future__ import annotations

import logging
from pathlib import Path

import typer

from shelfscan.config.loader import load_config
from shelfscan.config.schema import RunConfig
from shelfscan.constants import DEFAULT_CONFIG_PATH
from shelfscan.detectors.types import Detection
from shelfscan.errors import InvalidInputError
from shelfscan.localize.spatial import describe_location
from shelfscan.matching.normalize import build_class_variants, build_query_variants, is_produce_query
from shelfscan.pipeline.orchestrator import SearchPipeline
from shelfscan.reporting.announce import compose_announcement, locate_best
from shelfscan.utils.io import dumps_json, read_bytes
from shelfscan.utils.logging import configure_logging

app = typer.Typer(help="ShelfScan product finder CLI")
config_app = typer.Typer(help="Configuration commands")

app.add_typer(config_app, name="config")

LOGGER = logging.getLogger(__name__)


def _load(cfg: Path, overrides: list[str]) -> RunConfig:
    config = load_config(cfg, overrides=overrides)
    configure_logging(config.runtime.log_level, config.runtime.log_file)
    return config


@app.command("find")
def find(
    image: Path = typer.Argument(..., exists=True, dir_okay=False, help="Shelf photo"),
    query: str = typer.Option(..., "--query", "-q", help="Product or brand to look for"),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c"),
    override: list[str] = typer.Option([], "--set", help="Override config: key=value"),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON"),
):
    config = _load(config_path, override)
    with SearchPipeline.from_config(config) as pipeline:
        try:
            result = pipeline.run(read_bytes(image), query)
        except InvalidInputError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(code=2)

    location = locate_best(result, cfg=config.localizer)
    if as_json:
        payload = result.to_dict()
        payload["location"] = location.to_dict() if location is not None else None
        payload["announcement"] = compose_announcement(result, location)
        typer.echo(dumps_json(payload))
    else:
        typer.echo(compose_announcement(result, location))
    LOGGER.info("found=%s matches=%d fallback=%s", result.found, result.match_count, result.used_fallback)


@app.command("variants")
def variants(
    query: str = typer.Argument(...),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c"),
    override: list[str] = typer.Option([], "--set"),
):
    config = _load(config_path, override)
    typer.echo(f"label variants: {', '.join(build_query_variants(query, config.matching.brand_aliases))}")
    typer.echo(f"class variants: {', '.join(build_class_variants(query, config.matching.produce_aliases))}")
    typer.echo(f"produce query: {is_produce_query(query, config.matching.produce_keywords)}")


@app.command("locate")
def locate(
    x: float = typer.Option(..., help="Box centre x in pixels"),
    y: float = typer.Option(..., help="Box centre y in pixels"),
    width: float = typer.Option(..., min=0.0),
    height: float = typer.Option(..., min=0.0),
    image_width: float = typer.Option(..., "--image-width", min=1.0),
    image_height: float = typer.Option(..., "--image-height", min=1.0),
):
    try:
        detection = Detection(class_name="box", confidence=1.0, x=x, y=y, width=width, height=height)
    except ValueError as exc:
        raise typer.BadParameter(str(exc))
    typer.echo(dumps_json(describe_location(detection, image_width, image_height).to_dict()))


@config_app.command("show")
def config_show(
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c"),
    override: list[str] = typer.Option([], "--set"),
):
    config = _load(config_path, override)
    payload = config.model_dump(mode="json")
    if payload["primary"].get("api_key"):
        payload["primary"]["api_key"] = "***"
    typer.echo(dumps_json(payload))


if __name__ == "__main__":
    app()
