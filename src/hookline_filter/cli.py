from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from pydantic import ValidationError

from hookline_common.config import filter_options, load_yaml
from hookline_common.errors import ConfigurationError
from hookline_common.models import PipelineSpec
from hookline_filter.events import Event
from hookline_filter.filter import HttpFilter
from hookline_filter.interpolate import has_placeholders
from hookline_filter.options import FilterConfig
from hookline_filter.pipeline import PipelineRunner

app = typer.Typer(help="Hookline: enrich events with HTTP responses.", no_args_is_help=True)


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        return load_yaml(path)
    except (FileNotFoundError, ValueError) as e:
        raise typer.BadParameter(str(e))


def _filter_options(cfg: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return filter_options(cfg)
    except ValueError as e:
        raise typer.BadParameter(str(e))


@app.command("run")
def run(
    config: Path = typer.Option(..., "--config", "-c", help="Pipeline YAML file"),
    input_path: Optional[str] = typer.Option(
        None, "--input", "-i", help="NDJSON input file, '-' for stdin"
    ),
    output_path: Optional[str] = typer.Option(
        None, "--output", "-o", help="NDJSON output file, '-' for stdout"
    ),
) -> None:
    """
    Run every event of the source through the HTTP filter.
    """
    cfg = _read_config(config)
    if "filter" not in cfg:
        cfg = {"filter": cfg}
    if input_path is not None:
        cfg.setdefault("source", {}).setdefault("options", {})["path"] = input_path
    if output_path is not None:
        cfg.setdefault("destination", {}).setdefault("options", {})["path"] = output_path

    try:
        runner = PipelineRunner(PipelineSpec.model_validate(cfg))
    except (ValidationError, ConfigurationError) as e:
        raise typer.BadParameter(str(e))
    stats = runner.run()
    typer.echo(json.dumps(stats), err=True)


@app.command("validate-config")
def validate_config(
    config: Path = typer.Option(..., "--config", "-c", help="Pipeline or filter YAML file"),
) -> None:
    """
    Validate filter options without sending any request.
    """
    opts = _filter_options(_read_config(config))
    try:
        parsed = FilterConfig.from_options(opts)
    except ConfigurationError as e:
        raise typer.BadParameter(str(e))

    templated = [
        name
        for name in ("url", "headers", "query", "body")
        if has_placeholders(getattr(parsed, name))
    ]
    typer.echo(
        "ok: filter options are valid "
        f"(verb={parsed.verb.value} target={parsed.target_body} "
        f"templated={','.join(templated) or 'none'})"
    )


@app.command("enrich")
def enrich(
    config: Path = typer.Option(..., "--config", "-c", help="Pipeline or filter YAML file"),
    event: str = typer.Option(..., "--event", "-e", help="Event as a JSON object"),
) -> None:
    """
    Filter a single event and print the result.
    """
    opts = _filter_options(_read_config(config))
    try:
        data = json.loads(event)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"event is not valid JSON: {e}")
    if not isinstance(data, dict):
        raise typer.BadParameter("event must be a JSON object")

    try:
        with HttpFilter(opts) as f:
            out = f.filter(Event(data=data))
    except ConfigurationError as e:
        raise typer.BadParameter(str(e))
    typer.echo(json.dumps(out.as_json_dict(), indent=2, default=str))


if __name__ == "__main__":
    app()
