"""Structural Interchange CLI.

Usage:
    python -m structural_interchange <command> [options]

Every command prints a JSON object with an "ok" field to stdout and
exits non-zero on failure.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer

from structural_interchange import __version__
from structural_interchange.config import ConversionSettings, StoryMatch
from structural_interchange.e2k.parser import E2KParser
from structural_interchange.e2k.writer import E2KExporter
from structural_interchange.errors import InterchangeError
from structural_interchange.models.model import StructuralModel

app = typer.Typer(
    name="structural_interchange",
    help="Convert structural models between the canonical JSON schema and E2K.",
    no_args_is_help=True,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _output(data: dict) -> None:
    """Print JSON output to stdout."""
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _fail(error: str) -> None:
    _output({"ok": False, "error": error})
    raise typer.Exit(1)


def _load_model(path: str) -> StructuralModel:
    """Load a canonical model JSON file."""
    model_path = Path(path)
    if not model_path.exists():
        _fail(f"Model not found: {model_path}")
    try:
        return StructuralModel.load(model_path)
    except ValueError as e:
        _fail(f"Invalid model {model_path}: {e}")


def _read_text(path: str) -> str:
    text_path = Path(path)
    if not text_path.exists():
        _fail(f"File not found: {text_path}")
    try:
        return text_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        _fail(f"Could not read {text_path}: {e}")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress to stderr"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.command()
def version() -> None:
    """Show version."""
    _output({"ok": True, "version": __version__})


@app.command("to-e2k")
def to_e2k(
    model: str = typer.Argument(..., help="Canonical model JSON file"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="E2K file to write"),
    custom: Optional[str] = typer.Option(None, "--custom", "-c", help="E2K text to merge in"),
    settings_file: Optional[str] = typer.Option(None, "--settings", help="Settings JSON file"),
    tolerance: Optional[float] = typer.Option(None, "--tolerance", help="Point merge tolerance"),
    grid: Optional[float] = typer.Option(None, "--grid", help="Point snapping grid"),
    story_match: Optional[StoryMatch] = typer.Option(None, "--story-match", help="contains or exact"),
):
    """Export a canonical model to E2K."""
    structural = _load_model(model)
    try:
        settings = ConversionSettings.load(settings_file) if settings_file else ConversionSettings()
        overrides = {
            k: v
            for k, v in {"tolerance": tolerance, "grid": grid, "story_match": story_match}.items()
            if v is not None
        }
        if overrides:
            settings = ConversionSettings(**{**settings.model_dump(), **overrides})
    except ValueError as e:
        _fail(f"Invalid settings: {e}")

    custom_text = _read_text(custom) if custom else None
    exporter = E2KExporter(settings)
    try:
        if output:
            result = exporter.write(structural, output, custom_text)
        else:
            result = exporter.convert(structural, custom_text)
    except InterchangeError as e:
        _fail(str(e))

    data: dict = {
        "ok": result.success,
        "message": result.message,
        "summary": result.summary.to_dict(),
    }
    if output:
        data["output"] = output
    else:
        data["e2k"] = result.text
    _output(data)
    if not result.success:
        raise typer.Exit(1)


@app.command("from-e2k")
def from_e2k(
    e2k: str = typer.Argument(..., help="E2K file to read"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Model JSON file to write"),
):
    """Import an E2K file into a canonical model."""
    text = _read_text(e2k)
    try:
        result = E2KParser().parse(text)
    except (InterchangeError, ValueError) as e:
        _fail(f"Could not parse {e2k}: {e}")
    data: dict = {
        "ok": True,
        "message": result.summary.message(),
        "summary": result.summary.to_dict(),
    }
    if output:
        result.model.save(output)
        data["output"] = output
    else:
        data["model"] = json.loads(result.model.model_dump_json())
    _output(data)


@app.command()
def summary(model: str = typer.Argument(..., help="Canonical model JSON file")):
    """Element and level counts of a canonical model."""
    structural = _load_model(model)
    _output({
        "ok": True,
        "levels": [
            {"name": lv.name, "elevation": lv.elevation}
            for lv in structural.layout.sorted_levels()
        ],
        "elements": structural.element_counts(),
        "load_definitions": len(structural.loads.definitions),
    })


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    app()
