from __future__ import annotations

from functools import partial
from pathlib import Path
from typing import Optional

import typer

from timecost.config import resolve_config
from timecost.driver import instrument as run_instrument
from timecost.exceptions import PathError, TimecostError
from timecost.runtime.bundle import ensure_support_bundle
from timecost.schema import run_report_dto

app = typer.Typer(add_completion=False)

EXIT_PATH_ERROR = 1
EXIT_FILE_FAILED = 2


def _quiet(_message: str) -> None:
    return None


@app.command("instrument")
def instrument(
    path: Path = typer.Argument(..., help="Go file or directory to instrument."),
    config: Optional[Path] = typer.Option(
        None, "--config", help="TOML file with an [instrument] section."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Print the run report as JSON."
    ),
    quiet: bool = typer.Option(False, "--quiet", help="Suppress progress lines."),
) -> None:
    """Add execution-time reporting to every Go function under PATH."""
    echo_fn = _quiet if quiet or json_output else typer.echo
    # The JSON report carries the error; keep stdout parseable.
    error_fn = _quiet if json_output else partial(typer.echo, err=True)
    try:
        report = run_instrument(
            path, config_path=config, echo_fn=echo_fn, error_fn=error_fn
        )
    except PathError as exc:
        typer.echo(f"invalid path: {exc.path}: {exc.reason}", err=True)
        raise typer.Exit(code=EXIT_PATH_ERROR)
    if json_output:
        typer.echo(run_report_dto(report).model_dump_json(indent=2))
    if not report.ok:
        raise typer.Exit(code=EXIT_FILE_FAILED)


@app.command("ensure-runtime")
def ensure_runtime(
    directory: Path = typer.Argument(..., help="Directory that receives the bundle."),
    config: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    """Write the Go support package into DIRECTORY if it is missing or stale."""
    if not directory.is_dir():
        typer.echo(f"invalid path: {directory}: not a directory", err=True)
        raise typer.Exit(code=EXIT_PATH_ERROR)
    settings = resolve_config(root=directory, config_path=config)
    try:
        written = ensure_support_bundle(directory, support_dir=settings.support_dir)
    except TimecostError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=EXIT_FILE_FAILED)
    if not written:
        typer.echo("support package already up to date")
    for target in written:
        typer.echo(f"wrote {target}")


def main() -> None:
    app()
