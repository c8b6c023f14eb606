"""Batch driver: route a file or a directory tree through the engine."""

from __future__ import annotations

import stat
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import Callable, Iterator

import typer

from timecost.config import InstrumentConfig, resolve_config
from timecost.exceptions import PathError, TimecostError
from timecost.instrument.engine import FileReport, InstrumentEngine
from timecost.runtime.bundle import ensure_support_bundle

_echo_err = partial(typer.echo, err=True)


@dataclass
class RunReport:
    root: Path
    mode: str
    bundle_written: list[Path] = field(default_factory=list)
    files: list[FileReport] = field(default_factory=list)
    error: str | None = None
    failed_path: Path | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _is_source_file(path: Path, config: InstrumentConfig) -> bool:
    return (
        path.name.endswith(config.source_extension)
        and path.name != config.reserved_filename
    )


def iter_source_files(root: Path, config: InstrumentConfig) -> Iterator[Path]:
    """Yield eligible files in lexical walk order.

    Directories are descended in place, as ``filepath.Walk`` does; symbolic
    links to directories are not followed.
    """
    try:
        entries = sorted(root.iterdir(), key=lambda entry: entry.name)
    except OSError as exc:
        raise PathError(root, exc.strerror or str(exc)) from exc
    for entry in entries:
        if entry.is_symlink():
            if entry.is_file() and _is_source_file(entry, config):
                yield entry
        elif entry.is_dir():
            yield from iter_source_files(entry, config)
        elif _is_source_file(entry, config):
            yield entry


def instrument(
    path: str | Path,
    *,
    config: InstrumentConfig | None = None,
    config_path: Path | None = None,
    echo_fn: Callable[[str], None] = typer.echo,
    error_fn: Callable[[str], None] = _echo_err,
) -> RunReport:
    """Instrument a Go file or every Go file under a directory.

    Without an explicit ``config`` the settings come from ``config_path`` or
    the ``timecost.toml`` beside the bundle root.

    Raises :class:`PathError` when ``path`` cannot be inspected. Any other
    failure stops the run and is recorded on the returned report; files
    rewritten before it stay rewritten.
    """
    root = Path(path)
    try:
        info = root.stat()
    except OSError as exc:
        raise PathError(root, exc.strerror or str(exc)) from exc
    is_dir = stat.S_ISDIR(info.st_mode)
    bundle_root = root if is_dir else root.parent
    if config is None:
        config = resolve_config(root=bundle_root, config_path=config_path)

    report = RunReport(root=root, mode="directory" if is_dir else "file")
    engine = InstrumentEngine(config, echo_fn=echo_fn)
    try:
        report.bundle_written = ensure_support_bundle(
            bundle_root, support_dir=config.support_dir
        )
        if is_dir:
            for source in iter_source_files(root, config):
                echo_fn(f"processing file: {source}")
                report.files.append(engine.instrument_file(source))
        else:
            report.files.append(engine.instrument_file(root))
    except TimecostError as exc:
        report.error = str(exc)
        report.failed_path = getattr(exc, "path", None)
        error_fn(f"failed to process {report.mode}: {exc}")
    return report
