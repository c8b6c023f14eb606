"""The Go support package copied next to instrumented sources.

The bundle lives in this package's ``_runtime`` directory and is written into
``<root>/<support_dir>/``. Files that already hold the bundled bytes are left
untouched, so local edits are only overwritten when they differ.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from timecost.exceptions import WriteError
from timecost.runtime.file_io import write_bytes_atomic

BUNDLE_DIR = Path(__file__).resolve().parent / "_runtime"
DEFAULT_SUPPORT_DIR = "_runtime"


def bundle_files() -> Iterator[Path]:
    for entry in sorted(BUNDLE_DIR.iterdir(), key=lambda item: item.name):
        if entry.is_file() and entry.name.endswith(".go"):
            yield entry


def ensure_support_bundle(
    root: Path, *, support_dir: str = DEFAULT_SUPPORT_DIR
) -> list[Path]:
    """Write missing or changed bundle files under ``root`` and return them."""
    target_dir = root / support_dir
    written: list[Path] = []
    for entry in bundle_files():
        payload = entry.read_bytes()
        target = target_dir / entry.name
        try:
            if target.is_file() and target.read_bytes() == payload:
                continue
            target_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise WriteError(target, str(exc)) from exc
        write_bytes_atomic(target, payload)
        written.append(target)
    return written
