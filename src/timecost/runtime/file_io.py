from __future__ import annotations

import os
import stat
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator

from timecost.exceptions import WriteError

DEFAULT_MODE = 0o644


@contextmanager
def atomic_output(path: Path) -> Iterator[IO[bytes]]:
    """Yield a temporary file next to ``path`` and move it into place.

    The rename only happens when the block exits cleanly; otherwise the
    temporary file is removed and ``path`` is left as it was.
    """
    try:
        mode = stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        mode = DEFAULT_MODE
    with tempfile.NamedTemporaryFile(
        mode="wb",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    ) as handle:
        tmp_path = Path(handle.name)
        try:
            yield handle
            handle.flush()
            os.fsync(handle.fileno())
        except BaseException:
            handle.close()
            tmp_path.unlink(missing_ok=True)
            raise
    try:
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def write_bytes_atomic(path: Path, payload: bytes) -> None:
    # Write through symbolic links so the link itself survives.
    target = path.resolve()
    try:
        with atomic_output(target) as handle:
            handle.write(payload)
    except OSError as exc:
        raise WriteError(path, str(exc)) from exc


def write_text_atomic(path: Path, text: str) -> None:
    write_bytes_atomic(path, text.encode("utf-8", errors="surrogateescape"))
