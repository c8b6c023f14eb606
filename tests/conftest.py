from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT, ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))


import pytest

from timecost.instrument.engine import InstrumentEngine
from timecost.syntax.loader import GoSourceLoader
from tests.go_helpers import go_source


@pytest.fixture
def loader() -> GoSourceLoader:
    return GoSourceLoader()


@pytest.fixture
def echo_lines() -> list[str]:
    return []


@pytest.fixture
def engine(echo_lines: list[str]) -> InstrumentEngine:
    return InstrumentEngine(echo_fn=echo_lines.append)


@pytest.fixture
def write_go(tmp_path: Path):
    def _write(relative: str, text: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(go_source(text), encoding="utf-8")
        return path

    return _write
