from __future__ import annotations

import os
from pathlib import Path

import pytest

from timecost.config import InstrumentConfig
from timecost.driver import instrument, iter_source_files
from timecost.exceptions import PathError

_VALID = """
package demo

func Work() {}
"""

_BROKEN = """
package demo

func (
"""


def _silent(_message: str) -> None:
    return None


def test_walk_is_lexical_and_filters_files(tmp_path: Path, write_go) -> None:
    for name in ("b.go", "a.go", "sub/c.go", "func_trace.go", "README.md", "sub/notes.txt"):
        write_go(name, _VALID)
    found = list(iter_source_files(tmp_path, InstrumentConfig()))
    assert found == [tmp_path / "a.go", tmp_path / "b.go", tmp_path / "sub" / "c.go"]


def test_walk_does_not_follow_directory_links(tmp_path: Path, write_go) -> None:
    write_go("outside/d.go", _VALID)
    write_go("root/e.go", _VALID)
    os.symlink(tmp_path / "outside", tmp_path / "root" / "linked")
    found = list(iter_source_files(tmp_path / "root", InstrumentConfig()))
    assert found == [tmp_path / "root" / "e.go"]


def test_directory_run_instruments_every_file(
    tmp_path: Path, write_go, echo_lines: list[str]
) -> None:
    first = write_go("a.go", _VALID)
    second = write_go("pkg/b.go", _VALID)
    report = instrument(tmp_path, echo_fn=echo_lines.append, error_fn=_silent)

    assert report.ok
    assert report.mode == "directory"
    assert report.bundle_written == [tmp_path / "_runtime" / "func_trace.go"]
    assert [item.path for item in report.files] == [first, second]
    assert echo_lines == [
        f"processing file: {first}",
        "added timing to function Work",
        f"processing file: {second}",
        "added timing to function Work",
    ]
    for path in (first, second):
        assert "\t__start := time.Now()" in path.read_text(encoding="utf-8")
    bundle = (tmp_path / "_runtime" / "func_trace.go").read_text(encoding="utf-8")
    assert "__start" not in bundle


def test_first_failure_stops_the_walk(tmp_path: Path, write_go) -> None:
    broken = write_go("a.go", _BROKEN)
    later = write_go("b.go", _VALID)
    before = later.read_text(encoding="utf-8")
    errors: list[str] = []

    report = instrument(tmp_path, echo_fn=_silent, error_fn=errors.append)

    assert not report.ok
    assert report.failed_path == broken
    assert report.files == []
    assert later.read_text(encoding="utf-8") == before
    assert len(errors) == 1
    assert errors[0].startswith("failed to process directory: failed to parse ")


def test_single_file_failure_is_recorded(tmp_path: Path, write_go) -> None:
    broken = write_go("a.go", _BROKEN)
    errors: list[str] = []
    report = instrument(broken, echo_fn=_silent, error_fn=errors.append)
    assert report.mode == "file"
    assert report.error is not None
    assert report.failed_path == broken
    assert errors[0].startswith("failed to process file: ")


def test_single_file_gets_the_bundle_beside_it(tmp_path: Path, write_go) -> None:
    source = write_go("cmd/main.go", _VALID)
    report = instrument(source, echo_fn=_silent, error_fn=_silent)
    assert report.ok
    assert (tmp_path / "cmd" / "_runtime" / "func_trace.go").is_file()
    assert [item.qualified_name for item in report.files[0].functions] == ["Work"]


def test_missing_root_raises_path_error(tmp_path: Path) -> None:
    with pytest.raises(PathError) as exc:
        instrument(tmp_path / "nowhere", echo_fn=_silent, error_fn=_silent)
    assert exc.value.path == tmp_path / "nowhere"


def test_config_file_in_the_root_is_picked_up(tmp_path: Path, write_go) -> None:
    (tmp_path / "timecost.toml").write_text(
        '[instrument]\nskip_prefix = "Work"\nsupport_dir = "trace"\n',
        encoding="utf-8",
    )
    source = write_go("a.go", _VALID)
    report = instrument(tmp_path, echo_fn=_silent, error_fn=_silent)
    assert report.files[0].functions == []
    assert report.bundle_written == [tmp_path / "trace" / "func_trace.go"]
    assert "time.Now()" not in source.read_text(encoding="utf-8")


def test_linked_file_is_rewritten_through_the_link(tmp_path: Path, write_go) -> None:
    real = write_go("real/a.go", _VALID)
    (tmp_path / "proj").mkdir()
    link = tmp_path / "proj" / "a.go"
    os.symlink(real, link)

    report = instrument(tmp_path / "proj", echo_fn=_silent, error_fn=_silent)

    assert report.ok
    assert link.is_symlink()
    assert "\t__start := time.Now()" in real.read_text(encoding="utf-8")


def test_explicit_config_path_applies_to_a_single_file(tmp_path: Path, write_go) -> None:
    source = write_go("cmd/main.go", _VALID)
    settings = tmp_path / "settings.toml"
    settings.write_text('[instrument]\nsupport_dir = "trace"\n', encoding="utf-8")
    report = instrument(
        source, config_path=settings, echo_fn=_silent, error_fn=_silent
    )
    assert report.bundle_written == [tmp_path / "cmd" / "trace" / "func_trace.go"]
