from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

DEFAULT_CONFIG_NAME = "timecost.toml"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


@dataclass(frozen=True)
class InstrumentConfig:
    skip_prefix: str = "Test"
    start_identifier: str = "__start"
    report_template: str = "function {name} took %v"
    source_extension: str = ".go"
    reserved_filename: str = "func_trace.go"
    support_dir: str = "_runtime"
    use_tabs: bool = True
    tab_width: int = 4

    @property
    def indent(self) -> str:
        if self.use_tabs:
            return "\t"
        return " " * self.tab_width


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def instrument_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("instrument", {})
    return section if isinstance(section, dict) else {}


def _as_str(value: TomlValue, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return default


def _as_bool(value: TomlValue, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return default


def _as_positive_int(value: TomlValue, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int) and value > 0:
        return value
    if isinstance(value, str) and value.strip().isdigit() and int(value) > 0:
        return int(value)
    return default


def instrument_config(section: TomlTable | None) -> InstrumentConfig:
    defaults = InstrumentConfig()
    if not isinstance(section, dict):
        return defaults
    extension = _as_str(section.get("source_extension"), defaults.source_extension)
    if not extension.startswith("."):
        extension = f".{extension}"
    return InstrumentConfig(
        skip_prefix=_as_str(section.get("skip_prefix"), defaults.skip_prefix),
        start_identifier=_as_str(
            section.get("start_identifier"), defaults.start_identifier
        ),
        report_template=_as_str(
            section.get("report_template"), defaults.report_template
        ),
        source_extension=extension,
        reserved_filename=_as_str(
            section.get("reserved_filename"), defaults.reserved_filename
        ),
        support_dir=_as_str(section.get("support_dir"), defaults.support_dir),
        use_tabs=_as_bool(section.get("use_tabs"), defaults.use_tabs),
        tab_width=_as_positive_int(section.get("tab_width"), defaults.tab_width),
    )


def resolve_config(
    root: Path | None = None, config_path: Path | None = None
) -> InstrumentConfig:
    return instrument_config(instrument_defaults(root=root, config_path=config_path))
