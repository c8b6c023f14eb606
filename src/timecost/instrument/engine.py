from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import typer

from timecost.config import InstrumentConfig
from timecost.instrument.imports import CAPABILITY_IMPORTS, ensure_imports
from timecost.instrument.naming import IdentifierAllocator
from timecost.instrument.scanner import scan_declarations
from timecost.instrument.synthesis import Synthesizer
from timecost.runtime.file_io import write_text_atomic
from timecost.syntax.loader import GoSourceLoader, LoadedSource
from timecost.syntax.printer import Printer


@dataclass(frozen=True)
class InstrumentedFunction:
    qualified_name: str
    identifier: str
    line: int | None = None


@dataclass
class FileReport:
    path: Path
    functions: list[InstrumentedFunction] = field(default_factory=list)
    imports_added: list[str] = field(default_factory=list)


class InstrumentEngine:
    """Run the load, scan, synthesize, import and render steps on one file."""

    def __init__(
        self,
        config: InstrumentConfig | None = None,
        *,
        echo_fn: Callable[[str], None] = typer.echo,
        loader: GoSourceLoader | None = None,
    ) -> None:
        self.config = config or InstrumentConfig()
        self.echo_fn = echo_fn
        self.loader = loader or GoSourceLoader()

    def transform(self, loaded: LoadedSource, *, path: Path | None = None) -> tuple[str, FileReport]:
        tree = loaded.tree
        report = FileReport(path=path or tree.path or Path("<source>"))
        synthesizer = Synthesizer(
            IdentifierAllocator(tree.identifiers),
            start_identifier=self.config.start_identifier,
            report_template=self.config.report_template,
            echo_fn=self.echo_fn,
        )
        for decl in scan_declarations(tree, skip_prefix=self.config.skip_prefix):
            pair = synthesizer.instrument(decl)
            span = loaded.positions.span(decl)
            report.functions.append(
                InstrumentedFunction(
                    qualified_name=decl.qualified_name,
                    identifier=pair.identifier,
                    line=span.start_row + 1 if span is not None else None,
                )
            )
        report.imports_added = ensure_imports(tree, CAPABILITY_IMPORTS)
        text = Printer(loaded.positions, self.config).render(tree)
        return text, report

    def instrument_source(self, source: str | bytes) -> str:
        text, _ = self.transform(self.loader.parse(source))
        return text

    def instrument_file(self, path: Path) -> FileReport:
        loaded = self.loader.load(path)
        text, report = self.transform(loaded, path=path)
        write_text_atomic(path, text)
        return report
