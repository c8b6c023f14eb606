from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from timecost.driver import RunReport
from timecost.instrument.engine import FileReport


class InstrumentedFunctionDTO(BaseModel):
    qualified_name: str
    identifier: str
    line: Optional[int] = None


class FileReportDTO(BaseModel):
    path: str
    functions: List[InstrumentedFunctionDTO]
    imports_added: List[str] = []


class RunReportDTO(BaseModel):
    root: str
    mode: str
    ok: bool
    bundle_written: List[str] = []
    files: List[FileReportDTO] = []
    error: Optional[str] = None
    failed_path: Optional[str] = None


def file_report_dto(report: FileReport) -> FileReportDTO:
    return FileReportDTO(
        path=str(report.path),
        functions=[
            InstrumentedFunctionDTO(
                qualified_name=item.qualified_name,
                identifier=item.identifier,
                line=item.line,
            )
            for item in report.functions
        ],
        imports_added=list(report.imports_added),
    )


def run_report_dto(report: RunReport) -> RunReportDTO:
    return RunReportDTO(
        root=str(report.root),
        mode=report.mode,
        ok=report.ok,
        bundle_written=[str(path) for path in report.bundle_written],
        files=[file_report_dto(item) for item in report.files],
        error=report.error,
        failed_path=str(report.failed_path) if report.failed_path is not None else None,
    )
