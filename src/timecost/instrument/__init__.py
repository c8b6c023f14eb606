from timecost.instrument.engine import FileReport, InstrumentedFunction, InstrumentEngine
from timecost.instrument.imports import CAPABILITY_IMPORTS, ImportSet, ensure_imports
from timecost.instrument.naming import IdentifierAllocator
from timecost.instrument.scanner import DeclarationScanner, scan_declarations
from timecost.instrument.synthesis import InstrumentationPair, Synthesizer, build_pair

__all__ = [
    "CAPABILITY_IMPORTS",
    "DeclarationScanner",
    "FileReport",
    "IdentifierAllocator",
    "ImportSet",
    "InstrumentEngine",
    "InstrumentationPair",
    "InstrumentedFunction",
    "Synthesizer",
    "build_pair",
    "ensure_imports",
    "scan_declarations",
]
