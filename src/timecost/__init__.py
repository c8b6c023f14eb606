"""timecost package root."""

from timecost.driver import RunReport, instrument
from timecost.exceptions import ParseError, PathError, TimecostError, WriteError
from timecost.instrument.engine import InstrumentEngine
from timecost.runtime.bundle import ensure_support_bundle

__all__ = [
    "__version__",
    "InstrumentEngine",
    "ParseError",
    "PathError",
    "RunReport",
    "TimecostError",
    "WriteError",
    "ensure_support_bundle",
    "instrument",
]

__version__ = "0.1.0"
