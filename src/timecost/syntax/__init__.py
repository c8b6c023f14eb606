from timecost.syntax.loader import GoSourceLoader, LoadedSource
from timecost.syntax.model import PositionTable, SourceFile
from timecost.syntax.printer import Printer
from timecost.syntax.visitors import NodeVisitor, walk

__all__ = [
    "GoSourceLoader",
    "LoadedSource",
    "NodeVisitor",
    "PositionTable",
    "Printer",
    "SourceFile",
    "walk",
]
