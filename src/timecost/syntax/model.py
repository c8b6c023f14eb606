"""In-memory Go syntax tree used by the instrumentation pipeline.

Only the structure the pipeline needs is modelled explicitly: the package
clause, imports, function declarations and their bodies. Everything else is
kept as a :class:`Fragment`, the original source text split into lines with a
relative indentation depth, which the printer re-indents.

Nodes compare by identity so they can key the :class:`PositionTable`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Iterator


@dataclass(frozen=True)
class FragmentLine:
    depth: int
    text: str
    verbatim: bool = False


@dataclass(frozen=True)
class Fragment:
    lines: tuple[FragmentLine, ...]

    @classmethod
    def single(cls, text: str) -> Fragment:
        return cls(lines=(FragmentLine(depth=0, text=text),))

    @property
    def text(self) -> str:
        return "\n".join(line.text for line in self.lines)


@dataclass(eq=False)
class Node:
    trailing_comment: str | None = field(default=None, kw_only=True)


# Expressions and statements built by the synthesizer.


@dataclass(eq=False)
class Ident(Node):
    name: str


@dataclass(eq=False)
class BasicLit(Node):
    value: str


@dataclass(eq=False)
class SelectorExpr(Node):
    x: Node
    sel: str


@dataclass(eq=False)
class CallExpr(Node):
    func: Node
    args: list[Node] = field(default_factory=list)


@dataclass(eq=False)
class FuncLit(Node):
    body: Block


@dataclass(eq=False)
class AssignStmt(Node):
    lhs: list[Node]
    tok: str
    rhs: list[Node]


@dataclass(eq=False)
class DeferStmt(Node):
    call: CallExpr


@dataclass(eq=False)
class ExprStmt(Node):
    x: Node


# Nodes read from source.


@dataclass(eq=False)
class Comment(Node):
    fragment: Fragment


@dataclass(eq=False)
class RawStmt(Node):
    kind: str
    fragment: Fragment


@dataclass(eq=False)
class RawDecl(Node):
    kind: str
    fragment: Fragment


@dataclass(eq=False)
class Block(Node):
    stmts: list[Node] = field(default_factory=list)


@dataclass(eq=False)
class PackageClause(Node):
    name: str


@dataclass(eq=False)
class ImportSpec(Node):
    path: str
    literal: str
    name: str | None = None

    @property
    def default_name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def binds_default_name(self) -> bool:
        return self.name is None or self.name == self.default_name


@dataclass(eq=False)
class ImportDecl(Node):
    specs: list[Node] = field(default_factory=list)
    grouped: bool = False

    def import_specs(self) -> list[ImportSpec]:
        return [spec for spec in self.specs if isinstance(spec, ImportSpec)]


@dataclass(eq=False)
class FuncDecl(Node):
    name: str
    signature: Fragment
    receiver: str | None = None
    body: Block | None = None

    @property
    def qualified_name(self) -> str:
        if self.receiver is not None:
            return f"{self.receiver}.{self.name}"
        return self.name


@dataclass(eq=False)
class SourceFile(Node):
    decls: list[Node] = field(default_factory=list)
    path: Path | None = None
    identifiers: set[str] = field(default_factory=set)

    def import_decls(self) -> list[ImportDecl]:
        return [decl for decl in self.decls if isinstance(decl, ImportDecl)]

    def package_index(self) -> int:
        for idx, decl in enumerate(self.decls):
            if isinstance(decl, PackageClause):
                return idx
        return -1


def iter_child_nodes(node: Node) -> Iterator[Node]:
    """Yield the direct children of ``node`` in field order."""
    for item in fields(node):
        value = getattr(node, item.name)
        if isinstance(value, Node):
            yield value
        elif isinstance(value, list):
            for element in value:
                if isinstance(element, Node):
                    yield element


@dataclass(frozen=True)
class Span:
    start_row: int
    end_row: int


class PositionTable:
    """Original row spans of loaded nodes, keyed by node identity."""

    def __init__(self) -> None:
        self._spans: dict[Node, Span] = {}

    def record(self, node: Node, start_row: int, end_row: int) -> None:
        self._spans[node] = Span(start_row=start_row, end_row=end_row)

    def span(self, node: Node) -> Span | None:
        return self._spans.get(node)

    def blank_line_between(self, before: Node, after: Node) -> bool | None:
        """Whether the original had a blank line between two nodes.

        ``None`` means at least one of the nodes was not loaded from source.
        """
        first = self._spans.get(before)
        second = self._spans.get(after)
        if first is None or second is None:
            return None
        return second.start_row - first.end_row > 1
