from __future__ import annotations

from timecost.config import InstrumentConfig
from timecost.syntax.model import (
    AssignStmt,
    BasicLit,
    Block,
    CallExpr,
    Comment,
    DeferStmt,
    ExprStmt,
    Fragment,
    FuncDecl,
    FuncLit,
    Ident,
    ImportDecl,
    ImportSpec,
    Node,
    PackageClause,
    PositionTable,
    RawDecl,
    RawStmt,
    SelectorExpr,
    SourceFile,
)


class Printer:
    """Render a :class:`SourceFile` with a fixed layout.

    Indentation is one tab per level unless the config asks for spaces.
    Original blank lines between items survive as a single blank line; the
    rest of the original whitespace does not.
    """

    def __init__(
        self,
        positions: PositionTable | None = None,
        config: InstrumentConfig | None = None,
    ) -> None:
        self.positions = positions or PositionTable()
        self.indent = (config or InstrumentConfig()).indent
        self._lines: list[str] = []

    def render(self, tree: SourceFile) -> str:
        self._lines = []
        previous: Node | None = None
        for decl in tree.decls:
            if previous is not None and self._top_level_gap(previous, decl):
                self._lines.append("")
            self._decl(decl, 0)
            previous = decl
        return "\n".join(self._lines).rstrip("\n") + "\n"

    def _top_level_gap(self, before: Node, after: Node) -> bool:
        blank = self.positions.blank_line_between(before, after)
        if blank is None:
            return True
        return blank

    def _emit(self, depth: int, text: str) -> None:
        self._lines.append(f"{self.indent * depth}{text}" if text else "")

    def _append(self, text: str) -> None:
        self._lines[-1] += text

    def _trailing(self, node: Node) -> None:
        if node.trailing_comment:
            self._append(f" {node.trailing_comment}")

    def _fragment(self, fragment: Fragment, depth: int) -> None:
        for line in fragment.lines:
            if line.verbatim:
                self._lines.append(line.text)
            else:
                self._emit(depth + line.depth, line.text)

    def _decl(self, node: Node, depth: int) -> None:
        if isinstance(node, PackageClause):
            self._emit(depth, f"package {node.name}")
        elif isinstance(node, ImportDecl):
            self._import_decl(node, depth)
        elif isinstance(node, FuncDecl):
            self._func_decl(node, depth)
        elif isinstance(node, (RawDecl, Comment)):
            self._fragment(node.fragment, depth)
        else:
            raise TypeError(f"unexpected top-level node {type(node).__name__}")
        self._trailing(node)

    def _import_spec(self, spec: ImportSpec) -> str:
        if spec.name is not None:
            return f"{spec.name} {spec.literal}"
        return spec.literal

    def _import_decl(self, decl: ImportDecl, depth: int) -> None:
        specs = decl.import_specs()
        if not decl.grouped and len(decl.specs) == 1 and len(specs) == 1:
            self._emit(depth, f"import {self._import_spec(specs[0])}")
            self._trailing(specs[0])
            return
        self._emit(depth, "import (")
        self._sequence(decl.specs, depth + 1)
        self._emit(depth, ")")

    def _func_decl(self, decl: FuncDecl, depth: int) -> None:
        self._fragment(decl.signature, depth)
        if decl.body is None:
            return
        self._append(" ")
        self._block(decl.body, depth)

    def _block(self, block: Block, depth: int) -> None:
        if not block.stmts:
            self._append("{}")
            return
        self._append("{")
        self._sequence(block.stmts, depth + 1)
        self._emit(depth, "}")

    def _sequence(self, items: list[Node], depth: int) -> None:
        previous: Node | None = None
        for item in items:
            if previous is not None and self.positions.blank_line_between(previous, item):
                self._lines.append("")
            self._stmt(item, depth)
            previous = item

    def _stmt(self, node: Node, depth: int) -> None:
        if isinstance(node, (RawStmt, Comment)):
            self._fragment(node.fragment, depth)
        elif isinstance(node, ImportSpec):
            self._emit(depth, self._import_spec(node))
        elif isinstance(node, AssignStmt):
            lhs = ", ".join(self._expr(item, depth) for item in node.lhs)
            rhs = ", ".join(self._expr(item, depth) for item in node.rhs)
            self._emit(depth, f"{lhs} {node.tok} {rhs}")
        elif isinstance(node, DeferStmt):
            self._emit(depth, f"defer {self._expr(node.call, depth)}")
        elif isinstance(node, ExprStmt):
            self._emit(depth, self._expr(node.x, depth))
        else:
            raise TypeError(f"unexpected statement node {type(node).__name__}")
        self._trailing(node)

    def _expr(self, node: Node, depth: int) -> str:
        if isinstance(node, Ident):
            return node.name
        if isinstance(node, BasicLit):
            return node.value
        if isinstance(node, SelectorExpr):
            return f"{self._expr(node.x, depth)}.{node.sel}"
        if isinstance(node, CallExpr):
            args = ", ".join(self._expr(arg, depth) for arg in node.args)
            return f"{self._expr(node.func, depth)}({args})"
        if isinstance(node, FuncLit):
            # Render the body with a nested printer; its lines already carry
            # absolute indentation.
            nested = Printer(self.positions)
            nested.indent = self.indent
            nested._lines = ["func()"]
            nested._append(" ")
            nested._block(node.body, depth)
            return "\n".join(nested._lines)
        raise TypeError(f"unexpected expression node {type(node).__name__}")
