"""Go source loader built on the tree-sitter Go grammar.

The concrete tree produced by tree-sitter is folded into the small model in
:mod:`timecost.syntax.model`. Statements and non-function declarations keep
their source text as a :class:`Fragment`: one entry per source row, with the
indentation replaced by a depth computed from the bracket structure so the
printer can lay them out with a fixed style.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Iterator

import tree_sitter
import tree_sitter_go

from timecost.exceptions import ParseError
from timecost.syntax.model import (
    Block,
    Comment,
    Fragment,
    FragmentLine,
    FuncDecl,
    ImportDecl,
    ImportSpec,
    Node,
    PackageClause,
    PositionTable,
    RawDecl,
    RawStmt,
    SourceFile,
)

GO_LANGUAGE = tree_sitter.Language(tree_sitter_go.language())

_OPENERS = frozenset({"(", "[", "{"})
_CLOSERS = frozenset({")", "]", "}"})
_TERMINATORS = frozenset({"\n", "\0"})
_CASE_KEYWORDS = frozenset({"case", "default"})
_CONTINUATION_TOKENS = frozenset(
    {
        "+", "-", "*", "/", "%", "&", "|", "^", "<<", ">>", "&^",
        "&&", "||", "==", "!=", "<", "<=", ">", ">=", "<-",
        "=", ":=", "+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=",
        "<<=", ">>=", "&^=", ".",
    }
)
_IDENTIFIER_TYPES = frozenset(
    {
        "identifier",
        "field_identifier",
        "type_identifier",
        "package_identifier",
        "label_name",
    }
)
_FUNCTION_TYPES = frozenset({"function_declaration", "method_declaration"})

TsNode = tree_sitter.Node


@dataclass(frozen=True)
class LoadedSource:
    tree: SourceFile
    positions: PositionTable


def _iter_leaves(node: TsNode) -> Iterator[TsNode]:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.child_count == 0:
            if current.type in _TERMINATORS or current.start_byte == current.end_byte:
                continue
            yield current
        else:
            stack.extend(reversed(current.children))


def _first_error(root: TsNode) -> TsNode | None:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


def _end_row(node: TsNode) -> int:
    row, column = node.end_point
    if column == 0 and row > node.start_point[0]:
        return row - 1
    return row


def _unquote(literal: str) -> str:
    if len(literal) >= 2 and literal[0] == literal[-1] and literal[0] in "\"`":
        return literal[1:-1]
    return literal


def _advance_brackets(stack: list[int], leaves: Iterable[TsNode]) -> None:
    # All brackets left open by one row share a single indentation level,
    # carried by the innermost of them.
    floor = len(stack)
    for leaf in leaves:
        if leaf.type in _OPENERS:
            stack.append(0)
        elif leaf.type in _CLOSERS and stack:
            stack.pop()
            floor = min(floor, len(stack))
    if len(stack) > floor:
        stack[-1] = 1


class _TreeBuilder:
    def __init__(self, source: bytes, path: Path | None) -> None:
        self.source = source
        self.rows = source.split(b"\n")
        self.path = path
        self.positions = PositionTable()

    def _decode(self, raw: bytes) -> str:
        return raw.decode("utf-8", errors="surrogateescape")

    def _text(self, node: TsNode) -> str:
        return self._decode(self.source[node.start_byte : node.end_byte])

    def _record(self, model: Node, node: TsNode) -> Node:
        self.positions.record(model, node.start_point[0], _end_row(node))
        return model

    def build(self, root: TsNode) -> SourceFile:
        tree = SourceFile(path=self.path)
        self._record(tree, root)
        for leaf in _iter_leaves(root):
            if leaf.type in _IDENTIFIER_TYPES:
                tree.identifiers.add(self._text(leaf))
        self._fill(tree.decls, root.named_children, self._decl)
        if tree.package_index() < 0:
            raise ParseError(self.path, "expected 'package' clause", line=1, column=1)
        return tree

    def _fill(
        self,
        target: list[Node],
        children: Iterable[TsNode],
        convert: Callable[[TsNode], Node],
    ) -> None:
        previous: TsNode | None = None
        for child in sorted(children, key=lambda item: item.start_byte):
            if child.type == "comment":
                row = child.start_point[0]
                if (
                    previous is not None
                    and target
                    and target[-1].trailing_comment is None
                    and row == _end_row(previous)
                    and row == child.end_point[0]
                ):
                    target[-1].trailing_comment = self._text(child).rstrip()
                    continue
                item = self._record(Comment(fragment=self.fragment([child])), child)
            else:
                item = convert(child)
            target.append(item)
            previous = child

    def _decl(self, node: TsNode) -> Node:
        if node.type == "package_clause":
            name = node.named_children[0] if node.named_children else node
            return self._record(PackageClause(name=self._text(name)), node)
        if node.type == "import_declaration":
            return self._import_decl(node)
        if node.type in _FUNCTION_TYPES:
            return self._func_decl(node)
        return self._record(RawDecl(kind=node.type, fragment=self.fragment([node])), node)

    def _import_decl(self, node: TsNode) -> ImportDecl:
        decl = ImportDecl()
        children: list[TsNode] = []
        for child in node.named_children:
            if child.type == "import_spec_list":
                decl.grouped = True
                children.extend(child.named_children)
            else:
                children.append(child)
        self._fill(decl.specs, children, self._import_spec)
        self._record(decl, node)
        return decl

    def _import_spec(self, node: TsNode) -> ImportSpec:
        name_node = node.child_by_field_name("name")
        path_node = node.child_by_field_name("path") or node
        literal = self._text(path_node)
        spec = ImportSpec(
            path=_unquote(literal),
            literal=literal,
            name=self._text(name_node) if name_node is not None else None,
        )
        self._record(spec, node)
        return spec

    def _func_decl(self, node: TsNode) -> FuncDecl:
        name_node = node.child_by_field_name("name")
        body_node = node.child_by_field_name("body")
        if body_node is None:
            head = list(node.children)
        else:
            head = [child for child in node.children if child.end_byte <= body_node.start_byte]
        decl = FuncDecl(
            name=self._text(name_node) if name_node is not None else "",
            signature=self.fragment(head),
            receiver=self._receiver(node.child_by_field_name("receiver")),
            body=self._block(body_node) if body_node is not None else None,
        )
        self._record(decl, node)
        return decl

    def _receiver(self, params: TsNode | None) -> str | None:
        if params is None:
            return None
        for param in params.named_children:
            if param.type == "parameter_declaration":
                return self._receiver_type(param.child_by_field_name("type"))
        return None

    def _receiver_type(self, node: TsNode | None) -> str:
        if node is not None and node.type == "pointer_type":
            inner = node.named_children[0] if node.named_children else None
            return "*" + (self._base_type_name(inner) or "unknown")
        return self._base_type_name(node) or "unknown"

    def _base_type_name(self, node: TsNode | None) -> str | None:
        if node is None:
            return None
        if node.type == "type_identifier":
            return self._text(node)
        if node.type == "generic_type":
            return self._base_type_name(node.child_by_field_name("type"))
        return None

    def _block(self, node: TsNode) -> Block:
        block = Block()
        children: list[TsNode] = []
        for child in node.named_children:
            if child.type == "statement_list":
                children.extend(child.named_children)
            else:
                children.append(child)
        self._fill(block.stmts, children, self._stmt)
        self._record(block, node)
        return block

    def _stmt(self, node: TsNode) -> RawStmt:
        stmt = RawStmt(kind=node.type, fragment=self.fragment([node]))
        self._record(stmt, node)
        return stmt

    def fragment(self, nodes: list[TsNode]) -> Fragment:
        leaves = [leaf for node in nodes for leaf in _iter_leaves(node)]
        if not leaves:
            return Fragment(lines=())
        start_row = leaves[0].start_point[0]
        end_row, end_col = leaves[-1].end_point
        by_row: dict[int, list[TsNode]] = defaultdict(list)
        inside: set[int] = set()
        open_end: set[int] = set()
        for leaf in leaves:
            first_row, last_row = leaf.start_point[0], leaf.end_point[0]
            by_row[first_row].append(leaf)
            if last_row > first_row:
                inside.update(range(first_row + 1, last_row + 1))
                open_end.update(range(first_row, last_row))

        lines: list[FragmentLine] = []
        stack: list[int] = []
        previous: TsNode | None = None
        for row in range(start_row, end_row + 1):
            raw = self.rows[row] if row < len(self.rows) else b""
            if row == end_row:
                raw = raw[:end_col]
            row_leaves = by_row.get(row, [])
            if row in inside:
                text = raw if row in open_end else raw.rstrip()
                lines.append(FragmentLine(depth=0, text=self._decode(text), verbatim=True))
                _advance_brackets(stack, row_leaves)
                if row_leaves:
                    previous = row_leaves[-1]
                continue
            if not row_leaves:
                if lines and not lines[-1].text and not lines[-1].verbatim:
                    continue
                lines.append(FragmentLine(depth=0, text=""))
                continue
            first = row_leaves[0]
            text = raw[first.start_point[1] :]
            if row not in open_end:
                text = text.rstrip()
            idx = 0
            while idx < len(row_leaves) and row_leaves[idx].type in _CLOSERS:
                if stack:
                    stack.pop()
                idx += 1
            depth = 0 if row == start_row else sum(stack)
            if first.type in _CASE_KEYWORDS:
                depth -= 1
            elif first.type == "label_name" and first.parent is not None and (
                first.parent.type == "labeled_statement"
            ):
                depth -= 1
            elif row != start_row and previous is not None and (
                previous.type in _CONTINUATION_TOKENS
            ):
                depth += 1
            if row != start_row:
                depth = max(depth, 0)
            _advance_brackets(stack, row_leaves[idx:])
            lines.append(FragmentLine(depth=depth, text=self._decode(text)))
            previous = row_leaves[-1]
        return Fragment(lines=tuple(lines))


class GoSourceLoader:
    def __init__(self) -> None:
        self._parser = tree_sitter.Parser(GO_LANGUAGE)

    def load(self, path: Path) -> LoadedSource:
        try:
            source = path.read_bytes()
        except OSError as exc:
            raise ParseError(path, f"cannot read file: {exc}") from exc
        return self.parse(source, path=path)

    def parse(self, source: bytes | str, *, path: Path | None = None) -> LoadedSource:
        if isinstance(source, str):
            source = source.encode("utf-8", errors="surrogateescape")
        syntax = self._parser.parse(source)
        root = syntax.root_node
        if root.has_error:
            bad = _first_error(root) or root
            message = f"missing {bad.type}" if bad.is_missing else "syntax error"
            raise ParseError(
                path,
                message,
                line=bad.start_point[0] + 1,
                column=bad.start_point[1] + 1,
            )
        builder = _TreeBuilder(source, path)
        tree = builder.build(root)
        return LoadedSource(tree=tree, positions=builder.positions)
