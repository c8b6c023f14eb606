from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import typer

from timecost.instrument.naming import IdentifierAllocator
from timecost.syntax.model import (
    AssignStmt,
    BasicLit,
    Block,
    CallExpr,
    DeferStmt,
    ExprStmt,
    FuncDecl,
    FuncLit,
    Ident,
    SelectorExpr,
)

TIME_PACKAGE = "time"
FMT_PACKAGE = "fmt"
DEFAULT_START_IDENTIFIER = "__start"
DEFAULT_REPORT_TEMPLATE = "function {name} took %v"

_GO_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


@dataclass(frozen=True)
class InstrumentationPair:
    identifier: str
    start: AssignStmt
    report: DeferStmt


def go_string_literal(value: str) -> str:
    return '"' + "".join(_GO_ESCAPES.get(char, char) for char in value) + '"'


def _selector(package: str, name: str) -> SelectorExpr:
    return SelectorExpr(x=Ident(package), sel=name)


def build_pair(
    qualified_name: str,
    identifier: str,
    *,
    report_template: str = DEFAULT_REPORT_TEMPLATE,
) -> InstrumentationPair:
    start = AssignStmt(
        lhs=[Ident(identifier)],
        tok=":=",
        rhs=[CallExpr(func=_selector(TIME_PACKAGE, "Now"))],
    )
    message = report_template.replace("{name}", qualified_name) + "\n"
    printf = CallExpr(
        func=_selector(FMT_PACKAGE, "Printf"),
        args=[
            BasicLit(go_string_literal(message)),
            CallExpr(func=_selector(TIME_PACKAGE, "Since"), args=[Ident(identifier)]),
        ],
    )
    report = DeferStmt(
        call=CallExpr(func=FuncLit(body=Block(stmts=[ExprStmt(x=printf)])))
    )
    return InstrumentationPair(identifier=identifier, start=start, report=report)


def insert_pair(decl: FuncDecl, pair: InstrumentationPair) -> None:
    if decl.body is None:
        raise ValueError(f"function {decl.qualified_name} has no body")
    decl.body.stmts[0:0] = [pair.start, pair.report]


class Synthesizer:
    def __init__(
        self,
        allocator: IdentifierAllocator,
        *,
        start_identifier: str = DEFAULT_START_IDENTIFIER,
        report_template: str = DEFAULT_REPORT_TEMPLATE,
        echo_fn: Callable[[str], None] = typer.echo,
    ) -> None:
        self.allocator = allocator
        self.start_identifier = start_identifier
        self.report_template = report_template
        self.echo_fn = echo_fn

    def instrument(self, decl: FuncDecl) -> InstrumentationPair:
        pair = build_pair(
            decl.qualified_name,
            self.allocator.allocate(self.start_identifier),
            report_template=self.report_template,
        )
        insert_pair(decl, pair)
        self.echo_fn(f"added timing to function {decl.qualified_name}")
        return pair
