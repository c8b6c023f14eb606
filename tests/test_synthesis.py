from __future__ import annotations

import pytest

from timecost.instrument.naming import IdentifierAllocator
from timecost.instrument.synthesis import (
    Synthesizer,
    build_pair,
    go_string_literal,
    insert_pair,
)
from timecost.syntax.model import (
    BasicLit,
    Block,
    Fragment,
    FuncDecl,
    PackageClause,
    RawStmt,
    SourceFile,
)
from timecost.syntax.printer import Printer


def _decl(name: str, *, body: Block | None = None, receiver: str | None = None) -> FuncDecl:
    return FuncDecl(
        name=name,
        signature=Fragment.single(f"func {name}()"),
        receiver=receiver,
        body=body,
    )


def test_allocator_skips_taken_names_and_remembers_its_own() -> None:
    allocator = IdentifierAllocator({"__start", "__start3"})
    assert allocator.allocate("__start") == "__start2"
    assert allocator.allocate("__start") == "__start4"
    assert allocator.allocate("__start2") == "__start22"
    assert allocator.allocate("__start5") == "__start5"


def test_allocator_normalizes_the_base_name() -> None:
    allocator = IdentifierAllocator()
    assert allocator.allocate("9lives") == "_9lives"
    assert allocator.allocate("t-0") == "t0"
    assert allocator.allocate("???") == "__start"


def test_go_string_literal_escapes() -> None:
    assert go_string_literal('say "hi"\n') == '"say \\"hi\\"\\n"'
    assert go_string_literal("a\\b\t") == '"a\\\\b\\t"'


def test_build_pair_renders_capture_and_deferred_report() -> None:
    decl = _decl("Add", body=Block())
    insert_pair(decl, build_pair("Add", "__start"))
    rendered = Printer().render(SourceFile(decls=[PackageClause(name="main"), decl]))
    assert rendered.splitlines()[2:] == [
        "func Add() {",
        "\t__start := time.Now()",
        "\tdefer func() {",
        '\t\tfmt.Printf("function Add took %v\\n", time.Since(__start))',
        "\t}()",
        "}",
    ]


def test_report_template_substitutes_the_qualified_name() -> None:
    pair = build_pair("*T.M", "t0", report_template='{name} "took" %v')
    printf = pair.report.call.func.body.stmts[0].x
    assert isinstance(printf.args[0], BasicLit)
    assert printf.args[0].value == '"*T.M \\"took\\" %v\\n"'
    assert pair.start.lhs[0].name == "t0"


def test_insert_pair_keeps_existing_statements_after_it() -> None:
    original = RawStmt(kind="return_statement", fragment=Fragment.single("return"))
    decl = _decl("f", body=Block(stmts=[original]))
    pair = build_pair("f", "__start")
    insert_pair(decl, pair)
    assert decl.body is not None
    assert decl.body.stmts == [pair.start, pair.report, original]


def test_insert_pair_rejects_missing_body() -> None:
    with pytest.raises(ValueError):
        insert_pair(_decl("asm"), build_pair("asm", "__start"))


def test_synthesizer_gives_each_site_its_own_identifier() -> None:
    lines: list[str] = []
    synthesizer = Synthesizer(IdentifierAllocator({"__start"}), echo_fn=lines.append)
    first = synthesizer.instrument(_decl("A", body=Block()))
    second = synthesizer.instrument(_decl("B", body=Block(), receiver="*T"))
    assert (first.identifier, second.identifier) == ("__start2", "__start3")
    assert lines == [
        "added timing to function A",
        "added timing to function *T.B",
    ]
