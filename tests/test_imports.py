from __future__ import annotations

from timecost.instrument.imports import ImportSet, add_import, ensure_imports
from timecost.syntax.loader import GoSourceLoader
from timecost.syntax.model import ImportDecl, PackageClause, RawDecl
from timecost.syntax.printer import Printer
from tests.go_helpers import go_source


def _render(loaded) -> str:
    return Printer(loaded.positions).render(loaded.tree)


def test_file_without_imports_gets_one_grouped_declaration(loader: GoSourceLoader) -> None:
    loaded = loader.parse("package main\n\nvar x = 1\n")
    assert ensure_imports(loaded.tree) == ["time", "fmt"]
    assert [type(decl) for decl in loaded.tree.decls] == [PackageClause, ImportDecl, RawDecl]
    assert _render(loaded) == (
        'package main\n\nimport (\n\t"time"\n\t"fmt"\n)\n\nvar x = 1\n'
    )


def test_present_imports_are_not_duplicated(loader: GoSourceLoader) -> None:
    loaded = loader.parse('package main\n\nimport (\n\t"fmt"\n\t"time"\n)\n')
    assert ensure_imports(loaded.tree) == []
    assert ImportSet(loaded.tree).paths() == ["fmt", "time"]


def test_alias_matching_the_package_name_counts(loader: GoSourceLoader) -> None:
    loaded = loader.parse('package main\n\nimport fmt "fmt"\n')
    assert ensure_imports(loaded.tree) == ["time"]


def test_renamed_and_blank_imports_do_not_count(loader: GoSourceLoader) -> None:
    loaded = loader.parse('package main\n\nimport (\n\tf "fmt"\n\t_ "time"\n)\n')
    assert "fmt" not in ImportSet(loaded.tree)
    assert ensure_imports(loaded.tree) == ["time", "fmt"]
    assert ImportSet(loaded.tree).paths() == ["fmt", "fmt", "time", "time"]


def test_single_import_becomes_grouped(loader: GoSourceLoader) -> None:
    loaded = loader.parse('package main\n\nimport "os"\n')
    ensure_imports(loaded.tree)
    assert _render(loaded) == (
        'package main\n\nimport (\n\t"os"\n\t"fmt"\n\t"time"\n)\n'
    )


def test_new_spec_follows_the_closest_path(loader: GoSourceLoader) -> None:
    loaded = loader.parse(
        go_source(
            """
            package main

            import (
                "net/http"
                "os"
            )
            """
        )
    )
    add_import(loaded.tree, "net/url")
    assert ImportSet(loaded.tree).paths() == ["net/http", "net/url", "os"]


def test_cgo_declaration_is_never_extended(loader: GoSourceLoader) -> None:
    loaded = loader.parse(
        go_source(
            """
            package main

            // #include <stdio.h>
            import "C"

            func main() {}
            """
        )
    )
    ensure_imports(loaded.tree)
    lines = _render(loaded).splitlines()
    assert lines[:9] == [
        "package main",
        "",
        "// #include <stdio.h>",
        'import "C"',
        "",
        "import (",
        '\t"time"',
        '\t"fmt"',
        ")",
    ]


def test_comments_inside_a_group_are_kept(loader: GoSourceLoader) -> None:
    loaded = loader.parse(
        go_source(
            """
            package main

            import (
                // standard library
                "os"
            )
            """
        )
    )
    ensure_imports(loaded.tree)
    assert _render(loaded).splitlines()[2:] == [
        "import (",
        "\t// standard library",
        '\t"os"',
        '\t"fmt"',
        '\t"time"',
        ")",
    ]
