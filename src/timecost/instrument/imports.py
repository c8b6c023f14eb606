"""Import hygiene for instrumented files.

Insertion follows the placement rules of ``golang.org/x/tools/go/ast/astutil``
``AddImport``: the new spec goes right after the existing spec that shares the
most leading path segments with it (the first one on ties), import "C"
declarations are left alone, and a file without imports gets a new
declaration after the package clause.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from timecost.instrument.synthesis import FMT_PACKAGE, TIME_PACKAGE, go_string_literal
from timecost.syntax.model import ImportDecl, ImportSpec, SourceFile

CAPABILITY_IMPORTS = (TIME_PACKAGE, FMT_PACKAGE)


def _match_len(left: str, right: str) -> int:
    count = 0
    for a, b in zip(left, right):
        if a != b:
            break
        if a == "/":
            count += 1
    return count


class ImportSet:
    """Imports of one file, keyed by canonical path."""

    def __init__(self, tree: SourceFile) -> None:
        self.tree = tree

    def __iter__(self) -> Iterator[ImportSpec]:
        for decl in self.tree.import_decls():
            yield from decl.import_specs()

    def __contains__(self, path: object) -> bool:
        # Aliased, blank and dot imports do not bind the package name the
        # synthesized code refers to.
        return any(spec.path == path and spec.binds_default_name for spec in self)

    def paths(self) -> list[str]:
        return [spec.path for spec in self]

    def add(self, path: str) -> bool:
        if path in self:
            return False
        add_import(self.tree, path)
        return True


def add_import(tree: SourceFile, path: str) -> ImportSpec:
    best = -1
    target: ImportDecl | None = None
    insert_after = -1
    last_import = -1
    for position, decl in enumerate(tree.decls):
        if not isinstance(decl, ImportDecl):
            continue
        last_import = position
        specs = decl.import_specs()
        if any(spec.path == "C" for spec in specs):
            continue
        if not specs and best == -1:
            target = decl
        for index, spec in enumerate(decl.specs):
            if not isinstance(spec, ImportSpec):
                continue
            score = _match_len(spec.path, path)
            if score > best:
                best, target, insert_after = score, decl, index

    new_spec = ImportSpec(path=path, literal=go_string_literal(path))
    if target is None:
        target = ImportDecl()
        if last_import >= 0:
            tree.decls.insert(last_import + 1, target)
        else:
            tree.decls.insert(tree.package_index() + 1, target)
    target.specs.insert(insert_after + 1, new_spec)
    if len(target.specs) > 1:
        target.grouped = True
    return new_spec


def ensure_imports(
    tree: SourceFile, paths: Iterable[str] = CAPABILITY_IMPORTS
) -> list[str]:
    imports = ImportSet(tree)
    return [path for path in paths if imports.add(path)]
