from __future__ import annotations

from timecost.syntax.model import FuncDecl, Node
from timecost.syntax.visitors import NodeVisitor, walk

DEFAULT_SKIP_PREFIX = "Test"


def is_candidate(decl: FuncDecl, *, skip_prefix: str = DEFAULT_SKIP_PREFIX) -> bool:
    # Plain prefix match: "Testing" and "Tester" are skipped as well.
    if skip_prefix and decl.name.startswith(skip_prefix):
        return False
    return decl.body is not None


class DeclarationScanner(NodeVisitor):
    """Collect instrumentable function declarations in pre-order."""

    def __init__(self, *, skip_prefix: str = DEFAULT_SKIP_PREFIX) -> None:
        self.skip_prefix = skip_prefix
        self.candidates: list[FuncDecl] = []
        self.skipped: list[FuncDecl] = []

    def enter_FuncDecl(self, node: FuncDecl) -> bool:
        if is_candidate(node, skip_prefix=self.skip_prefix):
            self.candidates.append(node)
        else:
            self.skipped.append(node)
        return True


def scan_declarations(
    tree: Node, *, skip_prefix: str = DEFAULT_SKIP_PREFIX
) -> list[FuncDecl]:
    scanner = DeclarationScanner(skip_prefix=skip_prefix)
    walk(tree, scanner)
    return scanner.candidates
