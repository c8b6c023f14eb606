from __future__ import annotations

from timecost.syntax.model import Node, iter_child_nodes


class NodeVisitor:
    """Pre/post-order visitor over the syntax model.

    ``enter_<NodeClass>`` runs before the children of a node and returns
    whether to descend into them; ``leave_<NodeClass>`` runs after. Missing
    hooks fall back to :meth:`generic_enter` and :meth:`generic_leave`.
    """

    def enter(self, node: Node) -> bool:
        hook = getattr(self, f"enter_{type(node).__name__}", None)
        if hook is None:
            return self.generic_enter(node)
        return bool(hook(node))

    def leave(self, node: Node) -> None:
        hook = getattr(self, f"leave_{type(node).__name__}", None)
        if hook is None:
            self.generic_leave(node)
            return
        hook(node)

    def generic_enter(self, node: Node) -> bool:
        return True

    def generic_leave(self, node: Node) -> None:
        return None


def walk(node: Node, visitor: NodeVisitor) -> None:
    # Children are snapshotted before descending so hooks may edit lists.
    if visitor.enter(node):
        for child in list(iter_child_nodes(node)):
            walk(child, visitor)
    visitor.leave(node)
