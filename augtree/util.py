from __future__ import annotations
from typing import TYPE_CHECKING
from .avl import Node, height, iter_nodes
from .errors import InvariantViolation

if TYPE_CHECKING:
    from .augment import Augmentation

def verify_integrity(root: Node | None, aug: Augmentation) -> int:
    """Crashes if the AVL height, balance or augmentation invariants are violated anywhere in the tree.
    Returns the height of the tree."""
    def _walk(node: Node | None):
        if node is None:
            return 0, aug.default_property()

        left_h, left_p = _walk(node.left)
        right_h, right_p = _walk(node.right)

        if abs(right_h - left_h) > 1:
            raise InvariantViolation(f"AVL violation at {node}")

        if node.height != 1 + max(left_h, right_h):
            raise InvariantViolation(f"Stale height at {node}: expected {1 + max(left_h, right_h)}")

        expected = aug.augment(left_p, right_p)
        if node.property != expected:
            raise InvariantViolation(f"Stale property at {node}: expected {expected!r}")

        return node.height, node.property

    h, _ = _walk(root)
    return h

def verify_order(root: Node | None):
    """Checks that an in-order traversal yields non-decreasing keys."""
    prev = None
    for node in iter_nodes(root):
        if prev is not None and not prev.key <= node.key:
            raise InvariantViolation(f"Key order violation: {prev.key!r} before {node.key!r}")
        prev = node

def render(root: Node | None) -> str:
    """Draws the tree sideways (right subtree on top), one node per line. Useful for debugging."""
    lines: list[str] = []
    def _draw(node: Node | None, depth: int):
        if node is None:
            return
        _draw(node.right, depth + 1)
        lines.append("    " * depth + f"{node.key!r}: {node.value!r} [{node.property!r}, h={height(node)}]")
        _draw(node.left, depth + 1)
    _draw(root, 0)
    return "\n".join(lines) if lines else "<empty>"
