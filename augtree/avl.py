from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, TYPE_CHECKING

if TYPE_CHECKING:
    from .augment import Augmentation

K = TypeVar('K')
V = TypeVar('V')
A = TypeVar('A')

class Node(Generic[K, V, A]):
    """A node of the augmented AVL tree. Empty subtrees are represented by None."""
    __slots__ = ('key', 'value', 'property', 'height', 'left', 'right')

    def __init__(self, key: K, value: V, property: A):
        self.key = key
        self.value = value
        self.property = property
        self.height = 1
        self.left: Node[K, V, A] | None = None
        self.right: Node[K, V, A] | None = None

    def is_leaf(self):
        return self.left is None and self.right is None

    def __repr__(self):
        return f"Node(key={self.key!r}, value={self.value!r}, property={self.property!r}, height={self.height})"

@dataclass(frozen=True)
class Entry(Generic[K, V]):
    """The key-value payload of a logically deleted node."""
    key: K
    value: V

def height(x: Node | None) -> int:
    return x.height if x is not None else 0

def get_property(x: Node | None, aug: Augmentation):
    return x.property if x is not None else aug.default_property()

def balance_factor(x: Node | None) -> int:
    return height(x.right) - height(x.left) if x is not None else 0

def maintain(x: Node, aug: Augmentation):
    x.height = 1 + max(height(x.left), height(x.right))
    x.property = aug.augment(get_property(x.left, aug), get_property(x.right, aug))

def new_leaf(key, value, aug: Augmentation) -> Node:
    default = aug.default_property()
    return Node(key, value, aug.augment(default, default))

def rotate_left(node: Node, aug: Augmentation) -> Node:
    y = node.right
    assert y is not None
    node.right = y.left
    y.left = node
    maintain(node, aug)
    maintain(y, aug)
    return y

def rotate_right(node: Node, aug: Augmentation) -> Node:
    y = node.left
    assert y is not None
    node.left = y.right
    y.right = node
    maintain(node, aug)
    maintain(y, aug)
    return y

def balance(node: Node, aug: Augmentation) -> Node:
    """Recomputes the node from its children and restores the AVL invariant at this node.
    Returns the root of the (possibly rotated) subtree."""
    maintain(node, aug)
    bf = balance_factor(node)
    assert -2 <= bf <= 2, f"Balance factor {bf} out of range at {node}"

    if bf == 2:
        if balance_factor(node.right) == -1:
            # Double left
            node.right = rotate_right(node.right, aug)
        return rotate_left(node, aug)

    if bf == -2:
        if balance_factor(node.left) == 1:
            # Double right
            node.left = rotate_left(node.left, aug)
        return rotate_right(node, aug)

    return node

def insert(node: Node | None, key, value, aug: Augmentation) -> Node:
    if node is None:
        return new_leaf(key, value, aug)

    if node.key <= key:
        node.right = insert(node.right, key, value, aug)
    else:
        node.left = insert(node.left, key, value, aug)
    return balance(node, aug)

def search_by_key(node: Node | None, key) -> Node | None:
    while node is not None:
        if node.key == key:
            return node
        node = node.right if node.key <= key else node.left
    return None

def search_by_property(node: Node | None, target, aug: Augmentation) -> Node | None:
    while node is not None:
        guide = aug.property_search(node, target)
        if guide.order > 0:
            node = node.right
        elif guide.order < 0:
            node = node.left
        else:
            return node
        target = guide.retarget
    return None

def delete_min(node: Node, aug: Augmentation) -> tuple[Node | None, Node]:
    """Unlinks the minimum of the subtree. Returns the new subtree root and the unlinked node."""
    if node.left is None:
        return node.right, node
    node.left, removed = delete_min(node.left, aug)
    return balance(node, aug), removed

def _delete_here(node: Node, aug: Augmentation) -> tuple[Node | None, Entry]:
    deleted = Entry(node.key, node.value)
    if node.left is None:
        return node.right, deleted
    if node.right is None:
        return node.left, deleted

    # Two children: the successor is unlinked instead and its payload moves up
    node.right, successor = delete_min(node.right, aug)
    node.key, node.value = successor.key, successor.value
    return balance(node, aug), deleted

def delete_by_key(node: Node | None, key, aug: Augmentation) -> tuple[Node | None, Entry | None]:
    if node is None:
        return None, None

    if node.key == key:
        return _delete_here(node, aug)

    deleted: Entry | None
    if node.key <= key:
        node.right, deleted = delete_by_key(node.right, key, aug)
    else:
        node.left, deleted = delete_by_key(node.left, key, aug)

    if deleted is None:
        return node, None
    return balance(node, aug), deleted

def delete_by_property(node: Node | None, target, aug: Augmentation) -> tuple[Node | None, Entry | None]:
    if node is None:
        return None, None

    guide = aug.property_search(node, target)
    deleted: Entry | None
    if guide.order > 0:
        node.right, deleted = delete_by_property(node.right, guide.retarget, aug)
    elif guide.order < 0:
        node.left, deleted = delete_by_property(node.left, guide.retarget, aug)
    else:
        return _delete_here(node, aug)

    if deleted is None:
        return node, None
    return balance(node, aug), deleted

def min_node(node: Node | None) -> Node | None:
    if node is None:
        return None
    while node.left is not None:
        node = node.left
    return node

def iter_nodes(node: Node | None):
    """In-order traversal. Uses an explicit stack so it does not recurse."""
    stack: list[Node] = []
    while stack or node is not None:
        while node is not None:
            stack.append(node)
            node = node.left
        node = stack.pop()
        yield node
        node = node.right

def flatten(node: Node | None) -> list[tuple[Any, Any]]:
    return [(x.key, x.value) for x in iter_nodes(node)]
