from __future__ import annotations
from typing import Generic, Iterator, TypeVar
from . import avl
from .avl import Node, Entry
from .augment import Augmentation
from .util import verify_integrity, verify_order, render

K = TypeVar('K')
V = TypeVar('V')
A = TypeVar('A')

class AugmentedAVLTree(Generic[K, V, A]):
    """An AVL tree that caches an aggregate (the property) on every subtree.

    Keys only need to support == and <=. Equal keys are allowed: a key equal to an existing one is
    inserted to its right, so among duplicates the in-order position follows insertion order.
    Nodes can be found either by key or by a property search guided by the augmentation."""
    def __init__(self, augmentation: Augmentation[K, A], *, check_invariants: bool = False):
        """
        :param augmentation: Defines the property cached on each subtree and how property searches descend
        :param check_invariants: If true, verify the whole tree after every mutation. Slow; for debugging only.
        """
        self.augmentation = augmentation
        self.check_invariants = check_invariants
        self._root: Node[K, V, A] | None = None

    @property
    def root(self) -> Node[K, V, A] | None:
        return self._root

    @property
    def height(self) -> int:
        return avl.height(self._root)

    @property
    def root_property(self) -> A:
        """The aggregate over the whole tree."""
        return avl.get_property(self._root, self.augmentation)

    def empty(self):
        return self._root is None

    def insert(self, key: K, value: V):
        """Inserts the key-value pair. If node.key <= key then the pair goes into the right subtree of node."""
        self._root = avl.insert(self._root, key, value, self.augmentation)
        self._after_mutation()

    def search_by_key(self, key: K) -> Node[K, V, A] | None:
        return avl.search_by_key(self._root, key)

    def search_by_property(self, target: A) -> Node[K, V, A] | None:
        return avl.search_by_property(self._root, target, self.augmentation)

    def delete_by_key(self, key: K) -> Entry[K, V] | None:
        """Deletes one node with the given key. Returns its key and value, or None if there is no such node."""
        self._root, deleted = avl.delete_by_key(self._root, key, self.augmentation)
        if deleted is not None:
            self._after_mutation()
        return deleted

    def delete_by_property(self, target: A) -> Entry[K, V] | None:
        """Deletes the node that a property search for target stops at. Returns its key and value, or None if the search falls off the tree."""
        self._root, deleted = avl.delete_by_property(self._root, target, self.augmentation)
        if deleted is not None:
            self._after_mutation()
        return deleted

    def delete_min(self) -> Entry[K, V] | None:
        if self._root is None:
            return None
        self._root, removed = avl.delete_min(self._root, self.augmentation)
        self._after_mutation()
        return Entry(removed.key, removed.value)

    def min_node(self) -> Node[K, V, A] | None:
        return avl.min_node(self._root)

    def clear(self):
        self._root = None

    def nodes(self) -> Iterator[Node[K, V, A]]:
        """Iterates over the nodes in key order."""
        return avl.iter_nodes(self._root)

    def flatten(self) -> list[tuple[K, V]]:
        return avl.flatten(self._root)

    def verify(self):
        """Raises InvariantViolation if the tree is not balanced, not ordered or carries a stale property."""
        verify_integrity(self._root, self.augmentation)
        verify_order(self._root)

    def _after_mutation(self):
        if self.check_invariants:
            self.verify()

    def __iter__(self) -> Iterator[tuple[K, V]]:
        for node in self.nodes():
            yield node.key, node.value

    def __repr__(self):
        return f"{self.__class__.__name__}({self.flatten()!r})"

    def show(self) -> str:
        return render(self._root)
