from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, TypeVar
from .avl import Node, get_property

K = TypeVar('K')
A = TypeVar('A')

@dataclass(frozen=True)
class Propagation(Generic[A]):
    """One step of a property search.

    :param order: Go to the right subtree for a positive value, to the left subtree for a negative value. Stop at the current node for 0.
    :param retarget: The target to use in the chosen subtree.
    """
    order: int
    retarget: A

    @classmethod
    def left(cls, retarget: A) -> Propagation[A]:
        return cls(-1, retarget)

    @classmethod
    def right(cls, retarget: A) -> Propagation[A]:
        return cls(1, retarget)

    @classmethod
    def stop(cls, retarget: A) -> Propagation[A]:
        return cls(0, retarget)

class Augmentation(ABC, Generic[K, A]):
    """Defines the aggregate cached on every subtree of an AugmentedAVLTree.

    Implementations must keep augment and property_search consistent: for any target, at most one
    child subtree may contain it, and every step of property_search must make progress towards a leaf."""
    @abstractmethod
    def default_property(self) -> A:
        """The property of an empty subtree."""
        pass

    @abstractmethod
    def augment(self, left: A, right: A) -> A:
        """The property of a node given the cached properties of its two children."""
        pass

    @abstractmethod
    def property_search(self, node: Node[K, Any, A], target: A) -> Propagation[A]:
        """Decides where a search for target continues from node."""
        pass

class SubtreeSize(Augmentation[Any, int]):
    """Counts the nodes in every subtree. Property searches take 1-based ranks."""
    def default_property(self) -> int:
        return 0

    def augment(self, left: int, right: int) -> int:
        return left + right + 1

    def property_search(self, node: Node[Any, Any, int], target: int) -> Propagation[int]:
        left_size = get_property(node.left, self)
        rank = left_size + 1
        if target > rank:
            return Propagation.right(target - rank)
        if target < rank:
            return Propagation.left(target)
        return Propagation.stop(target)
