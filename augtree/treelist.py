# An append-only indexable list built on the augmented AVL tree.
# Every element is inserted with the same key. Since insertion goes right on ties,
# every new element becomes the rightmost node and the in-order position is the list index.

from __future__ import annotations
import warnings
from typing import Any, Generic, Iterable, Iterator, Sequence, TypeVar
import numpy as np
from numpy.typing import DTypeLike, NDArray
from .augment import SubtreeSize
from .errors import IndexOutOfRange, InvalidIterator, Unsupported
from .tree import AugmentedAVLTree

E = TypeVar('E')

APPEND_KEY = 0

class TreeList(Generic[E]):
    """A list with O(log n) append, get by index and remove by index.

    Only appending is supported. Assigning to an index, inserting in the middle and slicing raise Unsupported."""
    def __init__(self, values: Iterable[E] = (), *, check_invariants: bool = False):
        """
        :param values: Initial elements, appended in order
        :param check_invariants: If true, verify the underlying tree after every mutation
        """
        self._tree: AugmentedAVLTree[int, E, int] = AugmentedAVLTree(SubtreeSize(), check_invariants=check_invariants)
        self._size = 0
        self.add_all(values)

    @property
    def tree(self) -> AugmentedAVLTree[int, E, int]:
        return self._tree

    def size(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        return self._tree.empty()

    def add(self, value: E) -> bool:
        self._tree.insert(APPEND_KEY, value)
        self._size += 1
        return True

    def add_all(self, values: Iterable[E]) -> bool:
        for value in values:
            self.add(value)
        return True

    append = add
    extend = add_all

    def get(self, index: int) -> E:
        if index < 0 or index >= self._size:
            raise IndexOutOfRange(f"Index {index} out of range for list of size {self._size}")
        node = self._tree.search_by_property(index + 1)
        assert node is not None, f"Rank {index + 1} not found in a tree of size {self._tree.root_property}"
        return node.value

    def remove(self, index: int) -> E | None:
        """Removes the element at index and returns it. Returns None if there is no such element."""
        deleted = self._tree.delete_by_property(index + 1)
        if deleted is None:
            warnings.warn(f"Nothing to remove at index {index} in a list of size {self._size}")
            return None
        self._size -= 1
        return deleted.value

    def remove_value(self, value: Any) -> bool:
        """Removes the first element equal to value. Returns whether an element was removed."""
        it = self.iterator()
        while it.has_next():
            if it.next() == value:
                it.remove()
                return True
        return False

    def contains(self, value: Any) -> bool:
        return any(x == value for x in self)

    def contains_all(self, values: Iterable[Any]) -> bool:
        return all(self.contains(v) for v in values)

    def index_of(self, value: Any) -> int:
        for i, x in enumerate(self):
            if x == value:
                return i
        return -1

    def last_index_of(self, value: Any) -> int:
        it = self.list_iterator(self._size)
        while it.has_previous():
            if it.previous() == value:
                return it.next_index()
        return -1

    def iterator(self) -> TreeListIterator[E]:
        return self.list_iterator(0)

    def list_iterator(self, start: int = 0) -> TreeListIterator[E]:
        if start < 0 or start > self._size:
            raise IndexOutOfRange(f"Iterator start {start} out of range for list of size {self._size}")
        return TreeListIterator(self, 0, self._size, start)

    def clear(self):
        self._tree.clear()
        self._size = 0

    def to_list(self) -> list[E]:
        return [value for _, value in self._tree]

    def to_array(self, dtype: DTypeLike = object) -> NDArray:
        """Returns the elements as a 1D numpy array. Elements are placed one by one so that sequences stay as objects."""
        arr = np.empty(self._size, dtype=dtype)
        for i, value in enumerate(self):
            arr[i] = value
        return arr

    ### Not part of the contract ###
    def set(self, index: int, value: E) -> E:
        raise Unsupported("TreeList does not support assignment by index")

    def insert(self, index: int, value: E):
        raise Unsupported("TreeList only supports appending")

    def add_all_at(self, index: int, values: Iterable[E]):
        raise Unsupported("TreeList only supports appending")

    def sublist(self, start: int, stop: int):
        raise Unsupported("TreeList does not support sublists")

    def remove_all(self, values: Iterable[Any]):
        raise Unsupported("TreeList does not support bulk removal")

    def retain_all(self, values: Iterable[Any]):
        raise Unsupported("TreeList does not support bulk removal")

    ### Python protocols ###
    def __len__(self):
        return self._size

    def __bool__(self):
        return self._size > 0

    def __getitem__(self, index: int) -> E:
        if isinstance(index, slice):
            raise Unsupported("TreeList does not support slicing")
        return self.get(index)

    def __setitem__(self, index: int, value: E):
        self.set(index, value)

    def __delitem__(self, index: int):
        if isinstance(index, slice):
            raise Unsupported("TreeList does not support slicing")
        if index < 0 or index >= self._size:
            raise IndexOutOfRange(f"Index {index} out of range for list of size {self._size}")
        self.remove(index)

    def __contains__(self, value: Any):
        return self.contains(value)

    def __iter__(self) -> Iterator[E]:
        return self.iterator()

    def __reversed__(self) -> Iterator[E]:
        it = self.list_iterator(self._size)
        while it.has_previous():
            yield it.previous()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TreeList):
            return self.to_list() == other.to_list()
        if isinstance(other, Sequence) and not isinstance(other, str):
            return self.to_list() == list(other)
        return NotImplemented

    __hash__ = None # type: ignore

    def __repr__(self):
        return f"TreeList({self.to_list()!r})"

class TreeListIterator(Generic[E]):
    """A bidirectional cursor over the index range [lo, hi) of a TreeList.

    Removing through the cursor invalidates it permanently."""
    def __init__(self, owner: TreeList[E], lo: int, hi: int, start: int):
        self._owner = owner
        self._lo = lo
        self._hi = hi
        self._i = start
        self._last: int | None = None
        self.valid = True

    def _check_valid(self):
        if not self.valid:
            raise InvalidIterator("The iterator has been invalidated by a removal")

    def has_next(self) -> bool:
        return self.valid and self._i < self._hi

    def has_previous(self) -> bool:
        return self.valid and self._i > self._lo

    def next(self) -> E:
        self._check_valid()
        if self._i >= self._hi:
            raise IndexOutOfRange(f"Iterator is at the end of its range [{self._lo}, {self._hi})")
        value = self._owner.get(self._i)
        self._last = self._i
        self._i += 1
        return value

    def previous(self) -> E:
        self._check_valid()
        if self._i <= self._lo:
            raise IndexOutOfRange(f"Iterator is at the start of its range [{self._lo}, {self._hi})")
        value = self._owner.get(self._i - 1)
        self._i -= 1
        self._last = self._i
        return value

    def next_index(self) -> int:
        return self._i

    def previous_index(self) -> int:
        return self._i - 1

    def remove(self):
        """Removes the element last returned by next or previous."""
        self._check_valid()
        if self._last is None:
            raise InvalidIterator("next() or previous() must be called before remove()")
        self._owner.remove(self._last)
        self.valid = False

    def set(self, value: E):
        raise Unsupported("TreeList does not support assignment by index")

    def add(self, value: E):
        raise Unsupported("TreeList only supports appending")

    def __iter__(self):
        return self

    def __next__(self) -> E:
        self._check_valid()
        if not self.has_next():
            raise StopIteration
        return self.next()
