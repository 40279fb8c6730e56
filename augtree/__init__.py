from .avl import Node, Entry
from .augment import Augmentation, Propagation, SubtreeSize
from .tree import AugmentedAVLTree
from .treelist import TreeList, TreeListIterator
from .errors import IndexOutOfRange, InvalidIterator, Unsupported, InvariantViolation
