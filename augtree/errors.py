class IndexOutOfRange(IndexError):
    """Raised on positional access outside [0, size)."""
    pass

class InvalidIterator(RuntimeError):
    """Raised when a cursor is used after a removal through it."""
    pass

class Unsupported(NotImplementedError):
    """Raised by operations that are not part of the structure's contract."""
    pass

class InvariantViolation(AssertionError):
    """Raised when a tree is found unbalanced, unordered or carrying a stale property."""
    pass
