"""Key indices for recordstore."""

from recordstore.index.ordered import OrderedIndex

__all__ = ["OrderedIndex"]
