"""Cons cells and the list helpers built on them.

A proper list is a chain of Pairs whose last cdr is Nil. Anything else at
the end of the chain makes it an improper list.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from luna import SchemeValue
from luna.errors import SchemeTypeError
from luna.types.nil import Nil, NilType


class Pair:
    """A mutable cons cell. Equality is identity, as for `eq?`."""

    __slots__ = ("car", "cdr")

    def __init__(self, car: SchemeValue, cdr: SchemeValue = Nil):
        self.car = car
        self.cdr = cdr

    def __iter__(self) -> Iterator[SchemeValue]:
        """Iterate the cars along the chain, stopping at the first non-pair cdr."""
        node: SchemeValue = self
        while isinstance(node, Pair):
            yield node.car
            node = node.cdr

    def __repr__(self) -> str:
        from luna.printer import to_write_string

        return to_write_string(self)


def from_iterable(items: Iterable[SchemeValue], tail: SchemeValue = Nil) -> Pair | NilType:
    """Build a list from `items`, ending in `tail` (Nil gives a proper list)."""
    result = tail
    for item in reversed(list(items)):
        result = Pair(item, result)
    return result


def make_list(*items: SchemeValue) -> Pair | NilType:
    return from_iterable(items)


def is_list(obj: SchemeValue) -> bool:
    """True for proper lists. Circular chains are not lists."""
    slow = fast = obj
    while True:
        if fast is Nil:
            return True
        if not isinstance(fast, Pair):
            return False
        fast = fast.cdr
        if fast is Nil:
            return True
        if not isinstance(fast, Pair):
            return False
        fast = fast.cdr
        slow = slow.cdr
        if fast is slow:
            return False


def to_list(obj: SchemeValue, procedure: str = "list") -> list[SchemeValue]:
    """Return the elements of the proper list `obj` as a Python list.

    Raises SchemeTypeError naming `procedure` when `obj` is not a proper list.
    """
    items = []
    node = slow = obj
    while isinstance(node, Pair):
        items.append(node.car)
        node = node.cdr
        # slow moves at half speed; meeting it means the chain is circular.
        if len(items) % 2 == 0:
            slow = slow.cdr
            if node is slow:
                raise SchemeTypeError(procedure, "a proper list", obj)
    if node is not Nil:
        raise SchemeTypeError(procedure, "a proper list", obj)
    return items


def split_improper(obj: SchemeValue, procedure: str = "list") -> tuple[list[SchemeValue], SchemeValue]:
    """Split a possibly improper list into its elements and its final cdr.

    Raises SchemeTypeError naming `procedure` when the chain is circular.
    """
    items = []
    node = slow = obj
    while isinstance(node, Pair):
        items.append(node.car)
        node = node.cdr
        if len(items) % 2 == 0:
            slow = slow.cdr
            if node is slow:
                raise SchemeTypeError(procedure, "a finite list", obj)
    return items, node
