from __future__ import annotations

from luna import SchemeValue


class Values:
    """Several return values produced by `(values ...)`."""

    __slots__ = ("items",)

    def __init__(self, items: tuple[SchemeValue, ...]):
        self.items = items

    def __repr__(self):
        return f"Values({self.items!r})"
