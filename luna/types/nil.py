from __future__ import annotations


class NilType:
    """The empty list. Unlike Python's empty containers it is a true value."""

    __slots__ = ()

    def __repr__(self):
        return "()"

    def __iter__(self):
        return iter(())

    def __reduce__(self):
        return "Nil"


Nil = NilType()
