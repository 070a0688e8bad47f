from __future__ import annotations


class MString:
    """A mutable Scheme string.

    Strings are shared by reference: every holder of the same MString sees
    `string-set!` and `string-fill!` mutations. Equality is identity (`eqv?`);
    compare `.value` for content (`string=?`, `equal?`).
    """

    __slots__ = ("value",)

    def __init__(self, value: str = ""):
        self.value = value

    def __len__(self) -> int:
        return len(self.value)

    def __str__(self):
        return self.value

    def __repr__(self):
        return f"MString({self.value!r})"
