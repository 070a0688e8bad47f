from __future__ import annotations

import sys
from typing import ClassVar


class Symbol:
    """An interned identifier.

    Constructing a Symbol with a name that was seen before returns the very
    same object, so symbols compare by identity (`eq?`) and hash cheaply.
    The intern table lives for the whole process.
    """

    __slots__ = ("id",)

    _table: ClassVar[dict[str, Symbol]] = {}

    def __new__(cls, name: str) -> Symbol:
        sym = cls._table.get(name)
        if sym is None:
            sym = super().__new__(cls)
            sym.id = sys.intern(name)
            cls._table[sym.id] = sym
        return sym

    def __reduce__(self):
        return Symbol, (self.id,)

    def __copy__(self) -> Symbol:
        return self

    def __deepcopy__(self, memo) -> Symbol:
        return self

    def __repr__(self):
        return f"Symbol({self.id!r})"

    def __str__(self):
        return self.id
