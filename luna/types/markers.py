"""Singleton marker values that are not data in their own right."""

from __future__ import annotations


class UnspecifiedType:
    """Result of forms evaluated only for their side effects."""

    __slots__ = ()

    def __repr__(self):
        return "#<unspecified>"

    def __reduce__(self):
        return "Unspecified"


class EofType:
    """The end-of-file object returned by input procedures."""

    __slots__ = ()

    def __repr__(self):
        return "#<eof>"

    def __reduce__(self):
        return "Eof"


class UnassignedType:
    """Placeholder held by letrec bindings until their initializer has run."""

    __slots__ = ()

    def __repr__(self):
        return "#<unassigned>"

    def __reduce__(self):
        return "Unassigned"


Unspecified = UnspecifiedType()
Eof = EofType()
Unassigned = UnassignedType()
