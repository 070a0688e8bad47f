"""The three Scheme equivalence predicates: eq?, eqv? and equal?."""

from __future__ import annotations

from fractions import Fraction

from luna import SchemeValue
from luna.types.char import Char
from luna.types.mstring import MString
from luna.types.pair import Pair


def is_number(x: SchemeValue) -> bool:
    return isinstance(x, (int, float, Fraction)) and not isinstance(x, bool)


def is_eqv(a: SchemeValue, b: SchemeValue) -> bool:
    if a is b:
        return True
    if is_number(a) and is_number(b):
        # Exactness is part of the identity of a number: (eqv? 2 2.0) is #f.
        return isinstance(a, float) == isinstance(b, float) and a == b
    if isinstance(a, Char) and isinstance(b, Char):
        return a.value == b.value
    return False


def is_eq(a: SchemeValue, b: SchemeValue) -> bool:
    # Numbers and characters are not boxed uniquely in Python, so eq? on them
    # falls back to eqv? rather than depending on object caching.
    return is_eqv(a, b)


def is_equal(a: SchemeValue, b: SchemeValue) -> bool:
    """Structural equality over pairs, vectors and strings; eqv? elsewhere.

    Terminates on circular structure: two containers already being compared
    are taken as equal when they are met again.
    """
    pending: list[tuple[SchemeValue, SchemeValue]] = [(a, b)]
    compared: set[tuple[int, int]] = set()
    while pending:
        a, b = pending.pop()
        if is_eqv(a, b):
            continue
        if isinstance(a, MString) and isinstance(b, MString):
            if a.value != b.value:
                return False
            continue
        if isinstance(a, Pair) and isinstance(b, Pair):
            children = [(a.cdr, b.cdr), (a.car, b.car)]
        elif isinstance(a, list) and isinstance(b, list):
            if len(a) != len(b):
                return False
            children = list(zip(reversed(a), reversed(b)))
        else:
            return False
        key = (id(a), id(b))
        if key in compared:
            continue
        compared.add(key)
        pending.extend(children)
    return True
