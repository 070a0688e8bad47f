"""Equivalence and type predicates."""

from __future__ import annotations

from luna import SchemeValue
from luna.errors import SchemeTypeError
from luna.builtin.registry import builtin
from luna.types.char import Char
from luna.types.environment import Environment
from luna.types.equivalence import is_eq, is_equal, is_eqv
from luna.types.mstring import MString
from luna.types.procedure import Builtin, Closure
from luna.types.symbol import Symbol


@builtin("eq?", 2)
def eq(env: Environment, args: list[SchemeValue]) -> bool:
    """(eq? obj1 obj2) identity comparison."""
    return is_eq(args[0], args[1])


@builtin("eqv?", 2)
def eqv(env: Environment, args: list[SchemeValue]) -> bool:
    """(eqv? obj1 obj2) identity, plus equal numbers of the same exactness and equal characters."""
    return is_eqv(args[0], args[1])


@builtin("equal?", 2)
def equal(env: Environment, args: list[SchemeValue]) -> bool:
    """(equal? obj1 obj2) structural comparison of pairs, vectors and strings."""
    return is_equal(args[0], args[1])


@builtin("not", 1)
def not_(env: Environment, args: list[SchemeValue]) -> bool:
    """(not obj) #t only when obj is #f."""
    return args[0] is False


@builtin("boolean?", 1)
def is_boolean(env: Environment, args: list[SchemeValue]) -> bool:
    """(boolean? obj)"""
    return isinstance(args[0], bool)


@builtin("boolean=?", (2, None))
def boolean_eq(env: Environment, args: list[SchemeValue]) -> bool:
    """(boolean=? b1 b2 ...) #t when all arguments are the same boolean."""
    for x in args:
        if not isinstance(x, bool):
            raise SchemeTypeError("boolean=?", "a boolean", x)
    return all(x is args[0] for x in args)


@builtin("symbol?", 1)
def is_symbol(env: Environment, args: list[SchemeValue]) -> bool:
    """(symbol? obj)"""
    return isinstance(args[0], Symbol)


@builtin("string?", 1)
def is_string(env: Environment, args: list[SchemeValue]) -> bool:
    """(string? obj)"""
    return isinstance(args[0], MString)


@builtin("char?", 1)
def is_char(env: Environment, args: list[SchemeValue]) -> bool:
    """(char? obj)"""
    return isinstance(args[0], Char)


@builtin("procedure?", 1)
def is_procedure(env: Environment, args: list[SchemeValue]) -> bool:
    """(procedure? obj) #t for builtins and closures."""
    return isinstance(args[0], (Builtin, Closure))


@builtin("vector?", 1)
def is_vector(env: Environment, args: list[SchemeValue]) -> bool:
    """(vector? obj)"""
    return isinstance(args[0], list)
