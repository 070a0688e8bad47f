"""The builtin table and the argument checks shared by the builtin modules.

Builtins are plain functions `fn(env, args)` registered under their Scheme
name with the `builtin` decorator. The decorator records the arity, so the
functions themselves can index `args` without counting first; the first
line of each docstring doubles as hover text in the language server.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Callable, Optional

from luna import SchemeValue
from luna.errors import SchemeTypeError
from luna.types.char import Char
from luna.types.environment import Environment
from luna.types.mstring import MString
from luna.types.pair import Pair
from luna.types.procedure import Builtin, Closure
from luna.types.symbol import Symbol

BuiltinFn = Callable[[Environment, list[SchemeValue]], SchemeValue]
Arity = int | tuple[int, Optional[int]]

BUILTINS: dict[str, Builtin] = {}


def builtin(name: str, arity: Arity) -> Callable[[BuiltinFn], BuiltinFn]:
    """Register the decorated function as the builtin `name`.

    `arity` is either an exact count or a (minimum, maximum) pair where a
    maximum of None means variadic.
    """
    min_args, max_args = (arity, arity) if isinstance(arity, int) else arity

    def decorator(fn: BuiltinFn) -> BuiltinFn:
        BUILTINS[name] = Builtin(name, fn, min_args, max_args)
        return fn

    return decorator


# -------------------------------
# Argument checks
# -------------------------------

def check_number(procedure: str, x: SchemeValue) -> int | Fraction | float:
    if isinstance(x, bool) or not isinstance(x, (int, Fraction, float)):
        raise SchemeTypeError(procedure, "a number", x)
    return x


def check_integer(procedure: str, x: SchemeValue) -> int | float:
    """Accept exact integers and integral floats such as 4.0."""
    if isinstance(x, bool):
        raise SchemeTypeError(procedure, "an integer", x)
    if isinstance(x, int) or (isinstance(x, float) and x.is_integer()):
        return x
    raise SchemeTypeError(procedure, "an integer", x)


def check_index(procedure: str, k: SchemeValue, size: int, inclusive: bool = False) -> int:
    """An exact, non-negative index below `size` (or equal to it when `inclusive`)."""
    if isinstance(k, bool) or not isinstance(k, int) or k < 0:
        raise SchemeTypeError(procedure, "an exact non-negative integer", k)
    if k > size or (k == size and not inclusive):
        raise SchemeTypeError(procedure, f"an index below {size + 1 if inclusive else size}", k)
    return k


def check_count(procedure: str, k: SchemeValue) -> int:
    if isinstance(k, bool) or not isinstance(k, int) or k < 0:
        raise SchemeTypeError(procedure, "an exact non-negative integer", k)
    return k


def check_pair(procedure: str, x: SchemeValue) -> Pair:
    if not isinstance(x, Pair):
        raise SchemeTypeError(procedure, "a pair", x)
    return x


def check_string(procedure: str, x: SchemeValue) -> MString:
    if not isinstance(x, MString):
        raise SchemeTypeError(procedure, "a string", x)
    return x


def check_char(procedure: str, x: SchemeValue) -> Char:
    if not isinstance(x, Char):
        raise SchemeTypeError(procedure, "a character", x)
    return x


def check_symbol(procedure: str, x: SchemeValue) -> Symbol:
    if not isinstance(x, Symbol):
        raise SchemeTypeError(procedure, "a symbol", x)
    return x


def check_vector(procedure: str, x: SchemeValue) -> list:
    if not isinstance(x, list):
        raise SchemeTypeError(procedure, "a vector", x)
    return x


def check_procedure(procedure: str, x: SchemeValue) -> Builtin | Closure:
    if not isinstance(x, (Builtin, Closure)):
        raise SchemeTypeError(procedure, "a procedure", x)
    return x


def check_range(procedure: str, args: list[SchemeValue], start_at: int, size: int) -> tuple[int, int]:
    """Read optional [start [end]] arguments beginning at args[start_at]."""
    start = check_index(procedure, args[start_at], size, inclusive=True) if len(args) > start_at else 0
    end = check_index(procedure, args[start_at + 1], size, inclusive=True) if len(args) > start_at + 1 else size
    if start > end:
        raise SchemeTypeError(procedure, f"a start index no greater than {end}", start)
    return start, end
