"""Vector builtins. Vectors are Python lists, mutated in place."""

from __future__ import annotations

from luna import SchemeValue
from luna.builtin.registry import builtin, check_count, check_index, check_range, check_vector
from luna.types.environment import Environment
from luna.types.markers import Unspecified
from luna.types.pair import from_iterable, to_list


@builtin("vector", (0, None))
def vector(env: Environment, args: list[SchemeValue]) -> list:
    """(vector obj ...) a fresh vector of the arguments."""
    return list(args)


@builtin("make-vector", (1, 2))
def make_vector(env: Environment, args: list[SchemeValue]) -> list:
    """(make-vector k [fill]) a fresh vector of k elements."""
    k = check_count("make-vector", args[0])
    fill = args[1] if len(args) > 1 else Unspecified
    return [fill] * k


@builtin("vector-length", 1)
def vector_length(env: Environment, args: list[SchemeValue]) -> int:
    """(vector-length vector)"""
    return len(check_vector("vector-length", args[0]))


@builtin("vector-ref", 2)
def vector_ref(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(vector-ref vector k) the k-th element, counting from zero."""
    vec = check_vector("vector-ref", args[0])
    return vec[check_index("vector-ref", args[1], len(vec))]


@builtin("vector-set!", 3)
def vector_set(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(vector-set! vector k obj) store obj as the k-th element."""
    vec = check_vector("vector-set!", args[0])
    vec[check_index("vector-set!", args[1], len(vec))] = args[2]
    return Unspecified


@builtin("vector->list", (1, 3))
def vector_to_list(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(vector->list vector [start [end]]) the elements as a fresh list."""
    vec = check_vector("vector->list", args[0])
    start, end = check_range("vector->list", args, 1, len(vec))
    return from_iterable(vec[start:end])


@builtin("list->vector", 1)
def list_to_vector(env: Environment, args: list[SchemeValue]) -> list:
    """(list->vector list) a fresh vector of the list's elements."""
    return to_list(args[0], "list->vector")


@builtin("vector-fill!", (2, 4))
def vector_fill(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(vector-fill! vector fill [start [end]]) store fill in every position."""
    vec = check_vector("vector-fill!", args[0])
    start, end = check_range("vector-fill!", args, 2, len(vec))
    vec[start:end] = [args[1]] * (end - start)
    return Unspecified


@builtin("vector-copy", (1, 3))
def vector_copy(env: Environment, args: list[SchemeValue]) -> list:
    """(vector-copy vector [start [end]]) a fresh copy of (part of) vector."""
    vec = check_vector("vector-copy", args[0])
    start, end = check_range("vector-copy", args, 1, len(vec))
    return vec[start:end]
