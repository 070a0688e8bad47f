"""Control builtins: application, mapping, multiple values, promises, errors
and access to the evaluator itself.

Procedures that end by applying a procedure (apply, call-with-values, eval)
hand back a TailCall, so they keep proper tail calls when used in tail
position. The others run callbacks to completion through `call`.
"""

from __future__ import annotations

from luna import SchemeValue
from luna.builtin.registry import builtin, check_procedure
from luna.errors import SchemeError, SchemeTypeError
from luna.evaluation.apply import apply as apply_procedure
from luna.evaluation.evaluator import call, evaluate
from luna.printer import to_display_string
from luna.types.environment import Environment
from luna.types.markers import Unspecified
from luna.types.mstring import MString
from luna.types.pair import from_iterable, to_list
from luna.types.promise import Promise
from luna.types.tail_call import TailCall
from luna.types.values import Values


@builtin("apply", (2, None))
def apply(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(apply proc arg ... list) call proc with the args followed by the elements of list."""
    proc = check_procedure("apply", args[0])
    spread = list(args[1:-1]) + to_list(args[-1], "apply")
    return apply_procedure(proc, spread, env, evaluate)


def _columns(procedure: str, lists: list[SchemeValue]) -> list[list[SchemeValue]]:
    # Iteration stops at the shortest list.
    columns = [to_list(lst, procedure) for lst in lists]
    return [list(row) for row in zip(*columns)]


@builtin("map", (2, None))
def map_(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(map proc list1 list2 ...) a list of proc applied element-wise."""
    proc = check_procedure("map", args[0])
    return from_iterable([call(proc, row, env) for row in _columns("map", args[1:])])


@builtin("for-each", (2, None))
def for_each(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(for-each proc list1 list2 ...) apply proc element-wise for its effects."""
    proc = check_procedure("for-each", args[0])
    for row in _columns("for-each", args[1:]):
        call(proc, row, env)
    return Unspecified


@builtin("vector-map", (2, None))
def vector_map(env: Environment, args: list[SchemeValue]) -> list:
    """(vector-map proc vector1 vector2 ...) a fresh vector of proc applied element-wise."""
    proc = check_procedure("vector-map", args[0])
    for vec in args[1:]:
        if not isinstance(vec, list):
            raise SchemeTypeError("vector-map", "a vector", vec)
    return [call(proc, list(row), env) for row in zip(*args[1:])]


@builtin("vector-for-each", (2, None))
def vector_for_each(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(vector-for-each proc vector1 vector2 ...)"""
    proc = check_procedure("vector-for-each", args[0])
    for vec in args[1:]:
        if not isinstance(vec, list):
            raise SchemeTypeError("vector-for-each", "a vector", vec)
    for row in zip(*args[1:]):
        call(proc, list(row), env)
    return Unspecified


# -------------------------------
# Multiple values
# -------------------------------

@builtin("values", (0, None))
def values(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(values obj ...) deliver any number of values to the continuation."""
    if len(args) == 1:
        return args[0]
    return Values(tuple(args))


@builtin("call-with-values", 2)
def call_with_values(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(call-with-values producer consumer) call consumer with the values producer returns."""
    producer = check_procedure("call-with-values", args[0])
    consumer = check_procedure("call-with-values", args[1])
    result = call(producer, [], env)
    items = list(result.items) if isinstance(result, Values) else [result]
    return apply_procedure(consumer, items, env, evaluate)


# -------------------------------
# Promises
# -------------------------------

@builtin("force", 1)
def force(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(force promise) the value of promise, computing it on first use.

    Chains of delay-force are followed in a loop, not by recursion.
    """
    promise = args[0]
    if not isinstance(promise, Promise):
        return promise
    while not promise.done:
        value = evaluate(promise.expr, promise.env)
        if promise.done:
            # Forced again from inside its own body; the first result wins.
            break
        if not promise.is_delay_force:
            promise.resolve(value)
            break
        if not isinstance(value, Promise):
            raise SchemeTypeError("force", "a promise from delay-force", value)
        if value.done:
            promise.resolve(value.value)
        else:
            promise.expr = value.expr
            promise.env = value.env
            promise.is_delay_force = value.is_delay_force
    return promise.value


@builtin("make-promise", 1)
def make_promise(env: Environment, args: list[SchemeValue]) -> Promise:
    """(make-promise obj) an already-forced promise of obj; a promise is returned unchanged."""
    if isinstance(args[0], Promise):
        return args[0]
    return Promise(done=True, value=args[0])


@builtin("promise?", 1)
def is_promise(env: Environment, args: list[SchemeValue]) -> bool:
    """(promise? obj)"""
    return isinstance(args[0], Promise)


# -------------------------------
# Errors and the evaluator
# -------------------------------

@builtin("error", (1, None))
def error(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(error message obj ...) signal an error with a message and irritants."""
    message = args[0]
    text = message.value if isinstance(message, MString) else to_display_string(message)
    raise SchemeError(text, tuple(args[1:]))


@builtin("eval", (1, 2))
def eval_(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(eval expr [environment]) evaluate expr, by default in the global environment."""
    target = args[1] if len(args) > 1 else env.root()
    if not isinstance(target, Environment):
        raise SchemeTypeError("eval", "an environment", target)
    return TailCall(args[0], target)


@builtin("interaction-environment", 0)
def interaction_environment(env: Environment, args: list[SchemeValue]) -> Environment:
    """(interaction-environment) the global environment."""
    return env.root()


@builtin("exit", (0, 1))
def exit_(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(exit [status]) leave the program; #t or no argument means success."""
    status = args[0] if args else True
    if status is True:
        raise SystemExit(0)
    if status is False:
        raise SystemExit(1)
    if isinstance(status, int):
        raise SystemExit(status)
    raise SchemeTypeError("exit", "a boolean or an exact integer", status)
