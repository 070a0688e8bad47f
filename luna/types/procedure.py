"""Procedure values: native builtins and user-defined closures."""

from __future__ import annotations

from io import StringIO
from typing import Callable, Optional

from luna import SchemeValue, SExpression
from luna.errors import ArityError
from luna.types.environment import Environment
from luna.types.pair import from_iterable
from luna.types.symbol import Symbol


class Builtin:
    """A primitive procedure implemented in Python.

    `fn` is called as fn(env, args) with the caller's environment and the
    list of already-evaluated arguments, after the arity has been checked.
    `max_args` of None means the procedure is variadic.
    """

    __slots__ = ("name", "fn", "min_args", "max_args")

    def __init__(self, name: str, fn: Callable[[Environment, list[SchemeValue]], SchemeValue],
                 min_args: int = 0, max_args: Optional[int] = None):
        self.name = name
        self.fn = fn
        self.min_args = min_args
        self.max_args = max_args

    @property
    def doc(self) -> str:
        return (self.fn.__doc__ or "").strip()

    def check_arity(self, given: int) -> None:
        if given < self.min_args or (self.max_args is not None and given > self.max_args):
            raise ArityError(self.name, self.min_args, given,
                             variadic=self.max_args is None, maximum=self.max_args)

    def __call__(self, env: Environment, args: list[SchemeValue]) -> SchemeValue:
        self.check_arity(len(args))
        return self.fn(env, args)

    def __repr__(self) -> str:
        return f"#<procedure {self.name}>"


def bind_formals(frame: Environment, params: list[Symbol], rest: Optional[Symbol],
                 args: list[SchemeValue], name: str) -> Environment:
    """Bind `args` positionally to `params` in `frame`.

    Surplus arguments are collected into a fresh list bound to `rest`.
    Raises ArityError naming `name` when the counts do not fit.
    """
    required = len(params)
    given = len(args)
    if given < required or (rest is None and given > required):
        raise ArityError(name, required, given, variadic=rest is not None)
    vars_ = frame.vars
    for param, arg in zip(params, args):
        vars_[param] = arg
    if rest is not None:
        vars_[rest] = from_iterable(args[required:])
    return frame


class Closure:
    """A user-defined procedure: formals, body and the environment it was created in."""

    __slots__ = ("params", "rest", "body", "env", "name")

    def __init__(self, params: list[Symbol], rest: Optional[Symbol], body: list[SExpression],
                 env: Environment, name: Optional[str] = None):
        self.params: list[Symbol] = params
        self.rest: Optional[Symbol] = rest
        # Body forms in order, never empty.
        self.body: list[SExpression] = body
        # The defining environment, not the caller's: this is what makes scope lexical.
        self.env: Environment = env
        self.name: Optional[str] = name

    def bind(self, args: list[SchemeValue]) -> Environment:
        """Return a fresh child of the captured environment with the arguments bound."""
        return bind_formals(Environment(self.env), self.params, self.rest, args,
                            self.name or "#<procedure>")

    def __repr__(self) -> str:
        with StringIO() as buffer:
            buffer.write("#<procedure")
            if self.name:
                buffer.write(" ")
                buffer.write(self.name)
            buffer.write(">")
            return buffer.getvalue()


Procedure = Builtin | Closure
