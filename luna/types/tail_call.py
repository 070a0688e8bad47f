from __future__ import annotations

from luna import SExpression


class TailCall:
    """An (expression, environment) pair handed back to the trampoline.

    Special forms and procedure application return one of these instead of
    evaluating an expression in tail position themselves; `evaluate` then
    loops on it, so tail calls never grow the Python stack.
    """

    __slots__ = ("expr", "env")

    def __init__(self, expr: SExpression, env):
        self.expr = expr
        self.env = env

    def __repr__(self):
        return f"TailCall({self.expr!r})"
