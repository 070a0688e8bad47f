from __future__ import annotations

from luna import SchemeValue, SExpression


class Promise:
    """A delayed computation created by `delay`, `delay-force` or `make-promise`.

    Until forced it holds the expression and its environment; afterwards only
    the value is kept so the environment can be collected.
    """

    __slots__ = ("done", "value", "expr", "env", "is_delay_force")

    def __init__(self, expr: SExpression = None, env=None, *, is_delay_force: bool = False,
                 done: bool = False, value: SchemeValue = None):
        self.done = done
        self.value = value
        self.expr = expr
        self.env = env
        self.is_delay_force = is_delay_force

    def resolve(self, value: SchemeValue) -> None:
        self.done = True
        self.value = value
        self.expr = None
        self.env = None

    def __repr__(self):
        return "#<promise>"
