"""Builtin procedures.

Importing the submodules fills the BUILTINS table; `register` installs the
whole table into an environment.
"""

from luna.builtin import control, io, lists, numeric, predicates, strings, vectors  # noqa: F401
from luna.builtin.registry import BUILTINS, builtin
from luna.types.environment import Environment
from luna.types.symbol import Symbol


def register(env: Environment):
    env.update({Symbol(name): proc for name, proc in BUILTINS.items()})


__all__ = ["BUILTINS", "builtin", "register"]
