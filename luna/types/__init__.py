"""Runtime value types shared by the reader, evaluator and builtins."""

from luna.types.char import Char
from luna.types.environment import Environment
from luna.types.markers import Eof, Unassigned, Unspecified
from luna.types.mstring import MString
from luna.types.nil import Nil, NilType
from luna.types.pair import Pair, from_iterable, is_list, make_list, to_list
from luna.types.procedure import Builtin, Closure, Procedure
from luna.types.promise import Promise
from luna.types.symbol import Symbol
from luna.types.tail_call import TailCall
from luna.types.values import Values

__all__ = [
    "Builtin",
    "Char",
    "Closure",
    "Environment",
    "Eof",
    "MString",
    "Nil",
    "NilType",
    "Pair",
    "Procedure",
    "Promise",
    "Symbol",
    "TailCall",
    "Unassigned",
    "Unspecified",
    "Values",
    "from_iterable",
    "is_list",
    "make_list",
    "to_list",
]
