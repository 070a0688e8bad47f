# Core type aliases for Luna's data model.
# Scheme data is represented with a small set of Python types (see luna.types):
# Pair/Nil for lists, Symbol for interned identifiers, int/Fraction/float for
# numbers, bool, Char, MString for mutable strings and list for vectors.
#
# Naming guidance:
# - SExpression: Use in reader/special-form code to denote syntactic forms (code-as-data).
# - SchemeValue: Use in evaluator/runtime code to denote evaluated values.
# Both aliases resolve to `Any` and are interchangeable, since code is data.

from typing import Any, Callable

# Runtime value alias
SchemeValue = Any
# Forms alias (used interchangeably with SchemeValue)
SExpression = SchemeValue

# Evaluator function type: the trampolined evaluator passed to special forms
EvaluatorFn = Callable[..., SchemeValue]

__version__ = "0.1.0"
