"""Error hierarchy for Luna.

Two layers sit under a common base:

- LunaSyntaxError: malformed source text (LexError, ReadError and its kinds).
  These carry the character span of the offending text and an `incomplete`
  flag telling a REPL that more input may fix the problem.
- EvalError: well-formed code that fails while running. Each kind keeps the
  structured details (symbol name, arities, offending value) next to the
  rendered message so front ends can build their own diagnostics.
"""

from __future__ import annotations

from typing import Any, NamedTuple


class Span(NamedTuple):
    """Half-open range [start, end) of character offsets in the source."""

    start: int
    end: int


class LunaError(Exception):
    """Base class for all Luna errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# --- Syntax errors ---

class LunaSyntaxError(LunaError):
    """Raised when source text cannot be turned into data"""

    def __init__(self, message: str, span: Span, incomplete: bool = False):
        super().__init__(message)
        self.span = span
        self.incomplete = incomplete


class LexError(LunaSyntaxError):
    """Raised when the source contains text that is not a valid token"""


class ReadError(LunaSyntaxError):
    """Raised when tokens do not form a valid datum"""


class UnexpectedToken(ReadError):
    """A token appeared where it cannot start or continue a datum"""

    def __init__(self, found: str, span: Span, detail: str | None = None):
        message = f"unexpected {found}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, span)
        self.found = found


class UnexpectedBracket(ReadError):
    """A list was closed with the wrong kind of bracket"""

    def __init__(self, expected: str, found: str, span: Span):
        super().__init__(f"expected {expected} to close the list, found {found} instead", span)
        self.expected = expected
        self.found = found


class UnexpectedEof(ReadError):
    """Input ended in the middle of a datum; more text may complete it"""

    def __init__(self, message: str, span: Span):
        super().__init__(message, span, incomplete=True)


# --- Evaluation errors ---

def _show(value: Any) -> str:
    # Local import: the printer depends on the value types, which depend on us.
    from luna.printer import to_write_string

    return to_write_string(value)


class EvalError(LunaError):
    """Raised when evaluation of well-formed code fails"""


class UnboundVariable(EvalError):
    """Raised when a symbol is used but bound in no enclosing frame"""

    def __init__(self, name: Any, message: str | None = None):
        super().__init__(message or f"unbound variable: {name}")
        self.name = name


class UnassignedVariable(UnboundVariable):
    """Raised when a letrec variable is referenced before its initializer ran"""

    def __init__(self, name: Any):
        super().__init__(name, f"variable used before its definition: {name}")


class SchemeTypeError(EvalError):
    """Raised when a procedure receives an operand of the wrong kind"""

    def __init__(self, procedure: str, expected: str, value: Any):
        super().__init__(f"{procedure}: expected {expected}, got {_show(value)}")
        self.procedure = procedure
        self.expected = expected
        self.value = value


class ArityError(EvalError):
    """Raised when a procedure is called with the wrong number of arguments"""

    def __init__(self, procedure: str, expected: int, given: int, variadic: bool = False,
                 maximum: int | None = None):
        if variadic:
            wanted = f"at least {expected}"
        elif maximum is not None and maximum != expected:
            wanted = f"between {expected} and {maximum}"
        else:
            wanted = str(expected)
        noun = "argument" if wanted in ("1", "at least 1") else "arguments"
        super().__init__(f"{procedure}: expected {wanted} {noun}, given {given}")
        self.procedure = procedure
        self.expected = expected
        self.given = given
        self.variadic = variadic
        self.maximum = maximum


class DivisionByZero(EvalError):
    """Raised on exact division by zero"""

    def __init__(self, procedure: str):
        super().__init__(f"{procedure}: division by zero")
        self.procedure = procedure


class MalformedSpecialForm(EvalError):
    """Raised when a special form does not have the shape its keyword requires"""

    def __init__(self, keyword: str, detail: str):
        super().__init__(f"{keyword}: {detail}")
        self.keyword = keyword
        self.detail = detail


class ApplyNonProcedure(EvalError):
    """Raised when the operator of an application is not a procedure"""

    def __init__(self, value: Any):
        super().__init__(f"attempt to apply non-procedure {_show(value)}")
        self.value = value


class ApplyNilError(EvalError):
    """Raised when the empty list is evaluated as an application"""

    def __init__(self):
        super().__init__("attempt to evaluate the empty combination ()")


class SchemeError(EvalError):
    """Raised by the `error` procedure with a message and irritants"""

    def __init__(self, message: str, irritants: tuple = ()):
        text = message
        if irritants:
            text = f"{message} {' '.join(_show(i) for i in irritants)}"
        super().__init__(text)
        self.reason = message
        self.irritants = irritants


class RecursionDepthExceeded(EvalError):
    """Raised when non-tail recursion exhausts the host stack"""

    def __init__(self):
        super().__init__("maximum recursion depth exceeded")
