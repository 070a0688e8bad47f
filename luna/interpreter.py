from __future__ import annotations

import sys
from pathlib import Path

from luna import SchemeValue
from luna import config
from luna.builtin import register
from luna.errors import LunaSyntaxError, RecursionDepthExceeded
from luna.evaluation.evaluator import evaluate
from luna.reader.lexer import lex
from luna.reader.parser import TokenStream
from luna.types.environment import Environment
from luna.types.markers import Unspecified


def make_global_environment() -> Environment:
    """A fresh, parentless environment holding every builtin."""
    env = Environment()
    register(env)
    return env


def read_and_eval(source: str, env: Environment) -> SchemeValue:
    """Read each datum of `source` and evaluate it in `env`; return the last value.

    Data are read one at a time, so a syntax error further on in the source
    is raised only after the data before it have been evaluated.
    """
    result: SchemeValue = Unspecified
    stream = TokenStream(lex(source))
    try:
        for expr in stream.parse_all():
            result = evaluate(expr, env)
    except RecursionError:
        raise RecursionDepthExceeded() from None
    return result


def is_complete(source: str) -> bool:
    """False when `source` stops inside a list, string, block comment or after a quote."""
    try:
        for _ in TokenStream(lex(source)).parse_all():
            pass
    except LunaSyntaxError as e:
        return not e.incomplete
    except RecursionError:
        raise RecursionDepthExceeded() from None
    return True


def raise_recursion_limit(limit: int | None = None) -> None:
    """Raise (never lower) the host recursion limit used for non-tail recursion."""
    limit = limit or config.get_recursion_limit()
    if sys.getrecursionlimit() < limit:
        sys.setrecursionlimit(limit)


class Interpreter:
    """
    An interpreter session: one global environment shared by every call to
    `eval`, as in a REPL.

    prelude: None for bare builtins, 'auto' to load the files named by
    LUNA_PRELUDE_PATH (or the bundled prelude), or Scheme source to evaluate.
    """

    def __init__(self, prelude: str | None = None):
        raise_recursion_limit()
        self.env = make_global_environment()

        if prelude == 'auto':
            for path in config.get_prelude_paths():
                self.eval_file(path)
        elif prelude:
            self.eval_prelude(prelude)

    def eval_prelude(self, code: str) -> None:
        """Evaluate Scheme source for its definitions."""
        read_and_eval(code, self.env)

    def eval_file(self, path: str | Path) -> SchemeValue:
        source = Path(path).read_text(encoding='utf-8')
        return read_and_eval(source, self.env)

    def eval(self, code: str) -> SchemeValue:
        """Evaluate every expression in `code`; return the value of the last one."""
        return read_and_eval(code, self.env)
