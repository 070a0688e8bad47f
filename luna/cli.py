"""Command line runner: `luna FILE`, `luna -e EXPR` or an interactive REPL."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Optional, TextIO

from luna import __version__, config
from luna.errors import LunaError, LunaSyntaxError
from luna.interpreter import Interpreter, is_complete
from luna.printer import to_write_string
from luna.reader.lexer import position_from_offset
from luna.types.markers import Unspecified

logger = logging.getLogger(__name__)

PROMPT = "> "
CONTINUATION_PROMPT = "... "


def format_error(error: LunaError, source: Optional[str] = None, filename: Optional[str] = None) -> str:
    """Render an error as `error: [file:line:col: ]message`.

    Syntax errors carry a span; when the source text is at hand it is turned
    into a 1-based line and column.
    """
    location = ""
    if isinstance(error, LunaSyntaxError) and source is not None:
        line, col = position_from_offset(source, error.span.start)
        location = f"{line + 1}:{col + 1}: "
        if filename:
            location = f"{filename}:{location}"
    elif filename:
        location = f"{filename}: "
    return f"error: {location}{error.message}"


def run_file(interpreter: Interpreter, path: Path) -> int:
    try:
        source = path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"error: cannot read {path}: {e.strerror}", file=sys.stderr)
        return 1
    try:
        interpreter.eval(source)
    except LunaError as e:
        sys.stdout.flush()
        print(format_error(e, source, str(path)), file=sys.stderr)
        return 1
    return 0


def run_expression(interpreter: Interpreter, source: str) -> int:
    try:
        result = interpreter.eval(source)
        if result is not Unspecified:
            print(to_write_string(result))
    except LunaError as e:
        print(format_error(e, source), file=sys.stderr)
        return 1
    return 0


# -------------------------------
# REPL
# -------------------------------

class History:
    """readline history persisted to a file; inert where readline is missing."""

    def __init__(self, path: Path):
        self.path = path
        self.readline = None

    def load(self) -> None:
        try:
            import readline
        except ImportError:
            logger.debug("readline is not available; history disabled")
            return
        self.readline = readline
        try:
            readline.read_history_file(str(self.path))
        except FileNotFoundError:
            logger.debug("no history file at %s", self.path)
        except OSError as e:
            logger.warning("could not read history from %s: %s", self.path, e)

    def save(self) -> None:
        if self.readline is None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.readline.write_history_file(str(self.path))
        except OSError as e:
            logger.warning("could not save history to %s: %s", self.path, e)


def repl(interpreter: Interpreter, input_fn: Callable[[str], str] = input, output: TextIO | None = None) -> int:
    """Read-eval-print loop. Returns the exit status once input ends."""
    out = output or sys.stdout
    print(f"Luna {__version__} (Ctrl-D to exit)", file=out)
    buffer: list[str] = []
    while True:
        try:
            line = input_fn(CONTINUATION_PROMPT if buffer else PROMPT)
        except EOFError:
            print(file=out)
            return 0
        except KeyboardInterrupt:
            # Abandon the expression being typed, keep the session.
            print(file=out)
            buffer.clear()
            continue

        buffer.append(line)
        source = "\n".join(buffer)
        try:
            if not is_complete(source):
                continue
            buffer.clear()
            result = interpreter.eval(source)
            if result is not Unspecified:
                print(to_write_string(result), file=out)
        except LunaError as e:
            buffer.clear()
            out.flush()
            print(format_error(e, source), file=out)
        except KeyboardInterrupt:
            buffer.clear()
            print("interrupted", file=out)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="luna",
        description="Run Luna (Scheme) programs or start an interactive session",
    )
    parser.add_argument(
        "file",
        nargs="?",
        type=Path,
        help="Scheme source file to run; starts a REPL when omitted",
    )
    parser.add_argument(
        "-e",
        "--eval",
        dest="expression",
        metavar="EXPR",
        help="Evaluate EXPR, print its value and exit",
    )
    parser.add_argument(
        "--no-history",
        action="store_true",
        help="Do not read or write the REPL history file",
    )
    parser.add_argument(
        "--no-prelude",
        action="store_true",
        help="Start with the builtins only, without loading the prelude",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debugging information to stderr",
    )
    parser.add_argument("--version", action="version", version=f"luna {__version__}")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        interpreter = Interpreter(prelude=None if args.no_prelude else "auto")
    except (LunaError, OSError, ValueError) as e:
        print(f"error: could not start the interpreter: {e}", file=sys.stderr)
        return 1

    if args.expression is not None:
        return run_expression(interpreter, args.expression)
    if args.file is not None:
        logger.debug("running %s", args.file)
        return run_file(interpreter, args.file)

    history = None if args.no_history else History(config.get_history_file())
    if history is not None:
        history.load()
    try:
        return repl(interpreter)
    finally:
        if history is not None:
            history.save()


if __name__ == "__main__":
    sys.exit(main())
