"""External representations of Scheme values.

`write` style is meant to be read back: strings are quoted and escaped,
characters use #\\ notation. `display` style is for humans: strings and
characters are emitted as their raw contents.
"""

from __future__ import annotations

import math
from fractions import Fraction
from functools import lru_cache
from io import StringIO

from luna import SchemeValue
from luna.errors import LexError
from luna.reader.lexer import TokenKind, lex
from luna.types.char import Char, NAMES_BY_CHAR
from luna.types.environment import Environment
from luna.types.markers import EofType, UnspecifiedType
from luna.types.mstring import MString
from luna.types.nil import NilType
from luna.types.pair import Pair
from luna.types.procedure import Builtin, Closure
from luna.types.promise import Promise
from luna.types.symbol import Symbol
from luna.types.values import Values

STRING_ESCAPES: dict[str, str] = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\a": "\\a",
    "\b": "\\b",
    "\0": "\\0",
}

# Inside |...|, which write uses for symbols that would not read back bare.
SYMBOL_ESCAPES: dict[str, str] = {
    "\\": "\\\\",
    "|": "\\|",
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
}


def format_number(x: int | float | Fraction) -> str:
    if isinstance(x, float):
        if math.isnan(x):
            return "+nan.0"
        if math.isinf(x):
            return "+inf.0" if x > 0 else "-inf.0"
        return repr(x).replace("e+", "e")
    return str(x)


def _write_string(s: str) -> str:
    return '"' + "".join(STRING_ESCAPES.get(c, c) for c in s) + '"'


def _write_char(c: str) -> str:
    if c in NAMES_BY_CHAR:
        return "#\\" + NAMES_BY_CHAR[c]
    if not c.isprintable():
        return f"#\\x{ord(c):x}"
    return "#\\" + c


@lru_cache(maxsize=4096)
def _reads_as_symbol(name: str) -> bool:
    """True when `name` written bare reads back as the same symbol."""
    try:
        tokens = list(lex(name))
    except LexError:
        return False
    return len(tokens) == 1 and tokens[0].kind is TokenKind.ATOM and tokens[0].text == name


def _write_symbol(name: str) -> str:
    if _reads_as_symbol(name):
        return name
    return "|" + "".join(SYMBOL_ESCAPES.get(c, c) for c in name) + "|"


class _Text(str):
    """Literal output queued on the render stack, as opposed to a value still to render."""


def _cycle_targets(value: SchemeValue) -> set[int]:
    """ids of the pairs and vectors that can be reached again from themselves.

    Only these get datum labels; structure that is merely shared is written
    out in full at each occurrence.
    """
    targets: set[int] = set()
    on_path: set[int] = set()
    finished: set[int] = set()
    stack: list[tuple[SchemeValue, bool]] = [(value, False)]
    while stack:
        node, leaving = stack.pop()
        key = id(node)
        if leaving:
            on_path.discard(key)
            finished.add(key)
            continue
        if isinstance(node, Pair):
            children = (node.car, node.cdr)
        elif isinstance(node, list):
            children = node
        elif isinstance(node, Values):
            children = node.items
        else:
            continue
        if key in on_path:
            targets.add(key)
            continue
        if key in finished:
            continue
        on_path.add(key)
        stack.append((node, True))
        stack.extend((child, False) for child in reversed(children))
    return targets


def _push_sequence(stack: list, items: list[SchemeValue], closer: str) -> None:
    """Queue `items` separated by spaces, followed by `closer`."""
    stack.append(_Text(closer))
    for i in range(len(items) - 1, -1, -1):
        stack.append(items[i])
        if i:
            stack.append(_Text(" "))


def _render(value: SchemeValue, write: bool, buffer: StringIO) -> None:
    # An explicit stack keeps deeply nested data off the Python call stack.
    targets = _cycle_targets(value)
    labels: dict[int, int] = {}
    stack: list = [value]
    while stack:
        value = stack.pop()
        if isinstance(value, _Text):
            buffer.write(value)
            continue
        if isinstance(value, (Pair, list)) and id(value) in targets:
            if id(value) in labels:
                buffer.write(f"#{labels[id(value)]}#")
                continue
            labels[id(value)] = len(labels)
            buffer.write(f"#{labels[id(value)]}=")

        match value:
            case bool():
                buffer.write("#t" if value else "#f")
            case int() | float() | Fraction():
                buffer.write(format_number(value))
            case Symbol():
                buffer.write(_write_symbol(value.id) if write else value.id)
            case MString():
                buffer.write(_write_string(value.value) if write else value.value)
            case Char():
                buffer.write(_write_char(value.value) if write else value.value)
            case NilType():
                buffer.write("()")
            case Pair():
                buffer.write("(")
                items = [value.car]
                node = value.cdr
                # A labelled pair in the spine is written as a dotted tail.
                while isinstance(node, Pair) and id(node) not in targets:
                    items.append(node.car)
                    node = node.cdr
                stack.append(_Text(")"))
                if not isinstance(node, NilType):
                    stack.append(node)
                    stack.append(_Text(" . "))
                _push_sequence(stack, items, "")
            case list():
                buffer.write("#(")
                _push_sequence(stack, value, ")")
            case Closure() | Builtin():
                buffer.write(repr(value))
            case Values():
                _push_sequence(stack, list(value.items), "")
            case Promise() | UnspecifiedType() | EofType():
                buffer.write(repr(value))
            case Environment():
                buffer.write("#<environment>")
            case str():
                # Host strings only reach here through Python callers.
                buffer.write(_write_string(value) if write else value)
            case _:
                buffer.write(f"#<python {value!r}>")


def to_write_string(value: SchemeValue) -> str:
    """Machine-readable representation, as produced by `write`."""
    with StringIO() as buffer:
        _render(value, True, buffer)
        return buffer.getvalue()


def to_display_string(value: SchemeValue) -> str:
    """Human-readable representation, as produced by `display`."""
    with StringIO() as buffer:
        _render(value, False, buffer)
        return buffer.getvalue()
