"""
  Lexical scanner for Luna source text.

- Lazy: `lex` is a generator, tokens are produced on demand
- Every token carries the span of characters it was read from
- Whitespace, `;` line comments and nested `#| ... |#` block comments are skipped
- `#;` is emitted as a token so the reader can discard the following datum
- String and character literals are decoded here; numbers are classified here
  and converted by the reader via `parse_number`

Malformed text raises LexError naming the offending span. Text that is merely
unfinished (an open string or block comment) is flagged `incomplete` so that
a REPL can ask for another line instead of reporting an error.
"""

from __future__ import annotations

import enum
import re
import string
from fractions import Fraction
from typing import Iterator, NamedTuple, Optional

from luna.errors import LexError, Span
from luna.types.char import CHAR_NAMES
from luna.types.number import Number, normalize, to_inexact


class TokenKind(enum.Enum):
    LPAREN = "`(`"
    RPAREN = "`)`"
    LBRACKET = "`[`"
    RBRACKET = "`]`"
    LBRACE = "`{`"
    RBRACE = "`}`"
    VECTOR = "`#(`"
    QUOTE = "`'`"
    QUASIQUOTE = "`` ` ``"
    UNQUOTE = "`,`"
    UNQUOTE_SPLICING = "`,@`"
    DOT = "`.`"
    DATUM_COMMENT = "`#;`"
    ATOM = "symbol"
    NUMBER = "number literal"
    STRING = "string literal"
    CHAR = "character literal"
    BOOLEAN = "boolean literal"

    def __str__(self) -> str:
        return self.value


class Token(NamedTuple):
    kind: TokenKind
    # Decoded text: string contents for STRING, the character for CHAR,
    # the symbol name for ATOM, otherwise the lexeme as written.
    text: str
    span: Span


TOKEN_RE = re.compile(
    r"(?P<whitespace>\s+)"
    r"|(?P<comment>;[^\n]*)"  # single-line comment
    r"|(?P<block_comment>\#\|)"  # nested block comment start
    r"|(?P<datum_comment>\#;)"  # datum comment
    r"|(?P<vector>\#\()"  # vector opener
    r"|(?P<lparen>\()"
    r"|(?P<rparen>\))"
    r"|(?P<lbracket>\[)"
    r"|(?P<rbracket>\])"
    r"|(?P<lbrace>\{)"
    r"|(?P<rbrace>\})"
    r"|(?P<quote>')"
    r"|(?P<quasiquote>`)"
    r"|(?P<unquote_splicing>,@)"
    r"|(?P<unquote>,)"
    r'|(?P<string>")'  # string opener; the body is scanned by hand
    r"|(?P<char>\#\\.[^\s()\[\]{}\";'`,|]*)"  # character literal, named or single-char
    r"|(?P<pipe_symbol>\|)"  # |symbol with spaces|
    r"|(?P<atom>[^\s()\[\]{}\";'`,|]+)",  # fallback: symbols, numbers, booleans, #-syntax
    re.DOTALL,
)

SIMPLE_KINDS: dict[str, TokenKind] = {
    "vector": TokenKind.VECTOR,
    "lparen": TokenKind.LPAREN,
    "rparen": TokenKind.RPAREN,
    "lbracket": TokenKind.LBRACKET,
    "rbracket": TokenKind.RBRACKET,
    "lbrace": TokenKind.LBRACE,
    "rbrace": TokenKind.RBRACE,
    "quote": TokenKind.QUOTE,
    "quasiquote": TokenKind.QUASIQUOTE,
    "unquote_splicing": TokenKind.UNQUOTE_SPLICING,
    "unquote": TokenKind.UNQUOTE,
    "datum_comment": TokenKind.DATUM_COMMENT,
}

STRING_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "a": "\a",
    "b": "\b",
    "0": "\0",
    "\\": "\\",
    '"': '"',
    "|": "|",
}

BOOLEANS = frozenset({"#t", "#f", "#true", "#false"})


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------

RADIX_PREFIXES: dict[str, int] = {"b": 2, "o": 8, "d": 10, "x": 16}

_DIGITS: dict[int, str] = {
    2: "[01]",
    8: "[0-7]",
    10: "[0-9]",
    16: "[0-9a-fA-F]",
}
_INTEGER_RE = {r: re.compile(rf"[+-]?{d}+") for r, d in _DIGITS.items()}
_RATIONAL_RE = {r: re.compile(rf"[+-]?{d}+/{d}+") for r, d in _DIGITS.items()}
_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+\.[0-9]*|\.[0-9]+|[0-9]+)(?:[eE][+-]?[0-9]+)?")
_SPECIALS: dict[str, float] = {
    "+inf.0": float("inf"),
    "-inf.0": float("-inf"),
    "+nan.0": float("nan"),
    "-nan.0": float("nan"),
}


def _parse_real(text: str, radix: int) -> Optional[Number]:
    lowered = text.lower()
    if lowered in _SPECIALS:
        return _SPECIALS[lowered]
    if _INTEGER_RE[radix].fullmatch(text):
        return int(text, radix)
    if _RATIONAL_RE[radix].fullmatch(text):
        num, den = text.split("/")
        denominator = int(den, radix)
        if denominator == 0:
            return None
        return normalize(Fraction(int(num, radix), denominator))
    if radix == 10 and _DECIMAL_RE.fullmatch(text):
        return float(text)
    return None


def parse_number(text: str, radix: int = 10) -> Optional[Number]:
    """Parse Scheme numeric syntax, returning None when `text` is not a number.

    Supports optional radix (#x #o #b #d) and exactness (#e #i) prefixes in
    either order, integers, rationals (n/d), decimals with exponents and the
    special values +inf.0, -inf.0 and +nan.0.
    """
    exactness: Optional[str] = None
    radix_seen = False
    while len(text) >= 2 and text[0] == "#":
        prefix = text[1].lower()
        if prefix in RADIX_PREFIXES and not radix_seen:
            radix = RADIX_PREFIXES[prefix]
            radix_seen = True
        elif prefix in "ei" and exactness is None:
            exactness = prefix
        else:
            return None
        text = text[2:]
    value = _parse_real(text, radix)
    if value is None:
        return None
    if exactness == "e":
        if isinstance(value, float):
            if text.lower() in _SPECIALS:
                return None
            # From the digits, so #e1e400 stays exact even though 1e400 is +inf.0.
            return normalize(Fraction(text))
        return value
    if exactness == "i":
        return to_inexact(value)
    return value


def _looks_numeric(text: str) -> bool:
    """True for atoms that can only be meant as numbers (no identifier starts this way)."""
    if text[0] == "#":
        return text[1:2].lower() in ("x", "o", "b", "d", "e", "i")
    if text[0] in string.digits:
        return True
    rest = text[1:] if text[0] in "+-" else text
    if rest[:1] == ".":
        rest = rest[1:]
    return bool(rest) and rest[0] in string.digits


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------

def position_from_offset(source: str, offset: int) -> tuple[int, int]:
    """Return the 0-based (line, column) of a character offset."""
    line = source.count("\n", 0, offset)
    last_nl = source.rfind("\n", 0, offset)
    col = offset if last_nl == -1 else offset - last_nl - 1
    return line, col


def _skip_shebang(source: str) -> int:
    if source.startswith("#!"):
        nl = source.find("\n")
        return len(source) if nl == -1 else nl + 1
    return 0


def _scan_block_comment(source: str, start: int) -> int:
    """Return the offset just past the block comment opened at `start`."""
    pos = start + 2
    depth = 1
    n = len(source)
    while depth > 0:
        if pos >= n:
            raise LexError("unterminated block comment", Span(start, n), incomplete=True)
        if source.startswith("#|", pos):
            depth += 1
            pos += 2
        elif source.startswith("|#", pos):
            depth -= 1
            pos += 2
        else:
            pos += 1
    return pos


def _scan_delimited(source: str, start: int, delimiter: str, what: str) -> tuple[str, int]:
    """Decode a string (or |symbol|) body opened at `start`; return (text, end offset)."""
    chunks: list[str] = []
    pos = start + 1
    n = len(source)
    while True:
        if pos >= n:
            raise LexError(f"unterminated {what}", Span(start, n), incomplete=True)
        c = source[pos]
        if c == delimiter:
            return "".join(chunks), pos + 1
        if c != "\\":
            chunks.append(c)
            pos += 1
            continue
        if pos + 1 >= n:
            raise LexError(f"unterminated {what}", Span(start, n), incomplete=True)
        esc = source[pos + 1]
        if esc in STRING_ESCAPES:
            chunks.append(STRING_ESCAPES[esc])
            pos += 2
        elif esc in "xX":
            end = source.find(";", pos + 2)
            digits = source[pos + 2:end] if end != -1 else ""
            if not digits or not re.fullmatch(r"[0-9a-fA-F]+", digits):
                raise LexError(f"invalid hex escape in {what}", Span(pos, min(n, pos + 2)))
            chunks.append(_code_point(digits, Span(pos, end + 1)))
            pos = end + 1
        elif esc in " \t\r\n":
            # Line continuation: \ <intraline whitespace> newline <intraline whitespace>
            ahead = pos + 1
            while ahead < n and source[ahead] in " \t":
                ahead += 1
            if ahead < n and source[ahead] == "\r":
                ahead += 1
            if ahead >= n or source[ahead] != "\n":
                raise LexError(f"invalid escape in {what}", Span(pos, ahead))
            ahead += 1
            while ahead < n and source[ahead] in " \t":
                ahead += 1
            pos = ahead
        else:
            raise LexError(f"unknown escape sequence \\{esc} in {what}", Span(pos, pos + 2))


def _code_point(digits: str, span: Span) -> str:
    code = int(digits, 16)
    if code > 0x10FFFF:
        raise LexError(f"character code #x{digits} is out of range", span)
    return chr(code)


def _decode_char(lexeme: str, span: Span) -> str:
    name = lexeme[2:]
    if len(name) == 1:
        return name
    if name in CHAR_NAMES:
        return CHAR_NAMES[name]
    if name[0] in "xX" and re.fullmatch(r"[0-9a-fA-F]+", name[1:]):
        return _code_point(name[1:], span)
    raise LexError(f"unknown character name #\\{name}", span)


def _classify_atom(text: str, span: Span) -> Token:
    if text == ".":
        return Token(TokenKind.DOT, text, span)
    if text.lower() in BOOLEANS:
        return Token(TokenKind.BOOLEAN, text.lower(), span)
    if parse_number(text) is not None:
        return Token(TokenKind.NUMBER, text, span)
    if _looks_numeric(text):
        raise LexError(f"invalid numeric literal {text}", span)
    if text[0] == "#":
        raise LexError(f"invalid # syntax {text}", span)
    return Token(TokenKind.ATOM, text, span)


def lex(source: str) -> Iterator[Token]:
    """Token generator: yields Tokens until the source is exhausted."""
    pos = _skip_shebang(source)
    n = len(source)

    while pos < n:
        m = TOKEN_RE.match(source, pos)
        if not m:
            raise LexError(f"unexpected character {source[pos]!r}", Span(pos, pos + 1))
        group = m.lastgroup
        start, end = m.span()
        span = Span(start, end)

        if group in ("whitespace", "comment"):
            pos = end
        elif group == "block_comment":
            pos = _scan_block_comment(source, start)
        elif group in SIMPLE_KINDS:
            yield Token(SIMPLE_KINDS[group], m.group(), span)
            pos = end
        elif group == "string":
            text, pos = _scan_delimited(source, start, '"', "string")
            yield Token(TokenKind.STRING, text, Span(start, pos))
        elif group == "pipe_symbol":
            text, pos = _scan_delimited(source, start, "|", "|symbol|")
            yield Token(TokenKind.ATOM, text, Span(start, pos))
        elif group == "char":
            yield Token(TokenKind.CHAR, _decode_char(m.group(), span), span)
            pos = end
        else:
            yield _classify_atom(m.group(), span)
            pos = end
