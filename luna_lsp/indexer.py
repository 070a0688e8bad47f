from __future__ import annotations

"""
Static indexer for Luna source files; nothing is ever evaluated.

The index is built from luna's own lexer and reader so that editors see
exactly the syntax errors the interpreter would report:
- problems: the first lex/read error with its span (reading stops there)
- definitions: top-level (define name ...), (define (name . args) ...) and
  curried (define ((name a) b) ...) forms, found by scanning tokens so a
  buffer with an error further down still yields its earlier definitions
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from luna.builtin import BUILTINS
from luna.errors import LunaSyntaxError
from luna.evaluation.special_forms import SPECIAL_FORMS
from luna.reader.lexer import Token, TokenKind, lex, position_from_offset
from luna.reader.parser import TokenStream

LIST_OPENERS = (TokenKind.LPAREN, TokenKind.LBRACKET, TokenKind.LBRACE)
OPENERS = LIST_OPENERS + (TokenKind.VECTOR,)
CLOSERS = (TokenKind.RPAREN, TokenKind.RBRACKET, TokenKind.RBRACE)
LAMBDA_KEYWORDS = ("lambda", "named-lambda")


@dataclass
class SymbolDef:
    name: str
    kind: str  # "variable" | "function"
    line: int
    col: int


@dataclass
class SyntaxProblem:
    message: str
    start: Tuple[int, int]  # (line, col), 0-based
    end: Tuple[int, int]
    incomplete: bool


@dataclass
class DocumentIndex:
    symbols: Dict[str, SymbolDef] = field(default_factory=dict)
    problems: List[SyntaxProblem] = field(default_factory=list)


def _problem(text: str, error: LunaSyntaxError) -> SyntaxProblem:
    start = position_from_offset(text, error.span.start)
    end = position_from_offset(text, max(error.span.end, error.span.start + 1))
    return SyntaxProblem(error.message, start, end, error.incomplete)


def _tokens(text: str, idx: DocumentIndex) -> List[Token]:
    tokens: List[Token] = []
    try:
        for tok in lex(text):
            tokens.append(tok)
    except LunaSyntaxError as e:
        idx.problems.append(_problem(text, e))
    return tokens


def _definition(tokens: List[Token], i: int) -> Optional[Tuple[Token, str]]:
    """Given tokens[i] == 'define' at the head of a top-level form, find the defined name."""
    j = i + 1
    if j >= len(tokens):
        return None
    tok = tokens[j]
    if tok.kind is TokenKind.ATOM:
        # (define name (lambda ...)) still counts as a function
        is_fn = (
            j + 2 < len(tokens)
            and tokens[j + 1].kind in OPENERS
            and tokens[j + 2].kind is TokenKind.ATOM
            and tokens[j + 2].text in LAMBDA_KEYWORDS
        )
        return tok, "function" if is_fn else "variable"
    while j < len(tokens) and tokens[j].kind in LIST_OPENERS:
        j += 1
    if j < len(tokens) and tokens[j].kind is TokenKind.ATOM:
        return tokens[j], "function"
    return None


def build_index(text: str) -> DocumentIndex:
    idx = DocumentIndex()
    tokens = _tokens(text, idx)

    depth = 0
    for i, tok in enumerate(tokens):
        if tok.kind in OPENERS:
            if (
                depth == 0
                and i + 1 < len(tokens)
                and tokens[i + 1].kind is TokenKind.ATOM
                and tokens[i + 1].text == "define"
            ):
                found = _definition(tokens, i + 1)
                if found is not None:
                    name_tok, kind = found
                    line, col = position_from_offset(text, name_tok.span.start)
                    idx.symbols.setdefault(name_tok.text, SymbolDef(name_tok.text, kind, line, col))
            depth += 1
        elif tok.kind in CLOSERS:
            depth = max(0, depth - 1)

    # Only a clean token stream is worth reading for structural errors.
    if not idx.problems:
        try:
            for _ in TokenStream(iter(tokens)).parse_all():
                pass
        except LunaSyntaxError as e:
            idx.problems.append(_problem(text, e))
        except RecursionError:
            idx.problems.append(SyntaxProblem("nesting too deep to read", (0, 0), (0, 1), False))

    return idx


def _split_doc(doc: str) -> Tuple[str, str]:
    """Split the first docstring line into its `(name args...)` usage and the text after it."""
    first = doc.splitlines()[0] if doc else ""
    if not first.startswith("("):
        return "", first
    depth = 0
    for i, ch in enumerate(first):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return first[: i + 1], first[i + 1:].strip()
    return first, ""


def _signature(doc: str, name: str) -> str:
    usage, _ = _split_doc(doc)
    if not usage:
        return f"({name} ...)"
    # Aliases share a docstring with the procedure they alias.
    head, _, rest = usage[1:].partition(" ")
    if head.rstrip(")") != name:
        return f"({name} {rest}" if rest else f"({name})"
    return usage


# Builtin signatures and descriptions for hover/signature help without eval,
# taken from the first docstring line of each builtin.
BUILTIN_SIGNATURES: Dict[str, str] = {
    name: _signature(proc.doc, name) for name, proc in sorted(BUILTINS.items())
}
BUILTIN_DOCS: Dict[str, str] = {
    name: _split_doc(proc.doc)[1] for name, proc in sorted(BUILTINS.items())
}
SPECIAL_FORM_NAMES: List[str] = sorted(sym.id for sym in SPECIAL_FORMS)


# --- Text helpers (0-based line and character) ---

WORD_BREAKS = " \t()[]{}\"';`,\n\r"


def line_prefix(text: str, line: int, character: int) -> str:
    """The text from the start of `line` up to `character`."""
    lines = text.splitlines(True)
    if line >= len(lines):
        return ""
    return lines[line][:character]


def word_at(text: str, line: int, character: int) -> Optional[str]:
    """The identifier under the cursor, if any."""
    lines = text.splitlines(True)
    if line >= len(lines):
        return None
    row = lines[line]
    start = min(character, len(row))
    while start > 0 and row[start - 1] not in WORD_BREAKS:
        start -= 1
    end = min(character, len(row))
    while end < len(row) and row[end] not in WORD_BREAKS:
        end += 1
    return row[start:end] or None


def callee_before(prefix: str) -> Optional[str]:
    """Operator of the innermost list still open at the end of `prefix`."""
    depth = 0
    for i in range(len(prefix) - 1, -1, -1):
        ch = prefix[i]
        if ch in ")]}":
            depth += 1
        elif ch in "([{":
            if depth == 0:
                tokens = [t for t in re.split(r"[\s()\[\]{}]+", prefix[i + 1:]) if t]
                return tokens[0] if tokens else None
            depth -= 1
    return None
