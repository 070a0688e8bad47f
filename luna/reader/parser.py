"""
  Reader: turns a token stream into Scheme data.

- Streaming: `parse_expr` consumes exactly the tokens of one datum
- Lists are chains of Pair ending in Nil; dotted tails end in any datum
- `(` ... `)`, `[` ... `]` and `{` ... `}` all delimit lists; the closer must match
- Vectors `#(` ... `)` become Python lists
- 'x `x ,x ,@x become (quote x) (quasiquote x) (unquote x) (unquote-splicing x)
- `#;` discards the datum that follows it

Errors: UnexpectedToken for tokens that cannot appear where they do,
UnexpectedBracket for a mismatched closer and UnexpectedEof when the input
stops inside a datum (the only one flagged `incomplete`).
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from luna import SExpression
from luna.errors import Span, UnexpectedBracket, UnexpectedEof, UnexpectedToken
from luna.reader.lexer import Token, TokenKind, lex, parse_number
from luna.types.char import Char
from luna.types.mstring import MString
from luna.types.nil import Nil
from luna.types.pair import Pair, from_iterable
from luna.types.symbol import Symbol

QUOTE_FORMS: dict[TokenKind, Symbol] = {
    TokenKind.QUOTE: Symbol("quote"),
    TokenKind.QUASIQUOTE: Symbol("quasiquote"),
    TokenKind.UNQUOTE: Symbol("unquote"),
    TokenKind.UNQUOTE_SPLICING: Symbol("unquote-splicing"),
}

CLOSERS: dict[TokenKind, TokenKind] = {
    TokenKind.LPAREN: TokenKind.RPAREN,
    TokenKind.LBRACKET: TokenKind.RBRACKET,
    TokenKind.LBRACE: TokenKind.RBRACE,
    TokenKind.VECTOR: TokenKind.RPAREN,
}

CLOSING = frozenset({TokenKind.RPAREN, TokenKind.RBRACKET, TokenKind.RBRACE})


class TokenStream:
    def __init__(self, token_iter: Iterable[Token]):
        self.tokens: Iterator[Token] = iter(token_iter)
        self.buffer: list[Token] = []
        self.last_end = 0

    def peek(self) -> Optional[Token]:
        if not self.buffer:
            tok = next(self.tokens, None)
            if tok is None:
                return None
            self.buffer.append(tok)
        return self.buffer[0]

    def advance(self) -> Optional[Token]:
        tok = self.buffer.pop(0) if self.buffer else next(self.tokens, None)
        if tok is not None:
            self.last_end = tok.span.end
        return tok

    def parse_expr(self) -> Optional[SExpression]:
        """Read the next datum, or return None when the input is exhausted."""
        self._skip_datum_comments()
        if self.peek() is None:
            return None
        return self._parse_datum()

    def parse_all(self) -> Iterator[SExpression]:
        while True:
            expr = self.parse_expr()
            if expr is None:
                break
            yield expr

    # ------------------------------------------------------------------

    def _eof(self, what: str, start: int) -> UnexpectedEof:
        return UnexpectedEof(f"unexpected end of input {what}", Span(start, self.last_end))

    def _skip_datum_comments(self) -> None:
        while True:
            tok = self.peek()
            if tok is None or tok.kind is not TokenKind.DATUM_COMMENT:
                return
            self.advance()
            self._skip_datum_comments()
            if self.peek() is None:
                raise self._eof("after #;", tok.span.start)
            self._parse_datum()

    def _parse_datum(self) -> SExpression:
        tok = self.advance()
        if tok is None:
            raise self._eof("while reading a datum", self.last_end)

        match tok.kind:
            case TokenKind.NUMBER:
                return parse_number(tok.text)
            case TokenKind.ATOM:
                return Symbol(tok.text)
            case TokenKind.STRING:
                return MString(tok.text)
            case TokenKind.CHAR:
                return Char(tok.text)
            case TokenKind.BOOLEAN:
                return tok.text in ("#t", "#true")
            case TokenKind.LPAREN | TokenKind.LBRACKET | TokenKind.LBRACE:
                return self._parse_list(tok)
            case TokenKind.VECTOR:
                return self._parse_vector(tok)
            case TokenKind.QUOTE | TokenKind.QUASIQUOTE | TokenKind.UNQUOTE | TokenKind.UNQUOTE_SPLICING:
                self._skip_datum_comments()
                if self.peek() is None:
                    raise self._eof(f"after {tok.kind}", tok.span.start)
                return Pair(QUOTE_FORMS[tok.kind], Pair(self._parse_datum(), Nil))
            case TokenKind.DOT:
                raise UnexpectedToken(str(tok.kind), tok.span, "dot outside of a list")
            case _:
                raise UnexpectedToken(str(tok.kind), tok.span)

    def _close(self, opener: Token, tok: Token) -> None:
        expected = CLOSERS[opener.kind]
        if tok.kind is not expected:
            raise UnexpectedBracket(str(expected), str(tok.kind),
                                    Span(opener.span.start, tok.span.end))

    def _parse_list(self, opener: Token) -> SExpression:
        items: list[SExpression] = []
        while True:
            self._skip_datum_comments()
            tok = self.peek()
            if tok is None:
                raise self._eof(f"inside a list opened by {opener.kind}", opener.span.start)
            if tok.kind in CLOSING:
                self.advance()
                self._close(opener, tok)
                return from_iterable(items)
            if tok.kind is TokenKind.DOT:
                self.advance()
                if not items:
                    raise UnexpectedToken(str(tok.kind), tok.span, "no datum before the dot")
                self._skip_datum_comments()
                nxt = self.peek()
                if nxt is None:
                    raise self._eof("after the dot", opener.span.start)
                if nxt.kind in CLOSING or nxt.kind is TokenKind.DOT:
                    raise UnexpectedToken(str(nxt.kind), nxt.span, "expected a datum after the dot")
                tail = self._parse_datum()
                self._skip_datum_comments()
                closer = self.advance()
                if closer is None:
                    raise self._eof(f"inside a list opened by {opener.kind}", opener.span.start)
                if closer.kind not in CLOSING:
                    raise UnexpectedToken(str(closer.kind), closer.span,
                                          "exactly one datum must follow the dot")
                self._close(opener, closer)
                return from_iterable(items, tail)
            items.append(self._parse_datum())

    def _parse_vector(self, opener: Token) -> list[SExpression]:
        items: list[SExpression] = []
        while True:
            self._skip_datum_comments()
            tok = self.peek()
            if tok is None:
                raise self._eof("inside a vector", opener.span.start)
            if tok.kind in CLOSING:
                self.advance()
                self._close(opener, tok)
                return items
            if tok.kind is TokenKind.DOT:
                raise UnexpectedToken(str(tok.kind), tok.span, "dot inside a vector")
            items.append(self._parse_datum())


def read_all(source: str) -> list[SExpression]:
    """Read every datum in `source`."""
    return list(TokenStream(lex(source)).parse_all())


def read(source: str) -> Optional[SExpression]:
    """Read the first datum in `source`, or None if it holds none."""
    return TokenStream(lex(source)).parse_expr()
