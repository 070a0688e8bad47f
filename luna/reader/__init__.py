"""Lexer and reader: source text to Scheme data."""

from luna.reader.lexer import Token, TokenKind, lex, parse_number, position_from_offset
from luna.reader.parser import TokenStream, read, read_all

__all__ = [
    "Token",
    "TokenKind",
    "TokenStream",
    "lex",
    "parse_number",
    "position_from_offset",
    "read",
    "read_all",
]
