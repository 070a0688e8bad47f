"""Symbol, character and string builtins.

Strings are MString objects: every procedure that returns a string returns a
fresh one, and the `!` procedures mutate in place so all holders see it.
"""

from __future__ import annotations

from luna import SchemeValue
from luna.builtin.registry import (
    builtin,
    check_char,
    check_count,
    check_index,
    check_range,
    check_string,
    check_symbol,
)
from luna.errors import SchemeTypeError
from luna.types.char import Char
from luna.types.environment import Environment
from luna.types.markers import Unspecified
from luna.types.mstring import MString
from luna.types.pair import from_iterable, to_list
from luna.types.symbol import Symbol


# -------------------------------
# Symbols
# -------------------------------

@builtin("symbol->string", 1)
def symbol_to_string(env: Environment, args: list[SchemeValue]) -> MString:
    """(symbol->string symbol) the name of symbol as a fresh string."""
    return MString(check_symbol("symbol->string", args[0]).id)


@builtin("string->symbol", 1)
def string_to_symbol(env: Environment, args: list[SchemeValue]) -> Symbol:
    """(string->symbol string) the symbol whose name is string."""
    return Symbol(check_string("string->symbol", args[0]).value)


# -------------------------------
# Characters
# -------------------------------

@builtin("char->integer", 1)
def char_to_integer(env: Environment, args: list[SchemeValue]) -> int:
    """(char->integer char) Unicode code point of char."""
    return ord(check_char("char->integer", args[0]).value)


@builtin("integer->char", 1)
def integer_to_char(env: Environment, args: list[SchemeValue]) -> Char:
    """(integer->char n) the character with code point n."""
    n = args[0]
    if isinstance(n, bool) or not isinstance(n, int) or not 0 <= n <= 0x10FFFF:
        raise SchemeTypeError("integer->char", "a Unicode code point", n)
    return Char(chr(n))


@builtin("char-upcase", 1)
def char_upcase(env: Environment, args: list[SchemeValue]) -> Char:
    """(char-upcase char)"""
    c = check_char("char-upcase", args[0]).value
    upper = c.upper()
    return Char(upper if len(upper) == 1 else c)


@builtin("char-downcase", 1)
def char_downcase(env: Environment, args: list[SchemeValue]) -> Char:
    """(char-downcase char)"""
    c = check_char("char-downcase", args[0]).value
    lower = c.lower()
    return Char(lower if len(lower) == 1 else c)


@builtin("char-alphabetic?", 1)
def is_char_alphabetic(env: Environment, args: list[SchemeValue]) -> bool:
    """(char-alphabetic? char)"""
    return check_char("char-alphabetic?", args[0]).value.isalpha()


@builtin("char-numeric?", 1)
def is_char_numeric(env: Environment, args: list[SchemeValue]) -> bool:
    """(char-numeric? char)"""
    return check_char("char-numeric?", args[0]).value.isdigit()


@builtin("char-whitespace?", 1)
def is_char_whitespace(env: Environment, args: list[SchemeValue]) -> bool:
    """(char-whitespace? char)"""
    return check_char("char-whitespace?", args[0]).value.isspace()


def _char_chain(procedure: str, args: list[SchemeValue], test) -> bool:
    chars = [check_char(procedure, x).value for x in args]
    return all(test(a, b) for a, b in zip(chars, chars[1:]))


@builtin("char=?", (1, None))
def char_eq(env: Environment, args: list[SchemeValue]) -> bool:
    """(char=? char1 char2 ...)"""
    return _char_chain("char=?", args, lambda a, b: a == b)


@builtin("char<?", (1, None))
def char_lt(env: Environment, args: list[SchemeValue]) -> bool:
    """(char<? char1 char2 ...) #t when code points are strictly increasing."""
    return _char_chain("char<?", args, lambda a, b: a < b)


@builtin("char>?", (1, None))
def char_gt(env: Environment, args: list[SchemeValue]) -> bool:
    """(char>? char1 char2 ...) #t when code points are strictly decreasing."""
    return _char_chain("char>?", args, lambda a, b: a > b)


# -------------------------------
# Strings
# -------------------------------

@builtin("string-length", 1)
def string_length(env: Environment, args: list[SchemeValue]) -> int:
    """(string-length string) number of characters in string."""
    return len(check_string("string-length", args[0]).value)


@builtin("string-ref", 2)
def string_ref(env: Environment, args: list[SchemeValue]) -> Char:
    """(string-ref string k) the k-th character, counting from zero."""
    s = check_string("string-ref", args[0]).value
    return Char(s[check_index("string-ref", args[1], len(s))])


@builtin("string-set!", 3)
def string_set(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(string-set! string k char) replace the k-th character of string."""
    s = check_string("string-set!", args[0])
    k = check_index("string-set!", args[1], len(s.value))
    c = check_char("string-set!", args[2]).value
    s.value = s.value[:k] + c + s.value[k + 1:]
    return Unspecified


@builtin("substring", (2, 3))
def substring(env: Environment, args: list[SchemeValue]) -> MString:
    """(substring string start [end]) a fresh string of the characters from start to end."""
    s = check_string("substring", args[0]).value
    start, end = check_range("substring", args, 1, len(s))
    return MString(s[start:end])


@builtin("string-append", (0, None))
def string_append(env: Environment, args: list[SchemeValue]) -> MString:
    """(string-append string ...) a fresh string joining the arguments."""
    return MString("".join(check_string("string-append", s).value for s in args))


@builtin("string-copy", (1, 3))
def string_copy(env: Environment, args: list[SchemeValue]) -> MString:
    """(string-copy string [start [end]]) a fresh copy of (part of) string."""
    s = check_string("string-copy", args[0]).value
    start, end = check_range("string-copy", args, 1, len(s))
    return MString(s[start:end])


@builtin("string-fill!", (2, 4))
def string_fill(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(string-fill! string char [start [end]]) store char in every position of string."""
    s = check_string("string-fill!", args[0])
    c = check_char("string-fill!", args[1]).value
    start, end = check_range("string-fill!", args, 2, len(s.value))
    s.value = s.value[:start] + c * (end - start) + s.value[end:]
    return Unspecified


@builtin("string->list", (1, 3))
def string_to_list(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(string->list string [start [end]]) the characters of string as a list."""
    s = check_string("string->list", args[0]).value
    start, end = check_range("string->list", args, 1, len(s))
    return from_iterable(Char(c) for c in s[start:end])


@builtin("list->string", 1)
def list_to_string(env: Environment, args: list[SchemeValue]) -> MString:
    """(list->string list) a fresh string from a list of characters."""
    return MString("".join(check_char("list->string", c).value for c in to_list(args[0], "list->string")))


@builtin("string", (0, None))
def string(env: Environment, args: list[SchemeValue]) -> MString:
    """(string char ...) a fresh string of the given characters."""
    return MString("".join(check_char("string", c).value for c in args))


@builtin("make-string", (1, 2))
def make_string(env: Environment, args: list[SchemeValue]) -> MString:
    """(make-string k [char]) a fresh string of length k."""
    k = check_count("make-string", args[0])
    c = check_char("make-string", args[1]).value if len(args) > 1 else " "
    return MString(c * k)


def _string_chain(procedure: str, args: list[SchemeValue], test) -> bool:
    strings = [check_string(procedure, x).value for x in args]
    return all(test(a, b) for a, b in zip(strings, strings[1:]))


@builtin("string=?", (1, None))
def string_eq(env: Environment, args: list[SchemeValue]) -> bool:
    """(string=? string1 string2 ...) #t when all strings have the same characters."""
    return _string_chain("string=?", args, lambda a, b: a == b)


@builtin("string<?", (1, None))
def string_lt(env: Environment, args: list[SchemeValue]) -> bool:
    """(string<? string1 string2 ...) lexicographic ordering by code point."""
    return _string_chain("string<?", args, lambda a, b: a < b)


@builtin("string>?", (1, None))
def string_gt(env: Environment, args: list[SchemeValue]) -> bool:
    """(string>? string1 string2 ...)"""
    return _string_chain("string>?", args, lambda a, b: a > b)


@builtin("string-upcase", 1)
def string_upcase(env: Environment, args: list[SchemeValue]) -> MString:
    """(string-upcase string)"""
    return MString(check_string("string-upcase", args[0]).value.upper())


@builtin("string-downcase", 1)
def string_downcase(env: Environment, args: list[SchemeValue]) -> MString:
    """(string-downcase string)"""
    return MString(check_string("string-downcase", args[0]).value.lower())
