import math
from fractions import Fraction

import pytest
from hypothesis import given, strategies as st

from luna.errors import LexError, ReadError, Span, UnexpectedBracket, UnexpectedEof, UnexpectedToken
from luna.printer import format_number, to_write_string
from luna.reader import TokenKind, TokenStream, lex, parse_number, read, read_all
from luna.types import Char, MString, Nil, Pair, Symbol, to_list

K = TokenKind


@pytest.mark.parametrize(
    "source,expected",
    [
        ("a", [(K.ATOM, "a")]),
        ("(a . b)", [(K.LPAREN, "("), (K.ATOM, "a"), (K.DOT, "."), (K.ATOM, "b"), (K.RPAREN, ")")]),
        ("[x]", [(K.LBRACKET, "["), (K.ATOM, "x"), (K.RBRACKET, "]")]),
        ("#(1 2)", [(K.VECTOR, "#("), (K.NUMBER, "1"), (K.NUMBER, "2"), (K.RPAREN, ")")]),
        ("'x `y ,z ,@w", [(K.QUOTE, "'"), (K.ATOM, "x"), (K.QUASIQUOTE, "`"), (K.ATOM, "y"),
                          (K.UNQUOTE, ","), (K.ATOM, "z"), (K.UNQUOTE_SPLICING, ",@"), (K.ATOM, "w")]),
        ("#t #false", [(K.BOOLEAN, "#t"), (K.BOOLEAN, "#false")]),
        ('"a\\nb"', [(K.STRING, "a\nb")]),
        ('"tab\\there"', [(K.STRING, "tab\there")]),
        ('"\\x41;BC"', [(K.STRING, "ABC")]),
        ("#\\a #\\space #\\x41 #\\(", [(K.CHAR, "a"), (K.CHAR, " "), (K.CHAR, "A"), (K.CHAR, "(")]),
        ("|hello world|", [(K.ATOM, "hello world")]),
        ("+ - ... ->x", [(K.ATOM, "+"), (K.ATOM, "-"), (K.ATOM, "..."), (K.ATOM, "->x")]),
        ("1/2 -3.5e2 #xff", [(K.NUMBER, "1/2"), (K.NUMBER, "-3.5e2"), (K.NUMBER, "#xff")]),
        ("Hello", [(K.ATOM, "Hello")]),
        ("{x}", [(K.LBRACE, "{"), (K.ATOM, "x"), (K.RBRACE, "}")]),
        ("a{b}", [(K.ATOM, "a"), (K.LBRACE, "{"), (K.ATOM, "b"), (K.RBRACE, "}")]),
    ],
)
def test_lexer_basic(source, expected):
    tokens = [(tok.kind, tok.text) for tok in lex(source)]
    assert tokens == expected


def test_tokens_carry_spans():
    tokens = list(lex("  foo (bar)"))
    assert [tok.span for tok in tokens] == [Span(2, 5), Span(6, 7), Span(7, 10), Span(10, 11)]


def test_comments_are_skipped():
    source = "; line comment\n#| outer #| nested |# still comment |# a #;(b c) d"
    kinds = [tok.kind for tok in lex(source)]
    assert kinds == [K.ATOM, K.DATUM_COMMENT, K.LPAREN, K.ATOM, K.ATOM, K.RPAREN, K.ATOM]
    assert read_all(source) == [Symbol("a"), Symbol("d")]


def test_shebang_line_is_skipped():
    assert read_all("#!/usr/bin/env luna\n42") == [42]


@pytest.mark.parametrize(
    "text,expected",
    [
        ("42", 42),
        ("-7", -7),
        ("+5", 5),
        ("1/2", Fraction(1, 2)),
        ("4/2", 2),
        ("3.5", 3.5),
        (".5", 0.5),
        ("1e3", 1000.0),
        ("#xff", 255),
        ("#XFF", 255),
        ("#b101", 5),
        ("#o17", 15),
        ("#d10", 10),
        ("#e1.5", Fraction(3, 2)),
        ("#i1/2", 0.5),
        ("#x#e10", 16),
        ("abc", None),
        ("1/0", None),
        ("#b2", None),
        ("#e1e400", 10 ** 400),
        ("#i1" + "0" * 400, math.inf),
        ("#e+inf.0", None),
    ],
)
def test_parse_number(text, expected):
    value = parse_number(text)
    assert value == expected
    if expected is not None:
        assert type(value) is type(expected)


def test_parse_number_specials():
    assert parse_number("+inf.0") == math.inf
    assert parse_number("-inf.0") == -math.inf
    assert math.isnan(parse_number("+nan.0"))


@pytest.mark.parametrize("source", ["1+", "#b102", "1abc", "#xzz", "#q", '"\\x110000;"', "#\\x110000"])
def test_malformed_numbers_and_hash_syntax(source):
    with pytest.raises(LexError):
        list(lex(source))


def test_unknown_character_name():
    with pytest.raises(LexError) as exc:
        list(lex("#\\bogus"))
    assert exc.value.span == Span(0, 7)
    assert not exc.value.incomplete


@pytest.mark.parametrize("source", ['"abc', "#| never closed", '"ends with backslash\\'])
def test_unfinished_text_is_incomplete(source):
    with pytest.raises(LexError) as exc:
        list(lex(source))
    assert exc.value.incomplete


@pytest.mark.parametrize(
    "source, expected",
    [
        ("123", 123),
        ("-45", -45),
        ("3.14", 3.14),
        ("#t", True),
        ("#false", False),
        ("foo", Symbol("foo")),
        ("'a", Pair(Symbol("quote"), Pair(Symbol("a"), Nil))),
    ],
)
def test_read_atoms(source, expected):
    value = read(source)
    if isinstance(expected, Pair):
        assert to_write_string(value) == to_write_string(expected)
    else:
        assert value == expected


def test_read_lists_and_vectors():
    lst = read("(1 2 3)")
    assert isinstance(lst, Pair)
    assert to_list(lst) == [1, 2, 3]

    dotted = read("(a . b)")
    assert dotted.car is Symbol("a")
    assert dotted.cdr is Symbol("b")

    assert to_list(read("[1 [2] 3]"))[1].car == 2
    assert read("()") is Nil

    vec = read("#(1 (2) \"s\")")
    assert isinstance(vec, list)
    assert vec[0] == 1
    assert isinstance(vec[1], Pair)
    assert isinstance(vec[2], MString) and vec[2].value == "s"


def test_braces_delimit_lists():
    lst = read("{1 {2} [3]}")
    assert isinstance(lst, Pair)
    assert to_write_string(lst) == "(1 (2) (3))"
    assert read("{}") is Nil
    assert read("{a . b}").cdr is Symbol("b")


def test_read_chars_and_strings_are_distinct():
    char = read("#\\a")
    string = read('"a"')
    assert isinstance(char, Char) and char.value == "a"
    assert isinstance(string, MString) and string.value == "a"


def test_quote_shorthands():
    assert to_write_string(read("`(a ,b ,@c)")) == "(quasiquote (a (unquote b) (unquote-splicing c)))"


def test_read_returns_none_on_empty_input():
    assert read("   ; nothing here") is None
    assert read_all("") == []


def test_token_stream_reads_one_datum_at_a_time():
    stream = TokenStream(lex("(a) b (c"))
    assert to_write_string(stream.parse_expr()) == "(a)"
    assert stream.parse_expr() is Symbol("b")
    with pytest.raises(UnexpectedEof):
        stream.parse_expr()


@pytest.mark.parametrize(
    "source,error",
    [
        (")", UnexpectedToken),
        ("(1 2", UnexpectedEof),
        ("(1 ]", UnexpectedBracket),
        ("[1 )", UnexpectedBracket),
        ("(1 }", UnexpectedBracket),
        ("{1 )", UnexpectedBracket),
        ("{1 2", UnexpectedEof),
        ("#(1 ]", UnexpectedBracket),
        ("(. 1)", UnexpectedToken),
        ("(1 . 2 3)", UnexpectedToken),
        ("(1 . )", UnexpectedToken),
        (".", UnexpectedToken),
        ("#(1 . 2)", UnexpectedToken),
        ("'", UnexpectedEof),
        ("#;", UnexpectedEof),
    ],
)
def test_read_errors(source, error):
    with pytest.raises(error) as exc:
        read_all(source)
    assert isinstance(exc.value, ReadError)


def test_mismatched_bracket_names_both_sides():
    with pytest.raises(UnexpectedBracket) as exc:
        read_all("(1 2]")
    assert exc.value.expected == str(K.RPAREN)
    assert exc.value.found == str(K.RBRACKET)
    assert exc.value.span == Span(0, 5)


def test_only_unexpected_eof_is_incomplete():
    with pytest.raises(UnexpectedEof) as exc:
        read_all("(define (f x)\n  (+ x")
    assert exc.value.incomplete
    with pytest.raises(UnexpectedToken) as exc:
        read_all("())")
    assert not exc.value.incomplete
    assert exc.value.span == Span(2, 3)


# --- Property based checks ---

@given(st.integers())
def test_integer_round_trip(n):
    assert read(str(n)) == n


@given(st.fractions().filter(lambda f: f.denominator != 1))
def test_rational_round_trip(q):
    assert read(str(q)) == q


@given(st.floats(allow_nan=False, allow_infinity=False))
def test_float_round_trip(x):
    value = read(format_number(x))
    assert isinstance(value, float)
    assert value == x


@given(st.from_regex(r"[a-z!$%&*/:<=>?^_~][a-z0-9!$%&*/:<=>?^_~+.@-]*", fullmatch=True))
def test_symbol_round_trip(name):
    assert read(name) is Symbol(name)


@given(st.text())
def test_string_round_trip(s):
    value = read(to_write_string(MString(s)))
    assert isinstance(value, MString)
    assert value.value == s


@given(st.recursive(st.integers(min_value=-1000, max_value=1000),
                    lambda children: st.lists(children, max_size=4), max_leaves=20))
def test_nested_list_round_trip(tree):
    def to_source(t):
        if isinstance(t, list):
            return "(" + " ".join(to_source(x) for x in t) + ")"
        return str(t)

    source = to_source(tree)
    assert to_write_string(read(source)) == source


@given(st.text())
def test_written_symbols_read_back(name):
    assert read(to_write_string(Symbol(name))) is Symbol(name)
