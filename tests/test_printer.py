import math
from fractions import Fraction

import pytest

from luna.printer import format_number, to_display_string, to_write_string
from luna.types import (
    Builtin,
    Char,
    Closure,
    Environment,
    Eof,
    MString,
    Nil,
    Pair,
    Promise,
    Symbol,
    Unspecified,
    Values,
    make_list,
)


@pytest.mark.parametrize(
    "value,expected",
    [
        (42, "42"),
        (-7, "-7"),
        (Fraction(1, 3), "1/3"),
        (Fraction(-3, 2), "-3/2"),
        (2.0, "2.0"),
        (0.1, "0.1"),
        (1e21, "1e21"),
        (1.5e-7, "1.5e-07"),
        (math.inf, "+inf.0"),
        (-math.inf, "-inf.0"),
        (math.nan, "+nan.0"),
    ],
)
def test_format_number(value, expected):
    assert format_number(value) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        (True, "#t"),
        (False, "#f"),
        (Nil, "()"),
        (Symbol("foo"), "foo"),
        (MString('say "hi"\n'), '"say \\"hi\\"\\n"'),
        (MString("back\\slash"), '"back\\\\slash"'),
        (Char("a"), "#\\a"),
        (Char(" "), "#\\space"),
        (Char("\n"), "#\\newline"),
        (Char("\x01"), "#\\x1"),
        (make_list(1, 2, 3), "(1 2 3)"),
        (Pair(1, 2), "(1 . 2)"),
        (Pair(1, Pair(2, 3)), "(1 2 . 3)"),
        (make_list(make_list(), make_list(Symbol("a"))), "(() (a))"),
        ([1, MString("s"), [Char("c")]], '#(1 "s" #(#\\c))'),
        ([], "#()"),
        (Unspecified, "#<unspecified>"),
        (Eof, "#<eof>"),
        (Promise(done=True, value=1), "#<promise>"),
        (Environment(), "#<environment>"),
        (Values((1, MString("x"))), '1 "x"'),
        (Values(()), ""),
    ],
)
def test_write_form(value, expected):
    assert to_write_string(value) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        (MString('say "hi"'), 'say "hi"'),
        (Char("a"), "a"),
        (Char(" "), " "),
        (make_list(MString("a"), Char("b"), 3), "(a b 3)"),
        ([MString("x")], "#(x)"),
        (Symbol("sym"), "sym"),
    ],
)
def test_display_form(value, expected):
    assert to_display_string(value) == expected


def test_procedures():
    builtin = Builtin("car", lambda env, args: args[0].car, 1, 1)
    assert to_write_string(builtin) == "#<procedure car>"
    closure = Closure([Symbol("x")], None, [Symbol("x")], Environment(), "identity")
    assert to_write_string(closure) == "#<procedure identity>"
    closure.name = None
    assert to_write_string(closure) == "#<procedure>"


def test_shared_structure_is_printed_by_value():
    shared = make_list(1, 2)
    assert to_write_string(make_list(shared, shared)) == "((1 2) (1 2))"


def test_quote_forms_are_not_abbreviated(run):
    assert run("''a") == "(quote a)"


# -------------------------------
# Circular and deeply nested data
# -------------------------------

def test_deep_nesting_is_printed_without_recursion(run):
    run("(define (nest n acc) (if (= n 0) acc (nest (- n 1) (list acc))))")
    text = run("(nest 50000 '())")
    assert text.startswith("((((")
    assert len(text) == 100002


def test_deep_vector_nesting():
    value = []
    for _ in range(50000):
        value = [value]
    assert to_write_string(value) == "#(" * 50000 + "#()" + ")" * 50000


@pytest.mark.parametrize(
    "setup,expected",
    [
        ("(define x (list 1 2)) (set-cdr! (cdr x) x)", "#0=(1 2 . #0#)"),
        ("(define x (list 1)) (set-car! x x)", "#0=(#0#)"),
        ("(define x (vector 1 2)) (vector-set! x 1 x)", "#0=#(1 #0#)"),
        ("(define x (list 1 2 3)) (set-cdr! (cddr x) (cdr x))", "(1 . #0=(2 3 . #0#))"),
        ("(define s (list 1 2)) (define x (list s s))", "((1 2) (1 2))"),
    ],
)
def test_circular_data_gets_datum_labels(interp, setup, expected):
    interp.eval(setup)
    assert to_write_string(interp.eval("x")) == expected


def test_circular_data_in_display_form(interp):
    interp.eval('(define x (list "a" "b")) (set-cdr! (cdr x) x)')
    assert to_display_string(interp.eval("x")) == "#0=(a b . #0#)"


def test_labels_are_numbered_in_order(interp):
    interp.eval("(define a (list 1)) (set-cdr! a a)")
    interp.eval("(define b (list 2)) (set-cdr! b b)")
    assert to_write_string(interp.eval("(list a b)")) == "(#0=(1 . #0#) #1=(2 . #1#))"


def test_shared_structure_inside_a_cycle_is_not_labelled(interp):
    interp.eval("(define s (list 'a))")
    interp.eval("(define x (list s s)) (set-cdr! (cdr x) x)")
    assert to_write_string(interp.eval("x")) == "#0=((a) (a) . #0#)"


# -------------------------------
# Symbols that need bars
# -------------------------------

@pytest.mark.parametrize(
    "name,expected",
    [
        ("plain", "plain"),
        ("set-car!", "set-car!"),
        ("a b", "|a b|"),
        ("", "||"),
        ("1", "|1|"),
        ("+5", "|+5|"),
        (".", "|.|"),
        ("a|b", "|a\\|b|"),
        ("line\nbreak", "|line\\nbreak|"),
        ("(x)", "|(x)|"),
        ("#t", "|#t|"),
        ("it's", "|it's|"),
    ],
)
def test_symbols_are_barred_when_needed(name, expected):
    assert to_write_string(Symbol(name)) == expected


def test_display_writes_symbol_names_raw(run):
    assert to_display_string(Symbol("a b")) == "a b"
    assert run('(string->symbol "a b")') == "|a b|"
