import io
import os

import pytest

from luna.errors import ArityError, DivisionByZero, SchemeError, SchemeTypeError, UnboundVariable
from luna.interpreter import Interpreter
from luna.printer import to_write_string
from luna.types import Symbol


# -------------------------------
# Numbers
# -------------------------------

@pytest.mark.parametrize(
    "expr,expected",
    [
        ("(+)", "0"),
        ("(+ 1 2 3)", "6"),
        ("(+ 1/2 1/2)", "1"),
        ("(+ 1 2.5)", "3.5"),
        ("(*)", "1"),
        ("(* 2 3 4)", "24"),
        ("(* 1.5 2)", "3.0"),
        ("(- 5)", "-5"),
        ("(- 10 1 2)", "7"),
        ("(/ 2)", "1/2"),
        ("(/ 6 3)", "2"),
        ("(/ 1 3)", "1/3"),
        ("(/ 1.0 4)", "0.25"),
        ("(/ 1.0 0)", "+inf.0"),
        ("(/ -1 0.0)", "-inf.0"),
        ("(/ 0.0 0)", "+nan.0"),
        ("(= 1 1 1)", "#t"),
        ("(= 1 1.0)", "#t"),
        ("(< 1 2 3)", "#t"),
        ("(< 1 3 2)", "#f"),
        ("(>= 3 3 1)", "#t"),
        ("(quotient 17 5)", "3"),
        ("(quotient 17 -5)", "-3"),
        ("(remainder -17 5)", "-2"),
        ("(modulo -17 5)", "3"),
        ("(modulo 17 -5)", "-3"),
        ("(quotient 7.0 2)", "3.0"),
        ("(abs -5)", "5"),
        ("(abs -1/2)", "1/2"),
        ("(min 3 1 2)", "1"),
        ("(max 1 2.0)", "2.0"),
        ("(gcd 12 18)", "6"),
        ("(gcd)", "0"),
        ("(lcm 4 6)", "12"),
        ("(floor 2.7)", "2.0"),
        ("(floor -7/2)", "-4"),
        ("(ceiling 2.1)", "3.0"),
        ("(truncate -2.7)", "-2.0"),
        ("(round 2.5)", "2.0"),
        ("(round 3.5)", "4.0"),
        ("(round 7/2)", "4"),
        ("(sqrt 16)", "4"),
        ("(sqrt 1/4)", "1/2"),
        ("(sqrt 2.25)", "1.5"),
        ("(call-with-values (lambda () (exact-integer-sqrt 17)) list)", "(4 1)"),
        ("(expt 2 10)", "1024"),
        ("(expt 2 -1)", "1/2"),
        ("(expt 2.0 3)", "8.0"),
        ("(expt 4 1/2)", "2.0"),
        ("(exp 0)", "1.0"),
        ("(log 1)", "0.0"),
        ("(log 0)", "-inf.0"),
        ("(log 8 2)", "3.0"),
        ("(atan 1 1)", "0.7853981633974483"),
        ("(square 5)", "25"),
        ("(square 1/2)", "1/4"),
        ("(exact 2.5)", "5/2"),
        ("(exact 3.0)", "3"),
        ("(inexact 1/4)", "0.25"),
        ("(exact->inexact 1/2)", "0.5"),
        ("(inexact->exact 0.5)", "1/2"),
        ("(numerator 6/4)", "3"),
        ("(denominator 6/4)", "2"),
        ("(denominator 5)", "1"),
        ("(number? 1)", "#t"),
        ("(number? #t)", "#f"),
        ("(integer? 3.0)", "#t"),
        ("(integer? 3/2)", "#f"),
        ("(rational? 1/2)", "#t"),
        ("(rational? +inf.0)", "#f"),
        ("(real? 1.5)", "#t"),
        ("(exact? 1/2)", "#t"),
        ("(inexact? 0.5)", "#t"),
        ("(exact-integer? 5)", "#t"),
        ("(exact-integer? 5.0)", "#f"),
        ("(nan? +nan.0)", "#t"),
        ("(zero? 0.0)", "#t"),
        ("(positive? -1)", "#f"),
        ("(negative? -1/2)", "#t"),
        ("(odd? 3)", "#t"),
        ("(even? 0)", "#t"),
        ("(number->string 255)", '"255"'),
        ("(number->string 255 16)", '"ff"'),
        ("(number->string 5 2)", '"101"'),
        ("(number->string 1.5)", '"1.5"'),
        ("(string->number \"42\")", "42"),
        ("(string->number \"ff\" 16)", "255"),
        ("(string->number \"1/3\")", "1/3"),
        ("(string->number \"abc\")", "#f"),
        ("(* 1.0 1e21)", "1e21"),
        ("(expt 10 25)", "10000000000000000000000000"),
    ],
)
def test_numbers(run, expr, expected):
    assert run(expr) == expected


def test_exactness_is_preserved(interp):
    assert type(interp.eval("(+ 1/2 1/2)")) is int
    assert type(interp.eval("(* 2 0.5)")) is float
    assert type(interp.eval("(- 3/2 1/2)")) is int


@pytest.mark.parametrize(
    "expr",
    ["(/ 1 0)", "(quotient 1 0)", "(modulo 5 0)", "(remainder 5 0)", "(/ 5 1 0)", "(expt 0 -1)"],
)
def test_exact_division_by_zero(interp, expr):
    with pytest.raises(DivisionByZero):
        interp.eval(expr)


@pytest.mark.parametrize(
    "expr",
    ['(+ 1 "2")', "(< 1 'a)", "(sqrt -4)", "(quotient 1.5 2)", "(exact +inf.0)", "(odd? 1.5)",
     "(+ #t 1)", "(number->string 10 7)"],
)
def test_numeric_type_errors(interp, expr):
    with pytest.raises(SchemeTypeError):
        interp.eval(expr)


@pytest.mark.parametrize(
    "expr,expected",
    [
        ("(+ (expt 10 400) 1.0)", "+inf.0"),
        ("(- 1.0 (expt 10 400))", "-inf.0"),
        ("(* (expt 10 400) 0.5)", "+inf.0"),
        ("(/ (expt 10 400) 2.0)", "+inf.0"),
        ("(/ 1.0 (expt 10 400))", "0.0"),
        ("(exact->inexact (expt 10 400))", "+inf.0"),
        ("(inexact (- (expt 10 400)))", "-inf.0"),
        ("(sqrt (+ (expt 10 400) 1))", "1e200"),
        ("(max (expt 10 400) 1.0)", "+inf.0"),
        ("(exp (expt 10 400))", "+inf.0"),
        ("(atan (expt 10 400))", "1.5707963267948966"),
        ("(expt (- (expt 10 400)) 3.0)", "-inf.0"),
        ("(< (expt 10 400) +inf.0)", "#t"),
        ("(= 9007199254740993 9007199254740992.0)", "#f"),
        ("(< 919 (log (/ (expt 10 400) 3)) 920)", "#t"),
    ],
)
def test_exact_numbers_beyond_the_float_range(run, expr, expected):
    assert run(expr) == expected


def test_radix_must_be_an_exact_integer(run, interp):
    assert run('(string->number "101" 2)') == "5"
    for expr in ['(string->number "101" 2.0)', '(string->number "101" 3)', "(number->string 5 #t)"]:
        with pytest.raises(SchemeTypeError):
            interp.eval(expr)


# -------------------------------
# Pairs and lists
# -------------------------------

@pytest.mark.parametrize(
    "expr,expected",
    [
        ("(cons 1 2)", "(1 . 2)"),
        ("(cons 1 '(2))", "(1 2)"),
        ("(car '(1 2))", "1"),
        ("(cdr '(1 2))", "(2)"),
        ("(cadr '(1 2 3))", "2"),
        ("(cddr '(1 2 3))", "(3)"),
        ("(caddr '(1 2 3))", "3"),
        ("(caar '((1) 2))", "1"),
        ("(cadddr '(1 2 3 4))", "4"),
        ("(list)", "()"),
        ("(list 1 (list 2 3))", "(1 (2 3))"),
        ("(make-list 2 'x)", "(x x)"),
        ("(list? '(1 2))", "#t"),
        ("(list? '())", "#t"),
        ("(list? '(1 . 2))", "#f"),
        ("(pair? '())", "#f"),
        ("(pair? '(1))", "#t"),
        ("(null? '())", "#t"),
        ("(null? '(1))", "#f"),
        ("(length '(1 2 3))", "3"),
        ("(length '())", "0"),
        ("(append)", "()"),
        ("(append '(1) '(2 3) '() '(4))", "(1 2 3 4)"),
        ("(append '(1) 2)", "(1 . 2)"),
        ("(reverse '(1 2 3))", "(3 2 1)"),
        ("(list-tail '(1 2 3) 1)", "(2 3)"),
        ("(list-ref '(a b c) 2)", "c"),
        ("(list-copy '(1 2 . 3))", "(1 2 . 3)"),
        ("(last-pair '(1 2 3))", "(3)"),
        ("(memq 'c '(a b c d))", "(c d)"),
        ("(memq 'z '(a b))", "#f"),
        ("(memv 2.0 '(1 2 2.0))", "(2.0)"),
        ("(member '(1) '((0) (1) (2)))", "((1) (2))"),
        ("(member 2.0 '(1 2 3) =)", "(2 3)"),
        ("(assq 'b '((a 1) (b 2)))", "(b 2)"),
        ("(assv 2 '((1 one) (2 two)))", "(2 two)"),
        ("(assoc \"b\" '((\"a\" . 1) (\"b\" . 2)))", '("b" . 2)'),
        ("(assoc 2.0 '((1 one) (2 two)) =)", "(2 two)"),
        ("(assq 'z '((a 1)))", "#f"),
    ],
)
def test_lists(run, expr, expected):
    assert run(expr) == expected


def test_append_shares_the_last_argument(run):
    run("(define tail (list 3 4))")
    run("(define joined (append '(1 2) tail))")
    run("(set-car! tail 'x)")
    assert run("joined") == "(1 2 x 4)"


def test_pair_mutation(run):
    run("(define p (cons 1 2))")
    run("(set-car! p 'a)")
    run("(set-cdr! p '(b))")
    assert run("p") == "(a b)"


@pytest.mark.parametrize(
    "expr",
    ["(car '())", "(cdr 5)", "(length '(1 . 2))", "(list-ref '(1 2) 5)", "(list-tail '(1) 3)",
     "(reverse '(1 . 2))", "(append '(1 . 2) '(3))", "(assq 'a '(1 2))", "(memq 'a '(b . c))",
     "(make-list -1)", "(set-car! '() 1)"],
)
def test_list_type_errors(interp, expr):
    with pytest.raises(SchemeTypeError):
        interp.eval(expr)


@pytest.mark.parametrize(
    "expr",
    ["(list-copy c)", "(last-pair c)", "(length c)", "(map car c)", "(append c '(1))", "(apply + c)"],
)
def test_circular_lists_are_rejected(interp, expr):
    interp.eval("(define c (list 1 2 3))")
    interp.eval("(set-cdr! (cddr c) c)")
    with pytest.raises(SchemeTypeError):
        interp.eval(expr)


# -------------------------------
# Equivalence and type predicates
# -------------------------------

@pytest.mark.parametrize(
    "expr,expected",
    [
        ("(eq? 'a 'a)", "#t"),
        ("(eq? '() '())", "#t"),
        ("(eq? (list 1) (list 1))", "#f"),
        ("(eq? 100000000000 100000000000)", "#t"),
        ("(eqv? 1.5 1.5)", "#t"),
        ("(eqv? 2 2.0)", "#f"),
        ("(eqv? #\\a #\\a)", "#t"),
        ("(eqv? \"a\" \"a\")", "#f"),
        ("(equal? '(1 (2 #(3))) '(1 (2 #(3))))", "#t"),
        ("(equal? \"abc\" \"abc\")", "#t"),
        ("(equal? 2 2.0)", "#f"),
        ("(let ((p (list 1))) (eq? p p))", "#t"),
        ("(not #f)", "#t"),
        ("(not '())", "#f"),
        ("(boolean? #f)", "#t"),
        ("(boolean? 0)", "#f"),
        ("(boolean=? #t #t #t)", "#t"),
        ("(boolean=? #t #f)", "#f"),
        ("(symbol? 'a)", "#t"),
        ("(symbol? \"a\")", "#f"),
        ("(string? \"a\")", "#t"),
        ("(char? #\\a)", "#t"),
        ("(char? \"a\")", "#f"),
        ("(procedure? car)", "#t"),
        ("(procedure? (lambda (x) x))", "#t"),
        ("(procedure? 'car)", "#f"),
        ("(vector? #(1))", "#t"),
        ("(vector? '(1))", "#f"),
    ],
)
def test_predicates(run, expr, expected):
    assert run(expr) == expected


def test_equal_on_long_lists(run):
    run("(define (build n) (let loop ((i 0) (acc '())) (if (= i n) acc (loop (+ i 1) (cons i acc)))))")
    assert run("(equal? (build 100000) (build 100000))") == "#t"


def test_equal_on_circular_structure(interp, run):
    interp.eval("(define a (list 1 2))")
    interp.eval("(set-cdr! (cdr a) a)")
    interp.eval("(define b (list 1 2))")
    interp.eval("(set-cdr! (cdr b) b)")
    assert run("(equal? a b)") == "#t"
    interp.eval("(define v (vector 1 2))")
    interp.eval("(vector-set! v 1 v)")
    interp.eval("(define w (vector 1 2))")
    interp.eval("(vector-set! w 1 w)")
    assert run("(equal? v w)") == "#t"
    interp.eval("(define d (list 1 3))")
    interp.eval("(set-cdr! (cdr d) d)")
    assert run("(equal? a d)") == "#f"


# -------------------------------
# Symbols, characters and strings
# -------------------------------

@pytest.mark.parametrize(
    "expr,expected",
    [
        ("(symbol->string 'abc)", '"abc"'),
        ("(string->symbol \"hello world\")", "hello world"),
        ("(eq? (string->symbol \"x\") 'x)", "#t"),
        ("(char->integer #\\A)", "65"),
        ("(integer->char 97)", "#\\a"),
        ("(integer->char 32)", "#\\space"),
        ("(char-upcase #\\a)", "#\\A"),
        ("(char-downcase #\\A)", "#\\a"),
        ("(char-alphabetic? #\\a)", "#t"),
        ("(char-numeric? #\\7)", "#t"),
        ("(char-whitespace? #\\tab)", "#t"),
        ("(char=? #\\a #\\a)", "#t"),
        ("(char<? #\\a #\\b #\\c)", "#t"),
        ("(char>? #\\a #\\b)", "#f"),
        ("(string-length \"hello\")", "5"),
        ("(string-length \"\")", "0"),
        ("(string-ref \"abc\" 1)", "#\\b"),
        ("(substring \"hello\" 1 3)", '"el"'),
        ("(substring \"hello\" 2)", '"llo"'),
        ("(string-append \"foo\" \"bar\")", '"foobar"'),
        ("(string-append)", '""'),
        ("(string-copy \"hello\" 1)", '"ello"'),
        ("(string->list \"abc\")", "(#\\a #\\b #\\c)"),
        ("(list->string (list #\\a #\\b))", '"ab"'),
        ("(string #\\x #\\y)", '"xy"'),
        ("(make-string 3 #\\z)", '"zzz"'),
        ("(make-string 2)", '"  "'),
        ("(string=? \"a\" \"a\" \"a\")", "#t"),
        ("(string<? \"abc\" \"abd\")", "#t"),
        ("(string>? \"b\" \"a\")", "#t"),
        ("(string-upcase \"Hello\")", '"HELLO"'),
        ("(string-downcase \"Hello\")", '"hello"'),
        ('(string-length "a\\nb")', "3"),
    ],
)
def test_strings_and_chars(run, expr, expected):
    assert run(expr) == expected


def test_string_mutation(run):
    run('(define s (string-copy "hello"))')
    run("(string-set! s 0 #\\j)")
    assert run("s") == '"jello"'
    run("(string-fill! s #\\x 3)")
    assert run("s") == '"jelxx"'


def test_string_copy_is_fresh(run):
    run('(define a "abc")')
    run("(define b (string-copy a))")
    run("(string-set! b 0 #\\z)")
    assert run("a") == '"abc"'


@pytest.mark.parametrize(
    "expr",
    ['(string-ref "abc" 3)', '(string-ref "abc" -1)', "(string-length 'abc)", '(substring "abc" 2 1)',
     "(symbol->string \"a\")", "(char->integer \"a\")", "(list->string '(1 2))", '(string-append "a" 1)',
     "(integer->char -1)"],
)
def test_string_type_errors(interp, expr):
    with pytest.raises(SchemeTypeError):
        interp.eval(expr)


# -------------------------------
# Vectors
# -------------------------------

@pytest.mark.parametrize(
    "expr,expected",
    [
        ("(vector 1 2 3)", "#(1 2 3)"),
        ("(vector)", "#()"),
        ("(make-vector 2 'a)", "#(a a)"),
        ("(vector-length #(1 2 3))", "3"),
        ("(vector-ref #(1 2 3) 0)", "1"),
        ("(vector->list #(1 2 3))", "(1 2 3)"),
        ("(vector->list #(1 2 3) 1)", "(2 3)"),
        ("(list->vector '(1 2))", "#(1 2)"),
        ("(vector-copy #(1 2 3) 1 2)", "#(2)"),
        ("(let ((v (vector 1 2 3))) (vector-fill! v 0) v)", "#(0 0 0)"),
        ("(let ((v (vector 1 2 3))) (vector-set! v 1 'x) v)", "#(1 x 3)"),
        ("(vector-map + #(1 2) #(10 20))", "#(11 22)"),
    ],
)
def test_vectors(run, expr, expected):
    assert run(expr) == expected


@pytest.mark.parametrize(
    "expr", ["(vector-ref #(1 2) 2)", "(vector-ref '(1) 0)", "(vector-set! #(1) 1.0 0)", "(make-vector -1)"],
)
def test_vector_type_errors(interp, expr):
    with pytest.raises(SchemeTypeError):
        interp.eval(expr)


# -------------------------------
# Control
# -------------------------------

@pytest.mark.parametrize(
    "expr,expected",
    [
        ("(apply + '(1 2 3))", "6"),
        ("(apply + 1 2 '(3 4))", "10"),
        ("(apply list '())", "()"),
        ("(map (lambda (x) (* x x)) '(1 2 3))", "(1 4 9)"),
        ("(map + '(1 2 3) '(10 20))", "(11 22)"),
        ("(map car '())", "()"),
        ("(let ((acc '())) (for-each (lambda (x) (set! acc (cons x acc))) '(1 2 3)) acc)", "(3 2 1)"),
        ("(let ((n 0)) (vector-for-each (lambda (x) (set! n (+ n x))) #(1 2 3)) n)", "6"),
        ("(values 1)", "1"),
        ("(values 1 2)", "1 2"),
        ("(call-with-values (lambda () (values)) list)", "()"),
        ("(procedure? (eval 'car (interaction-environment)))", "#t"),
        ("(eof-object? (eof-object))", "#t"),
        ("(eof-object? '())", "#f"),
    ],
)
def test_control(run, expr, expected):
    assert run(expr) == expected


@pytest.mark.parametrize(
    "expr",
    ["(apply + 1)", "(apply 5 '())", "(map 5 '(1))", "(map car 5)", "(eval 1 2)", "(force (delay-force 5))"],
)
def test_control_type_errors(interp, expr):
    with pytest.raises(SchemeTypeError):
        interp.eval(expr)


@pytest.mark.parametrize(
    "expr",
    ["(car)", "(car '(1) '(2))", "(cons 1)", "(vector-ref #(1))", "(-)", "(exit 1 2)", "(make-string)"],
)
def test_builtin_arity(interp, expr):
    with pytest.raises(ArityError):
        interp.eval(expr)


def test_arity_error_details(interp):
    with pytest.raises(ArityError) as exc:
        interp.eval("(cons 1)")
    assert exc.value.procedure == "cons"
    assert exc.value.expected == 2
    assert exc.value.given == 1
    assert str(exc.value) == "cons: expected 2 arguments, given 1"

    with pytest.raises(ArityError) as exc:
        interp.eval("(-)")
    assert "at least 1" in str(exc.value)


def test_error_builtin(interp):
    with pytest.raises(SchemeError) as exc:
        interp.eval("(error \"bad thing\" 1 'x)")
    assert exc.value.reason == "bad thing"
    assert exc.value.irritants == (1, Symbol("x"))
    assert str(exc.value) == "bad thing 1 x"


def test_error_irritants_use_write_form(interp):
    with pytest.raises(SchemeError) as exc:
        interp.eval('(error "not found:" "key" #\\a)')
    assert str(exc.value) == 'not found: "key" #\\a'


@pytest.mark.parametrize("expr,code", [("(exit)", 0), ("(exit #t)", 0), ("(exit #f)", 1), ("(exit 3)", 3)])
def test_exit(interp, expr, code):
    with pytest.raises(SystemExit) as exc:
        interp.eval(expr)
    assert exc.value.code == code


# -------------------------------
# Input and output
# -------------------------------

def test_display_and_write(interp, capsys):
    interp.eval('(display "hi") (newline) (write "hi") (newline) (display #\\a) (write #\\a)')
    assert capsys.readouterr().out == 'hi\n"hi"\na#\\a'


def test_display_of_nested_data(interp, capsys):
    interp.eval("(display '(1 \"two\" #\\3 #(4.5)))")
    assert capsys.readouterr().out == "(1 two 3 #(4.5))"


def test_write_string_and_char(interp, capsys):
    interp.eval('(write-string "abc") (write-char #\\d) (flush-output-port)')
    assert capsys.readouterr().out == "abcd"


def test_output_to_a_port(interp):
    port = io.StringIO()
    interp.env.define(Symbol("port"), port)
    interp.eval('(display "x" port) (write "y" port) (newline port)')
    assert port.getvalue() == 'x"y"\n'


def test_bad_port(interp):
    with pytest.raises(SchemeTypeError):
        interp.eval('(display "x" 5)')


def test_read_line(interp, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("first\nsecond"))
    assert to_write_string(interp.eval("(read-line)")) == '"first"'
    assert to_write_string(interp.eval("(read-line)")) == '"second"'
    assert interp.eval("(eof-object? (read-line))") is True


def test_read_line_from_port(interp):
    interp.env.define(Symbol("in"), io.StringIO("line\n"))
    assert to_write_string(interp.eval("(read-line in)")) == '"line"'


# -------------------------------
# Prelude
# -------------------------------

@pytest.fixture
def prelude_run():
    interp = Interpreter(prelude="auto")
    return lambda code: to_write_string(interp.eval(code))


@pytest.mark.parametrize(
    "expr,expected",
    [
        ("(filter odd? '(1 2 3 4 5))", "(1 3 5)"),
        ("(remove odd? '(1 2 3 4 5))", "(2 4)"),
        ("(fold-left cons '() '(1 2 3))", "(((() . 1) . 2) . 3)"),
        ("(fold-right cons '() '(1 2 3))", "(1 2 3)"),
        ("(fold-left + 0 '(1 2 3))", "6"),
        ("(reduce + 0 '(1 2 3 4))", "10"),
        ("(reduce + 0 '())", "0"),
        ("(iota 5)", "(0 1 2 3 4)"),
        ("(iota 3 1)", "(1 2 3)"),
        ("(iota 3 0 2)", "(0 2 4)"),
        ("(iota 0)", "()"),
        ("(list-index even? '(1 3 4))", "2"),
        ("(list-index even? '(1 3))", "#f"),
        ("(length (filter even? (iota 100000)))", "50000"),
    ],
)
def test_prelude(prelude_run, expr, expected):
    assert prelude_run(expr) == expected


def test_prelude_is_not_loaded_by_default(interp):
    with pytest.raises(UnboundVariable):
        interp.eval("(iota 3)")


def test_prelude_path_from_environment(tmp_path, monkeypatch):
    first = tmp_path / "first.scm"
    first.write_text("(define (twice x) (* 2 x))", encoding="utf-8")
    second = tmp_path / "second.scm"
    second.write_text("(define four (twice 2))", encoding="utf-8")
    monkeypatch.setenv("LUNA_PRELUDE_PATH", os.pathsep.join([str(first), str(second)]))

    interp = Interpreter(prelude="auto")
    assert interp.eval("four") == 4
    with pytest.raises(UnboundVariable):
        interp.eval("(iota 3)")


def test_prelude_from_source():
    interp = Interpreter(prelude="(define answer 42)")
    assert interp.eval("answer") == 42


