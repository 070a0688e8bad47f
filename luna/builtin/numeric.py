"""Numeric builtins.

Exactness is preserved: int and Fraction results stay exact, and a single
float operand makes the result a float. Exact results that are integral are
always returned as int, never as Fraction(n, 1). Exact operands too large
for a float become +inf.0 or -inf.0 when mixed with inexact ones.
"""

from __future__ import annotations

import math
from fractions import Fraction
from functools import reduce

from luna import SchemeValue
from luna.builtin.registry import builtin, check_integer, check_number
from luna.errors import DivisionByZero, SchemeTypeError
from luna.printer import format_number
from luna.reader.lexer import parse_number
from luna.types.environment import Environment
from luna.types.mstring import MString
from luna.types.number import Number, normalize as _normalize, to_inexact
from luna.types.values import Values


def _numbers(procedure: str, args: list[SchemeValue]) -> list[Number]:
    nums = [check_number(procedure, x) for x in args]
    if any(isinstance(x, float) for x in nums):
        return [to_inexact(x) for x in nums]
    return nums


def _contagion(result: Number, args: list[Number]) -> Number:
    if any(isinstance(x, float) for x in args):
        return to_inexact(result)
    return result


def _divide(procedure: str, a: Number, b: Number) -> Number:
    if isinstance(a, float) or isinstance(b, float):
        a, b = to_inexact(a), to_inexact(b)
        if b == 0:
            if a == 0 or math.isnan(a):
                return math.nan
            return math.copysign(math.inf, a) * math.copysign(1.0, b)
        return a / b
    if b == 0:
        raise DivisionByZero(procedure)
    return _normalize(Fraction(a) / Fraction(b))


# -------------------------------
# Arithmetic
# -------------------------------

@builtin("+", (0, None))
def add(env: Environment, args: list[SchemeValue]) -> Number:
    """(+ z ...) sum of the arguments; (+) is 0."""
    return _normalize(sum(_numbers("+", args), 0))


@builtin("*", (0, None))
def mul(env: Environment, args: list[SchemeValue]) -> Number:
    """(* z ...) product of the arguments; (*) is 1."""
    return _normalize(reduce(lambda a, b: a * b, _numbers("*", args), 1))


@builtin("-", (1, None))
def sub(env: Environment, args: list[SchemeValue]) -> Number:
    """(- z) negation; (- z1 z2 ...) subtracts the rest from z1."""
    nums = _numbers("-", args)
    if len(nums) == 1:
        return -nums[0]
    return _normalize(reduce(lambda a, b: a - b, nums))


@builtin("/", (1, None))
def div(env: Environment, args: list[SchemeValue]) -> Number:
    """(/ z) reciprocal; (/ z1 z2 ...) divides z1 by the rest. Exact division by zero is an error."""
    nums = _numbers("/", args)
    if len(nums) == 1:
        return _divide("/", 1, nums[0])
    return reduce(lambda a, b: _divide("/", a, b), nums)


# -------------------------------
# Comparison
# -------------------------------

def _chain(procedure: str, args: list[SchemeValue], test) -> bool:
    # Mixed exact/inexact comparisons are exact in Python; keep them that way.
    nums = [check_number(procedure, x) for x in args]
    return all(test(a, b) for a, b in zip(nums, nums[1:]))


@builtin("=", (1, None))
def num_eq(env: Environment, args: list[SchemeValue]) -> bool:
    """(= z1 z2 ...) #t when all arguments are numerically equal."""
    return _chain("=", args, lambda a, b: a == b)


@builtin("<", (1, None))
def lt(env: Environment, args: list[SchemeValue]) -> bool:
    """(< x1 x2 ...) #t when the arguments are strictly increasing."""
    return _chain("<", args, lambda a, b: a < b)


@builtin(">", (1, None))
def gt(env: Environment, args: list[SchemeValue]) -> bool:
    """(> x1 x2 ...) #t when the arguments are strictly decreasing."""
    return _chain(">", args, lambda a, b: a > b)


@builtin("<=", (1, None))
def lte(env: Environment, args: list[SchemeValue]) -> bool:
    """(<= x1 x2 ...) #t when the arguments are non-decreasing."""
    return _chain("<=", args, lambda a, b: a <= b)


@builtin(">=", (1, None))
def gte(env: Environment, args: list[SchemeValue]) -> bool:
    """(>= x1 x2 ...) #t when the arguments are non-increasing."""
    return _chain(">=", args, lambda a, b: a >= b)


# -------------------------------
# Integer division
# -------------------------------

def _int_pair(procedure: str, args: list[SchemeValue]) -> tuple[int | float, int | float]:
    a = check_integer(procedure, args[0])
    b = check_integer(procedure, args[1])
    if b == 0:
        raise DivisionByZero(procedure)
    return a, b


def _truncated_quotient(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


@builtin("quotient", 2)
def quotient(env: Environment, args: list[SchemeValue]) -> Number:
    """(quotient n1 n2) integer division truncated toward zero."""
    a, b = _int_pair("quotient", args)
    result = _truncated_quotient(int(a), int(b))
    return _contagion(result, [a, b])


@builtin("remainder", 2)
def remainder(env: Environment, args: list[SchemeValue]) -> Number:
    """(remainder n1 n2) remainder with the sign of n1."""
    a, b = _int_pair("remainder", args)
    ia, ib = int(a), int(b)
    return _contagion(ia - ib * _truncated_quotient(ia, ib), [a, b])


@builtin("modulo", 2)
def modulo(env: Environment, args: list[SchemeValue]) -> Number:
    """(modulo n1 n2) remainder with the sign of n2."""
    a, b = _int_pair("modulo", args)
    return _contagion(int(a) % int(b), [a, b])


@builtin("abs", 1)
def abs_(env: Environment, args: list[SchemeValue]) -> Number:
    """(abs x) absolute value."""
    return abs(check_number("abs", args[0]))


@builtin("min", (1, None))
def min_(env: Environment, args: list[SchemeValue]) -> Number:
    """(min x1 x2 ...) smallest argument; inexact if any argument is."""
    nums = _numbers("min", args)
    return _contagion(min(nums), nums)


@builtin("max", (1, None))
def max_(env: Environment, args: list[SchemeValue]) -> Number:
    """(max x1 x2 ...) largest argument; inexact if any argument is."""
    nums = _numbers("max", args)
    return _contagion(max(nums), nums)


@builtin("gcd", (0, None))
def gcd(env: Environment, args: list[SchemeValue]) -> Number:
    """(gcd n ...) greatest common divisor; (gcd) is 0."""
    nums = [check_integer("gcd", x) for x in args]
    return _contagion(math.gcd(*(int(n) for n in nums)), nums)


@builtin("lcm", (0, None))
def lcm(env: Environment, args: list[SchemeValue]) -> Number:
    """(lcm n ...) least common multiple; (lcm) is 1."""
    nums = [check_integer("lcm", x) for x in args]
    return _contagion(math.lcm(*(int(n) for n in nums)), nums)


# -------------------------------
# Rounding
# -------------------------------

def _rounding(procedure: str, x: SchemeValue, fn) -> Number:
    x = check_number(procedure, x)
    if isinstance(x, float):
        if math.isinf(x) or math.isnan(x):
            return x
        return float(fn(x))
    return fn(x)


@builtin("floor", 1)
def floor(env: Environment, args: list[SchemeValue]) -> Number:
    """(floor x) largest integer not greater than x."""
    return _rounding("floor", args[0], math.floor)


@builtin("ceiling", 1)
def ceiling(env: Environment, args: list[SchemeValue]) -> Number:
    """(ceiling x) smallest integer not less than x."""
    return _rounding("ceiling", args[0], math.ceil)


@builtin("truncate", 1)
def truncate(env: Environment, args: list[SchemeValue]) -> Number:
    """(truncate x) integer nearest to x toward zero."""
    return _rounding("truncate", args[0], math.trunc)


@builtin("round", 1)
def round_(env: Environment, args: list[SchemeValue]) -> Number:
    """(round x) nearest integer, ties to even."""
    return _rounding("round", args[0], round)


# -------------------------------
# Transcendental functions
# -------------------------------

def _exact_root(n: int) -> int | None:
    root = math.isqrt(n)
    return root if root * root == n else None


@builtin("sqrt", 1)
def sqrt(env: Environment, args: list[SchemeValue]) -> Number:
    """(sqrt z) square root; exact for exact perfect squares."""
    x = check_number("sqrt", args[0])
    if x < 0:
        raise SchemeTypeError("sqrt", "a non-negative number", x)
    if isinstance(x, int):
        root = _exact_root(x)
        if root is not None:
            return root
    elif isinstance(x, Fraction):
        num, den = _exact_root(x.numerator), _exact_root(x.denominator)
        if num is not None and den is not None:
            return Fraction(num, den)
    try:
        return math.sqrt(x)
    except OverflowError:
        # x is beyond the float range but its root may not be.
        return to_inexact(math.isqrt(int(x)))


@builtin("exact-integer-sqrt", 1)
def exact_integer_sqrt(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(exact-integer-sqrt k) two values s and r with s*s + r = k."""
    k = args[0]
    if isinstance(k, bool) or not isinstance(k, int) or k < 0:
        raise SchemeTypeError("exact-integer-sqrt", "an exact non-negative integer", k)
    s = math.isqrt(k)
    return Values((s, k - s * s))


@builtin("expt", 2)
def expt(env: Environment, args: list[SchemeValue]) -> Number:
    """(expt z1 z2) z1 raised to the power z2."""
    base = check_number("expt", args[0])
    power = check_number("expt", args[1])
    if isinstance(power, int) and not isinstance(base, float):
        if base == 0 and power < 0:
            raise DivisionByZero("expt")
        return _normalize(Fraction(base) ** power)
    try:
        return math.pow(to_inexact(base), to_inexact(power))
    except ValueError:
        return math.nan
    except OverflowError:
        return math.inf


def _float_fn(procedure: str, fn):
    def apply_fn(env: Environment, args: list[SchemeValue]) -> float:
        x = to_inexact(check_number(procedure, args[0]))
        try:
            return fn(x)
        except ValueError:
            return math.nan
        except OverflowError:
            return math.inf

    apply_fn.__doc__ = f"({procedure} z) {fn.__name__} of z as an inexact number."
    return apply_fn


builtin("exp", 1)(_float_fn("exp", math.exp))
builtin("sin", 1)(_float_fn("sin", math.sin))
builtin("cos", 1)(_float_fn("cos", math.cos))
builtin("tan", 1)(_float_fn("tan", math.tan))
builtin("asin", 1)(_float_fn("asin", math.asin))
builtin("acos", 1)(_float_fn("acos", math.acos))


@builtin("atan", (1, 2))
def atan(env: Environment, args: list[SchemeValue]) -> float:
    """(atan z) or (atan y x) arc tangent, the two-argument form using both signs."""
    y = to_inexact(check_number("atan", args[0]))
    if len(args) == 2:
        return math.atan2(y, to_inexact(check_number("atan", args[1])))
    return math.atan(y)


@builtin("log", (1, 2))
def log(env: Environment, args: list[SchemeValue]) -> float:
    """(log z) natural logarithm; (log z b) logarithm in base b."""
    x = check_number("log", args[0])

    def ln(v: Number) -> float:
        if v == 0:
            return -math.inf
        if v < 0:
            return math.nan
        if isinstance(v, Fraction):
            # math.log takes big ints directly, but not big fractions.
            return math.log(v.numerator) - math.log(v.denominator)
        return math.log(v)

    if len(args) == 2:
        return ln(x) / ln(check_number("log", args[1]))
    return ln(x)


@builtin("square", 1)
def square(env: Environment, args: list[SchemeValue]) -> Number:
    """(square z) z times z."""
    x = check_number("square", args[0])
    return x * x


# -------------------------------
# Exactness
# -------------------------------

@builtin("exact", 1)
def exact(env: Environment, args: list[SchemeValue]) -> int | Fraction:
    """(exact z) the exact number closest to z."""
    x = check_number("exact", args[0])
    if isinstance(x, float):
        if math.isnan(x) or math.isinf(x):
            raise SchemeTypeError("exact", "a finite number", x)
        return _normalize(Fraction(x))
    return x


@builtin("inexact", 1)
def inexact(env: Environment, args: list[SchemeValue]) -> float:
    """(inexact z) the inexact number closest to z."""
    return to_inexact(check_number("inexact", args[0]))


builtin("inexact->exact", 1)(exact)
builtin("exact->inexact", 1)(inexact)


@builtin("numerator", 1)
def numerator(env: Environment, args: list[SchemeValue]) -> Number:
    """(numerator q) numerator of q in lowest terms."""
    x = check_number("numerator", args[0])
    if isinstance(x, float):
        return float(Fraction(x).numerator)
    return Fraction(x).numerator


@builtin("denominator", 1)
def denominator(env: Environment, args: list[SchemeValue]) -> Number:
    """(denominator q) denominator of q in lowest terms; always positive."""
    x = check_number("denominator", args[0])
    if isinstance(x, float):
        return float(Fraction(x).denominator)
    return Fraction(x).denominator


# -------------------------------
# Predicates
# -------------------------------

def _is_number(x: SchemeValue) -> bool:
    return not isinstance(x, bool) and isinstance(x, (int, Fraction, float))


@builtin("number?", 1)
def is_number(env: Environment, args: list[SchemeValue]) -> bool:
    """(number? obj) #t for any number."""
    return _is_number(args[0])


builtin("complex?", 1)(is_number)
builtin("real?", 1)(is_number)


@builtin("rational?", 1)
def is_rational(env: Environment, args: list[SchemeValue]) -> bool:
    """(rational? obj) #t for exact numbers and finite inexact ones."""
    x = args[0]
    if isinstance(x, float):
        return math.isfinite(x)
    return _is_number(x)


@builtin("integer?", 1)
def is_integer(env: Environment, args: list[SchemeValue]) -> bool:
    """(integer? obj) #t for exact integers and integral floats."""
    x = args[0]
    if isinstance(x, float):
        return x.is_integer()
    return isinstance(x, int) and not isinstance(x, bool)


@builtin("exact?", 1)
def is_exact(env: Environment, args: list[SchemeValue]) -> bool:
    """(exact? z) #t when z is exact."""
    return not isinstance(check_number("exact?", args[0]), float)


@builtin("inexact?", 1)
def is_inexact(env: Environment, args: list[SchemeValue]) -> bool:
    """(inexact? z) #t when z is inexact."""
    return isinstance(check_number("inexact?", args[0]), float)


@builtin("exact-integer?", 1)
def is_exact_integer(env: Environment, args: list[SchemeValue]) -> bool:
    """(exact-integer? obj) #t for exact integers only."""
    return isinstance(args[0], int) and not isinstance(args[0], bool)


@builtin("nan?", 1)
def is_nan(env: Environment, args: list[SchemeValue]) -> bool:
    """(nan? z) #t for +nan.0."""
    x = check_number("nan?", args[0])
    return isinstance(x, float) and math.isnan(x)


@builtin("zero?", 1)
def is_zero(env: Environment, args: list[SchemeValue]) -> bool:
    """(zero? z)"""
    return check_number("zero?", args[0]) == 0


@builtin("positive?", 1)
def is_positive(env: Environment, args: list[SchemeValue]) -> bool:
    """(positive? x)"""
    return check_number("positive?", args[0]) > 0


@builtin("negative?", 1)
def is_negative(env: Environment, args: list[SchemeValue]) -> bool:
    """(negative? x)"""
    return check_number("negative?", args[0]) < 0


@builtin("odd?", 1)
def is_odd(env: Environment, args: list[SchemeValue]) -> bool:
    """(odd? n)"""
    return int(check_integer("odd?", args[0])) % 2 == 1


@builtin("even?", 1)
def is_even(env: Environment, args: list[SchemeValue]) -> bool:
    """(even? n)"""
    return int(check_integer("even?", args[0])) % 2 == 0


# -------------------------------
# Conversion
# -------------------------------

RADIXES = (2, 8, 10, 16)


def _radix(procedure: str, args: list[SchemeValue], index: int) -> int:
    if len(args) <= index:
        return 10
    radix = args[index]
    if isinstance(radix, bool) or not isinstance(radix, int) or radix not in RADIXES:
        raise SchemeTypeError(procedure, "a radix of 2, 8, 10 or 16", radix)
    return radix


def _int_to_base(n: int, radix: int) -> str:
    if radix == 10:
        return str(n)
    digits = {2: "b", 8: "o", 16: "x"}[radix]
    return format(n, digits)


@builtin("number->string", (1, 2))
def number_to_string(env: Environment, args: list[SchemeValue]) -> MString:
    """(number->string z [radix]) external representation of z."""
    x = check_number("number->string", args[0])
    radix = _radix("number->string", args, 1)
    if radix == 10 or isinstance(x, float):
        return MString(format_number(x))
    if isinstance(x, Fraction):
        return MString(f"{_int_to_base(x.numerator, radix)}/{_int_to_base(x.denominator, radix)}")
    return MString(_int_to_base(x, radix))


@builtin("string->number", (1, 2))
def string_to_number(env: Environment, args: list[SchemeValue]) -> Number | bool:
    """(string->number string [radix]) the number written in string, or #f."""
    s = args[0]
    if not isinstance(s, MString):
        raise SchemeTypeError("string->number", "a string", s)
    value = parse_number(s.value, _radix("string->number", args, 1))
    return False if value is None else value
