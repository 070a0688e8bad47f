"""Pair and list builtins."""

from __future__ import annotations

from luna import SchemeValue
from luna.builtin.registry import builtin, check_count, check_pair, check_procedure
from luna.errors import SchemeTypeError
from luna.evaluation.evaluator import call
from luna.types.environment import Environment
from luna.types.equivalence import is_eq, is_equal, is_eqv
from luna.types.markers import Unspecified
from luna.types.nil import Nil
from luna.types.pair import Pair, from_iterable, is_list, split_improper, to_list


@builtin("cons", 2)
def cons(env: Environment, args: list[SchemeValue]) -> Pair:
    """(cons obj1 obj2) a fresh pair whose car is obj1 and cdr is obj2."""
    return Pair(args[0], args[1])


@builtin("car", 1)
def car(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(car pair) first element of a pair."""
    return check_pair("car", args[0]).car


@builtin("cdr", 1)
def cdr(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(cdr pair) second element of a pair."""
    return check_pair("cdr", args[0]).cdr


@builtin("set-car!", 2)
def set_car(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(set-car! pair obj) store obj in the car of pair."""
    check_pair("set-car!", args[0]).car = args[1]
    return Unspecified


@builtin("set-cdr!", 2)
def set_cdr(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(set-cdr! pair obj) store obj in the cdr of pair."""
    check_pair("set-cdr!", args[0]).cdr = args[1]
    return Unspecified


def _make_cxr(name: str):
    # c[ad]+r: the letters are applied right to left.
    path = name[1:-1][::-1]

    def cxr(env: Environment, args: list[SchemeValue]) -> SchemeValue:
        value = args[0]
        for step in path:
            pair = check_pair(name, value)
            value = pair.car if step == "a" else pair.cdr
        return value

    cxr.__doc__ = f"({name} pair) composition of car and cdr."
    return cxr


for _name in ("caar", "cadr", "cdar", "cddr", "caddr", "cdddr", "cadddr"):
    builtin(_name, 1)(_make_cxr(_name))


@builtin("list", (0, None))
def list_(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(list obj ...) a fresh proper list of the arguments."""
    return from_iterable(args)


@builtin("make-list", (1, 2))
def make_list(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(make-list k [fill]) a list of k elements."""
    k = check_count("make-list", args[0])
    fill = args[1] if len(args) > 1 else Unspecified
    return from_iterable([fill] * k)


@builtin("list?", 1)
def is_list_(env: Environment, args: list[SchemeValue]) -> bool:
    """(list? obj) #t for proper lists, including ()."""
    return is_list(args[0])


@builtin("pair?", 1)
def is_pair(env: Environment, args: list[SchemeValue]) -> bool:
    """(pair? obj)"""
    return isinstance(args[0], Pair)


@builtin("null?", 1)
def is_null(env: Environment, args: list[SchemeValue]) -> bool:
    """(null? obj) #t only for the empty list."""
    return args[0] is Nil


@builtin("length", 1)
def length(env: Environment, args: list[SchemeValue]) -> int:
    """(length list) number of elements of a proper list."""
    if not is_list(args[0]):
        raise SchemeTypeError("length", "a proper list", args[0])
    return len(to_list(args[0], "length"))


@builtin("append", (0, None))
def append(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(append list ... obj) concatenation; the last argument is shared, not copied."""
    if not args:
        return Nil
    items: list[SchemeValue] = []
    for lst in args[:-1]:
        items.extend(to_list(lst, "append"))
    return from_iterable(items, args[-1])


@builtin("reverse", 1)
def reverse(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(reverse list) a fresh list with the elements in reverse order."""
    result = Nil
    for item in to_list(args[0], "reverse"):
        result = Pair(item, result)
    return result


def _tail(procedure: str, lst: SchemeValue, k: SchemeValue) -> SchemeValue:
    k = check_count(procedure, k)
    node = lst
    for _ in range(k):
        if not isinstance(node, Pair):
            raise SchemeTypeError(procedure, f"a list of at least {k} elements", lst)
        node = node.cdr
    return node


@builtin("list-tail", 2)
def list_tail(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(list-tail list k) the sublist after dropping k elements."""
    return _tail("list-tail", args[0], args[1])


@builtin("list-ref", 2)
def list_ref(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(list-ref list k) the k-th element, counting from zero."""
    node = _tail("list-ref", args[0], args[1])
    if not isinstance(node, Pair):
        raise SchemeTypeError("list-ref", f"a list of more than {args[1]} elements", args[0])
    return node.car


@builtin("list-copy", 1)
def list_copy(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(list-copy obj) a fresh copy of the list spine; other objects are returned as-is."""
    items, tail = split_improper(args[0], "list-copy")
    return from_iterable(items, tail)


@builtin("last-pair", 1)
def last_pair(env: Environment, args: list[SchemeValue]) -> Pair:
    """(last-pair list) the last pair of a non-empty list."""
    node = slow = check_pair("last-pair", args[0])
    steps = 0
    while isinstance(node.cdr, Pair):
        node = node.cdr
        steps += 1
        if steps % 2 == 0:
            slow = slow.cdr
            if node is slow:
                raise SchemeTypeError("last-pair", "a finite list", args[0])
    return node


# -------------------------------
# Searching
# -------------------------------

def _member(procedure: str, args: list[SchemeValue], same) -> SchemeValue:
    item, node = args[0], args[1]
    if len(args) > 2:
        compare = check_procedure(procedure, args[2])
        same = lambda a, b: call(compare, [a, b]) is not False
    while isinstance(node, Pair):
        if same(item, node.car):
            return node
        node = node.cdr
    if node is not Nil:
        raise SchemeTypeError(procedure, "a proper list", args[1])
    return False


def _assoc(procedure: str, args: list[SchemeValue], same) -> SchemeValue:
    key, node = args[0], args[1]
    if len(args) > 2:
        compare = check_procedure(procedure, args[2])
        same = lambda a, b: call(compare, [a, b]) is not False
    while isinstance(node, Pair):
        entry = node.car
        if not isinstance(entry, Pair):
            raise SchemeTypeError(procedure, "an association list of pairs", args[1])
        if same(key, entry.car):
            return entry
        node = node.cdr
    if node is not Nil:
        raise SchemeTypeError(procedure, "a proper list", args[1])
    return False


@builtin("memq", 2)
def memq(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(memq obj list) first sublist whose car is eq? to obj, or #f."""
    return _member("memq", args, is_eq)


@builtin("memv", 2)
def memv(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(memv obj list) first sublist whose car is eqv? to obj, or #f."""
    return _member("memv", args, is_eqv)


@builtin("member", (2, 3))
def member(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(member obj list [compare]) first sublist whose car is equal? to obj, or #f."""
    return _member("member", args, is_equal)


@builtin("assq", 2)
def assq(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(assq obj alist) first pair whose car is eq? to obj, or #f."""
    return _assoc("assq", args, is_eq)


@builtin("assv", 2)
def assv(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(assv obj alist) first pair whose car is eqv? to obj, or #f."""
    return _assoc("assv", args, is_eqv)


@builtin("assoc", (2, 3))
def assoc(env: Environment, args: list[SchemeValue]) -> SchemeValue:
    """(assoc obj alist [compare]) first pair whose car is equal? to obj, or #f."""
    return _assoc("assoc", args, is_equal)
