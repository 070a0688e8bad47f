"""Conditional dispatch: cond and case.

Clause bodies are evaluated in tail position. A `=>` clause passes the
selected value to a single-argument procedure, also as a tail call.
"""

from __future__ import annotations

from luna import EvaluatorFn, SExpression, SchemeValue
from luna.errors import MalformedSpecialForm
from luna.evaluation.apply import apply, eval_sequence
from luna.printer import to_write_string
from luna.types.environment import Environment
from luna.types.equivalence import is_eqv
from luna.types.markers import Unspecified
from luna.types.nil import Nil
from luna.types.pair import Pair
from luna.types.symbol import Symbol
from luna.types.tail_call import TailCall

ELSE = Symbol("else")
ARROW = Symbol("=>")


def _clause_items(clause: SExpression, keyword: str) -> list[SExpression]:
    items = []
    node = clause
    while isinstance(node, Pair):
        items.append(node.car)
        node = node.cdr
    if node is not Nil or not items:
        raise MalformedSpecialForm(keyword, f"invalid clause {to_write_string(clause)}")
    return items


def _arrow_target(value: SchemeValue, items: list[SExpression], env: Environment,
                  evaluate_fn: EvaluatorFn, keyword: str) -> SchemeValue:
    # items is (test => receiver)
    if len(items) != 3:
        raise MalformedSpecialForm(keyword, "expected exactly one receiver after =>")
    receiver = evaluate_fn(items[2], env)
    return apply(receiver, [value], env, evaluate_fn)


def cond_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    """
    (cond (test body...) ... (else body...))
    (cond (test => receiver) ...)
    (cond (test) ...)               ; yields the test value

    With no matching clause the result is unspecified.
    """
    for index, clause in enumerate(tail):
        items = _clause_items(clause, "cond")
        test, rest = items[0], items[1:]

        if test is ELSE:
            if index != len(tail) - 1:
                raise MalformedSpecialForm("cond", "else clause must be last")
            if not rest:
                raise MalformedSpecialForm("cond", "else clause needs a body")
            return eval_sequence(rest, env, evaluate_fn)

        value = evaluate_fn(test, env)
        if value is False:
            continue
        if not rest:
            return value
        if rest[0] is ARROW:
            return _arrow_target(value, items, env, evaluate_fn, "cond")
        return eval_sequence(rest, env, evaluate_fn)
    return Unspecified


def case_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    """
    (case key ((datum ...) body...) ... (else body...))

    The key is evaluated once and compared with each datum using eqv?.
    Either kind of clause may use `=> receiver` instead of a body.
    """
    if not tail:
        raise MalformedSpecialForm("case", "expected (case key clause...)")
    key = evaluate_fn(tail[0], env)
    clauses = tail[1:]

    for index, clause in enumerate(clauses):
        items = _clause_items(clause, "case")
        data, rest = items[0], items[1:]
        if not rest:
            raise MalformedSpecialForm("case", f"clause has no body: {to_write_string(clause)}")

        if data is ELSE:
            if index != len(clauses) - 1:
                raise MalformedSpecialForm("case", "else clause must be last")
            matched = True
        else:
            matched = False
            node = data
            while isinstance(node, Pair):
                if is_eqv(node.car, key):
                    matched = True
                    break
                node = node.cdr
            if not matched and node is not Nil:
                raise MalformedSpecialForm("case", f"invalid datum list {to_write_string(data)}")

        if matched:
            if rest[0] is ARROW:
                return _arrow_target(key, items, env, evaluate_fn, "case")
            return eval_sequence(rest, env, evaluate_fn)
    return Unspecified
