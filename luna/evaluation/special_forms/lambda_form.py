from __future__ import annotations

from typing import Optional

from luna import EvaluatorFn, SExpression, SchemeValue
from luna.errors import MalformedSpecialForm
from luna.printer import to_write_string
from luna.types.environment import Environment
from luna.types.nil import Nil
from luna.types.pair import Pair
from luna.types.procedure import Closure
from luna.types.symbol import Symbol


def parse_params(formals: SExpression, keyword: str) -> tuple[list[Symbol], Optional[Symbol]]:
    """Split a formals specification into positional names and the rest name.

    Accepts `(a b)`, `(a b . rest)` and a bare `rest` symbol.
    """
    params: list[Symbol] = []
    node = formals
    while isinstance(node, Pair):
        if not isinstance(node.car, Symbol):
            raise MalformedSpecialForm(keyword, f"parameter must be a symbol, got {to_write_string(node.car)}")
        params.append(node.car)
        node = node.cdr
    rest: Optional[Symbol] = None
    if isinstance(node, Symbol):
        rest = node
    elif node is not Nil:
        raise MalformedSpecialForm(keyword, f"invalid parameter list {to_write_string(formals)}")

    names = params + ([rest] if rest is not None else [])
    if len(set(names)) != len(names):
        raise MalformedSpecialForm(keyword, "duplicate parameter name")
    return params, rest


def make_closure(formals: SExpression, body: list[SExpression], env: Environment,
                 name: Optional[str], keyword: str) -> Closure:
    params, rest = parse_params(formals, keyword)
    if not body:
        raise MalformedSpecialForm(keyword, "body must contain at least one expression")
    return Closure(params, rest, body, env, name)


def lambda_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    # (lambda formals body...) captures the current environment; nothing is evaluated yet.
    if not tail:
        raise MalformedSpecialForm("lambda", "expected (lambda formals body...)")
    return make_closure(tail[0], tail[1:], env, None, "lambda")


def named_lambda_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    """(named-lambda (name . formals) body...)"""
    if not tail or not isinstance(tail[0], Pair) or not isinstance(tail[0].car, Symbol):
        raise MalformedSpecialForm("named-lambda", "expected (named-lambda (name . formals) body...)")
    return make_closure(tail[0].cdr, tail[1:], env, tail[0].car.id, "named-lambda")
