from luna import EvaluatorFn, SExpression, SchemeValue
from luna.errors import MalformedSpecialForm
from luna.types.environment import Environment
from luna.types.nil import Nil
from luna.types.pair import Pair, from_iterable, make_list, to_list
from luna.types.symbol import Symbol

QUOTE = Symbol("quote")
QUASIQUOTE = Symbol("quasiquote")
UNQUOTE = Symbol("unquote")
UNQUOTE_SPLICING = Symbol("unquote-splicing")


def _operand(form: Pair, keyword: str) -> SExpression:
    rest = form.cdr
    if not isinstance(rest, Pair) or rest.cdr is not Nil:
        raise MalformedSpecialForm(keyword, "expects exactly 1 argument")
    return rest.car


def eval_quasiquote(
    template: SExpression,
    env: Environment,
    evaluate_fn: EvaluatorFn,
    depth: int = 1,
) -> SExpression:
    """Build the structure described by a quasiquote template.

    `depth` counts enclosing quasiquotes; only unquotes at depth 1 are
    evaluated, deeper ones are rebuilt with their own level decremented.
    """
    if isinstance(template, list):
        # Vector template: process as a list, then convert back.
        return to_list(eval_quasiquote(from_iterable(template), env, evaluate_fn, depth))
    if not isinstance(template, Pair):
        return template

    head = template.car
    if head is UNQUOTE:
        operand = _operand(template, "unquote")
        if depth == 1:
            return evaluate_fn(operand, env)
        return make_list(UNQUOTE, eval_quasiquote(operand, env, evaluate_fn, depth - 1))
    if head is QUASIQUOTE:
        operand = _operand(template, "quasiquote")
        return make_list(QUASIQUOTE, eval_quasiquote(operand, env, evaluate_fn, depth + 1))

    items: list[SExpression] = []
    node: SExpression = template
    while isinstance(node, Pair):
        # `(a . ,b) reads as (a unquote b): an unquote in cdr position is the tail.
        if node is not template and node.car in (UNQUOTE, QUASIQUOTE):
            break
        item = node.car
        if isinstance(item, Pair) and item.car is UNQUOTE_SPLICING:
            operand = _operand(item, "unquote-splicing")
            if depth == 1:
                items.extend(to_list(evaluate_fn(operand, env), "unquote-splicing"))
            else:
                items.append(make_list(UNQUOTE_SPLICING,
                                       eval_quasiquote(operand, env, evaluate_fn, depth - 1)))
        else:
            items.append(eval_quasiquote(item, env, evaluate_fn, depth))
        node = node.cdr

    tail = eval_quasiquote(node, env, evaluate_fn, depth)
    return from_iterable(items, tail)


def quote_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    if len(tail) != 1:
        raise MalformedSpecialForm("quote", "expects exactly 1 argument")
    return tail[0]


def quasiquote_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    if len(tail) != 1:
        raise MalformedSpecialForm("quasiquote", "expects exactly 1 argument")
    return eval_quasiquote(tail[0], env, evaluate_fn)


def unquote_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    raise MalformedSpecialForm("unquote", "not valid outside of quasiquote")


def unquote_splice_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    raise MalformedSpecialForm("unquote-splicing", "not valid outside of quasiquote")
