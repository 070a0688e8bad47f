"""Block-scoping special forms: let (plain and named), let*, letrec, letrec*,
let-values and let*-values.

Each form creates at least one fresh child frame of the current environment
and evaluates its body there, with the last body form in tail position.
"""

from __future__ import annotations

from luna import EvaluatorFn, SExpression, SchemeValue
from luna.errors import MalformedSpecialForm
from luna.evaluation.apply import eval_sequence
from luna.evaluation.special_forms.lambda_form import parse_params
from luna.printer import to_write_string
from luna.types.environment import Environment
from luna.types.markers import Unassigned
from luna.types.nil import Nil
from luna.types.pair import Pair
from luna.types.procedure import Closure, bind_formals
from luna.types.symbol import Symbol
from luna.types.values import Values


def _parse_bindings(bindings: SExpression, keyword: str) -> list[tuple[SExpression, SExpression]]:
    """Validate ((name init) ...) and return it as a list of (name, init) pairs."""
    result = []
    node = bindings
    while isinstance(node, Pair):
        spec = node.car
        if not (isinstance(spec, Pair) and isinstance(spec.cdr, Pair) and spec.cdr.cdr is Nil):
            raise MalformedSpecialForm(keyword, f"invalid binding {to_write_string(spec)}")
        result.append((spec.car, spec.cdr.car))
        node = node.cdr
    if node is not Nil:
        raise MalformedSpecialForm(keyword, f"bindings must be a list, got {to_write_string(bindings)}")
    return result


def _variable_bindings(bindings: SExpression, keyword: str, distinct: bool = True) -> list[tuple[Symbol, SExpression]]:
    pairs = _parse_bindings(bindings, keyword)
    for name, _ in pairs:
        if not isinstance(name, Symbol):
            raise MalformedSpecialForm(keyword, f"cannot bind {to_write_string(name)}")
    if distinct and len({name for name, _ in pairs}) != len(pairs):
        raise MalformedSpecialForm(keyword, "duplicate variable in bindings")
    return pairs


def _body(body: list[SExpression], keyword: str) -> list[SExpression]:
    if not body:
        raise MalformedSpecialForm(keyword, "body must contain at least one expression")
    return body


def let_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    """
    (let ((name init) ...) body...)
    (let loop ((name init) ...) body...)   ; named let

    Initializers are evaluated in the outer environment, then bound together
    in one new frame.
    """
    if not tail:
        raise MalformedSpecialForm("let", "expected (let bindings body...)")

    if isinstance(tail[0], Symbol):
        if len(tail) < 2:
            raise MalformedSpecialForm("let", "expected (let name bindings body...)")
        loop_name = tail[0]
        pairs = _variable_bindings(tail[1], "let")
        body = _body(tail[2:], "let")
        args = [evaluate_fn(init, env) for _, init in pairs]
        # The loop procedure sees itself, but not the loop variables' outer names.
        loop_env = env.child()
        proc = Closure([name for name, _ in pairs], None, body, loop_env, loop_name.id)
        loop_env.define(loop_name, proc)
        return eval_sequence(body, proc.bind(args), evaluate_fn)

    pairs = _variable_bindings(tail[0], "let")
    body = _body(tail[1:], "let")
    values = [evaluate_fn(init, env) for _, init in pairs]
    frame = env.child()
    for (name, _), value in zip(pairs, values):
        frame.vars[name] = value
    return eval_sequence(body, frame, evaluate_fn)


def let_star_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    """(let* ((name init) ...) body...): each initializer sees the bindings before it."""
    if not tail:
        raise MalformedSpecialForm("let*", "expected (let* bindings body...)")
    pairs = _variable_bindings(tail[0], "let*", distinct=False)
    body = _body(tail[1:], "let*")
    frame = env
    for name, init in pairs:
        value = evaluate_fn(init, frame)
        frame = frame.child()
        frame.vars[name] = value
    if frame is env:
        frame = env.child()
    return eval_sequence(body, frame, evaluate_fn)


def _letrec(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn,
            keyword: str, sequential: bool) -> SchemeValue:
    if not tail:
        raise MalformedSpecialForm(keyword, f"expected ({keyword} bindings body...)")
    pairs = _variable_bindings(tail[0], keyword)
    body = _body(tail[1:], keyword)

    # Every slot exists (unassigned) before any initializer runs, so the
    # initializers can close over each other.
    frame = env.child()
    for name, _ in pairs:
        frame.vars[name] = Unassigned

    def _named(name: Symbol, value: SchemeValue) -> SchemeValue:
        if isinstance(value, Closure) and value.name is None:
            value.name = name.id
        return value

    if sequential:
        for name, init in pairs:
            frame.vars[name] = _named(name, evaluate_fn(init, frame))
    else:
        values = [evaluate_fn(init, frame) for _, init in pairs]
        for (name, _), value in zip(pairs, values):
            frame.vars[name] = _named(name, value)
    return eval_sequence(body, frame, evaluate_fn)


def letrec_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    return _letrec(tail, env, evaluate_fn, "letrec", sequential=False)


def letrec_star_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    return _letrec(tail, env, evaluate_fn, "letrec*", sequential=True)


def _as_values(value: SchemeValue) -> list[SchemeValue]:
    if isinstance(value, Values):
        return list(value.items)
    return [value]


def let_values_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    """(let-values (((a b . rest) expr) ...) body...)"""
    if not tail:
        raise MalformedSpecialForm("let-values", "expected (let-values bindings body...)")
    pairs = _parse_bindings(tail[0], "let-values")
    body = _body(tail[1:], "let-values")
    results = [_as_values(evaluate_fn(init, env)) for _, init in pairs]
    frame = env.child()
    for (formals, _), values in zip(pairs, results):
        params, rest = parse_params(formals, "let-values")
        bind_formals(frame, params, rest, values, "let-values")
    return eval_sequence(body, frame, evaluate_fn)


def let_star_values_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    """(let*-values (((a b) expr) ...) body...): each clause sees the ones before it."""
    if not tail:
        raise MalformedSpecialForm("let*-values", "expected (let*-values bindings body...)")
    pairs = _parse_bindings(tail[0], "let*-values")
    body = _body(tail[1:], "let*-values")
    frame = env.child()
    for formals, init in pairs:
        values = _as_values(evaluate_fn(init, frame))
        params, rest = parse_params(formals, "let*-values")
        frame = bind_formals(frame.child(), params, rest, values, "let*-values")
    return eval_sequence(body, frame, evaluate_fn)
