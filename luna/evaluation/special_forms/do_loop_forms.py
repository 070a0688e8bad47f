"""The (do ...) iteration form.

The loop is a small evaluator object that closes over the parsed loop spec
and reuses the main evaluator for tests, bodies and steps.
"""

from __future__ import annotations

from typing import Optional

from luna import EvaluatorFn, SExpression, SchemeValue
from luna.errors import MalformedSpecialForm
from luna.evaluation.apply import eval_sequence
from luna.printer import to_write_string
from luna.types.environment import Environment
from luna.types.markers import Unspecified
from luna.types.nil import Nil
from luna.types.pair import Pair
from luna.types.symbol import Symbol


class DoLoopEval:
    """Implements the (do ...) loop.

    varspecs: [(var init step?) ...]
    end_clause: [test expr*]
    body: forms executed for effect each iteration
    """

    def __init__(
        self,
        varspecs: list[tuple[Symbol, SExpression, Optional[SExpression]]],
        end_clause: list[SExpression],
        body: list[SExpression],
        evaluate_fn: EvaluatorFn,
    ):
        self.varspecs = varspecs
        self.end_clause = end_clause
        self.body = body
        self.evaluate_fn = evaluate_fn

    def eval(self, env: Environment) -> SchemeValue:
        evaluate_fn = self.evaluate_fn

        # 1: initial values, all evaluated in the outer environment
        frame = env.child()
        for name, init, _ in self.varspecs:
            frame.vars[name] = evaluate_fn(init, env)

        test_expr, *exit_exprs = self.end_clause

        # 2: loop; every iteration gets a fresh frame so closures captured in
        # the body keep the values of their own iteration
        while evaluate_fn(test_expr, frame) is False:
            for expr in self.body:
                evaluate_fn(expr, frame)
            stepped = [
                (name, evaluate_fn(step, frame) if step is not None else frame.vars[name])
                for name, _, step in self.varspecs
            ]
            frame = env.child()
            for name, value in stepped:
                frame.vars[name] = value

        # 3: exit expressions, the last one in tail position
        if not exit_exprs:
            return Unspecified
        return eval_sequence(exit_exprs, frame, evaluate_fn)


def _parse_varspecs(specs: SExpression) -> list[tuple[Symbol, SExpression, Optional[SExpression]]]:
    result = []
    node = specs
    while isinstance(node, Pair):
        spec = node.car
        parts = []
        inner = spec
        while isinstance(inner, Pair):
            parts.append(inner.car)
            inner = inner.cdr
        if inner is not Nil or len(parts) not in (2, 3) or not isinstance(parts[0], Symbol):
            raise MalformedSpecialForm("do", f"invalid variable spec {to_write_string(spec)}")
        result.append((parts[0], parts[1], parts[2] if len(parts) == 3 else None))
        node = node.cdr
    if node is not Nil:
        raise MalformedSpecialForm("do", "variable specs must be a list")
    if len({name for name, _, _ in result}) != len(result):
        raise MalformedSpecialForm("do", "duplicate loop variable")
    return result


def do_loop_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    """(do ((var init step) ...) (test expr...) body...)"""
    if len(tail) < 2:
        raise MalformedSpecialForm("do", "expected (do ((var init step) ...) (test expr...) body...)")
    varspecs = _parse_varspecs(tail[0])
    end_clause = []
    node = tail[1]
    while isinstance(node, Pair):
        end_clause.append(node.car)
        node = node.cdr
    if node is not Nil or not end_clause:
        raise MalformedSpecialForm("do", "end clause must be (test expr...)")
    return DoLoopEval(varspecs, end_clause, tail[2:], evaluate_fn).eval(env)
