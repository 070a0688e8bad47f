from luna import EvaluatorFn, SExpression, SchemeValue
from luna.errors import MalformedSpecialForm
from luna.evaluation.apply import eval_sequence
from luna.types.environment import Environment
from luna.types.markers import Unspecified
from luna.types.tail_call import TailCall


def and_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    """Short-circuiting logical AND special form.

    (and a b c ...) evaluates each operand left-to-right until #f is found,
    which is returned immediately. Otherwise the last operand is evaluated in
    tail position. With zero operands, returns #t.
    """
    if not tail:
        return True
    for expr in tail[:-1]:
        if evaluate_fn(expr, env) is False:
            return False
    return TailCall(tail[-1], env)


def or_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    """Short-circuiting logical OR special form.

    (or a b c ...) returns the first operand value that is not #f; the last
    operand is evaluated in tail position. With zero operands, returns #f.
    """
    if not tail:
        return False
    for expr in tail[:-1]:
        val = evaluate_fn(expr, env)
        if val is not False:
            return val
    return TailCall(tail[-1], env)


def when_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    if len(tail) < 2:
        raise MalformedSpecialForm("when", "expected (when test body...)")
    if evaluate_fn(tail[0], env) is not False:
        return eval_sequence(tail[1:], env, evaluate_fn)
    return Unspecified


def unless_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    if len(tail) < 2:
        raise MalformedSpecialForm("unless", "expected (unless test body...)")
    if evaluate_fn(tail[0], env) is False:
        return eval_sequence(tail[1:], env, evaluate_fn)
    return Unspecified
