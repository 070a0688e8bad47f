from luna import EvaluatorFn, SExpression, SchemeValue
from luna.errors import MalformedSpecialForm
from luna.printer import to_write_string
from luna.evaluation.special_forms.lambda_form import make_closure
from luna.types.environment import Environment
from luna.types.markers import Unspecified
from luna.types.pair import Pair, make_list
from luna.types.procedure import Closure
from luna.types.symbol import Symbol

LAMBDA = Symbol("lambda")


def define_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    """
    (define name value)
    (define (name . formals) body...)
    (define ((name . outer-formals) . formals) body...)   ; curried

    Always binds in the current (innermost) frame.
    """
    if not tail:
        raise MalformedSpecialForm("define", "expected (define name value)")

    target = tail[0]
    if isinstance(target, Symbol):
        if len(tail) != 2:
            raise MalformedSpecialForm("define", "expected (define name value)")
        value = evaluate_fn(tail[1], env)
        if isinstance(value, Closure) and value.name is None:
            value.name = target.id
        env.define(target, value)
        return Unspecified

    if isinstance(target, Pair):
        name, formals, body = target.car, target.cdr, tail[1:]
        while isinstance(name, Pair):
            body = [Pair(LAMBDA, Pair(formals, make_list(*body)))]
            name, formals = name.car, name.cdr
        if not isinstance(name, Symbol):
            raise MalformedSpecialForm("define", f"cannot define {to_write_string(name)}")
        env.define(name, make_closure(formals, body, env, name.id, "define"))
        return Unspecified

    raise MalformedSpecialForm("define", f"cannot define {to_write_string(target)}")
