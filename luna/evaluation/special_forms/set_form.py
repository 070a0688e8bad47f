from luna import EvaluatorFn, SExpression, SchemeValue
from luna.errors import MalformedSpecialForm
from luna.printer import to_write_string
from luna.types.environment import Environment
from luna.types.markers import Unspecified
from luna.types.symbol import Symbol


def set_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    if len(tail) != 2:
        raise MalformedSpecialForm("set!", "expected (set! variable value)")
    var_sym, val_expr = tail
    if not isinstance(var_sym, Symbol):
        raise MalformedSpecialForm("set!", f"first argument must be a symbol, got {to_write_string(var_sym)}")
    value = evaluate_fn(val_expr, env)
    env.set(var_sym, value)
    return Unspecified
