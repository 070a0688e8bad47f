from luna import EvaluatorFn, SExpression, SchemeValue
from luna.errors import MalformedSpecialForm
from luna.types.environment import Environment
from luna.types.markers import Unspecified
from luna.types.tail_call import TailCall


def if_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    if len(tail) not in (2, 3):
        raise MalformedSpecialForm("if", "expected (if test consequent [alternate])")

    # Scheme truthiness: everything except #f is true, including () and 0.
    if evaluate_fn(tail[0], env) is not False:
        return TailCall(tail[1], env)
    if len(tail) == 3:
        return TailCall(tail[2], env)
    return Unspecified
