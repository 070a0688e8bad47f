from luna import EvaluatorFn, SExpression, SchemeValue
from luna.evaluation.apply import eval_sequence
from luna.types.environment import Environment
from luna.types.markers import Unspecified


def progn_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    # (begin) is allowed and yields nothing in particular.
    if not tail:
        return Unspecified
    return eval_sequence(tail, env, evaluate_fn)
