from luna import EvaluatorFn, SExpression, SchemeValue
from luna.errors import MalformedSpecialForm
from luna.types.environment import Environment
from luna.types.promise import Promise


def delay_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    # (delay expr): nothing is evaluated until the promise is forced.
    if len(tail) != 1:
        raise MalformedSpecialForm("delay", "expects exactly 1 argument")
    return Promise(tail[0], env)


def delay_force_form(tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> SchemeValue:
    """(delay-force expr): expr must yield a promise, which `force` chains to
    iteratively so long lazy streams run in constant space."""
    if len(tail) != 1:
        raise MalformedSpecialForm("delay-force", "expects exactly 1 argument")
    return Promise(tail[0], env, is_delay_force=True)
