"""Application engine for Luna.

Centralises procedure application so the evaluator, special forms and
builtins share one set of rules:
- Closures bind their arguments in a fresh child of the captured environment
  and hand their last body form back to the trampoline as a TailCall.
- Builtins are called directly with the caller's environment and arguments.
- Anything else is not applicable.
"""

from __future__ import annotations

from luna import EvaluatorFn, SchemeValue, SExpression
from luna.errors import ApplyNonProcedure
from luna.types.environment import Environment
from luna.types.procedure import Builtin, Closure
from luna.types.tail_call import TailCall


def eval_sequence(body: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn) -> TailCall:
    """Evaluate all but the last form for effect; return the last one as a TailCall."""
    last = len(body) - 1
    for i in range(last):
        evaluate_fn(body[i], env)
    return TailCall(body[last], env)


def apply(
    proc: SchemeValue,
    args: list[SchemeValue],
    env: Environment | None,
    evaluate_fn: EvaluatorFn,
) -> SchemeValue | TailCall:
    """Apply `proc` to already-evaluated `args`.

    May return a TailCall; callers that need a value must run it through the
    trampoline (see evaluator.call).
    """
    if isinstance(proc, Closure):
        return eval_sequence(proc.body, proc.bind(args), evaluate_fn)
    if isinstance(proc, Builtin):
        return proc(env, args)
    raise ApplyNonProcedure(proc)
