"""Core evaluator and trampoline for the Luna interpreter.

`evaluate` owns the control loop: it keeps a current (expression, environment)
pair and asks `evaluate0` for one step. A step either finishes with a value or
returns a TailCall naming the expression that is in tail position, and the
loop continues with that pair instead of recursing. Sub-expressions that are
not in tail position (operands, `if` tests, non-final body forms) are
evaluated with ordinary recursive calls to `evaluate`.
"""

from __future__ import annotations

from luna import SExpression, SchemeValue
from luna.errors import ApplyNilError, MalformedSpecialForm
from luna.evaluation.apply import apply
from luna.evaluation.special_forms import SPECIAL_FORMS
from luna.types.environment import Environment
from luna.types.nil import Nil, NilType
from luna.types.pair import Pair
from luna.types.symbol import Symbol
from luna.types.tail_call import TailCall


def evaluate(expr: SExpression, env: Environment) -> SchemeValue:
    """
    Trampoline evaluator: tail-call aware evaluation.
    """
    result = evaluate0(expr, env)
    while isinstance(result, TailCall):
        result = evaluate0(result.expr, result.env)
    return result


def evaluate0(expr: SExpression, env: Environment) -> SchemeValue | TailCall:
    """
    Core evaluator: a single step that returns either a value or a TailCall.
    """
    match expr:
        case Symbol():
            return env.lookup(expr)

        case Pair(car=head, cdr=operands):
            if isinstance(head, Symbol):
                # --- Special forms handling ---
                form = SPECIAL_FORMS.get(head)
                if form is not None:
                    return form(_form_operands(head, operands), env, evaluate)
                proc = env.lookup(head)
            else:
                proc = evaluate(head, env)

            # Operands left to right, in the current environment.
            args = []
            while isinstance(operands, Pair):
                arg = operands.car
                if isinstance(arg, Symbol):
                    args.append(env.lookup(arg))
                elif isinstance(arg, Pair):
                    args.append(evaluate(arg, env))
                elif arg is Nil:
                    raise ApplyNilError()
                else:
                    args.append(arg)
                operands = operands.cdr
            if operands is not Nil:
                raise MalformedSpecialForm("application", "improper argument list")
            return apply(proc, args, env, evaluate)

        case NilType():
            raise ApplyNilError()

    # --- Self-evaluating atoms return as-is ---
    return expr


def _form_operands(keyword: Symbol, operands: SExpression) -> list[SExpression]:
    items = []
    while isinstance(operands, Pair):
        items.append(operands.car)
        operands = operands.cdr
    if operands is not Nil:
        raise MalformedSpecialForm(keyword.id, "improper form")
    return items


def call(proc: SchemeValue, args: list[SchemeValue], env: Environment | None = None) -> SchemeValue:
    """Apply `proc` and run any resulting TailCall to completion.

    Used by builtins that call back into Scheme procedures (map, apply, ...).
    """
    result = apply(proc, args, env, evaluate)
    if isinstance(result, TailCall):
        return evaluate(result.expr, result.env)
    return result
