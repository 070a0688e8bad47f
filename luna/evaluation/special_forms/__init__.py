"""Registry of special forms for the Luna evaluator.

Maps Symbols to handler functions that implement non-standard evaluation rules.
The evaluator consults this table to dispatch special forms before ordinary
procedure application. Every handler is called as handler(operands, env,
evaluate) and returns either a value or a TailCall.
"""

from luna.types.symbol import Symbol
from luna.evaluation.special_forms.cond_forms import case_form, cond_form
from luna.evaluation.special_forms.define_form import define_form
from luna.evaluation.special_forms.delay_forms import delay_force_form, delay_form
from luna.evaluation.special_forms.do_loop_forms import do_loop_form
from luna.evaluation.special_forms.if_form import if_form
from luna.evaluation.special_forms.lambda_form import lambda_form, named_lambda_form
from luna.evaluation.special_forms.let_forms import (
    let_form,
    let_star_form,
    let_star_values_form,
    let_values_form,
    letrec_form,
    letrec_star_form,
)
from luna.evaluation.special_forms.logic_forms import and_form, or_form, unless_form, when_form
from luna.evaluation.special_forms.progn_form import progn_form
from luna.evaluation.special_forms.quote_forms import quasiquote_form, quote_form, unquote_form, unquote_splice_form
from luna.evaluation.special_forms.set_form import set_form

SPECIAL_FORMS = {
    Symbol("quote"): quote_form,
    Symbol("quasiquote"): quasiquote_form,
    Symbol("unquote"): unquote_form,
    Symbol("unquote-splicing"): unquote_splice_form,
    Symbol("if"): if_form,
    Symbol("define"): define_form,
    Symbol("set!"): set_form,
    Symbol("lambda"): lambda_form,
    Symbol("named-lambda"): named_lambda_form,
    Symbol("let"): let_form,
    Symbol("let*"): let_star_form,
    Symbol("letrec"): letrec_form,
    Symbol("letrec*"): letrec_star_form,
    Symbol("let-values"): let_values_form,
    Symbol("let*-values"): let_star_values_form,
    Symbol("begin"): progn_form,
    Symbol("and"): and_form,
    Symbol("or"): or_form,
    Symbol("when"): when_form,
    Symbol("unless"): unless_form,
    Symbol("cond"): cond_form,
    Symbol("case"): case_form,
    Symbol("do"): do_loop_form,
    Symbol("delay"): delay_form,
    Symbol("delay-force"): delay_force_form,
}
