"""Evaluation: the trampoline, procedure application and special forms."""

from luna.evaluation.evaluator import call, evaluate, evaluate0

__all__ = ["call", "evaluate", "evaluate0"]
