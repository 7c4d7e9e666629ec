from .controller import AttemptController, AttemptSnapshot, AttemptStatus
from .evaluator import TerminalConditionEvaluator

__all__ = [
    "AttemptController",
    "AttemptSnapshot",
    "AttemptStatus",
    "TerminalConditionEvaluator",
]
