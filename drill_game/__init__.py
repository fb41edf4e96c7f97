from .evaluator import evaluate, format_expression
from .generator import ProblemGenerator
from .models import Choice, Operator, Problem
from .session import DrillSession

__all__ = [
    "Choice",
    "DrillSession",
    "Operator",
    "Problem",
    "ProblemGenerator",
    "evaluate",
    "format_expression",
]
