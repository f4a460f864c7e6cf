from .base import ASTRule, FormattingContext
from .conditions import MultilineConditionsRule
from .logical import LogicalExpressionRule
from .ternary import TernaryConditionRule

__all__ = [
    "ASTRule",
    "FormattingContext",
    "MultilineConditionsRule",
    "TernaryConditionRule",
    "LogicalExpressionRule",
]
