from .engine import LayoutEngine
from .models import (
    Action,
    FormatResult,
    FormatResults,
    FormatterConfig,
    FormattingDecision,
    InternalIssue,
    MAX_NESTING_LEVEL,
    Transformation,
)
from .registry import RuleRegistry

__all__ = [
    "LayoutEngine",
    "RuleRegistry",
    "Action",
    "FormatResult",
    "FormatResults",
    "FormatterConfig",
    "FormattingDecision",
    "InternalIssue",
    "MAX_NESTING_LEVEL",
    "Transformation",
]
