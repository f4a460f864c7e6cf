from js_layout.models import InternalIssue

from .models import LintIssue


def internal_issue_to_lint_issue(issue: InternalIssue) -> LintIssue:
    """Convert an internal dataclass issue to an external Pydantic issue"""
    return LintIssue(
        severity=issue.severity.upper(),  # dataclass uses 'style', Pydantic uses 'STYLE'
        file_path=str(issue.file_path),
        line_number=issue.line,
        column=issue.column,
        rule_id=issue.rule_id,
        message=issue.message,
        auto_fixable=issue.auto_fixable,
    )
