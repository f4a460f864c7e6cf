from typing import Iterable, List, Optional

from .models import FormatterConfig
from .rules.base import ASTRule


class RuleRegistry:
    """Registry for managing and loading layout rules"""

    def __init__(self, config: Optional[FormatterConfig] = None):
        self.config = config or FormatterConfig()
        self._rules: List[ASTRule] = []
        self._load_builtin_rules()

    def register(self, rule: ASTRule):
        if any(r.rule_id == rule.rule_id for r in self._rules):
            raise ValueError(f"Rule {rule.rule_id} is already registered")
        self._rules.append(rule)

    def get_all_rules(self) -> List[ASTRule]:
        return list(self._rules)

    def get_enabled_rules(self, select: Optional[Iterable[str]] = None,
                          ignore: Optional[Iterable[str]] = None) -> List[ASTRule]:
        """Rules matching one of `select` and none of `ignore`, by id or name prefix.

        An empty or missing `select` enables everything.
        """
        select = list(select or [])
        ignore = list(ignore or [])

        def matches(rule: ASTRule, patterns: List[str]) -> bool:
            return any(rule.rule_id.startswith(p) or rule.name.startswith(p) for p in patterns)

        return [
            rule for rule in self._rules
            if (not select or matches(rule, select)) and not matches(rule, ignore)
        ]

    def _load_builtin_rules(self):
        from .rules.conditions import MultilineConditionsRule
        from .rules.logical import LogicalExpressionRule
        from .rules.ternary import TernaryConditionRule

        self.register(MultilineConditionsRule(self.config))
        self.register(TernaryConditionRule(self.config))
        self.register(LogicalExpressionRule(self.config))
