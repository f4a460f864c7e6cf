from typing import Optional

from tree_sitter import Node

from js_tree_sitter import ASTWalker
from js_tree_sitter import node_types as nt

from ..expressions import build_expression
from ..layout import ConditionSite
from ..models import FormattingDecision
from .base import ASTRule, FormattingContext


class MultilineConditionsRule(ASTRule):
    """Lays out `if` conditions and object field values by operand count.

    Up to `max_operands` operands stay on one line, more get one operand
    per line with the operator leading. Groups nested deeper than two
    levels are extracted to a `const` before the statement.
    """

    node_types = (nt.IF_STATEMENT, nt.PAIR)

    @property
    def rule_id(self) -> str:
        return "L001"

    @property
    def name(self) -> str:
        return "multiline-if-conditions"

    @property
    def description(self) -> str:
        return (
            f"Enforce multiline if/property conditions when exceeding threshold "
            f"(>{self.config.max_operands} operands)"
        )

    def visit(self, node: Node, context: FormattingContext) -> Optional[FormattingDecision]:
        if node.type == nt.IF_STATEMENT:
            site = self._if_site(node, context)
        else:
            site = self._property_site(node, context)

        if site is None:
            return None
        return self.formatter(context).decide(site)

    def _if_site(self, node: Node, context: FormattingContext) -> Optional[ConditionSite]:
        condition = node.child_by_field_name("condition")
        if condition is None or condition.type != nt.PARENTHESIZED_EXPRESSION:
            return None

        open_paren, close_paren = condition.children[0], condition.children[-1]
        if open_paren.type != "(" or close_paren.type != ")" or close_paren.is_missing:
            return None

        inner = ASTWalker.significant_children(condition)
        if len(inner) != 1:
            return None

        return ConditionSite(
            kind="if",
            expression=build_expression(inner[0]),
            node=node,
            base_indent=context.view.line_indent(node.start_point[0]),
            open_token=open_paren,
            close_token=close_paren,
        )

    def _property_site(self, node: Node, context: FormattingContext) -> Optional[ConditionSite]:
        value = node.child_by_field_name("value")
        if value is None:
            return None

        return ConditionSite(
            kind="property",
            expression=build_expression(value),
            node=node,
            base_indent=context.view.line_indent(node.start_point[0]),
        )
