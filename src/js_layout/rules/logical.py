from typing import Optional

from tree_sitter import Node

from js_tree_sitter import node_types as nt

from ..expressions import build_expression, is_logical
from ..models import Action, FormattingDecision
from ..operands import collect_operands
from ..rendering import ConditionRenderer
from .base import ASTRule, FormattingContext

# Conditions laid out by the other rules
_OWNERS = {
    nt.IF_STATEMENT: "condition",
    nt.TERNARY_EXPRESSION: "condition",
    nt.PAIR: "value",
}


def is_chain_top(node: Node) -> bool:
    """`node` is not the unparenthesized left or right side of another `&&`/`||`"""
    return not is_logical(node.parent)


def owned_by_condition_rule(node: Node) -> bool:
    child, parent = node, node.parent
    while parent is not None and (parent.type == nt.PARENTHESIZED_EXPRESSION or is_logical(parent)):
        child, parent = parent, parent.parent

    if parent is None or parent.type not in _OWNERS:
        return False
    owned = parent.child_by_field_name(_OWNERS[parent.type])
    if owned is None or owned != child:
        return False

    # A parenthesized field value is a single operand there
    return not (parent.type == nt.PAIR and child.type == nt.PARENTHESIZED_EXPRESSION)


class LogicalExpressionRule(ASTRule):
    """`&&`/`||` chains everywhere else: declarations, returns, arguments, JSX attributes."""

    node_types = (nt.BINARY_EXPRESSION,)

    @property
    def rule_id(self) -> str:
        return "L003"

    @property
    def name(self) -> str:
        return "logical-expression-multiline"

    @property
    def description(self) -> str:
        n = self.config.max_operands
        return f"Enforce single line for ≤{n}, multiline for >{n} logical expressions"

    def visit(self, node: Node, context: FormattingContext) -> Optional[FormattingDecision]:
        if not is_logical(node) or not is_chain_top(node):
            return None
        if owned_by_condition_rule(node):
            return None

        view = context.view
        expr = build_expression(node)
        operands = collect_operands(expr)
        renderer = ConditionRenderer(view, self.config.max_operands, self.config.indent_unit)
        emitter = self.emitter(context)
        n = self.config.max_operands
        multiline = node.start_point[0] != node.end_point[0]

        if len(operands) <= n:
            if not multiline or any(op.start_row != op.end_row for op in operands):
                return None
            return emitter.replace_node(
                Action.COLLAPSE,
                node,
                renderer.single_line(expr),
                f"Logical expression with {len(operands)} operands should be on a single line "
                f"(max for multiline: {n})",
            )

        if multiline and all(op.start_row != prev.end_row for prev, op in zip(operands, operands[1:])):
            return None

        indent = view.line_indent(operands[0].start_row) + self.config.indent_unit
        return emitter.replace_node(
            Action.EXPAND,
            node,
            renderer.multiline(expr, indent, expand_groups=False),
            f"Logical expression with {len(operands)} operands should be on multiple lines (max: {n})",
        )
