import logging
from typing import List, Optional

from tree_sitter import Node

from js_tree_sitter import ASTWalker
from js_tree_sitter import node_types as nt

from ..expressions import Combination, ExpressionNode, build_expression
from ..layout import operator_at_line_end
from ..models import Action, FormattingDecision
from ..operands import collect_operands, find_group_exceeding, find_group_to_expand
from .base import ASTRule, FormattingContext

logger = logging.getLogger(__name__)

SIMPLE_TEST_TYPES = (
    nt.IDENTIFIER,
    nt.MEMBER_EXPRESSION,
    nt.SUBSCRIPT_EXPRESSION,
    nt.UNARY_EXPRESSION,
    nt.BINARY_EXPRESSION,
    nt.CALL_EXPRESSION,
) + nt.LITERAL_TYPES

# Branches holding one of these keep whatever layout the author chose
STRUCTURED_TYPES = nt.JSX_TYPES + (nt.STATEMENT_BLOCK, "class_body")


class TernaryConditionRule(ASTRule):
    """Lays out `test ? consequent : alternate` by the operand count of its test.

        const label = isAdmin && isActive ? "admin" : "user";

        const label = a
            || b
            || c
            || d
            ? "yes"
            : "no";
    """

    node_types = (nt.TERNARY_EXPRESSION,)

    @property
    def rule_id(self) -> str:
        return "L002"

    @property
    def name(self) -> str:
        return "multiline-ternary-conditions"

    @property
    def description(self) -> str:
        n = self.config.max_operands
        return (
            f"Enforce consistent ternary formatting based on condition operand count: "
            f"≤{n} collapses to single line, >{n} expands to multiline"
        )

    def visit(self, node: Node, context: FormattingContext) -> Optional[FormattingDecision]:
        if self.is_nested_branch(node):
            return None

        condition = node.child_by_field_name("condition")
        consequence = node.child_by_field_name("consequence")
        alternative = node.child_by_field_name("alternative")
        question = ASTWalker.get_child_of_type(node, "?")
        colon = ASTWalker.get_child_of_type(node, ":")
        if None in (condition, consequence, alternative, question, colon):
            return None
        if question.is_missing or colon.is_missing:
            return None

        formatter = self.formatter(context)
        test = build_expression(condition)

        if isinstance(test, Combination) and formatter.extractor.needs_extraction(test):
            return formatter.extractor.extract(test, node, subject="Ternary condition")

        if self.keeps_layout(consequence, alternative):
            logger.debug("%s: ternary at line %d keeps its layout", self.rule_id, node.start_point[0] + 1)
            return None

        if not isinstance(test, Combination):
            if test.type not in SIMPLE_TEST_TYPES:
                return None
            return self._collapse(node, context)

        operands = collect_operands(test)
        nested = find_group_to_expand(test, self.config.max_operands)
        if nested is not None:
            return formatter.expand_nested_group(nested)

        if len(operands) <= self.config.max_operands:
            if find_group_exceeding(test, self.config.max_operands) is not None:
                return None
            return self._collapse(node, context)

        return self._expand(node, test, operands, context)

    # -- skips --------------------------------------------------------------

    @staticmethod
    def is_nested_branch(node: Node) -> bool:
        """The ternary is (through parentheses) a branch of another ternary"""
        child, parent = node, node.parent
        while parent is not None and parent.type == nt.PARENTHESIZED_EXPRESSION:
            child, parent = parent, parent.parent

        if parent is None or parent.type != nt.TERNARY_EXPRESSION:
            return False
        return ASTWalker.is_field(parent, "consequence", child) or ASTWalker.is_field(parent, "alternative", child)

    def keeps_layout(self, consequence: Node, alternative: Node) -> bool:
        return any(self._is_complex_branch(branch) for branch in (consequence, alternative))

    def _is_complex_branch(self, branch: Node) -> bool:
        if ASTWalker.contains_type(branch, STRUCTURED_TYPES):
            return True

        inner = ASTWalker.unwrap_parentheses(branch)
        if inner.type == nt.OBJECT and len(ASTWalker.significant_children(inner)) >= 2:
            return True
        if inner.type == nt.ARRAY and len(ASTWalker.significant_children(inner)) >= 3:
            return True

        if inner.type == nt.TERNARY_EXPRESSION:
            if branch.type == nt.TERNARY_EXPRESSION:
                return True
            nested_test = inner.child_by_field_name("condition")
            if nested_test is not None:
                return len(collect_operands(build_expression(nested_test))) > self.config.max_operands

        return False

    # -- one line -----------------------------------------------------------

    @staticmethod
    def _operator_apart_from_branch(node: Node) -> bool:
        question = ASTWalker.get_child_of_type(node, "?")
        colon = ASTWalker.get_child_of_type(node, ":")
        consequence = node.child_by_field_name("consequence")
        alternative = node.child_by_field_name("alternative")
        return (
            question.start_point[0] != consequence.start_point[0]
            or colon.start_point[0] != alternative.start_point[0]
        )

    def _collapse(self, node: Node, context: FormattingContext) -> Optional[FormattingDecision]:
        if node.start_point[0] == node.end_point[0] and not self._operator_apart_from_branch(node):
            return None

        view = context.view
        text = " ".join((
            view.squash(node.child_by_field_name("condition")),
            "?",
            view.squash(node.child_by_field_name("consequence")),
            ":",
            view.squash(node.child_by_field_name("alternative")),
        ))
        return self.emitter(context).replace_node(
            Action.COLLAPSE,
            node,
            text,
            f"Ternary with ≤{self.config.max_operands} operands should be on a single line",
        )

    # -- one operand per line -----------------------------------------------

    @staticmethod
    def _folded_key(node: Node, operands: List[ExpressionNode]) -> Optional[Node]:
        """Key of the field holding the ternary, when the test does not start on the key's line"""
        parent = node.parent
        if parent is None or parent.type != nt.PAIR or not ASTWalker.is_field(parent, "value", node):
            return None
        key = parent.child_by_field_name("key")
        if key is None or key.end_point[0] == operands[0].start_row:
            return None
        return key

    def needs_expansion(self, node: Node, test: ExpressionNode, operands: List[ExpressionNode],
                        context: FormattingContext) -> bool:
        condition = node.child_by_field_name("condition")
        consequence = node.child_by_field_name("consequence")
        question = ASTWalker.get_child_of_type(node, "?")
        colon = ASTWalker.get_child_of_type(node, ":")

        if condition.start_point[0] == condition.end_point[0]:
            return True
        if any(current.end_row == following.start_row for current, following in zip(operands, operands[1:])):
            return True
        if operator_at_line_end(context.view, test):
            return True

        question_row, colon_row = question.start_point[0], colon.start_point[0]
        if question_row == condition.end_point[0]:
            return True
        if question_row > condition.end_point[0] + 1 or colon_row > consequence.end_point[0] + 1:
            return True
        if self._operator_apart_from_branch(node):
            return True
        if question_row == colon_row:
            return True

        return self._folded_key(node, operands) is not None

    def _expand(self, node: Node, test: Combination, operands: List[ExpressionNode],
                context: FormattingContext) -> Optional[FormattingDecision]:
        if not self.needs_expansion(node, test, operands, context):
            return None

        view = context.view
        key = self._folded_key(node, operands)
        if key is not None:
            base_indent = view.line_indent(node.parent.start_point[0])
        else:
            base_indent = view.line_indent(node.start_point[0])
        indent = base_indent + self.config.indent_unit

        renderer = self.formatter(context).renderer
        text = (
            f"{renderer.multiline(test, indent)}"
            f"\n{indent}? {view.text(node.child_by_field_name('consequence'))}"
            f"\n{indent}: {view.text(node.child_by_field_name('alternative'))}"
        )

        emitter = self.emitter(context)
        message = (
            f"Ternary conditions with more than {self.config.max_operands} operands should be multiline, "
            "with each operand on its own line"
        )
        if key is not None:
            return emitter.replace(
                Action.EXPAND, key.start_byte, node.end_byte, f"{view.text(key)}: {text}", message, test.node,
            )
        return emitter.replace_node(Action.EXPAND, node, text, message, test.node)
