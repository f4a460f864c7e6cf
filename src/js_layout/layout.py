"""Collapse / expand decisions for boolean conditions.

A condition with at most `max_operands` operands lives on one line:

    if (a && b && c) {}

A longer one puts every operand on its own line, operators first:

    if (
        a
        || b
        || c
        || d
    ) {}

A parenthesized group holding too many operands is expanded in place,
the rest of the condition is left alone:

    if ((
        a
        || b
        || c
        || d
    ) && e) {}
"""

from dataclasses import dataclass
from typing import List, Optional

from tree_sitter import Node

from js_tree_sitter import SourceView

from .emitter import EditEmitter
from .expressions import Combination, ExpressionNode, is_chain, iter_combinations
from .extraction import DeepGroupExtractor
from .models import Action, FormattingDecision
from .operands import (
    collect_inside_group,
    collect_operands,
    find_group_exceeding,
    find_group_to_expand,
    on_distinct_rows,
    start_on_one_row,
)
from .rendering import ConditionRenderer


@dataclass
class ConditionSite:
    """Where a condition sits and which text around it a fix may touch.

    `open_token`/`close_token` are the delimiters owned by the statement
    (the `if (`...`)`); field values have none.
    """
    kind: str
    expression: ExpressionNode
    node: Node
    base_indent: str
    open_token: Optional[Node] = None
    close_token: Optional[Node] = None

    @property
    def delimited(self) -> bool:
        return self.open_token is not None and self.close_token is not None


def operator_at_line_end(view: SourceView, expr: ExpressionNode, recursive: bool = True) -> bool:
    """Some operator is the last token on its line"""
    if recursive:
        combinations = list(iter_combinations(expr))
    else:
        combinations = list(_chain_combinations(expr))

    for combination in combinations:
        following = view.token_after(combination.operator_token)
        if following is not None and combination.operator_token.end_point[0] < following.start_row:
            return True
    return False


def _chain_combinations(expr: ExpressionNode):
    if is_chain(expr):
        yield expr
        yield from _chain_combinations(expr.left)
        yield from _chain_combinations(expr.right)


class OperandCountFormatter:
    """Decides how a boolean condition is laid out, based on its operand count."""

    def __init__(self, view: SourceView, emitter: EditEmitter, max_operands: int = 3,
                 indent_unit: str = "    "):
        self.view = view
        self.emitter = emitter
        self.max_operands = max_operands
        self.indent_unit = indent_unit
        self.renderer = ConditionRenderer(view, max_operands, indent_unit)
        self.extractor = DeepGroupExtractor(view, emitter, indent_unit)

    def decide(self, site: ConditionSite) -> Optional[FormattingDecision]:
        test = site.expression
        if not isinstance(test, Combination):
            return None

        if self.extractor.needs_extraction(test):
            return self.extractor.extract(test, site.node)

        operands = collect_operands(test)
        if site.kind == "property" and len(operands) < 2:
            return None

        nested = find_group_to_expand(test, self.max_operands)
        if nested is not None:
            decision = self.expand_nested_group(nested)
            if decision is not None:
                return decision

        if len(operands) <= self.max_operands:
            if find_group_exceeding(test, self.max_operands) is not None:
                return None
            return self._collapse(site, test, operands)

        return self._expand(site, test, operands)

    # -- nested groups ------------------------------------------------------

    def expand_nested_group(self, group: Combination) -> Optional[FormattingDecision]:
        """Spread an oversized group over several lines, touching nothing else"""
        if on_distinct_rows(collect_inside_group(group)):
            return None

        indent = self.view.line_indent(group.outer.start_point[0])
        return self.emitter.replace_node(
            Action.EXPAND,
            group.outer,
            self.renderer.expand_group(group, indent),
            f"Nested condition with >{self.max_operands} operands should be formatted multiline",
        )

    # -- at most max_operands -----------------------------------------------

    def needs_collapse(self, test: ExpressionNode, operands: List[ExpressionNode]) -> bool:
        if not start_on_one_row(operands):
            return True
        if any(self.renderer.is_split_binary(op.outer) for op in operands):
            return True
        return operator_at_line_end(self.view, test, recursive=False)

    def _collapse(self, site: ConditionSite, test: ExpressionNode,
                  operands: List[ExpressionNode]) -> Optional[FormattingDecision]:
        if not self.needs_collapse(test, operands):
            return None

        single = self.renderer.single_line(test)
        if site.delimited:
            return self.emitter.replace(
                Action.COLLAPSE,
                site.open_token.start_byte,
                site.close_token.end_byte,
                f"({single})",
                f"If conditions with ≤{self.max_operands} operands should be single line: "
                f"if (a && b && c). Multi-line only for >{self.max_operands} operands",
                test.node,
            )

        return self.emitter.replace_node(
            Action.COLLAPSE,
            test.outer,
            single,
            f"Property conditions with ≤{self.max_operands} operands should be single line: "
            f"condition: a && b && c. Multi-line only for >{self.max_operands} operands",
            test.node,
        )

    # -- more than max_operands ---------------------------------------------

    def needs_expansion(self, site: ConditionSite, test: ExpressionNode,
                        operands: List[ExpressionNode]) -> bool:
        if site.delimited:
            if site.open_token.start_point[0] == site.close_token.end_point[0]:
                return True
            if site.open_token.end_point[0] == operands[0].start_row:
                return True
        elif test.start_row == test.end_row:
            return True

        for current, following in zip(operands, operands[1:]):
            if current.end_row == following.start_row:
                return True

        return operator_at_line_end(self.view, test)

    def _expand(self, site: ConditionSite, test: ExpressionNode,
                operands: List[ExpressionNode]) -> Optional[FormattingDecision]:
        if not self.needs_expansion(site, test, operands):
            return None

        indent = site.base_indent + self.indent_unit
        if site.delimited:
            text = f"(\n{indent}{self.renderer.multiline(test, indent)}\n{site.base_indent})"
            return self.emitter.replace(
                Action.EXPAND,
                site.open_token.start_byte,
                site.close_token.end_byte,
                text,
                f"If conditions with more than {self.max_operands} operands should be multiline, "
                "with each operand on its own line",
                test.node,
            )

        return self.emitter.replace_node(
            Action.EXPAND,
            test.outer,
            self.renderer.multiline(test, indent),
            f"Property conditions with more than {self.max_operands} operands should be multiline, "
            "with each operand on its own line",
            test.node,
        )
