from tree_sitter import Node

from js_tree_sitter import ASTWalker, SourceView
from js_tree_sitter import node_types as nt

from .expressions import Combination, ExpressionNode, is_chain
from .operands import exceeds_threshold


class ConditionRenderer:
    """Produces the single-line and one-operand-per-line texts of a condition.

    Operands are copied from the source with their parentheses; only the
    whitespace around chain operators is rewritten.
    """

    def __init__(self, view: SourceView, max_operands: int, indent_unit: str = "    "):
        self.view = view
        self.max_operands = max_operands
        self.indent_unit = indent_unit

    def text(self, expr: ExpressionNode) -> str:
        return self.view.text(expr.outer)

    # -- one line -----------------------------------------------------------

    def single_line(self, expr: ExpressionNode) -> str:
        if is_chain(expr):
            return f"{self.single_line(expr.left)} {expr.operator} {self.single_line(expr.right)}"
        if self.is_split_binary(expr.outer):
            return self.join_binary(expr.outer)
        return self.text(expr)

    def is_split_binary(self, node: Node) -> bool:
        """A comparison or arithmetic expression whose sides sit on different lines"""
        node = ASTWalker.unwrap_parentheses(node)
        if node.type != nt.BINARY_EXPRESSION:
            return False

        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")
        if left is None or right is None:
            return False

        if left.end_point[0] != right.start_point[0]:
            return True

        return self.is_split_binary(left) or self.is_split_binary(right)

    def join_binary(self, node: Node) -> str:
        if node.type == nt.PARENTHESIZED_EXPRESSION:
            inner = ASTWalker.unwrap_parentheses(node)
            if inner.start_byte != node.start_byte:
                depth = self._paren_depth(node, inner)
                return "(" * depth + self.join_binary(inner) + ")" * depth

        if node.type == nt.BINARY_EXPRESSION:
            left = node.child_by_field_name("left")
            right = node.child_by_field_name("right")
            operator = node.child_by_field_name("operator")
            if left is not None and right is not None and operator is not None:
                return f"{self.join_binary(left)} {self.view.text(operator)} {self.join_binary(right)}"

        return self.view.text(node)

    @staticmethod
    def _paren_depth(outer: Node, inner: Node) -> int:
        depth = 0
        node = outer
        while node.start_byte != inner.start_byte:
            node = ASTWalker.significant_children(node)[0]
            depth += 1
        return depth

    # -- one operand per line -----------------------------------------------

    def multiline(self, expr: ExpressionNode, indent: str, expand_groups: bool = True) -> str:
        """Chain operands one per line, operator first, at `indent`."""
        if is_chain(expr):
            left = self.multiline(expr.left, indent, expand_groups)
            right = self.multiline(expr.right, indent, expand_groups)
            return f"{left}\n{indent}{expr.operator} {right}"

        if expand_groups and exceeds_threshold(expr, self.max_operands):
            return self.expand_group(expr, indent)

        return self.text(expr)

    def expand_group(self, group: Combination, indent: str) -> str:
        """`(` and `)` at `indent`, the group's operands one level deeper"""
        inner = indent + self.indent_unit
        left = self.multiline(group.left, inner)
        right = self.multiline(group.right, inner)
        return f"(\n{inner}{left}\n{inner}{group.operator} {right}\n{indent})"

