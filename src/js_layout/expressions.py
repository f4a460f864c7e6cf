"""Boolean expression model built from the tree-sitter tree.

Parentheses written by the author are kept as part of the physical shape:
`(a && b) || c` becomes a Combination whose left side is a grouped
Combination, never a re-associated three-operand chain.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Union

from tree_sitter import Node

from js_tree_sitter import ASTWalker
from js_tree_sitter import node_types as nt


@dataclass(eq=False)
class Leaf:
    """An operand that is not an unparenthesized boolean combination."""
    node: Node
    outer: Node
    grouped: bool = False

    @property
    def start_row(self) -> int:
        return self.node.start_point[0]

    @property
    def end_row(self) -> int:
        return self.node.end_point[0]

    @property
    def is_group(self) -> bool:
        return False

    @property
    def type(self) -> str:
        return self.node.type


@dataclass(eq=False)
class Combination:
    """`left && right` or `left || right`."""
    node: Node
    outer: Node
    operator: str
    operator_token: Node
    left: "ExpressionNode"
    right: "ExpressionNode"
    grouped: bool = False

    @property
    def start_row(self) -> int:
        return self.node.start_point[0]

    @property
    def end_row(self) -> int:
        return self.node.end_point[0]

    @property
    def is_group(self) -> bool:
        return self.grouped

    @property
    def type(self) -> str:
        return self.node.type

    def children(self) -> Iterator["ExpressionNode"]:
        yield self.left
        yield self.right


ExpressionNode = Union[Leaf, Combination]


def is_logical(node: Optional[Node]) -> bool:
    if node is None or node.type != nt.BINARY_EXPRESSION:
        return False
    operator = node.child_by_field_name("operator")
    return operator is not None and operator.type in nt.LOGICAL_OPERATORS


def build_expression(node: Node) -> ExpressionNode:
    """Model the expression rooted at `node`.

    Wrapping parentheses around `node` itself mark the result as grouped;
    the caller passes the inner expression when the parentheses belong to
    the surrounding syntax (the `if (...)` delimiters).
    """
    inner = ASTWalker.unwrap_parentheses(node)
    grouped = inner.start_byte != node.start_byte

    if is_logical(inner):
        left = inner.child_by_field_name("left")
        right = inner.child_by_field_name("right")
        operator = inner.child_by_field_name("operator")
        if left is not None and right is not None:
            return Combination(
                node=inner,
                outer=node,
                operator=operator.type,
                operator_token=operator,
                left=build_expression(left),
                right=build_expression(right),
                grouped=grouped,
            )

    return Leaf(node=inner, outer=node, grouped=grouped)


def is_chain(expr: ExpressionNode) -> bool:
    """An unparenthesized combination, i.e. one collectors walk through."""
    return isinstance(expr, Combination) and not expr.grouped


def is_group(expr: ExpressionNode) -> bool:
    return isinstance(expr, Combination) and expr.grouped



def iter_combinations(expr: ExpressionNode) -> Iterator[Combination]:
    """Every combination in pre-order, grouped or not."""
    if isinstance(expr, Combination):
        yield expr
        yield from iter_combinations(expr.left)
        yield from iter_combinations(expr.right)
