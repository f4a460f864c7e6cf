from tree_sitter import Node
from typing import Callable, Iterable, Optional, List

from . import node_types as nt


class ASTWalker:
    """Utilities for traversing and searching the JavaScript AST"""

    @staticmethod
    def walk(node: Node, callback: Callable[[Node], None]):
        """Perform a depth-first traversal of the AST"""
        callback(node)
        for child in node.children:
            ASTWalker.walk(child, callback)

    @staticmethod
    def get_child_of_type(node: Node, type_name: str) -> Optional[Node]:
        """Find the first direct child of a specific type"""
        for child in node.children:
            if child.type == type_name:
                return child
        return None

    @staticmethod
    def find_all_by_type(node: Node, type_name: str) -> List[Node]:
        """Find all descendant nodes of a specific type"""
        results = []

        def check(n):
            if n.type == type_name:
                results.append(n)

        ASTWalker.walk(node, check)
        return results

    @staticmethod
    def contains_type(node: Node, type_names: Iterable[str]) -> bool:
        """Check whether the node or any descendant has one of the given types"""
        type_names = tuple(type_names)
        stack = [node]
        while stack:
            current = stack.pop()
            if current.type in type_names:
                return True
            stack.extend(current.children)
        return False

    @staticmethod
    def significant_children(node: Node) -> List[Node]:
        """Named children without comments"""
        return [c for c in node.named_children if c.type not in nt.COMMENT_TYPES]

    @staticmethod
    def unwrap_parentheses(node: Node) -> Node:
        """Strip any number of parenthesized_expression wrappers"""
        while node.type == nt.PARENTHESIZED_EXPRESSION:
            inner = ASTWalker.significant_children(node)
            if len(inner) != 1:
                break
            node = inner[0]
        return node

    @staticmethod
    def is_field(parent: Optional[Node], field_name: str, node: Node) -> bool:
        """True when `node` is the child stored under `field_name` of `parent`"""
        if parent is None:
            return False
        child = parent.child_by_field_name(field_name)
        return child is not None and child == node
