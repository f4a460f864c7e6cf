"""Moves over-nested condition groups into named `const` declarations.

    if ((a && (b || (c && d))) || e) {}

becomes

    const isCAndD = (c && d);
    if ((a && (b || isCAndD)) || e) {}
"""

import logging
from typing import Optional, Set

from tree_sitter import Node

from js_tree_sitter import ASTWalker, SourceView
from js_tree_sitter import node_types as nt

from .emitter import EditEmitter
from .expressions import Combination, ExpressionNode
from .models import FormattingDecision, MAX_NESTING_LEVEL
from .nesting import exceeds_nesting, find_deepest_group, nesting_depth

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 30
FALLBACK_NAME = "isNestedCondition"

_EXPRESSION_NAME_TYPES = (nt.BINARY_EXPRESSION, nt.CALL_EXPRESSION, nt.MEMBER_EXPRESSION)


def condition_name(expr: ExpressionNode) -> str:
    if isinstance(expr, Combination):
        joiner = "And" if expr.operator == "&&" else "Or"
        return f"{condition_name(expr.left)}{joiner}{condition_name(expr.right)}"

    node_type = expr.node.type
    if node_type in (nt.IDENTIFIER, nt.UNDEFINED):
        name = expr.node.text.decode("utf-8")
        return name[:1].upper() + name[1:]
    if node_type in _EXPRESSION_NAME_TYPES:
        return "Expr"
    return "Cond"


def synthesize_name(group: ExpressionNode) -> str:
    name = f"is{condition_name(group)}"
    if len(name) > MAX_NAME_LENGTH:
        return FALLBACK_NAME
    return name


def _runs_conditionally(parent: Node, child: Node) -> bool:
    """`child` runs once per loop iteration or only on one branch of an `if`"""
    if parent.type in nt.LOOP_TYPES or parent.type == nt.ELSE_CLAUSE:
        return True
    return parent.type == nt.IF_STATEMENT and not ASTWalker.is_field(parent, "condition", child)


def find_anchor_statement(node: Node) -> Optional[Node]:
    """Statement a declaration can be inserted before, evaluated exactly where the condition was.

    Function boundaries and brace-less loop or branch bodies stop the search.
    """
    current = node
    while current.parent is not None:
        parent = current.parent
        if parent.type in nt.STATEMENT_CONTAINERS:
            return current
        if parent.type in nt.FUNCTION_BOUNDARIES or _runs_conditionally(parent, current):
            return None
        current = parent
    return None


def declared_names(container: Node) -> Set[str]:
    """Names bound by the statements directly inside a block"""
    names = set()
    for statement in container.named_children:
        if statement.type in nt.DECLARATION_TYPES:
            for declarator in statement.named_children:
                if declarator.type != nt.VARIABLE_DECLARATOR:
                    continue
                name = declarator.child_by_field_name("name")
                if name is not None and name.type == nt.IDENTIFIER:
                    names.add(name.text.decode("utf-8"))
        elif statement.type in nt.NAMED_DECLARATION_TYPES:
            name = statement.child_by_field_name("name")
            if name is not None:
                names.add(name.text.decode("utf-8"))
    return names


def unique_name(name: str, taken: Set[str]) -> str:
    candidate, suffix = name, 2
    while candidate in taken:
        candidate = f"{name}{suffix}"
        suffix += 1
    return candidate


class DeepGroupExtractor:
    """Builds the extraction decision for a condition nested deeper than two groups."""

    def __init__(self, view: SourceView, emitter: EditEmitter, indent_unit: str = "    "):
        self.view = view
        self.emitter = emitter
        self.indent_unit = indent_unit

    def needs_extraction(self, test: ExpressionNode) -> bool:
        return exceeds_nesting(test)

    def extract(self, test: ExpressionNode, visited: Node, subject: str = "Condition") -> Optional[FormattingDecision]:
        depth = nesting_depth(test)
        group = find_deepest_group(test)
        if group is None:
            logger.debug("No group found for nesting depth %d at line %d", depth, visited.start_point[0] + 1)
            return None

        anchor = find_anchor_statement(visited)
        if anchor is None:
            logger.debug("No statement to hold an extracted condition at line %d", visited.start_point[0] + 1)
            return None

        scope = anchor.parent
        name = unique_name(synthesize_name(group), declared_names(scope))
        statement = f"const {name} = {self.view.text(group.outer)};"

        row = anchor.start_point[0]
        indent = self.view.line_indent(row)
        prefix = self.view.line_prefix(anchor)
        insert_at = anchor.start_byte
        if prefix.strip():
            # Mid-line anchor, e.g. `{ if (...)`: the declaration gets its own line
            if scope.type != nt.PROGRAM and scope.start_point[0] == row:
                indent += self.indent_unit
            insert_at -= len(prefix.encode("utf-8")) - len(prefix.rstrip().encode("utf-8"))
            declaration = f"\n{indent}{statement}\n{indent}"
        else:
            declaration = f"{statement}\n{indent}"

        return self.emitter.extract(
            insert_at=insert_at,
            insert_end=anchor.start_byte,
            declaration=declaration,
            group=group.outer,
            name=name,
            scope=scope,
            message=(
                f"{subject} nesting depth ({depth}) exceeds maximum ({MAX_NESTING_LEVEL}). "
                "Extract deeply nested condition to a variable."
            ),
        )
