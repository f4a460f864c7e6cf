"""Nesting depth of explicit groups inside a boolean expression.

Level 0: a && b
Level 1: (a && b) || c
Level 2: (a && (b || c)) || d
"""

from typing import Iterator, Optional, Tuple

from .expressions import Combination, ExpressionNode
from .models import MAX_NESTING_LEVEL


def nesting_depth(expr: ExpressionNode, current: int = 0) -> int:
    if not isinstance(expr, Combination):
        return current

    deepest = current
    for child in expr.children():
        if isinstance(child, Combination):
            child_depth = current + 1 if child.grouped else current
            deepest = max(deepest, nesting_depth(child, child_depth))
    return deepest


def iter_groups(expr: ExpressionNode, current: int = 0) -> Iterator[Tuple[Combination, int]]:
    """Grouped combinations below `expr` with their depth, in pre-order"""
    if not isinstance(expr, Combination):
        return
    for child in expr.children():
        if isinstance(child, Combination):
            child_depth = current + 1 if child.grouped else current
            if child.grouped:
                yield child, child_depth
            yield from iter_groups(child, child_depth)


def find_deepest_group(expr: ExpressionNode, limit: int = MAX_NESTING_LEVEL) -> Optional[Combination]:
    """Deepest group nested beyond `limit`; the first one found wins ties"""
    deepest, deepest_depth = None, limit
    for group, depth in iter_groups(expr):
        if depth > deepest_depth:
            deepest, deepest_depth = group, depth
    return deepest


def exceeds_nesting(expr: ExpressionNode) -> bool:
    return nesting_depth(expr) > MAX_NESTING_LEVEL
