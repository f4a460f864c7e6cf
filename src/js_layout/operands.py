from typing import List, Optional

from .expressions import Combination, ExpressionNode, is_chain, is_group


def collect_operands(expr: ExpressionNode) -> List[ExpressionNode]:
    """Flatten an unparenthesized chain into its operands, left to right.

    Grouped combinations and anything that is not a combination are opaque.
    """
    if is_chain(expr):
        return collect_operands(expr.left) + collect_operands(expr.right)
    return [expr]


def collect_inside_group(group: ExpressionNode) -> List[ExpressionNode]:
    """Operands inside a group, ignoring the group's own parentheses"""
    if not isinstance(group, Combination):
        return [group]
    return collect_operands(group.left) + collect_operands(group.right)


def count_inside_group(group: ExpressionNode) -> int:
    return len(collect_inside_group(group))


def exceeds_threshold(expr: ExpressionNode, threshold: int) -> bool:
    return is_group(expr) and count_inside_group(expr) > threshold


def find_group_exceeding(expr: ExpressionNode, threshold: int) -> Optional[Combination]:
    """First group (pre-order, left before right) holding more than `threshold` operands"""
    if not isinstance(expr, Combination):
        return None

    if exceeds_threshold(expr, threshold):
        return expr

    for child in expr.children():
        found = find_group_exceeding(child, threshold)
        if found is not None:
            return found

    return None


def find_group_to_expand(expr: ExpressionNode, threshold: int) -> Optional[Combination]:
    """First oversized group whose operands do not each start a line yet.

    Groups inside it are skipped: expanding it lays them out as well.
    """
    if not isinstance(expr, Combination):
        return None

    if exceeds_threshold(expr, threshold) and not on_distinct_rows(collect_inside_group(expr)):
        return expr

    for child in expr.children():
        found = find_group_to_expand(child, threshold)
        if found is not None:
            return found

    return None


def on_distinct_rows(operands: List[ExpressionNode]) -> bool:
    """Each operand starts on a different line than the one before it"""
    return all(op.start_row != prev.start_row for prev, op in zip(operands, operands[1:]))


def start_on_one_row(operands: List[ExpressionNode]) -> bool:
    return all(op.start_row == operands[0].start_row for op in operands)
