import logging
from typing import Optional

from tree_sitter import Node

from js_tree_sitter import SourceView

from .models import Action, ACTION_PRIORITY, FormattingDecision, Transformation

logger = logging.getLogger(__name__)


class EditEmitter:
    """Turns a layout verdict into one atomic decision for the fix loop.

    A replacement that would not change the text is no decision at all,
    which is what lets the engine reach a fixed point.
    """

    def __init__(self, view: SourceView, rule_id: str):
        self.view = view
        self.rule_id = rule_id

    def replace(
        self,
        action: Action,
        start_byte: int,
        end_byte: int,
        text: str,
        message: str,
        node: Node,
    ) -> Optional[FormattingDecision]:
        if self.view.slice(start_byte, end_byte) == text:
            return None

        # Comments between operands would be dropped or, once joined onto one line, swallow code
        if self.view.has_comment(start_byte, end_byte):
            logger.debug("%s: skipping %s at line %d, range holds comments",
                         self.rule_id, action.value, node.start_point[0] + 1)
            return None

        edit = Transformation(start_byte, end_byte, text, ACTION_PRIORITY[action])
        return self._decision(action, (edit,), message, node)

    def replace_node(self, action: Action, node: Node, text: str, message: str,
                     report_node: Optional[Node] = None) -> Optional[FormattingDecision]:
        return self.replace(action, node.start_byte, node.end_byte, text, message, report_node or node)

    def extract(
        self,
        insert_at: int,
        declaration: str,
        group: Node,
        name: str,
        message: str,
        insert_end: Optional[int] = None,
        scope: Optional[Node] = None,
    ) -> FormattingDecision:
        priority = ACTION_PRIORITY[Action.EXTRACT_VARIABLE]
        edits = (
            Transformation(insert_at, insert_at if insert_end is None else insert_end, declaration, priority),
            Transformation(group.start_byte, group.end_byte, name, priority),
        )
        declares = (scope.start_byte, name) if scope is not None else None
        return self._decision(Action.EXTRACT_VARIABLE, edits, message, group, declares)

    def _decision(self, action: Action, edits, message: str, node: Node, declares=None) -> FormattingDecision:
        row, column = node.start_point
        return FormattingDecision(
            action=action,
            edits=tuple(edits),
            message=message,
            rule_id=self.rule_id,
            row=row,
            column=column,
            declares=declares,
        )
