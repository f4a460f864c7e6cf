from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import cached_property
from typing import List, Optional, Tuple

from tree_sitter import Node, Tree

from js_tree_sitter import ASTWalker, SourceView

from ..emitter import EditEmitter
from ..layout import OperandCountFormatter
from ..models import FormatterConfig, FormattingDecision


@dataclass
class FormattingContext:
    """One parse of one file, shared by every rule in a pass."""
    source: str
    file_path: str = ""
    tree: Optional[Tree] = None

    @cached_property
    def view(self) -> SourceView:
        return SourceView(self.source, self.tree)


class ASTRule(ABC):
    """A layout rule visiting nodes of a few types, at most one decision per node."""

    node_types: Tuple[str, ...] = ()

    def __init__(self, config: Optional[FormatterConfig] = None):
        self.config = config or FormatterConfig()

    @property
    @abstractmethod
    def rule_id(self) -> str:
        """Unique rule identifier (e.g., 'L001')."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable rule name (e.g., 'multiline-if-conditions')."""
        pass

    @property
    def severity(self) -> str:
        return "style"

    @property
    def auto_fixable(self) -> bool:
        return True

    @property
    def description(self) -> str:
        return ""

    @abstractmethod
    def visit(self, node: Node, context: FormattingContext) -> Optional[FormattingDecision]:
        pass

    def analyze(self, context: FormattingContext) -> List[FormattingDecision]:
        if not context.tree:
            return []

        decisions = []

        def check(node: Node):
            if node.type in self.node_types:
                decision = self.visit(node, context)
                if decision is not None:
                    decisions.append(decision)

        ASTWalker.walk(context.tree.root_node, check)
        return decisions

    # Helpers shared by the rules

    def emitter(self, context: FormattingContext) -> EditEmitter:
        return EditEmitter(context.view, self.rule_id)

    def formatter(self, context: FormattingContext) -> OperandCountFormatter:
        return OperandCountFormatter(
            context.view,
            self.emitter(context),
            max_operands=self.config.max_operands,
            indent_unit=self.config.indent_unit,
        )
