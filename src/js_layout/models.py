from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

MAX_NESTING_LEVEL = 2


@dataclass
class FormatterConfig:
    max_operands: int = 3
    indent_unit: str = "    "
    max_passes: int = 10

    def __post_init__(self):
        if self.max_operands < 1:
            raise ValueError("max_operands must be at least 1")
        if self.max_passes < 1:
            raise ValueError("max_passes must be at least 1")


class Action(str, Enum):
    COLLAPSE = "collapse"
    EXPAND = "expand"
    EXTRACT_VARIABLE = "extract-variable"
    NOOP = "noop"


# Higher wins when two decisions touch the same text in one pass
ACTION_PRIORITY = {
    Action.EXTRACT_VARIABLE: 3,
    Action.EXPAND: 2,
    Action.COLLAPSE: 1,
    Action.NOOP: 0,
}


@dataclass(frozen=True)
class Transformation:
    start_byte: int
    end_byte: int
    new_content: str
    priority: int = 0

    @property
    def is_insertion(self) -> bool:
        return self.start_byte == self.end_byte

    def overlaps(self, other: "Transformation") -> bool:
        if self.is_insertion or other.is_insertion:
            return self.start_byte <= other.end_byte and other.start_byte <= self.end_byte
        return self.start_byte < other.end_byte and other.start_byte < self.end_byte


@dataclass(frozen=True)
class FormattingDecision:
    """One layout verdict for one visited node, applied atomically."""
    action: Action
    edits: Tuple[Transformation, ...] = ()
    message: str = ""
    rule_id: str = ""
    row: int = 0
    column: int = 0
    # (block start byte, name) of the `const` an extraction introduces
    declares: Optional[Tuple[int, str]] = None

    @property
    def priority(self) -> int:
        return ACTION_PRIORITY[self.action]

    @property
    def range(self) -> Optional[Tuple[int, int]]:
        if not self.edits:
            return None
        return (min(e.start_byte for e in self.edits), max(e.end_byte for e in self.edits))

    @property
    def replacement_text(self) -> Optional[str]:
        if len(self.edits) != 1:
            return None
        return self.edits[0].new_content

    def conflicts_with(self, edits: List[Transformation]) -> bool:
        return any(mine.overlaps(other) for mine in self.edits for other in edits)


@dataclass
class InternalIssue:
    """Internal representation of a layout issue"""

    file_path: Path
    line: int
    rule_id: str
    message: str
    severity: str  # 'error', 'warning', 'style', 'info'
    auto_fixable: bool
    column: int = 0
    decision: Optional[FormattingDecision] = None


@dataclass
class FormatResult:
    source: str
    modified: bool
    errors: List[str] = field(default_factory=list)
    passes: int = 0
    file_path: str = ""


@dataclass
class FormatResults:
    results: List[FormatResult]
    total_files: int
    modified_files: int
    error_files: int
