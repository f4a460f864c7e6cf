from dataclasses import dataclass
from typing import List, Tuple
from tree_sitter import Tree


@dataclass
class ParseResult:
    """Result of a tree-sitter parse operation"""
    tree: Tree
    source: str
    errors: List[str]

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


@dataclass(frozen=True)
class Token:
    """A leaf of the syntax tree as seen by layout rules.

    String, template and regex literals are kept whole so that their
    contents never look like punctuation.
    """
    type: str
    text: str
    start_byte: int
    end_byte: int
    start_point: Tuple[int, int]
    end_point: Tuple[int, int]

    @property
    def start_row(self) -> int:
        return self.start_point[0]

    @property
    def end_row(self) -> int:
        return self.end_point[0]
