from pathlib import Path
from typing import Dict, List

import tree_sitter_javascript as tsjs
import tree_sitter_typescript as tsts
from tree_sitter import Language, Node, Parser

from .models import ParseResult
from . import node_types as nt

_GRAMMARS = {
    "javascript": tsjs.language,
    "typescript": tsts.language_typescript,
    "tsx": tsts.language_tsx,
}

_SUFFIXES = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}


class JSParser:
    """Thin wrapper around tree-sitter for JavaScript, JSX and TypeScript sources"""

    def __init__(self, dialect: str = "javascript"):
        if dialect not in _GRAMMARS:
            raise ValueError(f"Unknown dialect '{dialect}', expected one of {sorted(_GRAMMARS)}")
        self.dialect = dialect
        self._parsers: Dict[str, Parser] = {}

    @staticmethod
    def dialect_for(file_path: Path) -> str:
        return _SUFFIXES.get(Path(file_path).suffix.lower(), "javascript")

    def _parser(self, dialect: str) -> Parser:
        if dialect not in self._parsers:
            self._parsers[dialect] = Parser(Language(_GRAMMARS[dialect]()))
        return self._parsers[dialect]

    def parse_string(self, source: str, dialect: str | None = None) -> ParseResult:
        tree = self._parser(dialect or self.dialect).parse(source.encode("utf-8"))
        return ParseResult(tree=tree, source=source, errors=self._collect_errors(tree.root_node))

    def parse_file(self, file_path: Path) -> ParseResult:
        file_path = Path(file_path)
        source = file_path.read_text(encoding="utf-8")
        return self.parse_string(source, self.dialect_for(file_path))

    def _collect_errors(self, root: Node) -> List[str]:
        if not root.has_error:
            return []

        errors = []

        def visit(node: Node):
            if node.type == nt.ERROR:
                row, col = node.start_point
                errors.append(f"Syntax error at line {row + 1}, column {col + 1}")
                return
            if node.is_missing:
                row, col = node.start_point
                errors.append(f"Missing '{node.type}' at line {row + 1}, column {col + 1}")
                return
            for child in node.children:
                if child.has_error:
                    visit(child)

        visit(root)
        return errors or ["Syntax error"]
