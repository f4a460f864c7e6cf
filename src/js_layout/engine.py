import logging
import traceback
from pathlib import Path
from typing import Iterable, List, Optional

from tree_sitter import Node

from js_tree_sitter import JSParser, ParseResult
from js_tree_sitter import node_types as nt

from .models import (
    FormatResult,
    FormatResults,
    FormatterConfig,
    FormattingDecision,
    InternalIssue,
    Transformation,
)
from .rules.base import ASTRule, FormattingContext

logger = logging.getLogger(__name__)


class LayoutEngine:
    """Runs layout rules over JavaScript/TypeScript sources until nothing changes."""

    def __init__(self, config: Optional[FormatterConfig] = None, rules: Optional[Iterable[ASTRule]] = None):
        self.config = config or FormatterConfig()
        self.rules: List[ASTRule] = list(rules or [])
        self.parser = JSParser()

    @classmethod
    def with_builtin_rules(cls, config: Optional[FormatterConfig] = None, select=None, ignore=None) -> "LayoutEngine":
        from .registry import RuleRegistry

        config = config or FormatterConfig()
        registry = RuleRegistry(config)
        return cls(config, registry.get_enabled_rules(select=select, ignore=ignore))

    def add_rule(self, rule: ASTRule) -> None:
        """Register a new layout rule."""
        self.rules.append(rule)

    def _dialect(self, file_path: str) -> str:
        return JSParser.dialect_for(Path(file_path)) if file_path else self.parser.dialect

    def _parse(self, source: str, file_path: str) -> ParseResult:
        return self.parser.parse_string(source, self._dialect(file_path))

    def _decide(self, source: str, file_path: str, parse_result: ParseResult) -> List[FormattingDecision]:
        context = FormattingContext(source=source, file_path=file_path, tree=parse_result.tree)
        decisions = []
        for rule in self.rules:
            decisions.extend(rule.analyze(context))
        return decisions

    # -- lint ---------------------------------------------------------------

    def lint_string(self, source: str, file_path: str = "") -> List[InternalIssue]:
        """Report every layout decision the rules would make on the current text."""
        source = source.replace("\r\n", "\n")
        parse_result = self._parse(source, file_path)
        if parse_result.has_errors:
            logger.warning("Skipping %s: %s", file_path or "<string>", parse_result.errors[0])
            return self._syntax_issues(parse_result, file_path)

        rules = {rule.rule_id: rule for rule in self.rules}
        issues = []
        for decision in self._decide(source, file_path, parse_result):
            rule = rules[decision.rule_id]
            issues.append(InternalIssue(
                file_path=Path(file_path),
                line=decision.row + 1,
                column=decision.column + 1,
                rule_id=decision.rule_id,
                message=decision.message,
                severity=rule.severity,
                auto_fixable=rule.auto_fixable,
                decision=decision,
            ))
        return sorted(issues, key=lambda i: (i.line, i.column, i.rule_id))

    def lint_file(self, file_path: Path) -> List[InternalIssue]:
        source = Path(file_path).read_text(encoding="utf-8")
        return self.lint_string(source, str(file_path))

    def _syntax_issues(self, parse_result: ParseResult, file_path: str) -> List[InternalIssue]:
        broken: List[Node] = []

        def visit(node: Node):
            if node.type == nt.ERROR or node.is_missing:
                broken.append(node)
                return
            for child in node.children:
                if child.has_error:
                    visit(child)

        visit(parse_result.tree.root_node)
        rows = [node.start_point for node in broken] or [(0, 0)]
        return [
            InternalIssue(
                file_path=Path(file_path),
                line=row + 1,
                column=column + 1,
                rule_id="E001",
                message=message,
                severity="error",
                auto_fixable=False,
            )
            for (row, column), message in zip(rows, parse_result.errors)
        ]

    # -- fix ----------------------------------------------------------------

    def format_string(self, source: str, file_path: str = "") -> FormatResult:
        """Apply layout decisions pass after pass until a pass changes nothing."""
        newline = "\r\n" if "\r\n" in source else "\n"
        original = source.replace("\r\n", "\n")
        current_source = original
        errors: List[str] = []
        passes = 0

        try:
            for pass_number in range(1, self.config.max_passes + 1):
                parse_result = self._parse(current_source, file_path)
                if parse_result.has_errors:
                    if pass_number == 1:
                        logger.warning("Skipping %s: %s", file_path or "<string>", parse_result.errors[0])
                        errors.extend(parse_result.errors)
                    else:
                        errors.append(f"Layout fixes produced invalid syntax in pass {pass_number - 1}")
                        current_source = original
                    break

                accepted = self._select(self._decide(current_source, file_path, parse_result))
                logger.debug("Pass %d on %s: %d decision(s)", pass_number, file_path or "<string>", len(accepted))
                if not accepted:
                    break

                current_source = self._apply_transformations(
                    current_source, [edit for decision in accepted for edit in decision.edits]
                )
                passes = pass_number
            else:
                logger.warning(
                    "Reached max passes (%d) for %s without converging",
                    self.config.max_passes, file_path or "<string>",
                )
        except Exception as e:
            logger.error("Layout of %s failed: %s", file_path or "<string>", e)
            errors.append(f"{str(e)}\n{traceback.format_exc()}")
            current_source = original

        modified = current_source != original
        source_out = current_source.replace("\n", newline) if modified else source
        return FormatResult(source=source_out, modified=modified, errors=errors, passes=passes, file_path=file_path)

    def _select(self, decisions: List[FormattingDecision]) -> List[FormattingDecision]:
        """Highest priority first, then by position; a decision touching an accepted one waits for the next pass."""
        accepted: List[FormattingDecision] = []
        taken: List[Transformation] = []
        declared = set()
        for decision in sorted(decisions, key=lambda d: (-d.priority, d.range or (0, 0))):
            if not decision.edits:
                continue
            if decision.conflicts_with(taken):
                logger.debug("%s at line %d deferred, overlaps an accepted edit", decision.rule_id, decision.row + 1)
                continue
            # Next pass sees the first declaration and picks another name
            if decision.declares is not None and decision.declares in declared:
                logger.debug("%s at line %d deferred, `%s` already declared in this pass",
                             decision.rule_id, decision.row + 1, decision.declares[1])
                continue
            accepted.append(decision)
            taken.extend(decision.edits)
            if decision.declares is not None:
                declared.add(decision.declares)
        return accepted

    def _apply_transformations(self, source: str, transforms: List[Transformation]) -> str:
        """Applies non-overlapping byte-range transformations in a single pass."""
        data = source.encode("utf-8")
        result = []
        last_offset = 0
        for t in sorted(transforms, key=lambda t: (t.start_byte, t.end_byte)):
            if t.start_byte < last_offset:
                continue
            result.append(data[last_offset:t.start_byte])
            result.append(t.new_content.encode("utf-8"))
            last_offset = t.end_byte
        result.append(data[last_offset:])
        return b"".join(result).decode("utf-8")

    def format_files(self, files: List[Path], write: bool = True) -> FormatResults:
        """Batch format multiple files on disk."""
        results = []
        modified_count = 0
        error_count = 0
        for file_path in files:
            try:
                with open(file_path, encoding="utf-8", newline="") as f:
                    source = f.read()
                result = self.format_string(source, str(file_path))
                results.append(result)
                if result.errors:
                    error_count += 1
                elif result.modified:
                    modified_count += 1
                    if write:
                        Path(file_path).write_text(result.source, encoding="utf-8", newline="")
            except Exception as e:
                logger.error("Could not format %s: %s", file_path, e)
                results.append(FormatResult(source="", modified=False, errors=[str(e)], file_path=str(file_path)))
                error_count += 1
        return FormatResults(
            results=results, total_files=len(files), modified_files=modified_count, error_files=error_count
        )
