import logging
from pathlib import Path

import pytest

from js_tree_sitter import ASTWalker, JSParser

from js_layout.engine import LayoutEngine
from js_layout.expressions import build_expression
from js_layout.nesting import iter_groups, nesting_depth
from js_layout.operands import collect_inside_group, on_distinct_rows
from js_layout.models import MAX_NESTING_LEVEL, Action, FormatterConfig, FormattingDecision, Transformation
from js_layout.rules.base import ASTRule


SAMPLE = (
    "function check(user) {\n"
    "    if (user.active && user.verified || user.admin || user.owner) {\n"
    "        return true;\n"
    "    }\n"
    "    const label = user.name &&\n"
    '        user.email ? "ok" : "missing";\n'
    "    return label;\n"
    "}\n"
)

SAMPLE_FORMATTED = (
    "function check(user) {\n"
    "    if (\n"
    "        user.active\n"
    "        && user.verified\n"
    "        || user.admin\n"
    "        || user.owner\n"
    "    ) {\n"
    "        return true;\n"
    "    }\n"
    '    const label = user.name && user.email ? "ok" : "missing";\n'
    "    return label;\n"
    "}\n"
)


class BrokenRule(ASTRule):
    node_types = ("if_statement",)

    @property
    def rule_id(self):
        return "X001"

    @property
    def name(self):
        return "broken"

    def visit(self, node, context):
        raise RuntimeError("boom")


class RestlessRule(ASTRule):
    """Never satisfied: inserts an empty statement on every pass."""
    node_types = ("program",)

    @property
    def rule_id(self):
        return "X002"

    @property
    def name(self):
        return "restless"

    def visit(self, node, context):
        return FormattingDecision(Action.EXPAND, (Transformation(0, 0, ";", 2),), "more", self.rule_id)


def decision(action, *spans):
    priority = {Action.EXTRACT_VARIABLE: 3, Action.EXPAND: 2, Action.COLLAPSE: 1}[action]
    return FormattingDecision(action, tuple(Transformation(s, e, "x", priority) for s, e in spans))


def test_builtin_rules_format_sample():
    engine = LayoutEngine.with_builtin_rules()
    result = engine.format_string(SAMPLE)

    assert result.source == SAMPLE_FORMATTED
    assert result.passes == 1
    assert not result.errors


def test_formatting_is_idempotent():
    engine = LayoutEngine.with_builtin_rules()
    once = engine.format_string(SAMPLE).source
    twice = engine.format_string(once)

    assert twice.source == once
    assert not twice.modified
    assert twice.passes == 0


def test_lint_reports_without_changing():
    engine = LayoutEngine.with_builtin_rules()
    issues = engine.lint_string(SAMPLE, "sample.js")

    assert [(i.line, i.rule_id) for i in issues] == [(2, "L001"), (5, "L002")]
    assert all(i.severity == "style" and i.auto_fixable for i in issues)
    assert issues[0].file_path == Path("sample.js")
    assert not engine.lint_string(SAMPLE_FORMATTED)


def test_select_and_ignore():
    engine = LayoutEngine.with_builtin_rules(ignore=["L002"])
    assert [r.rule_id for r in engine.rules] == ["L001", "L003"]

    engine = LayoutEngine.with_builtin_rules(select=["multiline-"])
    assert [r.rule_id for r in engine.rules] == ["L001", "L002"]


def test_extraction_wins_over_overlapping_collapse():
    engine = LayoutEngine()
    extract = decision(Action.EXTRACT_VARIABLE, (0, 0), (20, 28))
    collapse = decision(Action.COLLAPSE, (10, 40))
    elsewhere = decision(Action.EXPAND, (50, 60))

    accepted = engine._select([collapse, elsewhere, extract])
    assert accepted == [extract, elsewhere]


def test_insertions_conflict_when_touching():
    engine = LayoutEngine()
    first = decision(Action.EXPAND, (5, 5))
    second = decision(Action.EXPAND, (5, 9))
    assert engine._select([first, second]) == [first]


def test_syntax_errors_leave_source_untouched():
    source = "if (a &&\n    b {\n"
    result = LayoutEngine.with_builtin_rules().format_string(source)

    assert result.source == source
    assert not result.modified
    assert result.errors


def test_syntax_errors_reported_by_lint():
    issues = LayoutEngine.with_builtin_rules().lint_string("const x = (a && ;\n")
    assert issues
    assert all(i.rule_id == "E001" and i.severity == "error" for i in issues)


def test_rule_exception_is_recorded():
    engine = LayoutEngine()
    engine.add_rule(BrokenRule())
    result = engine.format_string("if (a) {}\n")

    assert result.source == "if (a) {}\n"
    assert not result.modified
    assert "boom" in result.errors[0]


def test_max_passes_stops_the_loop(caplog):
    engine = LayoutEngine(FormatterConfig(max_passes=3))
    engine.add_rule(RestlessRule())

    with caplog.at_level(logging.WARNING, logger="js_layout.engine"):
        result = engine.format_string("x;\n")

    assert result.source == ";;;x;\n"
    assert result.passes == 3
    assert "Reached max passes" in caplog.text


def test_crlf_line_endings_are_kept():
    source = "if (\r\n    a\r\n    && b\r\n) {}\r\n"
    result = LayoutEngine.with_builtin_rules().format_string(source)
    assert result.source == "if (a && b) {}\r\n"


def test_typescript_file_is_formatted(tmp_path):
    file_path = tmp_path / "guard.ts"
    file_path.write_text("const ok: boolean = a &&\n    b;\n")

    results = LayoutEngine.with_builtin_rules().format_files([file_path])
    assert results.modified_files == 1
    assert file_path.read_text() == "const ok: boolean = a && b;\n"


def test_format_files_skips_broken_files(tmp_path):
    good = tmp_path / "good.js"
    good.write_text("if (a || b || c || d) {}\n")
    broken = tmp_path / "broken.js"
    broken.write_text("if (a || {\n")
    missing = tmp_path / "missing.js"

    results = LayoutEngine.with_builtin_rules().format_files([good, broken, missing])

    assert results.total_files == 3
    assert results.modified_files == 1
    assert results.error_files == 2
    assert broken.read_text() == "if (a || {\n"
    assert good.read_text().startswith("if (\n    a\n")


@pytest.mark.parametrize("source", [
    "if (a || b || c || d) {}\n",
    "if (x && (p || q || r || s)) {}\n",
    "const v = a || b || c || d ? 1 : 2;\n",
    "const o = {\n    k: a || b || c || d,\n    j: (a && (b || (c && d))) || e,\n};\n",
    "const ok = cond && (a || b || c || d || e) && other;\n",
])
def test_fixes_converge(source):
    engine = LayoutEngine.with_builtin_rules()
    result = engine.format_string(source)

    assert not result.errors
    assert result.passes < engine.config.max_passes
    assert not engine.format_string(result.source).modified


def test_decision_spans():
    single = decision(Action.COLLAPSE, (4, 12))
    assert single.range == (4, 12)
    assert single.replacement_text == "x"

    extract = decision(Action.EXTRACT_VARIABLE, (0, 0), (20, 28))
    assert extract.range == (0, 28)
    assert extract.replacement_text is None
    assert extract.priority > single.priority


def layout_violations(source, max_operands=3):
    """Conditions of `if`s and ternaries breaking the operand-count or nesting layout"""
    result = JSParser().parse_string(source)
    assert not result.has_errors

    root = result.tree.root_node
    nodes = ASTWalker.find_all_by_type(root, "if_statement") + ASTWalker.find_all_by_type(root, "ternary_expression")
    violations = []
    for node in nodes:
        expr = build_expression(node.child_by_field_name("condition"))
        row = node.start_point[0] + 1
        if nesting_depth(expr) > MAX_NESTING_LEVEL:
            violations.append((row, "nesting"))

        groups = [expr] + [group for group, _ in iter_groups(expr)]
        for group in groups:
            operands = collect_inside_group(group)
            if len(operands) > max_operands and not on_distinct_rows(operands):
                violations.append((row, "operands"))
    return violations


@pytest.mark.parametrize("source", [
    "if (a || b || c || d) {}\n",
    "if ((a || b || c || d) && (e || f || g || h)) {}\n",
    "const v = (a || b || c || d) && (e || f || g || h) ? 1 : 2;\n",
    "if (a && (b || c || d || e) && (f || (g && h && i && j))) {}\n",
    "if ((a && (b || (c && (d || e)))) || f) {}\n",
    "const v = (a && (b || (c && (d || e)))) || f ? 1 : 2;\n",
    "function f() {\n    if (p || (q && (r || (s && (t || u))))) {\n        return 1;\n    }\n}\n",
])
def test_formatted_output_respects_layout(source):
    engine = LayoutEngine.with_builtin_rules()
    assert layout_violations(source)

    result = engine.format_string(source)
    assert not result.errors
    assert layout_violations(result.source) == []


def test_deep_nesting_extracted_until_two_levels():
    source = "if ((a && (b || (c && (d || e)))) || f) {}\n"
    expected = (
        "const isDOrE = (d || e);\n"
        "const isCAndIsDOrE = (c && isDOrE);\n"
        "if ((a && (b || isCAndIsDOrE)) || f) {}\n"
    )

    result = LayoutEngine.with_builtin_rules().format_string(source)
    assert result.source == expected
    assert result.passes == 2


def test_collapse_and_expand_round_trip():
    single = "if (a && b && c) {}\n"
    expanded = "if (\n    a\n    && b\n    && c\n) {}\n"

    strict = LayoutEngine.with_builtin_rules(FormatterConfig(max_operands=2))
    default = LayoutEngine.with_builtin_rules()

    assert strict.format_string(single).source == expanded
    assert default.format_string(expanded).source == single
    assert not default.format_string(single).modified
    assert not strict.format_string(expanded).modified
