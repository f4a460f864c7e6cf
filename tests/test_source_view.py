from pathlib import Path

from js_tree_sitter import ASTWalker, JSParser, SourceView


def make_view(source):
    result = JSParser().parse_string(source)
    return SourceView(source, result.tree)


def test_line_indent():
    view = make_view("if (a) {\n    b();\n}\n")
    assert view.line_indent(0) == ""
    assert view.line_indent(1) == "    "
    assert view.line_indent(42) == ""


def test_token_before_and_after():
    view = make_view("foo(a, b);")
    a = ASTWalker.find_all_by_type(view.root, "identifier")[1]

    assert view.token_before(a).text == "("
    assert view.token_after(a).text == ","
    assert view.token_after(a, lambda t: t.text == ")").text == ")"
    assert view.token_before(a, lambda t: t.text == "?") is None


def test_text_uses_byte_offsets():
    source = 'const s = "héllo" && ok;'
    view = make_view(source)
    binary = ASTWalker.find_all_by_type(view.root, "binary_expression")[0]
    assert view.text(binary) == '"héllo" && ok'


def test_squash_joins_lines():
    view = make_view("x = foo(\n    a,\n    b\n);")
    call = ASTWalker.find_all_by_type(view.root, "call_expression")[0]
    assert view.squash(call) == "foo(a, b)"


def test_squash_keeps_string_contents():
    view = make_view('x = f("a   b",\n  c);')
    call = ASTWalker.find_all_by_type(view.root, "call_expression")[0]
    assert view.squash(call) == 'f("a   b", c)'


def test_comments_are_not_tokens():
    source = "if (a && // note\n    b) {}"
    view = make_view(source)
    assert [c.text for c in view.comments] == ["// note"]
    assert all(t.type != "comment" for t in view.tokens)
    assert view.has_comment(0, len(source))
    assert not view.has_comment(0, 5)


def test_parse_errors_are_reported():
    result = JSParser().parse_string("if (a && {")
    assert result.has_errors


def test_dialect_from_suffix():
    assert JSParser.dialect_for(Path("app.tsx")) == "tsx"
    assert JSParser.dialect_for(Path("types.ts")) == "typescript"
    assert JSParser.dialect_for(Path("index.mjs")) == "javascript"
    assert JSParser.dialect_for(Path("README")) == "javascript"


def test_parse_typescript_file(tmp_path):
    file_path = tmp_path / "check.ts"
    file_path.write_text("const ok: boolean = a && b;\n")

    result = JSParser().parse_file(file_path)
    assert not result.has_errors
    assert ASTWalker.find_all_by_type(result.tree.root_node, "type_annotation")


def test_line_prefix():
    view = make_view("if (a) {\n    foo(); bar();\n}\n")
    calls = ASTWalker.find_all_by_type(view.root, "call_expression")
    assert view.line_prefix(calls[0]) == "    "
    assert view.line_prefix(calls[1]) == "    foo(); "
