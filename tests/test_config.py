import pytest

from js_layout_cli.config import ConfigError, LayoutConfig
from js_layout_cli.converters import internal_issue_to_lint_issue
from js_layout_cli.models import Severity
from js_layout.models import InternalIssue


def test_defaults(tmp_path):
    config_path = tmp_path / ".js-layout.toml"
    config_path.write_text("[tool.js-layout]\n")

    config = LayoutConfig(config_path)
    assert config.settings.max_operands == 3
    assert config.select == []
    assert config.ignore == []


def test_values_from_file(tmp_path):
    config_path = tmp_path / ".js-layout.toml"
    config_path.write_text(
        "[tool.js-layout]\n"
        "max-operands = 2\n"
        "max-passes = 5\n"
        'select = ["L00"]\n'
        'ignore = ["L003"]\n'
        'indent-unit = "  "\n'
    )

    config = LayoutConfig(config_path)
    formatter_config = config.formatter_config()
    assert formatter_config.max_operands == 2
    assert formatter_config.max_passes == 5
    assert formatter_config.indent_unit == "  "
    assert config.select == ["L00"]
    assert config.ignore == ["L003"]


def test_overrides_win(tmp_path):
    config_path = tmp_path / ".js-layout.toml"
    config_path.write_text("[tool.js-layout]\nmax-operands = 2\n")

    config = LayoutConfig(config_path, overrides={"max_operands": 5, "max_passes": None})
    assert config.settings.max_operands == 5
    assert config.settings.max_passes == 10


def test_discovers_pyproject_table(tmp_path):
    (tmp_path / "pyproject.toml").write_text("[tool.js-layout]\nmax-operands = 4\n")
    nested = tmp_path / "src" / "app"
    nested.mkdir(parents=True)

    assert LayoutConfig.discover(nested) == (tmp_path / "pyproject.toml").resolve()


def test_pyproject_without_table_is_ignored(tmp_path):
    (tmp_path / "pyproject.toml").write_text("[project]\nname = 'web'\n")
    (tmp_path / ".js-layout.toml").write_text("[tool.js-layout]\n")

    assert LayoutConfig.discover(tmp_path) == (tmp_path / ".js-layout.toml").resolve()


@pytest.mark.parametrize("content", [
    "[tool.js-layout]\nmax-operands = 0\n",
    "[tool.js-layout\n",
])
def test_invalid_config(tmp_path, content):
    config_path = tmp_path / ".js-layout.toml"
    config_path.write_text(content)

    with pytest.raises(ConfigError):
        LayoutConfig(config_path)


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigError):
        LayoutConfig(tmp_path / "nope.toml")


def test_issue_conversion(tmp_path):
    issue = InternalIssue(
        file_path=tmp_path / "a.js",
        line=3,
        column=7,
        rule_id="L002",
        message="Ternary with ≤3 operands should be on a single line",
        severity="style",
        auto_fixable=True,
    )

    external = internal_issue_to_lint_issue(issue)
    assert external.severity == Severity.STYLE
    assert external.line_number == 3
    assert external.column == 7
    assert external.file_path == str(tmp_path / "a.js")
    assert external.auto_fixable
