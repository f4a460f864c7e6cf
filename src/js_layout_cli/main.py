import difflib
import logging
from pathlib import Path
from typing import List, Optional

import typer

from js_layout.engine import LayoutEngine
from js_layout.registry import RuleRegistry

from .config import ConfigError, LayoutConfig
from .converters import internal_issue_to_lint_issue

app = typer.Typer(help="js-layout - operand-driven layout of boolean and ternary expressions")


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _build_engine(config_file: Optional[Path], max_operands: Optional[int]) -> LayoutEngine:
    try:
        config = LayoutConfig(config_file, overrides={"max_operands": max_operands})
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    formatter_config = config.formatter_config()
    registry = RuleRegistry(formatter_config)
    return LayoutEngine(formatter_config, config.apply_to_registry(registry))


def _read(path: Path) -> str:
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


@app.command()
def lint(
    files: List[Path] = typer.Argument(None, help="Files to lint"),
    fix: bool = typer.Option(False, help="Automatically fix issues"),
    config_file: Optional[Path] = typer.Option(None, "--config", help="Path to config file"),
    max_operands: Optional[int] = typer.Option(None, help="Operands kept on a single line"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Report layout issues in JavaScript/TypeScript files"""
    _setup_logging(verbose)
    engine = _build_engine(config_file, max_operands)

    if not files:
        typer.echo("Error: Provide files to lint")
        raise typer.Exit(code=1)

    all_issues = []
    failed = 0

    for file_path in files:
        if fix:
            result = engine.format_string(_read(file_path), str(file_path))
            if result.errors:
                failed += 1
                typer.echo(f"ERROR: {file_path}: {result.errors[0].splitlines()[0]}")
                continue
            if result.modified:
                file_path.write_text(result.source, encoding="utf-8", newline="")
                typer.echo(f"  🔧 Applied layout fixes in {file_path.name} ({result.passes} passes)")

        all_issues.extend(engine.lint_file(file_path))

    external_issues = [internal_issue_to_lint_issue(i) for i in all_issues]
    for issue in sorted(external_issues, key=lambda x: (x.file_path, x.line_number, x.column)):
        typer.echo(
            f"{issue.severity.value}: {issue.file_path}:{issue.line_number}:{issue.column} "
            f"[{issue.rule_id}] {issue.message}"
        )

    typer.echo(f"\nTotal issues found: {len(external_issues)}")

    if external_issues or failed:
        raise typer.Exit(code=1)


@app.command("format")
def format_files(
    files: List[Path] = typer.Argument(..., help="Files to format"),
    check: bool = typer.Option(False, help="Only report files that would change"),
    diff: bool = typer.Option(False, help="Print a unified diff instead of writing"),
    config_file: Optional[Path] = typer.Option(None, "--config", help="Path to config file"),
    max_operands: Optional[int] = typer.Option(None, help="Operands kept on a single line"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Rewrite files with the layout fixes applied"""
    _setup_logging(verbose)
    engine = _build_engine(config_file, max_operands)

    changed = 0
    failed = 0
    for file_path in files:
        source = _read(file_path)
        result = engine.format_string(source, str(file_path))

        if result.errors:
            failed += 1
            typer.echo(f"error: cannot format {file_path}: {result.errors[0].splitlines()[0]}")
            continue
        if not result.modified:
            continue

        changed += 1
        if diff:
            typer.echo("".join(difflib.unified_diff(
                source.splitlines(keepends=True),
                result.source.splitlines(keepends=True),
                fromfile=f"{file_path}",
                tofile=f"{file_path} (formatted)",
            )), nl=False)
        elif check:
            typer.echo(f"Would reformat {file_path}")
        else:
            file_path.write_text(result.source, encoding="utf-8", newline="")
            typer.echo(f"Reformatted {file_path}")

    verb = "would be reformatted" if check or diff else "reformatted"
    typer.echo(f"{changed} file(s) {verb}, {len(files) - changed - failed} unchanged, {failed} failed")

    if failed or ((check or diff) and changed):
        raise typer.Exit(code=1)


@app.command()
def rules():
    """List the available layout rules"""
    for rule in RuleRegistry().get_all_rules():
        typer.echo(f"{rule.rule_id}  {rule.name:<32} {rule.description}")


if __name__ == "__main__":
    app()
