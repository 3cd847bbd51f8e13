"""
Validates the structure of a Markdown file.
With --fix, rewrites the file to resolve what can be fixed automatically and
reports what still needs attention.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from .config import ConfigLoadError, build_config
from .filesystem import (
    get_max_file_size,
    read_document,
    resolve_document,
    stat_document,
    write_document,
)
from .orchestrator import check_and_fix
from .rules import RULES
from .validator import validate

__all__ = ["cli"]


def _echo_findings(findings) -> None:
    for finding in findings:
        click.echo(f"- {finding}")


@click.command()
@click.version_option()
@click.option("--fix", is_flag=True, help="Rewrite the file to fix what can be fixed")
@click.option("--max-line-length", type=int, help="Longest line accepted (default 120)")
@click.option(
    "--disable",
    "disabled_rules",
    multiple=True,
    metavar="RULE",
    help=f"Disable a line rule by id or alias ({', '.join(RULES)})",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug details to stderr")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    fix: bool = False,
    max_line_length: int | None = None,
    disabled_rules: tuple[str, ...] = (),
    verbose: bool = False,
):
    """
    Entry point for validating and optionally fixing a Markdown file.

    Args:
        filepath: Path to the Markdown file to check.
        fix: Whether to rewrite the file with automatic fixes.
        max_line_length: Override for the longest accepted line.
        disabled_rules: Line rules to turn off for this run.
        verbose: Whether to log debug details.

    Returns:
        None. Exits with status 1 when the original document has findings.

    Raises:
        click.BadParameter: If the path is invalid or the configuration cannot
            be loaded.
        click.ClickException: If the file cannot be read or written.

    Examples:
        md-structure README.md --fix --disable MD010
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    base_dir = Path.cwd().resolve()
    try:
        filepath = resolve_document(filepath, base_dir)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error
    try:
        config = build_config(
            filepath.parent,
            max_line_length=max_line_length,
            disabled_rules=list(disabled_rules),
        )
    except ConfigLoadError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        initial_stat = stat_document(filepath, max_file_size)
        content = read_document(filepath)
    except IOError as error:
        raise click.ClickException(str(error)) from error

    result = validate(content, config)
    if result.valid:
        click.echo("Document is valid!")
        click.echo("")
        for name, count in result.context.summary().items():
            click.echo(f"{name}: {count}")
        return

    click.echo("Found issues:")
    _echo_findings(result.findings)

    fixable = sum(1 for finding in result.findings if finding.kind.auto_fixable)
    if fixable and not fix:
        click.echo("")
        click.echo(f"{fixable} heading level or list marker issue(s) can be fixed with --fix.")

    if fix:
        click.echo("")
        click.echo("Attempting to fix issues...")
        report = check_and_fix(content, config)
        try:
            write_document(filepath, report.fixed_text, initial_stat)
        except IOError as error:
            raise click.ClickException(str(error)) from error

        if report.valid:
            click.echo("All issues fixed!")
        else:
            click.echo("Some issues require manual attention:")
            _echo_findings(report.residual_findings)

    sys.exit(1)


if __name__ == "__main__":
    cli()
