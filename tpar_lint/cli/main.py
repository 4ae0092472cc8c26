"""
tpar-lint command line.

Commands:
    validate FILE   check a report file and print the transcript
    rules           list the rule catalog
    explain CODE    show one rule in detail
    layout [KIND]   show the field table of one or all record kinds
"""

from __future__ import annotations

import logging
import os
import sys
from itertools import groupby
from pathlib import Path  # noqa: TC003
from typing import Annotated

import typer

import tpar_lint
from tpar_lint.cli.context import ExitCode, get_exit_code
from tpar_lint.cli.output import OutputFormat, get_output_adapter

MAX_BYTES_ENV = "TPAR_LINT_MAX_BYTES"

# 100 MiB
DEFAULT_MAX_BYTES = 100 * 1024 * 1024

FAIL_ON_CHOICES = ("error", "warn")


def _max_bytes_limit(option: int | None) -> int | None:
    """Size limit from --max-bytes, then the environment, then the default; 0 disables it."""
    if option is None:
        raw = os.environ.get(MAX_BYTES_ENV, "").strip()
        if not raw:
            return DEFAULT_MAX_BYTES
        try:
            option = int(raw)
        except ValueError:
            raise typer.BadParameter(f"{MAX_BYTES_ENV} must be an integer") from None
    return option if option > 0 else None


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def _usage_error(*lines: str) -> typer.Exit:
    for line in lines:
        typer.echo(line, err=True)
    return typer.Exit(ExitCode.USAGE)


app = typer.Typer(
    name="tpar-lint",
    help="Taxable Payments Annual Report (TPAR) file validator",
    add_completion=False,
    no_args_is_help=True,
)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"tpar-lint {tpar_lint.__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=_show_version,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Taxable Payments Annual Report (TPAR) file validator."""


# =============================================================================
# validate
# =============================================================================


@app.command()
def validate(
    file: Annotated[Path, typer.Argument(help="TPAR file to validate", exists=True)],
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: terminal, json"),
    ] = "terminal",
    fail_on: Annotated[
        str,
        typer.Option("--fail-on", help="Lowest severity that fails the run: error, warn"),
    ] = "error",
    output: Annotated[
        Path | None,
        typer.Option("--out", "-o", help="Write the report to a file instead of stdout"),
    ] = None,
    encoding: Annotated[
        str | None,
        typer.Option("--encoding", "-e", help="Force input encoding instead of detecting it"),
    ] = None,
    color: Annotated[
        bool,
        typer.Option("--color/--no-color", help="Colour the transcript on a terminal"),
    ] = True,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Do not confirm where --out was written"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log engine progress to stderr"),
    ] = False,
    max_bytes: Annotated[
        int | None,
        typer.Option(
            "--max-bytes",
            help=(
                "Maximum input size in bytes, 0 for no limit. "
                f"Defaults to {MAX_BYTES_ENV} or 100MiB."
            ),
        ),
    ] = None,
) -> None:
    """Validate a TPAR report file."""
    from tpar_lint.core.parser import TparLintError, parse_file
    from tpar_lint.core.rules import validate as validate_report

    _configure_logging(verbose)

    if fail_on.lower() not in FAIL_ON_CHOICES:
        raise _usage_error(f"Unknown severity for --fail-on: {fail_on}")
    if format not in OutputFormat.names():
        raise _usage_error(
            f"Unknown format: {format}",
            f"Available formats: {', '.join(OutputFormat.names())}",
        )

    limit = _max_bytes_limit(max_bytes)
    try:
        report = validate_report(parse_file(file, max_bytes=limit, encoding=encoding))
    except (OSError, TparLintError) as e:
        typer.echo(f"Error reading file: {e}", err=True)
        raise typer.Exit(ExitCode.FATAL) from None

    rendered = get_output_adapter(format, color=color).render_report(report)

    if output is None:
        typer.echo(rendered)
    else:
        output.write_text(rendered + "\n", encoding="utf-8")
        if not quiet:
            typer.echo(f"Output written to {output}")

    raise typer.Exit(get_exit_code(report.verdict, fail_on))


# =============================================================================
# Catalog and layout
# =============================================================================


@app.command("rules")
def list_rules(
    severity: Annotated[
        str | None,
        typer.Option("--severity", "-s", help="Only rules of this severity: error, warn"),
    ] = None,
) -> None:
    """List the rule catalog, grouped by category."""
    from tpar_lint.core.rules import get_registry

    rules = [
        rule
        for rule in get_registry().rules.values()
        if severity is None or rule.severity.value == severity.lower()
    ]
    rules.sort(key=lambda r: (r.category.value, r.id))

    for category, members in groupby(rules, key=lambda r: r.category):
        typer.secho(f"\n{category.value}", bold=True)
        for rule in members:
            fg = typer.colors.RED if rule.severity.value == "error" else typer.colors.YELLOW
            typer.echo(f"  {rule.id:<14}", nl=False)
            typer.secho(f"{rule.severity.value:<6}", fg=fg, nl=False)
            typer.echo(f" {rule.title}")


@app.command()
def explain(
    code: Annotated[str, typer.Argument(help="Rule code to explain, e.g., TPR-ABN-001")],
) -> None:
    """Show one rule in detail."""
    from tpar_lint.core.rules import get_registry

    rule = get_registry().get_rule(code.strip().upper())
    if rule is None:
        raise _usage_error(f"Rule not found: {code}")

    typer.secho(f"\n{rule.id}: {rule.title}", bold=True)
    typer.echo(f"Severity: {rule.severity.value}")
    typer.echo(f"Category: {rule.category.value}")
    typer.echo(f"\nMessage:\n  {rule.message}")
    if rule.description:
        typer.echo(f"\nDescription:\n  {rule.description.strip()}")


@app.command()
def layout(
    kind: Annotated[
        str | None,
        typer.Argument(help="Record kind, e.g., DPAIVS, payee, file-total"),
    ] = None,
) -> None:
    """Show the field layout of one or all record kinds."""
    from tpar_lint.core.parser import RecordKind
    from tpar_lint.core.rules import get_registry

    if kind is None:
        kinds = list(RecordKind)
    else:
        resolved = RecordKind.from_name(kind)
        if resolved is None:
            raise _usage_error(
                f"Unknown record kind: {kind}",
                f"Available: {', '.join(k.tag for k in RecordKind)}",
            )
        kinds = [resolved]

    registry = get_registry()
    for record_kind in kinds:
        record_layout = registry.require_layout(record_kind)
        typer.secho(f"\n{record_kind.tag} ({record_layout.label})", bold=True)
        typer.echo(f"  {'col':>4}  {'len':>4}  {'type':<13} field")
        for spec in record_layout.fields:
            flag = "" if spec.required else " (optional)"
            typer.echo(
                f"  {spec.start:>4}  {spec.length:>4}  {spec.type.value:<13} {spec.label}{flag}"
            )


def run() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    run()
