"""Text and JSON output shared by the CLI commands.

Every command that takes ``--format json`` writes a single JSON document
to stdout. Failures are written to stderr as
``{"status": "failed", "error": {"code", "message", "field"?}}`` where
``code`` is the :class:`ExitCode` name and ``field`` the dotted path of
the offending document field, when known.
"""

from __future__ import annotations

import json
import sys
from typing import Any, NoReturn

import click

from shaper.cli.exit_codes import ExitCode

format_option = click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    show_default=True,
    help="Output format.",
)


def echo_json(data: Any, *, err: bool = False) -> None:
    """Print indented JSON; strategy descriptions keep their non-ASCII text."""
    click.echo(json.dumps(data, indent=2, ensure_ascii=False), err=err)


def error_exit(
    message: str,
    code: ExitCode,
    json_output: bool = False,
    *,
    field: str | None = None,
) -> NoReturn:
    """Report a failure on stderr and exit with ``code``.

    Args:
        message: Error message to display.
        code: Exit code; its name is the JSON error code.
        json_output: Whether to format the error as JSON.
        field: Dotted path of the document field at fault, if any.
    """
    if json_output:
        error: dict[str, Any] = {"code": code.name, "message": message}
        if field:
            error["field"] = field
        echo_json({"status": "failed", "error": error}, err=True)
    else:
        click.echo(f"Error: {message}", err=True)
    sys.exit(int(code))


def success_output(message: str, json_output: bool = False, **data: Any) -> None:
    """Report a completed change.

    Text output is just ``message``; JSON output adds ``data`` next to it.
    """
    if json_output:
        echo_json({"status": "completed", "message": message, **data})
    else:
        click.echo(message)


def warning_output(message: str, json_output: bool = False) -> None:
    """Print a warning to stderr; JSON output stays a single document."""
    if not json_output:
        click.echo(f"Warning: {message}", err=True)
