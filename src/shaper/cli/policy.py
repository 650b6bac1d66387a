"""CLI commands for strategy policy documents.

This module provides commands for working with policy files:
- policy validate: Check documents against the canonical shape
- policy show: Summarise the strategies in a file
- policy decode: Turn documents into editable form snapshots
- policy encode: Turn form snapshots into canonical documents
- policy examples: Export the sample strategies
- policy delete: Remove one strategy from a file
"""

import logging
from pathlib import Path
from typing import Any

import click

from shaper.cli._context import build_directory, load_cli_config
from shaper.cli.exit_codes import ExitCode
from shaper.cli.output import (
    echo_json,
    error_exit,
    format_option,
    success_output,
    warning_output,
)
from shaper.policy.codec import decode_document
from shaper.policy.conditions import describe_condition
from shaper.policy.editor import StrategyEditor
from shaper.policy.examples import example_documents
from shaper.policy.exceptions import FormValidationError, PolicyValidationError
from shaper.policy.form import StrategyForm, form_from_dict, form_to_dict
from shaper.policy.loader import (
    load_documents,
    read_policy_file,
    validate_documents_data,
)
from shaper.policy.store import StrategyStore, export_json
from shaper.policy.types import PolicyDocument
from shaper.policy.view_models import StrategyListItem

logger = logging.getLogger(__name__)

_file_argument = click.argument(
    "policy_file", type=click.Path(exists=False, dir_okay=False, path_type=Path)
)


def _load_or_exit(policy_file: Path, json_output: bool) -> list[PolicyDocument]:
    try:
        return load_documents(policy_file)
    except FileNotFoundError as e:
        error_exit(str(e), ExitCode.TARGET_NOT_FOUND, json_output)
    except PolicyValidationError as e:
        error_exit(
            e.message, ExitCode.POLICY_VALIDATION_ERROR, json_output, field=e.field
        )


def _write_output(text: str, output: Path | None) -> None:
    if output is None:
        click.echo(text)
        return
    output.write_text(text + "\n", encoding="utf-8")
    click.echo(f"Wrote {output}", err=True)


@click.group("policy")
def policy_group() -> None:
    """Work with strategy policy files.

    Policy files hold one document or a list of documents, as JSON or
    YAML.

    Examples:

        # Validate a policy file
        shaper policy validate strategies.json

        # Export the sample strategies
        shaper policy examples -o strategies.json
    """
    pass


# =============================================================================
# Validate Command
# =============================================================================


@policy_group.command("validate")
@_file_argument
@format_option
def validate_policy_cmd(policy_file: Path, output_format: str) -> None:
    """Validate a policy file.

    Reports every problem found, with the path of the offending field.

    Exit codes:
        0: Policy is valid
        10: Policy validation failed
        20: File not found
    """
    json_output = output_format == "json"

    try:
        data = read_policy_file(policy_file)
    except FileNotFoundError as e:
        error_exit(str(e), ExitCode.TARGET_NOT_FOUND, json_output)
    except PolicyValidationError as e:
        error_exit(
            e.message, ExitCode.POLICY_VALIDATION_ERROR, json_output, field=e.field
        )

    result = validate_documents_data(data)

    if json_output:
        echo_json({"file": str(policy_file), **result.to_dict()})
    elif result.valid:
        click.echo(
            click.style("Valid", fg="green")
            + f": {policy_file} ({len(result.documents)} strategies)"
        )
    else:
        click.echo(click.style("Invalid", fg="red") + f": {policy_file}")
        for issue in result.errors:
            click.echo(f"  {issue.field}: {issue.message}")

    if not result.valid:
        raise SystemExit(ExitCode.POLICY_VALIDATION_ERROR)


# =============================================================================
# Show Command
# =============================================================================


@policy_group.command("show")
@_file_argument
@format_option
def show_policy_cmd(policy_file: Path, output_format: str) -> None:
    """Summarise the strategies in a policy file."""
    json_output = output_format == "json"
    items = [
        StrategyListItem.from_document(d)
        for d in _load_or_exit(policy_file, json_output)
    ]

    if json_output:
        echo_json({"strategies": [item.to_dict() for item in items]})
        return

    if not items:
        click.echo("No strategies found.")
        return

    for item in items:
        click.echo(f"\n{item.strategy_id} [{item.strategy_label}]")
        click.echo(f"  {item.desc}")
        click.echo(f"  Global limit:   {item.limit_global_display}")
        vip = f"{item.vip_speed_global} KB/s" if item.vip_speed_global else "-"
        click.echo(f"  Global VIP:     {vip}")
        chips = [*item.condition_previews]
        if item.condition_overflow:
            chips.append(item.condition_overflow)
        click.echo(f"  Conditions:     {' | '.join(chips) if chips else '-'}")
        if item.has_expiry:
            click.echo("  Expires:        yes")


# =============================================================================
# Decode / Encode Commands
# =============================================================================


@policy_group.command("decode")
@_file_argument
@format_option
@click.pass_context
def decode_policy_cmd(ctx: click.Context, policy_file: Path, output_format: str) -> None:
    """Decode policy documents into editable form snapshots.

    JSON output can be edited and fed back to 'shaper policy encode'.
    """
    json_output = output_format == "json"
    forms = [decode_document(d) for d in _load_or_exit(policy_file, json_output)]

    if json_output:
        echo_json([form_to_dict(f) for f in forms])
        return

    directory = build_directory(load_cli_config(ctx))
    for form in forms:
        click.echo(f"\n{form.id}: {form.desc}")
        click.echo(f"  Type:      {form.strategy_type}")
        click.echo(f"  Duration:  {form.duration or '-'}")
        for condition in form.conditions:
            click.echo(f"  - {describe_condition(condition, directory)}")


def _forms_from_data(data: Any) -> list[StrategyForm]:
    if isinstance(data, dict):
        return [form_from_dict(data)]
    if not isinstance(data, list):
        raise PolicyValidationError("Form file must hold a form or a list of forms")
    forms = []
    for idx, snapshot in enumerate(data):
        try:
            forms.append(form_from_dict(snapshot))
        except PolicyValidationError as e:
            field = f"[{idx}].{e.field}" if e.field else f"[{idx}]"
            raise PolicyValidationError(f"Form [{idx}]: {e.message}", field=field) from e
    return forms


@policy_group.command("encode")
@click.argument(
    "form_file", type=click.Path(exists=False, dir_okay=False, path_type=Path)
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write documents to this file instead of stdout.",
)
@click.pass_context
def encode_policy_cmd(ctx: click.Context, form_file: Path, output: Path | None) -> None:
    """Encode form snapshots into canonical policy documents.

    Numeric text that is blank or invalid is replaced by its fallback
    (-1 for limits, 0 for speeds) and reported as a warning.

    Exit codes:
        0: Documents written
        10: The file is not a form or a list of forms
        12: A form has an empty description
        20: File not found
    """
    try:
        forms = _forms_from_data(read_policy_file(form_file))
    except FileNotFoundError as e:
        error_exit(str(e), ExitCode.TARGET_NOT_FOUND)
    except PolicyValidationError as e:
        error_exit(e.message, ExitCode.POLICY_VALIDATION_ERROR, field=e.field)

    config = load_cli_config(ctx)
    editor = StrategyEditor(
        StrategyStore(),
        build_directory(config),
        default_strategy_type=config.editor.default_strategy_type,
        default_condition_field=config.editor.default_condition_field,
    )
    for form in forms:
        try:
            editor.save(form)
        except FormValidationError as e:
            error_exit(f"{form.id}: {e}", ExitCode.FORM_VALIDATION_ERROR)

    _write_output(export_json(editor.store.list()), output)


# =============================================================================
# Examples / Delete Commands
# =============================================================================


@policy_group.command("examples")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write documents to this file instead of stdout.",
)
def examples_policy_cmd(output: Path | None) -> None:
    """Export the sample strategies as a JSON policy file."""
    store = StrategyStore()
    store.replace_all(example_documents())
    _write_output(export_json(store.list()), output)


@policy_group.command("delete")
@_file_argument
@click.argument("strategy_id")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@format_option
@click.pass_context
def delete_policy_cmd(
    ctx: click.Context,
    policy_file: Path,
    strategy_id: str,
    yes: bool,
    output_format: str,
) -> None:
    """Remove a strategy from a policy file.

    The file is rewritten as JSON holding the remaining strategies.
    """
    json_output = output_format == "json"
    store = StrategyStore(_load_or_exit(policy_file, json_output))
    if strategy_id not in store:
        error_exit(
            f"Strategy not found: {strategy_id}",
            ExitCode.STRATEGY_NOT_FOUND,
            json_output,
        )

    config = load_cli_config(ctx, json_output)
    editor = StrategyEditor(store, build_directory(config, json_output))

    def confirm(sid: str) -> bool:
        return yes or click.confirm(f"Delete strategy '{sid}'?", default=False)

    if not editor.delete(strategy_id, confirm):
        warning_output("Deletion cancelled", json_output)
        return

    policy_file.write_text(export_json(store.list()) + "\n", encoding="utf-8")
    success_output(
        f"Deleted {strategy_id} ({len(store)} remaining)",
        json_output,
        strategy_id=strategy_id,
        remaining=len(store),
    )
