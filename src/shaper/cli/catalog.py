"""CLI commands describing the match field and strategy type catalog."""

import click

from shaper.cli.output import echo_json, format_option
from shaper.policy.catalog import (
    DEFAULT_CONDITION_FIELD,
    DEFAULT_STRATEGY_TYPE,
    MATCH_FIELDS,
    STRATEGY_TYPES,
    BoundedCategory,
    Temporal,
    default_operator,
    operators_for_field,
)


def _kind_name(kind) -> str:
    if isinstance(kind, BoundedCategory):
        return f"category:{kind.category.value}"
    if isinstance(kind, Temporal):
        return "temporal"
    return "free_text"


@click.group("catalog")
def catalog_group() -> None:
    """Show the match fields, operators and strategy types."""
    pass


@catalog_group.command("fields")
@format_option
def fields_cmd(output_format: str) -> None:
    """List match fields with their legal operators.

    Examples:

        shaper catalog fields

        shaper catalog fields --format json
    """
    rows = [
        {
            "field": f.value,
            "label": f.label,
            "kind": _kind_name(f.kind),
            "operators": list(operators_for_field(f.value)),
            "default_operator": default_operator(f.value),
            "default": f.value == DEFAULT_CONDITION_FIELD,
        }
        for f in MATCH_FIELDS
    ]

    if output_format == "json":
        echo_json({"fields": rows})
        return

    click.echo(f"{'FIELD':<18} {'LABEL':<14} {'KIND':<20} OPERATORS")
    click.echo("-" * 72)
    for row in rows:
        operators = ", ".join(
            f"[{op}]" if op == row["default_operator"] else op
            for op in row["operators"]
        )
        marker = "*" if row["default"] else " "
        click.echo(
            f"{row['field']:<17}{marker} {row['label']:<14} {row['kind']:<20} {operators}"
        )
    click.echo()
    click.echo("* default field for new conditions, [op] default operator")


@catalog_group.command("strategies")
@format_option
def strategies_cmd(output_format: str) -> None:
    """List strategy types."""
    rows = [
        {"type": key, "label": label, "default": key == DEFAULT_STRATEGY_TYPE}
        for key, label in STRATEGY_TYPES.items()
    ]

    if output_format == "json":
        echo_json({"strategy_types": rows})
        return

    for row in rows:
        marker = " (default)" if row["default"] else ""
        click.echo(f"{row['type']:<20} {row['label']}{marker}")
