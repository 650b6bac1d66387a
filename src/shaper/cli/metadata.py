"""CLI commands for browsing metadata entries."""

import click

from shaper.cli._context import build_directory, load_cli_config
from shaper.cli.output import echo_json, format_option
from shaper.metadata import MetadataCategory

CATEGORY_CHOICES = [c.value for c in MetadataCategory]


@click.group("metadata")
def metadata_group() -> None:
    """Browse the metadata tokens used by category fields."""
    pass


@metadata_group.command("list")
@click.option(
    "--category",
    type=click.Choice(CATEGORY_CHOICES, case_sensitive=False),
    default=None,
    help="Only show one category.",
)
@click.option("--search", default=None, help="Filter by label or value substring.")
@format_option
@click.pass_context
def list_metadata_cmd(
    ctx: click.Context,
    category: str | None,
    search: str | None,
    output_format: str,
) -> None:
    """List metadata entries, including those from the config file.

    Examples:

        shaper metadata list --category user

        shaper metadata list --search member --format json
    """
    json_output = output_format == "json"
    config = load_cli_config(ctx, json_output)
    directory = build_directory(config, json_output)

    categories = (
        [MetadataCategory(category.lower())] if category else list(MetadataCategory)
    )
    entries = []
    for cat in categories:
        if search:
            entries.extend(directory.search(cat, search))
        else:
            entries.extend(directory.for_category(cat))

    if json_output:
        echo_json({"entries": [e.to_dict() for e in entries]})
        return

    if not entries:
        click.echo("No metadata entries found.")
        return

    click.echo(f"{'CATEGORY':<16} {'VALUE':<16} LABEL")
    click.echo("-" * 60)
    for entry in entries:
        click.echo(f"{entry.category.label:<16} {entry.value:<16} {entry.label}")
    click.echo()
    click.echo(f"{len(entries)} entr{'y' if len(entries) == 1 else 'ies'}")
