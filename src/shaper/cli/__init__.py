"""CLI module for shaper."""

import logging
from pathlib import Path

import click

_logging_configured: bool = False

logger = logging.getLogger(__name__)


def _configure_logging(
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Configure logging from CLI options once per process.

    Args:
        config_path: Config file to read logging settings from.
        log_level: Override log level (debug, info, warning, error).
        log_file: Override log file path.
        log_json: Use JSON log format.
    """
    global _logging_configured
    if _logging_configured:
        return

    from shaper.cli.exit_codes import ExitCode
    from shaper.cli.output import error_exit
    from shaper.config import ConfigError, get_config
    from shaper.logging import configure_logging

    try:
        config = get_config(
            config_path=config_path,
            log_level=log_level,
            log_file=log_file,
            log_format="json" if log_json else None,
        )
    except (ConfigError, ValueError) as e:
        error_exit(f"Invalid logging configuration: {e}", ExitCode.CONFIG_ERROR)
    configure_logging(config.logging)
    _logging_configured = True
    logger.debug(
        "Logging configured",
        extra={"level": config.logging.level, "format": config.logging.format},
    )


@click.group()
@click.version_option(package_name="shaper-policy")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Config file (default: ~/.shaper/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Shaper - Author traffic-shaping strategies."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path

    _configure_logging(config_path, log_level, log_file, log_json)


# Defer import to avoid circular dependency
def _register_commands():
    from shaper.cli.catalog import catalog_group
    from shaper.cli.metadata import metadata_group
    from shaper.cli.policy import policy_group

    main.add_command(catalog_group)
    main.add_command(metadata_group)
    main.add_command(policy_group)


_register_commands()
