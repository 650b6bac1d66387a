"""Helpers shared by CLI commands for loading configuration."""

from __future__ import annotations

import click

from shaper.cli.exit_codes import ExitCode
from shaper.cli.output import error_exit
from shaper.config import ConfigError, ShaperConfig, get_config
from shaper.metadata import MetadataDirectory, MetadataError, default_directory


def load_cli_config(ctx: click.Context, json_output: bool = False) -> ShaperConfig:
    """Load configuration for the file passed to ``--config``, if any."""
    config_path = (ctx.obj or {}).get("config_path")
    try:
        return get_config(config_path=config_path)
    except (ConfigError, ValueError) as e:
        error_exit(f"Invalid configuration: {e}", ExitCode.CONFIG_ERROR, json_output)


def build_directory(config: ShaperConfig, json_output: bool = False) -> MetadataDirectory:
    """Default metadata plus the entries configured under [[metadata]]."""
    try:
        return default_directory(config.metadata)
    except MetadataError as e:
        error_exit(f"Invalid metadata configuration: {e}", ExitCode.CONFIG_ERROR, json_output)
