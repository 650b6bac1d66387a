"""Centralized exit codes for all CLI commands.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Validation errors (policy, form, config)
    20-29: Target/file errors
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for shaper CLI commands."""

    # Success (0)
    SUCCESS = 0

    # General errors (1-9)
    GENERAL_ERROR = 1
    INTERRUPTED = 2

    # Validation errors (10-19)
    POLICY_VALIDATION_ERROR = 10
    CONFIG_ERROR = 11
    FORM_VALIDATION_ERROR = 12

    # Target/file errors (20-29)
    TARGET_NOT_FOUND = 20
    STRATEGY_NOT_FOUND = 21
