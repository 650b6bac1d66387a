"""Custom exceptions for strategy policy operations.

The codec itself never raises: malformed numeric text falls back to
documented defaults. These exceptions cover the boundaries around it,
such as loading documents from outside and saving from the editor.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shaper.policy.form import FormIssue


class PolicyError(Exception):
    """Base class for policy-related errors."""

    pass


class PolicyValidationError(PolicyError):
    """Error during policy document validation."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)


class FormValidationError(PolicyError):
    """Raised when a strategy form cannot be saved.

    Carries the blocking issues so callers can point the operator at the
    offending inputs.
    """

    def __init__(self, issues: list[FormIssue]) -> None:
        self.issues = issues
        summary = "; ".join(f"{issue.field}: {issue.message}" for issue in issues)
        super().__init__(f"Strategy form is not valid: {summary}")


class StrategyNotFoundError(PolicyError):
    """Raised when a strategy id is not present in the store."""

    def __init__(self, strategy_id: str) -> None:
        self.strategy_id = strategy_id
        super().__init__(f"Strategy not found: {strategy_id}")
