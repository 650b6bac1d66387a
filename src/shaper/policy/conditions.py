"""Match condition model and value-widget resolution.

A condition is one ``(field, operator, value)`` predicate plus a UI-local
id. This module holds the state transitions for editing a condition and
the pure mapping from ``(field, operator)`` to the value editor that
applies.

Key Functions:
    new_condition: Create a condition with the field's default operator
    with_field: Reassign the field (resets operator, clears value)
    resolve_widget: Pick the value widget for a field/operator pair
    toggle_token: Multi-select toggle on a comma-joined value
    split_time_range: Split a "<start>-<end>" value into its two sides

Usage:
    from shaper.policy.conditions import new_condition, resolve_widget

    cond = new_condition("tags.offline")
    widget = resolve_widget(cond.field, cond.operator)
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from shaper.core.ids import generate_id
from shaper.metadata.models import MetadataCategory
from shaper.policy.catalog import (
    DEFAULT_CONDITION_FIELD,
    OP_BETWEEN,
    OP_IN,
    BoundedCategory,
    Temporal,
    default_operator,
    field_kind,
    field_label,
)

if TYPE_CHECKING:
    from shaper.metadata.directory import MetadataDirectory

TOKEN_SEPARATOR = ","
RANGE_SEPARATOR = "-"


@dataclass(frozen=True)
class MatchCondition:
    """One editable match condition.

    The id only identifies the row while editing. It is not part of the
    canonical document and is regenerated on every decode.
    """

    id: str
    field: str
    operator: str
    value: str = ""


def new_condition(field: str = DEFAULT_CONDITION_FIELD) -> MatchCondition:
    """Create a condition for a field with its default operator and no value."""
    return MatchCondition(
        id=generate_id(),
        field=field,
        operator=default_operator(field),
        value="",
    )


def with_field(condition: MatchCondition, field: str) -> MatchCondition:
    """Reassign a condition's field.

    The operator is reset to the new field's default and the value is
    cleared, whatever they were before: a value chosen for one field kind
    cannot be reinterpreted for another.
    """
    return replace(condition, field=field, operator=default_operator(field), value="")


def with_operator(condition: MatchCondition, operator: str) -> MatchCondition:
    """Change only the operator."""
    return replace(condition, operator=operator)


def with_value(condition: MatchCondition, value: str) -> MatchCondition:
    """Change only the value."""
    return replace(condition, value=value)


# =============================================================================
# Value widgets
# =============================================================================


@dataclass(frozen=True)
class MultiSelect:
    """Pick any number of tokens from a category; value is comma-joined."""

    category: MetadataCategory


@dataclass(frozen=True)
class SingleSelect:
    """Pick exactly one token from a category, or none."""

    category: MetadataCategory


@dataclass(frozen=True)
class TimeRange:
    """Two time-of-day inputs encoded as ``"<start>-<end>"``."""


@dataclass(frozen=True)
class TimeOfDay:
    """A single time-of-day input."""


@dataclass(frozen=True)
class FreeTextInput:
    """Plain text input."""


ValueWidget = MultiSelect | SingleSelect | TimeRange | TimeOfDay | FreeTextInput


def resolve_widget(field: str, operator: str) -> ValueWidget:
    """Select the value widget for a field/operator pair.

    Depends on nothing but its arguments.

    Args:
        field: Match field identifier.
        operator: Operator currently chosen for the field.

    Returns:
        The widget variant the value editor must present.
    """
    kind = field_kind(field)
    if isinstance(kind, BoundedCategory):
        if operator == OP_IN:
            return MultiSelect(kind.category)
        return SingleSelect(kind.category)
    if isinstance(kind, Temporal):
        if operator == OP_BETWEEN:
            return TimeRange()
        return TimeOfDay()
    return FreeTextInput()


def widget_options(
    widget: ValueWidget, directory: MetadataDirectory
) -> list[tuple[str, str]]:
    """Return ``(value, label)`` options for select widgets.

    Non-select widgets have no options and get an empty list.
    """
    if isinstance(widget, MultiSelect | SingleSelect):
        return directory.options(widget.category)
    return []


# =============================================================================
# Multi-select values
# =============================================================================


def selected_tokens(value: str) -> list[str]:
    """Split a comma-joined value into tokens, dropping blanks."""
    if not value:
        return []
    return [token for token in value.split(TOKEN_SEPARATOR) if token]


def toggle_token(value: str, token: str) -> str:
    """Select or deselect a token in a comma-joined value.

    A token already present is removed; otherwise it is appended. The
    remaining tokens keep their selection order, so toggling the same token
    twice gives back the original value.
    """
    tokens = selected_tokens(value)
    if token in tokens:
        tokens = [t for t in tokens if t != token]
    else:
        tokens.append(token)
    return TOKEN_SEPARATOR.join(tokens)


# =============================================================================
# Time range values
# =============================================================================


def split_time_range(value: str) -> tuple[str, str]:
    """Split ``"<start>-<end>"`` into its sides.

    A value with no separator yields two blank sides.
    """
    if RANGE_SEPARATOR not in value:
        return "", ""
    parts = value.split(RANGE_SEPARATOR)
    return parts[0], parts[1]


def join_time_range(start: str, end: str) -> str:
    """Encode two sides as ``"<start>-<end>"``; either side may be blank."""
    return f"{start}{RANGE_SEPARATOR}{end}"


def set_range_start(value: str, start: str) -> str:
    """Replace the start of a range value, keeping the end verbatim."""
    _, end = split_time_range(value)
    return join_time_range(start, end)


def set_range_end(value: str, end: str) -> str:
    """Replace the end of a range value, keeping the start verbatim."""
    start, _ = split_time_range(value)
    return join_time_range(start, end)


def describe_condition(
    condition: MatchCondition, directory: MetadataDirectory | None = None
) -> str:
    """Render a condition as short human-readable text.

    Category tokens are shown with their metadata labels when a directory is
    supplied.

    Example:
        >>> describe_condition(MatchCondition("x", "user.type", "in", "3"))
        'User Type in 3'
    """
    value = condition.value
    kind = field_kind(condition.field)
    if directory is not None and isinstance(kind, BoundedCategory):
        labels = [
            directory.label_for(kind.category, token)
            for token in selected_tokens(value)
        ]
        value = ", ".join(labels)
    return f"{field_label(condition.field)} {condition.operator} {value or '(empty)'}"
