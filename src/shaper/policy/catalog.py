"""Static catalog of match fields, operators and strategy types.

Every match field maps to exactly one field kind. The kind alone decides
which operators are legal, which one is the default, and (in
``shaper.policy.conditions``) which value widget applies, so those three
answers can never drift apart.
"""

from __future__ import annotations

from dataclasses import dataclass

from shaper.metadata.models import MetadataCategory

# =============================================================================
# Field kinds
# =============================================================================


@dataclass(frozen=True)
class BoundedCategory:
    """Field whose values come from one metadata category."""

    category: MetadataCategory


@dataclass(frozen=True)
class Temporal:
    """Field compared against a time of day."""


@dataclass(frozen=True)
class FreeText:
    """Field with no known domain; values are typed by hand."""


FieldKind = BoundedCategory | Temporal | FreeText

# =============================================================================
# Operators
# =============================================================================

OP_IN = "in"
OP_BETWEEN = "between"
OP_EQ = "=="

MATCH_OPERATORS: dict[str, str] = {
    "in": "Contains (IN)",
    "between": "Range (BETWEEN)",
    "==": "Equals (==)",
    "!=": "Not equals (!=)",
    ">=": "Greater or equal (>=)",
    "<=": "Less or equal (<=)",
    ">": "Greater than (>)",
    "<": "Less than (<)",
}

TEMPORAL_OPERATORS: tuple[str, ...] = ("between", "==", ">=", "<=", ">", "<")
SET_OPERATORS: tuple[str, ...] = ("in", "==", "!=")

# =============================================================================
# Fields
# =============================================================================

DEFAULT_CONDITION_FIELD = "user.type"


@dataclass(frozen=True)
class MatchField:
    """A known match field with its display label and kind."""

    value: str
    label: str
    kind: FieldKind


MATCH_FIELDS: tuple[MatchField, ...] = (
    MatchField("user.type", "User Type", BoundedCategory(MetadataCategory.USER)),
    MatchField("effective.period", "Time Period", Temporal()),
    MatchField(
        "tags.realtime", "Realtime Tag", BoundedCategory(MetadataCategory.REALTIME)
    ),
    MatchField(
        "tags.offline", "Offline Tag", BoundedCategory(MetadataCategory.OFFLINE)
    ),
    MatchField("client.type", "Client", BoundedCategory(MetadataCategory.CLIENT)),
)

_FIELDS_BY_VALUE = {f.value: f for f in MATCH_FIELDS}

# =============================================================================
# Strategy types
# =============================================================================

DEFAULT_STRATEGY_TYPE = "speed_limit"

STRATEGY_TYPES: dict[str, str] = {
    "spike_fill_valley": "Spike & Fill",
    "speed_limit": "Speed Limit",
    "trial_acceleration": "Trial Acceleration",
    "base_guarantee": "Base Guarantee",
    "ladder_boost": "Ladder Boost",
}


def field_kind(field: str) -> FieldKind:
    """Return the kind of a match field; unknown fields are free text."""
    known = _FIELDS_BY_VALUE.get(field)
    if known is None:
        return FreeText()
    return known.kind


def operators_for_field(field: str) -> tuple[str, ...]:
    """Return the ordered operators legal for a field."""
    if isinstance(field_kind(field), Temporal):
        return TEMPORAL_OPERATORS
    return SET_OPERATORS


def default_operator(field: str) -> str:
    """Return the operator a condition gets when its field is (re)assigned."""
    kind = field_kind(field)
    if isinstance(kind, Temporal):
        return OP_BETWEEN
    if isinstance(kind, BoundedCategory):
        return OP_IN
    return OP_EQ


def is_operator_allowed(field: str, operator: str) -> bool:
    """Check whether an operator is legal for a field."""
    return operator in operators_for_field(field)


def field_label(field: str) -> str:
    """Display label for a field, or the raw field name when unknown."""
    known = _FIELDS_BY_VALUE.get(field)
    return known.label if known else field


def operator_label(operator: str) -> str:
    """Display label for an operator, or the raw operator when unknown."""
    return MATCH_OPERATORS.get(operator, operator)


def strategy_type_label(strategy_type: str) -> str:
    """Display label for a strategy type, or the raw kind when unknown."""
    return STRATEGY_TYPES.get(strategy_type, strategy_type)
