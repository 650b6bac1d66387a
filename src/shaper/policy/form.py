"""Editable form representation of a strategy.

Every numeric leaf of the speed parameters is held as text so that
in-progress, invalid or cleared input survives until the form is encoded.
Speed leaves are addressed through :class:`SpeedLeaf` rather than through
dotted path strings, which keeps the nested structure statically typed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from shaper.core.ids import generate_id
from shaper.core.numbers import numberify, parse_number
from shaper.policy.catalog import (
    DEFAULT_CONDITION_FIELD,
    DEFAULT_STRATEGY_TYPE,
    is_operator_allowed,
)
from shaper.policy.conditions import (
    MatchCondition,
    new_condition,
    with_field,
    with_operator,
    with_value,
)
from shaper.policy.exceptions import PolicyValidationError

logger = logging.getLogger(__name__)

# Canonical meaning of a limit leaf when it is unset: no ceiling.
LIMIT_FALLBACK = -1
SPEED_FALLBACK = 0
EXPIRE_FALLBACK = 0


@dataclass(frozen=True)
class SpeedTierForm:
    """Base / VIP / target speed inputs for one scope."""

    bs: str = ""
    vs: str = ""
    ts: str = ""


@dataclass(frozen=True)
class LimitForm:
    """Ceiling inputs for the global and per-task scopes."""

    global_: str = ""
    task: str = ""


@dataclass(frozen=True)
class SpeedForm:
    """Acceleration inputs for the global and per-task scopes."""

    global_: SpeedTierForm = field(default_factory=SpeedTierForm)
    task: SpeedTierForm = field(default_factory=SpeedTierForm)


@dataclass(frozen=True)
class SpeedInfoForm:
    """All speed parameter inputs of a strategy."""

    limit: LimitForm = field(default_factory=LimitForm)
    speed: SpeedForm = field(default_factory=SpeedForm)


class SpeedLeaf(Enum):
    """The eight numeric leaves of the speed parameters.

    Each member's value is its wire path below ``speed_info``.
    """

    LIMIT_GLOBAL = ("limit", "global")
    LIMIT_TASK = ("limit", "task")
    SPEED_GLOBAL_BS = ("speed", "global", "bs")
    SPEED_GLOBAL_VS = ("speed", "global", "vs")
    SPEED_GLOBAL_TS = ("speed", "global", "ts")
    SPEED_TASK_BS = ("speed", "task", "bs")
    SPEED_TASK_VS = ("speed", "task", "vs")
    SPEED_TASK_TS = ("speed", "task", "ts")

    @property
    def path(self) -> str:
        """Dotted wire path, for messages (e.g. ``limit.global``)."""
        return ".".join(self.value)

    @property
    def fallback(self) -> int:
        """Canonical value substituted when the leaf's text is unusable."""
        if self.value[0] == "limit":
            return LIMIT_FALLBACK
        return SPEED_FALLBACK


def _scope_attr(scope: str) -> str:
    return "global_" if scope == "global" else scope


def get_leaf(info: SpeedInfoForm, leaf: SpeedLeaf) -> str:
    """Read one leaf of the speed parameters."""
    section, scope, *rest = leaf.value
    if section == "limit":
        return getattr(info.limit, _scope_attr(scope))
    tier: SpeedTierForm = getattr(info.speed, _scope_attr(scope))
    return getattr(tier, rest[0])


def with_leaf(info: SpeedInfoForm, leaf: SpeedLeaf, value: str) -> SpeedInfoForm:
    """Return a copy of the speed parameters with one leaf replaced."""
    section, scope, *rest = leaf.value
    attr = _scope_attr(scope)
    if section == "limit":
        return replace(info, limit=replace(info.limit, **{attr: value}))
    tier = replace(getattr(info.speed, attr), **{rest[0]: value})
    return replace(info, speed=replace(info.speed, **{attr: tier}))


@dataclass
class FormIssue:
    """A single advisory problem found in a strategy form.

    Attributes:
        field: Form field the issue refers to (e.g., 'desc', 'limit.task').
        message: Human-readable description.
        blocking: True if the form must not be saved while this holds.
    """

    field: str
    message: str
    blocking: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"field": self.field, "message": self.message, "blocking": self.blocking}


@dataclass
class StrategyForm:
    """Editable, all-strings mirror of one policy document.

    Attributes:
        id: Strategy identifier; becomes ``strategy_id`` on encode.
        desc: Human description (required to save).
        strategy_type: Strategy kind (e.g., 'speed_limit').
        speed_info: Speed parameter inputs.
        duration: Expiry in seconds as text; empty means no expiry.
        conditions: Ordered match conditions, all of which must hold.
    """

    id: str
    desc: str = ""
    strategy_type: str = DEFAULT_STRATEGY_TYPE
    speed_info: SpeedInfoForm = field(default_factory=SpeedInfoForm)
    duration: str = ""
    conditions: list[MatchCondition] = field(default_factory=list)

    # -- basic fields ------------------------------------------------------

    def set_description(self, desc: str) -> None:
        self.desc = desc

    def set_strategy_type(self, strategy_type: str) -> None:
        self.strategy_type = strategy_type

    def set_duration(self, duration: str) -> None:
        self.duration = duration

    def set_speed(self, leaf: SpeedLeaf, value: str) -> None:
        """Replace one speed parameter leaf."""
        self.speed_info = with_leaf(self.speed_info, leaf, value)

    def speed(self, leaf: SpeedLeaf) -> str:
        """Read one speed parameter leaf."""
        return get_leaf(self.speed_info, leaf)

    # -- conditions --------------------------------------------------------

    def add_condition(self, field: str = DEFAULT_CONDITION_FIELD) -> MatchCondition:
        """Append a fresh condition for ``field`` and return it."""
        condition = new_condition(field)
        self.conditions.append(condition)
        return condition

    def find_condition(self, condition_id: str) -> MatchCondition | None:
        for condition in self.conditions:
            if condition.id == condition_id:
                return condition
        return None

    def remove_condition(self, condition_id: str) -> bool:
        """Remove a condition by id; False when the id is unknown."""
        remaining = [c for c in self.conditions if c.id != condition_id]
        removed = len(remaining) != len(self.conditions)
        self.conditions = remaining
        return removed

    def update_condition_field(self, condition_id: str, field: str) -> bool:
        """Reassign a condition's field, resetting operator and value."""
        return self._update(condition_id, lambda c: with_field(c, field))

    def update_condition_operator(self, condition_id: str, operator: str) -> bool:
        return self._update(condition_id, lambda c: with_operator(c, operator))

    def update_condition_value(self, condition_id: str, value: str) -> bool:
        return self._update(condition_id, lambda c: with_value(c, value))

    def move_condition(self, condition_id: str, offset: int) -> bool:
        """Shift a condition up (negative) or down (positive) in the list.

        The target position is clamped to the list bounds.

        Returns:
            True if the condition exists, whether or not it moved.
        """
        for idx, condition in enumerate(self.conditions):
            if condition.id == condition_id:
                target = max(0, min(len(self.conditions) - 1, idx + offset))
                self.conditions.insert(target, self.conditions.pop(idx))
                return True
        return False

    def _update(
        self,
        condition_id: str,
        change: Callable[[MatchCondition], MatchCondition],
    ) -> bool:
        for idx, condition in enumerate(self.conditions):
            if condition.id == condition_id:
                self.conditions[idx] = change(condition)
                return True
        logger.debug("Ignoring update for unknown condition %s", condition_id)
        return False


def new_strategy_form(strategy_type: str = DEFAULT_STRATEGY_TYPE) -> StrategyForm:
    """Create an empty form for a brand new strategy with a fresh id."""
    return StrategyForm(id=generate_id(), strategy_type=strategy_type)


def validate_form(form: StrategyForm) -> list[FormIssue]:
    """Collect advisory issues in a form.

    Only a blank description blocks saving. The other issues describe
    input the encoder will replace with fallbacks or pass through as-is.

    Args:
        form: Form to inspect.

    Returns:
        Issues in form order; empty when the form is clean.
    """
    issues: list[FormIssue] = []

    if not form.desc.strip():
        issues.append(FormIssue("desc", "Description is required", blocking=True))

    if form.duration.strip():
        if parse_number(form.duration) is None:
            issues.append(
                FormIssue("duration", f"Not a number, {EXPIRE_FALLBACK} will be used")
            )
        elif numberify(form.duration, EXPIRE_FALLBACK) < 0:
            issues.append(FormIssue("duration", "Duration cannot be negative"))

    for leaf in SpeedLeaf:
        text = form.speed(leaf)
        if not text.strip():
            continue
        if parse_number(text) is None:
            issues.append(
                FormIssue(leaf.path, f"Not a number, {leaf.fallback} will be used")
            )
            continue
        number = numberify(text, leaf.fallback)
        if leaf.fallback == LIMIT_FALLBACK and number < 0 and number != LIMIT_FALLBACK:
            issues.append(
                FormIssue(leaf.path, "Limits must be -1 (unlimited), 0 or positive")
            )
        elif leaf.fallback == SPEED_FALLBACK and number < 0:
            issues.append(FormIssue(leaf.path, "Speeds cannot be negative"))

    for idx, condition in enumerate(form.conditions):
        if not is_operator_allowed(condition.field, condition.operator):
            issues.append(
                FormIssue(
                    f"conditions[{idx}].operator",
                    f"Operator '{condition.operator}' is not valid "
                    f"for field '{condition.field}'",
                )
            )

    return issues


# =============================================================================
# Plain-dict snapshots
# =============================================================================


def _speed_info_to_dict(info: SpeedInfoForm) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for leaf in SpeedLeaf:
        node = result
        *parents, last = leaf.value
        for key in parents:
            node = node.setdefault(key, {})
        node[last] = get_leaf(info, leaf)
    return result


def _speed_info_from_dict(data: Any) -> SpeedInfoForm:
    info = SpeedInfoForm()
    for leaf in SpeedLeaf:
        node = data
        for key in leaf.value:
            node = node.get(key) if isinstance(node, dict) else None
        if node is not None:
            info = with_leaf(info, leaf, str(node))
    return info


def form_to_dict(form: StrategyForm) -> dict[str, Any]:
    """Snapshot a form as a plain dict (string leaves, wire-style keys)."""
    return {
        "id": form.id,
        "desc": form.desc,
        "strategyType": form.strategy_type,
        "speedInfo": _speed_info_to_dict(form.speed_info),
        "duration": form.duration,
        "conditions": [
            {
                "id": c.id,
                "field": c.field,
                "operator": c.operator,
                "value": c.value,
            }
            for c in form.conditions
        ],
    }


def _text(data: dict[str, Any], key: str, default: str = "") -> str:
    # JSON null reads as the default, never as the text "None"
    value = data.get(key)
    return default if value is None else str(value)


def _condition_from_dict(data: Any, idx: int) -> MatchCondition:
    if not isinstance(data, dict):
        raise PolicyValidationError(
            f"conditions[{idx}] must be an object, got {type(data).__name__}",
            field=f"conditions[{idx}]",
        )
    return MatchCondition(
        id=_text(data, "id") or generate_id(),
        field=_text(data, "field", DEFAULT_CONDITION_FIELD),
        operator=_text(data, "operator"),
        value=_text(data, "value"),
    )


def form_from_dict(data: Any) -> StrategyForm:
    """Rebuild a form from a snapshot made by :func:`form_to_dict`.

    Missing or null keys take their empty defaults; a missing id or
    condition id is generated.

    Raises:
        PolicyValidationError: If the snapshot or one of its conditions is
            not an object, or ``conditions`` is not a list.
    """
    if not isinstance(data, dict):
        raise PolicyValidationError("Form snapshot must be an object")
    raw_conditions = data.get("conditions") or []
    if not isinstance(raw_conditions, list):
        raise PolicyValidationError("conditions must be a list", field="conditions")
    return StrategyForm(
        id=_text(data, "id") or generate_id(),
        desc=_text(data, "desc"),
        strategy_type=_text(data, "strategyType", DEFAULT_STRATEGY_TYPE),
        speed_info=_speed_info_from_dict(data.get("speedInfo") or {}),
        duration=_text(data, "duration"),
        conditions=[
            _condition_from_dict(c, idx) for idx, c in enumerate(raw_conditions)
        ],
    )
