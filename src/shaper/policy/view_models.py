"""Strategy view models for list display and JSON output."""

from __future__ import annotations

from dataclasses import dataclass, field

from shaper.core.numbers import stringify
from shaper.policy.catalog import OP_IN, strategy_type_label
from shaper.policy.types import MatchClause, PolicyDocument

MAX_CONDITION_PREVIEWS = 3
UNLIMITED = -1


def format_condition_preview(clause: MatchClause) -> str:
    """Format a match clause as a compact chip (e.g., "contains 3,4").

    The field is left out; ``in`` reads as "contains".
    """
    operator = "contains" if clause.operator == OP_IN else clause.operator
    return f"{operator} {clause.value}"


def format_limit(value: int | float | None) -> str:
    """Format a limit for display: "N/A" when unlimited, else "<n> KB/s"."""
    if value is None or value == UNLIMITED:
        return "N/A"
    return f"{stringify(value)} KB/s"


@dataclass
class StrategyListItem:
    """Summary of one strategy for list views.

    Attributes:
        strategy_id: Store key.
        strategy: Strategy kind identifier.
        strategy_label: Display label of the kind.
        desc: Description.
        limit_global_display: Global ceiling ("N/A" or "<n> KB/s").
        vip_speed_global: Global VIP speed as text (empty when absent).
        condition_previews: At most three condition chips.
        condition_overflow: "+N" for conditions beyond the previews, else "".
        has_expiry: True if the strategy sets ``expire``.
    """

    strategy_id: str
    strategy: str
    strategy_label: str
    desc: str
    limit_global_display: str
    vip_speed_global: str
    condition_previews: list[str] = field(default_factory=list)
    condition_overflow: str = ""
    has_expiry: bool = False

    @classmethod
    def from_document(cls, document: PolicyDocument) -> StrategyListItem:
        clauses = document.match_all
        hidden = len(clauses) - MAX_CONDITION_PREVIEWS
        wire = document.speed_info
        return cls(
            strategy_id=document.strategy_id,
            strategy=document.strategy,
            strategy_label=strategy_type_label(document.strategy),
            desc=document.desc,
            limit_global_display=format_limit(wire.limit.global_),
            vip_speed_global=stringify(wire.speed.global_.vs),
            condition_previews=[
                format_condition_preview(c) for c in clauses[:MAX_CONDITION_PREVIEWS]
            ],
            condition_overflow=f"+{hidden}" if hidden > 0 else "",
            has_expiry=wire.expire is not None,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "strategy_id": self.strategy_id,
            "strategy": self.strategy,
            "strategy_label": self.strategy_label,
            "desc": self.desc,
            "limit_global_display": self.limit_global_display,
            "vip_speed_global": self.vip_speed_global,
            "condition_previews": self.condition_previews,
            "condition_overflow": self.condition_overflow,
            "has_expiry": self.has_expiry,
        }
