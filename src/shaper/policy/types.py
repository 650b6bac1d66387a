"""Canonical policy document types.

These frozen dataclasses model the JSON document consumed by the
traffic-control engine. ``to_dict()`` produces the exact wire shape.

Numeric leaves are ``int | float | None``. ``None`` marks a leaf that was
absent from a document loaded from outside; documents produced by the
encoder always carry numbers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from shaper.core.numbers import Number


@dataclass(frozen=True)
class Limit:
    """Throughput ceilings: -1 unlimited, 0 block, positive KB/s."""

    global_: Number | None = None
    task: Number | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"global": self.global_, "task": self.task}


@dataclass(frozen=True)
class SpeedTier:
    """Base, VIP and target speeds in KB/s for one scope."""

    bs: Number | None = None
    vs: Number | None = None
    ts: Number | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"bs": self.bs, "vs": self.vs, "ts": self.ts}


@dataclass(frozen=True)
class Speed:
    """Acceleration targets for the global and per-task scopes."""

    global_: SpeedTier = field(default_factory=SpeedTier)
    task: SpeedTier = field(default_factory=SpeedTier)

    def to_dict(self) -> dict[str, Any]:
        return {"global": self.global_.to_dict(), "task": self.task.to_dict()}


@dataclass(frozen=True)
class SpeedSpec:
    """Speed parameters of a strategy action.

    ``expire`` is optional: the key is only written when it is set.
    """

    limit: Limit = field(default_factory=Limit)
    speed: Speed = field(default_factory=Speed)
    expire: Number | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "limit": self.limit.to_dict(),
            "speed": self.speed.to_dict(),
        }
        if self.expire is not None:
            result["expire"] = self.expire
        return result


@dataclass(frozen=True)
class ResponseOnMatch:
    """Action applied when every match clause holds."""

    strategy: str
    strategy_id: str
    speed_info: SpeedSpec = field(default_factory=SpeedSpec)

    def to_dict(self) -> dict[str, Any]:
        return {
            "strategy": self.strategy,
            "strategy_id": self.strategy_id,
            "speed_info": self.speed_info.to_dict(),
        }


@dataclass(frozen=True)
class MatchClause:
    """One ``(field, operator, value)`` predicate of ``matchAll``."""

    field: str
    operator: str
    value: str

    def to_dict(self) -> dict[str, Any]:
        return {"match": [self.field, self.operator, self.value]}


@dataclass(frozen=True)
class PolicyDocument:
    """One traffic-shaping strategy in canonical form.

    Attributes:
        desc: Human description.
        response_on_match: Strategy kind, id and speed parameters.
        match_all: Conjunctive match clauses; may be empty.
    """

    desc: str
    response_on_match: ResponseOnMatch
    match_all: tuple[MatchClause, ...] = ()

    @property
    def strategy_id(self) -> str:
        """Store key of the document."""
        return self.response_on_match.strategy_id

    @property
    def strategy(self) -> str:
        return self.response_on_match.strategy

    @property
    def speed_info(self) -> SpeedSpec:
        return self.response_on_match.speed_info

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire dictionary for JSON serialization."""
        return {
            "filter": {
                "desc": self.desc,
                "responseOnMatch": self.response_on_match.to_dict(),
                "matchAll": [clause.to_dict() for clause in self.match_all],
            }
        }
