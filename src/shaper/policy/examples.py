"""Sample strategies used to seed an empty collection."""

from __future__ import annotations

from shaper.policy.types import (
    Limit,
    MatchClause,
    PolicyDocument,
    ResponseOnMatch,
    Speed,
    SpeedSpec,
    SpeedTier,
)


def example_documents() -> list[PolicyDocument]:
    """Return the two sample strategies.

    ``example_1`` boosts platinum members during the evening peak for an
    hour; ``example_2`` caps users tagged for high bandwidth usage.
    """
    return [
        PolicyDocument(
            desc="白金会员晚高峰下载保障策略",
            response_on_match=ResponseOnMatch(
                strategy="spike_fill_valley",
                strategy_id="example_1",
                speed_info=SpeedSpec(
                    limit=Limit(global_=-1, task=-1),
                    speed=Speed(
                        global_=SpeedTier(bs=4096, vs=10240, ts=51200),
                        task=SpeedTier(bs=2048, vs=5120, ts=25600),
                    ),
                    expire=3600,
                ),
            ),
            match_all=(
                MatchClause("user.type", "in", "3"),
                MatchClause("effective.period", "between", "18:00-23:00"),
            ),
        ),
        PolicyDocument(
            desc="高带宽风险用户限速",
            response_on_match=ResponseOnMatch(
                strategy="speed_limit",
                strategy_id="example_2",
                speed_info=SpeedSpec(
                    limit=Limit(global_=512, task=512),
                    speed=Speed(
                        global_=SpeedTier(bs=0, vs=0, ts=0),
                        task=SpeedTier(bs=0, vs=0, ts=0),
                    ),
                ),
            ),
            match_all=(
                MatchClause("user.type", "in", "1"),
                MatchClause("tags.realtime", "==", "high_bw_usage"),
            ),
        ),
    ]
