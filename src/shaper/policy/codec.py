"""Conversion between strategy forms and canonical policy documents.

Both directions are total: encoding substitutes per-leaf fallbacks for
unusable numeric text, and decoding turns absent leaves into empty text.
Neither direction raises.

Key Functions:
    encode_form: StrategyForm -> PolicyDocument
    decode_document: PolicyDocument -> StrategyForm
    encode_form_dict / decode_document_dict: the same over wire dicts

Round trips:
    encode(decode(doc)) == doc for any document whose numeric leaves are
    all present. decode(encode(form)) == form up to numeric normalisation
    ("3.0" -> "3") and freshly generated condition ids.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from shaper.core.ids import generate_id
from shaper.core.numbers import Number, numberify, stringify
from shaper.policy.conditions import MatchCondition
from shaper.policy.form import (
    EXPIRE_FALLBACK,
    LimitForm,
    SpeedForm,
    SpeedInfoForm,
    SpeedLeaf,
    SpeedTierForm,
    StrategyForm,
)
from shaper.policy.types import (
    Limit,
    MatchClause,
    PolicyDocument,
    ResponseOnMatch,
    Speed,
    SpeedSpec,
    SpeedTier,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Encode
# =============================================================================


def _encode_speed_info(form: StrategyForm) -> SpeedSpec:
    def leaf(which: SpeedLeaf) -> Number:
        return numberify(form.speed(which), which.fallback)

    expire = None
    if form.duration:
        expire = numberify(form.duration, EXPIRE_FALLBACK)

    return SpeedSpec(
        limit=Limit(
            global_=leaf(SpeedLeaf.LIMIT_GLOBAL),
            task=leaf(SpeedLeaf.LIMIT_TASK),
        ),
        speed=Speed(
            global_=SpeedTier(
                bs=leaf(SpeedLeaf.SPEED_GLOBAL_BS),
                vs=leaf(SpeedLeaf.SPEED_GLOBAL_VS),
                ts=leaf(SpeedLeaf.SPEED_GLOBAL_TS),
            ),
            task=SpeedTier(
                bs=leaf(SpeedLeaf.SPEED_TASK_BS),
                vs=leaf(SpeedLeaf.SPEED_TASK_VS),
                ts=leaf(SpeedLeaf.SPEED_TASK_TS),
            ),
        ),
        expire=expire,
    )


def encode_form(form: StrategyForm) -> PolicyDocument:
    """Encode an editable form into its canonical policy document.

    Limit leaves fall back to -1 and speed leaves to 0 when their text is
    blank or not a number. ``expire`` is present only when ``duration`` is
    non-empty. Condition ids are dropped.

    Args:
        form: Form to encode.

    Returns:
        The canonical document; ``strategy_id`` is the form's id.
    """
    document = PolicyDocument(
        desc=form.desc,
        response_on_match=ResponseOnMatch(
            strategy=form.strategy_type,
            strategy_id=form.id,
            speed_info=_encode_speed_info(form),
        ),
        match_all=tuple(
            MatchClause(field=c.field, operator=c.operator, value=c.value)
            for c in form.conditions
        ),
    )
    logger.debug(
        "Encoded strategy form",
        extra={"strategy_id": form.id, "conditions": len(form.conditions)},
    )
    return document


def encode_form_dict(form: StrategyForm) -> dict[str, Any]:
    """Encode a form straight to the wire dictionary."""
    return encode_form(form).to_dict()


# =============================================================================
# Decode
# =============================================================================


def decode_document(document: PolicyDocument) -> StrategyForm:
    """Decode a canonical document into an editable form.

    Numeric leaves become decimal text and absent leaves become empty text.
    A document without ``expire`` yields an empty duration. Every condition
    gets a freshly generated id.

    Args:
        document: Document to decode.

    Returns:
        A new form owning its own condition list.
    """
    wire = document.speed_info
    speed_info = SpeedInfoForm(
        limit=LimitForm(
            global_=stringify(wire.limit.global_),
            task=stringify(wire.limit.task),
        ),
        speed=SpeedForm(
            global_=SpeedTierForm(
                bs=stringify(wire.speed.global_.bs),
                vs=stringify(wire.speed.global_.vs),
                ts=stringify(wire.speed.global_.ts),
            ),
            task=SpeedTierForm(
                bs=stringify(wire.speed.task.bs),
                vs=stringify(wire.speed.task.vs),
                ts=stringify(wire.speed.task.ts),
            ),
        ),
    )
    form = StrategyForm(
        id=document.strategy_id,
        desc=document.desc,
        strategy_type=document.strategy,
        speed_info=speed_info,
        duration=stringify(wire.expire),
        conditions=[
            MatchCondition(
                id=generate_id(),
                field=clause.field,
                operator=clause.operator,
                value=clause.value,
            )
            for clause in document.match_all
        ],
    )
    logger.debug(
        "Decoded policy document",
        extra={"strategy_id": form.id, "conditions": len(form.conditions)},
    )
    return form


def _section(data: Any, key: str) -> Mapping[str, Any]:
    if isinstance(data, Mapping):
        value = data.get(key)
        if isinstance(value, Mapping):
            return value
    return {}


def _number(data: Mapping[str, Any], key: str) -> Number | None:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    return value


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _clause(entry: Any) -> MatchClause:
    match = entry.get("match") if isinstance(entry, Mapping) else None
    parts = [str(p) for p in match] if isinstance(match, list | tuple) else []
    parts += [""] * (3 - len(parts))
    return MatchClause(field=parts[0], operator=parts[1], value=parts[2])


def document_from_wire(data: Mapping[str, Any]) -> PolicyDocument:
    """Build a document from a wire dictionary without rejecting anything.

    Missing or mistyped nested objects are treated as absent values and
    short ``match`` lists are padded with empty strings. Use
    :func:`shaper.policy.loader.load_document_from_dict` instead where
    malformed input must be reported.
    """
    flt = _section(data, "filter")
    response = _section(flt, "responseOnMatch")
    speed_info = _section(response, "speed_info")
    limit = _section(speed_info, "limit")
    speed = _section(speed_info, "speed")
    speed_global = _section(speed, "global")
    speed_task = _section(speed, "task")

    match_all = flt.get("matchAll")
    clauses = tuple(_clause(e) for e in match_all) if isinstance(match_all, list) else ()

    return PolicyDocument(
        desc=_text(flt, "desc"),
        response_on_match=ResponseOnMatch(
            strategy=_text(response, "strategy"),
            strategy_id=_text(response, "strategy_id"),
            speed_info=SpeedSpec(
                limit=Limit(
                    global_=_number(limit, "global"),
                    task=_number(limit, "task"),
                ),
                speed=Speed(
                    global_=SpeedTier(
                        bs=_number(speed_global, "bs"),
                        vs=_number(speed_global, "vs"),
                        ts=_number(speed_global, "ts"),
                    ),
                    task=SpeedTier(
                        bs=_number(speed_task, "bs"),
                        vs=_number(speed_task, "vs"),
                        ts=_number(speed_task, "ts"),
                    ),
                ),
                expire=_number(speed_info, "expire"),
            ),
        ),
        match_all=clauses,
    )


def decode_document_dict(data: Mapping[str, Any]) -> StrategyForm:
    """Decode a wire dictionary into a form, tolerating missing sections."""
    return decode_document(document_from_wire(data))
