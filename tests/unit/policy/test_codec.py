"""Unit tests for the form <-> document codec."""

import json
import logging

from shaper.policy.codec import (
    decode_document,
    decode_document_dict,
    document_from_wire,
    encode_form,
    encode_form_dict,
)
from shaper.policy.examples import example_documents
from shaper.policy.form import SpeedLeaf, StrategyForm
from shaper.policy.types import (
    Limit,
    PolicyDocument,
    ResponseOnMatch,
    SpeedSpec,
)

ZERO_TIER = {"bs": 0, "vs": 0, "ts": 0}


class TestEncode:
    """Tests for encode_form."""

    def test_vip_boost_example(self, vip_form: StrategyForm) -> None:
        """The documented end-to-end example encodes exactly."""
        for leaf in SpeedLeaf:
            if leaf.value[0] == "speed":
                vip_form.set_speed(leaf, "0")

        data = encode_form_dict(vip_form)

        assert data == {
            "filter": {
                "desc": "VIP boost",
                "responseOnMatch": {
                    "strategy": "speed_limit",
                    "strategy_id": "s1",
                    "speed_info": {
                        "limit": {"global": -1, "task": 512},
                        "speed": {"global": ZERO_TIER, "task": ZERO_TIER},
                        "expire": 3600,
                    },
                },
                "matchAll": [{"match": ["user.type", "in", "3,4"]}],
            }
        }

    def test_blank_leaves_use_fallbacks(self) -> None:
        """Blank limits become -1 and blank speeds become 0."""
        document = encode_form(StrategyForm(id="s1", desc="x"))
        wire = document.speed_info
        assert wire.limit == Limit(global_=-1, task=-1)
        assert wire.speed.global_.to_dict() == ZERO_TIER
        assert wire.speed.task.to_dict() == ZERO_TIER

    def test_garbage_leaves_use_fallbacks(self) -> None:
        form = StrategyForm(id="s1", desc="x")
        form.set_speed(SpeedLeaf.LIMIT_GLOBAL, "lots")
        form.set_speed(SpeedLeaf.SPEED_TASK_VS, "nan")
        wire = encode_form(form).speed_info
        assert wire.limit.global_ == -1
        assert wire.speed.task.vs == 0

    def test_fractional_leaves_survive(self) -> None:
        form = StrategyForm(id="s1", desc="x")
        form.set_speed(SpeedLeaf.SPEED_GLOBAL_BS, "1.5")
        assert encode_form(form).speed_info.speed.global_.bs == 1.5

    def test_no_duration_omits_expire(self) -> None:
        """expire is present only when duration is non-empty."""
        data = encode_form_dict(StrategyForm(id="s1", desc="x"))
        assert "expire" not in data["filter"]["responseOnMatch"]["speed_info"]

    def test_bad_duration_expires_at_zero(self) -> None:
        form = StrategyForm(id="s1", desc="x", duration="soon")
        assert encode_form(form).speed_info.expire == 0

    def test_conditions_keep_order_and_drop_ids(self) -> None:
        form = StrategyForm(id="s1", desc="x")
        first = form.add_condition("effective.period")
        form.update_condition_value(first.id, "18:00-23:00")
        form.add_condition("tags.offline")
        clauses = encode_form(form).match_all
        assert [c.to_dict() for c in clauses] == [
            {"match": ["effective.period", "between", "18:00-23:00"]},
            {"match": ["tags.offline", "in", ""]},
        ]

    def test_encoding_does_not_validate(self) -> None:
        """Empty descriptions are the editor's concern, not the codec's."""
        assert encode_form(StrategyForm(id="s1")).desc == ""

    def test_logs_debug(self, vip_form: StrategyForm, caplog) -> None:
        with caplog.at_level(logging.DEBUG, logger="shaper.policy.codec"):
            encode_form(vip_form)
        assert "Encoded strategy form" in caplog.text


class TestDecode:
    """Tests for decode_document."""

    def test_decode_example(self) -> None:
        """-1 decodes to "-1" and a missing expire to an empty duration."""
        document = PolicyDocument(
            desc="cap",
            response_on_match=ResponseOnMatch(
                strategy="speed_limit",
                strategy_id="s2",
                speed_info=SpeedSpec(limit=Limit(global_=-1, task=256)),
            ),
        )
        form = decode_document(document)
        assert form.speed(SpeedLeaf.LIMIT_GLOBAL) == "-1"
        assert form.speed(SpeedLeaf.LIMIT_TASK) == "256"
        assert form.duration == ""
        assert form.id == "s2"

    def test_absent_leaves_are_empty(self) -> None:
        form = decode_document_dict(
            {"filter": {"desc": "x", "responseOnMatch": {"strategy_id": "s3"}}}
        )
        assert all(form.speed(leaf) == "" for leaf in SpeedLeaf)
        assert form.conditions == []

    def test_condition_ids_are_fresh(self) -> None:
        document = example_documents()[0]
        first = decode_document(document)
        second = decode_document(document)
        assert len({c.id for c in first.conditions}) == 2
        assert {c.id for c in first.conditions}.isdisjoint(
            c.id for c in second.conditions
        )

    def test_forms_do_not_share_condition_lists(self) -> None:
        document = example_documents()[0]
        first = decode_document(document)
        second = decode_document(document)
        first.add_condition()
        assert len(second.conditions) == 2


class TestRoundTrip:
    """Tests for encode/decode round trips."""

    def test_examples_round_trip(self) -> None:
        """encode(decode(doc)) reproduces every example document."""
        for document in example_documents():
            assert encode_form(decode_document(document)) == document

    def test_form_round_trip_up_to_ids(self, vip_form: StrategyForm) -> None:
        decoded = decode_document(encode_form(vip_form))
        assert decoded.desc == vip_form.desc
        assert decoded.duration == "3600"
        assert decoded.speed(SpeedLeaf.LIMIT_TASK) == "512"
        # blank leaves come back as their fallbacks
        assert decoded.speed(SpeedLeaf.LIMIT_GLOBAL) == "-1"
        assert [(c.field, c.operator, c.value) for c in decoded.conditions] == [
            ("user.type", "in", "3,4")
        ]

    def test_numeric_text_is_normalised(self) -> None:
        """decode(encode(form)) renders leaves in canonical decimal text."""
        form = StrategyForm(id="s1", desc="x", duration="3600.0")
        form.set_speed(SpeedLeaf.LIMIT_TASK, "3.0")
        form.set_speed(SpeedLeaf.SPEED_GLOBAL_BS, " 1.50 ")
        form.set_speed(SpeedLeaf.SPEED_TASK_VS, "12abc")
        decoded = decode_document(encode_form(form))
        assert decoded.speed(SpeedLeaf.LIMIT_TASK) == "3"
        assert decoded.speed(SpeedLeaf.SPEED_GLOBAL_BS) == "1.5"
        assert decoded.speed(SpeedLeaf.SPEED_TASK_VS) == "12"
        assert decoded.duration == "3600"

    def test_wire_json_round_trip(self) -> None:
        for document in example_documents():
            wire = json.loads(json.dumps(document.to_dict()))
            assert document_from_wire(wire) == document


class TestDocumentFromWire:
    """Tests for tolerant wire decoding."""

    def test_garbage_is_tolerated(self) -> None:
        document = document_from_wire({"filter": "nope"})
        assert document.desc == ""
        assert document.strategy_id == ""
        assert document.match_all == ()

    def test_non_numbers_are_absent(self) -> None:
        document = document_from_wire(
            {
                "filter": {
                    "responseOnMatch": {
                        "speed_info": {"limit": {"global": "fast", "task": True}}
                    }
                }
            }
        )
        assert document.speed_info.limit == Limit(global_=None, task=None)

    def test_short_match_is_padded(self) -> None:
        document = document_from_wire({"filter": {"matchAll": [{"match": ["a.b"]}]}})
        assert document.match_all[0].to_dict() == {"match": ["a.b", "", ""]}
