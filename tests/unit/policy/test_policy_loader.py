"""Unit tests for loading and validating policy documents."""

import copy
import json
from pathlib import Path

import pytest

from shaper.policy.examples import example_documents
from shaper.policy.exceptions import PolicyValidationError
from shaper.policy.loader import (
    load_document_from_dict,
    load_documents,
    load_documents_from_data,
    validate_documents_data,
)


@pytest.fixture
def wire() -> dict:
    """Wire dictionary of the first example strategy."""
    return copy.deepcopy(example_documents()[0].to_dict())


class TestLoadDocumentFromDict:
    """Tests for load_document_from_dict."""

    def test_valid_document(self, wire: dict) -> None:
        assert load_document_from_dict(wire) == example_documents()[0]

    def test_integral_floats_become_int(self, wire: dict) -> None:
        wire["filter"]["responseOnMatch"]["speed_info"]["expire"] = 3600.0
        document = load_document_from_dict(wire)
        assert document.speed_info.expire == 3600
        assert isinstance(document.speed_info.expire, int)

    def test_missing_leaves_are_none(self, wire: dict) -> None:
        del wire["filter"]["responseOnMatch"]["speed_info"]["limit"]["task"]
        document = load_document_from_dict(wire)
        assert document.speed_info.limit.task is None

    def test_missing_desc(self, wire: dict) -> None:
        del wire["filter"]["desc"]
        with pytest.raises(PolicyValidationError) as exc_info:
            load_document_from_dict(wire)
        assert exc_info.value.field == "filter.desc"

    def test_unknown_key_rejected(self, wire: dict) -> None:
        wire["filter"]["priority"] = 1
        with pytest.raises(PolicyValidationError) as exc_info:
            load_document_from_dict(wire)
        assert exc_info.value.field == "filter.priority"

    def test_string_number_rejected(self, wire: dict) -> None:
        wire["filter"]["responseOnMatch"]["speed_info"]["limit"]["global"] = "512"
        with pytest.raises(PolicyValidationError) as exc_info:
            load_document_from_dict(wire)
        assert exc_info.value.field.startswith(
            "filter.responseOnMatch.speed_info.limit.global"
        )

    def test_bool_rejected(self, wire: dict) -> None:
        wire["filter"]["responseOnMatch"]["speed_info"]["speed"]["task"]["bs"] = True
        with pytest.raises(PolicyValidationError):
            load_document_from_dict(wire)

    def test_out_of_range_numbers_load(self, wire: dict) -> None:
        """Negative numbers load; ranges are advisory form issues."""
        speed_info = wire["filter"]["responseOnMatch"]["speed_info"]
        speed_info["limit"]["task"] = -2
        speed_info["speed"]["global"]["vs"] = -1
        speed_info["expire"] = -5
        document = load_document_from_dict(wire)
        assert document.speed_info.limit.task == -2
        assert document.speed_info.speed.global_.vs == -1
        assert document.speed_info.expire == -5

    def test_match_must_be_triple(self, wire: dict) -> None:
        wire["filter"]["matchAll"][1] = {"match": ["user.type", "in"]}
        with pytest.raises(PolicyValidationError) as exc_info:
            load_document_from_dict(wire)
        assert exc_info.value.field == "filter.matchAll[1].match"

    def test_empty_strategy_id_rejected(self, wire: dict) -> None:
        wire["filter"]["responseOnMatch"]["strategy_id"] = ""
        with pytest.raises(PolicyValidationError):
            load_document_from_dict(wire)


class TestLoadDocumentsFromData:
    """Tests for batch loading."""

    def test_list(self) -> None:
        data = [d.to_dict() for d in example_documents()]
        assert load_documents_from_data(data) == example_documents()

    def test_single_document(self, wire: dict) -> None:
        assert len(load_documents_from_data(wire)) == 1

    def test_duplicate_strategy_id(self, wire: dict) -> None:
        with pytest.raises(PolicyValidationError) as exc_info:
            load_documents_from_data([wire, copy.deepcopy(wire)])
        assert exc_info.value.field == "[1].filter.responseOnMatch.strategy_id"

    def test_scalar_rejected(self) -> None:
        with pytest.raises(PolicyValidationError):
            load_documents_from_data("nope")


class TestValidateDocumentsData:
    """Tests for validate_documents_data."""

    def test_valid(self) -> None:
        result = validate_documents_data([d.to_dict() for d in example_documents()])
        assert result.valid
        assert result.to_dict() == {"valid": True, "count": 2}

    def test_collects_every_error(self, wire: dict) -> None:
        bad = copy.deepcopy(wire)
        del bad["filter"]["desc"]
        bad["filter"]["responseOnMatch"]["speed_info"]["expire"] = "soon"
        result = validate_documents_data([wire, bad])
        assert not result.valid
        fields = [issue.field for issue in result.errors]
        assert "[1].filter.desc" in fields
        assert any(
            f.startswith("[1].filter.responseOnMatch.speed_info.expire") for f in fields
        )
        assert all(f.startswith("[1].") for f in fields)
        assert result.documents == []

    def test_issue_to_dict(self, wire: dict) -> None:
        del wire["filter"]["desc"]
        issue = validate_documents_data(wire).errors[0]
        assert issue.to_dict() == {
            "field": "filter.desc",
            "message": issue.message,
            "code": "missing",
        }


class TestLoadDocuments:
    """Tests for loading from files."""

    def test_json_file(self, examples_file: Path) -> None:
        assert load_documents(examples_file) == example_documents()

    def test_yaml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "strategies.yaml"
        path.write_text(
            """
- filter:
    desc: night cap
    responseOnMatch:
      strategy: speed_limit
      strategy_id: night
      speed_info:
        limit: {global: 256, task: 128}
    matchAll:
      - match: [effective.period, between, "00:00-06:00"]
""",
            encoding="utf-8",
        )
        [document] = load_documents(path)
        assert document.strategy_id == "night"
        assert document.speed_info.limit.task == 128
        assert document.match_all[0].value == "00:00-06:00"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_documents(tmp_path / "nope.json")

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.json"
        path.write_text("  \n")
        with pytest.raises(PolicyValidationError, match="empty"):
            load_documents(path)

    def test_bad_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(PolicyValidationError, match="Invalid JSON"):
            load_documents(path)

    def test_bad_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yml"
        path.write_text("filter: [unclosed")
        with pytest.raises(PolicyValidationError, match="Invalid YAML"):
            load_documents(path)

    def test_not_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "utf16.json"
        path.write_bytes(b"\xff\xfe[]")
        with pytest.raises(PolicyValidationError, match="UTF-8"):
            load_documents(path)

    def test_non_ascii_round_trip(self, tmp_path: Path) -> None:
        path = tmp_path / "cn.json"
        path.write_text(
            json.dumps(example_documents()[1].to_dict(), ensure_ascii=False),
            encoding="utf-8",
        )
        assert load_documents(path)[0].desc == "高带宽风险用户限速"
