"""Tests for the policy CLI commands."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from shaper.cli import main
from shaper.cli.exit_codes import ExitCode
from shaper.policy.examples import example_documents
from shaper.policy.form import SpeedLeaf, form_to_dict


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestValidateCommand:
    """Tests for 'shaper policy validate'."""

    def test_valid(self, runner: CliRunner, examples_file: Path) -> None:
        result = runner.invoke(main, ["policy", "validate", str(examples_file)])
        assert result.exit_code == 0
        assert "Valid" in result.output
        assert "2 strategies" in result.output

    def test_invalid_json_output(self, runner: CliRunner, tmp_path: Path) -> None:
        wire = example_documents()[0].to_dict()
        wire["filter"]["responseOnMatch"]["speed_info"]["limit"]["task"] = "fast"
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(wire))

        result = runner.invoke(
            main, ["policy", "validate", str(path), "--format", "json"]
        )

        assert result.exit_code == ExitCode.POLICY_VALIDATION_ERROR
        output = json.loads(result.output)
        assert output["valid"] is False
        assert output["errors"][0]["field"].startswith(
            "filter.responseOnMatch.speed_info.limit.task"
        )

    def test_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(main, ["policy", "validate", str(tmp_path / "x.json")])
        assert result.exit_code == ExitCode.TARGET_NOT_FOUND

    def test_syntax_error(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{")
        result = runner.invoke(main, ["policy", "validate", str(path)])
        assert result.exit_code == ExitCode.POLICY_VALIDATION_ERROR

    def test_not_utf8(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "utf16.json"
        path.write_bytes(b"\xff\xfe[]")
        result = runner.invoke(main, ["policy", "validate", str(path)])
        assert result.exit_code == ExitCode.POLICY_VALIDATION_ERROR
        assert "UTF-8" in result.output


class TestShowCommand:
    """Tests for 'shaper policy show'."""

    def test_text(self, runner: CliRunner, examples_file: Path) -> None:
        result = runner.invoke(main, ["policy", "show", str(examples_file)])
        assert result.exit_code == 0
        assert "example_1 [Spike & Fill]" in result.output
        assert "N/A" in result.output
        assert "512 KB/s" in result.output
        assert "contains 3" in result.output

    def test_json(self, runner: CliRunner, examples_file: Path) -> None:
        result = runner.invoke(
            main, ["policy", "show", str(examples_file), "--format", "json"]
        )
        assert result.exit_code == 0
        strategies = json.loads(result.output)["strategies"]
        assert [s["strategy_id"] for s in strategies] == ["example_1", "example_2"]


class TestDecodeEncodeCommands:
    """Tests for 'shaper policy decode' and 'shaper policy encode'."""

    def test_decode_json_then_encode(
        self, runner: CliRunner, examples_file: Path, tmp_path: Path
    ) -> None:
        """decode --format json feeds straight back into encode."""
        decoded = runner.invoke(
            main, ["policy", "decode", str(examples_file), "--format", "json"]
        )
        assert decoded.exit_code == 0
        forms = json.loads(decoded.output)
        assert forms[0]["duration"] == "3600"
        assert forms[1]["duration"] == ""

        forms_file = tmp_path / "forms.json"
        forms_file.write_text(decoded.output, encoding="utf-8")
        out = tmp_path / "out.json"

        encoded = runner.invoke(
            main, ["policy", "encode", str(forms_file), "-o", str(out)]
        )

        assert encoded.exit_code == 0, encoded.output
        assert json.loads(out.read_text(encoding="utf-8")) == [
            d.to_dict() for d in example_documents()
        ]

    def test_decode_text_uses_labels(
        self, runner: CliRunner, examples_file: Path
    ) -> None:
        result = runner.invoke(main, ["policy", "decode", str(examples_file)])
        assert result.exit_code == 0
        assert "User Type in Platinum Member" in result.output

    def test_encode_blank_description(
        self, runner: CliRunner, vip_form, tmp_path: Path
    ) -> None:
        vip_form.set_description("")
        path = tmp_path / "forms.json"
        path.write_text(json.dumps([form_to_dict(vip_form)]))

        result = runner.invoke(main, ["policy", "encode", str(path)])

        assert result.exit_code == ExitCode.FORM_VALIDATION_ERROR
        assert "Description is required" in result.output

    def test_encode_to_stdout(self, runner: CliRunner, vip_form, tmp_path: Path) -> None:
        path = tmp_path / "form.json"
        path.write_text(json.dumps(form_to_dict(vip_form)))

        result = runner.invoke(main, ["policy", "encode", str(path)])

        assert result.exit_code == 0
        [document] = json.loads(result.output)
        speed_info = document["filter"]["responseOnMatch"]["speed_info"]
        assert speed_info["limit"] == {"global": -1, "task": 512}
        assert speed_info["expire"] == 3600

    def test_encoded_negative_speed_shows(
        self, runner: CliRunner, vip_form, tmp_path: Path
    ) -> None:
        """A document encode wrote is accepted by show."""
        vip_form.set_speed(SpeedLeaf.SPEED_GLOBAL_BS, "-5")
        path = tmp_path / "form.json"
        path.write_text(json.dumps(form_to_dict(vip_form)))
        out = tmp_path / "out.json"

        encoded = runner.invoke(main, ["policy", "encode", str(path), "-o", str(out)])
        assert encoded.exit_code == 0, encoded.output

        shown = runner.invoke(main, ["policy", "show", str(out), "--format", "json"])
        assert shown.exit_code == 0, shown.output
        [strategy] = json.loads(shown.output)["strategies"]
        assert strategy["strategy_id"] == "s1"

    def test_encode_null_description(
        self, runner: CliRunner, vip_form, tmp_path: Path
    ) -> None:
        snapshot = form_to_dict(vip_form)
        snapshot["desc"] = None
        path = tmp_path / "form.json"
        path.write_text(json.dumps(snapshot))

        result = runner.invoke(main, ["policy", "encode", str(path)])

        assert result.exit_code == ExitCode.FORM_VALIDATION_ERROR
        assert "None" not in result.output

    def test_encode_malformed_condition(
        self, runner: CliRunner, vip_form, tmp_path: Path
    ) -> None:
        snapshot = form_to_dict(vip_form)
        snapshot["conditions"] = ["user.type"]
        path = tmp_path / "forms.json"
        path.write_text(json.dumps([snapshot]))

        result = runner.invoke(main, ["policy", "encode", str(path)])

        assert result.exit_code == ExitCode.POLICY_VALIDATION_ERROR
        assert "conditions[0] must be an object" in result.output


class TestExamplesCommand:
    """Tests for 'shaper policy examples'."""

    def test_stdout(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["policy", "examples"])
        assert result.exit_code == 0
        assert json.loads(result.output) == [d.to_dict() for d in example_documents()]

    def test_output_file(self, runner: CliRunner, tmp_path: Path) -> None:
        out = tmp_path / "strategies.json"
        result = runner.invoke(main, ["policy", "examples", "-o", str(out)])
        assert result.exit_code == 0
        assert "白金会员" in out.read_text(encoding="utf-8")


class TestDeleteCommand:
    """Tests for 'shaper policy delete'."""

    def test_delete_with_yes(self, runner: CliRunner, examples_file: Path) -> None:
        result = runner.invoke(
            main, ["policy", "delete", str(examples_file), "example_1", "--yes"]
        )
        assert result.exit_code == 0
        assert "1 remaining" in result.output
        remaining = json.loads(examples_file.read_text(encoding="utf-8"))
        assert [d["filter"]["responseOnMatch"]["strategy_id"] for d in remaining] == [
            "example_2"
        ]

    def test_declined(self, runner: CliRunner, examples_file: Path) -> None:
        before = examples_file.read_text(encoding="utf-8")
        result = runner.invoke(
            main, ["policy", "delete", str(examples_file), "example_1"], input="n\n"
        )
        assert result.exit_code == 0
        assert "cancelled" in result.output
        assert examples_file.read_text(encoding="utf-8") == before

    def test_confirmed_prompt(self, runner: CliRunner, examples_file: Path) -> None:
        result = runner.invoke(
            main, ["policy", "delete", str(examples_file), "example_2"], input="y\n"
        )
        assert result.exit_code == 0
        assert "Deleted example_2" in result.output

    def test_unknown_id(self, runner: CliRunner, examples_file: Path) -> None:
        result = runner.invoke(
            main, ["policy", "delete", str(examples_file), "missing", "--yes"]
        )
        assert result.exit_code == ExitCode.STRATEGY_NOT_FOUND

    def test_json_output(self, runner: CliRunner, examples_file: Path) -> None:
        result = runner.invoke(
            main,
            [
                "policy",
                "delete",
                str(examples_file),
                "example_2",
                "--yes",
                "--format",
                "json",
            ],
        )
        assert result.exit_code == 0
        output = json.loads(result.output)
        assert output["status"] == "completed"
        assert output["remaining"] == 1
