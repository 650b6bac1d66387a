"""Tests for EnvReader class."""

from __future__ import annotations

import logging
from pathlib import Path

from shaper.config.env import EnvReader


class TestEnvReaderGetStr:
    """Tests for EnvReader.get_str method."""

    def test_returns_value_when_set(self) -> None:
        reader = EnvReader(env={"MY_VAR": "hello"})
        assert reader.get_str("MY_VAR") == "hello"

    def test_returns_default_when_not_set(self) -> None:
        reader = EnvReader(env={})
        assert reader.get_str("MY_VAR", "default") == "default"

    def test_empty_value_counts_as_unset(self) -> None:
        """An empty variable falls back to the default."""
        reader = EnvReader(env={"MY_VAR": ""})
        assert reader.get_str("MY_VAR", "default") == "default"


class TestEnvReaderGetInt:
    """Tests for EnvReader.get_int method."""

    def test_parses(self) -> None:
        assert EnvReader(env={"N": "42"}).get_int("N") == 42

    def test_invalid_logs_and_defaults(self, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            assert EnvReader(env={"N": "many"}).get_int("N", 5) == 5
        assert "Invalid integer value for N" in caplog.text


class TestEnvReaderGetBool:
    """Tests for EnvReader.get_bool method."""

    def test_true_values(self) -> None:
        for value in ("true", "1", "YES", "on"):
            assert EnvReader(env={"B": value}).get_bool("B") is True

    def test_other_values_false(self) -> None:
        assert EnvReader(env={"B": "nope"}).get_bool("B") is False

    def test_default(self) -> None:
        assert EnvReader(env={}).get_bool("B", True) is True


class TestEnvReaderGetPath:
    """Tests for EnvReader.get_path method."""

    def test_returns_path(self, tmp_path: Path) -> None:
        reader = EnvReader(env={"P": str(tmp_path / "missing")})
        assert reader.get_path("P") == tmp_path / "missing"

    def test_must_exist(self, tmp_path: Path, caplog) -> None:
        reader = EnvReader(env={"P": str(tmp_path / "missing")})
        with caplog.at_level(logging.WARNING):
            assert reader.get_path("P", must_exist=True) is None
        assert "non-existent path" in caplog.text

    def test_expands_user(self) -> None:
        path = EnvReader(env={"P": "~/x"}).get_path("P")
        assert path == Path.home() / "x"
