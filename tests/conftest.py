"""Shared test fixtures for shaper."""

import json
from pathlib import Path

import pytest

from shaper.config.loader import clear_config_cache
from shaper.logging.context import clear_editor_context
from shaper.metadata import MetadataDirectory, default_directory
from shaper.policy.examples import example_documents
from shaper.policy.form import SpeedLeaf, StrategyForm
from shaper.policy.store import StrategyStore


@pytest.fixture(autouse=True)
def _isolate_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep tests away from the user's ~/.shaper and SHAPER_* variables."""
    for var in (
        "SHAPER_LOG_LEVEL",
        "SHAPER_LOG_FILE",
        "SHAPER_LOG_FORMAT",
        "SHAPER_DEFAULT_STRATEGY_TYPE",
        "SHAPER_CONFIG_PATH",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("SHAPER_DATA_DIR", str(tmp_path / "shaper-home"))
    clear_config_cache()
    clear_editor_context()
    yield
    clear_config_cache()
    clear_editor_context()


@pytest.fixture
def directory() -> MetadataDirectory:
    """Metadata directory seeded with the default entries."""
    return default_directory()


@pytest.fixture
def store() -> StrategyStore:
    """Store holding the two example strategies."""
    return StrategyStore(example_documents())


@pytest.fixture
def vip_form() -> StrategyForm:
    """A form with a task limit, an expiry and one user.type condition."""
    form = StrategyForm(id="s1", desc="VIP boost")
    form.set_speed(SpeedLeaf.LIMIT_TASK, "512")
    form.set_duration("3600")
    condition = form.add_condition("user.type")
    form.update_condition_value(condition.id, "3,4")
    return form


@pytest.fixture
def examples_file(tmp_path: Path) -> Path:
    """JSON policy file holding the example strategies."""
    path = tmp_path / "strategies.json"
    path.write_text(
        json.dumps([d.to_dict() for d in example_documents()], ensure_ascii=False),
        encoding="utf-8",
    )
    return path
