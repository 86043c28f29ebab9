import logging
from datetime import time
from pathlib import Path

import pytest
from pydantic import ValidationError

from memit.application.config import AppConfig, resolve_config
from memit.domain.ports import StudyLimits


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "MEMIT_DAILY_NEW_CARDS",
        "MEMIT_DAILY_TOTAL_LIMIT",
        "MEMIT_DATA_DIR",
        "MEMIT_STUDY_REVERSED",
        "MEMIT_VERBOSE",
    ):
        monkeypatch.delenv(var, raising=False)
    return home


def _write_config(home: Path, text: str) -> None:
    cfg = home / ".config/memit/config.toml"
    cfg.parent.mkdir(parents=True)
    cfg.write_text(text, encoding="utf-8")


def test_defaults(mock_home):
    config = resolve_config()
    assert config.daily_new_cards == 20
    assert config.daily_total_limit == 80
    assert config.study_reminder_time == time(9, 0)
    assert config.data_dir == mock_home / ".local/share/memit"
    assert config.study_limits() == StudyLimits(20, 80)


def test_toml_file(mock_home):
    _write_config(
        mock_home,
        'daily_new_cards = 5\ndaily_total_limit = 30\nstudy_reminder_time = "07:45"\n',
    )
    config = resolve_config()
    assert config.study_limits() == StudyLimits(daily_new_limit=5, daily_total_limit=30)
    assert config.study_reminder_time == time(7, 45)


def test_env_beats_toml(mock_home, monkeypatch):
    _write_config(mock_home, "daily_new_cards = 5\n")
    monkeypatch.setenv("MEMIT_DAILY_NEW_CARDS", "12")
    assert resolve_config().daily_new_cards == 12


def test_overrides_beat_env_and_skip_none(mock_home, monkeypatch, tmp_path):
    monkeypatch.setenv("MEMIT_DAILY_TOTAL_LIMIT", "40")
    config = resolve_config({"daily_total_limit": 10, "data_dir": None})
    assert config.daily_total_limit == 10
    assert config.data_dir == mock_home / ".local/share/memit"


def test_data_dir_expands_user(mock_home):
    config = AppConfig(data_dir="~/cards")
    assert config.data_dir == mock_home / "cards"


def test_negative_limits_rejected(mock_home):
    with pytest.raises(ValidationError):
        AppConfig(daily_new_cards=-1)


def test_study_reversed_from_env(mock_home, monkeypatch):
    assert resolve_config().study_reversed is False
    monkeypatch.setenv("MEMIT_STUDY_REVERSED", "true")
    assert resolve_config().study_reversed is True


@pytest.mark.parametrize(
    "verbose, level",
    [(0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG), (3, logging.DEBUG)],
)
def test_log_level_follows_verbosity(mock_home, verbose, level):
    assert AppConfig(verbose=verbose).log_level() == level
