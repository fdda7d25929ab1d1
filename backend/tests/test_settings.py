"""
Tests for environment-driven engine settings.
"""

import os
import sys
from unittest.mock import patch

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domain.constants import DOWN, LEFT
from settings import EngineSettings, load_settings, _sanitize_env_value


SETTINGS_VARS = [
    "SNAKE_MOVE_TIMEOUT_MS",
    "SNAKE_MAX_FOOD_DISTANCE",
    "SNAKE_LOOKAHEAD_DEPTH",
    "SNAKE_MIN_PATH_SAFETY",
    "SNAKE_FALLBACK_DIRECTION",
    "SNAKE_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in SETTINGS_VARS:
        monkeypatch.delenv(name, raising=False)


class TestEngineSettings:
    """Tests for EngineSettings defaults and validation."""

    def test_defaults(self):
        settings = EngineSettings()
        assert settings.move_timeout_ms == 250
        assert settings.max_food_distance == 20
        assert settings.lookahead_depth == 0
        assert settings.min_path_safety == 0.8
        assert settings.fallback_direction == DOWN
        assert settings.move_timeout_seconds == 0.25

    def test_non_positive_timeout_rejected(self):
        with pytest.raises(ValueError):
            EngineSettings(move_timeout_ms=0)

    def test_deep_lookahead_rejected(self):
        with pytest.raises(ValueError, match="lookahead_depth"):
            EngineSettings(lookahead_depth=4)

    def test_unknown_fallback_rejected(self):
        with pytest.raises(ValueError):
            EngineSettings(fallback_direction="NORTH")


class TestLoadSettings:
    """Tests for load_settings()."""

    def test_defaults_without_env(self):
        assert load_settings(dotenv=False) == EngineSettings()

    def test_reads_env(self, monkeypatch):
        monkeypatch.setenv("SNAKE_MOVE_TIMEOUT_MS", "500")
        monkeypatch.setenv("SNAKE_MAX_FOOD_DISTANCE", "12")
        monkeypatch.setenv("SNAKE_LOOKAHEAD_DEPTH", "1")
        monkeypatch.setenv("SNAKE_MIN_PATH_SAFETY", "1.5")
        monkeypatch.setenv("SNAKE_FALLBACK_DIRECTION", "left")
        monkeypatch.setenv("SNAKE_LOG_LEVEL", "debug")

        settings = load_settings(dotenv=False)

        assert settings.move_timeout_ms == 500
        assert settings.max_food_distance == 12
        assert settings.lookahead_depth == 1
        assert settings.min_path_safety == 1.5
        assert settings.fallback_direction == LEFT
        assert settings.log_level == "DEBUG"

    def test_quoted_values(self, monkeypatch):
        """Values exported with surrounding quotes are accepted."""
        monkeypatch.setenv("SNAKE_MOVE_TIMEOUT_MS", '"300"')
        monkeypatch.setenv("SNAKE_LOG_LEVEL", "  'WARNING' ")

        settings = load_settings(dotenv=False)

        assert settings.move_timeout_ms == 300
        assert settings.log_level == "WARNING"

    def test_blank_value_uses_default(self, monkeypatch):
        monkeypatch.setenv("SNAKE_MAX_FOOD_DISTANCE", '""')
        assert load_settings(dotenv=False).max_food_distance == 20

    @pytest.mark.parametrize("name,value", [
        ("SNAKE_MOVE_TIMEOUT_MS", "fast"),
        ("SNAKE_MIN_PATH_SAFETY", "high"),
        ("SNAKE_FALLBACK_DIRECTION", "NORTH"),
    ])
    def test_invalid_value_names_variable(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ValueError, match=name):
            load_settings(dotenv=False)

    def test_dotenv_loaded_by_default(self):
        with patch("settings.load_dotenv") as load_dotenv:
            load_settings()
        load_dotenv.assert_called_once_with()

        with patch("settings.load_dotenv") as load_dotenv:
            load_settings(dotenv=False)
        load_dotenv.assert_not_called()


class TestSanitize:
    """Tests for env value cleanup."""

    @pytest.mark.parametrize("raw,expected", [
        (None, None),
        ("", None),
        ("  ", None),
        ("INFO", "INFO"),
        ('"INFO"', "INFO"),
        ("'INFO'", "INFO"),
        ('"INFO', '"INFO'),
    ])
    def test_sanitize(self, raw, expected):
        assert _sanitize_env_value(raw) == expected
