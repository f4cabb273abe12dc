"""Unit tests for configuration validation"""
import importlib

import pytest

from student_hub import config
from student_hub.exceptions import ConfigurationError


def test_defaults_are_valid():
    """Test shipped defaults pass validation"""
    config.validate_config()


def test_default_values():
    assert config.POINTS_PER_LEVEL == 100
    assert config.ACHIEVEMENT_BONUS_POINTS == 50
    assert config.ACTIVITY_LOG_LIMIT == 100
    assert config.STORAGE_QUOTA_BYTES == 5 * 1024 * 1024


@pytest.mark.parametrize("name,value", [
    ("STORAGE_BACKEND", "redis"),
    ("STORAGE_NAMESPACE", ""),
    ("POINTS_PER_LEVEL", 0),
    ("ACTIVITY_LOG_LIMIT", -1),
    ("STORAGE_QUOTA_BYTES", 0),
    ("LOG_LEVEL", "LOUD"),
])
def test_invalid_values_rejected(monkeypatch, name, value):
    monkeypatch.setattr(config, name, value)

    with pytest.raises(ConfigurationError) as exc_info:
        config.validate_config()

    assert exc_info.value.config_key == name


def test_environment_overrides(monkeypatch):
    """Test values are read from the environment at import"""
    monkeypatch.setenv("POINTS_PER_LEVEL", "250")
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    try:
        reloaded = importlib.reload(config)
        assert reloaded.POINTS_PER_LEVEL == 250
        assert reloaded.STORAGE_BACKEND == "memory"
    finally:
        monkeypatch.undo()
        importlib.reload(config)
