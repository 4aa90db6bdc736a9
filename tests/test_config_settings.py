"""
Tests for src/config/settings.py
"""

import logging

import pytest

from src.config.settings import UtilitySettings, get_settings, reset_settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("OSS_IMAGE_EXTENSION", "OSS_SEQUENCE_BITS", "OSS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = UtilitySettings.from_env()

    assert settings.image_extension == ".jpg"
    assert settings.sequence_bits == 64
    assert settings.log_level == "WARNING"
    assert settings.log_level_number == logging.WARNING


def test_environment_overrides(clean_env):
    clean_env.setenv("OSS_IMAGE_EXTENSION", ".png")
    clean_env.setenv("OSS_SEQUENCE_BITS", "32")
    clean_env.setenv("OSS_LOG_LEVEL", "debug")

    settings = UtilitySettings.from_env()

    assert settings == UtilitySettings(image_extension=".png", sequence_bits=32, log_level="DEBUG")


@pytest.mark.parametrize("name,value,match", [
    ("OSS_SEQUENCE_BITS", "abc", "must be an integer"),
    ("OSS_SEQUENCE_BITS", "48", "OSS_SEQUENCE_BITS must be one of"),
    ("OSS_IMAGE_EXTENSION", "jpg", "must start with"),
    ("OSS_IMAGE_EXTENSION", ".JPG", "lower-case"),
    ("OSS_LOG_LEVEL", "loud", "OSS_LOG_LEVEL"),
])
def test_invalid_values_are_rejected(clean_env, name, value, match):
    clean_env.setenv(name, value)

    with pytest.raises(ValueError, match=match):
        UtilitySettings.from_env()


def test_settings_are_frozen():
    with pytest.raises(AttributeError):
        UtilitySettings().sequence_bits = 32


def test_get_settings_caches_until_reset(clean_env):
    first = get_settings()
    clean_env.setenv("OSS_SEQUENCE_BITS", "32")

    assert get_settings() is first

    reset_settings()
    assert get_settings().sequence_bits == 32
