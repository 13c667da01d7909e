import logging

import pytest
from pydantic import ValidationError

from natal_api.astro_core.settings import Settings, init_logging

ENV_VARS = ("ASTRO_LOG_LEVEL", "ASTRO_POLE_LATITUDE_LIMIT", "ASTRO_STRICT_POLES", "ASTRO_TRANSIT_MONTHS")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings()
    assert settings.log_level == "INFO"
    assert settings.pole_latitude_limit == 89.9
    assert settings.strict_poles is False
    assert settings.transit_months == 12


def test_values_from_environment(monkeypatch):
    monkeypatch.setenv("ASTRO_LOG_LEVEL", "debug")
    monkeypatch.setenv("ASTRO_POLE_LATITUDE_LIMIT", "85")
    monkeypatch.setenv("ASTRO_STRICT_POLES", "yes")
    monkeypatch.setenv("ASTRO_TRANSIT_MONTHS", "6")
    settings = Settings()
    assert settings.log_level == "DEBUG"
    assert settings.pole_latitude_limit == 85.0
    assert settings.strict_poles is True
    assert settings.transit_months == 6


@pytest.mark.parametrize(
    "name,value",
    [
        ("ASTRO_LOG_LEVEL", "chatty"),
        ("ASTRO_POLE_LATITUDE_LIMIT", "90"),
        ("ASTRO_POLE_LATITUDE_LIMIT", "0"),
        ("ASTRO_STRICT_POLES", "maybe"),
        ("ASTRO_TRANSIT_MONTHS", "0"),
    ],
)
def test_invalid_values_raise(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValidationError):
        Settings()


def test_settings_are_frozen():
    settings = Settings()
    with pytest.raises(ValidationError):
        settings.transit_months = 3


def test_init_logging_sets_root_level():
    root = logging.getLogger()
    previous = root.level
    try:
        init_logging(Settings(log_level="error"))
        assert root.level == logging.ERROR
    finally:
        root.setLevel(previous)
