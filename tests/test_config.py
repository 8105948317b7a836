"""Tests for environment-driven configuration."""
import importlib

import pytest

import tourney.config


@pytest.fixture
def reload_config(monkeypatch):
    def _reload(**env):
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        return importlib.reload(tourney.config)

    yield _reload
    monkeypatch.undo()
    importlib.reload(tourney.config)


def test_rate_limiting_on_by_default(reload_config, monkeypatch):
    monkeypatch.delenv("RATELIMIT_ENABLED", raising=False)
    module = reload_config()
    assert module.Config.RATELIMIT_ENABLED is True
    assert module.TestingConfig.RATELIMIT_ENABLED is False


def test_rate_limiting_disabled_from_env(reload_config):
    module = reload_config(RATELIMIT_ENABLED="false")
    assert module.Config.RATELIMIT_ENABLED is False
    assert module.ProductionConfig.RATELIMIT_ENABLED is False


def test_empty_default_tiebreaker_is_unset(reload_config):
    module = reload_config(DEFAULT_TIEBREAKER="")
    assert module.Config.DEFAULT_TIEBREAKER is None
