"""Tests for environment-driven configuration."""

import pytest
from pydantic import ValidationError

from prioload import LoaderSettings, PerformanceTargets, SchedulerConfig


def test_defaults():
    settings = LoaderSettings(_env_file=None)

    assert settings.max_concurrent_requests == 6
    assert settings.critical_resource_timeout == 3.0
    assert settings.preload_timeout == 5.0
    assert settings.retry_delay == 1.0


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PRIOLOAD_MAX_CONCURRENT_REQUESTS", "2")
    monkeypatch.setenv("PRIOLOAD_RETRY_DELAY", "0.25")
    monkeypatch.setenv("PRIOLOAD_TARGET_FIRST_PAINT", "500")

    settings = LoaderSettings(_env_file=None)
    targets = PerformanceTargets(_env_file=None)

    assert settings.max_concurrent_requests == 2
    assert settings.retry_delay == 0.25
    assert targets.first_paint == 500
    assert targets.as_metric_table()["first-paint"] == 500


def test_invalid_concurrency_rejected():
    with pytest.raises(ValidationError):
        LoaderSettings(_env_file=None, max_concurrent_requests=0)


def test_scheduler_config_from_settings():
    settings = LoaderSettings(
        _env_file=None,
        max_concurrent_requests=3,
        critical_resource_timeout=1.5,
        preload_timeout=8.0,
        retry_delay=0.5,
    )

    config = SchedulerConfig.from_settings(settings)

    assert config.max_concurrent == 3
    assert config.default_timeout == 1.5
    assert config.batch_timeout == 8.0
    assert config.retry_policy.delay == 0.5


@pytest.mark.parametrize(
    "kwargs",
    [{"max_concurrent": 0}, {"default_timeout": 0}, {"batch_timeout": -1}],
)
def test_scheduler_config_validation(kwargs):
    with pytest.raises(ValueError):
        SchedulerConfig(**kwargs)
