"""
Shared pytest fixtures for resilience-config tests.

This module provides:
- Settings cache cleanup for test isolation
- A fixed CPU count so thread-pool defaults are deterministic
- A sample settings TOML file
"""

import os
import sys
from pathlib import Path

import pytest
import structlog

# Ensure resilience_config package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from resilience_config.config.settings import clear_settings_cache


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Loggers configured by one test must not write to another test's captured streams."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture(autouse=True)
def _clean_resilience_env(monkeypatch):
    """Drop RESILIENCE_* variables leaking in from the host environment."""
    for key in list(os.environ):
        if key.startswith("RESILIENCE_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def cpu_count(monkeypatch):
    """Pin ``os.cpu_count()`` to 8: default core pool size 7, max 8."""
    monkeypatch.setattr("os.cpu_count", lambda: 8)
    return 8


SAMPLE_TOML = """\
log_level = "DEBUG"

[bulkhead.configs.default]
max_concurrent_calls = 3
max_wait_duration = "50ms"

[bulkhead.instances.backendA]
base_config = "default"
max_concurrent_calls = 10
event_consumer_buffer_size = 15

[bulkhead.instances.backendB]
maxWaitDuration = "200ms"

[circuit_breaker.configs.shared]
failure-rate-threshold = 25
sliding_window_type = "TIME_BASED"

[circuit_breaker.instances.payments]
base_config = "shared"
wait_duration_in_open_state = "5s"

[retry.instances.orders]
max_attempts = 5
wait_duration = "1s"

[endpoints.rate_limiter]
enabled = false
"""


@pytest.fixture
def sample_toml(tmp_path: Path) -> Path:
    path = tmp_path / "resilience.toml"
    path.write_text(SAMPLE_TOML)
    return path
