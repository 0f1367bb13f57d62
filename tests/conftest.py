"""PyTest configuration shared by the seqpipe tests.

Every test starts from an empty, already loaded configuration so that a
developer's ~/.seqpipe.toml or SEQPIPE_* environment variables cannot change
the outcome.
"""

import pytest
import logging
import os

import seqpipe.util.config

logger = logging.getLogger(__name__)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Start each test with an empty configuration and no SEQPIPE_* variables."""
    for key in list(os.environ.keys()):
        if key.startswith("SEQPIPE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(seqpipe.util.config, "_config", {})
    yield
    seqpipe.util.config.reset_config()


@pytest.fixture
def config_values(monkeypatch):
    """Fixture that replaces the loaded configuration with the given values."""

    def _set_config(values):
        monkeypatch.setattr(seqpipe.util.config, "_config", dict(values))

    return _set_config
