"""
tests/conftest.py

Shared fixtures. No database is touched anywhere in the test suite.
"""

from __future__ import annotations

import pytest

from app.config import get_scheduler_settings, get_speed_settings
from app.services import run_control
from app.services.speed_orchestrator import CancellationToken
from tests.fakes import InMemoryContributionStore


@pytest.fixture()
def store() -> InMemoryContributionStore:
    return InMemoryContributionStore()


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_speed_settings.cache_clear()
    get_scheduler_settings.cache_clear()
    yield
    get_speed_settings.cache_clear()
    get_scheduler_settings.cache_clear()

@pytest.fixture(autouse=True)
def _fresh_shutdown_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(run_control, "_shutdown_token", CancellationToken())
