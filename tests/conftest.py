"""
Pytest fixtures for the voucher kernel test suite.

Provides:
- In-memory SQLite sessions (fresh schema per test)
- Deterministic clock and scripted random sources
- Captured structured logs
"""

import json
import logging
import random
from datetime import datetime, timezone
from io import StringIO
from typing import Generator

import pytest
from sqlalchemy.orm import Session

from voucher_kernel.db.engine import (
    create_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from voucher_kernel.domain.clock import DeterministicClock
from voucher_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from voucher_kernel.services.settings_service import SettingsService
from voucher_kernel.services.voucher_service import VoucherService

TEST_ACTOR_ID = "test-actor"


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture voucher_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, voucher_service):
            voucher_service.create_draft(...)
            logs = captured_logs()
            assert any(r["message"] == "voucher_created" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("voucher_kernel")
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """Fresh in-memory database and session for one test."""
    init_engine_from_url("sqlite://")
    create_tables()
    sess = get_session()
    yield sess
    try:
        sess.close()
    finally:
        reset_engine()


# =============================================================================
# Time and randomness
# =============================================================================


class ScriptedRandom(random.Random):
    """random.Random whose ``randrange`` replays a fixed script.

    After the script is exhausted the last value repeats.
    """

    def __init__(self, values):
        super().__init__(0)
        self._values = list(values)
        self._pos = 0

    def randrange(self, *args, **kwargs):
        value = self._values[min(self._pos, len(self._values) - 1)]
        self._pos += 1
        return value


@pytest.fixture
def deterministic_clock():
    """Clock fixed at 2024-03-15 09:00 UTC."""
    return DeterministicClock(datetime(2024, 3, 15, 9, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def scripted_random():
    """Factory for ScriptedRandom: ``scripted_random(1, 1, 2)``."""
    return lambda *values: ScriptedRandom(values)


# =============================================================================
# Service fixtures
# =============================================================================


@pytest.fixture
def settings_service(session):
    return SettingsService(session)


@pytest.fixture
def voucher_service(session, deterministic_clock, settings_service):
    return VoucherService(session, deterministic_clock, settings=settings_service)

