"""
app/services/run_control.py

Process-wide coordination between the scheduled speed job and
HTTP-triggered runs.

Only one speed run may be in flight per process. Both entry points take
``exclusive_run()`` without blocking and back off when it is held. The
shutdown token is passed to every run so app shutdown stops them at the
next profile boundary.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from app.services.speed_orchestrator import CancellationToken

logger = logging.getLogger(__name__)

_run_lock = threading.Lock()
_shutdown_token = CancellationToken()


def shutdown_token() -> CancellationToken:
    return _shutdown_token


def request_shutdown() -> None:
    """Stop any in-flight speed run at the next profile boundary."""
    _shutdown_token.cancel()
    logger.info("Shutdown requested for in-flight speed runs")


@contextmanager
def exclusive_run() -> Iterator[bool]:
    """
    Yield True when this caller holds the speed-run slot, False when
    another run already does. Never blocks.
    """
    acquired = _run_lock.acquire(blocking=False)
    try:
        yield acquired
    finally:
        if acquired:
            _run_lock.release()
