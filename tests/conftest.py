from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING
from unittest.mock import Mock

import pytest

from tests.helpers import RecordingScheduler, ThreadScheduler

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def mock_callback() -> Mock:
    """Create a mock callback function for testing callbacks."""
    return Mock()


@pytest.fixture
def thread_pool() -> Generator[ThreadPoolExecutor, None, None]:
    """Create a thread pool with two workers, shut down after the
    test."""
    pool = ThreadPoolExecutor(max_workers=2)
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def single_thread() -> Generator[ThreadPoolExecutor, None, None]:
    """Create a single worker thread, shut down after the test."""
    pool = ThreadPoolExecutor(max_workers=1)
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def scheduler() -> Generator[ThreadScheduler, None, None]:
    """Create a thread-based scheduler, shut down after the test."""
    scheduler = ThreadScheduler()
    yield scheduler
    scheduler.shutdown()


@pytest.fixture
def recording_scheduler() -> RecordingScheduler:
    """Create a scheduler recording the scheduled tasks."""
    return RecordingScheduler()
