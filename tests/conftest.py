# tests/conftest.py
from __future__ import annotations

import pytest

from interactor_queue.domain.dispatch import use_job_queue
from tests import fakes


@pytest.fixture(autouse=True)
def _reset_recorders():
    fakes.CALLS.clear()
    fakes.HANDLED.clear()
    fakes.EXHAUSTED.clear()
    yield


@pytest.fixture
def job_queue():
    queue = fakes.FakeJobQueue()
    use_job_queue(queue)
    yield queue
    use_job_queue(None)


@pytest.fixture
def failing_job_queue():
    queue = fakes.FakeJobQueue(error=RuntimeError("boom"))
    use_job_queue(queue)
    yield queue
    use_job_queue(None)
