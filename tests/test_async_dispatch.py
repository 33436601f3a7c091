# tests/test_async_dispatch.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from interactor_queue.adapters.system.celery_worker import InteractorWorker
from interactor_queue.domain.context import Context
from interactor_queue.domain.dispatch import resolve_worker
from interactor_queue.domain.errors import InvalidWorkerError
from interactor_queue.domain.payload import IDENTITY_KEY, build_payload, strip_identity
from interactor_queue.domain.registry import InteractorConfig
from tests.fakes import CALLS, BoundToReportsWorker, RecordCall, ReportsWorker, SendReport


def test_defaults_to_default_queue_without_delay(job_queue) -> None:
    RecordCall.async_call({"x": 1})
    job = job_queue.last
    assert job.options == {"queue": "default"}
    assert job.countdown == 0
    assert job.eta is None
    assert job.worker is InteractorWorker


def test_perform_in_becomes_countdown(job_queue) -> None:
    RecordCall.async_call({"x": 1, "celery_schedule_options": {"perform_in": 30}})
    assert job_queue.last.countdown == 30
    assert job_queue.last.eta is None


def test_perform_at_becomes_eta(job_queue) -> None:
    when = datetime.now(timezone.utc) + timedelta(hours=1)
    RecordCall.async_call({"celery_schedule_options": {"perform_at": when}})
    assert job_queue.last.eta == when
    assert job_queue.last.countdown is None


def test_perform_at_accepts_epoch_seconds(job_queue) -> None:
    RecordCall.async_call({"celery_schedule_options": {"perform_at": 2_000_000_000}})
    assert job_queue.last.eta == datetime.fromtimestamp(2_000_000_000, tz=timezone.utc)


def test_perform_in_wins_over_perform_at(job_queue) -> None:
    RecordCall.async_call({"celery_schedule_options": {"perform_in": 5, "perform_at": 2_000_000_000}})
    assert job_queue.last.countdown == 5
    assert job_queue.last.eta is None


def test_class_defaults_apply_when_context_has_no_overrides(job_queue) -> None:
    SendReport.async_call({"report_id": 1})
    assert job_queue.last.options == {"queue": "reports", "priority": 5}
    assert job_queue.last.countdown == 60


def test_per_call_options_override_class_defaults(job_queue) -> None:
    SendReport.async_call(
        {
            "report_id": 1,
            "celery_options": {"queue": "urgent"},
            "celery_schedule_options": {"perform_in": 0},
        }
    )
    assert job_queue.last.options == {"queue": "urgent"}
    assert job_queue.last.countdown == 0


def test_payload_carries_identity_but_no_local_options(job_queue) -> None:
    RecordCall.async_call(
        Context(
            {
                "x": 1,
                "celery_options": {"queue": "q"},
                "celery_schedule_options": {"perform_in": 1},
            }
        )
    )
    payload = job_queue.last.payload
    assert payload == {"x": 1, IDENTITY_KEY: "tests.fakes.RecordCall"}
    assert all(isinstance(k, str) for k in payload)
    assert all(not isinstance(v, type) for v in payload.values())


def test_returns_submitted_context_without_running(job_queue) -> None:
    given = Context(x=1)
    ctx = RecordCall.async_call(given)
    assert ctx is not given
    assert ctx.to_dict() == {"x": 1}
    assert ctx.success
    assert CALLS == []


def test_enqueue_failure_becomes_failed_context(failing_job_queue) -> None:
    ctx = RecordCall.async_call({"x": 1})
    assert ctx.failure
    assert ctx.error == "boom"
    assert ctx["x"] == 1


def test_negative_perform_in_is_enqueued_as_is(job_queue) -> None:
    ctx = RecordCall.async_call({"x": 1, "celery_schedule_options": {"perform_in": -5}})
    assert ctx.success
    assert job_queue.last.countdown == -5
    assert job_queue.last.eta is None


def test_malformed_schedule_options_become_failed_context(job_queue) -> None:
    ctx = RecordCall.async_call({"celery_schedule_options": {"perform_in": "soon"}})
    assert ctx.failure
    assert "perform_in" in ctx.error
    assert job_queue.jobs == []


def test_custom_worker_binding_is_used(job_queue) -> None:
    BoundToReportsWorker.async_call({"x": 1})
    assert job_queue.last.worker is ReportsWorker


def test_resolve_worker_rejects_non_worker_types() -> None:
    config = InteractorConfig(interactor=RecordCall, identity="x.RecordCall", worker=dict)
    with pytest.raises(InvalidWorkerError, match="dict"):
        resolve_worker(config)


def test_build_payload_stringifies_keys_and_strip_identity_reverses_it() -> None:
    payload = build_payload({1: "a", "celery_options": {}}, "pkg.Thing")
    assert payload == {"1": "a", IDENTITY_KEY: "pkg.Thing"}
    assert strip_identity(payload) == {"1": "a"}
