# /interactor_queue/domain/dispatch.py
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from interactor_queue.adapters.system.celery_worker import InteractorWorker
from interactor_queue.config import settings
from interactor_queue.domain.context import Context
from interactor_queue.domain.errors import InvalidWorkerError
from interactor_queue.domain.payload import OPTIONS_KEY, SCHEDULE_OPTIONS_KEY, build_payload
from interactor_queue.domain.registry import InteractorConfig, registry
from interactor_queue.ports.job_queue import JobQueuePort

LOG = logging.getLogger("interactor.dispatch")

_job_queue: JobQueuePort | None = None


def use_job_queue(queue: JobQueuePort | None) -> None:
    """Install the queue used by async_call. ``None`` restores the Celery default."""
    global _job_queue
    _job_queue = queue


def get_job_queue() -> JobQueuePort:
    global _job_queue
    if _job_queue is None:
        # imported lazily so that defining interactors never touches the broker config
        from interactor_queue.adapters.system.celery_app import celery_app
        from interactor_queue.adapters.system.celery_job_queue import CeleryJobQueue

        _job_queue = CeleryJobQueue(celery_app)
    return _job_queue


# ==== Option resolution ====


class ScheduleOptions(BaseModel):
    model_config = ConfigDict(extra="ignore")

    perform_in: float | None = None  # seconds from now, a past delay runs at once
    perform_at: datetime | None = None  # absolute time, datetime or epoch seconds


@dataclass(slots=True, frozen=True)
class Schedule:
    countdown: float | None = 0
    eta: datetime | None = None


def _pick(context: Mapping[str, Any], key: str, configured: Mapping[str, Any] | None, fallback: dict) -> Any:
    override = context.get(key)
    if override is not None:
        return override
    if configured is not None:
        return configured
    return fallback


def resolve_task_options(context: Mapping[str, Any], config: InteractorConfig) -> dict[str, Any]:
    options = _pick(context, OPTIONS_KEY, config.task_options, {"queue": settings.DEFAULT_QUEUE})
    return {str(k): v for k, v in dict(options).items()}


def resolve_schedule(context: Mapping[str, Any], config: InteractorConfig) -> Schedule:
    raw = _pick(context, SCHEDULE_OPTIONS_KEY, config.schedule_options, {"delay": 0})
    options = ScheduleOptions.model_validate({str(k): v for k, v in dict(raw).items()})
    if options.perform_in is not None:
        return Schedule(countdown=options.perform_in)
    if options.perform_at is not None:
        return Schedule(countdown=None, eta=options.perform_at)
    return Schedule()


def resolve_worker(config: InteractorConfig) -> type[InteractorWorker]:
    if config.worker is None:
        return InteractorWorker
    if isinstance(config.worker, type) and issubclass(config.worker, InteractorWorker):
        return config.worker
    raise InvalidWorkerError(config.worker)


# ==== Dispatch ====


def sync_call(interactor_cls: type, context: Mapping[str, Any] | None = None) -> Context:
    interactor = interactor_cls(context)
    interactor.run_strict()
    return interactor.context


def async_call(interactor_cls: type, context: Mapping[str, Any] | None = None) -> Context:
    """Enqueue ``interactor_cls`` and return the submitted context.

    Never raises: a submission error comes back as a failed context whose
    ``error`` is the exception message.
    """
    context = Context(context or {})
    try:
        config = registry.config_for(interactor_cls)
        options = resolve_task_options(context, config)
        schedule = resolve_schedule(context, config)
        payload = build_payload(context, config.identity)
        job_id = get_job_queue().enqueue(
            resolve_worker(config),
            payload,
            options=options,
            countdown=schedule.countdown,
            eta=schedule.eta,
        )
    except Exception as e:
        LOG.warning(
            "interactor.enqueue.failed",
            extra={"extra": {"interactor": interactor_cls.__qualname__, "error": str(e)}},
        )
        return Context(context).mark_failed(error=str(e))

    LOG.info("interactor.enqueued", extra={"extra": {"interactor": config.identity, "job_id": job_id}})
    return Context(context)
