# /interactor_queue/adapters/system/celery_worker.py
from __future__ import annotations

import logging
from typing import Any

from celery import Task

from interactor_queue.config import settings
from interactor_queue.domain import entrypoint
from interactor_queue.domain.errors import ConfigurationError

LOG = logging.getLogger("adapter.celery.worker")


class InteractorWorker(Task):
    """Celery task that runs a queued interactor.

    Subclass it to bind interactors to a differently configured task; a
    subclass without its own ``name`` is named after its import path.
    """

    name = settings.WORKER_TASK_NAME
    autoretry_for = (Exception,)
    dont_autoretry_for = (ConfigurationError,)
    retry_backoff = settings.RETRY_BACKOFF
    retry_kwargs = {"max_retries": settings.MAX_RETRIES}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "name" not in cls.__dict__:
            cls.name = f"{cls.__module__}.{cls.__qualname__}"

    def run(self, payload: dict[str, Any]) -> None:
        entrypoint.perform(payload)

    def on_failure(self, exc, task_id, args, kwargs, einfo) -> None:  # type: ignore[no-untyped-def]
        # Celery only gets here once autoretry has given up.
        LOG.warning("worker.failed", extra={"extra": {"task_id": task_id, "task": self.name}})
        job = {"id": task_id, "args": list(args or []), "kwargs": dict(kwargs or {})}
        entrypoint.retries_exhausted(job, exc)
