# /interactor_queue/adapters/system/celery_job_queue.py
from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from celery import Celery

from interactor_queue.adapters.system.celery_app import register_worker

LOG = logging.getLogger("adapter.celery.queue")


class CeleryJobQueue:
    def __init__(self, app: Celery) -> None:
        self._app = app

    def enqueue(
        self,
        worker: type,
        payload: Mapping[str, Any],
        *,
        options: Mapping[str, Any] | None = None,
        countdown: float | None = None,
        eta: datetime | None = None,
    ) -> str:
        task = register_worker(worker, self._app)
        schedule: dict[str, Any] = {"eta": eta} if eta is not None else {"countdown": countdown or 0}
        result = task.apply_async(args=[dict(payload)], **schedule, **dict(options or {}))
        LOG.info(
            "job.enqueued",
            extra={"extra": {"task": task.name, "job_id": result.id, **schedule}},
        )
        return result.id
