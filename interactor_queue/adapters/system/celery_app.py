# /interactor_queue/adapters/system/celery_app.py
from __future__ import annotations

import logging
from typing import Any

from celery import Celery, signals

from interactor_queue.adapters.system.celery_worker import InteractorWorker
from interactor_queue.adapters.system.logging_cfg import configure_logger
from interactor_queue.config import settings
from interactor_queue.domain.registry import registry

LOG = logging.getLogger("adapter.celery")

celery_app = Celery(
    "interactor_queue",
    broker=settings.BROKER_URL,
    backend=settings.RESULT_BACKEND,
    include=settings.INTERACTOR_MODULES,
)
celery_app.conf.update(
    task_default_queue=settings.DEFAULT_QUEUE,
    task_serializer="json",
    accept_content=["json"],
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    task_time_limit=settings.TASK_TIME_LIMIT,
)


def register_worker(worker: type[InteractorWorker], app: Celery | None = None) -> InteractorWorker:
    """Register a worker class as a Celery task, once."""
    app = app or celery_app
    task = app.tasks.get(worker.name)
    if type(task) is worker:
        return task
    task = worker()
    # autoretry writes the backoff countdown into this dict on every retry
    task.retry_kwargs = dict(worker.retry_kwargs)
    task = app.register_task(task)
    LOG.info("worker.registered", extra={"extra": {"task": worker.name}})
    return task


default_worker = register_worker(InteractorWorker)


@signals.setup_logging.connect
def _setup_logging(loglevel: Any = None, **_: Any) -> None:
    configure_logger(loglevel or settings.LOG_LEVEL)


@signals.worker_init.connect
def _register_bound_workers(**_: Any) -> None:
    for config in registry.configs():
        if config.worker is not None:
            register_worker(config.worker)
