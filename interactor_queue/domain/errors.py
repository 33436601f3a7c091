# /interactor_queue/domain/errors.py
from __future__ import annotations


class ConfigurationError(Exception):
    """Fatal misconfiguration. Never retried by the worker."""


class InvalidWorkerError(ConfigurationError):
    def __init__(self, worker: object) -> None:
        name = getattr(worker, "__qualname__", repr(worker))
        super().__init__(
            f"{name} is not a valid worker class. "
            "It must be a subclass of interactor_queue.adapters.system.celery_worker.InteractorWorker."
        )
        self.worker = worker


class UnknownInteractorError(ConfigurationError):
    def __init__(self, identity: object) -> None:
        super().__init__(f"unknown interactor class: {identity!r}")
        self.identity = identity
