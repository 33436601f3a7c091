# /interactor_queue/config.py
from __future__ import annotations

import os

from pydantic import BaseModel


def _csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _optional_int(value: str | None) -> int | None:
    return int(value) if value else None


class Settings(BaseModel):
    # Celery / Redis
    BROKER_URL: str = os.getenv("BROKER_URL", os.getenv("REDIS_URL", "redis://localhost:6379/0"))
    RESULT_BACKEND: str | None = os.getenv("RESULT_BACKEND")
    INTERACTOR_MODULES: list[str] = _csv(os.getenv("INTERACTOR_MODULES", ""))

    # Dispatch defaults
    DEFAULT_QUEUE: str = os.getenv("DEFAULT_QUEUE", "default")
    WORKER_TASK_NAME: str = os.getenv("WORKER_TASK_NAME", "interactor_queue.perform")

    # Worker behaviour
    MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "25"))
    RETRY_BACKOFF: bool = os.getenv("RETRY_BACKOFF", "true").lower() == "true"
    # Hard kill in seconds. A killed task is neither retried nor passed to on_failure.
    TASK_TIME_LIMIT: int | None = _optional_int(os.getenv("TASK_TIME_LIMIT"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
