# /interactor_queue/ports/job_queue.py
from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Protocol


class JobQueuePort(Protocol):
    def enqueue(
        self,
        worker: type,
        payload: Mapping[str, Any],
        *,
        options: Mapping[str, Any] | None = None,
        countdown: float | None = None,
        eta: datetime | None = None,
    ) -> str:
        """Submit ``payload`` to ``worker`` and return a provider job id. Raises on failure."""
