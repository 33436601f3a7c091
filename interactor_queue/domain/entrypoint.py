# /interactor_queue/domain/entrypoint.py
"""Execute-time and exhaustion-time translation for queued interactors."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from interactor_queue.domain.payload import IDENTITY_KEY, strip_identity
from interactor_queue.domain.registry import InteractorRegistry, registry as default_registry

LOG = logging.getLogger("interactor.worker")


def perform(payload: Mapping[str, Any], registry: InteractorRegistry | None = None) -> None:
    """Run the interactor named in ``payload`` synchronously.

    Unknown identities raise ``UnknownInteractorError``. Exceptions from the run
    go to the interactor's exception handler when it has one, otherwise they
    propagate so the queue's retry policy applies.
    """
    config = (registry or default_registry).resolve(payload.get(IDENTITY_KEY))
    LOG.info("interactor.perform.start", extra={"extra": {"interactor": config.identity}})
    try:
        config.interactor.sync_call(strip_identity(payload))
    except Exception as e:
        if config.exception_handler is None:
            LOG.warning(
                "interactor.perform.error",
                extra={"extra": {"interactor": config.identity, "error": str(e)}},
            )
            raise
        LOG.info(
            "interactor.perform.handled",
            extra={"extra": {"interactor": config.identity, "error": type(e).__name__}},
        )
        config.exception_handler(e)
        return
    LOG.info("interactor.perform.done", extra={"extra": {"interactor": config.identity}})


def retries_exhausted(
    job: Mapping[str, Any], exc: BaseException, registry: InteractorRegistry | None = None
) -> None:
    """Called once the queue gives up on a job. ``job`` is ``{"args": [payload, ...]}``."""
    args = job.get("args") or []
    if not args:
        return
    first = args[0]
    identity = first.get(IDENTITY_KEY) if isinstance(first, Mapping) else None
    if not identity:
        return

    config = (registry or default_registry).resolve(identity)
    LOG.error(
        "interactor.retries_exhausted",
        extra={"extra": {"interactor": config.identity, "error": str(exc)}},
    )
    if config.retries_exhausted_handler is None:
        raise exc
    config.retries_exhausted_handler(job, exc)
