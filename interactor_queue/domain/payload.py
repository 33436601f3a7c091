# /interactor_queue/domain/payload.py
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

IDENTITY_KEY = "interactor_class"
OPTIONS_KEY = "celery_options"
SCHEDULE_OPTIONS_KEY = "celery_schedule_options"

# Consumed at enqueue time, never sent over the wire.
LOCAL_KEYS = frozenset({OPTIONS_KEY, SCHEDULE_OPTIONS_KEY})


def build_payload(context: Mapping[Any, Any], identity: str) -> dict[str, Any]:
    """Wire form of a context: string keys, options dropped, identity added."""
    payload = {str(k): v for k, v in context.items()}
    payload[IDENTITY_KEY] = identity
    for key in LOCAL_KEYS:
        payload.pop(key, None)
    return payload


def strip_identity(payload: Mapping[Any, Any]) -> dict[str, Any]:
    return {str(k): v for k, v in payload.items() if str(k) != IDENTITY_KEY}
