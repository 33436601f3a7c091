# tests/test_logging_cfg.py
from __future__ import annotations

import io
import json
import logging

from interactor_queue.adapters.system.logging_cfg import JSONHandler


def test_json_handler_flattens_extra() -> None:
    stream = io.StringIO()
    log = logging.getLogger("test.logging_cfg")
    log.propagate = False
    log.addHandler(JSONHandler(stream=stream))
    try:
        log.warning("interactor.enqueue.failed", extra={"extra": {"interactor": "Foo", "error": "boom"}})
    finally:
        log.handlers.clear()

    line = json.loads(stream.getvalue())
    assert line == {
        "level": "WARNING",
        "msg": "interactor.enqueue.failed",
        "logger": "test.logging_cfg",
        "interactor": "Foo",
        "error": "boom",
    }
