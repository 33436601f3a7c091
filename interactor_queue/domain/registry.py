# /interactor_queue/domain/registry.py
from __future__ import annotations

import importlib
import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from interactor_queue.domain.errors import UnknownInteractorError

LOG = logging.getLogger("interactor.registry")

ExceptionHandler = Callable[[BaseException], Any]
ExhaustionHandler = Callable[[Mapping[str, Any], BaseException], Any]


def identity_of(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


@dataclass(slots=True, frozen=True)
class InteractorConfig:
    """Per-interactor configuration, fixed when the class is defined."""

    interactor: type
    identity: str
    worker: type | None = None
    task_options: Mapping[str, Any] | None = None
    schedule_options: Mapping[str, Any] | None = None
    exception_handler: ExceptionHandler | None = None
    retries_exhausted_handler: ExhaustionHandler | None = None


class InteractorRegistry:
    def __init__(self) -> None:
        self._by_identity: dict[str, InteractorConfig] = {}
        self._by_type: dict[type, InteractorConfig] = {}

    def register(self, config: InteractorConfig) -> InteractorConfig:
        replaced = self._by_identity.get(config.identity)
        if replaced is not None:
            self._by_type.pop(replaced.interactor, None)
            LOG.debug("registry.replaced", extra={"extra": {"interactor": config.identity}})
        self._by_identity[config.identity] = config
        self._by_type[config.interactor] = config
        return config

    def configs(self) -> Iterator[InteractorConfig]:
        return iter(list(self._by_identity.values()))

    def lookup(self, identity: str) -> InteractorConfig | None:
        return self._by_identity.get(identity)

    def config_for(self, cls: type) -> InteractorConfig:
        config = self._by_type.get(cls)
        if config is None:
            raise UnknownInteractorError(identity_of(cls))
        return config

    def resolve(self, identity: Any) -> InteractorConfig:
        if not isinstance(identity, str) or not identity:
            raise UnknownInteractorError(identity)
        config = self.lookup(identity)
        if config is None:
            self._import_owner(identity)
            config = self.lookup(identity)
        if config is None:
            raise UnknownInteractorError(identity)
        return config

    @staticmethod
    def _import_owner(identity: str) -> None:
        # "pkg.mod.Outer.Inner": try the longest importable module prefix.
        parts = identity.split(".")
        for end in range(len(parts) - 1, 0, -1):
            candidate = ".".join(parts[:end])
            try:
                importlib.import_module(candidate)
            except ModuleNotFoundError as e:
                if not e.name or candidate == e.name or candidate.startswith(e.name + "."):
                    continue
                # the module exists but one of its dependencies does not
                raise UnknownInteractorError(identity) from e
            except ImportError as e:
                raise UnknownInteractorError(identity) from e
            return


registry = InteractorRegistry()
