# /interactor_queue/domain/context.py
from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any, NoReturn


@dataclass(slots=True, frozen=True)
class Ok:
    pass


@dataclass(slots=True, frozen=True)
class Failed:
    payload: dict[str, Any] = field(default_factory=dict)


class Failure(Exception):
    """Raised by Context.fail() to halt the running interactor."""

    def __init__(self, context: Context) -> None:
        super().__init__(context.error or "interactor failed")
        self.context = context


class Context(MutableMapping[str, Any]):
    """Input/output bag of one interactor invocation.

    Keys are always strings. The terminal state lives in ``outcome`` and only
    ever moves from ``Ok`` to ``Failed``.
    """

    def __init__(self, data: Mapping[Any, Any] | None = None, **kwargs: Any) -> None:
        self._data: dict[str, Any] = {}
        self._outcome: Ok | Failed = Ok()
        self.update(data or {})
        self.update(kwargs)

    @classmethod
    def build(cls, value: Context | Mapping[Any, Any] | None = None) -> Context:
        if isinstance(value, Context):
            return value
        return cls(value)

    # --- mapping protocol ---

    def __getitem__(self, key: Any) -> Any:
        return self._data[str(key)]

    def __setitem__(self, key: Any, value: Any) -> None:
        self._data[str(key)] = value

    def __delitem__(self, key: Any) -> None:
        del self._data[str(key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return str(key) in self._data

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(name) from None

    def __repr__(self) -> str:
        return f"Context({self._data!r}, outcome={self._outcome!r})"

    # --- derived views ---

    def merge(self, other: Mapping[Any, Any]) -> Context:
        merged = Context(self._data)
        merged.update(other)
        return merged

    def without(self, *keys: Any) -> Context:
        drop = {str(k) for k in keys}
        return Context({k: v for k, v in self._data.items() if k not in drop})

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    # --- terminal state ---

    @property
    def outcome(self) -> Ok | Failed:
        return self._outcome

    @property
    def success(self) -> bool:
        return isinstance(self._outcome, Ok)

    @property
    def failure(self) -> bool:
        return isinstance(self._outcome, Failed)

    @property
    def error(self) -> Any:
        return self._data.get("error")

    def mark_failed(self, **payload: Any) -> Context:
        self.update(payload)
        previous = self._outcome.payload if isinstance(self._outcome, Failed) else {}
        self._outcome = Failed({**previous, **payload})
        return self

    def fail(self, **payload: Any) -> NoReturn:
        self.mark_failed(**payload)
        raise Failure(self)
