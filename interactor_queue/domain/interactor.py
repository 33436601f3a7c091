# /interactor_queue/domain/interactor.py
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar

from interactor_queue.domain import dispatch
from interactor_queue.domain.context import Context, Failure
from interactor_queue.domain.registry import InteractorConfig, identity_of, registry


class Interactor:
    """A single-purpose command object.

    Subclasses implement ``execute`` and work on ``self.context``. Queue
    behaviour is configured with class attributes::

        class SendInvoice(Interactor):
            celery_options = {"queue": "billing"}
            celery_schedule_options = {"perform_in": 30}

            def execute(self):
                ...

            @classmethod
            def handle_celery_exception(cls, exc): ...

            @classmethod
            def handle_celery_retries_exhausted(cls, job, exc): ...
    """

    celery_worker: ClassVar[type | None] = None
    celery_options: ClassVar[Mapping[str, Any] | None] = None
    celery_schedule_options: ClassVar[Mapping[str, Any] | None] = None

    def __init_subclass__(cls, abstract: bool = False, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if abstract:
            return
        config = InteractorConfig(
            interactor=cls,
            identity=identity_of(cls),
            worker=cls.celery_worker,
            task_options=cls.celery_options,
            schedule_options=cls.celery_schedule_options,
            exception_handler=getattr(cls, "handle_celery_exception", None),
            retries_exhausted_handler=getattr(cls, "handle_celery_retries_exhausted", None),
        )
        dispatch.resolve_worker(config)  # rejects a bad binding before it is registered
        registry.register(config)

    def __init__(self, context: Mapping[str, Any] | None = None) -> None:
        self.context = Context.build(context)

    # --- hooks ---

    def before(self) -> None:
        pass

    def after(self) -> None:
        pass

    def execute(self) -> None:
        raise NotImplementedError(f"{type(self).__name__} must implement execute()")

    def rollback(self) -> None:
        pass

    # --- running ---

    def run_strict(self) -> None:
        try:
            self.before()
            self.execute()
            self.after()
        except Failure:
            self.rollback()
            raise

    def run(self) -> None:
        try:
            self.run_strict()
        except Failure:
            pass

    @classmethod
    def call(cls, context: Mapping[str, Any] | None = None) -> Context:
        interactor = cls(context)
        interactor.run()
        return interactor.context

    @classmethod
    def call_strict(cls, context: Mapping[str, Any] | None = None) -> Context:
        return dispatch.sync_call(cls, context)

    @classmethod
    def sync_call(cls, context: Mapping[str, Any] | None = None) -> Context:
        return dispatch.sync_call(cls, context)

    @classmethod
    def async_call(cls, context: Mapping[str, Any] | None = None) -> Context:
        return dispatch.async_call(cls, context)


class AsyncInteractor(Interactor, abstract=True):
    """Interactor whose ``call``/``call_strict`` enqueue instead of running inline."""

    @classmethod
    def call(cls, context: Mapping[str, Any] | None = None) -> Context:
        return cls.async_call(context)

    @classmethod
    def call_strict(cls, context: Mapping[str, Any] | None = None) -> Context:
        return cls.async_call(context)
