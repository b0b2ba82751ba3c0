"""
Base resource manager interface.
"""

import asyncio
from typing import Any, Awaitable, Callable, ClassVar, Mapping

from loguru import logger

from management_api.services.errors import ConfigurationError
from management_api.services.factory import RestClientFactory
from management_api.services.options import ErrorFormatter, ResourceOptions
from management_api.services.retry import RetryingExecutor

Callback = Callable[[BaseException | None, Any], None]

CRUD_OPERATIONS = frozenset({"create", "get_all", "get", "update", "delete"})


class ResourceManager:
    """
    Generic CRUD binder for one API resource.

    A manager is fully described by its ``path`` template and
    ``error_formatter``. Its operations delegate to the bound executor:

    - create  -> POST   (collection)
    - get_all -> GET    (collection)
    - get     -> GET
    - update  -> PATCH
    - delete  -> DELETE

    A resource that lacks some of these declares ``operations`` explicitly;
    calling an undeclared operation raises ConfigurationError.

    Every operation takes an optional ``callback(error, result)``. Without
    one it returns an awaitable; with one it schedules a task, reports the
    outcome to the callback and returns the task.
    """

    path: ClassVar[str]
    error_formatter: ClassVar[ErrorFormatter] = ErrorFormatter(message="message", name="error")
    operations: ClassVar[frozenset[str]] = CRUD_OPERATIONS

    def __init__(self, factory: RestClientFactory):
        self.resource: RetryingExecutor = factory(
            self.path, ResourceOptions(error_formatter=self.error_formatter)
        )

    def create(self, data: Any, callback: Callback | None = None) -> Awaitable[Any]:
        self._require("create")
        return self._dispatch(self.resource.create(data), callback)

    def get_all(
        self,
        params: Mapping[str, Any] | None = None,
        callback: Callback | None = None,
    ) -> Awaitable[Any]:
        self._require("get_all")
        return self._dispatch(self.resource.get_all(params), callback)

    def get(self, params: Mapping[str, Any], callback: Callback | None = None) -> Awaitable[Any]:
        self._require("get")
        return self._dispatch(self.resource.get(params), callback)

    def update(
        self,
        params: Mapping[str, Any],
        data: Any,
        callback: Callback | None = None,
    ) -> Awaitable[Any]:
        self._require("update")
        return self._dispatch(self.resource.patch(params, data), callback)

    def delete(self, params: Mapping[str, Any], callback: Callback | None = None) -> Awaitable[Any]:
        self._require("delete")
        return self._dispatch(self.resource.delete(params), callback)

    def _require(self, operation: str) -> None:
        if operation not in self.operations:
            raise ConfigurationError(
                f"{type(self).__name__} does not support '{operation}'"
            )

    @staticmethod
    def _dispatch(coro: Awaitable[Any], callback: Callback | None) -> Awaitable[Any]:
        if callback is None:
            return coro

        task = asyncio.ensure_future(coro)

        def report(done: "asyncio.Future[Any]") -> None:
            if done.cancelled():
                outcome = (asyncio.CancelledError(), None)
            elif done.exception() is not None:
                outcome = (done.exception(), None)
            else:
                outcome = (None, done.result())

            try:
                callback(*outcome)
            except Exception:
                logger.exception(f"Callback {callback!r} raised")

        task.add_done_callback(report)
        return task
