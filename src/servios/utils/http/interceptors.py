"""Request and response interceptors.

Interceptors are functions invoked around every request a client issues,
in registration order:

- request interceptors receive the :class:`RequestDescriptor` and return it
  (possibly modified) before it is sent;
- response interceptors receive either the decoded response payload
  (``on_fulfilled``) or the :class:`TransportError` (``on_rejected``).
  A rejection handler may recover by returning a value, or re-raise.

Handlers may be plain functions or coroutine functions.

Examples:
    >>> manager = InterceptorManager()
    >>> manager.request.use(lambda req: req)
    0
"""

import inspect
import logging
from typing import Any, Callable, Dict, Generic, Iterator, Optional, Tuple, TypeVar

from .request import RequestDescriptor, TransportError

logger = logging.getLogger(__name__)

H = TypeVar("H")

RequestHandler = Callable[[RequestDescriptor], Any]
FulfilledHandler = Callable[[Any], Any]
RejectedHandler = Callable[[TransportError], Any]


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class _Registry(Generic[H]):
    """Ordered handler registry with stable ids for ejection."""

    def __init__(self):
        self._handlers: Dict[int, H] = {}
        self._next_id = 0

    def _add(self, handler: H) -> int:
        handler_id = self._next_id
        self._handlers[handler_id] = handler
        self._next_id += 1
        return handler_id

    def eject(self, handler_id: int) -> None:
        """Remove a previously registered handler; unknown ids are ignored."""
        self._handlers.pop(handler_id, None)

    def clear(self) -> None:
        self._handlers.clear()

    def __iter__(self) -> Iterator[H]:
        return iter(list(self._handlers.values()))

    def __len__(self) -> int:
        return len(self._handlers)


class RequestInterceptors(_Registry[RequestHandler]):
    def use(self, handler: RequestHandler) -> int:
        """Register a request interceptor.

        :param handler: Function taking and returning a descriptor
        :return: Handler id for :meth:`eject`
        """
        return self._add(handler)

    async def run(self, descriptor: RequestDescriptor) -> RequestDescriptor:
        for handler in self:
            result = await _maybe_await(handler(descriptor))
            if result is not None:
                descriptor = result
        return descriptor


class ResponseInterceptors(
    _Registry[Tuple[Optional[FulfilledHandler], Optional[RejectedHandler]]]
):
    def use(
        self,
        on_fulfilled: Optional[FulfilledHandler] = None,
        on_rejected: Optional[RejectedHandler] = None,
    ) -> int:
        """Register a response interceptor.

        :param on_fulfilled: Called with the decoded payload of a 2xx response
        :param on_rejected: Called with the transport error of a failed call
        :return: Handler id for :meth:`eject`
        """
        return self._add((on_fulfilled, on_rejected))

    async def run(self, outcome: Any, error: Optional[TransportError]) -> Any:
        """Thread a call outcome through the registered handlers.

        Mirrors a promise chain: a rejection handler that returns a value
        turns the outcome into a success for the remaining handlers, one that
        raises a :class:`TransportError` passes the new error along. Any other
        exception propagates immediately.

        :raises TransportError: If the call still failed after all handlers
        """
        for on_fulfilled, on_rejected in self:
            if error is None:
                if on_fulfilled is not None:
                    outcome = await _maybe_await(on_fulfilled(outcome))
                continue
            if on_rejected is None:
                continue
            try:
                outcome = await _maybe_await(on_rejected(error))
                error = None
            except TransportError as exc:
                error = exc
        if error is not None:
            raise error
        return outcome


class InterceptorManager:
    """Pair of interceptor registries owned by one client."""

    def __init__(self):
        self.request = RequestInterceptors()
        self.response = ResponseInterceptors()
