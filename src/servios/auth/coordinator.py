"""Single-flight token refresh coordination.

:class:`RefreshCoordinator` attaches the current bearer token to outgoing
requests and turns authentication failures into one shared refresh:

1. A failed request whose status is retryable (401 by default) and that
   has not been retried yet is queued as a :class:`PendingRequest`.
2. If no refresh is in flight, the coordinator enters ``REFRESHING`` and
   starts exactly one refresh task. Requests failing while it runs only
   join the queue.
3. When the refresh settles the coordinator returns to ``IDLE`` and drains
   the queue: on success every queued request is replayed, in insertion
   order, with the new token; on failure every queued caller receives the
   refresh error and the logout callback fires once.

Each request is retried at most once. A replayed request that fails again
is propagated to its caller instead of being queued a second time.

The coordinator relies on asyncio's cooperative scheduling: the state check
and transition in :meth:`RefreshCoordinator.handle_error` happen without an
intervening ``await``, so no lock is needed on a single event loop.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Set

from ..utils.http import RequestDescriptor, TransportError
from .models import CredentialAccessors, TokenPair

logger = logging.getLogger(__name__)

AUTHORIZATION = "Authorization"


def bearer(token: str) -> str:
    return f"Bearer {token}"


class RefreshState(str, Enum):
    IDLE = "idle"
    REFRESHING = "refreshing"


@dataclass
class PendingRequest:
    """A request waiting for the in-flight refresh to settle.

    The future is the caller's continuation: it is resolved with the replayed
    request's result or rejected with the replay or refresh error.
    """

    descriptor: RequestDescriptor
    future: asyncio.Future = field(repr=False)

    def resolve(self, value: Any) -> None:
        if not self.future.done():
            self.future.set_result(value)

    def reject(self, error: BaseException) -> None:
        if not self.future.done():
            self.future.set_exception(error)


class RefreshCoordinator:
    """Coordinate token refresh and replay for one client instance.

    :param accessors: Host-supplied credential functions
    :param retry_on_status_codes: Statuses treated as authentication failures
    :param replay: Coroutine function re-sending a descriptor through the
                   client's full pipeline
    """

    def __init__(
        self,
        accessors: CredentialAccessors,
        retry_on_status_codes: Iterable[int],
        replay: Callable[[RequestDescriptor], Awaitable[Any]],
    ):
        self.accessors = accessors
        self.retry_on_status_codes = frozenset(retry_on_status_codes)
        self._replay = replay
        self._state = RefreshState.IDLE
        self._pending: List[PendingRequest] = []
        self._tasks: Set[asyncio.Task] = set()

    @property
    def state(self) -> RefreshState:
        return self._state

    @property
    def is_refreshing(self) -> bool:
        return self._state is RefreshState.REFRESHING

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def attach_token(self, descriptor: RequestDescriptor) -> RequestDescriptor:
        """Request interceptor: set the bearer header from the current token."""
        token = self.accessors.access_token()
        if token:
            descriptor.headers[AUTHORIZATION] = bearer(token)
        return descriptor

    def should_retry(self, error: TransportError) -> bool:
        return (
            error.status_code is not None
            and error.status_code in self.retry_on_status_codes
            and not error.request.retried
        )

    async def handle_error(self, error: TransportError) -> Any:
        """Response error interceptor.

        :param error: Failed call
        :return: Result of the replayed request once a refresh succeeds
        :raises TransportError: When the failure is not retryable, or the
                                replayed request failed
        :raises Exception: Whatever the refresh operation raised, when it failed
        """
        if not self.should_retry(error) or not self.accessors.can_refresh:
            raise error

        descriptor = error.request
        descriptor.retried = True
        pending = PendingRequest(
            descriptor, asyncio.get_running_loop().create_future()
        )
        self._pending.append(pending)
        logger.debug(
            f"Queued {descriptor.method} {descriptor.endpoint} for replay "
            f"after {error.status_code} ({len(self._pending)} pending)"
        )

        if self._state is RefreshState.IDLE:
            self._state = RefreshState.REFRESHING
            self._spawn(self._refresh())

        return await pending.future

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _drain(self) -> List[PendingRequest]:
        pending, self._pending = self._pending, []
        self._state = RefreshState.IDLE
        return pending

    async def _refresh(self) -> None:
        logger.info("Access token rejected, refreshing")
        try:
            tokens = TokenPair.coerce(await self.accessors.refresh())
            self.accessors.store(tokens)
        except Exception as exc:
            pending = self._drain()
            logger.warning(
                f"Token refresh failed, rejecting {len(pending)} pending "
                f"request(s) and logging out: {exc}"
            )
            for record in pending:
                record.reject(exc)
            self._logout()
            return
        except asyncio.CancelledError:
            # cancelled mid-refresh: nothing may stay queued
            for record in self._drain():
                record.future.cancel()
            raise

        pending = self._drain()
        logger.info(f"Token refreshed, replaying {len(pending)} request(s)")
        for record in pending:
            record.descriptor.headers[AUTHORIZATION] = bearer(tokens.access_token)
            self._spawn(self._replay_one(record))

    async def _replay_one(self, record: PendingRequest) -> None:
        try:
            result = await self._replay(record.descriptor)
        except asyncio.CancelledError:
            record.future.cancel()
            raise
        except Exception as exc:
            record.reject(exc)
        else:
            record.resolve(result)

    def _logout(self) -> None:
        if self.accessors.on_logout is None:
            return
        result = self.accessors.on_logout()
        if inspect.isawaitable(result):
            self._spawn(result)

    async def wait_idle(self) -> None:
        """Wait for the in-flight refresh and its replays to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
