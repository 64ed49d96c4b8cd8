"""One-shot mock responses layered over a real httpx transport.

:class:`MockRouterTransport` wraps another transport. Mocks are registered
per ``(method, url)`` pair and consumed by the first matching request;
requests without a pending mock pass through to the wrapped transport.
"""

import asyncio
import json
import logging
from collections import defaultdict, deque
from typing import Any, Deque, Dict, Optional, Tuple

import httpx

logger = logging.getLogger(__name__)

MockKey = Tuple[str, str]


def _mock_key(method: str, url: httpx.URL) -> MockKey:
    return method.upper(), str(url.copy_with(query=None))


class MockRouterTransport(httpx.AsyncBaseTransport):
    """Transport answering registered mocks and passing the rest through.

    :param transport: Transport used for requests without a pending mock
    :param delay: Seconds to wait before answering a mocked request
    """

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        *,
        delay: float = 0.0,
        sleep=asyncio.sleep,
    ) -> None:
        self._transport = transport or httpx.AsyncHTTPTransport()
        self.delay = delay
        self._sleep = sleep
        self._mocks: Dict[MockKey, Deque[Tuple[int, Any]]] = defaultdict(deque)

    def reply_once(self, method: str, url: httpx.URL, data: Any, status: int = 200):
        """Queue a one-shot response for the next ``method`` request to ``url``.

        Query strings are ignored when matching.
        """
        key = _mock_key(method, url)
        self._mocks[key].append((status, data))
        logger.debug(f"Registered mock {key[0]} {key[1]} -> {status}")

    def pending(self, method: str, url: httpx.URL) -> int:
        return len(self._mocks.get(_mock_key(method, url), ()))

    def reset(self) -> None:
        self._mocks.clear()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        key = _mock_key(request.method, request.url)
        queue = self._mocks.get(key)
        if not queue:
            return await self._transport.handle_async_request(request)

        status, data = queue.popleft()
        if not queue:
            del self._mocks[key]
        if self.delay > 0:
            await self._sleep(self.delay)
        logger.debug(f"Serving mock {key[0]} {key[1]} -> {status}")
        content = b"" if data is None else json.dumps(data).encode("utf-8")
        return httpx.Response(
            status,
            content=content,
            headers={"content-type": "application/json"},
            request=request,
        )

    async def aclose(self) -> None:
        await self._transport.aclose()
