"""Request executor built on httpx.

:class:`BaseService` issues one logical request at a time through an
``httpx.AsyncClient``, runs the client's interceptors around it and
normalizes every transport failure through the configured error transform,
so callers only ever see the decoded response body or a
:class:`~servios.exceptions.RequestError`.

Examples:
    >>> async with BaseService(base_url="https://api.example.com") as svc:
    ...     users = await svc.get("users", params={"active": True})
"""

import logging
from typing import Any, Dict, Optional, Type

import httpx

from ..config.settings import ClientConfig
from ..exceptions import RequestError
from ..utils.http import (
    InterceptorManager,
    MockRouterTransport,
    RequestDescriptor,
    TransportError,
    create_timeout,
    decode_response,
)

logger = logging.getLogger(__name__)

_REDACTED_HEADERS = ("authorization",)


def default_transform_error(error: TransportError) -> Any:
    """Return the response payload, or a generic message when there is none."""
    if error.data is not None:
        return error.data
    return {"message": error.message or "Network error"}


class BaseService:
    """Client issuing requests against one base address.

    The service owns its ``httpx.AsyncClient``. The transport is always
    wrapped in a :class:`MockRouterTransport` so mock responses can be
    registered at any time; unmocked requests pass straight through.

    :param config: Client configuration; built from ``options`` if omitted
    :type config: Optional[ClientConfig]
    :param transport: Optional httpx transport to send real requests through
    :type transport: Optional[httpx.AsyncBaseTransport]
    :param options: Field values for ``config_class`` when no config is given
    :raises ConfigurationError: When no base address is configured
    """

    config_class: Type[ClientConfig] = ClientConfig

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **options: Any,
    ):
        if config is None:
            config = self.config_class(**options)
        elif options or not isinstance(config, self.config_class):
            config = self.config_class(**{**config.model_dump(), **options})
        self.config = config
        self.interceptors = InterceptorManager()
        self._mock = MockRouterTransport(transport, delay=config.mock_delay)
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=create_timeout(config.timeout),
            headers=config.headers,
            transport=self._mock,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        """The underlying httpx client."""
        return self._client

    @property
    def mock(self) -> MockRouterTransport:
        return self._mock

    def register_mock(
        self, method: str, endpoint: str, data: Any, status: int = 200
    ) -> None:
        """Install a one-shot mocked response for ``method`` on ``endpoint``.

        :param method: HTTP method the mock answers
        :param endpoint: Endpoint relative to the base address
        :param data: JSON payload of the mocked response
        :param status: Status code of the mocked response
        """
        url = self._client.build_request(method.upper(), endpoint).url
        self._mock.reply_once(method, url, data, status)

    def handle_error(self, error: TransportError) -> BaseException:
        """Normalize a transport error through the configured transform.

        :param error: Error raised by the transport layer
        :return: Exception to raise to the caller; the transform's result
                 wrapped in :class:`RequestError` unless it already is an
                 exception
        """
        transform = self.config.transform_error or default_transform_error
        payload = transform(error)
        if isinstance(payload, BaseException):
            return payload
        return RequestError(payload, status_code=error.status_code)

    async def dispatch(self, descriptor: RequestDescriptor) -> Any:
        """Send one request through the interceptor chain.

        :param descriptor: Request to send
        :return: Decoded response body, or a value produced by a response
                 interceptor that recovered from a failure
        :raises TransportError: When the call failed and no interceptor recovered
        """
        descriptor = await self.interceptors.request.run(descriptor)
        request = descriptor.build(self._client)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"=== SEND: {request.method} {request.url}")
            for k, v in request.headers.items():
                if k.lower() in _REDACTED_HEADERS:
                    logger.debug(f"  {k}: [REDACTED]")
                else:
                    logger.debug(f"  {k}: {v}")

        outcome: Any = None
        error: Optional[TransportError] = None
        try:
            response = await self._client.send(request)
            response.raise_for_status()
            outcome = decode_response(response)
        except httpx.HTTPError as exc:
            error = TransportError.from_httpx(exc, descriptor)
            logger.debug(
                f"{request.method} {request.url} failed: "
                f"status={error.status_code} error={error.message}"
            )
        return await self.interceptors.response.run(outcome, error)

    async def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        data: Any = None,
        *,
        headers: Optional[Dict[str, str]] = None,
        is_mock: bool = False,
        mock_data: Any = None,
        mock_status: int = 200,
    ) -> Any:
        """Issue one logical request and return the decoded response body.

        :param method: HTTP method (GET, POST, PUT, PATCH, DELETE)
        :param endpoint: Endpoint relative to the base address
        :param params: Optional query parameters
        :param data: Optional JSON body, ignored for GET and DELETE
        :param headers: Optional per-request headers
        :param is_mock: Use ``mock_data`` even when the client is not in mock mode
        :param mock_data: Payload to answer this call with in mock mode
        :param mock_status: Status code for the mocked response
        :return: Decoded response body (``None`` for an empty body)
        :raises RequestError: On transport failure or non-2xx response
        """
        if (is_mock or self.config.use_mock) and mock_data is not None:
            self.register_mock(method, endpoint, mock_data, mock_status)

        descriptor = RequestDescriptor(
            method, endpoint, params=params, data=data, headers=dict(headers or {})
        )
        try:
            return await self.dispatch(descriptor)
        except TransportError as exc:
            error = self.handle_error(exc)
            if error is exc:
                raise
            raise error from exc

    async def get(self, endpoint: str, params=None, **kwargs) -> Any:
        return await self.request("GET", endpoint, params, **kwargs)

    async def post(self, endpoint: str, data: Any = None, params=None, **kwargs) -> Any:
        return await self.request("POST", endpoint, params, data, **kwargs)

    async def put(self, endpoint: str, data: Any = None, params=None, **kwargs) -> Any:
        return await self.request("PUT", endpoint, params, data, **kwargs)

    async def delete(self, endpoint: str, params=None, **kwargs) -> Any:
        return await self.request("DELETE", endpoint, params, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()
