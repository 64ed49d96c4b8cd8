"""Request descriptors and transport errors.

A :class:`RequestDescriptor` captures one logical request (method,
endpoint, params, body, headers) independently of the httpx request it
eventually becomes, so the same request can be re-issued after its
credentials change. :class:`TransportError` is the single error shape the
transport layer raises for connection failures, timeouts and non-2xx
responses.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

BODY_METHODS = ("POST", "PUT", "PATCH")


@dataclass
class RequestDescriptor:
    """Description of one logical request.

    :param method: HTTP method, upper-cased on creation
    :param endpoint: Endpoint relative to the client's base address
    :param params: Optional query parameters
    :param data: Optional JSON body (only sent for POST/PUT/PATCH)
    :param headers: Per-request headers, merged over the client defaults
    :param retried: Set once the request has been queued for a token
                    refresh; a retried request is never queued again
    :param extensions: Free-form per-request state for interceptors
    """

    method: str
    endpoint: str
    params: Optional[Dict[str, Any]] = None
    data: Any = None
    headers: Dict[str, str] = field(default_factory=dict)
    retried: bool = False
    extensions: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.method = self.method.upper()

    @property
    def has_body(self) -> bool:
        return self.method in BODY_METHODS

    def build(self, client: httpx.AsyncClient) -> httpx.Request:
        """Build the httpx request for this descriptor.

        GET and DELETE carry only query params and headers; body methods
        additionally send a JSON body, defaulting to ``{}``.

        :param client: Client whose base address and default headers apply
        :return: Request ready for ``client.send``
        """
        kwargs: Dict[str, Any] = {"params": self.params, "headers": self.headers}
        if self.has_body:
            kwargs["json"] = {} if self.data is None else self.data
        return client.build_request(self.method, self.endpoint, **kwargs)


class TransportError(Exception):
    """Raised by the transport layer for any failed call.

    :param message: Transport-provided message (may be empty)
    :param request: Descriptor of the request that failed
    :param status_code: HTTP status when a response was received
    :param data: Decoded response payload when a response was received
    :param response: The raw ``httpx.Response`` when one exists
    """

    def __init__(
        self,
        message: str,
        request: RequestDescriptor,
        status_code: Optional[int] = None,
        data: Any = None,
        response: Optional[httpx.Response] = None,
    ):
        super().__init__(message)
        self.message = message
        self.request = request
        self.status_code = status_code
        self.data = data
        self.response = response

    @classmethod
    def from_httpx(
        cls, error: httpx.HTTPError, descriptor: RequestDescriptor
    ) -> "TransportError":
        """Wrap an httpx exception, decoding the response body if there is one."""
        response = getattr(error, "response", None)
        if isinstance(error, httpx.HTTPStatusError) and response is not None:
            return cls(
                str(error),
                descriptor,
                status_code=response.status_code,
                data=decode_response(response),
                response=response,
            )
        return cls(str(error), descriptor)


def decode_response(response: httpx.Response) -> Any:
    """Decode a response body.

    Empty bodies decode to ``None``, JSON bodies to Python objects and
    anything else to text.
    """
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def create_timeout(seconds: float) -> httpx.Timeout:
    """Create an httpx timeout applying ``seconds`` to every phase.

    :param seconds: Timeout in seconds
    :return: Timeout configuration for the client
    """
    return httpx.Timeout(seconds)
