"""HTTP transport utilities public API (barrel module).

This package provides:
- Request descriptors and the normalized transport error
- Request/response interceptor registries
- One-shot mock responses over a real httpx transport

Recommended import pattern for consumers:
    from servios.utils.http import RequestDescriptor, TransportError
"""

from .interceptors import (
    InterceptorManager,
    RequestInterceptors,
    ResponseInterceptors,
)
from .mock_transport import MockRouterTransport
from .request import (
    RequestDescriptor,
    TransportError,
    create_timeout,
    decode_response,
)

__all__ = [
    "InterceptorManager",
    "RequestInterceptors",
    "ResponseInterceptors",
    "MockRouterTransport",
    "RequestDescriptor",
    "TransportError",
    "create_timeout",
    "decode_response",
]
