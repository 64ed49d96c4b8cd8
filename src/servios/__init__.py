"""Client-side HTTP access layer.

This package wraps an httpx transport to provide resource-oriented CRUD
operations, transparent bearer-token authentication with single-flight
token refresh on authorization failure, and public/private markers that
decide which service methods a hosting framework may expose.

:var __version__: Current package version
:type __version__: str
"""

from .auth import CredentialAccessors, InMemoryTokenStore, RefreshState, TokenPair
from .config import AuthServiceConfig, ClientConfig, Settings, configure_logging
from .exceptions import ConfigurationError, RequestError, ServiosError
from .services import ApiService, AuthService, BaseService
from .visibility import (
    is_public,
    list_public_methods,
    private,
    public,
    visibility_registry,
)

__version__ = "0.1.0"

__all__ = [
    "ApiService",
    "AuthService",
    "AuthServiceConfig",
    "BaseService",
    "ClientConfig",
    "ConfigurationError",
    "CredentialAccessors",
    "InMemoryTokenStore",
    "RefreshState",
    "RequestError",
    "ServiosError",
    "Settings",
    "TokenPair",
    "configure_logging",
    "is_public",
    "list_public_methods",
    "private",
    "public",
    "visibility_registry",
]
