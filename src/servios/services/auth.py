"""Authenticated service with transparent token refresh.

:class:`AuthService` extends the request executor with a
:class:`~servios.auth.coordinator.RefreshCoordinator` installed as a
request interceptor (bearer token attachment) and a response error
interceptor (refresh and replay on authentication failure).

Examples:
    >>> store = InMemoryTokenStore("access", "refresh")
    >>> service = AuthService(
    ...     base_url="https://api.example.com",
    ...     credentials=store.accessors(refresh=refresh_tokens, on_logout=logout),
    ... )
    >>> await service.get("me")
"""

import logging
from typing import Any, Optional

import httpx

from ..auth.coordinator import RefreshCoordinator, RefreshState
from ..auth.models import CredentialAccessors
from ..config.settings import AuthServiceConfig
from .base import BaseService

logger = logging.getLogger(__name__)


class AuthService(BaseService):
    """Service that authenticates every request with a bearer token.

    Credentials are injected per instance, so independently configured
    services can coexist in one process.

    :param config: Client configuration including ``retry_on_status_codes``
    :type config: Optional[AuthServiceConfig]
    :param credentials: Host-supplied token accessors and refresh operation
    :type credentials: Optional[CredentialAccessors]
    :param transport: Optional httpx transport for real requests
    :param options: Field values for :class:`AuthServiceConfig`
    """

    config_class = AuthServiceConfig
    config: AuthServiceConfig

    def __init__(
        self,
        config: Optional[AuthServiceConfig] = None,
        *,
        credentials: Optional[CredentialAccessors] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **options: Any,
    ):
        super().__init__(config, transport=transport, **options)
        self.credentials = credentials or CredentialAccessors()
        self.coordinator = RefreshCoordinator(
            self.credentials,
            self.config.retry_on_status_codes,
            replay=self.dispatch,
        )
        self.interceptors.request.use(self.coordinator.attach_token)
        self.interceptors.response.use(on_rejected=self.coordinator.handle_error)
        if not self.credentials.can_refresh:
            logger.debug(
                "No refresh operation configured; authentication failures "
                "will be propagated"
            )

    @property
    def refresh_state(self) -> RefreshState:
        return self.coordinator.state
