"""Credential capabilities injected by the host application.

The client never stores tokens itself. It reads and writes them through
the accessor functions in :class:`CredentialAccessors`, and obtains new
ones through the host's asynchronous ``refresh`` operation.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class TokenPair(BaseModel):
    """Result of a refresh operation.

    Accepts ``access_token``/``refresh_token`` keys as well as the
    camel-cased ``accessToken``/``refreshToken`` many auth servers return.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    access_token: str = Field(
        validation_alias=AliasChoices("access_token", "accessToken")
    )
    refresh_token: Optional[str] = Field(
        None, validation_alias=AliasChoices("refresh_token", "refreshToken")
    )

    @classmethod
    def coerce(cls, value: Union["TokenPair", Mapping[str, Any], str]) -> "TokenPair":
        """Normalize whatever the host's refresh operation returned.

        :param value: A :class:`TokenPair`, a mapping, or a bare access token
        :return: Token pair
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls(access_token=value)
        return cls.model_validate(dict(value))


RefreshResult = Union[TokenPair, Mapping[str, Any], str]


@dataclass
class CredentialAccessors:
    """Host-supplied credential functions.

    :param get_access_token: Return the current access token, or ``None``
    :param set_access_token: Store a new access token
    :param get_refresh_token: Return the current refresh token, or ``None``
    :param set_refresh_token: Store a new refresh token
    :param refresh: Coroutine function exchanging the refresh token for new
                    tokens; raises when the refresh token is invalid or expired
    :param on_logout: Notification fired once when a refresh fails
    """

    get_access_token: Optional[Callable[[], Optional[str]]] = None
    set_access_token: Optional[Callable[[str], None]] = None
    get_refresh_token: Optional[Callable[[], Optional[str]]] = None
    set_refresh_token: Optional[Callable[[str], None]] = None
    refresh: Optional[Callable[[], Awaitable[RefreshResult]]] = None
    on_logout: Optional[Callable[[], Any]] = None

    @property
    def can_refresh(self) -> bool:
        return self.refresh is not None

    def access_token(self) -> Optional[str]:
        if self.get_access_token is None:
            return None
        return self.get_access_token()

    def store(self, tokens: TokenPair) -> None:
        """Write a refreshed token pair through the setters."""
        if self.set_access_token is not None:
            self.set_access_token(tokens.access_token)
        if tokens.refresh_token and self.set_refresh_token is not None:
            self.set_refresh_token(tokens.refresh_token)


class InMemoryTokenStore:
    """Minimal token holder for scripts and tests.

    Exposes its getters and setters as :class:`CredentialAccessors`.
    """

    def __init__(
        self, access_token: Optional[str] = None, refresh_token: Optional[str] = None
    ):
        self.access_token = access_token
        self.refresh_token = refresh_token

    def set_access_token(self, token: str) -> None:
        self.access_token = token

    def set_refresh_token(self, token: str) -> None:
        self.refresh_token = token

    def accessors(
        self,
        refresh: Optional[Callable[[], Awaitable[RefreshResult]]] = None,
        on_logout: Optional[Callable[[], Any]] = None,
    ) -> CredentialAccessors:
        return CredentialAccessors(
            get_access_token=lambda: self.access_token,
            set_access_token=self.set_access_token,
            get_refresh_token=lambda: self.refresh_token,
            set_refresh_token=self.set_refresh_token,
            refresh=refresh,
            on_logout=on_logout,
        )
