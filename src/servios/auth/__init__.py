"""Credential accessors and token refresh coordination."""

from .coordinator import PendingRequest, RefreshCoordinator, RefreshState
from .models import CredentialAccessors, InMemoryTokenStore, TokenPair

__all__ = [
    "CredentialAccessors",
    "InMemoryTokenStore",
    "PendingRequest",
    "RefreshCoordinator",
    "RefreshState",
    "TokenPair",
]
