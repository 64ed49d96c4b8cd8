"""Request executor, authenticated service and CRUD resource client."""

from .base import BaseService, default_transform_error
from .auth import AuthService
from .api import ApiService

__all__ = [
    "ApiService",
    "AuthService",
    "BaseService",
    "default_transform_error",
]
