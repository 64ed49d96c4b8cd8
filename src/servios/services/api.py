"""CRUD facade over a single REST resource.

:class:`ApiService` maps five operations onto the authenticated request
executor, using ``resource_path`` for collection operations and
``resource_path/id`` for item operations.

Examples:
    >>> users = ApiService(
    ...     resource_path="users",
    ...     base_url="https://api.example.com",
    ...     credentials=store.accessors(refresh=refresh_tokens),
    ...     model=User,
    ... )
    >>> user = await users.get_by_id(42)
"""

import logging
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

import httpx
from pydantic import BaseModel

from ..auth.models import CredentialAccessors
from ..config.settings import AuthServiceConfig
from ..exceptions import ConfigurationError
from .auth import AuthService

logger = logging.getLogger(__name__)

T = TypeVar("T")

ResourceId = Union[str, int]


class ApiService(AuthService, Generic[T]):
    """Typed CRUD client for one resource path.

    :param resource_path: Collection path relative to the base address
    :type resource_path: str
    :param model: Optional pydantic model responses are validated into
    :type model: Optional[Type[BaseModel]]
    :param config: Client configuration
    :param credentials: Host-supplied token accessors and refresh operation
    :param transport: Optional httpx transport for real requests
    :raises ConfigurationError: When ``resource_path`` is empty
    """

    def __init__(
        self,
        resource_path: str,
        config: Optional[AuthServiceConfig] = None,
        *,
        model: Optional[Type[BaseModel]] = None,
        credentials: Optional[CredentialAccessors] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **options: Any,
    ):
        resource_path = (resource_path or "").strip("/")
        if not resource_path:
            raise ConfigurationError(
                "resource_path is required", setting="resource_path"
            )
        super().__init__(
            config, credentials=credentials, transport=transport, **options
        )
        self.resource_path = resource_path
        self.model = model

    def item_path(self, id: ResourceId) -> str:
        return f"{self.resource_path}/{id}"

    def _parse(self, payload: Any) -> Any:
        if self.model is None or payload is None:
            return payload
        if isinstance(payload, list):
            return [self.model.model_validate(item) for item in payload]
        return self.model.model_validate(payload)

    @staticmethod
    def _body(data: Union[BaseModel, Dict[str, Any], None]) -> Any:
        if isinstance(data, BaseModel):
            return data.model_dump(mode="json", exclude_unset=True)
        return data

    async def list(self, params: Optional[Dict[str, Any]] = None, **kwargs) -> List[T]:
        """List the collection, optionally filtered by query parameters."""
        return self._parse(await self.get(self.resource_path, params, **kwargs))

    async def get_by_id(self, id: ResourceId, **kwargs) -> T:
        return self._parse(await self.get(self.item_path(id), **kwargs))

    async def create(self, data: Union[BaseModel, Dict[str, Any]], **kwargs) -> T:
        return self._parse(
            await self.post(self.resource_path, self._body(data), **kwargs)
        )

    async def update(
        self, id: ResourceId, data: Union[BaseModel, Dict[str, Any]], **kwargs
    ) -> T:
        return self._parse(
            await self.put(self.item_path(id), self._body(data), **kwargs)
        )

    async def remove(self, id: ResourceId, **kwargs) -> None:
        """Delete one item. The response body, if any, is discarded."""
        await self.delete(self.item_path(id), **kwargs)
