"""Unit tests for the CRUD resource client."""

from typing import Optional

import httpx
import pytest
from pydantic import BaseModel

from servios.exceptions import ConfigurationError
from servios.services import ApiService

BASE_URL = "https://api.test/v1/"


class User(BaseModel):
    id: int
    name: str
    email: Optional[str] = None


def make_users(fake_api, token_store, **kwargs) -> ApiService:
    return ApiService(
        "users",
        base_url=BASE_URL,
        credentials=token_store.accessors(),
        transport=httpx.MockTransport(fake_api),
        **kwargs,
    )


def test_resource_path_required():
    with pytest.raises(ConfigurationError):
        ApiService("", base_url=BASE_URL)


def test_resource_path_slashes_trimmed():
    service = ApiService("/users/", base_url=BASE_URL)
    assert service.resource_path == "users"
    assert service.item_path(5) == "users/5"


@pytest.mark.asyncio
class TestCrudMapping:
    """Each operation maps onto one verb and endpoint."""

    async def test_list_with_filter(self, fake_api, token_store):
        async with make_users(fake_api, token_store) as users:
            result = await users.list({"role": "admin"})

        assert result["method"] == "GET"
        assert result["path"] == "/v1/users"
        assert result["params"] == {"role": "admin"}

    async def test_get_by_id(self, fake_api, token_store):
        async with make_users(fake_api, token_store) as users:
            result = await users.get_by_id(42)

        assert result["method"] == "GET"
        assert result["path"] == "/v1/users/42"

    async def test_create(self, fake_api, token_store):
        async with make_users(fake_api, token_store) as users:
            result = await users.create({"name": "a"})

        assert result["method"] == "POST"
        assert result["path"] == "/v1/users"
        assert result["body"] == {"name": "a"}

    async def test_update(self, fake_api, token_store):
        async with make_users(fake_api, token_store) as users:
            result = await users.update("abc", {"name": "b"})

        assert result["method"] == "PUT"
        assert result["path"] == "/v1/users/abc"
        assert result["body"] == {"name": "b"}

    async def test_remove_resolves_none(self, fake_api, token_store):
        async with make_users(fake_api, token_store) as users:
            assert await users.remove(7) is None

        assert fake_api.requests[0].method == "DELETE"
        assert fake_api.requests[0].url.path == "/v1/users/7"

    async def test_requests_are_authenticated(self, fake_api, token_store):
        async with make_users(fake_api, token_store) as users:
            await users.get_by_id(1)

        assert fake_api.bearer_tokens() == ["Bearer fresh-token"]


@pytest.mark.asyncio
class TestTypedResources:
    """Responses validate into the configured model."""

    async def test_list_parses_models(self, fake_api, token_store):
        fake_api.route(
            "GET", "/v1/users", 200, [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]
        )
        async with make_users(fake_api, token_store, model=User) as users:
            result = await users.list()

        assert result == [User(id=1, name="a"), User(id=2, name="b")]

    async def test_get_parses_model(self, fake_api, token_store):
        fake_api.route("GET", "/v1/users/1", 200, {"id": 1, "name": "a"})
        async with make_users(fake_api, token_store, model=User) as users:
            user = await users.get_by_id(1)

        assert isinstance(user, User)
        assert user.name == "a"

    async def test_model_input_serialized_without_unset_fields(
        self, fake_api, token_store
    ):
        async with make_users(fake_api, token_store) as users:
            result = await users.create(User(id=3, name="c"))

        assert result["body"] == {"id": 3, "name": "c"}

    async def test_mock_data_flows_through_crud(self, fake_api, token_store):
        async with make_users(
            fake_api, token_store, model=User, use_mock=True, mock_delay=0
        ) as users:
            user = await users.get_by_id(9, mock_data={"id": 9, "name": "mock"})

        assert user == User(id=9, name="mock")
        assert fake_api.requests == []
