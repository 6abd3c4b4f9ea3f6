"""Tests for bearer-token parsing and identity verification."""

import httpx
import pytest

from contentforge.api.auth import SupabaseIdentityProvider, parse_bearer
from tests.conftest import FakeProviderAPI


@pytest.mark.parametrize(
    "header, token",
    [
        ("Bearer abc", "abc"),
        ("bearer   abc ", "abc"),
        ("Basic abc", None),
        ("Bearer ", None),
        (None, None),
    ],
)
def test_parse_bearer(header: str | None, token: str | None) -> None:
    assert parse_bearer(header) == token


class TestSupabaseIdentityProvider:
    @pytest.mark.asyncio
    async def test_valid_token(self, provider_api: FakeProviderAPI, http_client: httpx.AsyncClient) -> None:
        provider_api.respond(
            "GET",
            "/auth/v1/user",
            json={"id": "user-1", "email": "a@example.com", "user_metadata": {"full_name": "Ada"}},
        )
        identity = SupabaseIdentityProvider("https://proj.supabase.test/", "anon", http_client)

        user = await identity.verify("tok")

        assert user is not None
        assert (user.id, user.email, user.name) == ("user-1", "a@example.com", "Ada")
        request = provider_api.requests[0]
        assert request.headers["apikey"] == "anon"
        assert request.headers["Authorization"] == "Bearer tok"

    @pytest.mark.asyncio
    async def test_rejected_token(self, provider_api: FakeProviderAPI, http_client: httpx.AsyncClient) -> None:
        provider_api.respond("GET", "/auth/v1/user", 401, json={"msg": "invalid JWT"})
        identity = SupabaseIdentityProvider("https://proj.supabase.test", "anon", http_client)

        assert await identity.verify("expired") is None

    @pytest.mark.asyncio
    async def test_unconfigured(self, provider_api: FakeProviderAPI, http_client: httpx.AsyncClient) -> None:
        identity = SupabaseIdentityProvider(None, None, http_client)

        assert await identity.verify("tok") is None
        assert provider_api.requests == []
