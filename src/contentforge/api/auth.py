"""Bearer-token verification against the identity provider."""

from abc import ABC, abstractmethod

import httpx

from contentforge.domain.models import AuthenticatedUser
from contentforge.logging import get_logger

logger = get_logger(__name__)


def parse_bearer(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class IdentityProvider(ABC):
    """Resolves access tokens to users."""

    @abstractmethod
    async def verify(self, token: str) -> AuthenticatedUser | None:
        """Return the user for a valid token, or None."""
        ...


class SupabaseIdentityProvider(IdentityProvider):
    """Verifies tokens with the Supabase auth user endpoint."""

    def __init__(
        self,
        supabase_url: str | None,
        anon_key: str | None,
        http_client: httpx.AsyncClient,
    ) -> None:
        self.supabase_url = (supabase_url or "").rstrip("/")
        self.anon_key = anon_key
        self.http_client = http_client

    async def verify(self, token: str) -> AuthenticatedUser | None:
        if not self.supabase_url or not self.anon_key:
            logger.warning("identity_provider_not_configured")
            return None

        try:
            response = await self.http_client.get(
                f"{self.supabase_url}/auth/v1/user",
                headers={
                    "apikey": self.anon_key,
                    "Authorization": f"Bearer {token}",
                },
            )
        except httpx.HTTPError as e:
            logger.error("identity_request_failed", error=str(e))
            return None

        if response.status_code != 200:
            logger.info("identity_token_rejected", status_code=response.status_code)
            return None

        data = response.json()
        user_id = data.get("id")
        if not user_id:
            return None

        user_metadata = data.get("user_metadata") or {}
        return AuthenticatedUser(
            id=user_id,
            email=data.get("email") or "",
            name=user_metadata.get("full_name") or user_metadata.get("name"),
        )
