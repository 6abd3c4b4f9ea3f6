"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from contentforge.adapters.registry import ProviderRegistry
from contentforge.api.auth import IdentityProvider, parse_bearer
from contentforge.config import settings
from contentforge.db.session import get_session
from contentforge.domain.errors import UnauthorizedError
from contentforge.domain.models import AuthenticatedUser
from contentforge.services.generation import GenerationService
from contentforge.services.library import LibraryService
from contentforge.services.storage import BlobStorage

# Database session dependency
SessionDep = Annotated[Session, Depends(get_session)]


def get_providers(request: Request) -> ProviderRegistry:
    """Provider registry created in the application lifespan."""
    return request.app.state.providers


def get_identity_provider(request: Request) -> IdentityProvider:
    return request.app.state.identity


ProvidersDep = Annotated[ProviderRegistry, Depends(get_providers)]
IdentityDep = Annotated[IdentityProvider, Depends(get_identity_provider)]


async def get_current_user(
    identity: IdentityDep,
    authorization: Annotated[str | None, Header()] = None,
) -> AuthenticatedUser:
    """Resolve the caller or fail with 401."""
    token = parse_bearer(authorization)
    if token is None:
        raise UnauthorizedError()

    user = await identity.verify(token)
    if user is None:
        raise UnauthorizedError()
    return user


CurrentUserDep = Annotated[AuthenticatedUser, Depends(get_current_user)]


def get_blob_storage() -> BlobStorage:
    return BlobStorage(settings)


BlobStorageDep = Annotated[BlobStorage, Depends(get_blob_storage)]


def get_generation_service(
    session: SessionDep,
    providers: ProvidersDep,
    storage: BlobStorageDep,
) -> GenerationService:
    """Get a generation service bound to the request's session."""
    return GenerationService(session, providers, storage)


def get_library_service(session: SessionDep) -> LibraryService:
    return LibraryService(session)


GenerationServiceDep = Annotated[GenerationService, Depends(get_generation_service)]
LibraryServiceDep = Annotated[LibraryService, Depends(get_library_service)]
