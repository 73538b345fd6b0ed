from typing import AsyncGenerator

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from checkpoint_hub.config import settings
from checkpoint_hub.core.auth.identity import Identity
from checkpoint_hub.core.auth.resolver import IdentityResolver, JwtIdentityResolver
from checkpoint_hub.db.session import get_db_session
from checkpoint_hub.utils.exceptions import UnauthorizedException
from checkpoint_hub.utils.request_context import subject_id_var


_identity_resolver: IdentityResolver = JwtIdentityResolver.from_settings(settings)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_db_session():
        yield session


def get_identity_resolver() -> IdentityResolver:
    """Override via app.dependency_overrides to plug in another identity provider."""
    return _identity_resolver


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the credential from an Authorization header.

    Accepts "Bearer <token>" (scheme is case-insensitive) and a bare token.
    """
    if authorization is None:
        return None
    value = authorization.strip()
    scheme, _, rest = value.partition(" ")
    if scheme.lower() == "bearer":
        value = rest.strip()
    return value or None


async def get_identity(
    request: Request,
    authorization: str | None = Header(default=None, alias="Authorization"),
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> Identity:
    """Resolve the caller for this request only.

    The result lives on the request (dependency value, request.state, and a
    context variable for log correlation) and is recomputed for every request.
    """
    token = extract_bearer_token(authorization)
    if not token:
        raise UnauthorizedException("Unauthorized: No session token provided")

    identity = await resolver.resolve(token)
    request.state.identity = identity
    subject_id_var.set(identity.subject_id)
    return identity
