from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Mapping, Optional, Protocol

import jwt

from checkpoint_hub.config import Settings, settings as default_settings
from checkpoint_hub.core.auth.identity import Identity
from checkpoint_hub.utils.exceptions import UnauthorizedException

logger = logging.getLogger(__name__)

INVALID_TOKEN_MESSAGE = "Unauthorized: Invalid session token"


class IdentityResolver(Protocol):
    async def resolve(self, token: str) -> Identity:
        """Exchange a bearer credential for a verified identity.

        Raises UnauthorizedException on any failure.
        """
        ...


def _as_role_set(value: Any) -> set[str]:
    if isinstance(value, str):
        return {value}
    if isinstance(value, (list, tuple, set, frozenset)):
        return {v for v in value if isinstance(v, str)}
    return set()


def collect_roles(payload: Mapping[str, Any], *, roles_claim: str = "roles") -> set[str]:
    """Roles granted by a session token.

    Reads the project-level roles claim and, for tokens issued by multi-tenant
    identity providers, the `roles` list of every entry under `tenants`.
    """
    roles = _as_role_set(payload.get(roles_claim))
    tenants = payload.get("tenants")
    if isinstance(tenants, Mapping):
        for tenant in tenants.values():
            if isinstance(tenant, Mapping):
                roles |= _as_role_set(tenant.get("roles"))
    return roles


class JwtIdentityResolver:
    """Verifies signed session tokens (JWT) locally."""

    def __init__(
        self,
        *,
        secret: str,
        algorithms: Iterable[str] = ("HS256",),
        audience: str | None = None,
        issuer: str | None = None,
        leeway_seconds: int = 0,
        admin_role: str = "Game Admin",
        roles_claim: str = "roles",
    ):
        self.secret = secret
        self.algorithms = list(algorithms)
        self.audience = audience or None
        self.issuer = issuer or None
        self.leeway_seconds = max(0, int(leeway_seconds))
        self.admin_role = admin_role
        self.roles_claim = roles_claim

    @classmethod
    def from_settings(cls, s: Settings) -> "JwtIdentityResolver":
        return cls(
            secret=s.AUTH_JWT_SECRET,
            algorithms=s.jwt_algorithms,
            audience=s.AUTH_JWT_AUDIENCE,
            issuer=s.AUTH_JWT_ISSUER,
            leeway_seconds=s.AUTH_JWT_LEEWAY_SECONDS,
            admin_role=s.AUTH_ADMIN_ROLE,
            roles_claim=s.AUTH_ROLES_CLAIM,
        )

    async def resolve(self, token: str) -> Identity:
        if not token:
            raise UnauthorizedException("Unauthorized: No session token provided")

        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=self.algorithms,
                audience=self.audience,
                issuer=self.issuer,
                leeway=self.leeway_seconds,
                options={"require": ["exp", "sub"], "verify_aud": self.audience is not None},
            )
        except jwt.PyJWTError as exc:
            logger.info("auth.session_validation_failed reason=%s", type(exc).__name__)
            raise UnauthorizedException(INVALID_TOKEN_MESSAGE) from None

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject.strip():
            logger.info("auth.session_validation_failed reason=missing_subject")
            raise UnauthorizedException("Unauthorized: User ID not found in token")

        is_admin = self.admin_role in collect_roles(payload, roles_claim=self.roles_claim)
        return Identity(subject_id=subject, is_admin=is_admin)


def create_session_token(
    subject: str,
    *,
    roles: Iterable[str] = (),
    tenants: Optional[Mapping[str, Mapping[str, Any]]] = None,
    expires_in: Optional[timedelta] = None,
    settings: Settings = default_settings,
) -> str:
    """Mint a session token accepted by JwtIdentityResolver.from_settings(settings).

    Used by dev tooling and tests; production tokens come from the identity provider.
    """
    now = datetime.now(timezone.utc)
    if expires_in is None:
        expires_in = timedelta(minutes=settings.AUTH_SESSION_TOKEN_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(subject),
        "iat": now,
        "exp": now + expires_in,
        settings.AUTH_ROLES_CLAIM: list(roles),
    }
    if tenants:
        payload["tenants"] = {k: dict(v) for k, v in tenants.items()}
    if settings.AUTH_JWT_AUDIENCE:
        payload["aud"] = settings.AUTH_JWT_AUDIENCE
    if settings.AUTH_JWT_ISSUER:
        payload["iss"] = settings.AUTH_JWT_ISSUER
    return jwt.encode(payload, settings.AUTH_JWT_SECRET, algorithm=settings.jwt_algorithms[0])
