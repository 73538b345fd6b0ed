import logging
from typing import Any, ClassVar, FrozenSet

from pydantic_settings import BaseSettings, SettingsConfigDict

_logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./checkpoints.db"

    # Database pool (applies to client/server DBs like Postgres; SQLite uses NullPool)
    DB_POOL_PRE_PING: bool = True
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT_SECONDS: int = 30
    DB_POOL_RECYCLE_SECONDS: int = 1800

    # Create missing tables on startup. Meant for local SQLite files; use Alembic elsewhere.
    DB_AUTO_CREATE: bool = False

    # Session tokens (identity provider)
    # NOTE: This default is intentionally insecure and must never be used outside dev/test.
    DEFAULT_AUTH_JWT_SECRET: ClassVar[str] = "dev-session-secret-change-me-32chars!"
    AUTH_JWT_SECRET: str = DEFAULT_AUTH_JWT_SECRET
    # Comma-separated list of accepted signing algorithms.
    AUTH_JWT_ALGORITHMS: str = "HS256"
    AUTH_JWT_AUDIENCE: str = ""
    AUTH_JWT_ISSUER: str = ""
    AUTH_JWT_LEEWAY_SECONDS: int = 0
    AUTH_SESSION_TOKEN_EXPIRE_MINUTES: int = 60

    # Role that grants unscoped access to every checkpoint.
    AUTH_ADMIN_ROLE: str = "Game Admin"
    AUTH_ROLES_CLAIM: str = "roles"

    # CORS (comma-separated origins)
    CORS_ALLOWED_ORIGINS: str = (
        "https://studentfrontendreact-git-test-point-conrad1451s-projects.vercel.app,"
        "https://studentfrontendreact.vercel.app,"
        "http://localhost:5173,"
        "http://localhost:5174"
    )

    # Application
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    # Environment
    # Used for guardrails. Suggested values: dev|staging|prod.
    ENV: str = "dev"

    # Observability
    METRICS_ENABLED: bool = True

    # --- Guardrails ---
    # Fail-fast on obviously insecure secrets outside dev/test.
    _SAFE_ENVS: ClassVar[FrozenSet[str]] = frozenset({"dev", "development", "test", "testing"})
    _UNSAFE_PLACEHOLDERS: ClassVar[FrozenSet[str]] = frozenset(
        {
            "change-me-in-production",
            "change-me",
            "changeme",
            "",
        }
    )

    def model_post_init(self, __context: Any) -> None:
        # Runs on every Settings() instantiation (including module-level `settings = Settings()`).
        self._guardrail_default_secrets()

    def _guardrail_default_secrets(self) -> None:
        env = (self.ENV or "").strip().lower()
        if env in self._SAFE_ENVS:
            return

        secret = (self.AUTH_JWT_SECRET or "").strip()
        lowered = secret.lower()
        if (
            secret == self.DEFAULT_AUTH_JWT_SECRET
            or lowered in self._UNSAFE_PLACEHOLDERS
            or "change-me" in lowered
        ):
            raise RuntimeError(
                "Refusing to start with an insecure default/placeholder AUTH_JWT_SECRET "
                f"outside dev/test. Got ENV={self.ENV!r}. "
                "Set a secure value via the AUTH_JWT_SECRET env var, or run with ENV=dev/test."
            )

    @property
    def jwt_algorithms(self) -> list[str]:
        return [a.strip() for a in (self.AUTH_JWT_ALGORITHMS or "").split(",") if a.strip()]

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in (self.CORS_ALLOWED_ORIGINS or "").split(",") if o.strip()]


settings = Settings()


def get_settings() -> Settings:
    """Return the global settings instance.

    Provided as a callable for FastAPI Depends() and test mocking convenience.
    """
    return settings
