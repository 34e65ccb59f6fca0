from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PATH = Path(__file__).resolve().parent.parent / ".env.local"


class Settings(BaseSettings):
    environment: str = "development"
    debug: bool = False
    LOG_LEVEL: str = "INFO"

    # Supabase project: auth (JWKS) and the Postgres behind it
    SUPABASE_URL: str
    SUPABASE_JWKS_URL: str | None = None
    SUPABASE_JWT_AUDIENCE: str = "authenticated"
    SUPABASE_SERVICE_ROLE_KEY: str
    SUPABASE_ANON_KEY: str | None = None
    SUPABASE_DB_URL: str

    # A skipped profile setup is shown again this long after a sign-in
    LOGIN_WINDOW_SECONDS: int = Field(60, ge=0)

    # Optional JSON file replacing the built-in organization/program rules
    AFFILIATION_RULES_PATH: str | None = None

    # X-Forwarded-For is honoured only from these peers
    TRUST_X_FORWARDED_FOR: bool = False
    TRUSTED_PROXY_IPS: list[str] = []

    DB_POOL_MIN_SIZE: int = Field(2, ge=1)
    DB_POOL_MAX_SIZE: int = Field(10, ge=1)
    DB_POOL_TIMEOUT: float = 30.0
    DB_POOL_MAX_IDLE: float = 600.0
    DB_POOL_MAX_LIFETIME: float = 3600.0
    DB_STATEMENT_TIMEOUT_SECONDS: int = Field(30, ge=1)

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def _supabase_base(self) -> str:
        return self.SUPABASE_URL.rstrip("/")

    def jwks_url(self) -> str:
        return self.SUPABASE_JWKS_URL or f"{self._supabase_base()}/auth/v1/.well-known/jwks.json"

    def auth_health_url(self) -> str:
        return f"{self._supabase_base()}/auth/v1/health"

    def get_db_pool_config(self) -> dict:
        """
        Keyword arguments for AsyncConnectionPool.

        Local development gets a small pool with a shorter wait.
        """
        if self.environment == "development":
            return {
                "min_size": 1,
                "max_size": min(self.DB_POOL_MAX_SIZE, 5),
                "timeout": 15.0,
                "max_idle": self.DB_POOL_MAX_IDLE,
                "max_lifetime": self.DB_POOL_MAX_LIFETIME,
            }

        return {
            "min_size": self.DB_POOL_MIN_SIZE,
            "max_size": max(self.DB_POOL_MAX_SIZE, self.DB_POOL_MIN_SIZE),
            "timeout": self.DB_POOL_TIMEOUT,
            "max_idle": self.DB_POOL_MAX_IDLE,
            "max_lifetime": self.DB_POOL_MAX_LIFETIME,
        }


settings = Settings()
