# backend/spacetime/core/config.py
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
import structlog

# Strukturiertes Logging (JSON)
structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        structlog.processors.JSONRenderer(),
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

DEFAULT_USER_ID = "9af59216-0ecd-4ba4-a08e-e15dfd2cad76"


class Settings(BaseSettings):
    # App
    app_name: str = "Spacetime Memories API"
    app_version: str = "dev"
    api_prefix: str = ""
    cors_allow_origins: str = "*"
    log_level: str = "INFO"

    # Datenbank / SQLAlchemy
    database_url: str = "sqlite+aiosqlite:///./spacetime.db"
    debug_sql: bool = False
    auto_create_schema: bool = True

    # Memories
    default_user_id: str = DEFAULT_USER_ID
    excerpt_length: int = 115

    # Auth / Keycloak (optional)
    auth_enabled: bool = False
    keycloak_issuer: str = ""
    keycloak_jwks_url: str = ""
    keycloak_allowed_audiences: List[str] = ["account"]
    jwks_ttl_sec: int = 600

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
