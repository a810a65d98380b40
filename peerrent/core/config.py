from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "local"
    APP_NAME: str = "PeerRent API"
    # Comma-separated origins for CORS (e.g. https://peerrent.app,https://admin.peerrent.app). If empty, uses localhost defaults.
    CORS_ORIGINS: str = ""
    LOG_LEVEL: str = "INFO"

    # Shared HS256 secret of the hosted identity provider; tokens carry the user id in "sub".
    SECRET_KEY: str = "change-me"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    # Comma-separated user roles allowed to resolve disputes
    ADMIN_ROLES: str = "admin,superadmin"

    DATABASE_URL: str = "sqlite:///./peerrent.db"

    @field_validator("DATABASE_URL", mode="after")
    @classmethod
    def normalize_database_url(cls, v: str) -> str:
        """Render and others give postgres://; SQLAlchemy expects postgresql+psycopg2://."""
        if v and v.startswith("postgres://"):
            return "postgresql+psycopg2://" + v[11:]
        return v
    REDIS_URL: str = "redis://localhost:6379/0"

    # celery: enqueue booking events for the worker | log: only log them in-process
    EVENT_DISPATCH: str = "log"

    # Platform fee: 5% of total rent, floored and capped (currency units)
    PLATFORM_FEE_RATE: Decimal = Decimal("0.05")
    PLATFORM_FEE_MIN: Decimal = Decimal("10")
    PLATFORM_FEE_MAX: Decimal = Decimal("500")

    DEFAULT_PAGE_LIMIT: int = 20
    MAX_PAGE_LIMIT: int = 100

    @property
    def admin_roles(self) -> set[str]:
        return {r.strip() for r in self.ADMIN_ROLES.split(",") if r.strip()}


settings = Settings()
