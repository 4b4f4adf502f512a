"""Application settings and configuration.

This module defines all configuration options for the unique number service.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_POSTGRES_SCHEMES = ("postgres://", "postgresql://")
_PSYCOPG_SCHEME = "postgresql+psycopg://"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Unique Number Generator API", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # HTTP server
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT")

    # Database configuration
    database_url: str = Field(default="sqlite:///./unique_numbers.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # CORS configuration for browser clients
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["Content-Type", "Authorization"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        """Return True when running with production transport settings."""
        return self.environment.strip().lower() == "production"

    @property
    def effective_database_url(self) -> str:
        """Return the SQLAlchemy database URL respecting testing overrides.

        Bare ``postgres://`` and ``postgresql://`` URLs, as handed out by most
        hosting providers, are rewritten to use the psycopg driver.

        Returns:
            The active database URL (test database if in testing mode, otherwise production)
        """
        url = self.database_url
        if self.use_testing_database and self.test_database_url:
            url = self.test_database_url
        for scheme in _POSTGRES_SCHEMES:
            if url.startswith(scheme):
                return _PSYCOPG_SCHEME + url[len(scheme):]
        return url

    @property
    def database_connect_args(self) -> dict[str, object]:
        """Return DBAPI connect arguments for the active database.

        Returns:
            ``sslmode=require`` for PostgreSQL in production, thread sharing for SQLite
        """
        url = self.effective_database_url
        if url.startswith("sqlite"):
            return {"check_same_thread": False}
        if url.startswith("postgresql") and self.is_production:
            return {"sslmode": "require"}
        return {}


settings = Settings()
