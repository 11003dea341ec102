"""
Application configuration.

Loads settings from environment variables and .env file.
Every tunable lives here; other modules read the ``settings`` singleton.
"""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_enabled: Turn slowapi rate limiting on or off.
        rate_limit_default: Default rate limit for all endpoints.
        bundles_dir: Directory holding one sub-directory per bundle.
        bundle_registry_path: JSON file recording installed bundles.
        bundle_admin_role: Database role granted full rights on every bundle schema.
        role_map: Caller permission level -> database role used for queries.
        user_id_setting: Session setting that carries the acting user id.
        statement_timeout_ms: Upper bound for a single statement (0 disables).

    The API connects with an ordinary login role (postgres_*), bundle
    installation uses a superuser connection (postgres_superuser*).
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    project_name: str = "Bundlebase"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_enabled: bool = True
    rate_limit_default: str = "120/minute"

    # Postgres login role used to serve API requests
    database_dsn: Optional[str] = None
    postgres_user: str = "server"
    postgres_password: str = "server"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "bundlebase"

    # Postgres superuser used for bundle installation
    superuser_dsn: Optional[str] = None
    postgres_superuser: str = "postgres"
    postgres_superuser_password: str = "postgres"

    statement_timeout_ms: int = 30_000

    bundles_dir: Path = Path("bundles")
    bundle_registry_path: Path = Path("bundles.json")
    bundle_admin_role: str = "admin"

    role_map: dict[str, str] = {
        "public": "anon",
        "user": "web",
        "admin": "admin",
    }
    user_id_setting: str = "request.user_id"

    def _dsn(self, user: str, password: str) -> str:
        return (
            f"postgresql+psycopg2://{user}:{password}@"
            f"{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    def get_database_dsn(self) -> str:
        """Return the effective DSN for request serving.

        Priority:
        1. Explicit `DATABASE_DSN`
        2. Build DSN from postgres_* values
        """
        if self.database_dsn:
            return self.database_dsn
        return self._dsn(self.postgres_user, self.postgres_password)

    def get_superuser_dsn(self) -> str:
        """Return the effective DSN for administrative (install) connections."""
        if self.superuser_dsn:
            return self.superuser_dsn
        return self._dsn(self.postgres_superuser, self.postgres_superuser_password)


settings = Settings()
