from functools import lru_cache

from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL

from src.config.errors import ConfigurationError


class Settings(BaseSettings):
    # App
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]

    ENVIRONMENT: str = "Production"

    # Database
    # A full URL wins over the individual parts.
    database_url: str = ""
    db_driver: str = "postgresql+asyncpg"
    db_host: str = ""
    db_port: int | None = None
    db_name: str = ""
    db_user: str = ""
    db_pass: str = ""
    log_db: bool = False

    # Event
    event_slug: str = "apply-event"
    institution_domain: str = "purdue.edu"

    # Audit log (tab separated, one line per submission attempt)
    audit_log_path: str = "logs/rsvp.log"

    SENTRY_DSN: str = ""
    SENTRY_TRACES_SAMPLE_RATE: float = 0.0
    SENTRY_PROFILES_SAMPLE_RATE: float = 0.0

    RUN_MIGRATIONS_ON_STARTUP: bool = False

    class Config:
        env_prefix = "APP_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def database_dsn(self) -> str:
        """
        Build the SQLAlchemy URL for the RSVP store.
        Raises ConfigurationError when the database is not configured.
        """
        if self.database_url.strip():
            return self.database_url.strip()

        host, name, user = self.db_host.strip(), self.db_name.strip(), self.db_user.strip()
        if not host or not name or not user:
            raise ConfigurationError("Database configuration missing")

        url = URL.create(
            self.db_driver,
            username=user,
            password=self.db_pass or None,
            host=host,
            port=self.db_port,
            database=name,
        )
        return url.render_as_string(hide_password=False)


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
