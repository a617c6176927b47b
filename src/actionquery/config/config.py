"""Settings for the actionquery service."""

import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["Settings", "settings"]


_APP_TOML = Path(__file__).parent / "resources" / "app.toml"


def _load_sections(path: Path) -> dict[str, dict[str, Any]]:
    with path.open("rb") as f:
        return tomllib.load(f).get("app", {})


_sections = _load_sections(_APP_TOML)
_server = _sections.get("server", {})
_db = _sections.get("db", {})
_query = _sections.get("query", {})
_logging = _sections.get("logging", {})


class Settings(BaseSettings):
    """Service settings.

    Defaults come from ``resources/app.toml``, environment variables and a
    ``.env`` file override them.
    """

    app_env: Literal["development", "testing", "production"] = Field(
        default="development",
        description="Deployment environment.",
        validation_alias="ENV",
    )

    # Server
    host_binding: str = Field(default=_server.get("host_binding", "127.0.0.1"))
    port: int = Field(default=_server.get("port", 8000))
    version: str = Field(default=_server.get("version", "0.1.0"))
    allow_origin: list[str] = Field(
        default=_server.get("allow_origin", []),
        description="Origins allowed by CORS outside production.",
    )

    # Action store
    db_url: str = Field(
        default="sqlite+aiosqlite:///actions.db",
        description="SQLAlchemy URL of the action store.",
        validation_alias="DATABASE_URL",
    )
    db_logging: bool = Field(
        default=_db.get("logging", False), description="Echo executed SQL."
    )
    db_timeout: int = Field(
        default=_db.get("timeout", 30),
        description="SQLite busy timeout in seconds.",
    )
    db_pool_size: int = Field(default=_db.get("pool_size", 5))
    db_max_overflow: int = Field(default=_db.get("max_overflow", 10))
    db_pool_timeout: int = Field(default=_db.get("pool_timeout", 30))
    db_pool_recycle: int = Field(default=_db.get("pool_recycle", 300))
    db_pool_pre_ping: bool = Field(default=_db.get("pool_pre_ping", True))
    create_tables_on_start: bool = Field(
        default=True,
        description="Create missing action tables when the app starts.",
        validation_alias="CREATE_TABLES_ON_START",
    )

    # Queries
    max_index_length: int = Field(
        default=_query.get("max_index_length", 191),
        gt=32,
        description="Longest args string stored verbatim, longer args are hashed.",
    )
    default_per_page: int = Field(
        default=_query.get("default_per_page", 5),
        description="Page size of filters that do not set one.",
    )
    admin_url: str = Field(
        default=_query.get("admin_url", "/wp-admin/tools.php?page=action-scheduler"),
        description="Admin page listing scheduled actions.",
    )

    # Logging
    log_dir: str = Field(default=_logging.get("log_dir", "log"))
    log_file: str = Field(default=_logging.get("log_file", "app.log"))
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", validation_alias="LOG_LEVEL"
    )
    rotation: str = Field(
        default=_logging.get("rotation", "1 MB"),
        description="Size or time based rotation of the development log file.",
    )
    loki_url: str = Field(
        default=_logging.get("loki_url", "http://alloy:9999/loki/api/v1/push"),
        description="Loki push endpoint used in production.",
        validation_alias="LOKI_URL",
    )

    @computed_field
    @property
    def log_path(self) -> Path:
        """Development log file."""
        return Path(self.log_dir) / self.log_file

    @computed_field
    @property
    def reload(self) -> bool:
        """Auto reload, only ever enabled in development."""
        return bool(_server.get("reload", False)) and self.app_env == "development"

    @computed_field
    @property
    def is_sqlite(self) -> bool:
        """Whether the action store is a SQLite database."""
        return self.db_url.startswith("sqlite")

    @model_validator(mode="after")
    def validate_log_level(self) -> "Settings":
        """Never log at DEBUG in production."""
        if self.app_env == "production" and self.log_level == "DEBUG":
            self.log_level = "INFO"
        return self

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )


settings = Settings()
