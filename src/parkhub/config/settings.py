"""
Configuration management for parkhub.

Settings are read once from the environment (prefix ``PARKHUB_``) or a ``.env``
file and converted into the plain config objects consumed by the store, cache
and event adapters. Components never read the environment themselves.
"""
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, SecretStr, field_validator


class ParkhubSettings(BaseSettings):
    """Application settings for the parkhub service layer."""

    model_config = SettingsConfigDict(
        env_prefix="PARKHUB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    app_name: str = Field(default="parkhub")
    environment: str = Field(default="development")

    # Relational store
    db_host: str = Field(default="localhost")
    db_port: int = Field(default=5432)
    db_name: str = Field(default="parkhub")
    db_user: str = Field(default="postgres")
    db_password: SecretStr = Field(default=SecretStr("postgres"))
    db_pool_min_size: int = Field(default=2)
    db_pool_max_size: int = Field(default=10)
    db_command_timeout: float = Field(default=30.0)
    db_lock_timeout_ms: int = Field(default=5000)
    db_isolation: str = Field(default="read_committed")
    db_create_schema: bool = Field(default=False)

    # Backends: "postgres" or "memory" for the store, "redis" or "memory" for the cache
    store_backend: str = Field(default="postgres")
    cache_backend: str = Field(default="redis")

    # Cache
    cache_default_ttl: int = Field(default=0, ge=0)
    cache_max_entries: int = Field(default=10000, ge=1)
    redis_url: str = Field(default="redis://localhost:6379/0")
    redis_socket_timeout: float = Field(default=5.0)
    redis_connect_timeout: float = Field(default=5.0)
    redis_max_connections: int = Field(default=20)

    # Event sink
    events_enabled: bool = Field(default=True)
    events_channel_prefix: str = Field(default="")

    # Security
    password_hash_iterations: int = Field(default=390000)

    # Logging
    log_level: str = Field(default="INFO")
    log_verbosity: str = Field(default="NORMAL")
    log_format: str = Field(default="simple")
    enable_sql_logging: bool = Field(default=False)

    @field_validator("db_isolation")
    @classmethod
    def validate_isolation(cls, v: str) -> str:
        allowed = {"read_committed", "repeatable_read", "serializable"}
        if v not in allowed:
            raise ValueError(f"db_isolation must be one of {sorted(allowed)}")
        return v

    @field_validator("store_backend")
    @classmethod
    def validate_store_backend(cls, v: str) -> str:
        if v not in ("postgres", "memory"):
            raise ValueError("store_backend must be 'postgres' or 'memory'")
        return v

    @field_validator("cache_backend")
    @classmethod
    def validate_cache_backend(cls, v: str) -> str:
        if v not in ("redis", "memory"):
            raise ValueError("cache_backend must be 'redis' or 'memory'")
        return v

    @field_validator("db_pool_max_size")
    @classmethod
    def validate_pool_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("db_pool_max_size must be > 0")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def safe_dsn(self) -> str:
        """DSN without password for logging."""
        return f"postgresql://{self.db_user}@{self.db_host}:{self.db_port}/{self.db_name}"


@lru_cache()
def get_settings() -> ParkhubSettings:
    """Get cached settings instance."""
    return ParkhubSettings()


def reset_settings_cache() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
