"""Database configuration entity for parkhub."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class DatabaseConfig:
    """Connection and transaction configuration for the relational store."""

    host: str = "localhost"
    port: int = 5432
    database: str = "parkhub"
    user: str = "postgres"
    password: Optional[str] = None
    pool_min_size: int = 2
    pool_max_size: int = 10
    command_timeout: float = 30.0
    lock_timeout_ms: int = 5000
    isolation: str = "read_committed"

    def __post_init__(self):
        if self.pool_min_size < 0:
            raise ValueError("pool_min_size must be >= 0")
        if self.pool_max_size < max(self.pool_min_size, 1):
            raise ValueError("pool_max_size must be >= pool_min_size and > 0")
        if self.lock_timeout_ms < 0:
            raise ValueError("lock_timeout_ms must be >= 0")

    @classmethod
    def from_settings(cls, settings) -> "DatabaseConfig":
        """Build from ParkhubSettings."""
        return cls(
            host=settings.db_host,
            port=settings.db_port,
            database=settings.db_name,
            user=settings.db_user,
            password=settings.db_password.get_secret_value(),
            pool_min_size=settings.db_pool_min_size,
            pool_max_size=settings.db_pool_max_size,
            command_timeout=settings.db_command_timeout,
            lock_timeout_ms=settings.db_lock_timeout_ms,
            isolation=settings.db_isolation,
        )

    @property
    def safe_dsn(self) -> str:
        """Get DSN without password for logging."""
        return f"postgresql://{self.user}@{self.host}:{self.port}/{self.database}"
