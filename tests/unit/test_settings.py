"""Tests for settings and logging configuration."""

import pytest
from pydantic import ValidationError

from parkhub.config.logging_config import LoggingConfig, get_log_level_from_verbosity
from parkhub.config.settings import ParkhubSettings
from parkhub.features.cache.entities.config import CacheConfig
from parkhub.features.database.entities.config import DatabaseConfig


class TestSettings:

    def test_defaults(self):
        settings = ParkhubSettings(_env_file=None)
        assert settings.store_backend == "postgres"
        assert settings.cache_backend == "redis"
        assert settings.cache_default_ttl == 0

    def test_environment_prefix(self, monkeypatch):
        monkeypatch.setenv("PARKHUB_STORE_BACKEND", "memory")
        monkeypatch.setenv("PARKHUB_DB_PORT", "6543")
        settings = ParkhubSettings(_env_file=None)
        assert settings.store_backend == "memory"
        assert settings.db_port == 6543

    @pytest.mark.parametrize("field, value", [
        ("store_backend", "sqlite"),
        ("cache_backend", "memcached"),
        ("db_isolation", "read_uncommitted"),
        ("db_pool_max_size", 0),
    ])
    def test_rejects_invalid(self, field, value):
        with pytest.raises(ValidationError):
            ParkhubSettings(_env_file=None, **{field: value})

    def test_config_objects(self):
        settings = ParkhubSettings(_env_file=None, db_password="hunter2", cache_max_entries=5)
        database = DatabaseConfig.from_settings(settings)
        assert database.password == "hunter2"
        assert "hunter2" not in database.safe_dsn
        cache = CacheConfig.from_settings(settings)
        assert cache.max_entries == 5
        assert cache.to_connection_kwargs()["decode_responses"] is True


class TestLoggingConfig:

    @pytest.mark.parametrize("verbosity, level", [
        ("QUIET", "ERROR"), ("normal", "WARNING"), ("VERBOSE", "INFO"), ("DEBUG", "DEBUG"), ("bogus", "WARNING"),
    ])
    def test_verbosity_mapping(self, verbosity, level):
        assert get_log_level_from_verbosity(verbosity) == level

    def test_sql_logging_quieted_by_default(self):
        config = LoggingConfig.build()
        assert config["loggers"]["asyncpg"]["level"] == "WARNING"
        assert "asyncpg" not in LoggingConfig.build(enable_sql_logging=True)["loggers"]

    def test_explicit_level_wins(self):
        assert LoggingConfig.build(verbosity="QUIET", level="debug")["root"]["level"] == "DEBUG"
