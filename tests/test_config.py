import pytest

from kickabout.api.core.config import Settings
from kickabout.shared.database import DatabaseManager, PoolConfig


def make_settings(**overrides) -> Settings:
    values = {"jwt_secret_key": "k", "database_url": "postgresql://localhost/kickabout"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestSettings:
    def test_defaults(self):
        settings = make_settings(environment="development")
        assert settings.jwt_algorithm == "HS256"
        assert settings.database_ssl == "require"
        assert settings.port == 3001
        assert settings.run_migrations is True
        assert settings.cors_origins == ["http://localhost:5173"]
        assert settings.is_development and not settings.is_production

    def test_log_level_normalized(self):
        assert make_settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_falls_back(self):
        assert make_settings(log_level="chatty").log_level == "INFO"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("FRONTEND_URL", "https://kickabout.example.com")
        monkeypatch.setenv("ENVIRONMENT", "production")
        settings = make_settings()
        assert settings.cors_origins == ["https://kickabout.example.com"]
        assert settings.is_production


class TestDatabaseManager:
    @pytest.mark.parametrize(
        ("url", "mode"),
        [
            ("postgresql://u:p@db.example.com:5432/app", "session"),
            ("postgresql://u:p@pooler.example.com:6543/app", "transaction"),
        ],
    )
    def test_pooler_mode(self, url, mode):
        assert DatabaseManager(url)._pooler_mode == mode

    def test_transaction_pool_disables_statement_cache(self):
        manager = DatabaseManager("postgresql://u:p@pooler:6543/app", PoolConfig(max_size=4))
        kwargs = manager._transaction_pool_kwargs()
        assert kwargs["statement_cache_size"] == 0
        assert kwargs["min_size"] == 0
        assert kwargs["max_size"] == 4

    def test_ssl_disable(self):
        manager = DatabaseManager("postgresql://localhost/app", PoolConfig(ssl="disable"))
        assert manager._session_pool_kwargs()["ssl"] is False

    async def test_not_connected(self):
        manager = DatabaseManager("postgresql://localhost/app")
        assert not manager.is_connected
        assert await manager.check_health() is False
        with pytest.raises(RuntimeError):
            manager.pool
