"""Process-wide database manager for the API server."""

from kickabout.shared.database import DatabaseManager, PoolConfig

from .config import Settings

_db_manager: DatabaseManager | None = None


def get_database_manager() -> DatabaseManager | None:
    return _db_manager


def init_database_manager(settings: Settings) -> DatabaseManager:
    global _db_manager
    _db_manager = DatabaseManager(
        settings.database_url,
        PoolConfig(
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            ssl=settings.database_ssl,
        ),
    )
    return _db_manager
