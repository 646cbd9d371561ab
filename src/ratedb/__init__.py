"""Rate database layer: factory and public API."""

from ratedb.errors import StorageError
from ratedb.service import DatabaseService
from ratedb.sqlite_service import SQLiteDatabaseService

__all__ = [
    "DEFAULT_DB_URL",
    "DatabaseService",
    "SQLiteDatabaseService",
    "StorageError",
    "create_service",
]

DEFAULT_DB_URL = "sqlite:///exchange_rate.db"


def create_service(db_url: str, pool_size: int = 4) -> DatabaseService:
    """Create a DatabaseService from a connection URL.

    Supported schemes:
    - sqlite:///path/to/db  or  sqlite:///:memory:
    """
    if db_url.startswith("sqlite"):
        # sqlite:///foo.db -> foo.db, sqlite:///:memory: -> :memory:
        path = db_url.split(":///", 1)[1] if ":///" in db_url else ":memory:"
        return SQLiteDatabaseService(path, pool_size)
    raise ValueError(f"Unsupported database URL scheme: {db_url}")
