"""Core utility functions."""

# Async driver suffix -> sync driver suffix used by Alembic
_SYNC_DRIVERS = {
    "+asyncpg": "+psycopg",
    "+aiosqlite": "",
}


def convert_async_db_url_to_sync(database_url: str) -> str:
    """
    Convert an async database URL to a sync database URL.

    Converts postgresql+asyncpg:// to postgresql+psycopg:// (psycopg3) and
    sqlite+aiosqlite:// to sqlite:// so migrations can run on a sync engine.
    Only the scheme is rewritten; SQLite paths such as ``sqlite:////abs/path.db``
    keep their slashes.

    Args:
        database_url: The async database URL (e.g., postgresql+asyncpg://...)

    Returns:
        The sync database URL (e.g., postgresql+psycopg://...)
    """
    scheme, separator, rest = database_url.partition("://")
    for async_driver, sync_driver in _SYNC_DRIVERS.items():
        if async_driver in scheme:
            return scheme.replace(async_driver, sync_driver) + separator + rest
    return database_url


def is_sqlite_url(database_url: str) -> bool:
    """Return True if the URL targets SQLite (any driver)."""
    return database_url.startswith("sqlite")
