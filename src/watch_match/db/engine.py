from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine as sa_create_async_engine

from watch_match.config.settings import get_settings

_engine: AsyncEngine | None = None


def get_engine(echo: bool = False) -> AsyncEngine:
    """Return a cached async engine for the configured database."""
    global _engine
    if _engine is None:
        _engine = sa_create_async_engine(get_settings().database_url, echo=echo)
    return _engine
