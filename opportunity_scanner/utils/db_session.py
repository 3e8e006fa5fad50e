from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncEngine, AsyncSession
from typing import Optional
from functools import lru_cache

from opportunity_scanner.config.settings import settings

@lru_cache
def get_async_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """Returns a cached instance of the async engine."""
    return create_async_engine(
        database_url or settings.DATABASE_URL,
        echo=settings.DEBUG,
        pool_pre_ping=True,
    )

def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Returns a session factory bound to ``engine``."""
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
        class_=AsyncSession,
    )
