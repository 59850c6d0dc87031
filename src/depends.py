"""Database wiring for the API

One engine per process. Every request gets its own AsyncSession, so the
units of work of two requests never share a transaction.
"""

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig

# Stale pooled connections are replaced before use instead of surfacing as TRANSIENT_IO
engine = create_async_engine(
    ApplicationConfig.DB_URI, echo=False, future=True, pool_pre_ping=True
)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    """Request-scoped session, closed when the response is sent"""
    async with AsyncSessionLocal() as session:
        yield session
