"""SQLAlchemy implementation of UnitOfWork

A unit of work wraps the request's AsyncSession: one commit is one database
transaction, the atomic write unit the ledger relies on.
"""

from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        # Anything not committed by the time the block exits is discarded
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
