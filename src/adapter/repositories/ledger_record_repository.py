"""SQLAlchemy implementation of the ledger record stores

One generic implementation serves payments, expenses and dues; the concrete
classes only pin the record kind.
"""

from decimal import Decimal
from typing import Dict, List, Optional, Sequence
from sqlalchemy import and_, delete, or_
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.ledger_record_repository import (
    DueRepository,
    ExpenseRepository,
    LedgerRecordRepository,
    PaymentRepository,
)
from src.domain.ledger import LedgerRecord, PageCursor, RecordKind
from src.domain.payment import PaymentStatus


class SqlAlchemyLedgerRecordRepository(LedgerRecordRepository):
    """
    SQLAlchemy implementation of LedgerRecordRepository

    Features:
    - Keyset pagination on (date DESC, id ASC)
    - Upsert by (rental_id, id) for idempotent migration writes
    - Store-side contribution sums for reconciliation
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.model = self.kind.model

    async def get(self, rental_id: str, record_id: str) -> Optional[LedgerRecord]:
        stmt = select(self.model).where(
            self.model.rental_id == rental_id,
            self.model.id == record_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def add(self, record: LedgerRecord) -> LedgerRecord:
        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)
        return record

    async def update(self, record: LedgerRecord) -> LedgerRecord:
        self.session.add(record)
        await self.session.flush()
        return record

    async def delete(self, record: LedgerRecord) -> None:
        await self.session.delete(record)
        await self.session.flush()

    async def upsert_many(self, records: Sequence[LedgerRecord]) -> None:
        """
        Write records with set semantics

        A record whose (rental_id, id) already exists is overwritten, so
        re-running a partially committed migration does not conflict.

        Args:
            records: Records to write
        """
        for record in records:
            await self.session.merge(record)
        await self.session.flush()

    async def list_page(
        self, rental_id: str, cursor: Optional[PageCursor], limit: int
    ) -> List[LedgerRecord]:
        """
        Retrieve one page of records after the cursor

        Args:
            rental_id: Parent rental ID
            cursor: (date, id) of the last record of the previous page
            limit: Maximum number of records to return

        Returns:
            Records ordered by date DESC, id ASC
        """
        stmt = select(self.model).where(self.model.rental_id == rental_id)

        if cursor is not None:
            stmt = stmt.where(
                or_(
                    self.model.date < cursor.date,
                    and_(
                        self.model.date == cursor.date,
                        self.model.id > cursor.record_id,
                    ),
                )
            )

        stmt = self._ordered(stmt).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_all(self, rental_id: str) -> List[LedgerRecord]:
        stmt = self._ordered(
            select(self.model).where(self.model.rental_id == rental_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_ids(self, rental_id: str) -> List[str]:
        stmt = select(self.model.id).where(self.model.rental_id == rental_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_many(self, rental_id: str, record_ids: Sequence[str]) -> int:
        if not record_ids:
            return 0

        stmt = (
            delete(self.model)
            .where(self.model.rental_id == rental_id)
            .where(self.model.id.in_(list(record_ids)))
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def count(self, rental_id: str) -> int:
        stmt = select(func.count()).select_from(self.model).where(
            self.model.rental_id == rental_id
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def sum_contributions(self, rental_id: str) -> Decimal:
        stmt = select(func.coalesce(func.sum(self.model.amount), 0)).where(
            self.model.rental_id == rental_id
        )

        if self.kind == RecordKind.PAYMENTS:
            stmt = stmt.where(self.model.status == PaymentStatus.PAID)

        result = await self.session.execute(stmt)
        return Decimal(str(result.scalar() or 0))

    def _ordered(self, stmt):
        return stmt.order_by(self.model.date.desc(), self.model.id.asc())


class SqlAlchemyPaymentRepository(SqlAlchemyLedgerRecordRepository, PaymentRepository):
    pass


class SqlAlchemyExpenseRepository(SqlAlchemyLedgerRecordRepository, ExpenseRepository):
    pass


class SqlAlchemyDueRepository(SqlAlchemyLedgerRecordRepository, DueRepository):
    pass


def build_record_repositories(
    session: AsyncSession,
) -> Dict[RecordKind, LedgerRecordRepository]:
    """Record store per kind, all bound to the same session"""
    return {
        RecordKind.PAYMENTS: SqlAlchemyPaymentRepository(session),
        RecordKind.EXPENSES: SqlAlchemyExpenseRepository(session),
        RecordKind.DUES: SqlAlchemyDueRepository(session),
    }
