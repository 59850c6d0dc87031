"""SQLAlchemy implementation of RentalRepository

Aggregate updates are issued as relative UPDATE statements so the database,
not the caller, adds the delta to the stored total.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import null, or_, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.rental_repository import RentalRepository
from src.domain.ledger import CURRENT_DATA_VERSION, LedgerTotals, RecordKind
from src.domain.rental import Rental, RentalStatus


def _legacy_layout():
    return or_(
        Rental.data_version.is_(None),
        Rental.data_version < CURRENT_DATA_VERSION,
    )


class SqlAlchemyRentalRepository(RentalRepository):
    """
    SQLAlchemy implementation of RentalRepository

    Features:
    - Owner-scoped lookups
    - Optional row locking (SELECT FOR UPDATE) ahead of aggregate updates
    - Reads always refresh already-loaded rentals, because aggregate and
      migration updates bypass the identity map
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(
        self, rental_id: str, owner_id: Optional[str] = None, for_update: bool = False
    ) -> Optional[Rental]:
        """
        Retrieve rental by ID with optional owner scope and row-level locking

        Args:
            rental_id: Rental identifier
            owner_id: If given, the rental must belong to this owner
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Rental if found, None otherwise
        """
        stmt = select(Rental).where(Rental.id == rental_id)

        if owner_id is not None:
            stmt = stmt.where(Rental.owner_id == owner_id)

        if for_update:
            stmt = stmt.with_for_update()

        stmt = stmt.execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_owner(
        self, owner_id: str, status: Optional[RentalStatus] = None
    ) -> List[Rental]:
        stmt = select(Rental).where(Rental.owner_id == owner_id)

        if status is not None:
            stmt = stmt.where(Rental.status == status)

        stmt = stmt.order_by(Rental.created_at.desc(), Rental.id.asc())
        return await self._fetch_all(stmt)

    async def list_unmigrated(self, owner_id: str) -> List[Rental]:
        stmt = (
            select(Rental)
            .where(Rental.owner_id == owner_id)
            .where(_legacy_layout())
            .order_by(Rental.created_at.asc(), Rental.id.asc())
        )
        return await self._fetch_all(stmt)

    async def list_normalized(self, owner_id: Optional[str] = None) -> List[Rental]:
        stmt = select(Rental).where(Rental.data_version >= CURRENT_DATA_VERSION)

        if owner_id is not None:
            stmt = stmt.where(Rental.owner_id == owner_id)

        stmt = stmt.order_by(Rental.created_at.asc(), Rental.id.asc())
        return await self._fetch_all(stmt)

    async def create(self, rental: Rental) -> Rental:
        """
        Create a new rental

        Args:
            rental: Rental entity to persist

        Returns:
            Created Rental
        """
        self.session.add(rental)
        await self.session.flush()
        await self.session.refresh(rental)
        return rental

    async def update(self, rental: Rental) -> Rental:
        rental.updated_at = datetime.utcnow()
        self.session.add(rental)
        await self.session.flush()
        return rental

    async def apply_aggregate_delta(
        self, rental_id: str, kind: RecordKind, delta: Decimal
    ) -> Optional[Rental]:
        """
        Increment one aggregate field in place and recompute net_income

        SET expressions see the pre-update row, so net_income is derived from
        the incremented payment/expense totals explicitly.

        Args:
            rental_id: Rental ID
            kind: Record kind whose aggregate field changes
            delta: Signed amount to add

        Returns:
            The refreshed Rental, or None if no row matched
        """
        total_payments = Rental.total_payments
        total_expenses = Rental.total_expenses

        if kind == RecordKind.PAYMENTS:
            total_payments = Rental.total_payments + delta
        elif kind == RecordKind.EXPENSES:
            total_expenses = Rental.total_expenses + delta

        values = {
            kind.aggregate_field: getattr(Rental, kind.aggregate_field) + delta,
            "net_income": total_payments - total_expenses,
            "updated_at": datetime.utcnow(),
        }

        stmt = (
            update(Rental)
            .where(Rental.id == rental_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)

        if result.rowcount == 0:
            return None

        return await self.get_by_id(rental_id)

    async def complete_migration(self, rental_id: str, totals: LedgerTotals) -> bool:
        stmt = (
            update(Rental)
            .where(Rental.id == rental_id)
            .where(_legacy_layout())
            .values(
                total_payments=totals.total_payments,
                total_expenses=totals.total_expenses,
                total_dues=totals.total_dues,
                net_income=totals.net_income,
                data_version=CURRENT_DATA_VERSION,
                payments=null(),
                expenses=null(),
                dues=null(),
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def delete(self, rental: Rental) -> None:
        await self.session.delete(rental)
        await self.session.flush()

    async def _fetch_all(self, stmt) -> List[Rental]:
        stmt = stmt.execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
