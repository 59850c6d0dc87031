"""GetPortfolioSummary Use Case

Dashboard figures across all rentals of one owner.
"""

from datetime import datetime
from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.rental_repository import RentalRepository
from src.app.use_cases.errors import from_exception, unauthenticated
from src.domain.ledger import LedgerTotals
from src.domain.rental import RentalStatus
from .dtos import PortfolioSummaryDTO


class GetPortfolioSummary:
    """
    Use Case: Summarise an owner's rentals

    Business Rules:
    1. Sums use the cached aggregates of normalized rentals only
    2. A rental is overdue when it is active and its next_payment_date has passed
    """

    def __init__(self, uow: UnitOfWork, rental_repo: RentalRepository):
        self.uow = uow
        self.rental_repo = rental_repo

    async def execute(self, owner_id: str) -> Result[PortfolioSummaryDTO]:
        if not owner_id:
            return Return.err(unauthenticated())

        try:
            now = datetime.utcnow()
            rentals = await self.rental_repo.list_by_owner(owner_id)

            totals = LedgerTotals()
            unmigrated = 0
            for rental in rentals:
                if rental.is_legacy:
                    unmigrated += 1
                    continue
                totals.total_payments += rental.total_payments
                totals.total_expenses += rental.total_expenses
                totals.total_dues += rental.total_dues

            active = [r for r in rentals if r.status == RentalStatus.ACTIVE]
            overdue = [r.id for r in active if r.next_payment_date < now]

            return Return.ok(
                PortfolioSummaryDTO(
                    owner_id=owner_id,
                    total_rentals=len(rentals),
                    active_rentals=len(active),
                    ended_rentals=len(rentals) - len(active),
                    unmigrated_rentals=unmigrated,
                    total_payments=totals.total_payments,
                    total_expenses=totals.total_expenses,
                    total_dues=totals.total_dues,
                    net_income=totals.net_income,
                    overdue_rental_ids=overdue,
                    generated_at=now,
                )
            )

        except Exception as e:
            return Return.err(
                from_exception(
                    e, code="GET_PORTFOLIO_SUMMARY_FAILED", message="Failed to summarise rentals"
                )
            )
