"""ReconcileRentalAggregates Use Case

Compares every normalized rental's cached aggregates with sums computed by the
record stores.
"""

import logging
import time
from datetime import datetime
from typing import Dict, List, Optional
from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.rental_repository import RentalRepository
from src.app.repositories.ledger_record_repository import LedgerRecordRepository
from src.app.use_cases.errors import from_exception
from src.domain.ledger import LedgerTotals, RecordKind
from .dtos import AggregateDiscrepancyDTO, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class ReconcileRentalAggregates:
    """
    Use Case: Reconcile rental aggregates against their records

    Business Rules:
    1. Only normalized rentals are checked; legacy rentals have no store records
    2. total_payments must equal the sum of PAID payments
    3. total_expenses and total_dues must equal their stores' sums
    4. net_income must equal total_payments - total_expenses of the records
    5. Does NOT modify any data
    """

    def __init__(
        self,
        uow: UnitOfWork,
        rental_repo: RentalRepository,
        record_repos: Dict[RecordKind, LedgerRecordRepository],
    ):
        self.uow = uow
        self.rental_repo = rental_repo
        self.record_repos = record_repos

    async def execute(self, owner_id: Optional[str] = None) -> Result[ReconciliationResultDTO]:
        """
        Execute aggregate reconciliation

        Args:
            owner_id: Restrict the check to one owner (None = every owner)

        Returns:
            Result[ReconciliationResultDTO]: Rentals checked and discrepancies found
        """
        start_time = time.time()
        reconciliation_time = datetime.utcnow()

        try:
            logger.info("Starting rental aggregate reconciliation")

            rentals = await self.rental_repo.list_normalized(owner_id)
            total_rentals = len(rentals)

            logger.info(f"Found {total_rentals} rentals to reconcile")

            discrepancies: List[AggregateDiscrepancyDTO] = []

            for rental in rentals:
                calculated = LedgerTotals()
                for kind, repo in self.record_repos.items():
                    calculated.add(kind, await repo.sum_contributions(rental.id))

                expected = {
                    "total_payments": calculated.total_payments,
                    "total_expenses": calculated.total_expenses,
                    "total_dues": calculated.total_dues,
                    "net_income": calculated.net_income,
                }

                for field, calculated_value in expected.items():
                    cached_value = getattr(rental, field)
                    if cached_value == calculated_value:
                        continue

                    discrepancy = AggregateDiscrepancyDTO(
                        rental_id=rental.id,
                        owner_id=rental.owner_id,
                        aggregate_field=field,
                        cached_value=cached_value,
                        calculated_value=calculated_value,
                        discrepancy=cached_value - calculated_value,
                    )
                    discrepancies.append(discrepancy)

                    logger.warning(
                        f"Discrepancy found for rental {rental.id} "
                        f"(owner_id={rental.owner_id}): {field} "
                        f"cached={cached_value}, calculated={calculated_value}, "
                        f"discrepancy={discrepancy.discrepancy}"
                    )

            execution_time_ms = int((time.time() - start_time) * 1000)

            response = ReconciliationResultDTO(
                total_rentals_checked=total_rentals,
                discrepancies_found=len(discrepancies),
                discrepancies=discrepancies,
                reconciliation_time=reconciliation_time,
                execution_time_ms=execution_time_ms,
            )

            if discrepancies:
                logger.warning(
                    f"Reconciliation complete. Found {len(discrepancies)} discrepancies "
                    f"across {total_rentals} rentals in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Reconciliation complete. All {total_rentals} rentals consistent "
                    f"in {execution_time_ms}ms"
                )

            return Return.ok(response)

        except Exception as e:
            logger.error(f"Rental aggregate reconciliation failed: {e}")
            return Return.err(
                from_exception(
                    e,
                    code="RECONCILIATION_FAILED",
                    message="Failed to reconcile rental aggregates",
                )
            )
