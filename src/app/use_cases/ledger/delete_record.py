"""DeletePayment / DeleteExpense / DeleteDue Use Cases"""

import logging
from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.rental_repository import RentalRepository
from src.app.repositories.ledger_record_repository import LedgerRecordRepository
from src.app.use_cases.errors import from_exception, rental_not_found
from src.domain.ledger import RecordKind, ZERO, record_contribution
from .access import resolve_ledger_rental
from .dtos import LedgerMutationResponseDTO, LedgerRecordDTO, RentalTotalsDTO

logger = logging.getLogger(__name__)


class DeleteLedgerRecord:
    """
    Use Case: Remove a payment, expense or due

    The removed record's contribution is always subtracted from the
    aggregate, even when it is zero.
    """

    kind: RecordKind

    def __init__(
        self,
        uow: UnitOfWork,
        rental_repo: RentalRepository,
        record_repo: LedgerRecordRepository,
    ):
        self.uow = uow
        self.rental_repo = rental_repo
        self.record_repo = record_repo

    async def execute(
        self, owner_id: str, rental_id: str, record_id: str
    ) -> Result[LedgerMutationResponseDTO]:
        try:
            rental_result = await resolve_ledger_rental(
                self.rental_repo, owner_id, rental_id, for_update=True
            )
            if rental_result.is_err():
                return rental_result

            record = await self.record_repo.get(rental_id, record_id)
            if record is None:
                return Return.err(
                    Error(
                        code=self.kind.not_found_code,
                        message=f"{self.kind.label.capitalize()} {record_id} not found",
                        reason=f"rental_id={rental_id}",
                    )
                )

            removed = LedgerRecordDTO.model_validate(record)
            delta = ZERO - record_contribution(self.kind, record)

            await self.record_repo.delete(record)

            rental = await self.rental_repo.apply_aggregate_delta(rental_id, self.kind, delta)
            if rental is None:
                await self.uow.rollback()
                return Return.err(rental_not_found(rental_id))

            response = LedgerMutationResponseDTO(
                kind=self.kind.value,
                record=removed,
                delta=delta,
                totals=RentalTotalsDTO.from_rental(rental),
            )

            await self.uow.commit()

            logger.info(
                f"Deleted {self.kind.label} {record_id} of rental {rental_id} (delta={delta})"
            )
            return Return.ok(response)

        except Exception as e:
            await self.uow.rollback()
            logger.error(
                f"Deleting {self.kind.label} {record_id} of rental {rental_id} failed: {e}"
            )
            return Return.err(
                from_exception(
                    e,
                    code=f"DELETE_{self.kind.label.upper()}_FAILED",
                    message=f"Failed to delete {self.kind.label}",
                )
            )


class DeletePayment(DeleteLedgerRecord):
    kind = RecordKind.PAYMENTS


class DeleteExpense(DeleteLedgerRecord):
    kind = RecordKind.EXPENSES


class DeleteDue(DeleteLedgerRecord):
    kind = RecordKind.DUES
