"""AddPayment / AddExpense / AddDue Use Cases

Writes a new ledger record and applies its contribution to the parent
rental's aggregate in the same unit of work.
"""

import logging
from typing import Union
from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.rental_repository import RentalRepository
from src.app.repositories.ledger_record_repository import LedgerRecordRepository
from src.app.use_cases.errors import from_exception, rental_not_found
from src.domain.ledger import LedgerRecord, RecordKind, record_contribution
from .access import resolve_ledger_rental
from .dtos import (
    DueCreateDTO,
    ExpenseCreateDTO,
    LedgerMutationResponseDTO,
    LedgerRecordDTO,
    PaymentCreateDTO,
    RentalTotalsDTO,
)

logger = logging.getLogger(__name__)

RecordCreateDTO = Union[PaymentCreateDTO, ExpenseCreateDTO, DueCreateDTO]


class AddLedgerRecord:
    """
    Use Case: Record a payment, expense or due against a rental

    Business Rules:
    1. The rental must belong to the caller and be on the normalized layout
    2. The new record gets a freshly generated id
    3. delta = contribution of the new record (0 for a pending payment)
    4. The record and the aggregate change are committed together

    Flow:
    1. Load rental with lock (SELECT FOR UPDATE)
    2. Write record
    3. Apply delta to the aggregate field and net_income
    4. Commit
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
        self, owner_id: str, rental_id: str, command: RecordCreateDTO
    ) -> Result[LedgerMutationResponseDTO]:
        """
        Execute record creation

        Args:
            owner_id: Authenticated owner
            rental_id: Parent rental
            command: Create DTO matching the record kind

        Returns:
            Result[LedgerMutationResponseDTO]: Created record with the new totals or error
        """
        try:
            rental_result = await resolve_ledger_rental(
                self.rental_repo, owner_id, rental_id, for_update=True
            )
            if rental_result.is_err():
                return rental_result

            record = self._build_record(rental_id, command)
            created = await self.record_repo.add(record)

            delta = record_contribution(self.kind, created)
            rental = await self.rental_repo.apply_aggregate_delta(rental_id, self.kind, delta)
            if rental is None:
                await self.uow.rollback()
                return Return.err(rental_not_found(rental_id))

            response = LedgerMutationResponseDTO(
                kind=self.kind.value,
                record=LedgerRecordDTO.model_validate(created),
                delta=delta,
                totals=RentalTotalsDTO.from_rental(rental),
            )

            await self.uow.commit()

            logger.info(
                f"Added {self.kind.label} {created.id} to rental {rental_id} "
                f"(delta={delta})"
            )
            return Return.ok(response)

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Adding {self.kind.label} to rental {rental_id} failed: {e}")
            return Return.err(
                from_exception(
                    e,
                    code=f"ADD_{self.kind.label.upper()}_FAILED",
                    message=f"Failed to add {self.kind.label}",
                )
            )

    def _build_record(self, rental_id: str, command: RecordCreateDTO) -> LedgerRecord:
        return self.kind.model(rental_id=rental_id, **command.model_dump())


class AddPayment(AddLedgerRecord):
    kind = RecordKind.PAYMENTS


class AddExpense(AddLedgerRecord):
    kind = RecordKind.EXPENSES


class AddDue(AddLedgerRecord):
    kind = RecordKind.DUES
