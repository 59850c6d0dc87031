"""UpdatePayment / UpdateExpense / UpdateDue Use Cases

Applies a field-level changeset to an existing ledger record and moves the
parent aggregate by the change in the record's contribution.
"""

import logging
from typing import Union
from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.rental_repository import RentalRepository
from src.app.repositories.ledger_record_repository import LedgerRecordRepository
from src.app.use_cases.errors import from_exception, rental_not_found
from src.domain.ledger import RecordKind, ZERO, contribution_of
from .access import resolve_ledger_rental
from .dtos import (
    DueChangesetDTO,
    ExpenseChangesetDTO,
    LedgerMutationResponseDTO,
    LedgerRecordDTO,
    PaymentChangesetDTO,
    RentalTotalsDTO,
)

logger = logging.getLogger(__name__)

RecordChangesetDTO = Union[PaymentChangesetDTO, ExpenseChangesetDTO, DueChangesetDTO]


class UpdateLedgerRecord:
    """
    Use Case: Change fields of a payment, expense or due

    Business Rules:
    1. Only the fields present in the changeset are written
    2. delta = contribution(new amount, new status) - contribution(old amount, old status)
    3. The aggregate is only written when delta != 0
    4. The record and the aggregate change are committed together
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
        self,
        owner_id: str,
        rental_id: str,
        record_id: str,
        changeset: RecordChangesetDTO,
    ) -> Result[LedgerMutationResponseDTO]:
        try:
            rental_result = await resolve_ledger_rental(
                self.rental_repo, owner_id, rental_id, for_update=True
            )
            if rental_result.is_err():
                return rental_result
            rental = rental_result.value

            record = await self.record_repo.get(rental_id, record_id)
            if record is None:
                return Return.err(
                    Error(
                        code=self.kind.not_found_code,
                        message=f"{self.kind.label.capitalize()} {record_id} not found",
                        reason=f"rental_id={rental_id}",
                    )
                )

            changes = changeset.changes()

            old_contribution = contribution_of(
                self.kind, record.amount, getattr(record, "status", None)
            )
            new_contribution = contribution_of(
                self.kind,
                changes.get("amount", record.amount),
                changes.get("status", getattr(record, "status", None)),
            )
            delta = new_contribution - old_contribution

            for field, value in changes.items():
                setattr(record, field, value)
            record = await self.record_repo.update(record)

            if delta != ZERO:
                rental = await self.rental_repo.apply_aggregate_delta(
                    rental_id, self.kind, delta
                )
                if rental is None:
                    await self.uow.rollback()
                    return Return.err(rental_not_found(rental_id))

            response = LedgerMutationResponseDTO(
                kind=self.kind.value,
                record=LedgerRecordDTO.model_validate(record),
                delta=delta,
                totals=RentalTotalsDTO.from_rental(rental),
            )

            await self.uow.commit()

            logger.info(
                f"Updated {self.kind.label} {record_id} of rental {rental_id} "
                f"(fields={sorted(changes)}, delta={delta})"
            )
            return Return.ok(response)

        except Exception as e:
            await self.uow.rollback()
            logger.error(
                f"Updating {self.kind.label} {record_id} of rental {rental_id} failed: {e}"
            )
            return Return.err(
                from_exception(
                    e,
                    code=f"UPDATE_{self.kind.label.upper()}_FAILED",
                    message=f"Failed to update {self.kind.label}",
                )
            )


class UpdatePayment(UpdateLedgerRecord):
    kind = RecordKind.PAYMENTS


class UpdateExpense(UpdateLedgerRecord):
    kind = RecordKind.EXPENSES


class UpdateDue(UpdateLedgerRecord):
    kind = RecordKind.DUES
