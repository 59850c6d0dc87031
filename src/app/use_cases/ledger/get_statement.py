"""GetRentalStatement Use Case

Full, unpaginated ledger history of one rental for statement export.
"""

from datetime import datetime
from typing import Dict
from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.rental_repository import RentalRepository
from src.app.repositories.ledger_record_repository import LedgerRecordRepository
from src.app.use_cases.errors import from_exception
from src.app.use_cases.rentals.dtos import RentalDTO
from src.domain.ledger import RecordKind
from .access import resolve_ledger_rental
from .dtos import LedgerRecordDTO, RentalStatementDTO


class GetRentalStatement:
    """
    Use Case: Read a rental with every payment, expense and due

    Read-only. Each kind is fetched in a single query with no cap, so very
    large histories are held in memory at once.
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

    async def execute(self, owner_id: str, rental_id: str) -> Result[RentalStatementDTO]:
        try:
            rental_result = await resolve_ledger_rental(self.rental_repo, owner_id, rental_id)
            if rental_result.is_err():
                return rental_result

            history = {}
            for kind in RecordKind:
                records = await self.record_repos[kind].list_all(rental_id)
                history[kind.value] = [LedgerRecordDTO.model_validate(r) for r in records]

            return Return.ok(
                RentalStatementDTO(
                    rental=RentalDTO.model_validate(rental_result.value),
                    generated_at=datetime.utcnow(),
                    **history,
                )
            )

        except Exception as e:
            return Return.err(
                from_exception(
                    e,
                    code="GET_STATEMENT_FAILED",
                    message="Failed to build rental statement",
                )
            )
