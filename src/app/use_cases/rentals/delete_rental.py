"""DeleteRental Use Case

Removes a rental together with every payment, expense and due it owns.
"""

import logging
from typing import Dict
from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.rental_repository import RentalRepository
from src.app.repositories.ledger_record_repository import LedgerRecordRepository
from src.app.use_cases.errors import from_exception, rental_not_found, unauthenticated
from src.domain.ledger import RecordKind, WRITE_BATCH_LIMIT
from .dtos import DeleteRentalResponseDTO

logger = logging.getLogger(__name__)


class DeleteRental:
    """
    Use Case: Delete a rental and its children

    Business Rules:
    1. Children are deleted before the rental row
    2. Each unit of work deletes at most WRITE_BATCH_LIMIT records
    3. The rental row goes last, in its own unit of work

    A failure part-way leaves the rental in place with fewer children; running
    the deletion again finishes the job.
    """

    batch_size: int = WRITE_BATCH_LIMIT

    def __init__(
        self,
        uow: UnitOfWork,
        rental_repo: RentalRepository,
        record_repos: Dict[RecordKind, LedgerRecordRepository],
    ):
        self.uow = uow
        self.rental_repo = rental_repo
        self.record_repos = record_repos

    async def execute(self, owner_id: str, rental_id: str) -> Result[DeleteRentalResponseDTO]:
        if not owner_id:
            return Return.err(unauthenticated())

        try:
            rental = await self.rental_repo.get_by_id(rental_id, owner_id=owner_id)
            if rental is None:
                return Return.err(rental_not_found(rental_id))

            records_deleted: Dict[str, int] = {}
            batches_committed = 0

            for kind, repo in self.record_repos.items():
                record_ids = await repo.list_ids(rental_id)
                deleted = 0

                for start in range(0, len(record_ids), self.batch_size):
                    chunk = record_ids[start:start + self.batch_size]
                    deleted += await repo.delete_many(rental_id, chunk)
                    await self.uow.commit()
                    batches_committed += 1

                    logger.debug(
                        f"Deleted {len(chunk)} {kind.value} of rental {rental_id}"
                    )

                records_deleted[kind.value] = deleted

            rental = await self.rental_repo.get_by_id(rental_id, owner_id=owner_id)
            if rental is not None:
                await self.rental_repo.delete(rental)
            await self.uow.commit()
            batches_committed += 1

            logger.info(
                f"Deleted rental {rental_id} with {sum(records_deleted.values())} "
                f"records in {batches_committed} batches"
            )

            return Return.ok(
                DeleteRentalResponseDTO(
                    rental_id=rental_id,
                    records_deleted=records_deleted,
                    batches_committed=batches_committed,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Deleting rental {rental_id} failed: {e}")
            return Return.err(
                from_exception(e, code="DELETE_RENTAL_FAILED", message="Failed to delete rental")
            )
