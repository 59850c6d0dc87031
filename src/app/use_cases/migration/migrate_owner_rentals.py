"""MigrateOwnerRentals Use Case

Migrates every legacy rental of an owner, one rental at a time.
"""

import logging
from typing import Callable, Dict, List, Optional
from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.rental_repository import RentalRepository
from src.app.repositories.ledger_record_repository import LedgerRecordRepository
from src.app.use_cases.errors import from_exception, unauthenticated
from src.domain.ledger import RecordKind
from .dtos import BatchMigrationResultDTO, MigrationErrorDTO, MigrationResultDTO
from .migrate_rental import MigrateRental

logger = logging.getLogger(__name__)

# Called after each successful rental with (result, position, total)
ProgressCallback = Callable[[MigrationResultDTO, int, int], None]


class MigrateOwnerRentals:
    """
    Use Case: Migrate all of an owner's legacy rentals

    Business Rules:
    1. Rentals are migrated sequentially, oldest first
    2. The batch halts at the first failure and reports PARTIAL_MIGRATION
       naming the failed rental
    3. Rentals migrated before the failure are never rolled back
    4. Rentals after the failure are reported as remaining and stay legacy
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
        self.migrate_rental = MigrateRental(uow, rental_repo, record_repos)

    async def execute(
        self, owner_id: str, on_progress: Optional[ProgressCallback] = None
    ) -> Result[BatchMigrationResultDTO]:
        """
        Execute batch migration

        Args:
            owner_id: Authenticated owner
            on_progress: Optional callback invoked after each migrated rental

        Returns:
            Result[BatchMigrationResultDTO]: Ok even when the batch halted part-way;
            inspect completed / failed_rental_id
        """
        if not owner_id:
            return Return.err(unauthenticated())

        try:
            rentals = await self.rental_repo.list_unmigrated(owner_id)
        except Exception as e:
            return Return.err(
                from_exception(
                    e,
                    code="LIST_UNMIGRATED_FAILED",
                    message="Failed to list unmigrated rentals",
                )
            )

        rental_ids = [rental.id for rental in rentals]
        total = len(rental_ids)
        logger.info(f"Starting migration of {total} rentals for owner {owner_id}")

        migrated: List[str] = []

        for position, rental_id in enumerate(rental_ids, start=1):
            result = await self.migrate_rental.execute(owner_id, rental_id)

            if result.is_err():
                logger.error(
                    f"Migration halted at rental {rental_id} ({position}/{total}): "
                    f"{result.error.message}"
                )
                return Return.ok(
                    BatchMigrationResultDTO(
                        owner_id=owner_id,
                        total_unmigrated=total,
                        migrated_rental_ids=migrated,
                        failed_rental_id=rental_id,
                        error=MigrationErrorDTO(
                            code="PARTIAL_MIGRATION",
                            message=(
                                f"Migration stopped at rental {rental_id} after "
                                f"{len(migrated)} of {total} rentals"
                            ),
                            reason=f"{result.error.code}: {result.error.reason}",
                        ),
                        remaining_rental_ids=rental_ids[position:],
                        completed=False,
                    )
                )

            migrated.append(rental_id)
            if on_progress is not None:
                on_progress(result.value, position, total)

        logger.info(f"Migrated {len(migrated)} rentals for owner {owner_id}")

        return Return.ok(
            BatchMigrationResultDTO(
                owner_id=owner_id,
                total_unmigrated=total,
                migrated_rental_ids=migrated,
                completed=True,
            )
        )
