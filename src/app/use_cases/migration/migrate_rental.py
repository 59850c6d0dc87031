"""MigrateRental Use Case

Moves a legacy rental's embedded payments, expenses and dues into the record
stores and recomputes its aggregates from scratch.
"""

import logging
from typing import Dict, List
from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.rental_repository import RentalRepository
from src.app.repositories.ledger_record_repository import LedgerRecordRepository
from src.app.use_cases.errors import rental_not_found, unauthenticated
from src.domain.ledger import (
    CURRENT_DATA_VERSION,
    LedgerRecord,
    LedgerTotals,
    MIGRATION_CHUNK_SIZE,
    RecordKind,
)
from src.domain.rental import Rental
from .dtos import MigrationResultDTO
from .legacy_records import WorkItem, build_worklist, totals_of

logger = logging.getLogger(__name__)


class MigrateRental:
    """
    Use Case: Convert one rental from the legacy to the normalized layout

    Business Rules:
    1. A rental already at the current data_version is left untouched
    2. Records keep their legacy id; records without one get a new id
    3. Records are written in chunks of at most MIGRATION_CHUNK_SIZE, one
       committed unit of work per chunk
    4. Aggregates are recomputed from the migrated records, never copied from
       the rental's stale cached values
    5. The final unit writes the aggregates, bumps data_version and clears the
       embedded fields

    Chunks are written with overwrite semantics, so a migration that failed
    part-way can simply be run again. Until the final unit commits the rental
    stays legacy, and the final unit only applies while the stored rental is
    still legacy, so a concurrent run that completed first is never overwritten.
    """

    chunk_size: int = MIGRATION_CHUNK_SIZE

    def __init__(
        self,
        uow: UnitOfWork,
        rental_repo: RentalRepository,
        record_repos: Dict[RecordKind, LedgerRecordRepository],
    ):
        self.uow = uow
        self.rental_repo = rental_repo
        self.record_repos = record_repos

    async def execute(self, owner_id: str, rental_id: str) -> Result[MigrationResultDTO]:
        """
        Execute migration of one rental

        Args:
            owner_id: Authenticated owner
            rental_id: Rental to migrate

        Returns:
            Result[MigrationResultDTO]: Migrated record counts and new totals, or
            MIGRATION_FAILED naming the rental
        """
        if not owner_id:
            return Return.err(unauthenticated())

        try:
            rental = await self.rental_repo.get_by_id(
                rental_id, owner_id=owner_id, for_update=True
            )
            if rental is None:
                return Return.err(rental_not_found(rental_id))

            if not rental.is_legacy:
                logger.info(f"Rental {rental_id} is already migrated, skipping")
                return Return.ok(self._already_migrated(rental))

            worklist = build_worklist(rental)
            logger.info(
                f"Migrating rental {rental_id}: {len(worklist)} records "
                f"in chunks of {self.chunk_size}"
            )

            chunks_committed = 0
            for start in range(0, len(worklist), self.chunk_size):
                if start:
                    # Earlier chunk commits released the lock taken on the first read
                    current = await self.rental_repo.get_by_id(rental_id, for_update=True)
                    if current is None or not current.is_legacy:
                        return await self._yield_to_concurrent_run(rental_id)
                chunk = worklist[start:start + self.chunk_size]
                await self._write_chunk(chunk)
                await self.uow.commit()
                chunks_committed += 1

                logger.debug(
                    f"Rental {rental_id}: committed chunk {chunks_committed} "
                    f"({len(chunk)} records)"
                )

            totals = totals_of(worklist)
            if not await self.rental_repo.complete_migration(rental_id, totals):
                return await self._yield_to_concurrent_run(rental_id)
            await self.uow.commit()

            records_migrated = {kind.value: 0 for kind in RecordKind}
            for item in worklist:
                records_migrated[item.kind.value] += 1

            logger.info(
                f"Migrated rental {rental_id}: {records_migrated}, "
                f"net_income={totals.net_income}"
            )

            return Return.ok(
                self._result(rental_id, totals, records_migrated, chunks_committed)
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Migration of rental {rental_id} failed: {e}")
            return Return.err(
                Error(
                    code="MIGRATION_FAILED",
                    message=f"Failed to migrate rental {rental_id}",
                    reason=str(e),
                )
            )

    async def _yield_to_concurrent_run(self, rental_id: str) -> Result[MigrationResultDTO]:
        """Another run migrated (or removed) the rental first; keep what it stored"""
        await self.uow.rollback()
        current = await self.rental_repo.get_by_id(rental_id)
        if current is None:
            return Return.err(rental_not_found(rental_id))
        logger.info(f"Rental {rental_id} was migrated concurrently, keeping its totals")
        return Return.ok(self._already_migrated(current))

    async def _write_chunk(self, chunk: List[WorkItem]) -> None:
        by_kind: Dict[RecordKind, List[LedgerRecord]] = {}
        for item in chunk:
            by_kind.setdefault(item.kind, []).append(item.record)

        for kind, records in by_kind.items():
            await self.record_repos[kind].upsert_many(records)

    def _already_migrated(self, rental: Rental) -> MigrationResultDTO:
        return MigrationResultDTO(
            rental_id=rental.id,
            already_migrated=True,
            total_payments=rental.total_payments,
            total_expenses=rental.total_expenses,
            total_dues=rental.total_dues,
            net_income=rental.net_income,
            data_version=rental.data_version,
        )

    def _result(
        self,
        rental_id: str,
        totals: LedgerTotals,
        records_migrated: Dict[str, int],
        chunks_committed: int,
    ) -> MigrationResultDTO:
        return MigrationResultDTO(
            rental_id=rental_id,
            records_migrated=records_migrated,
            chunks_committed=chunks_committed,
            total_payments=totals.total_payments,
            total_expenses=totals.total_expenses,
            total_dues=totals.total_dues,
            net_income=totals.net_income,
            data_version=CURRENT_DATA_VERSION,
        )
