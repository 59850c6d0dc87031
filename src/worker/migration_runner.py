"""Legacy Record Migration Runner

Operator tool that migrates all legacy rentals of one owner outside the
request path, or lists them with --dry-run.
"""

import asyncio
import logging
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.ledger_record_repository import build_record_repositories
from src.adapter.repositories.rental_repository import SqlAlchemyRentalRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.migration import (
    BatchMigrationResultDTO,
    ListUnmigratedRentals,
    MigrateOwnerRentals,
    MigrationResultDTO,
    UnmigratedRentalsDTO,
)

logger = logging.getLogger(__name__)


class MigrationRunnerWorker:
    """
    Runs the batch migration for one owner

    Each run uses one session; every chunk and every rental's final update is
    committed as it completes, so an interrupted run can be started again and
    picks up the rentals that are still legacy.
    """

    def __init__(self, db_uri: Optional[str] = None):
        self.db_uri = db_uri or ApplicationConfig.DB_URI

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("MigrationRunnerWorker initialized")

    async def list_pending(self, owner_id: str) -> UnmigratedRentalsDTO:
        async with self.async_session_factory() as session:
            use_case = ListUnmigratedRentals(
                uow=SqlAlchemyUnitOfWork(session),
                rental_repo=SqlAlchemyRentalRepository(session),
            )
            result = await use_case.execute(owner_id)

            if result.is_err():
                raise RuntimeError(f"Listing unmigrated rentals failed: {result.error.message}")

            return result.value

    async def run_once(self, owner_id: str) -> Optional[BatchMigrationResultDTO]:
        """
        Migrate every legacy rental of the owner

        Returns:
            Batch result, or None when migration is disabled

        Raises:
            RuntimeError: the batch could not start
        """
        if not ApplicationConfig.MIGRATION_ENABLED:
            logger.info("Legacy migration is disabled, skipping")
            return None

        async with self.async_session_factory() as session:
            use_case = MigrateOwnerRentals(
                uow=SqlAlchemyUnitOfWork(session),
                rental_repo=SqlAlchemyRentalRepository(session),
                record_repos=build_record_repositories(session),
            )

            result = await use_case.execute(owner_id, on_progress=self._log_progress)

            if result.is_err():
                logger.error(f"Migration failed: {result.error.message}")
                raise RuntimeError(f"Migration failed: {result.error.message}")

            batch = result.value
            if not batch.completed:
                logger.error(
                    f"Migration stopped at rental {batch.failed_rental_id}: "
                    f"{batch.error.reason}. "
                    f"{len(batch.remaining_rental_ids)} rentals not attempted"
                )

            return batch

    def _log_progress(self, result: MigrationResultDTO, position: int, total: int) -> None:
        logger.info(
            f"[{position}/{total}] rental {result.rental_id}: "
            f"{sum(result.records_migrated.values())} records, "
            f"{result.chunks_committed} chunks"
        )

    async def shutdown(self):
        await self.engine.dispose()
        logger.info("MigrationRunnerWorker shutdown complete")


async def main():
    """
    Usage:
        python -m src.worker.migration_runner --owner owner_123 --dry-run
        python -m src.worker.migration_runner --owner owner_123
    """
    import sys
    import argparse

    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Legacy Record Migration Runner")
    parser.add_argument("--owner", required=True, help="Owner whose rentals are migrated")
    parser.add_argument(
        "--dry-run", action="store_true", help="Only list the rentals that need migration"
    )
    args = parser.parse_args()

    worker = MigrationRunnerWorker()
    exit_code = 0

    try:
        if args.dry_run:
            pending = await worker.list_pending(args.owner)
            print(f"{pending.total} rentals need migration:")
            for rental in pending.rentals:
                print(f"  - {rental.id}: {rental.legacy_record_counts}")
        else:
            batch = await worker.run_once(args.owner)
            if batch is not None:
                print(f"Migrated {len(batch.migrated_rental_ids)} of {batch.total_unmigrated} rentals")
                if not batch.completed:
                    print(f"Failed at rental {batch.failed_rental_id}: {batch.error.reason}")
                    exit_code = 1
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()

    sys.exit(exit_code)


if __name__ == "__main__":
    asyncio.run(main())
