"""Aggregate Reconciliation Background Worker

Periodically checks that every normalized rental's cached totals match its
payment, expense and due records. Read-only: discrepancies are reported, never
corrected.

    python -m src.worker.aggregate_reconciler --once [--owner OWNER_ID]
    python -m src.worker.aggregate_reconciler --interval 3600

With --once the process exits with status 1 when any discrepancy was found.
"""

import argparse
import asyncio
import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.ledger_record_repository import build_record_repositories
from src.adapter.repositories.rental_repository import SqlAlchemyRentalRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.ledger import ReconcileRentalAggregates, ReconciliationResultDTO

logger = logging.getLogger(__name__)


def summarize(result: ReconciliationResultDTO) -> List[str]:
    """One headline, then one line per discrepancy"""
    lines = [
        f"Checked {result.total_rentals_checked} rentals in {result.execution_time_ms}ms, "
        f"{result.discrepancies_found} discrepancies"
    ]
    for d in result.discrepancies:
        lines.append(
            f"rental {d.rental_id} (owner {d.owner_id}) {d.aggregate_field}: "
            f"cached={d.cached_value} calculated={d.calculated_value} diff={d.discrepancy}"
        )
    return lines


class AggregateReconcilerWorker:
    """Runs ReconcileRentalAggregates once or on an interval until stopped"""

    def __init__(self, db_uri: Optional[str] = None):
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )
        self._stopped = False

    async def run_once(self, owner_id: Optional[str] = None) -> ReconciliationResultDTO:
        """
        Reconcile one owner's rentals, or every owner's when owner_id is None

        Raises:
            RuntimeError: the reconciliation itself failed
        """
        if not ApplicationConfig.RECONCILIATION_ENABLED:
            logger.info("Aggregate reconciliation is disabled, skipping")
            return ReconciliationResultDTO(
                total_rentals_checked=0,
                discrepancies_found=0,
                discrepancies=[],
                reconciliation_time=datetime.utcnow(),
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            result = await ReconcileRentalAggregates(
                uow=SqlAlchemyUnitOfWork(session),
                rental_repo=SqlAlchemyRentalRepository(session),
                record_repos=build_record_repositories(session),
            ).execute(owner_id)

        if result.is_err():
            raise RuntimeError(f"Reconciliation failed: {result.error.message}")

        headline, *details = summarize(result.value)
        if details:
            logger.warning(headline)
            for line in details:
                logger.warning(line)
        else:
            logger.info(headline)
        return result.value

    async def run_forever(self, interval_seconds: int = 86400, owner_id: Optional[str] = None):
        logger.info(f"Reconciling aggregates every {interval_seconds}s")

        while not self._stopped:
            try:
                await self.run_once(owner_id)
            except Exception as e:
                logger.error(f"Reconciliation cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    def stop(self) -> None:
        """The loop ends after the cycle in progress"""
        self._stopped = True

    async def shutdown(self):
        self.stop()
        await self.engine.dispose()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rental Aggregate Reconciliation Worker")
    parser.add_argument("--once", action="store_true", help="Run once and exit")
    parser.add_argument(
        "--interval",
        type=int,
        default=ApplicationConfig.RECONCILIATION_INTERVAL_SECONDS,
        help="Interval between runs in seconds",
    )
    parser.add_argument("--owner", default=None, help="Only check this owner's rentals")
    return parser.parse_args(argv)


async def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    worker = AggregateReconcilerWorker()
    try:
        if args.once:
            result = await worker.run_once(args.owner)
            return 1 if result.discrepancies_found else 0
        await worker.run_forever(interval_seconds=args.interval, owner_id=args.owner)
        return 0
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
