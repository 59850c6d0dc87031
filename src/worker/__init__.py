"""Background workers for the rental ledger service"""
from .aggregate_reconciler import AggregateReconcilerWorker
from .migration_runner import MigrationRunnerWorker

__all__ = ["AggregateReconcilerWorker", "MigrationRunnerWorker"]
