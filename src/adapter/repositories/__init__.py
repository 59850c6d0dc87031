from .rental_repository import SqlAlchemyRentalRepository
from .ledger_record_repository import (
    SqlAlchemyLedgerRecordRepository,
    SqlAlchemyPaymentRepository,
    SqlAlchemyExpenseRepository,
    SqlAlchemyDueRepository,
    build_record_repositories,
)

__all__ = [
    "SqlAlchemyRentalRepository",
    "SqlAlchemyLedgerRecordRepository",
    "SqlAlchemyPaymentRepository",
    "SqlAlchemyExpenseRepository",
    "SqlAlchemyDueRepository",
    "build_record_repositories",
]
