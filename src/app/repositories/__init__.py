from .rental_repository import RentalRepository
from .ledger_record_repository import (
    LedgerRecordRepository,
    PaymentRepository,
    ExpenseRepository,
    DueRepository,
)

__all__ = [
    "RentalRepository",
    "LedgerRecordRepository",
    "PaymentRepository",
    "ExpenseRepository",
    "DueRepository",
]
