from .base import BaseModel, generate_uuid
from .payment import Payment, PaymentStatus
from .expense import Expense
from .due import Due
from .ledger import (
    PAGE_SIZE,
    WRITE_BATCH_LIMIT,
    MIGRATION_CHUNK_SIZE,
    CURRENT_DATA_VERSION,
    LedgerRecord,
    LedgerTotals,
    PageCursor,
    RecordKind,
    contribution_of,
    record_contribution,
)
from .rental import Rental, RateType, RentalStatus, BadgeColor

__all__ = [
    "BaseModel",
    "generate_uuid",
    "Payment",
    "PaymentStatus",
    "Expense",
    "Due",
    "PAGE_SIZE",
    "WRITE_BATCH_LIMIT",
    "MIGRATION_CHUNK_SIZE",
    "CURRENT_DATA_VERSION",
    "LedgerRecord",
    "LedgerTotals",
    "PageCursor",
    "RecordKind",
    "contribution_of",
    "record_contribution",
    "Rental",
    "RateType",
    "RentalStatus",
    "BadgeColor",
]
