"""Rental Ledger Rules

Constants and pure functions shared by every ledger operation: which record
kinds exist, which aggregate field each kind drives, and how much a single
record contributes to that field.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable, Optional, Type, Union

from src.domain.due import Due
from src.domain.expense import Expense
from src.domain.payment import Payment, PaymentStatus

PAGE_SIZE = 15

# A single unit of work never carries more than this many record writes
WRITE_BATCH_LIMIT = 500

# One slot per migration chunk stays free for the aggregate update
MIGRATION_CHUNK_SIZE = WRITE_BATCH_LIMIT - 1

CURRENT_DATA_VERSION = 2

ZERO = Decimal("0")

CENT = Decimal("0.01")

LedgerRecord = Union[Payment, Expense, Due]


class RecordKind(str, Enum):
    """Child record stores owned by a rental"""
    PAYMENTS = "payments"
    EXPENSES = "expenses"
    DUES = "dues"

    @property
    def model(self) -> Type[LedgerRecord]:
        return _MODELS[self]

    @property
    def aggregate_field(self) -> str:
        return _AGGREGATE_FIELDS[self]

    @property
    def label(self) -> str:
        """Singular name, e.g. 'payment'"""
        return self.value[:-1]

    @property
    def not_found_code(self) -> str:
        return f"{self.label.upper()}_NOT_FOUND"


_MODELS = {
    RecordKind.PAYMENTS: Payment,
    RecordKind.EXPENSES: Expense,
    RecordKind.DUES: Due,
}

_AGGREGATE_FIELDS = {
    RecordKind.PAYMENTS: "total_payments",
    RecordKind.EXPENSES: "total_expenses",
    RecordKind.DUES: "total_dues",
}


def to_money(amount: Decimal) -> Decimal:
    """Round to the two-decimal scale of the stored amount columns"""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def to_naive_utc(value: datetime) -> datetime:
    """Stored dates are naive UTC; aware values are converted first"""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def contribution_of(
    kind: RecordKind, amount: Optional[Decimal], status: Optional[PaymentStatus] = None
) -> Decimal:
    """
    Amount a record adds to its kind's aggregate field

    Payments only count while PAID; expenses and dues always count.
    """
    amount = amount if amount is not None else ZERO
    if kind == RecordKind.PAYMENTS:
        return amount if status == PaymentStatus.PAID else ZERO
    return amount


def record_contribution(kind: RecordKind, record: LedgerRecord) -> Decimal:
    return contribution_of(kind, record.amount, getattr(record, "status", None))


@dataclass
class LedgerTotals:
    """The four aggregate figures cached on a rental"""

    total_payments: Decimal = ZERO
    total_expenses: Decimal = ZERO
    total_dues: Decimal = ZERO

    @property
    def net_income(self) -> Decimal:
        return self.total_payments - self.total_expenses

    def add(self, kind: RecordKind, amount: Decimal) -> None:
        field = kind.aggregate_field
        setattr(self, field, getattr(self, field) + amount)

    @classmethod
    def from_records(
        cls,
        payments: Iterable[Payment] = (),
        expenses: Iterable[Expense] = (),
        dues: Iterable[Due] = (),
    ) -> "LedgerTotals":
        """Recompute totals from scratch over full record histories"""
        totals = cls()
        for kind, records in (
            (RecordKind.PAYMENTS, payments),
            (RecordKind.EXPENSES, expenses),
            (RecordKind.DUES, dues),
        ):
            for record in records:
                totals.add(kind, record_contribution(kind, record))
        return totals


@dataclass(frozen=True)
class PageCursor:
    """
    Position of the last record of a page

    Records are ordered by date descending, then id ascending, so (date, id)
    pins a position even when several records share the same date.
    """

    date: datetime
    record_id: str
