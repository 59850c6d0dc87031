"""Legacy embedded record parsing

Legacy rentals carry their payments, expenses and dues inline, either as a
list or as a mapping keyed by record id. Both encodings are flattened to a
list on read and parsed into record entities here; the migration itself only
ever sees the tagged worklist.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Type
from pydantic import BaseModel, ConfigDict, Field, field_validator
from src.domain.base import generate_uuid
from src.domain.ledger import (
    LedgerRecord,
    LedgerTotals,
    RecordKind,
    ZERO,
    to_money,
    to_naive_utc,
)
from src.domain.payment import PaymentStatus
from src.domain.rental import Rental

logger = logging.getLogger(__name__)


def normalize_legacy_field(raw: Any) -> List[Dict[str, Any]]:
    """
    Flatten one embedded field to a list of raw records

    Args:
        raw: NULL, a list of records, or a mapping of record id to record

    Returns:
        Raw records in stored order; mapping keys fill in missing ids

    Raises:
        ValueError: raw is neither a list nor a mapping
    """
    if raw is None:
        return []

    if isinstance(raw, Mapping):
        items = []
        for key, value in raw.items():
            if isinstance(value, Mapping) and not value.get("id"):
                value = {**value, "id": key}
            items.append(value)
    elif isinstance(raw, list):
        items = list(raw)
    else:
        raise ValueError(f"Unsupported legacy encoding: {type(raw).__name__}")

    for item in items:
        if not isinstance(item, Mapping):
            raise ValueError(f"Legacy record is not an object: {item!r}")

    return [dict(item) for item in items]


class LegacyRecord(BaseModel):
    """Fields common to every embedded record; unknown fields are ignored"""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    amount: Decimal = Field(default=ZERO, ge=0)
    date: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        if v is None or v == "":
            return None
        return str(v)

    @field_validator("amount", mode="before")
    @classmethod
    def missing_amount_is_zero(cls, v):
        return ZERO if v is None or v == "" else v

    @field_validator("date", mode="before")
    @classmethod
    def unwrap_timestamp(cls, v):
        # Firestore timestamps serialise as {"seconds": .., "nanoseconds": ..}
        if isinstance(v, Mapping):
            seconds = v.get("seconds", v.get("_seconds"))
            if seconds is None:
                raise ValueError(f"Unrecognised timestamp object: {v!r}")
            nanos = v.get("nanoseconds", v.get("_nanoseconds", 0)) or 0
            return datetime.fromtimestamp(seconds + nanos / 1e9, tz=timezone.utc)
        if v == "":
            return None
        return v

    @field_validator("amount")
    @classmethod
    def round_to_cents(cls, v: Decimal) -> Decimal:
        return to_money(v)

    @field_validator("date")
    @classmethod
    def stored_as_naive_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return None if v is None else to_naive_utc(v)


class LegacyPayment(LegacyRecord):
    status: PaymentStatus = PaymentStatus.PENDING
    notes: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def only_paid_is_paid(cls, v):
        if isinstance(v, str) and v.strip().lower() == PaymentStatus.PAID.value:
            return PaymentStatus.PAID
        return PaymentStatus.PENDING


class LegacyDescribedRecord(LegacyRecord):
    description: str = ""

    @field_validator("description", mode="before")
    @classmethod
    def missing_description_is_empty(cls, v):
        return "" if v is None else str(v)


_PARSERS: Dict[RecordKind, Type[LegacyRecord]] = {
    RecordKind.PAYMENTS: LegacyPayment,
    RecordKind.EXPENSES: LegacyDescribedRecord,
    RecordKind.DUES: LegacyDescribedRecord,
}


@dataclass(frozen=True)
class WorkItem:
    """One record to write, tagged with its destination store"""

    kind: RecordKind
    record: LedgerRecord


def parse_legacy_record(
    kind: RecordKind, raw: Dict[str, Any], rental_id: str, fallback_date: datetime
) -> LedgerRecord:
    parsed = _PARSERS[kind].model_validate(raw)
    values = parsed.model_dump()
    values["id"] = values["id"] or generate_uuid()
    values["date"] = values["date"] or fallback_date
    return kind.model(rental_id=rental_id, **values)


def build_worklist(rental: Rental) -> List[WorkItem]:
    """
    Parse every embedded record of a legacy rental

    Payments come first, then expenses, then dues. When one kind holds the
    same id twice only the last copy is kept, matching what an overwrite of
    the destination store would leave behind.

    Raises:
        ValueError: an embedded field or record cannot be parsed
    """
    worklist: List[WorkItem] = []

    for kind in RecordKind:
        raw_items = normalize_legacy_field(getattr(rental, kind.value))
        by_id: Dict[str, LedgerRecord] = {}

        for raw in raw_items:
            record = parse_legacy_record(kind, raw, rental.id, rental.start_date)
            if record.id in by_id:
                logger.warning(
                    f"Rental {rental.id} has duplicate {kind.label} id {record.id}; "
                    f"keeping the last copy"
                )
                del by_id[record.id]
            by_id[record.id] = record

        worklist.extend(WorkItem(kind=kind, record=r) for r in by_id.values())

    return worklist


def totals_of(worklist: List[WorkItem]) -> LedgerTotals:
    """Aggregates recomputed from the parsed records alone"""
    by_kind: Dict[RecordKind, List[LedgerRecord]] = {kind: [] for kind in RecordKind}
    for item in worklist:
        by_kind[item.kind].append(item.record)

    return LedgerTotals.from_records(
        payments=by_kind[RecordKind.PAYMENTS],
        expenses=by_kind[RecordKind.EXPENSES],
        dues=by_kind[RecordKind.DUES],
    )


def count_legacy_records(rental: Rental) -> Dict[str, int]:
    counts = {}
    for kind in RecordKind:
        raw = getattr(rental, kind.value)
        counts[kind.value] = len(raw) if isinstance(raw, (list, Mapping)) else 0
    return counts
