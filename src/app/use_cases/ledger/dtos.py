"""Data Transfer Objects for Ledger Use Cases

Pydantic models for command inputs and response outputs of the payment,
expense and due operations.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from src.domain.ledger import to_money, to_naive_utc
from src.domain.payment import PaymentStatus
from src.domain.rental import Rental
from src.app.use_cases.rentals.dtos import RentalDTO


class _StoredValuesDTO(BaseModel):
    """Brings amount and date to the form the record stores keep"""

    @field_validator("amount", check_fields=False)
    @classmethod
    def round_to_cents(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return None if v is None else to_money(v)

    @field_validator("date", check_fields=False)
    @classmethod
    def stored_as_naive_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return None if v is None else to_naive_utc(v)


class PaymentCreateDTO(_StoredValuesDTO):
    """Command DTO for recording a payment"""

    amount: Decimal = Field(..., ge=0, description="Amount received (>= 0)")
    date: datetime = Field(..., description="Payment date")
    status: PaymentStatus = Field(default=PaymentStatus.PAID)
    notes: Optional[str] = Field(default=None)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "amount": "1500.00",
                "date": "2024-02-01T00:00:00",
                "status": "paid",
                "notes": "February rent",
            }
        }
    )


class ExpenseCreateDTO(_StoredValuesDTO):
    """Command DTO for recording an expense"""

    amount: Decimal = Field(..., ge=0, description="Amount spent (>= 0)")
    date: datetime
    description: str = Field(default="")


class DueCreateDTO(_StoredValuesDTO):
    """Command DTO for recording a due"""

    amount: Decimal = Field(..., ge=0, description="Amount owed (>= 0)")
    date: datetime
    description: str = Field(default="")


class _ChangesetDTO(_StoredValuesDTO):
    # Fields that may be explicitly cleared with null
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset()

    def changes(self) -> Dict[str, Any]:
        """Fields the caller supplied, mapped to their new values"""
        return {
            field: value
            for field, value in self.model_dump(exclude_unset=True).items()
            if value is not None or field in self.nullable_fields
        }


class PaymentChangesetDTO(_ChangesetDTO):
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset({"notes"})

    amount: Optional[Decimal] = Field(default=None, ge=0)
    date: Optional[datetime] = None
    status: Optional[PaymentStatus] = None
    notes: Optional[str] = None


class ExpenseChangesetDTO(_ChangesetDTO):
    amount: Optional[Decimal] = Field(default=None, ge=0)
    date: Optional[datetime] = None
    description: Optional[str] = None


class DueChangesetDTO(_ChangesetDTO):
    amount: Optional[Decimal] = Field(default=None, ge=0)
    date: Optional[datetime] = None
    description: Optional[str] = None


class LedgerRecordDTO(BaseModel):
    """A payment, expense or due as returned to callers"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    rental_id: str
    amount: Decimal
    date: datetime
    status: Optional[PaymentStatus] = Field(default=None, description="Payments only")
    notes: Optional[str] = Field(default=None, description="Payments only")
    description: Optional[str] = Field(default=None, description="Expenses and dues only")
    created_at: Optional[datetime] = None


class RentalTotalsDTO(BaseModel):
    rental_id: str
    total_payments: Decimal
    total_expenses: Decimal
    total_dues: Decimal
    net_income: Decimal

    @classmethod
    def from_rental(cls, rental: Rental) -> "RentalTotalsDTO":
        return cls(
            rental_id=rental.id,
            total_payments=rental.total_payments,
            total_expenses=rental.total_expenses,
            total_dues=rental.total_dues,
            net_income=rental.net_income,
        )


class LedgerMutationResponseDTO(BaseModel):
    """
    Response DTO for add/update/delete of a ledger record

    `record` is the record after the change (the removed record for deletes);
    `delta` is what the change added to the kind's aggregate field.
    """

    kind: str
    record: LedgerRecordDTO
    delta: Decimal
    totals: RentalTotalsDTO


class LedgerPageDTO(BaseModel):
    kind: str
    items: List[LedgerRecordDTO]
    has_more: bool
    next_cursor: Optional[str] = Field(
        default=None, description="Opaque token for the next page (None when empty)"
    )


class RentalStatementDTO(BaseModel):
    """Complete ledger history of one rental, newest first per kind"""

    rental: RentalDTO
    payments: List[LedgerRecordDTO]
    expenses: List[LedgerRecordDTO]
    dues: List[LedgerRecordDTO]
    generated_at: datetime


class AggregateDiscrepancyDTO(BaseModel):
    rental_id: str
    owner_id: str
    aggregate_field: str
    cached_value: Decimal
    calculated_value: Decimal
    discrepancy: Decimal


class ReconciliationResultDTO(BaseModel):
    total_rentals_checked: int
    discrepancies_found: int
    discrepancies: List[AggregateDiscrepancyDTO]
    reconciliation_time: datetime
    execution_time_ms: int
