"""Data Transfer Objects for Rental Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from src.domain.ledger import to_naive_utc
from src.domain.rental import BadgeColor, RateType, RentalStatus


class CreateRentalCommandDTO(BaseModel):
    """
    Command DTO for creating a rental

    Aggregates and data_version are not accepted: a new rental always starts
    at zero on the current storage layout.
    """

    asset_id: str = Field(..., min_length=1, description="Rented asset")
    contact_id: str = Field(..., min_length=1, description="Renter")
    rate: Decimal = Field(..., gt=0, description="Rent per period (must be > 0)")
    rate_type: RateType = Field(default=RateType.MONTHLY)
    start_date: datetime
    next_payment_date: datetime
    badge_color: BadgeColor = Field(default=BadgeColor.BLUE)
    badge_character: str = Field(default="", max_length=1)
    status: RentalStatus = Field(default=RentalStatus.ACTIVE)

    @field_validator("start_date", "next_payment_date")
    @classmethod
    def stored_as_naive_utc(cls, v: datetime) -> datetime:
        return to_naive_utc(v)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "asset_id": "asset_a1",
                "contact_id": "contact_c7",
                "rate": "1500.00",
                "rate_type": "monthly",
                "start_date": "2024-01-01T00:00:00",
                "next_payment_date": "2024-02-01T00:00:00",
                "badge_color": "green",
                "badge_character": "A",
            }
        }
    )


class RentalChangesetDTO(BaseModel):
    """
    Field-level patch of a rental's descriptive terms

    Only the fields the caller actually sends are applied.
    """

    asset_id: Optional[str] = Field(default=None, min_length=1)
    contact_id: Optional[str] = Field(default=None, min_length=1)
    rate: Optional[Decimal] = Field(default=None, gt=0)
    rate_type: Optional[RateType] = None
    start_date: Optional[datetime] = None
    next_payment_date: Optional[datetime] = None
    badge_color: Optional[BadgeColor] = None
    badge_character: Optional[str] = Field(default=None, max_length=1)
    status: Optional[RentalStatus] = None

    @field_validator("start_date", "next_payment_date")
    @classmethod
    def stored_as_naive_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return None if v is None else to_naive_utc(v)

    def changes(self) -> Dict[str, Any]:
        return {
            field: value
            for field, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }


class RentalDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    asset_id: str
    contact_id: str
    rate: Decimal
    rate_type: RateType
    start_date: datetime
    next_payment_date: datetime
    badge_color: BadgeColor
    badge_character: str
    status: RentalStatus
    total_payments: Decimal
    total_expenses: Decimal
    total_dues: Decimal
    net_income: Decimal
    data_version: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class RentalListDTO(BaseModel):
    rentals: List[RentalDTO]
    total: int


class DeleteRentalResponseDTO(BaseModel):
    rental_id: str
    records_deleted: Dict[str, int] = Field(
        ..., description="Deleted child records per record kind"
    )
    batches_committed: int = Field(
        ..., description="Units of work committed, including the rental row delete"
    )


class PortfolioSummaryDTO(BaseModel):
    """
    Dashboard figures for one owner

    Sums cover normalized rentals only; legacy rentals are counted in
    unmigrated_rentals until they are migrated.
    """

    owner_id: str
    total_rentals: int
    active_rentals: int
    ended_rentals: int
    unmigrated_rentals: int
    total_payments: Decimal
    total_expenses: Decimal
    total_dues: Decimal
    net_income: Decimal
    overdue_rental_ids: List[str]
    generated_at: datetime
