"""Rental Domain Entity

Aggregate root of the ledger. Carries the descriptive terms of a rental plus
running totals over its payments, expenses and dues.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Integer, JSON, Numeric
from src.domain.base import BaseModel, generate_uuid
from src.domain.ledger import CURRENT_DATA_VERSION, LedgerTotals


class RateType(str, Enum):
    DAILY = "daily"
    MONTHLY = "monthly"


class RentalStatus(str, Enum):
    ACTIVE = "active"
    ENDED = "ended"


class BadgeColor(str, Enum):
    """Colors available for the rental's list badge"""
    BLUE = "blue"
    GREEN = "green"
    RED = "red"
    YELLOW = "yellow"
    PURPLE = "purple"
    ORANGE = "orange"
    TEAL = "teal"
    PINK = "pink"
    BLACK = "black"
    GREY = "grey"
    MAROON = "maroon"
    LIGHTYELLOW = "lightyellow"
    DARKGREEN = "darkgreen"


class Rental(BaseModel, table=True):
    """
    Rental - an asset let to a contact

    Domain Rules:
    - rate is strictly positive
    - total_payments = sum of PAID payment amounts
    - total_expenses = sum of expense amounts
    - total_dues = sum of due amounts
    - net_income = total_payments - total_expenses
    - data_version NULL or < 2 marks a legacy rental whose records are still
      embedded in the payments/expenses/dues JSON columns; normalized rentals
      keep those columns NULL and store records in their own tables
    """

    __tablename__ = "rentals"
    __table_args__ = (
        CheckConstraint("rate > 0", name="rental_rate_positive"),
        Index("ix_rentals_owner_data_version", "owner_id", "data_version"),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        max_length=64,
        description="Opaque rental identifier"
    )

    owner_id: str = Field(
        index=True,
        description="Owning user, supplied by the identity provider"
    )

    asset_id: str = Field(description="Rented asset")

    contact_id: str = Field(description="Renter")

    rate: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Rent per rate period (> 0)"
    )

    rate_type: RateType = Field(default=RateType.MONTHLY)

    start_date: datetime

    next_payment_date: datetime

    badge_color: BadgeColor = Field(default=BadgeColor.BLUE)

    badge_character: str = Field(default="", max_length=1)

    status: RentalStatus = Field(default=RentalStatus.ACTIVE)

    total_payments: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
    )

    total_expenses: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
    )

    total_dues: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
    )

    net_income: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
    )

    # No column default: an explicit NULL must reach the row for legacy rentals
    data_version: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, nullable=True),
        description="Storage layout marker (NULL or 1 = legacy, 2 = normalized)"
    )

    # Legacy embedded records: a list of objects or an {id: object} mapping
    payments: Optional[Any] = Field(
        default=None, sa_column=Column(JSON(none_as_null=True), nullable=True)
    )
    expenses: Optional[Any] = Field(
        default=None, sa_column=Column(JSON(none_as_null=True), nullable=True)
    )
    dues: Optional[Any] = Field(
        default=None, sa_column=Column(JSON(none_as_null=True), nullable=True)
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_legacy(self) -> bool:
        return self.data_version is None or self.data_version < CURRENT_DATA_VERSION

    def totals(self) -> LedgerTotals:
        return LedgerTotals(
            total_payments=self.total_payments,
            total_expenses=self.total_expenses,
            total_dues=self.total_dues,
        )
