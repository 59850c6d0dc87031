"""Due Domain Entity

Money owed on a rental that has not yet been settled as a payment or booked
as an expense. Dues are tracked in Rental.total_dues and never affect net
income.
"""

from datetime import datetime
from decimal import Decimal
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, ForeignKey, Numeric, String, Text
from src.domain.base import BaseModel, generate_uuid


class Due(BaseModel, table=True):
    __tablename__ = "dues"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="due_amount_non_negative"),
        Index("ix_dues_rental_date", "rental_id", "date"),
    )

    rental_id: str = Field(
        sa_column=Column(
            String(64), ForeignKey("rentals.id", ondelete="CASCADE"), primary_key=True
        )
    )

    id: str = Field(
        default_factory=generate_uuid,
        sa_column=Column(String(64), primary_key=True),
    )

    amount: Decimal = Field(sa_column=Column(Numeric(18, 2), nullable=False))

    date: datetime

    description: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))

    created_at: datetime = Field(default_factory=datetime.utcnow)
