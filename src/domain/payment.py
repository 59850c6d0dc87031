"""Payment Domain Entity

Money received against a rental. Scoped under its parent rental: the
(rental_id, id) pair identifies a payment, the same way a document id is
only unique inside its parent's sub-collection.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, ForeignKey, Numeric, String, Text
from src.domain.base import BaseModel, generate_uuid


class PaymentStatus(str, Enum):
    """Payment states. Only PAID payments count towards total_payments."""
    PAID = "paid"
    PENDING = "pending"


class Payment(BaseModel, table=True):
    """
    Payment - child record of a Rental

    Domain Rules:
    - amount is never negative
    - created and mutated only through the ledger use cases, which keep
      Rental.total_payments in step
    """

    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="payment_amount_non_negative"),
        Index("ix_payments_rental_date", "rental_id", "date"),
    )

    rental_id: str = Field(
        sa_column=Column(
            String(64), ForeignKey("rentals.id", ondelete="CASCADE"), primary_key=True
        ),
        description="Parent rental"
    )

    id: str = Field(
        default_factory=generate_uuid,
        sa_column=Column(String(64), primary_key=True),
        description="Payment identifier, unique within the rental"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Amount received (>= 0)"
    )

    date: datetime = Field(description="Date the payment was made or is expected")

    status: PaymentStatus = Field(default=PaymentStatus.PAID)

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)
