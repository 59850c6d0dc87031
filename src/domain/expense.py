"""Expense Domain Entity"""

from datetime import datetime
from decimal import Decimal
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, ForeignKey, Numeric, String, Text
from src.domain.base import BaseModel, generate_uuid


class Expense(BaseModel, table=True):
    """
    Expense - money spent on a rented asset

    Every expense counts towards Rental.total_expenses and reduces net income.
    """

    __tablename__ = "expenses"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="expense_amount_non_negative"),
        Index("ix_expenses_rental_date", "rental_id", "date"),
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
