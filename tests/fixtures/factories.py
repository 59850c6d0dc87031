"""Entity builders shared by unit and integration tests"""

from datetime import datetime, timedelta
from decimal import Decimal
from src.domain.due import Due
from src.domain.expense import Expense
from src.domain.ledger import CURRENT_DATA_VERSION
from src.domain.payment import Payment, PaymentStatus
from src.domain.rental import Rental


def make_rental(**overrides) -> Rental:
    values = dict(
        id="rental_1",
        owner_id="owner_1",
        asset_id="asset_1",
        contact_id="contact_1",
        rate=Decimal("1500.00"),
        start_date=datetime(2024, 1, 1),
        next_payment_date=datetime(2024, 2, 1),
        data_version=CURRENT_DATA_VERSION,
    )
    values.update(overrides)
    return Rental(**values)


def make_payment(record_id="pay_1", amount="100", status=PaymentStatus.PAID, **overrides) -> Payment:
    values = dict(
        rental_id="rental_1",
        id=record_id,
        amount=Decimal(amount),
        date=datetime(2024, 1, 15),
        status=status,
    )
    values.update(overrides)
    return Payment(**values)


def make_expense(record_id="exp_1", amount="30", **overrides) -> Expense:
    values = dict(
        rental_id="rental_1",
        id=record_id,
        amount=Decimal(amount),
        date=datetime(2024, 1, 10),
        description="Repairs",
    )
    values.update(overrides)
    return Expense(**values)


def make_due(record_id="due_1", amount="20", **overrides) -> Due:
    values = dict(
        rental_id="rental_1",
        id=record_id,
        amount=Decimal(amount),
        date=datetime(2024, 1, 20),
        description="Water bill",
    )
    values.update(overrides)
    return Due(**values)


def legacy_payments(count: int, start: datetime = datetime(2023, 1, 1)) -> list:
    """Embedded payment dicts in the legacy list encoding, all paid, amount 1"""
    return [
        {
            "id": f"legacy_pay_{i}",
            "amount": 1,
            "status": "paid",
            "date": (start + timedelta(days=i)).isoformat(),
        }
        for i in range(count)
    ]
