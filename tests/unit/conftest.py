import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from tests.fixtures.factories import make_rental


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def rental():
    """Normalized rental with zero totals"""
    return make_rental()


@pytest.fixture
def legacy_rental():
    """Rental still embedding its records, with a stale cached total"""
    return make_rental(
        id="legacy_1",
        data_version=None,
        payments=[
            {"id": "p1", "amount": 100, "status": "paid", "date": "2024-01-05T00:00:00Z"},
            {"id": "p2", "amount": 50, "status": "pending", "date": "2024-01-20T00:00:00Z"},
        ],
        expenses={"e1": {"amount": 30, "description": "Repairs"}},
        dues=[{"id": "d1", "amount": 20}],
        total_payments=Decimal("999"),
    )
