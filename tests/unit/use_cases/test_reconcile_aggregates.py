"""Unit tests for ReconcileRentalAggregates"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.ledger import ReconcileRentalAggregates
from src.domain.ledger import RecordKind
from tests.fixtures.factories import make_rental


def record_repos(payments, expenses, dues):
    repos = {}
    for kind, value in (
        (RecordKind.PAYMENTS, payments),
        (RecordKind.EXPENSES, expenses),
        (RecordKind.DUES, dues),
    ):
        repo = MagicMock()
        repo.sum_contributions = AsyncMock(return_value=Decimal(value))
        repos[kind] = repo
    return repos


@pytest.mark.asyncio
class TestReconcileRentalAggregates:
    async def test_consistent_rental_has_no_discrepancies(self, mock_uow):
        rental = make_rental(
            total_payments=Decimal("100"), total_expenses=Decimal("30"),
            total_dues=Decimal("20"), net_income=Decimal("70"),
        )
        rental_repo = MagicMock()
        rental_repo.list_normalized = AsyncMock(return_value=[rental])

        result = await ReconcileRentalAggregates(
            mock_uow, rental_repo, record_repos("100", "30", "20")
        ).execute()

        assert result.value.total_rentals_checked == 1
        assert result.value.discrepancies_found == 0

    async def test_lost_update_is_reported_per_field(self, mock_uow):
        """
        Given: Cached total_payments of 100 while paid payments sum to 150
        When: Reconciliation runs
        Then: total_payments and net_income are reported, nothing is written
        """
        rental = make_rental(
            total_payments=Decimal("100"), total_expenses=Decimal("30"),
            total_dues=Decimal("20"), net_income=Decimal("70"),
        )
        rental_repo = MagicMock()
        rental_repo.list_normalized = AsyncMock(return_value=[rental])

        result = await ReconcileRentalAggregates(
            mock_uow, rental_repo, record_repos("150", "30", "20")
        ).execute(owner_id="owner_1")

        fields = {d.aggregate_field: d for d in result.value.discrepancies}
        assert set(fields) == {"total_payments", "net_income"}
        assert fields["total_payments"].discrepancy == Decimal("-50")
        assert fields["net_income"].calculated_value == Decimal("120")
        rental_repo.list_normalized.assert_called_once_with("owner_1")
        mock_uow.commit.assert_not_called()

    async def test_store_failure_is_reported(self, mock_uow):
        rental_repo = MagicMock()
        rental_repo.list_normalized = AsyncMock(side_effect=RuntimeError("down"))

        result = await ReconcileRentalAggregates(
            mock_uow, rental_repo, record_repos("0", "0", "0")
        ).execute()

        assert result.error.code == "RECONCILIATION_FAILED"
