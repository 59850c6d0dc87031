"""Unit tests for rental lifecycle use cases"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.rentals import (
    CreateRental,
    CreateRentalCommandDTO,
    DeleteRental,
    GetPortfolioSummary,
    RentalChangesetDTO,
    UpdateRental,
)
from src.domain.ledger import RecordKind
from src.domain.rental import RentalStatus
from tests.fixtures.factories import make_rental


@pytest.fixture
def mock_rental_repo(rental):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=rental)
    repo.create = AsyncMock(side_effect=lambda r: r)
    repo.update = AsyncMock(side_effect=lambda r: r)
    repo.delete = AsyncMock()
    return repo


@pytest.mark.asyncio
class TestCreateRental:
    async def test_new_rental_starts_at_zero_on_current_layout(self, mock_uow, mock_rental_repo):
        command = CreateRentalCommandDTO(
            asset_id="asset_9",
            contact_id="contact_9",
            rate=Decimal("45"),
            rate_type="daily",
            start_date=datetime(2024, 4, 1),
            next_payment_date=datetime(2024, 4, 2),
        )

        result = await CreateRental(mock_uow, mock_rental_repo).execute("owner_1", command)

        assert result.is_ok()
        dto = result.value
        assert dto.owner_id == "owner_1"
        assert dto.data_version == 2
        assert dto.total_payments == dto.net_income == Decimal("0")
        mock_uow.commit.assert_called_once()

    async def test_rate_must_be_positive(self):
        with pytest.raises(ValueError):
            CreateRentalCommandDTO(
                asset_id="a", contact_id="c", rate=Decimal("0"),
                start_date=datetime(2024, 1, 1), next_payment_date=datetime(2024, 2, 1),
            )


@pytest.mark.asyncio
class TestUpdateRental:
    async def test_only_sent_fields_change(self, mock_uow, mock_rental_repo, rental):
        result = await UpdateRental(mock_uow, mock_rental_repo).execute(
            "owner_1", "rental_1", RentalChangesetDTO(status=RentalStatus.ENDED)
        )

        assert result.value.status == RentalStatus.ENDED
        assert rental.rate == Decimal("1500.00")
        mock_uow.commit.assert_called_once()

    async def test_totals_are_not_writable(self):
        changeset = RentalChangesetDTO.model_validate({"total_payments": "5", "rate": "10"})

        assert changeset.changes() == {"rate": Decimal("10")}


@pytest.mark.asyncio
class TestDeleteRental:
    async def test_children_deleted_in_batches_before_rental(
        self, mock_uow, mock_rental_repo, rental
    ):
        """
        Given: A rental with 1200 payments, 3 expenses and no dues
        When: It is deleted
        Then: Payments go in batches of 500, then expenses, then the rental row
        """
        ids = {
            RecordKind.PAYMENTS: [f"p{i}" for i in range(1200)],
            RecordKind.EXPENSES: ["e1", "e2", "e3"],
            RecordKind.DUES: [],
        }
        record_repos = {}
        for kind, kind_ids in ids.items():
            repo = MagicMock()
            repo.list_ids = AsyncMock(return_value=kind_ids)
            repo.delete_many = AsyncMock(side_effect=lambda rental_id, chunk: len(chunk))
            record_repos[kind] = repo

        result = await DeleteRental(mock_uow, mock_rental_repo, record_repos).execute(
            "owner_1", "rental_1"
        )

        assert result.is_ok()
        assert result.value.records_deleted == {"payments": 1200, "expenses": 3, "dues": 0}
        assert result.value.batches_committed == 5
        chunk_sizes = [
            len(call.args[1]) for call in record_repos[RecordKind.PAYMENTS].delete_many.call_args_list
        ]
        assert chunk_sizes == [500, 500, 200]
        mock_rental_repo.delete.assert_called_once_with(rental)
        assert mock_uow.commit.call_count == 5

    async def test_delete_missing_rental(self, mock_uow, mock_rental_repo):
        mock_rental_repo.get_by_id = AsyncMock(return_value=None)

        result = await DeleteRental(mock_uow, mock_rental_repo, {}).execute("owner_1", "nope")

        assert result.error.code == "RENTAL_NOT_FOUND"


@pytest.mark.asyncio
class TestGetPortfolioSummary:
    async def test_summary_sums_normalized_rentals_and_flags_overdue(self, mock_uow):
        past = datetime.utcnow() - timedelta(days=3)
        future = datetime.utcnow() + timedelta(days=3)
        rentals = [
            make_rental(
                id="r1", next_payment_date=past,
                total_payments=Decimal("100"), total_expenses=Decimal("30"),
                total_dues=Decimal("20"),
            ),
            make_rental(
                id="r2", next_payment_date=future,
                total_payments=Decimal("50"), total_expenses=Decimal("5"),
            ),
            make_rental(
                id="r3", next_payment_date=past, status=RentalStatus.ENDED,
                total_payments=Decimal("10"),
            ),
            make_rental(
                id="r4", next_payment_date=future, data_version=None,
                total_payments=Decimal("999"),
            ),
        ]
        repo = MagicMock()
        repo.list_by_owner = AsyncMock(return_value=rentals)

        result = await GetPortfolioSummary(mock_uow, repo).execute("owner_1")

        summary = result.value
        assert summary.total_rentals == 4
        assert summary.active_rentals == 3
        assert summary.ended_rentals == 1
        assert summary.unmigrated_rentals == 1
        assert summary.total_payments == Decimal("160")
        assert summary.total_expenses == Decimal("35")
        assert summary.total_dues == Decimal("20")
        assert summary.net_income == Decimal("125")
        assert summary.overdue_rental_ids == ["r1"]
