"""Integration tests for ledger mutations against a real database

Tests cover:
- Sum consistency after a sequence of adds, updates and deletes
- Delta correctness on update (amount change, paid -> pending)
- Delete correctness for paid and pending payments
- Owner scoping and the legacy guard
- Two sessions adding payments to the same rental
"""

import pytest
import pytest_asyncio
from datetime import datetime
from decimal import Decimal

from src.adapter.repositories.ledger_record_repository import build_record_repositories
from src.adapter.repositories.rental_repository import SqlAlchemyRentalRepository
from src.app.use_cases.ledger import (
    DueChangesetDTO,
    DueCreateDTO,
    ExpenseChangesetDTO,
    ExpenseCreateDTO,
    PaymentChangesetDTO,
    PaymentCreateDTO,
)
from src.domain.ledger import LedgerTotals, RecordKind
from src.domain.payment import PaymentStatus
from tests.fixtures.factories import make_rental
from tests.integration.helpers import ledger_use_case

OWNER = "owner_1"
RENTAL = "rental_1"


@pytest_asyncio.fixture
async def rental(db_session):
    rental = make_rental(id=RENTAL, owner_id=OWNER)
    db_session.add(rental)
    await db_session.commit()
    return rental


async def stored_rental(session):
    return await SqlAlchemyRentalRepository(session).get_by_id(RENTAL)


async def true_totals(session) -> LedgerTotals:
    repos = build_record_repositories(session)
    return LedgerTotals.from_records(
        payments=await repos[RecordKind.PAYMENTS].list_all(RENTAL),
        expenses=await repos[RecordKind.EXPENSES].list_all(RENTAL),
        dues=await repos[RecordKind.DUES].list_all(RENTAL),
    )


async def add_payment(session, amount, status=PaymentStatus.PAID):
    result = await ledger_use_case(session, "add", RecordKind.PAYMENTS).execute(
        OWNER,
        RENTAL,
        PaymentCreateDTO(amount=Decimal(amount), date=datetime(2024, 3, 1), status=status),
    )
    assert result.is_ok(), result.error
    return result.value.record.id


class TestSumConsistency:
    @pytest.mark.asyncio
    async def test_aggregates_match_records_after_mixed_operations(self, db_session, rental):
        """
        Given: A fresh rental
        When: Payments, expenses and dues are added, updated and deleted
        Then: The cached aggregates equal the sums over the record stores
        """
        day = datetime(2024, 3, 1)
        paid = await add_payment(db_session, "1200")
        pending = await add_payment(db_session, "300", PaymentStatus.PENDING)
        await add_payment(db_session, "45.50")

        expense = await ledger_use_case(db_session, "add", RecordKind.EXPENSES).execute(
            OWNER, RENTAL, ExpenseCreateDTO(amount=Decimal("80.25"), date=day, description="Paint")
        )
        due = await ledger_use_case(db_session, "add", RecordKind.DUES).execute(
            OWNER, RENTAL, DueCreateDTO(amount=Decimal("60"), date=day, description="Electricity")
        )

        await ledger_use_case(db_session, "update", RecordKind.PAYMENTS).execute(
            OWNER, RENTAL, pending, PaymentChangesetDTO(status=PaymentStatus.PAID)
        )
        await ledger_use_case(db_session, "update", RecordKind.EXPENSES).execute(
            OWNER, RENTAL, expense.value.record.id, ExpenseChangesetDTO(amount=Decimal("100"))
        )
        await ledger_use_case(db_session, "update", RecordKind.DUES).execute(
            OWNER, RENTAL, due.value.record.id, DueChangesetDTO(amount=Decimal("10"))
        )
        await ledger_use_case(db_session, "delete", RecordKind.PAYMENTS).execute(
            OWNER, RENTAL, paid
        )

        stored = await stored_rental(db_session)
        expected = await true_totals(db_session)

        assert stored.total_payments == expected.total_payments == Decimal("345.50")
        assert stored.total_expenses == expected.total_expenses == Decimal("100")
        assert stored.total_dues == expected.total_dues == Decimal("10")
        assert stored.net_income == expected.net_income == Decimal("245.50")

    @pytest.mark.asyncio
    async def test_dues_never_move_net_income(self, db_session, rental):
        await ledger_use_case(db_session, "add", RecordKind.DUES).execute(
            OWNER, RENTAL, DueCreateDTO(amount=Decimal("500"), date=datetime(2024, 3, 1))
        )

        stored = await stored_rental(db_session)
        assert stored.total_dues == Decimal("500")
        assert stored.net_income == Decimal("0")


class TestUpdateDelta:
    @pytest.mark.asyncio
    async def test_amount_change_moves_total_by_difference(self, db_session, rental):
        record_id = await add_payment(db_session, "100")

        result = await ledger_use_case(db_session, "update", RecordKind.PAYMENTS).execute(
            OWNER, RENTAL, record_id, PaymentChangesetDTO(amount=Decimal("150"))
        )

        assert result.value.delta == Decimal("50")
        assert (await stored_rental(db_session)).total_payments == Decimal("150")

    @pytest.mark.asyncio
    async def test_paid_to_pending_removes_amount(self, db_session, rental):
        record_id = await add_payment(db_session, "100")

        result = await ledger_use_case(db_session, "update", RecordKind.PAYMENTS).execute(
            OWNER, RENTAL, record_id, PaymentChangesetDTO(status=PaymentStatus.PENDING)
        )

        assert result.value.delta == Decimal("-100")
        stored = await stored_rental(db_session)
        assert stored.total_payments == Decimal("0")
        assert stored.net_income == Decimal("0")


class TestDeleteCorrectness:
    @pytest.mark.asyncio
    async def test_deleting_paid_payment_subtracts_amount(self, db_session, rental):
        await add_payment(db_session, "40")
        record_id = await add_payment(db_session, "100")

        result = await ledger_use_case(db_session, "delete", RecordKind.PAYMENTS).execute(
            OWNER, RENTAL, record_id
        )

        assert result.is_ok()
        assert (await stored_rental(db_session)).total_payments == Decimal("40")
        repos = build_record_repositories(db_session)
        assert await repos[RecordKind.PAYMENTS].get(RENTAL, record_id) is None

    @pytest.mark.asyncio
    async def test_deleting_pending_payment_changes_nothing(self, db_session, rental):
        await add_payment(db_session, "40")
        record_id = await add_payment(db_session, "100", PaymentStatus.PENDING)

        await ledger_use_case(db_session, "delete", RecordKind.PAYMENTS).execute(
            OWNER, RENTAL, record_id
        )

        assert (await stored_rental(db_session)).total_payments == Decimal("40")

    @pytest.mark.asyncio
    async def test_deleting_missing_record_writes_nothing(self, db_session, rental):
        await add_payment(db_session, "40")

        result = await ledger_use_case(db_session, "delete", RecordKind.PAYMENTS).execute(
            OWNER, RENTAL, "does_not_exist"
        )

        assert result.error.code == "PAYMENT_NOT_FOUND"
        assert (await stored_rental(db_session)).total_payments == Decimal("40")


class TestGuards:
    @pytest.mark.asyncio
    async def test_other_owner_cannot_touch_rental(self, db_session, rental):
        result = await ledger_use_case(db_session, "add", RecordKind.PAYMENTS).execute(
            "owner_2",
            RENTAL,
            PaymentCreateDTO(amount=Decimal("10"), date=datetime(2024, 3, 1)),
        )

        assert result.error.code == "RENTAL_NOT_FOUND"
        assert (await stored_rental(db_session)).total_payments == Decimal("0")

    @pytest.mark.asyncio
    async def test_legacy_rental_is_not_written(self, db_session):
        db_session.add(make_rental(id="legacy", owner_id=OWNER, data_version=None, payments=[]))
        await db_session.commit()

        result = await ledger_use_case(db_session, "add", RecordKind.PAYMENTS).execute(
            OWNER,
            "legacy",
            PaymentCreateDTO(amount=Decimal("10"), date=datetime(2024, 3, 1)),
        )

        assert result.error.code == "RENTAL_NOT_MIGRATED"
        repos = build_record_repositories(db_session)
        assert await repos[RecordKind.PAYMENTS].count("legacy") == 0


class TestConcurrentWriters:
    @pytest.mark.asyncio
    async def test_two_sessions_adding_payments_keep_both(self, session_factory, rental):
        """
        Given: Two sessions that both loaded the rental while its total was 0
        When: Each adds a paid payment and commits
        Then: total_payments is the sum of both, not the last writer's view
        """
        async with session_factory() as first, session_factory() as second:
            assert (await stored_rental(first)).total_payments == Decimal("0")
            assert (await stored_rental(second)).total_payments == Decimal("0")

            await add_payment(first, "100")
            await add_payment(second, "50")

        async with session_factory() as fresh:
            stored = await stored_rental(fresh)
            assert stored.total_payments == Decimal("150")
            assert stored.net_income == Decimal("150")
            assert await true_totals(fresh) == LedgerTotals(
                Decimal("150"), Decimal("0"), Decimal("0")
            )
