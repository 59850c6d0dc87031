"""Unit tests for legacy embedded record parsing"""

import pytest
from datetime import datetime
from decimal import Decimal

from src.app.use_cases.migration import (
    build_worklist,
    normalize_legacy_field,
    parse_legacy_record,
    totals_of,
)
from src.domain.ledger import RecordKind
from src.domain.payment import PaymentStatus
from tests.fixtures.factories import make_rental

FALLBACK = datetime(2024, 1, 1)


class TestNormalizeLegacyField:
    def test_null_is_empty(self):
        assert normalize_legacy_field(None) == []

    def test_list_keeps_order(self):
        raw = [{"id": "b", "amount": 2}, {"id": "a", "amount": 1}]

        assert [item["id"] for item in normalize_legacy_field(raw)] == ["b", "a"]

    def test_mapping_uses_values_and_fills_ids_from_keys(self):
        raw = {"k1": {"amount": 5}, "k2": {"id": "own", "amount": 6}}

        items = normalize_legacy_field(raw)

        assert [item["id"] for item in items] == ["k1", "own"]

    def test_unsupported_encoding(self):
        with pytest.raises(ValueError):
            normalize_legacy_field("payments")

    def test_non_object_item(self):
        with pytest.raises(ValueError):
            normalize_legacy_field([1, 2])


class TestParseLegacyRecord:
    def test_missing_amount_and_date_fall_back(self):
        record = parse_legacy_record(RecordKind.EXPENSES, {"id": "e1"}, "r1", FALLBACK)

        assert record.amount == Decimal("0")
        assert record.date == FALLBACK
        assert record.description == ""
        assert record.rental_id == "r1"

    def test_missing_id_is_generated(self):
        record = parse_legacy_record(RecordKind.DUES, {"amount": 3}, "r1", FALLBACK)

        assert record.id

    def test_numeric_id_becomes_string(self):
        record = parse_legacy_record(RecordKind.DUES, {"id": 42, "amount": 3}, "r1", FALLBACK)

        assert record.id == "42"

    @pytest.mark.parametrize(
        "raw_status,expected",
        [
            ("paid", PaymentStatus.PAID),
            ("PAID", PaymentStatus.PAID),
            ("pending", PaymentStatus.PENDING),
            ("overdue", PaymentStatus.PENDING),
            (None, PaymentStatus.PENDING),
        ],
    )
    def test_only_paid_counts_as_paid(self, raw_status, expected):
        record = parse_legacy_record(
            RecordKind.PAYMENTS, {"id": "p", "amount": 1, "status": raw_status}, "r1", FALLBACK
        )

        assert record.status == expected

    def test_timestamp_object_is_unwrapped(self):
        raw = {"id": "p", "amount": 1, "date": {"seconds": 1704067200, "nanoseconds": 0}}

        record = parse_legacy_record(RecordKind.PAYMENTS, raw, "r1", FALLBACK)

        assert record.date == datetime(2024, 1, 1)
        assert record.date.tzinfo is None

    def test_aware_iso_string_becomes_naive_utc(self):
        raw = {"id": "p", "amount": 1, "date": "2024-03-01T10:00:00+02:00"}

        record = parse_legacy_record(RecordKind.PAYMENTS, raw, "r1", FALLBACK)

        assert record.date == datetime(2024, 3, 1, 8, 0)

    def test_amount_is_rounded_to_cents(self):
        raw = {"id": "p", "amount": 33.333333, "status": "paid"}

        record = parse_legacy_record(RecordKind.PAYMENTS, raw, "r1", FALLBACK)

        assert record.amount == Decimal("33.33")

    def test_negative_amount_is_rejected(self):
        with pytest.raises(ValueError):
            parse_legacy_record(RecordKind.EXPENSES, {"id": "e", "amount": -5}, "r1", FALLBACK)


class TestBuildWorklist:
    def test_worklist_is_tagged_by_kind(self, legacy_rental):
        worklist = build_worklist(legacy_rental)

        assert [(item.kind, item.record.id) for item in worklist] == [
            (RecordKind.PAYMENTS, "p1"),
            (RecordKind.PAYMENTS, "p2"),
            (RecordKind.EXPENSES, "e1"),
            (RecordKind.DUES, "d1"),
        ]

    def test_totals_ignore_stale_cached_aggregates(self, legacy_rental):
        totals = totals_of(build_worklist(legacy_rental))

        assert totals.total_payments == Decimal("100")
        assert totals.total_expenses == Decimal("30")
        assert totals.total_dues == Decimal("20")
        assert totals.net_income == Decimal("70")

    def test_duplicate_ids_keep_last_copy(self):
        rental = make_rental(
            data_version=1,
            payments=[
                {"id": "p1", "amount": 10, "status": "paid"},
                {"id": "p1", "amount": 25, "status": "paid"},
            ],
        )

        worklist = build_worklist(rental)

        assert len(worklist) == 1
        assert totals_of(worklist).total_payments == Decimal("25")

    def test_totals_sum_rounded_amounts(self):
        rental = make_rental(
            data_version=None,
            payments=[{"id": f"p{i}", "amount": 33.333333, "status": "paid"} for i in range(3)],
        )

        assert totals_of(build_worklist(rental)).total_payments == Decimal("99.99")

    def test_rental_without_embedded_records(self):
        assert build_worklist(make_rental(data_version=None)) == []
