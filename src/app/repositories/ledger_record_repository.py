"""Ledger Record Repository Interface

Defines the contract shared by the payment, expense and due record stores.
Each store holds the child records of many rentals, always addressed through
their parent rental id.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional, Sequence
from src.domain.ledger import LedgerRecord, PageCursor, RecordKind


class LedgerRecordRepository(ABC):
    """
    Repository interface for one kind of rental ledger record

    Listing order is always date descending, then id ascending.
    """

    kind: RecordKind

    @abstractmethod
    async def get(self, rental_id: str, record_id: str) -> Optional[LedgerRecord]:
        """
        Retrieve a record of a rental

        Args:
            rental_id: Parent rental ID
            record_id: Record ID

        Returns:
            The record if found, None otherwise
        """
        pass

    @abstractmethod
    async def add(self, record: LedgerRecord) -> LedgerRecord:
        pass

    @abstractmethod
    async def update(self, record: LedgerRecord) -> LedgerRecord:
        pass

    @abstractmethod
    async def delete(self, record: LedgerRecord) -> None:
        pass

    @abstractmethod
    async def upsert_many(self, records: Sequence[LedgerRecord]) -> None:
        """
        Write records keyed by (rental_id, id), overwriting existing ones

        Args:
            records: Records to write
        """
        pass

    @abstractmethod
    async def list_page(
        self, rental_id: str, cursor: Optional[PageCursor], limit: int
    ) -> List[LedgerRecord]:
        """
        Retrieve records strictly after the cursor in listing order

        Args:
            rental_id: Parent rental ID
            cursor: Position of the last record already returned (None = start)
            limit: Maximum number of records to return

        Returns:
            Up to limit records
        """
        pass

    @abstractmethod
    async def list_all(self, rental_id: str) -> List[LedgerRecord]:
        """Retrieve the complete history of a rental"""
        pass

    @abstractmethod
    async def list_ids(self, rental_id: str) -> List[str]:
        pass

    @abstractmethod
    async def delete_many(self, rental_id: str, record_ids: Sequence[str]) -> int:
        """
        Delete records of a rental by id

        Returns:
            Number of records deleted
        """
        pass

    @abstractmethod
    async def count(self, rental_id: str) -> int:
        pass

    @abstractmethod
    async def sum_contributions(self, rental_id: str) -> Decimal:
        """
        Sum what the stored records contribute to the rental's aggregate field

        Payments only count when PAID.

        Args:
            rental_id: Parent rental ID

        Returns:
            The sum (0 when there are no records)
        """
        pass


class PaymentRepository(LedgerRecordRepository):
    kind = RecordKind.PAYMENTS


class ExpenseRepository(LedgerRecordRepository):
    kind = RecordKind.EXPENSES


class DueRepository(LedgerRecordRepository):
    kind = RecordKind.DUES
