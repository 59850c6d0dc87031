"""Rental Repository Interface

Defines the contract for rental persistence operations, including the
aggregate updates that accompany every ledger record mutation.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional
from src.domain.ledger import LedgerTotals, RecordKind
from src.domain.rental import Rental, RentalStatus


class RentalRepository(ABC):
    """
    Repository interface for Rental persistence

    Every lookup can be scoped to an owner; a rental owned by someone else is
    reported as missing.
    """

    @abstractmethod
    async def get_by_id(
        self, rental_id: str, owner_id: Optional[str] = None, for_update: bool = False
    ) -> Optional[Rental]:
        """
        Retrieve rental by ID

        Args:
            rental_id: Rental identifier
            owner_id: If given, only return the rental when it belongs to this owner
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Rental if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_by_owner(
        self, owner_id: str, status: Optional[RentalStatus] = None
    ) -> List[Rental]:
        """
        Retrieve all rentals of an owner, newest first

        Args:
            owner_id: Owner identifier
            status: Optional filter by lifecycle status

        Returns:
            List of rentals
        """
        pass

    @abstractmethod
    async def list_unmigrated(self, owner_id: str) -> List[Rental]:
        """
        Retrieve rentals still storing their records in the legacy embedded layout

        Args:
            owner_id: Owner identifier

        Returns:
            Rentals whose data_version is NULL or below the current version
        """
        pass

    @abstractmethod
    async def list_normalized(self, owner_id: Optional[str] = None) -> List[Rental]:
        """
        Retrieve rentals on the current storage layout

        Args:
            owner_id: Optional owner filter (None = all owners)

        Returns:
            List of normalized rentals
        """
        pass

    @abstractmethod
    async def create(self, rental: Rental) -> Rental:
        pass

    @abstractmethod
    async def update(self, rental: Rental) -> Rental:
        """Persist changes to the rental's descriptive fields"""
        pass

    @abstractmethod
    async def apply_aggregate_delta(
        self, rental_id: str, kind: RecordKind, delta: Decimal
    ) -> Optional[Rental]:
        """
        Add delta to the aggregate field driven by kind and recompute net_income

        The increment is evaluated by the database relative to the stored
        value, so concurrent deltas on the same rental add up.

        Args:
            rental_id: Rental ID
            kind: Record kind whose aggregate field changes
            delta: Signed amount to add

        Returns:
            The refreshed Rental, or None if it no longer exists
        """
        pass

    @abstractmethod
    async def complete_migration(self, rental_id: str, totals: LedgerTotals) -> bool:
        """
        Mark a rental as normalized

        Writes the recomputed aggregates, bumps data_version and clears the
        legacy embedded record columns. Only a rental that is still legacy is
        touched.

        Args:
            rental_id: Rental ID
            totals: Aggregates recomputed from the migrated records

        Returns:
            False when the rental was already migrated (or is gone)
        """
        pass

    @abstractmethod
    async def delete(self, rental: Rental) -> None:
        pass
