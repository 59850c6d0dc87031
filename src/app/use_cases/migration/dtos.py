"""Data Transfer Objects for Migration Use Cases"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class UnmigratedRentalDTO(BaseModel):
    id: str
    asset_id: str
    contact_id: str
    data_version: Optional[int] = None
    legacy_record_counts: Dict[str, int] = Field(
        ..., description="Embedded records per kind waiting to be moved"
    )
    created_at: datetime


class UnmigratedRentalsDTO(BaseModel):
    owner_id: str
    rentals: List[UnmigratedRentalDTO]
    total: int


class MigrationResultDTO(BaseModel):
    """Outcome of migrating a single rental"""

    rental_id: str
    already_migrated: bool = False
    records_migrated: Dict[str, int] = Field(default_factory=dict)
    chunks_committed: int = 0
    total_payments: Decimal
    total_expenses: Decimal
    total_dues: Decimal
    net_income: Decimal
    data_version: int


class MigrationErrorDTO(BaseModel):
    code: str
    message: str
    reason: Optional[str] = None


class BatchMigrationResultDTO(BaseModel):
    """
    Outcome of migrating every legacy rental of an owner

    The batch stops at the first failing rental. Rentals migrated before it
    stay migrated; failed_rental_id and remaining_rental_ids are still legacy.
    """

    owner_id: str
    total_unmigrated: int
    migrated_rental_ids: List[str]
    failed_rental_id: Optional[str] = None
    error: Optional[MigrationErrorDTO] = None
    remaining_rental_ids: List[str] = Field(default_factory=list)
    completed: bool
