"""Migration use cases: legacy embedded records to record stores"""
from .list_unmigrated import ListUnmigratedRentals
from .migrate_rental import MigrateRental
from .migrate_owner_rentals import MigrateOwnerRentals
from .legacy_records import (
    WorkItem,
    build_worklist,
    normalize_legacy_field,
    parse_legacy_record,
    totals_of,
)
from .dtos import (
    UnmigratedRentalDTO,
    UnmigratedRentalsDTO,
    MigrationResultDTO,
    MigrationErrorDTO,
    BatchMigrationResultDTO,
)

__all__ = [
    "ListUnmigratedRentals",
    "MigrateRental",
    "MigrateOwnerRentals",
    "WorkItem",
    "build_worklist",
    "normalize_legacy_field",
    "parse_legacy_record",
    "totals_of",
    "UnmigratedRentalDTO",
    "UnmigratedRentalsDTO",
    "MigrationResultDTO",
    "MigrationErrorDTO",
    "BatchMigrationResultDTO",
]
