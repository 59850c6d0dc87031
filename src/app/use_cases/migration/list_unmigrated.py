"""ListUnmigratedRentals Use Case"""

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.rental_repository import RentalRepository
from src.app.use_cases.errors import from_exception, unauthenticated
from .dtos import UnmigratedRentalDTO, UnmigratedRentalsDTO
from .legacy_records import count_legacy_records


class ListUnmigratedRentals:
    """
    Use Case: Find an owner's rentals still on the legacy layout

    A rental is legacy when data_version is NULL or below the current
    version. Migrated rentals never show up here again.
    """

    def __init__(self, uow: UnitOfWork, rental_repo: RentalRepository):
        self.uow = uow
        self.rental_repo = rental_repo

    async def execute(self, owner_id: str) -> Result[UnmigratedRentalsDTO]:
        if not owner_id:
            return Return.err(unauthenticated())

        try:
            rentals = await self.rental_repo.list_unmigrated(owner_id)

            items = [
                UnmigratedRentalDTO(
                    id=rental.id,
                    asset_id=rental.asset_id,
                    contact_id=rental.contact_id,
                    data_version=rental.data_version,
                    legacy_record_counts=count_legacy_records(rental),
                    created_at=rental.created_at,
                )
                for rental in rentals
            ]

            return Return.ok(
                UnmigratedRentalsDTO(owner_id=owner_id, rentals=items, total=len(items))
            )

        except Exception as e:
            return Return.err(
                from_exception(
                    e,
                    code="LIST_UNMIGRATED_FAILED",
                    message="Failed to list unmigrated rentals",
                )
            )
