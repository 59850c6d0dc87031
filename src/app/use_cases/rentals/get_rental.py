"""GetRental / ListRentals Use Cases"""

from typing import Optional
from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.rental_repository import RentalRepository
from src.app.use_cases.errors import from_exception, rental_not_found, unauthenticated
from src.domain.rental import RentalStatus
from .dtos import RentalDTO, RentalListDTO


class GetRental:
    def __init__(self, uow: UnitOfWork, rental_repo: RentalRepository):
        self.uow = uow
        self.rental_repo = rental_repo

    async def execute(self, owner_id: str, rental_id: str) -> Result[RentalDTO]:
        if not owner_id:
            return Return.err(unauthenticated())

        try:
            rental = await self.rental_repo.get_by_id(rental_id, owner_id=owner_id)
            if rental is None:
                return Return.err(rental_not_found(rental_id))

            return Return.ok(RentalDTO.model_validate(rental))

        except Exception as e:
            return Return.err(
                from_exception(e, code="GET_RENTAL_FAILED", message="Failed to get rental")
            )


class ListRentals:
    """Use Case: All rentals of an owner, newest first, optionally by status"""

    def __init__(self, uow: UnitOfWork, rental_repo: RentalRepository):
        self.uow = uow
        self.rental_repo = rental_repo

    async def execute(
        self, owner_id: str, status: Optional[RentalStatus] = None
    ) -> Result[RentalListDTO]:
        if not owner_id:
            return Return.err(unauthenticated())

        try:
            rentals = await self.rental_repo.list_by_owner(owner_id, status=status)
            return Return.ok(
                RentalListDTO(
                    rentals=[RentalDTO.model_validate(r) for r in rentals],
                    total=len(rentals),
                )
            )

        except Exception as e:
            return Return.err(
                from_exception(e, code="LIST_RENTALS_FAILED", message="Failed to list rentals")
            )
