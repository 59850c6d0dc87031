"""UpdateRental Use Case"""

import logging
from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.rental_repository import RentalRepository
from src.app.use_cases.errors import from_exception, rental_not_found, unauthenticated
from .dtos import RentalChangesetDTO, RentalDTO

logger = logging.getLogger(__name__)


class UpdateRental:
    """
    Use Case: Change a rental's descriptive terms

    Aggregates and data_version are not part of the changeset; they only
    move through the ledger operations and the migration.
    """

    def __init__(self, uow: UnitOfWork, rental_repo: RentalRepository):
        self.uow = uow
        self.rental_repo = rental_repo

    async def execute(
        self, owner_id: str, rental_id: str, changeset: RentalChangesetDTO
    ) -> Result[RentalDTO]:
        if not owner_id:
            return Return.err(unauthenticated())

        try:
            rental = await self.rental_repo.get_by_id(rental_id, owner_id=owner_id)
            if rental is None:
                return Return.err(rental_not_found(rental_id))

            changes = changeset.changes()
            for field, value in changes.items():
                setattr(rental, field, value)

            rental = await self.rental_repo.update(rental)
            response = RentalDTO.model_validate(rental)

            await self.uow.commit()

            logger.info(f"Updated rental {rental_id} (fields={sorted(changes)})")
            return Return.ok(response)

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Updating rental {rental_id} failed: {e}")
            return Return.err(
                from_exception(e, code="UPDATE_RENTAL_FAILED", message="Failed to update rental")
            )
