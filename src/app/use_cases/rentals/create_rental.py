"""CreateRental Use Case"""

import logging
from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.rental_repository import RentalRepository
from src.app.use_cases.errors import from_exception, unauthenticated
from src.domain.ledger import CURRENT_DATA_VERSION
from src.domain.rental import Rental
from .dtos import CreateRentalCommandDTO, RentalDTO

logger = logging.getLogger(__name__)


class CreateRental:
    """
    Use Case: Start a rental agreement

    A new rental has zero aggregates and is created directly on the current
    storage layout, so it never needs migration.
    """

    def __init__(self, uow: UnitOfWork, rental_repo: RentalRepository):
        self.uow = uow
        self.rental_repo = rental_repo

    async def execute(self, owner_id: str, command: CreateRentalCommandDTO) -> Result[RentalDTO]:
        if not owner_id:
            return Return.err(unauthenticated())

        try:
            rental = Rental(
                owner_id=owner_id,
                data_version=CURRENT_DATA_VERSION,
                **command.model_dump(),
            )
            created = await self.rental_repo.create(rental)
            response = RentalDTO.model_validate(created)

            await self.uow.commit()

            logger.info(f"Created rental {created.id} for owner {owner_id}")
            return Return.ok(response)

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Creating rental for owner {owner_id} failed: {e}")
            return Return.err(
                from_exception(e, code="CREATE_RENTAL_FAILED", message="Failed to create rental")
            )
