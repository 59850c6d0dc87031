"""Migration API Routes

One-time conversion of legacy rentals, offered to the client after login.
"""

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.auth import get_owner_id
from src.api.error import ClientError
from src.api.schemas.error_response import error_responses
from src.app.use_cases.migration import (
    BatchMigrationResultDTO,
    ListUnmigratedRentals,
    MigrateOwnerRentals,
    MigrateRental,
    MigrationResultDTO,
    UnmigratedRentalsDTO,
)
from src.adapter.repositories.ledger_record_repository import build_record_repositories
from src.adapter.repositories.rental_repository import SqlAlchemyRentalRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session

router = APIRouter(prefix="/migration", tags=["Migration"])


@router.get("/rentals", response_model=UnmigratedRentalsDTO, responses=error_responses(401))
async def list_unmigrated_rentals(
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session),
):
    """Rentals of the caller that still embed their records in the legacy layout."""
    use_case = ListUnmigratedRentals(
        SqlAlchemyUnitOfWork(session), SqlAlchemyRentalRepository(session)
    )
    result = await use_case.execute(owner_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/rentals/{rental_id}",
    response_model=MigrationResultDTO,
    responses=error_responses(400, 401, 404),
)
async def migrate_rental(
    rental_id: str,
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session),
):
    """
    Migrate one rental.

    Safe to repeat: a rental that is already migrated is reported with
    `already_migrated = true` and left unchanged, and a rental whose previous
    attempt failed part-way is migrated again from the start.
    """
    use_case = MigrateRental(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyRentalRepository(session),
        build_record_repositories(session),
    )
    result = await use_case.execute(owner_id, rental_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/run", response_model=BatchMigrationResultDTO, responses=error_responses(401))
async def migrate_all_rentals(
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session),
):
    """
    Migrate every legacy rental of the caller, one at a time.

    Stops at the first failure. The response lists the rentals migrated so
    far, the failed rental and the rentals not attempted; check `completed`.
    """
    use_case = MigrateOwnerRentals(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyRentalRepository(session),
        build_record_repositories(session),
    )
    result = await use_case.execute(owner_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
