"""Rental API Routes

FastAPI routes for the rental lifecycle and the owner dashboard.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.auth import get_owner_id
from src.api.error import ClientError
from src.api.schemas.error_response import error_responses
from src.app.use_cases.rentals import (
    CreateRental,
    CreateRentalCommandDTO,
    DeleteRental,
    DeleteRentalResponseDTO,
    GetPortfolioSummary,
    GetRental,
    ListRentals,
    PortfolioSummaryDTO,
    RentalChangesetDTO,
    RentalDTO,
    RentalListDTO,
    UpdateRental,
)
from src.adapter.repositories.ledger_record_repository import build_record_repositories
from src.adapter.repositories.rental_repository import SqlAlchemyRentalRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session
from src.domain.rental import RentalStatus

router = APIRouter(prefix="/rentals", tags=["Rentals"])


@router.post(
    "",
    response_model=RentalDTO,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401),
)
async def create_rental(
    command: CreateRentalCommandDTO,
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session),
):
    """
    Start a rental agreement.

    The rental starts with zero totals on the current storage layout.

    **Returns:**
    - 201: Rental created
    - 401: Missing X-Owner-Id
    """
    use_case = CreateRental(SqlAlchemyUnitOfWork(session), SqlAlchemyRentalRepository(session))
    result = await use_case.execute(owner_id, command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("", response_model=RentalListDTO, responses=error_responses(401))
async def list_rentals(
    rental_status: Optional[RentalStatus] = Query(default=None, alias="status"),
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session),
):
    use_case = ListRentals(SqlAlchemyUnitOfWork(session), SqlAlchemyRentalRepository(session))
    result = await use_case.execute(owner_id, status=rental_status)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/summary", response_model=PortfolioSummaryDTO, responses=error_responses(401))
async def get_portfolio_summary(
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session),
):
    """
    Dashboard figures: rental counts, revenue, expenses, net income and the
    active rentals whose next payment date has passed.
    """
    use_case = GetPortfolioSummary(
        SqlAlchemyUnitOfWork(session), SqlAlchemyRentalRepository(session)
    )
    result = await use_case.execute(owner_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/{rental_id}", response_model=RentalDTO, responses=error_responses(401, 404))
async def get_rental(
    rental_id: str,
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session),
):
    use_case = GetRental(SqlAlchemyUnitOfWork(session), SqlAlchemyRentalRepository(session))
    result = await use_case.execute(owner_id, rental_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.patch(
    "/{rental_id}", response_model=RentalDTO, responses=error_responses(400, 401, 404)
)
async def update_rental(
    rental_id: str,
    changeset: RentalChangesetDTO,
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session),
):
    """
    Change descriptive fields of a rental. Only the fields sent are written;
    totals are not editable here.
    """
    use_case = UpdateRental(SqlAlchemyUnitOfWork(session), SqlAlchemyRentalRepository(session))
    result = await use_case.execute(owner_id, rental_id, changeset)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.delete(
    "/{rental_id}",
    response_model=DeleteRentalResponseDTO,
    responses=error_responses(400, 401, 404),
)
async def delete_rental(
    rental_id: str,
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session),
):
    """
    Delete a rental with all of its payments, expenses and dues.

    Children are removed in batches before the rental itself.
    """
    use_case = DeleteRental(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyRentalRepository(session),
        build_record_repositories(session),
    )
    result = await use_case.execute(owner_id, rental_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
