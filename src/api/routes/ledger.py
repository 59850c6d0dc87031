"""Ledger API Routes

Payments, expenses and dues of a rental. The three kinds share one set of
handlers; each kind gets its own paths and request bodies.
"""

from typing import Optional, Type
from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.auth import get_owner_id
from src.api.error import ClientError
from src.api.schemas.error_response import error_responses
from src.app.use_cases.ledger import (
    AddDue,
    AddExpense,
    AddLedgerRecord,
    AddPayment,
    DeleteDue,
    DeleteExpense,
    DeleteLedgerRecord,
    DeletePayment,
    DueChangesetDTO,
    DueCreateDTO,
    ExpenseChangesetDTO,
    ExpenseCreateDTO,
    GetRentalStatement,
    LedgerMutationResponseDTO,
    LedgerPageDTO,
    ListDues,
    ListExpenses,
    ListLedgerRecords,
    ListPayments,
    PaymentChangesetDTO,
    PaymentCreateDTO,
    RentalStatementDTO,
    UpdateDue,
    UpdateExpense,
    UpdateLedgerRecord,
    UpdatePayment,
)
from src.adapter.repositories.ledger_record_repository import build_record_repositories
from src.adapter.repositories.rental_repository import SqlAlchemyRentalRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session
from src.domain.ledger import RecordKind

router = APIRouter(prefix="/rentals", tags=["Ledger"])


@router.get(
    "/{rental_id}/statement",
    response_model=RentalStatementDTO,
    responses=error_responses(401, 404, 409),
)
async def get_statement(
    rental_id: str,
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session),
):
    """
    Complete history of a rental for statement export.

    Returns the rental with every payment, expense and due, newest first.
    The history is not paginated.
    """
    use_case = GetRentalStatement(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyRentalRepository(session),
        build_record_repositories(session),
    )
    result = await use_case.execute(owner_id, rental_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


def _bind(use_case_cls, kind: RecordKind, session: AsyncSession):
    return use_case_cls(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyRentalRepository(session),
        build_record_repositories(session)[kind],
    )


def register_record_routes(
    kind: RecordKind,
    create_dto: Type[BaseModel],
    changeset_dto: Type[BaseModel],
    add_cls: Type[AddLedgerRecord],
    update_cls: Type[UpdateLedgerRecord],
    delete_cls: Type[DeleteLedgerRecord],
    list_cls: Type[ListLedgerRecords],
) -> None:
    """Add list/add/update/delete routes for one record kind"""
    collection = f"/{{rental_id}}/{kind.value}"
    item = f"{collection}/{{record_id}}"

    async def list_records(
        rental_id: str,
        cursor: Optional[str] = Query(
            default=None, description="next_cursor of the previous page"
        ),
        owner_id: str = Depends(get_owner_id),
        session: AsyncSession = Depends(get_session),
    ):
        result = await _bind(list_cls, kind, session).execute(owner_id, rental_id, cursor)
        if result.is_err():
            raise ClientError(result.error)
        return result.value

    async def add_record(
        rental_id: str,
        command: create_dto,
        owner_id: str = Depends(get_owner_id),
        session: AsyncSession = Depends(get_session),
    ):
        result = await _bind(add_cls, kind, session).execute(owner_id, rental_id, command)
        if result.is_err():
            raise ClientError(result.error)
        return result.value

    async def update_record(
        rental_id: str,
        record_id: str,
        changeset: changeset_dto,
        owner_id: str = Depends(get_owner_id),
        session: AsyncSession = Depends(get_session),
    ):
        result = await _bind(update_cls, kind, session).execute(
            owner_id, rental_id, record_id, changeset
        )
        if result.is_err():
            raise ClientError(result.error)
        return result.value

    async def delete_record(
        rental_id: str,
        record_id: str,
        owner_id: str = Depends(get_owner_id),
        session: AsyncSession = Depends(get_session),
    ):
        result = await _bind(delete_cls, kind, session).execute(owner_id, rental_id, record_id)
        if result.is_err():
            raise ClientError(result.error)
        return result.value

    router.add_api_route(
        collection,
        list_records,
        methods=["GET"],
        response_model=LedgerPageDTO,
        name=f"list_{kind.value}",
        summary=f"Page through {kind.value}, newest first",
        responses=error_responses(400, 401, 404, 409),
    )
    router.add_api_route(
        collection,
        add_record,
        methods=["POST"],
        response_model=LedgerMutationResponseDTO,
        status_code=status.HTTP_201_CREATED,
        name=f"add_{kind.label}",
        summary=f"Record a {kind.label} and update the rental totals",
        responses=error_responses(400, 401, 404, 409, 503),
    )
    router.add_api_route(
        item,
        update_record,
        methods=["PATCH"],
        response_model=LedgerMutationResponseDTO,
        name=f"update_{kind.label}",
        summary=f"Change a {kind.label} and move the rental totals by the difference",
        responses=error_responses(400, 401, 404, 409, 503),
    )
    router.add_api_route(
        item,
        delete_record,
        methods=["DELETE"],
        response_model=LedgerMutationResponseDTO,
        name=f"delete_{kind.label}",
        summary=f"Delete a {kind.label} and subtract it from the rental totals",
        responses=error_responses(400, 401, 404, 409, 503),
    )


register_record_routes(
    RecordKind.PAYMENTS,
    PaymentCreateDTO,
    PaymentChangesetDTO,
    AddPayment,
    UpdatePayment,
    DeletePayment,
    ListPayments,
)
register_record_routes(
    RecordKind.EXPENSES,
    ExpenseCreateDTO,
    ExpenseChangesetDTO,
    AddExpense,
    UpdateExpense,
    DeleteExpense,
    ListExpenses,
)
register_record_routes(
    RecordKind.DUES,
    DueCreateDTO,
    DueChangesetDTO,
    AddDue,
    UpdateDue,
    DeleteDue,
    ListDues,
)
