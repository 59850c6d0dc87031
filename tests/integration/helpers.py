"""Wiring of use cases onto a real session"""

from sqlmodel.ext.asyncio.session import AsyncSession
from src.adapter.repositories.ledger_record_repository import build_record_repositories
from src.adapter.repositories.rental_repository import SqlAlchemyRentalRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.ledger import (
    AddDue,
    AddExpense,
    AddPayment,
    DeleteDue,
    DeleteExpense,
    DeletePayment,
    UpdateDue,
    UpdateExpense,
    UpdatePayment,
)
from src.domain.ledger import RecordKind

_USE_CASES = {
    ("add", RecordKind.PAYMENTS): AddPayment,
    ("add", RecordKind.EXPENSES): AddExpense,
    ("add", RecordKind.DUES): AddDue,
    ("update", RecordKind.PAYMENTS): UpdatePayment,
    ("update", RecordKind.EXPENSES): UpdateExpense,
    ("update", RecordKind.DUES): UpdateDue,
    ("delete", RecordKind.PAYMENTS): DeletePayment,
    ("delete", RecordKind.EXPENSES): DeleteExpense,
    ("delete", RecordKind.DUES): DeleteDue,
}


def ledger_use_case(session: AsyncSession, action: str, kind: RecordKind):
    return _USE_CASES[(action, kind)](
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyRentalRepository(session),
        build_record_repositories(session)[kind],
    )


def wiring(session: AsyncSession):
    """(uow, rental_repo, record_repos) bound to one session"""
    return (
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyRentalRepository(session),
        build_record_repositories(session),
    )
