"""ListPayments / ListExpenses / ListDues Use Cases

Reverse-chronological pages of one record kind with cursor continuation.
"""

from typing import Optional
from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.rental_repository import RentalRepository
from src.app.repositories.ledger_record_repository import LedgerRecordRepository
from src.app.use_cases.errors import from_exception
from src.domain.ledger import PAGE_SIZE, PageCursor, RecordKind
from .access import resolve_ledger_rental
from .cursor import decode_cursor, encode_cursor
from .dtos import LedgerPageDTO, LedgerRecordDTO


class ListLedgerRecords:
    """
    Use Case: Page through a rental's records of one kind

    Business Rules:
    1. Order is date DESC, then id ASC so same-date records keep a stable order
    2. At most PAGE_SIZE items per page
    3. PAGE_SIZE + 1 records are fetched; the extra one only signals has_more
    4. next_cursor points at the last returned item
    """

    kind: RecordKind
    page_size: int = PAGE_SIZE

    def __init__(
        self,
        uow: UnitOfWork,
        rental_repo: RentalRepository,
        record_repo: LedgerRecordRepository,
    ):
        self.uow = uow
        self.rental_repo = rental_repo
        self.record_repo = record_repo

    async def execute(
        self, owner_id: str, rental_id: str, cursor: Optional[str] = None
    ) -> Result[LedgerPageDTO]:
        """
        Execute page retrieval

        Args:
            owner_id: Authenticated owner
            rental_id: Parent rental
            cursor: Token from the previous page's next_cursor (None = first page)

        Returns:
            Result[LedgerPageDTO]: Page of records or error
        """
        page_cursor: Optional[PageCursor] = None
        if cursor:
            try:
                page_cursor = decode_cursor(cursor)
            except ValueError as e:
                return Return.err(
                    Error(
                        code="INVALID_CURSOR",
                        message="Page cursor is malformed",
                        reason=str(e),
                    )
                )

        try:
            rental_result = await resolve_ledger_rental(self.rental_repo, owner_id, rental_id)
            if rental_result.is_err():
                return rental_result

            records = await self.record_repo.list_page(
                rental_id, page_cursor, self.page_size + 1
            )

            has_more = len(records) > self.page_size
            records = records[: self.page_size]

            next_cursor = None
            if records:
                last = records[-1]
                next_cursor = encode_cursor(PageCursor(date=last.date, record_id=last.id))

            return Return.ok(
                LedgerPageDTO(
                    kind=self.kind.value,
                    items=[LedgerRecordDTO.model_validate(r) for r in records],
                    has_more=has_more,
                    next_cursor=next_cursor,
                )
            )

        except Exception as e:
            return Return.err(
                from_exception(
                    e,
                    code=f"LIST_{self.kind.value.upper()}_FAILED",
                    message=f"Failed to list {self.kind.value}",
                )
            )


class ListPayments(ListLedgerRecords):
    kind = RecordKind.PAYMENTS


class ListExpenses(ListLedgerRecords):
    kind = RecordKind.EXPENSES


class ListDues(ListLedgerRecords):
    kind = RecordKind.DUES
