"""Ledger use cases: record mutations with aggregate upkeep, paging, statements"""
from .add_record import AddLedgerRecord, AddPayment, AddExpense, AddDue
from .update_record import UpdateLedgerRecord, UpdatePayment, UpdateExpense, UpdateDue
from .delete_record import DeleteLedgerRecord, DeletePayment, DeleteExpense, DeleteDue
from .list_records import ListLedgerRecords, ListPayments, ListExpenses, ListDues
from .get_statement import GetRentalStatement
from .reconcile_aggregates import ReconcileRentalAggregates
from .cursor import encode_cursor, decode_cursor
from .dtos import (
    PaymentCreateDTO,
    ExpenseCreateDTO,
    DueCreateDTO,
    PaymentChangesetDTO,
    ExpenseChangesetDTO,
    DueChangesetDTO,
    LedgerRecordDTO,
    RentalTotalsDTO,
    LedgerMutationResponseDTO,
    LedgerPageDTO,
    RentalStatementDTO,
    AggregateDiscrepancyDTO,
    ReconciliationResultDTO,
)

__all__ = [
    "AddLedgerRecord",
    "AddPayment",
    "AddExpense",
    "AddDue",
    "UpdateLedgerRecord",
    "UpdatePayment",
    "UpdateExpense",
    "UpdateDue",
    "DeleteLedgerRecord",
    "DeletePayment",
    "DeleteExpense",
    "DeleteDue",
    "ListLedgerRecords",
    "ListPayments",
    "ListExpenses",
    "ListDues",
    "GetRentalStatement",
    "ReconcileRentalAggregates",
    "encode_cursor",
    "decode_cursor",
    "PaymentCreateDTO",
    "ExpenseCreateDTO",
    "DueCreateDTO",
    "PaymentChangesetDTO",
    "ExpenseChangesetDTO",
    "DueChangesetDTO",
    "LedgerRecordDTO",
    "RentalTotalsDTO",
    "LedgerMutationResponseDTO",
    "LedgerPageDTO",
    "RentalStatementDTO",
    "AggregateDiscrepancyDTO",
    "ReconciliationResultDTO",
]
