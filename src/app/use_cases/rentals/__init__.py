"""Rental lifecycle use cases"""
from .create_rental import CreateRental
from .get_rental import GetRental, ListRentals
from .update_rental import UpdateRental
from .delete_rental import DeleteRental
from .get_portfolio_summary import GetPortfolioSummary
from .dtos import (
    CreateRentalCommandDTO,
    RentalChangesetDTO,
    RentalDTO,
    RentalListDTO,
    DeleteRentalResponseDTO,
    PortfolioSummaryDTO,
)

__all__ = [
    "CreateRental",
    "GetRental",
    "ListRentals",
    "UpdateRental",
    "DeleteRental",
    "GetPortfolioSummary",
    "CreateRentalCommandDTO",
    "RentalChangesetDTO",
    "RentalDTO",
    "RentalListDTO",
    "DeleteRentalResponseDTO",
    "PortfolioSummaryDTO",
]
