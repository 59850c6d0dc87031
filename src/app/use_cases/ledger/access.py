"""Rental lookup shared by every ledger operation"""

from libs.result import Result, Return
from src.app.repositories.rental_repository import RentalRepository
from src.app.use_cases.errors import rental_not_found, rental_not_migrated, unauthenticated
from src.domain.rental import Rental


async def resolve_ledger_rental(
    rental_repo: RentalRepository,
    owner_id: str,
    rental_id: str,
    for_update: bool = False,
) -> Result[Rental]:
    """
    Load a rental the owner may run ledger operations on

    Returns:
        Result[Rental]: UNAUTHENTICATED without an owner, RENTAL_NOT_FOUND when
        the rental is missing or owned by someone else, RENTAL_NOT_MIGRATED
        while its records are still embedded in the legacy layout
    """
    if not owner_id:
        return Return.err(unauthenticated())

    rental = await rental_repo.get_by_id(rental_id, owner_id=owner_id, for_update=for_update)
    if rental is None:
        return Return.err(rental_not_found(rental_id))

    if rental.is_legacy:
        return Return.err(rental_not_migrated(rental_id))

    return Return.ok(rental)
