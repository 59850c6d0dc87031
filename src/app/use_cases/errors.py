"""Error builders shared by the rental ledger use cases"""

from sqlalchemy.exc import InterfaceError, OperationalError
from libs.result import Error

TRANSIENT_IO = "TRANSIENT_IO"


def unauthenticated() -> Error:
    return Error(
        code="UNAUTHENTICATED",
        message="No authenticated owner for this operation",
    )


def rental_not_found(rental_id: str) -> Error:
    return Error(
        code="RENTAL_NOT_FOUND",
        message=f"Rental {rental_id} not found",
        reason="Rental does not exist or belongs to another owner",
    )


def rental_not_migrated(rental_id: str) -> Error:
    return Error(
        code="RENTAL_NOT_MIGRATED",
        message=f"Rental {rental_id} still uses the legacy record layout",
        reason="Run the migration before recording ledger changes",
    )


def from_exception(exc: Exception, code: str, message: str) -> Error:
    """
    Convert an unexpected exception into an error result

    Storage outages (lost connection, locked database) are reported as
    TRANSIENT_IO so callers can decide to retry; everything else keeps the
    operation-specific code.
    """
    if isinstance(exc, (OperationalError, InterfaceError)):
        return Error(
            code=TRANSIENT_IO,
            message="Storage is temporarily unavailable",
            reason=str(exc),
        )
    return Error(code=code, message=message, reason=str(exc))
