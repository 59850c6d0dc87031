"""HTTP error mapping for use case results"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from libs.result import Error

_STATUS_BY_CODE = {
    "UNAUTHENTICATED": status.HTTP_401_UNAUTHORIZED,
    "RENTAL_NOT_MIGRATED": status.HTTP_409_CONFLICT,
    "TRANSIENT_IO": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for(error: Error) -> int:
    """HTTP status for an error code; unknown codes are client errors"""
    if error.code.endswith("_NOT_FOUND"):
        return status.HTTP_404_NOT_FOUND
    return _STATUS_BY_CODE.get(error.code, status.HTTP_400_BAD_REQUEST)


class ClientError(Exception):
    """Raised by routes to turn an error result into an HTTP response"""

    def __init__(self, error: Error, status_code: int = None):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code if status_code is not None else status_for(error)


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    body = {"code": exc.error.code, "message": exc.error.message}
    if exc.error.reason:
        body["reason"] = exc.error.reason
    return JSONResponse(status_code=exc.status_code, content={"error": body})
