"""Error response schemas

Documented in the OpenAPI `responses` of each route; the body itself is
produced by the ClientError handler.
"""

from typing import Optional
from pydantic import BaseModel, Field


class ErrorBodySchema(BaseModel):
    code: str = Field(..., description="Machine-readable error code, e.g. RENTAL_NOT_FOUND")
    message: str
    reason: Optional[str] = None


class ErrorResponseSchema(BaseModel):
    error: ErrorBodySchema


def error_responses(*status_codes: int) -> dict:
    descriptions = {
        400: "Invalid request or operation failed",
        401: "No authenticated owner (missing X-Owner-Id)",
        404: "Rental or record not found",
        409: "Rental still uses the legacy record layout",
        503: "Storage temporarily unavailable",
    }
    return {
        code: {"model": ErrorResponseSchema, "description": descriptions[code]}
        for code in status_codes
    }
