"""Shared base for domain entities"""

import uuid
from sqlmodel import SQLModel


def generate_uuid() -> str:
    """Opaque identifier used for rentals and ledger records"""
    return uuid.uuid4().hex


class BaseModel(SQLModel):
    pass
