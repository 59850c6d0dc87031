"""Owner identity supplied by the identity provider gateway"""

from typing import Optional
from fastapi import Header


async def get_owner_id(
    x_owner_id: Optional[str] = Header(default=None, alias="X-Owner-Id")
) -> str:
    """
    Authenticated owner id, trusted as-is

    A missing header resolves to "" and the use cases answer UNAUTHENTICATED.
    """
    return (x_owner_id or "").strip()
