"""Opaque page tokens for the pagination reader"""

import base64
import json
from datetime import datetime
from src.domain.ledger import PageCursor


def encode_cursor(cursor: PageCursor) -> str:
    payload = json.dumps(
        {"d": cursor.date.isoformat(), "i": cursor.record_id}, separators=(",", ":")
    )
    return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii").rstrip("=")


def decode_cursor(token: str) -> PageCursor:
    """
    Parse a token produced by encode_cursor

    Raises:
        ValueError: token is not a valid cursor
    """
    try:
        padded = token + "=" * (-len(token) % 4)
        payload = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
        return PageCursor(
            date=datetime.fromisoformat(payload["d"]),
            record_id=str(payload["i"]),
        )
    except (ValueError, KeyError, TypeError) as e:
        raise ValueError(f"Invalid page cursor: {token!r}") from e
