"""Serialization utilities for converting models to API responses."""
from datetime import datetime
from typing import List, Optional

from formulary.utils.clock import as_utc


def serialize_datetime(value: Optional[datetime]) -> Optional[str]:
    """
    Serialize datetime to ISO format string in UTC.

    Args:
        value: Datetime value or None

    Returns:
        ISO format string or None
    """
    value = as_utc(value)
    return value.isoformat() if value else None


def parse_id_list(raw: Optional[str]) -> Optional[List[int]]:
    """
    Parse a comma-separated id list such as ``"1,2,3"``.

    Non-numeric entries are dropped. Returns None when nothing usable remains,
    which callers treat as "no filter".
    """
    if not raw:
        return None
    ids = []
    for part in raw.split(","):
        part = part.strip()
        if part.lstrip("-").isdigit():
            ids.append(int(part))
    return ids or None
