# mc_core/common/ids.py
from __future__ import annotations

from uuid import UUID


def coerce_uuid(value) -> UUID | None:
    """
    Parse a path/body identifier. Returns None for anything that is not a UUID,
    so callers can fold malformed ids into their uniform denial.
    """
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None
