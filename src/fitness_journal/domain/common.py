"""Identity and time helpers for entities."""

from datetime import UTC, datetime
from uuid import uuid4


def new_id() -> str:
    """Return a fresh entity id."""
    return str(uuid4())


def utc_now() -> datetime:
    return datetime.now(tz=UTC)
