"""Application users."""

from dataclasses import dataclass, field
from datetime import datetime

from fitness_journal.domain.common import utc_now
from fitness_journal.domain.errors import ValidationError
from fitness_journal.domain.validation import require_email, require_id, require_name


@dataclass(frozen=True)
class UserPatch:
    """Partial update for a user."""

    name: str | None = None
    customer_id: str | None = None


@dataclass
class User:
    """A registered account."""

    id: str
    name: str
    email: str
    hashed_password: str
    customer_id: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.id = require_id(self.id)
        self.name = require_name(self.name)
        self.email = require_email(self.email)
        self.hashed_password = require_id(self.hashed_password, "hashed_password")

    def apply(self, patch: UserPatch) -> None:
        if patch == UserPatch():
            raise ValidationError("User: no changes provided")
        name = require_name(patch.name) if patch.name is not None else self.name
        customer_id = (
            require_id(patch.customer_id, "customer_id")
            if patch.customer_id is not None
            else self.customer_id
        )
        self.name = name
        self.customer_id = customer_id
        self.updated_at = utc_now()
