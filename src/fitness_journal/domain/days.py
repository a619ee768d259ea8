"""Calendar days holding a user's meal references."""

from dataclasses import dataclass, field
from datetime import date, datetime

from fitness_journal.domain.common import utc_now
from fitness_journal.domain.errors import ValidationError
from fitness_journal.domain.validation import require_id

DAY_ID_FORMAT = "%Y%m%d"


def day_id_from_date(value: date) -> str:
    """Format a calendar date as a day id (YYYYMMDD)."""
    if not isinstance(value, date):
        raise ValidationError("date must be a valid date")
    return value.strftime(DAY_ID_FORMAT)


def date_from_day_id(day_id: object) -> date:
    """Parse a YYYYMMDD day id, raising ValidationError when malformed."""
    if not isinstance(day_id, str) or len(day_id) != 8 or not day_id.isdigit():
        raise ValidationError(f"Invalid day id: {day_id!r}")
    try:
        return datetime.strptime(day_id, DAY_ID_FORMAT).date()
    except ValueError as exc:
        raise ValidationError(f"Invalid day id: {day_id!r}") from exc


@dataclass
class Day:
    """All meals a user logged on one date, in insertion order.

    ``meal_ids`` may reference meals or fake meals; resolution happens when the
    day is assembled.
    """

    id: str
    user_id: str
    meal_ids: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        date_from_day_id(self.id)
        self.user_id = require_id(self.user_id, "user_id")
        _ensure_unique(self.meal_ids)

    @property
    def date(self) -> date:
        return date_from_day_id(self.id)

    def has_meal(self, meal_id: str) -> bool:
        return meal_id in self.meal_ids

    def add_meal(self, meal_id: str) -> None:
        meal_id = require_id(meal_id, "meal_id")
        if meal_id in self.meal_ids:
            raise ValidationError(f"Meal {meal_id} is already in day {self.id}")
        self.meal_ids.append(meal_id)
        self.updated_at = utc_now()

    def remove_meal(self, meal_id: str) -> None:
        if meal_id not in self.meal_ids:
            raise ValidationError(f"Meal {meal_id} is not in day {self.id}")
        self.meal_ids.remove(meal_id)
        self.updated_at = utc_now()

    def replace_meals(self, meal_ids: list[str]) -> None:
        cleaned = [require_id(meal_id, "meal_id") for meal_id in meal_ids]
        _ensure_unique(cleaned)
        self.meal_ids = cleaned
        self.updated_at = utc_now()


def _ensure_unique(meal_ids: list[str]) -> None:
    if len(set(meal_ids)) != len(meal_ids):
        raise ValidationError("Day: meal ids must be unique")
