"""Tests for Supabase repository implementations."""

from dataclasses import dataclass, field

from fitness_journal.adapters import serialization
from fitness_journal.adapters.supabase_repositories import (
    SupabaseDayRepository,
    SupabaseExternalIngredientRefRepository,
    SupabaseMealRepository,
    SupabaseUserRepository,
    SupabaseWorkoutTemplateRepository,
)
from fitness_journal.domain.days import Day
from fitness_journal.domain.meals import Meal
from fitness_journal.domain.users import User
from fitness_journal.domain.workouts import WorkoutTemplate
from tests.conftest import make_ingredient, make_line


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "upsert": [], "delete": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, str, object]] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        self.last_filters = []
        return self

    def upsert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "upsert"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        self.last_filters = []
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("eq", column, value))
        return self

    def in_(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("in", column, value))
        return self

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("gte", column, value))
        return self

    def lte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("lte", column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _meal(meal_id: str, user_id: str = "user-1") -> Meal:
    return Meal(
        id=meal_id,
        user_id=user_id,
        name="Lunch",
        ingredient_lines=[make_line(meal_id, make_ingredient(), 150)],
    )


def test_user_repository_saves_indexed_columns_and_parses_documents() -> None:
    client = FakeSupabaseClient()
    users_table = client.table("users")
    user = User(
        id="user-1", name="Alice", email="alice@example.com", hashed_password="h"
    )
    users_table.queue("select", [{"data": serialization.dump_user(user)}])

    repository = SupabaseUserRepository(client)
    repository.save(user)
    saved = users_table.last_payload
    fetched = repository.get_by_email("alice@example.com")

    assert saved["id"] == "user-1"
    assert saved["email"] == "alice@example.com"
    assert saved["data"]["email"] == "alice@example.com"
    assert users_table.last_filters == [("eq", "email", "alice@example.com")]
    assert fetched == user


def test_meal_repository_get_by_ids_keeps_request_order() -> None:
    client = FakeSupabaseClient()
    meals_table = client.table("meals")
    first, second = _meal("meal-1"), _meal("meal-2")
    meals_table.queue(
        "select",
        [
            {"id": "meal-1", "data": serialization.dump_meal(first)},
            {"id": "meal-2", "data": serialization.dump_meal(second)},
        ],
    )

    found = SupabaseMealRepository(client).get_by_ids(["meal-2", "missing", "meal-1"])

    assert [meal.id for meal in found] == ["meal-2", "meal-1"]
    assert meals_table.last_filters == [("in", "id", ["meal-2", "missing", "meal-1"])]


def test_meal_repository_missing_and_empty_lookups() -> None:
    client = FakeSupabaseClient()
    repository = SupabaseMealRepository(client)

    assert repository.get_by_id("meal-1") is None
    assert repository.get_by_ids([]) == []
    assert "meals" in client.tables


def test_meal_repository_save_many_upserts_rows() -> None:
    client = FakeSupabaseClient()

    SupabaseMealRepository(client).save_many([_meal("meal-1"), _meal("meal-2")])

    payload = client.table("meals").last_payload
    assert [row["id"] for row in payload] == ["meal-1", "meal-2"]
    assert {row["user_id"] for row in payload} == {"user-1"}


def test_day_repository_keys_and_range_filters() -> None:
    client = FakeSupabaseClient()
    days_table = client.table("days")
    day = Day(id="20240305", user_id="user-1", meal_ids=["meal-1"])
    days_table.queue("select", [{"data": serialization.dump_day(day)}])
    repository = SupabaseDayRepository(client)

    repository.save(day)
    saved = days_table.last_payload
    found = repository.get_range_for_user("user-1", "20240301", "20240310")

    assert saved["id"] == "user-1-20240305"
    assert saved["day_id"] == "20240305"
    assert found == [day]
    assert days_table.last_filters == [
        ("eq", "user_id", "user-1"),
        ("gte", "day_id", "20240301"),
        ("lte", "day_id", "20240310"),
    ]

    repository.delete("20240305", "user-1")
    assert days_table.last_filters == [("eq", "id", "user-1-20240305")]


def test_external_ref_repository_uses_composite_key() -> None:
    client = FakeSupabaseClient()

    SupabaseExternalIngredientRefRepository(client).get_by_external_id_and_source(
        "737628064502", "openfoodfacts"
    )

    assert client.table("external_ingredient_refs").last_filters == [
        ("eq", "id", "737628064502-openfoodfacts")
    ]


def test_workout_template_repository_keeps_soft_deleted_documents() -> None:
    client = FakeSupabaseClient()
    templates_table = client.table("workout_templates")
    template = WorkoutTemplate(id="tpl-1", user_id="user-1", name="Legs")
    template.mark_as_deleted()
    templates_table.queue(
        "select", [{"data": serialization.dump_workout_template(template)}]
    )

    fetched = SupabaseWorkoutTemplateRepository(client).get_by_id("tpl-1")

    assert fetched == template
    assert fetched.is_deleted
