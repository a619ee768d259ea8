"""Filesystem repositories storing one JSON document per entity."""

import json
import logging
import os
import tempfile
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Generic, TypeVar

from fitness_journal.adapters import serialization
from fitness_journal.adapters.serialization import Document
from fitness_journal.domain.days import Day
from fitness_journal.domain.errors import InfrastructureError, ValidationError
from fitness_journal.domain.ingredients import (
    ExternalIngredientRef,
    Ingredient,
    external_ref_key,
)
from fitness_journal.domain.meals import FakeMeal, Meal
from fitness_journal.domain.recipes import Recipe
from fitness_journal.domain.users import User
from fitness_journal.domain.workouts import Exercise, Workout, WorkoutTemplate
from fitness_journal.services.days import DayRepository
from fitness_journal.services.exercises import ExerciseRepository
from fitness_journal.services.fake_meals import FakeMealRepository
from fitness_journal.services.ingredients import (
    ExternalIngredientRefRepository,
    IngredientRepository,
)
from fitness_journal.services.meals import MealRepository
from fitness_journal.services.recipes import RecipeRepository
from fitness_journal.services.users import UserRepository
from fitness_journal.services.workout_templates import WorkoutTemplateRepository
from fitness_journal.services.workouts import WorkoutRepository

EntityT = TypeVar("EntityT")

logger = logging.getLogger(__name__)


@dataclass
class JsonDirectory(Generic[EntityT]):
    """A directory of ``<key>.json`` files for one entity type."""

    root: Path
    dump: Callable[[EntityT], Document]
    parse: Callable[[Document], EntityT]

    def __post_init__(self) -> None:
        self.root = Path(self.root)
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key in {".", ".."}:
            raise ValidationError(f"Invalid storage key: {key!r}")
        return self.root / f"{key}.json"

    def read(self, key: str) -> EntityT | None:
        path = self.path_for(key)
        if not path.is_file():
            return None
        return self._load(path)

    def read_many(self, keys: Sequence[str]) -> list[EntityT]:
        found = []
        for key in dict.fromkeys(keys):
            item = self.read(key)
            if item is not None:
                found.append(item)
        return found

    def read_all(self) -> list[EntityT]:
        return [self._load(path) for path in sorted(self.root.glob("*.json"))]

    def where(self, predicate: Callable[[EntityT], bool]) -> list[EntityT]:
        return [item for item in self.read_all() if predicate(item)]

    def write(self, key: str, item: EntityT) -> None:
        path = self.path_for(key)
        fd, tmp_name = tempfile.mkstemp(dir=self.root, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(self.dump(item), handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise InfrastructureError(f"Failed to write {path}") from exc
        except Exception:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def remove(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)

    def _load(self, path: Path) -> EntityT:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.exception("Unreadable document %s", path)
            raise InfrastructureError(f"Failed to read {path}") from exc
        return self.parse(data)


def _directory(
    data_dir: Path,
    name: str,
    dump: Callable[[EntityT], Document],
    parse: Callable[[Document], EntityT],
) -> JsonDirectory[EntityT]:
    return JsonDirectory(root=Path(data_dir) / name, dump=dump, parse=parse)


@dataclass
class FileSystemUserRepository(UserRepository):
    directory: JsonDirectory[User]

    @classmethod
    def create(cls, data_dir: Path) -> "FileSystemUserRepository":
        return cls(
            _directory(
                data_dir, "users", serialization.dump_user, serialization.parse_user
            )
        )

    def get_by_id(self, user_id: str) -> User | None:
        return self.directory.read(user_id)

    def get_by_email(self, email: str) -> User | None:
        found = self.directory.where(lambda user: user.email == email)
        return found[0] if found else None

    def get_by_customer_id(self, customer_id: str) -> User | None:
        found = self.directory.where(lambda user: user.customer_id == customer_id)
        return found[0] if found else None

    def save(self, user: User) -> None:
        self.directory.write(user.id, user)

    def delete(self, user_id: str) -> None:
        self.directory.remove(user_id)


@dataclass
class FileSystemIngredientRepository(IngredientRepository):
    directory: JsonDirectory[Ingredient]

    @classmethod
    def create(cls, data_dir: Path) -> "FileSystemIngredientRepository":
        return cls(
            _directory(
                data_dir,
                "ingredients",
                serialization.dump_ingredient,
                serialization.parse_ingredient,
            )
        )

    def get_by_id(self, ingredient_id: str) -> Ingredient | None:
        return self.directory.read(ingredient_id)

    def get_by_ids(self, ingredient_ids: Sequence[str]) -> list[Ingredient]:
        return self.directory.read_many(ingredient_ids)

    def get_all(self) -> list[Ingredient]:
        return self.directory.read_all()

    def save(self, ingredient: Ingredient) -> None:
        self.directory.write(ingredient.id, ingredient)

    def delete(self, ingredient_id: str) -> None:
        self.directory.remove(ingredient_id)


@dataclass
class FileSystemExternalIngredientRefRepository(ExternalIngredientRefRepository):
    """Stores references as ``<external_id>-<source>.json``."""

    directory: JsonDirectory[ExternalIngredientRef]

    @classmethod
    def create(cls, data_dir: Path) -> "FileSystemExternalIngredientRefRepository":
        return cls(
            _directory(
                data_dir,
                "external_ingredient_refs",
                serialization.dump_external_ref,
                serialization.parse_external_ref,
            )
        )

    def get_by_external_id_and_source(
        self, external_id: str, source: str
    ) -> ExternalIngredientRef | None:
        return self.directory.read(external_ref_key(external_id, source))

    def save(self, ref: ExternalIngredientRef) -> None:
        self.directory.write(ref.key, ref)


@dataclass
class FileSystemMealRepository(MealRepository):
    directory: JsonDirectory[Meal]

    @classmethod
    def create(cls, data_dir: Path) -> "FileSystemMealRepository":
        return cls(
            _directory(
                data_dir, "meals", serialization.dump_meal, serialization.parse_meal
            )
        )

    def get_by_id(self, meal_id: str) -> Meal | None:
        return self.directory.read(meal_id)

    def get_by_ids(self, meal_ids: Sequence[str]) -> list[Meal]:
        return self.directory.read_many(meal_ids)

    def get_all_for_user(self, user_id: str) -> list[Meal]:
        return self.directory.where(lambda meal: meal.user_id == user_id)

    def save(self, meal: Meal) -> None:
        self.directory.write(meal.id, meal)

    def save_many(self, meals: Sequence[Meal]) -> None:
        for meal in meals:
            self.directory.write(meal.id, meal)

    def delete(self, meal_id: str) -> None:
        self.directory.remove(meal_id)


@dataclass
class FileSystemFakeMealRepository(FakeMealRepository):
    directory: JsonDirectory[FakeMeal]

    @classmethod
    def create(cls, data_dir: Path) -> "FileSystemFakeMealRepository":
        return cls(
            _directory(
                data_dir,
                "fake_meals",
                serialization.dump_fake_meal,
                serialization.parse_fake_meal,
            )
        )

    def get_by_id(self, fake_meal_id: str) -> FakeMeal | None:
        return self.directory.read(fake_meal_id)

    def get_by_ids(self, fake_meal_ids: Sequence[str]) -> list[FakeMeal]:
        return self.directory.read_many(fake_meal_ids)

    def get_all_for_user(self, user_id: str) -> list[FakeMeal]:
        return self.directory.where(lambda fake_meal: fake_meal.user_id == user_id)

    def save(self, fake_meal: FakeMeal) -> None:
        self.directory.write(fake_meal.id, fake_meal)

    def delete(self, fake_meal_id: str) -> None:
        self.directory.remove(fake_meal_id)


@dataclass
class FileSystemRecipeRepository(RecipeRepository):
    directory: JsonDirectory[Recipe]

    @classmethod
    def create(cls, data_dir: Path) -> "FileSystemRecipeRepository":
        return cls(
            _directory(
                data_dir,
                "recipes",
                serialization.dump_recipe,
                serialization.parse_recipe,
            )
        )

    def get_by_id(self, recipe_id: str) -> Recipe | None:
        return self.directory.read(recipe_id)

    def get_by_ids(self, recipe_ids: Sequence[str]) -> list[Recipe]:
        return self.directory.read_many(recipe_ids)

    def get_all_for_user(self, user_id: str) -> list[Recipe]:
        return self.directory.where(lambda recipe: recipe.user_id == user_id)

    def save(self, recipe: Recipe) -> None:
        self.directory.write(recipe.id, recipe)

    def delete(self, recipe_id: str) -> None:
        self.directory.remove(recipe_id)


@dataclass
class FileSystemDayRepository(DayRepository):
    """Stores days as ``<user_id>-<day_id>.json``."""

    directory: JsonDirectory[Day]

    @classmethod
    def create(cls, data_dir: Path) -> "FileSystemDayRepository":
        return cls(
            _directory(
                data_dir, "days", serialization.dump_day, serialization.parse_day
            )
        )

    def get_by_id_and_user(self, day_id: str, user_id: str) -> Day | None:
        return self.directory.read(f"{user_id}-{day_id}")

    def get_by_ids_and_user(self, day_ids: Sequence[str], user_id: str) -> list[Day]:
        return self.directory.read_many([f"{user_id}-{day_id}" for day_id in day_ids])

    def get_all_for_user(self, user_id: str) -> list[Day]:
        return self.directory.where(lambda day: day.user_id == user_id)

    def get_range_for_user(
        self, user_id: str, start_day_id: str, end_day_id: str
    ) -> list[Day]:
        return self.directory.where(
            lambda day: day.user_id == user_id
            and start_day_id <= day.id <= end_day_id
        )

    def save(self, day: Day) -> None:
        self.directory.write(f"{day.user_id}-{day.id}", day)

    def delete(self, day_id: str, user_id: str) -> None:
        self.directory.remove(f"{user_id}-{day_id}")


@dataclass
class FileSystemExerciseRepository(ExerciseRepository):
    directory: JsonDirectory[Exercise]

    @classmethod
    def create(cls, data_dir: Path) -> "FileSystemExerciseRepository":
        return cls(
            _directory(
                data_dir,
                "exercises",
                serialization.dump_exercise,
                serialization.parse_exercise,
            )
        )

    def get_by_id(self, exercise_id: str) -> Exercise | None:
        return self.directory.read(exercise_id)

    def get_by_ids(self, exercise_ids: Sequence[str]) -> list[Exercise]:
        return self.directory.read_many(exercise_ids)

    def get_all(self) -> list[Exercise]:
        return self.directory.read_all()

    def save(self, exercise: Exercise) -> None:
        self.directory.write(exercise.id, exercise)

    def delete(self, exercise_id: str) -> None:
        self.directory.remove(exercise_id)


@dataclass
class FileSystemWorkoutRepository(WorkoutRepository):
    directory: JsonDirectory[Workout]

    @classmethod
    def create(cls, data_dir: Path) -> "FileSystemWorkoutRepository":
        return cls(
            _directory(
                data_dir,
                "workouts",
                serialization.dump_workout,
                serialization.parse_workout,
            )
        )

    def get_by_id(self, workout_id: str) -> Workout | None:
        return self.directory.read(workout_id)

    def get_all_for_user(self, user_id: str) -> list[Workout]:
        return self.directory.where(lambda workout: workout.user_id == user_id)

    def get_by_template_for_user(
        self, template_id: str, user_id: str
    ) -> list[Workout]:
        return self.directory.where(
            lambda workout: workout.user_id == user_id
            and workout.workout_template_id == template_id
        )

    def save(self, workout: Workout) -> None:
        self.directory.write(workout.id, workout)

    def delete(self, workout_id: str) -> None:
        self.directory.remove(workout_id)


@dataclass
class FileSystemWorkoutTemplateRepository(WorkoutTemplateRepository):
    directory: JsonDirectory[WorkoutTemplate]

    @classmethod
    def create(cls, data_dir: Path) -> "FileSystemWorkoutTemplateRepository":
        return cls(
            _directory(
                data_dir,
                "workout_templates",
                serialization.dump_workout_template,
                serialization.parse_workout_template,
            )
        )

    def get_by_id(self, template_id: str) -> WorkoutTemplate | None:
        return self.directory.read(template_id)

    def get_all_for_user(self, user_id: str) -> list[WorkoutTemplate]:
        return self.directory.where(lambda template: template.user_id == user_id)

    def save(self, template: WorkoutTemplate) -> None:
        self.directory.write(template.id, template)
