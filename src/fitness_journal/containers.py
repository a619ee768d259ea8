"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, fields

from supabase import create_client

from fitness_journal.adapters import (
    filesystem_repositories as fs,
)
from fitness_journal.adapters import (
    memory_repositories as memory,
)
from fitness_journal.adapters import (
    supabase_repositories as sb,
)
from fitness_journal.adapters.image_store import FilesystemImageStore
from fitness_journal.adapters.jwt_auth_service import JwtAuthService
from fitness_journal.adapters.open_food_facts_client import (
    PRODUCTION_BASE_URL,
    STAGING_BASE_URL,
    OpenFoodFactsIngredientFinder,
)
from fitness_journal.adapters.password_hasher import Pbkdf2PasswordHasher
from fitness_journal.config import Settings
from fitness_journal.domain.errors import InfrastructureError
from fitness_journal.services.auth import AuthService
from fitness_journal.services.cache import Cache, InMemoryCache
from fitness_journal.services.days import DayRepository
from fitness_journal.services.exercises import ExerciseRepository
from fitness_journal.services.fake_meals import FakeMealRepository
from fitness_journal.services.ingredients import (
    ExternalIngredientRefRepository,
    IngredientFinder,
    IngredientRepository,
    IngredientResolver,
)
from fitness_journal.services.meals import MealRepository
from fitness_journal.services.recipes import RecipeRepository
from fitness_journal.services.transactions import (
    DirectTransactionContext,
    TransactionContext,
)
from fitness_journal.services.users import PasswordHasher, UserRepository
from fitness_journal.services.workout_templates import WorkoutTemplateRepository
from fitness_journal.services.workouts import WorkoutRepository

logger = logging.getLogger(__name__)


@dataclass
class Repositories:
    """One repository per entity type, all from the same backend."""

    users: UserRepository
    ingredients: IngredientRepository
    external_ingredient_refs: ExternalIngredientRefRepository
    meals: MealRepository
    fake_meals: FakeMealRepository
    recipes: RecipeRepository
    days: DayRepository
    exercises: ExerciseRepository
    workouts: WorkoutRepository
    workout_templates: WorkoutTemplateRepository


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    repositories: Repositories
    transaction: TransactionContext
    auth_service: AuthService
    password_hasher: PasswordHasher
    ingredient_finder: IngredientFinder
    search_cache: Cache
    image_store: FilesystemImageStore
    close_resources: Callable[[], Awaitable[None]]

    @property
    def ingredient_resolver(self) -> IngredientResolver:
        return IngredientResolver(
            ingredients=self.repositories.ingredients,
            external_refs=self.repositories.external_ingredient_refs,
        )


def build_memory_repositories() -> tuple[Repositories, TransactionContext]:
    """In-memory repositories sharing a rollback-capable transaction context."""
    repositories = Repositories(
        users=memory.MemoryUserRepository(),
        ingredients=memory.MemoryIngredientRepository(),
        external_ingredient_refs=memory.MemoryExternalIngredientRefRepository(),
        meals=memory.MemoryMealRepository(),
        fake_meals=memory.MemoryFakeMealRepository(),
        recipes=memory.MemoryRecipeRepository(),
        days=memory.MemoryDayRepository(),
        exercises=memory.MemoryExerciseRepository(),
        workouts=memory.MemoryWorkoutRepository(),
        workout_templates=memory.MemoryWorkoutTemplateRepository(),
    )
    transaction = memory.MemoryTransactionContext(
        participants=[
            getattr(repositories, item.name) for item in fields(repositories)
        ]
    )
    return repositories, transaction


def build_repositories(settings: Settings) -> tuple[Repositories, TransactionContext]:
    """Select the repository backend named in the settings."""
    backend = settings.repository_backend
    if backend == "memory":
        return build_memory_repositories()
    if backend == "filesystem":
        data_dir = settings.data_dir
        repositories = Repositories(
            users=fs.FileSystemUserRepository.create(data_dir),
            ingredients=fs.FileSystemIngredientRepository.create(data_dir),
            external_ingredient_refs=(
                fs.FileSystemExternalIngredientRefRepository.create(data_dir)
            ),
            meals=fs.FileSystemMealRepository.create(data_dir),
            fake_meals=fs.FileSystemFakeMealRepository.create(data_dir),
            recipes=fs.FileSystemRecipeRepository.create(data_dir),
            days=fs.FileSystemDayRepository.create(data_dir),
            exercises=fs.FileSystemExerciseRepository.create(data_dir),
            workouts=fs.FileSystemWorkoutRepository.create(data_dir),
            workout_templates=fs.FileSystemWorkoutTemplateRepository.create(data_dir),
        )
        return repositories, DirectTransactionContext()
    if backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise InfrastructureError(
                "SUPABASE_URL and SUPABASE_SERVICE_KEY are required "
                "for the supabase backend"
            )
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        repositories = Repositories(
            users=sb.SupabaseUserRepository(client),
            ingredients=sb.SupabaseIngredientRepository(client),
            external_ingredient_refs=sb.SupabaseExternalIngredientRefRepository(client),
            meals=sb.SupabaseMealRepository(client),
            fake_meals=sb.SupabaseFakeMealRepository(client),
            recipes=sb.SupabaseRecipeRepository(client),
            days=sb.SupabaseDayRepository(client),
            exercises=sb.SupabaseExerciseRepository(client),
            workouts=sb.SupabaseWorkoutRepository(client),
            workout_templates=sb.SupabaseWorkoutTemplateRepository(client),
        )
        return repositories, DirectTransactionContext()
    raise InfrastructureError(f"Unknown repository backend: {backend}")


def open_food_facts_url(settings: Settings) -> str:
    """Use the production database in production and staging elsewhere."""
    if settings.open_food_facts_base_url:
        return settings.open_food_facts_base_url.rstrip("/")
    return PRODUCTION_BASE_URL if settings.is_production else STAGING_BASE_URL


def build_container(
    settings: Settings | None = None,
    ingredient_finder: IngredientFinder | None = None,
) -> AppContainer:
    """Create the dependency container for the configured environment."""
    resolved_settings = settings or Settings()
    repositories, transaction = build_repositories(resolved_settings)
    finder = ingredient_finder
    owned_finder: OpenFoodFactsIngredientFinder | None = None
    if finder is None:
        owned_finder = OpenFoodFactsIngredientFinder.create(
            base_url=open_food_facts_url(resolved_settings),
            user_agent=resolved_settings.open_food_facts_user_agent,
        )
        finder = owned_finder

    async def close_resources() -> None:
        if owned_finder is not None:
            await owned_finder.close()

    logger.info(
        "Built container: environment=%s backend=%s",
        resolved_settings.environment,
        resolved_settings.repository_backend,
    )
    return AppContainer(
        settings=resolved_settings,
        repositories=repositories,
        transaction=transaction,
        auth_service=JwtAuthService(
            secret=resolved_settings.jwt_secret,
            ttl_days=resolved_settings.token_ttl_days,
        ),
        password_hasher=Pbkdf2PasswordHasher(),
        ingredient_finder=finder,
        search_cache=InMemoryCache(),
        image_store=FilesystemImageStore(root=resolved_settings.images_dir),
        close_resources=close_resources,
    )
