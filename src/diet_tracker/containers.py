"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from diet_tracker.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from diet_tracker.adapters.spoonacular_client import HttpxSpoonacularClient
from diet_tracker.adapters.supabase_ledger_repository import SupabaseLedgerRepository
from diet_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from diet_tracker.config import Settings
from diet_tracker.services.cache import InMemoryCache
from diet_tracker.services.ledger import LedgerService
from diet_tracker.services.meals import MealLogService
from diet_tracker.services.plans import DietPlanService
from diet_tracker.services.products import ProductService
from diet_tracker.services.profiles import ProfileService
from diet_tracker.services.recipes import RecipeService
from diet_tracker.services.reset import DailyResetJob
from diet_tracker.services.scheduler import ResetScheduler


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    ledger_service: LedgerService
    meal_log_service: MealLogService
    profile_service: ProfileService
    diet_plan_service: DietPlanService
    recipe_service: RecipeService
    product_service: ProductService
    reset_job: DailyResetJob
    reset_scheduler: ResetScheduler
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    ledger_repository = SupabaseLedgerRepository(supabase_client)
    profile_repository = SupabaseProfileRepository(supabase_client)
    spoonacular_client = HttpxSpoonacularClient.create(
        api_key=resolved_settings.spoonacular_api_key,
        base_url=resolved_settings.spoonacular_base_url,
        timeout=resolved_settings.http_timeout_seconds,
    )
    openfoodfacts_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.openfoodfacts_base_url,
        timeout=resolved_settings.http_timeout_seconds,
    )
    cache = InMemoryCache()
    recipe_service = RecipeService(client=spoonacular_client, cache=cache)
    product_service = ProductService(client=openfoodfacts_client, cache=cache)
    ledger_service = LedgerService(ledger_repository)
    meal_log_service = MealLogService(
        ledger_service=ledger_service,
        recipe_service=recipe_service,
        product_service=product_service,
    )
    profile_service = ProfileService(profile_repository)
    diet_plan_service = DietPlanService(
        repository=profile_repository,
        recipe_service=recipe_service,
    )
    reset_job = DailyResetJob(
        repository=ledger_repository,
        batch_size=resolved_settings.reset_batch_size,
    )
    reset_scheduler = ResetScheduler(
        job=reset_job,
        cron_expression=resolved_settings.reset_cron,
        timezone=resolved_settings.reset_timezone,
    )

    async def close_resources() -> None:
        await spoonacular_client.close()
        await openfoodfacts_client.close()

    return AppContainer(
        settings=resolved_settings,
        ledger_service=ledger_service,
        meal_log_service=meal_log_service,
        profile_service=profile_service,
        diet_plan_service=diet_plan_service,
        recipe_service=recipe_service,
        product_service=product_service,
        reset_job=reset_job,
        reset_scheduler=reset_scheduler,
        close_resources=close_resources,
    )
