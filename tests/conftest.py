"""Shared test fixtures."""

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field, replace
from uuid import UUID, uuid4

import pytest

from diet_tracker.adapters.openfoodfacts_client import ProductClient
from diet_tracker.adapters.spoonacular_client import RecipeClient
from diet_tracker.config import Settings
from diet_tracker.containers import AppContainer
from diet_tracker.domain.errors import ConflictError
from diet_tracker.domain.meals import MealKind
from diet_tracker.domain.models import UserNutritionRecord
from diet_tracker.domain.nutrition import MacroProfile, add_clamped
from diet_tracker.services.cache import InMemoryCache
from diet_tracker.services.ledger import LedgerRepository, LedgerService
from diet_tracker.services.meals import MealLogService
from diet_tracker.services.plans import DietPlanService
from diet_tracker.services.products import ProductService
from diet_tracker.services.profiles import ProfileRepository, ProfileService
from diet_tracker.services.recipes import RecipeService
from diet_tracker.services.reset import DailyResetJob
from diet_tracker.services.scheduler import ResetScheduler


@dataclass
class InMemoryProfileStore(LedgerRepository, ProfileRepository):
    """In-memory profiles table backing both ledger and profile services."""

    records: dict[UUID, UserNutritionRecord] = field(default_factory=dict)
    reset_calls: list[list[UUID]] = field(default_factory=list)
    fail_on_reset_call: int | None = None

    def add_user(self, **overrides: object) -> UserNutritionRecord:
        values: dict[str, object] = {
            "id": uuid4(),
            "name": "Alex",
            "email": "alex@example.com",
            "calorie_goal": 0,
            "current_calorie": 0.0,
            "protein_g": 0.0,
            "carbs_g": 0.0,
            "fat_g": 0.0,
            "meals": [],
            "scanned_meals": [],
        }
        values.update(overrides)
        record = UserNutritionRecord(**values)  # type: ignore[arg-type]
        self.records[record.id] = record
        return record

    def get_record(self, user_id: UUID) -> UserNutritionRecord | None:
        return self.records.get(user_id)

    def apply_eaten(
        self, user_id: UUID, kind: MealKind, entry_id: str, delta: MacroProfile
    ) -> MacroProfile | None:
        record = self.records.get(user_id)
        if record is None or entry_id not in record.ids_for(kind):
            return None
        totals = add_clamped(record.totals, delta)
        self.records[user_id] = replace(
            _without(record, kind, entry_id),
            current_calorie=totals.calories,
            protein_g=totals.protein_g,
            carbs_g=totals.carbs_g,
            fat_g=totals.fat_g,
        )
        return totals

    def remove_entry(self, user_id: UUID, kind: MealKind, entry_id: str) -> bool:
        record = self.records.get(user_id)
        if record is None or entry_id not in record.ids_for(kind):
            return False
        self.records[user_id] = _without(record, kind, entry_id)
        return True

    def list_user_ids(self) -> list[UUID]:
        return list(self.records)

    def reset_totals(self, user_ids: Sequence[UUID]) -> None:
        if self.fail_on_reset_call == len(self.reset_calls):
            self.reset_calls.append(list(user_ids))
            raise RuntimeError("batch commit failed")
        self.reset_calls.append(list(user_ids))
        for user_id in user_ids:
            self.records[user_id] = replace(
                self.records[user_id],
                current_calorie=0.0,
                protein_g=0.0,
                carbs_g=0.0,
                fat_g=0.0,
            )

    def create_profile(
        self, user_id: UUID, name: str, email: str
    ) -> UserNutritionRecord:
        if user_id in self.records:
            raise ConflictError(f"Profile {user_id} already exists")
        return self.add_user(id=user_id, name=name, email=email)

    def set_calorie_goal(self, user_id: UUID, calorie_goal: int) -> bool:
        record = self.records.get(user_id)
        if record is None:
            return False
        self.records[user_id] = replace(record, calorie_goal=calorie_goal)
        return True

    def set_meals(self, user_id: UUID, meal_ids: list[str]) -> None:
        self.records[user_id] = replace(self.records[user_id], meals=list(meal_ids))

    def append_scanned_meal(self, user_id: UUID, barcode: str) -> bool:
        record = self.records.get(user_id)
        if record is None:
            return False
        self.records[user_id] = replace(
            record, scanned_meals=[*record.scanned_meals, barcode]
        )
        return True


def _without(
    record: UserNutritionRecord, kind: MealKind, entry_id: str
) -> UserNutritionRecord:
    ids = list(record.ids_for(kind))
    ids.remove(entry_id)
    if kind is MealKind.RECIPE:
        return replace(record, meals=ids)
    return replace(record, scanned_meals=ids)


def _nutrition_widget(protein: str, carbs: str, fat: str, calories: str) -> dict:
    return {
        "good": [{"title": "Protein", "amount": protein}],
        "bad": [
            {"title": "Calories", "amount": calories},
            {"title": "Fat", "amount": fat},
            {"title": "Carbohydrates", "amount": carbs},
        ],
    }


@dataclass
class FakeRecipeClient(RecipeClient):
    """Fake Spoonacular client with in-memory responses."""

    widgets: dict[int, dict[str, object]] = field(
        default_factory=lambda: {
            101: _nutrition_widget("10g", "5g", "2g", "120"),
            102: _nutrition_widget("30g", "40g", "12g", "450"),
        }
    )
    information: dict[int, dict[str, object]] = field(
        default_factory=lambda: {
            101: {
                "title": "Greek Yogurt Bowl",
                "image": "https://img.test/101.jpg",
                "readyInMinutes": 5,
                "servings": 1,
                "extendedIngredients": [{"original": "1 cup yogurt"}],
                "instructions": "<ol><li>Mix.</li><li>Serve.</li></ol>",
            },
            102: {"title": "Chicken Rice", "image": "https://img.test/102.jpg"},
        }
    )
    plan_payload: dict[str, object] = field(default_factory=dict)
    failing_ids: set[int] = field(default_factory=set)
    plan_calls: list[tuple[int, str]] = field(default_factory=list)

    async def generate_meal_plan(
        self, target_calories: int, diet: str, time: int
    ) -> dict[str, object]:
        self.plan_calls.append((target_calories, diet))
        return self.plan_payload

    async def get_recipe_information(self, recipe_id: int) -> dict[str, object]:
        if recipe_id in self.failing_ids or recipe_id not in self.information:
            raise RuntimeError(f"recipe {recipe_id} unavailable")
        return self.information[recipe_id]

    async def get_nutrition_widget(self, recipe_id: int) -> dict[str, object]:
        if recipe_id in self.failing_ids or recipe_id not in self.widgets:
            raise RuntimeError(f"widget {recipe_id} unavailable")
        return self.widgets[recipe_id]


@dataclass
class FakeProductClient(ProductClient):
    """Fake OpenFoodFacts client keyed by barcode."""

    products: dict[str, dict[str, object]] = field(
        default_factory=lambda: {
            "737628064502": {
                "product_name": "Peanut Noodles",
                "image_url": "https://img.test/noodles.jpg",
                "nutriments": {
                    "proteins": 9,
                    "carbohydrates": 70,
                    "fat": 7,
                    "energy-kcal": 385,
                    "proteins_serving": 4.5,
                    "carbohydrates_serving": 35,
                    "fat_serving": 3.5,
                    "energy-kcal_serving": 192,
                },
            }
        }
    )
    calls: list[str] = field(default_factory=list)

    async def get_product(self, barcode: str) -> dict[str, object]:
        self.calls.append(barcode)
        if barcode in self.products:
            return {"status": 1, "product": self.products[barcode]}
        return {"status": 0, "status_verbose": "product not found"}


def build_recipe_service(client: RecipeClient | None = None) -> RecipeService:
    return RecipeService(
        client=client or FakeRecipeClient(),
        cache=InMemoryCache(),
        retry_delay_seconds=0,
    )


def build_product_service(client: ProductClient | None = None) -> ProductService:
    return ProductService(
        client=client or FakeProductClient(),
        cache=InMemoryCache(),
        retry_delay_seconds=0,
    )


@pytest.fixture(autouse=True)
def _propagate_package_logs() -> Iterator[None]:
    logger = logging.getLogger("diet_tracker")
    previous = logger.propagate
    logger.propagate = True
    yield
    logger.propagate = previous


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        admin_token="admin-token",
        spoonacular_api_key="spoonacular-key",
    )


@pytest.fixture
def store() -> InMemoryProfileStore:
    return InMemoryProfileStore()


@pytest.fixture
def recipe_client() -> FakeRecipeClient:
    return FakeRecipeClient()


@pytest.fixture
def product_client() -> FakeProductClient:
    return FakeProductClient()


@pytest.fixture
def meal_log_service(
    store: InMemoryProfileStore,
    recipe_client: FakeRecipeClient,
    product_client: FakeProductClient,
) -> MealLogService:
    return MealLogService(
        ledger_service=LedgerService(store),
        recipe_service=build_recipe_service(recipe_client),
        product_service=build_product_service(product_client),
    )


@pytest.fixture
def container(
    settings: Settings,
    store: InMemoryProfileStore,
    recipe_client: FakeRecipeClient,
    product_client: FakeProductClient,
) -> AppContainer:
    recipe_service = build_recipe_service(recipe_client)
    product_service = build_product_service(product_client)
    ledger_service = LedgerService(store)
    reset_job = DailyResetJob(repository=store, batch_size=settings.reset_batch_size)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        ledger_service=ledger_service,
        meal_log_service=MealLogService(
            ledger_service=ledger_service,
            recipe_service=recipe_service,
            product_service=product_service,
        ),
        profile_service=ProfileService(store),
        diet_plan_service=DietPlanService(
            repository=store, recipe_service=recipe_service
        ),
        recipe_service=recipe_service,
        product_service=product_service,
        reset_job=reset_job,
        reset_scheduler=ResetScheduler(job=reset_job),
        close_resources=close_resources,
    )
