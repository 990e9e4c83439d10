"""Recipe and meal-plan lookups backed by Spoonacular."""

import asyncio
import html
import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from diet_tracker.adapters.spoonacular_client import RecipeClient
from diet_tracker.domain.meals import MealEntry, MealKind
from diet_tracker.domain.plans import MealPlan, PlanNutrients, PlannedMeal, RecipeDetails
from diet_tracker.services.cache import Cache
from diet_tracker.services.retry import call_with_retry

PLACEHOLDER_IMAGE = "https://via.placeholder.com/150"
NO_INSTRUCTIONS = "No instructions available."

_AMOUNT_PATTERN = re.compile(r"^\s*(-?\d+(?:\.\d+)?)")
_TAG_PATTERN = re.compile(r"<[^>]+>")

_logger = logging.getLogger(__name__)


@dataclass
class RecipeService:
    """Meal plan generation and recipe hydration with caching."""

    client: RecipeClient
    cache: Cache
    recipe_ttl_seconds: int = 86400
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3
    clock: Callable[[], float] = field(default=time.time)

    async def generate_plans(self, target_calories: int, diet: str) -> list[MealPlan]:
        """Generate a week of plans, keeping only distinct days."""
        payload = await call_with_retry(
            lambda: self.client.generate_meal_plan(
                target_calories, diet, int(self.clock() * 1000)
            ),
            action="generate_meal_plan",
            attempts=self.retry_attempts,
            delay_seconds=self.retry_delay_seconds,
        )
        week = payload.get("week") or {}
        plans: dict[tuple[int, ...], MealPlan] = {}
        for day in week.values():
            meals = [
                PlannedMeal(id=int(meal["id"]), title=str(meal.get("title", "")))
                for meal in day.get("meals", [])
            ]
            key = tuple(meal.id for meal in meals)
            if key in plans:
                continue
            plans[key] = MealPlan(
                label=f"Meal Plan {len(plans) + 1}",
                meals=meals,
                nutrients=_parse_plan_nutrients(day.get("nutrients") or {}),
            )
        return list(plans.values())

    async def get_recipe(self, recipe_id: int) -> RecipeDetails:
        """Return recipe details for the detail view."""
        cache_key = f"recipe:info:{recipe_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, RecipeDetails):
            return cached

        payload = await self._information(recipe_id)
        details = RecipeDetails(
            id=recipe_id,
            title=str(payload.get("title") or "Unknown Recipe"),
            image=payload.get("image"),
            ready_in_minutes=payload.get("readyInMinutes"),
            servings=payload.get("servings"),
            ingredients=[
                str(ingredient.get("original") or ingredient.get("name", ""))
                for ingredient in payload.get("extendedIngredients") or []
            ],
            instructions=strip_html(payload.get("instructions")) or NO_INSTRUCTIONS,
        )
        self.cache.set(cache_key, details, ttl_seconds=self.recipe_ttl_seconds)
        return details

    async def get_meal_entry(self, recipe_id: str) -> MealEntry | None:
        """Hydrate a recipe id into a meal entry; None when the lookup fails."""
        try:
            numeric_id = int(recipe_id)
        except ValueError:
            _logger.warning("Invalid recipe id: %s", recipe_id)
            return None

        cache_key = f"recipe:entry:{numeric_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, MealEntry):
            return cached

        try:
            nutrition, information = await asyncio.gather(
                call_with_retry(
                    lambda: self.client.get_nutrition_widget(numeric_id),
                    action=f"nutrition_widget:{numeric_id}",
                    attempts=self.retry_attempts,
                    delay_seconds=self.retry_delay_seconds,
                ),
                self._information(numeric_id),
            )
            entry = MealEntry(
                kind=MealKind.RECIPE,
                id=recipe_id,
                name=str(
                    information.get("title")
                    or information.get("name")
                    or "Unknown Recipe"
                ),
                protein_g=_widget_amount(nutrition, "good", "Protein"),
                carbs_g=_widget_amount(nutrition, "bad", "Carbohydrates"),
                fat_g=_widget_amount(nutrition, "bad", "Fat"),
                calories=_widget_amount(nutrition, "bad", "Calories"),
                image=str(information.get("image") or PLACEHOLDER_IMAGE),
            )
        except Exception:
            _logger.exception(
                "Recipe hydration failed", extra={"recipe_id": recipe_id}
            )
            return None
        self.cache.set(cache_key, entry, ttl_seconds=self.recipe_ttl_seconds)
        return entry

    async def _information(self, recipe_id: int) -> dict[str, object]:
        return await call_with_retry(
            lambda: self.client.get_recipe_information(recipe_id),
            action=f"recipe_information:{recipe_id}",
            attempts=self.retry_attempts,
            delay_seconds=self.retry_delay_seconds,
        )


def parse_amount(value: object) -> float:
    """Parse a leading number from values like ``"25g"``; 0 when absent."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        match = _AMOUNT_PATTERN.match(value)
        if match:
            return float(match.group(1))
    return 0.0


def strip_html(value: object) -> str:
    """Drop tags from instruction HTML."""
    if not isinstance(value, str):
        return ""
    return html.unescape(_TAG_PATTERN.sub("", value)).strip()


def _widget_amount(payload: dict[str, object], section: str, title: str) -> float:
    for nutrient in payload.get(section) or []:
        if nutrient.get("title") == title:
            return parse_amount(nutrient.get("amount"))
    return 0.0


def _parse_plan_nutrients(raw: dict[str, object]) -> PlanNutrients:
    return PlanNutrients(
        calories=parse_amount(raw.get("calories")),
        carbohydrates=parse_amount(raw.get("carbohydrates")),
        protein=parse_amount(raw.get("protein")),
        fat=parse_amount(raw.get("fat")),
    )
