"""Spoonacular recipe and meal-plan API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class RecipeClient(Protocol):
    """Interface for recipe/meal-plan API interactions."""

    async def generate_meal_plan(
        self, target_calories: int, diet: str, time: int
    ) -> dict[str, object]:
        """Generate a weekly meal plan and return raw API data."""

    async def get_recipe_information(self, recipe_id: int) -> dict[str, object]:
        """Fetch recipe information and return raw API data."""

    async def get_nutrition_widget(self, recipe_id: int) -> dict[str, object]:
        """Fetch the recipe nutrition widget and return raw API data."""


@dataclass
class HttpxSpoonacularClient(RecipeClient):
    """HTTPX-backed Spoonacular client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 15

    @classmethod
    def create(
        cls, api_key: str, base_url: str, timeout: float = 15
    ) -> "HttpxSpoonacularClient":
        """Create a client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def generate_meal_plan(
        self, target_calories: int, diet: str, time: int
    ) -> dict[str, object]:
        return await self._get(
            "/mealplanner/generate",
            {"targetCalories": target_calories, "diet": diet, "time": time},
        )

    async def get_recipe_information(self, recipe_id: int) -> dict[str, object]:
        return await self._get(f"/recipes/{recipe_id}/information")

    async def get_nutrition_widget(self, recipe_id: int) -> dict[str, object]:
        return await self._get(f"/recipes/{recipe_id}/nutritionWidget.json")

    async def _get(
        self, path: str, params: dict[str, object] | None = None
    ) -> dict[str, object]:
        response = await self.http_client.get(
            f"{self.base_url}{path}",
            params={"apiKey": self.api_key, **(params or {})},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
