"""Domain models for generated meal plans and recipes."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PlannedMeal:
    """Recipe reference inside a generated plan."""

    id: int
    title: str


@dataclass(frozen=True)
class PlanNutrients:
    """Daily nutrient totals reported for a plan."""

    calories: float
    carbohydrates: float
    protein: float
    fat: float


@dataclass(frozen=True)
class MealPlan:
    """One distinct day of a generated weekly plan."""

    label: str
    meals: list[PlannedMeal]
    nutrients: PlanNutrients

    @property
    def meal_ids(self) -> list[int]:
        return [meal.id for meal in self.meals]


@dataclass(frozen=True)
class RecipeDetails:
    """Recipe information for the detail view."""

    id: int
    title: str
    image: str | None
    ready_in_minutes: int | None
    servings: int | None
    ingredients: list[str]
    instructions: str
