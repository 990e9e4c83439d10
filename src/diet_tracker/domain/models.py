"""Domain models for the diet tracker."""

from dataclasses import dataclass, field
from uuid import UUID

from diet_tracker.domain.meals import MealKind, PendingMeal
from diet_tracker.domain.nutrition import MacroProfile


@dataclass(frozen=True)
class UserNutritionRecord:
    """Per-user ledger row with its pending meal ids."""

    id: UUID
    name: str
    email: str
    calorie_goal: int
    current_calorie: float
    protein_g: float
    carbs_g: float
    fat_g: float
    meals: list[str] = field(default_factory=list)
    scanned_meals: list[str] = field(default_factory=list)

    @property
    def totals(self) -> MacroProfile:
        return MacroProfile(
            calories=self.current_calorie,
            protein_g=self.protein_g,
            fat_g=self.fat_g,
            carbs_g=self.carbs_g,
        )

    def pending(self) -> list[PendingMeal]:
        """Return recipe meals followed by scanned meals, in stored order."""
        return [PendingMeal(MealKind.RECIPE, meal_id) for meal_id in self.meals] + [
            PendingMeal(MealKind.SCANNED, barcode) for barcode in self.scanned_meals
        ]

    def ids_for(self, kind: MealKind) -> list[str]:
        return self.meals if kind is MealKind.RECIPE else self.scanned_meals
