"""Diet plan browsing and assignment."""

import logging
from dataclasses import dataclass
from uuid import UUID

from diet_tracker.domain.errors import ConflictError, NotFoundError, ValidationError
from diet_tracker.domain.plans import MealPlan
from diet_tracker.services.profiles import ProfileRepository
from diet_tracker.services.recipes import RecipeService

DEFAULT_TARGET_CALORIES = 2000

# Labels shown in the app that map to a different API diet name.
_DIET_ALIASES = {"cbum": "Whole30"}

_logger = logging.getLogger(__name__)


@dataclass
class DietPlanService:
    """Generates plans for a user's goal and assigns one as pending meals."""

    repository: ProfileRepository
    recipe_service: RecipeService

    async def list_plans(self, user_id: UUID, diet: str) -> list[MealPlan]:
        """Return distinct generated plans; empty when the lookup fails."""
        record = self.repository.get_record(user_id)
        target = (
            record.calorie_goal
            if record is not None and record.calorie_goal > 0
            else DEFAULT_TARGET_CALORIES
        )
        try:
            return await self.recipe_service.generate_plans(target, resolve_diet(diet))
        except Exception:
            _logger.exception(
                "Meal plan generation failed",
                extra={"user_id": str(user_id), "diet": diet},
            )
            return []

    def assign_plan(self, user_id: UUID, meal_ids: list[int | str]) -> list[str]:
        """Store a plan's recipe ids unless meals are already set."""
        ids = [str(meal_id) for meal_id in meal_ids]
        if not ids:
            raise ValidationError("A meal plan needs at least one meal")
        record = self.repository.get_record(user_id)
        if record is None:
            raise NotFoundError(f"User {user_id} not found")
        if record.meals:
            raise ConflictError("Your meals have already been set.")
        self.repository.set_meals(user_id, ids)
        _logger.info(
            "Meal plan assigned", extra={"user_id": str(user_id), "meals": len(ids)}
        )
        return ids


def resolve_diet(label: str) -> str:
    """Map an app diet label to the API's diet parameter."""
    cleaned = label.strip()
    return _DIET_ALIASES.get(cleaned.lower(), cleaned.lower())
