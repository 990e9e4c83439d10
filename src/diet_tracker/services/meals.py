"""Today's meal log: hydration of pending meals and eat/remove actions."""

import asyncio
import logging
from dataclasses import dataclass
from uuid import UUID

from diet_tracker.domain.errors import EntryNotPendingError, NotFoundError
from diet_tracker.domain.meals import (
    MealEntry,
    MealKind,
    MealOutcome,
    MealState,
    PendingMeal,
    TodayView,
)
from diet_tracker.domain.nutrition import ZERO_MACROS
from diet_tracker.services.ledger import LedgerService
from diet_tracker.services.products import ProductService
from diet_tracker.services.recipes import RecipeService

_logger = logging.getLogger(__name__)


@dataclass
class MealLogService:
    """Moves pending meals through hydration to eaten or removed."""

    ledger_service: LedgerService
    recipe_service: RecipeService
    product_service: ProductService

    async def load_today(self, user_id: UUID) -> TodayView:
        """Return totals plus every pending meal that hydrates successfully."""
        record = self.ledger_service.repository.get_record(user_id)
        if record is None:
            return TodayView(calorie_goal=0, totals=ZERO_MACROS, entries=[])
        hydrated = await asyncio.gather(
            *(self._hydrate_or_none(pending) for pending in record.pending())
        )
        entries = [entry for entry in hydrated if entry is not None]
        dropped = len(hydrated) - len(entries)
        if dropped:
            _logger.warning(
                "Dropped %s meals that failed to hydrate",
                dropped,
                extra={"user_id": str(user_id)},
            )
        return TodayView(
            calorie_goal=record.calorie_goal,
            totals=record.totals,
            entries=entries,
        )

    async def hydrate(self, pending: PendingMeal) -> MealEntry | None:
        """Fetch nutrition facts for a pending id from its source."""
        if pending.kind is MealKind.RECIPE:
            return await self.recipe_service.get_meal_entry(pending.id)
        return await self.product_service.get_meal_entry(pending.id)

    async def _hydrate_or_none(self, pending: PendingMeal) -> MealEntry | None:
        try:
            return await self.hydrate(pending)
        except Exception:
            _logger.exception(
                "Meal hydration failed",
                extra={"kind": pending.kind, "entry_id": pending.id},
            )
            return None

    async def eat(self, user_id: UUID, kind: MealKind, entry_id: str) -> MealOutcome:
        """Hydrate a pending meal and add it to the user's totals."""
        record = self.ledger_service.get_record(user_id)
        if entry_id not in record.ids_for(kind):
            raise EntryNotPendingError(kind, entry_id)
        entry = await self.hydrate(PendingMeal(kind, entry_id))
        if entry is None:
            raise NotFoundError(f"Nutrition facts unavailable for {kind} {entry_id}")
        totals = self.ledger_service.apply_eaten(user_id, entry)
        return MealOutcome(kind, entry_id, MealState.EATEN, totals)

    def remove(self, user_id: UUID, kind: MealKind, entry_id: str) -> MealOutcome:
        """Dismiss a pending meal without changing totals."""
        self.ledger_service.remove_entry(user_id, kind, entry_id)
        record = self.ledger_service.get_record(user_id)
        return MealOutcome(kind, entry_id, MealState.REMOVED, record.totals)
