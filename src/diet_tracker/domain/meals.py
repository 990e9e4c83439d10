"""Domain models for logged meal entries."""

from dataclasses import dataclass
from enum import StrEnum

from diet_tracker.domain.nutrition import MacroProfile


class MealKind(StrEnum):
    """Source of a meal entry."""

    RECIPE = "recipe"
    SCANNED = "scanned"

    @property
    def owning_field(self) -> str:
        """Column holding pending ids of this kind."""
        return "meals" if self is MealKind.RECIPE else "scanned_meals"


class MealState(StrEnum):
    """Lifecycle of a meal entry."""

    PENDING = "pending"
    HYDRATED = "hydrated"
    EATEN = "eaten"
    REMOVED = "removed"


TERMINAL_STATES = frozenset({MealState.EATEN, MealState.REMOVED})


@dataclass(frozen=True)
class PendingMeal:
    """A bare meal id waiting in one of the user's pending sets."""

    kind: MealKind
    id: str


@dataclass(frozen=True)
class MealEntry:
    """Meal id hydrated with nutrition facts."""

    kind: MealKind
    id: str
    name: str
    protein_g: float
    carbs_g: float
    fat_g: float
    calories: float
    image: str

    @property
    def macros(self) -> MacroProfile:
        return MacroProfile(
            calories=self.calories,
            protein_g=self.protein_g,
            fat_g=self.fat_g,
            carbs_g=self.carbs_g,
        )


@dataclass(frozen=True)
class MealOutcome:
    """Result of acting on a pending meal."""

    kind: MealKind
    entry_id: str
    state: MealState
    totals: MacroProfile


@dataclass(frozen=True)
class TodayView:
    """Ledger totals with the hydrated pending meals for the day."""

    calorie_goal: int
    totals: MacroProfile
    entries: list[MealEntry]
