"""Nutrition ledger: running per-user totals and pending meal sets."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from diet_tracker.domain.errors import EntryNotPendingError, NotFoundError
from diet_tracker.domain.meals import MealEntry, MealKind
from diet_tracker.domain.models import UserNutritionRecord
from diet_tracker.domain.nutrition import MacroProfile

_logger = logging.getLogger(__name__)


class LedgerRepository(Protocol):
    """Persistence interface for user nutrition records."""

    def get_record(self, user_id: UUID) -> UserNutritionRecord | None:
        """Return the user's record, if present."""

    def apply_eaten(
        self, user_id: UUID, kind: MealKind, entry_id: str, delta: MacroProfile
    ) -> MacroProfile | None:
        """Atomically drop one pending id and add the clamped delta.

        Returns the updated totals, or None when the id was not pending.
        """

    def remove_entry(self, user_id: UUID, kind: MealKind, entry_id: str) -> bool:
        """Atomically drop one pending id; return whether it was present."""

    def list_user_ids(self) -> list[UUID]:
        """Return the ids of every user record."""

    def reset_totals(self, user_ids: Sequence[UUID]) -> None:
        """Zero the calorie and macro totals of the given users in one write."""


@dataclass
class LedgerService:
    """Applies meal consumption to a user's running totals."""

    repository: LedgerRepository

    def get_record(self, user_id: UUID) -> UserNutritionRecord:
        """Return the user's record or raise NotFoundError."""
        record = self.repository.get_record(user_id)
        if record is None:
            raise NotFoundError(f"User {user_id} not found")
        return record

    def apply_eaten(self, user_id: UUID, entry: MealEntry) -> MacroProfile:
        """Add an eaten entry's macros to the totals and retire its id."""
        totals = self.repository.apply_eaten(
            user_id, entry.kind, entry.id, entry.macros
        )
        if totals is None:
            raise EntryNotPendingError(entry.kind, entry.id)
        _logger.info(
            "Meal eaten",
            extra={"user_id": str(user_id), "kind": entry.kind, "entry_id": entry.id},
        )
        return totals

    def remove_entry(self, user_id: UUID, kind: MealKind, entry_id: str) -> None:
        """Retire a pending id without touching the totals."""
        if not self.repository.remove_entry(user_id, kind, entry_id):
            raise EntryNotPendingError(kind, entry_id)
        _logger.info(
            "Meal removed",
            extra={"user_id": str(user_id), "kind": kind, "entry_id": entry_id},
        )
