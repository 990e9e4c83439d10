"""User profile and calorie goal management."""

import logging
import re
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from diet_tracker.domain.errors import NotFoundError, ValidationError
from diet_tracker.domain.models import UserNutritionRecord

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

_logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_record(self, user_id: UUID) -> UserNutritionRecord | None:
        """Return the user's record, if present."""

    def create_profile(
        self, user_id: UUID, name: str, email: str
    ) -> UserNutritionRecord:
        """Create a profile with zero totals and empty meal sets."""

    def set_calorie_goal(self, user_id: UUID, calorie_goal: int) -> bool:
        """Write only the calorie goal; return whether the user exists."""

    def set_meals(self, user_id: UUID, meal_ids: list[str]) -> None:
        """Replace the pending recipe meal ids."""

    def append_scanned_meal(self, user_id: UUID, barcode: str) -> bool:
        """Atomically append a barcode; return whether the user exists."""


@dataclass
class ProfileService:
    """Validates and persists profile changes."""

    repository: ProfileRepository

    def create_profile(self, user_id: UUID, name: str, email: str) -> UserNutritionRecord:
        """Create the profile row for a newly signed-up user."""
        cleaned_name = name.strip()
        cleaned_email = email.strip()
        if not cleaned_name or not cleaned_email:
            raise ValidationError("Please fill all fields")
        if not _EMAIL_PATTERN.match(cleaned_email):
            raise ValidationError("Please enter a valid email address")
        record = self.repository.create_profile(user_id, cleaned_name, cleaned_email)
        _logger.info("Profile created", extra={"user_id": str(user_id)})
        return record

    def get_profile(self, user_id: UUID) -> UserNutritionRecord:
        record = self.repository.get_record(user_id)
        if record is None:
            raise NotFoundError(f"User {user_id} not found")
        return record

    def set_calorie_goal(self, user_id: UUID, raw_goal: object) -> int:
        """Parse and store a positive integer calorie goal."""
        goal = parse_calorie_goal(raw_goal)
        if not self.repository.set_calorie_goal(user_id, goal):
            raise NotFoundError(f"User {user_id} not found")
        return goal

    def add_scanned_item(self, user_id: UUID, barcode: str) -> None:
        """Queue a scanned barcode as a pending meal."""
        cleaned = barcode.strip()
        if not cleaned:
            raise ValidationError("No barcode detected")
        if not cleaned.isdigit():
            raise ValidationError("Barcode must contain only digits")
        if not self.repository.append_scanned_meal(user_id, cleaned):
            raise NotFoundError(f"User {user_id} not found")


def parse_calorie_goal(raw_goal: object) -> int:
    """Return the goal as a positive int or raise ValidationError."""
    if isinstance(raw_goal, bool):
        raise ValidationError("Please enter a valid calorie goal")
    if isinstance(raw_goal, int):
        goal = raw_goal
    elif isinstance(raw_goal, float) and raw_goal.is_integer():
        goal = int(raw_goal)
    elif isinstance(raw_goal, str) and raw_goal.strip().isdigit():
        goal = int(raw_goal.strip())
    else:
        raise ValidationError("Please enter a valid calorie goal")
    if goal <= 0:
        raise ValidationError("Please enter a valid calorie goal")
    return goal
