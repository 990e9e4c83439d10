"""Supabase repository for user profiles."""

from dataclasses import dataclass
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from diet_tracker.adapters.supabase_ledger_repository import (
    PROFILES_TABLE,
    fetch_record,
    parse_record,
)
from diet_tracker.domain.errors import ConflictError
from diet_tracker.domain.models import UserNutritionRecord
from diet_tracker.services.profiles import ProfileRepository

UNIQUE_VIOLATION = "23505"


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profile persistence."""

    client: Client

    def get_record(self, user_id: UUID) -> UserNutritionRecord | None:
        return fetch_record(self.client, user_id)

    def create_profile(
        self, user_id: UUID, name: str, email: str
    ) -> UserNutritionRecord:
        """Insert a new profile row and return it."""
        try:
            response = (
                self.client.table(PROFILES_TABLE)
                .insert(
                    {
                        "id": str(user_id),
                        "name": name,
                        "email": email,
                        "calorie_goal": 0,
                        "current_calorie": 0,
                        "protein_g": 0,
                        "carbs_g": 0,
                        "fat_g": 0,
                        "meals": [],
                        "scanned_meals": [],
                    }
                )
                .execute()
            )
        except APIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                raise ConflictError(f"Profile {user_id} already exists") from exc
            raise
        if not response.data:
            raise RuntimeError("Failed to create profile in Supabase")
        return parse_record(response.data[0])

    def set_calorie_goal(self, user_id: UUID, calorie_goal: int) -> bool:
        response = (
            self.client.table(PROFILES_TABLE)
            .update({"calorie_goal": calorie_goal})
            .eq("id", str(user_id))
            .execute()
        )
        return bool(response.data)

    def set_meals(self, user_id: UUID, meal_ids: list[str]) -> None:
        self.client.table(PROFILES_TABLE).update({"meals": meal_ids}).eq(
            "id", str(user_id)
        ).execute()

    def append_scanned_meal(self, user_id: UUID, barcode: str) -> bool:
        response = self.client.rpc(
            "append_scanned_meal",
            {"p_user_id": str(user_id), "p_barcode": barcode},
        ).execute()
        return bool(response.data)
