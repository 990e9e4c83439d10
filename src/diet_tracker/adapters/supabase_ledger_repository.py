"""Supabase repository for user nutrition ledgers."""

from collections.abc import Sequence
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from diet_tracker.domain.meals import MealKind
from diet_tracker.domain.models import UserNutritionRecord
from diet_tracker.domain.nutrition import MacroProfile
from diet_tracker.services.ledger import LedgerRepository

PROFILES_TABLE = "profiles"
PROFILE_COLUMNS = (
    "id, name, email, calorie_goal, current_calorie, protein_g, carbs_g, fat_g, "
    "meals, scanned_meals"
)


@dataclass
class SupabaseLedgerRepository(LedgerRepository):
    """Supabase implementation for ledger reads, updates and resets."""

    client: Client
    page_size: int = 1000

    def get_record(self, user_id: UUID) -> UserNutritionRecord | None:
        """Return the user's record, if present."""
        return fetch_record(self.client, user_id)

    def apply_eaten(
        self, user_id: UUID, kind: MealKind, entry_id: str, delta: MacroProfile
    ) -> MacroProfile | None:
        """Drop the pending id and add the clamped delta in one statement."""
        response = self.client.rpc(
            "apply_eaten_meal",
            {
                "p_user_id": str(user_id),
                "p_field": kind.owning_field,
                "p_entry_id": entry_id,
                "p_calories": delta.calories,
                "p_protein_g": delta.protein_g,
                "p_carbs_g": delta.carbs_g,
                "p_fat_g": delta.fat_g,
            },
        ).execute()
        rows = response.data
        if isinstance(rows, dict):
            rows = [rows]
        if not rows:
            return None
        row = rows[0]
        return MacroProfile(
            calories=float(row.get("current_calorie") or 0.0),
            protein_g=float(row.get("protein_g") or 0.0),
            fat_g=float(row.get("fat_g") or 0.0),
            carbs_g=float(row.get("carbs_g") or 0.0),
        )

    def remove_entry(self, user_id: UUID, kind: MealKind, entry_id: str) -> bool:
        """Drop one occurrence of the pending id."""
        response = self.client.rpc(
            "remove_pending_meal",
            {
                "p_user_id": str(user_id),
                "p_field": kind.owning_field,
                "p_entry_id": entry_id,
            },
        ).execute()
        return bool(response.data)

    def list_user_ids(self) -> list[UUID]:
        """Page through every profile id."""
        user_ids: list[UUID] = []
        offset = 0
        while True:
            response = (
                self.client.table(PROFILES_TABLE)
                .select("id")
                .order("id", desc=False)
                .range(offset, offset + self.page_size - 1)
                .execute()
            )
            rows = response.data or []
            if not rows:
                return user_ids
            user_ids.extend(UUID(row["id"]) for row in rows)
            # the server may cap pages below page_size
            offset += len(rows)

    def reset_totals(self, user_ids: Sequence[UUID]) -> None:
        """Zero totals for a shard of users in one call; ids travel in the body."""
        if not user_ids:
            return
        self.client.rpc(
            "reset_ledgers", {"p_ids": [str(user_id) for user_id in user_ids]}
        ).execute()


def fetch_record(client: Client, user_id: UUID) -> UserNutritionRecord | None:
    """Read one profile row."""
    response = (
        client.table(PROFILES_TABLE)
        .select(PROFILE_COLUMNS)
        .eq("id", str(user_id))
        .limit(1)
        .execute()
    )
    if not response.data:
        return None
    return parse_record(response.data[0])


def parse_record(row: dict[str, object]) -> UserNutritionRecord:
    return UserNutritionRecord(
        id=UUID(str(row["id"])),
        name=str(row.get("name") or ""),
        email=str(row.get("email") or ""),
        calorie_goal=int(row.get("calorie_goal") or 0),
        current_calorie=float(row.get("current_calorie") or 0.0),
        protein_g=float(row.get("protein_g") or 0.0),
        carbs_g=float(row.get("carbs_g") or 0.0),
        fat_g=float(row.get("fat_g") or 0.0),
        meals=[str(meal_id) for meal_id in row.get("meals") or []],
        scanned_meals=[str(barcode) for barcode in row.get("scanned_meals") or []],
    )
