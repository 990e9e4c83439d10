"""Nutrition domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MacroProfile:
    """Calorie and macronutrient amounts."""

    calories: float
    protein_g: float
    fat_g: float
    carbs_g: float


ZERO_MACROS = MacroProfile(0.0, 0.0, 0.0, 0.0)


def add_clamped(current: MacroProfile, delta: MacroProfile) -> MacroProfile:
    """Add a delta to running totals, flooring every field at zero."""
    return MacroProfile(
        calories=max(0.0, current.calories + delta.calories),
        protein_g=max(0.0, current.protein_g + delta.protein_g),
        fat_g=max(0.0, current.fat_g + delta.fat_g),
        carbs_g=max(0.0, current.carbs_g + delta.carbs_g),
    )
