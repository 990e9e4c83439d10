"""Daily calorie need estimation."""

from enum import StrEnum

from diet_tracker.domain.errors import ValidationError

ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}


class Sex(StrEnum):
    MALE = "male"
    FEMALE = "female"


def basal_metabolic_rate(
    weight_kg: float, height_cm: float, age: int, sex: Sex
) -> float:
    """Mifflin-St Jeor basal metabolic rate in kcal/day."""
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    return base + 5 if sex is Sex.MALE else base - 161


def estimate_daily_calories(
    weight_kg: object,
    height_cm: object,
    age: object,
    sex: str,
    activity_level: str,
) -> float:
    """Estimate total daily energy expenditure from body measurements."""
    weight = _positive_number(weight_kg, "weight")
    height = _positive_number(height_cm, "height")
    years = _positive_number(age, "age")
    try:
        resolved_sex = Sex(sex.lower())
    except ValueError as exc:
        raise ValidationError("Sex must be 'male' or 'female'") from exc
    multiplier = ACTIVITY_MULTIPLIERS.get(_normalize_level(activity_level), 1.2)
    return basal_metabolic_rate(weight, height, int(years), resolved_sex) * multiplier


def _normalize_level(level: str) -> str:
    # "VeryActive" and "very-active" both map to very_active
    cleaned = level.strip().replace("-", "_").replace(" ", "_")
    if "_" not in cleaned and cleaned.lower() != cleaned:
        cleaned = "".join(
            f"_{char}" if char.isupper() and index else char
            for index, char in enumerate(cleaned)
        )
    return cleaned.lower()


def _positive_number(value: object, label: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"Please enter a valid {label}")
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Please enter a valid {label}") from exc
    if number <= 0:
        raise ValidationError(f"Please enter a valid {label}")
    return number
