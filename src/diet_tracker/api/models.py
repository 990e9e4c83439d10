"""Pydantic request models for the HTTP API."""

from pydantic import BaseModel, Field


class CreateProfileRequest(BaseModel):
    """Profile fields captured at signup."""

    name: str
    email: str


class CalorieGoalRequest(BaseModel):
    """Raw calorie goal as typed by the user."""

    calorie_goal: int | float | str


class AssignPlanRequest(BaseModel):
    """Recipe ids of the chosen plan."""

    meal_ids: list[int | str] = Field(default_factory=list)


class ScannedItemRequest(BaseModel):
    """Barcode read by the scanner."""

    barcode: str


class CalorieEstimateRequest(BaseModel):
    """Body measurements for the calorie estimator."""

    weight_kg: float | str
    height_cm: float | str
    age: int | str
    sex: str = "male"
    activity_level: str = "sedentary"
