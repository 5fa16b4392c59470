from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Gender(str, Enum):
    male = "male"
    female = "female"


class ActivityLevel(str, Enum):
    sedentary = "sedentary"
    light = "light"
    moderate = "moderate"
    active = "active"
    very_active = "very_active"


class Goal(str, Enum):
    lose_weight = "lose_weight"
    gain_weight = "gain_weight"
    maintain = "maintain"
    build_muscle = "build_muscle"


class ProfileIn(BaseModel):
    """Planner inputs; ranges are checked by `core.validation`."""

    age: int
    gender: Gender
    height: float = Field(..., description="cm")
    weight: float = Field(..., description="kg")
    activity_level: ActivityLevel
    goal: Goal = Goal.maintain
    target_weight: float | None = None
    timeframe_months: float | None = None
    body_fat_percentage: float | None = None
    training_frequency: int | None = None
    dietary_preferences: List[str] = []

    model_config = ConfigDict(use_enum_values=True)


class ProfileCreate(ProfileIn):
    id: str
    email: str | None = None
    full_name: str | None = None


class ProfileOut(ProfileCreate):
    daily_calories: int | None = None
    daily_proteins: int | None = None
    daily_carbs: int | None = None
    daily_fats: int | None = None
    dietary_preferences: List[str] | None = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)
