from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field


class MealTargetsOut(BaseModel):
    calories: int
    proteins: int
    carbs: int
    fats: int


class PlanOut(BaseModel):
    daily_calories: int
    daily_proteins: int
    daily_carbs: int
    daily_fats: int
    meal_distribution: Dict[str, MealTargetsOut]
    recommendations: List[str]
    weekly_weight_change: float


class BMIOut(BaseModel):
    value: float
    category: str


class PlanResponse(BaseModel):
    plan: PlanOut
    bmi: BMIOut
    lean_body_mass: float = Field(..., description="kg, estimate when body fat is unknown")
    goal_label: str
    activity_label: str


class AdjustIn(BaseModel):
    """Leave a figure out to derive it from the last 7 days of logs."""

    current_weight: float | None = Field(None, ge=30, le=300)
    average_calories: float | None = Field(None, ge=0)
    weight_change: float | None = None
