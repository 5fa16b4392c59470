from __future__ import annotations

import datetime as dt
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Period = Literal["week", "month", "year"]


class WeightIn(BaseModel):
    weight: float = Field(..., ge=30, le=300)
    logged_at: datetime | None = None


class WeightOut(BaseModel):
    id: int
    user_id: str
    weight: float
    logged_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProgressOut(BaseModel):
    period: Period
    current_weight: float | None
    start_weight: float | None
    weight_change: float | None
    trend: Literal["up", "down", "stable"]
    average_calories: int
    days_logged: int


class DailyOut(BaseModel):
    date: dt.date
    target_calories: int
    target_proteins: int
    target_carbs: int
    target_fats: int
    consumed_calories: float
    consumed_proteins: float
    consumed_carbs: float
    consumed_fats: float
    water_intake: int = Field(..., description="ml")
    steps: int

    model_config = ConfigDict(from_attributes=True)
