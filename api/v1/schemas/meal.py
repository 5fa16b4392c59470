from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Slot = Literal["breakfast", "lunch", "dinner", "snacks"]


class MealIn(BaseModel):
    user_id: str
    name: str
    meal_type: Slot
    calories: float = Field(..., ge=0)
    proteins: float = Field(0, ge=0)
    carbs: float = Field(0, ge=0)
    fats: float = Field(0, ge=0)
    consumed_at: datetime | None = None


class MealOut(MealIn):
    id: int
    consumed_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AnalyzeTextIn(BaseModel):
    description: str = Field(..., min_length=1)


class QuickFoodIn(BaseModel):
    name: str = Field(..., min_length=1)
    calories: float = Field(..., ge=0)
    proteins: float = Field(0, ge=0)
    carbs: float = Field(0, ge=0)
    fats: float = Field(0, ge=0)


class AnalyzeImageIn(BaseModel):
    image_base64: str = Field(..., min_length=100)
    mime_type: str = "image/jpeg"
