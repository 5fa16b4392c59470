from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class QuickFood(BaseModel):
    id: str
    name: str
    icon: str = "Utensils"
    calories: float
    proteins: float
    carbs: float
    fats: float
    user_id: str | None = None     # None for built-ins


class FoodItem(BaseModel):
    name: str
    calories: float = 0
    proteins: float = 0
    carbs: float = 0
    fats: float = 0


class FoodAnalysis(BaseModel):
    """What the vision / text model recognised in one meal."""

    foods: list[FoodItem] = []
    total_calories: float | None = None
    total_proteins: float | None = None
    total_carbs: float | None = None
    total_fats: float | None = None
    confidence: float = Field(0, ge=0, le=100)

    @model_validator(mode="after")
    def _fill_totals(self) -> "FoodAnalysis":
        # models sometimes drop the totals; sum the items instead
        for key in ("calories", "proteins", "carbs", "fats"):
            if getattr(self, f"total_{key}") is None:
                setattr(self, f"total_{key}", round(sum(getattr(f, key) for f in self.foods), 1))
        return self
