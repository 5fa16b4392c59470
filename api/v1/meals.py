# api/v1/meals.py
from __future__ import annotations

import base64
import binascii
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.models.meal import FoodAnalysis
from services import gemini
from services.auth import current_user_id, ensure_owner
from services.db import Meal, daily_goal_for, get_session
from api.v1.schemas import AnalyzeImageIn, AnalyzeTextIn, MealIn, MealOut

_LOG = logging.getLogger(__name__)

router = APIRouter()


def _apply_totals(day, meal: Meal, sign: int) -> None:
    day.consumed_calories = max(0.0, (day.consumed_calories or 0) + sign * meal.calories)
    day.consumed_proteins = max(0.0, (day.consumed_proteins or 0) + sign * meal.proteins)
    day.consumed_carbs = max(0.0, (day.consumed_carbs or 0) + sign * meal.carbs)
    day.consumed_fats = max(0.0, (day.consumed_fats or 0) + sign * meal.fats)


@router.post(
    "",
    response_model=MealOut,
    status_code=status.HTTP_201_CREATED,
    summary="Log an eaten meal and add it to the day's totals",
)
async def log_meal(
    body: MealIn,
    caller: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> MealOut:
    ensure_owner(body.user_id, caller)
    meal = Meal(**body.model_dump(exclude={"consumed_at"}))
    meal.consumed_at = body.consumed_at or datetime.now(timezone.utc)
    db.add(meal)

    day = await daily_goal_for(db, body.user_id, meal.consumed_at.date())
    _apply_totals(day, meal, +1)
    await db.commit()
    return MealOut.model_validate(meal, from_attributes=True)


@router.get(
    "/{user_id}",
    response_model=list[MealOut],
    summary="List all logged meals for a user",
)
async def list_user_meals(
    user_id: str,
    caller: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> list[MealOut]:
    ensure_owner(user_id, caller)
    result = await db.execute(
        select(Meal).where(Meal.user_id == user_id).order_by(Meal.consumed_at.desc())
    )
    return [MealOut.model_validate(m, from_attributes=True) for m in result.scalars().all()]


@router.delete(
    "/{meal_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a logged meal and subtract it from the day's totals",
)
async def delete_meal(
    meal_id: int,
    caller: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Response:
    meal = await db.get(Meal, meal_id)
    if not meal:
        raise HTTPException(status_code=404, detail="Meal not found")
    ensure_owner(meal.user_id, caller)

    day = await daily_goal_for(db, meal.user_id, meal.consumed_at.date())
    _apply_totals(day, meal, -1)
    await db.delete(meal)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ───────────────────────── AI analysis ──────────────────────
# sync handlers: the Gemini client blocks, FastAPI runs these in its threadpool
def _analysis_or_502(call, *args) -> FoodAnalysis:
    try:
        return call(*args)
    except (gemini.MealAnalysisError, gemini.GeminiUnavailable) as exc:
        _LOG.warning("meal analysis failed: %s", exc)
        raise HTTPException(status.HTTP_502_BAD_GATEWAY, str(exc)) from exc
    except RuntimeError as exc:
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc)) from exc


@router.post("/analyze", response_model=FoodAnalysis, summary="Estimate macros from a text description")
def analyze_text(body: AnalyzeTextIn, caller: str = Depends(current_user_id)) -> FoodAnalysis:
    return _analysis_or_502(gemini.analyze_meal_text, body.description)


@router.post("/analyze-image", response_model=FoodAnalysis, summary="Estimate macros from a meal photo")
def analyze_image(body: AnalyzeImageIn, caller: str = Depends(current_user_id)) -> FoodAnalysis:
    try:
        image = base64.b64decode(body.image_base64, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise HTTPException(status_code=422, detail="image_base64 is not valid base64") from exc
    return _analysis_or_502(gemini.analyze_meal_image, image, body.mime_type)
