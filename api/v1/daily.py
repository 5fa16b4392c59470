# api/v1/daily.py
from __future__ import annotations

from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from services.auth import current_user_id, ensure_owner
from services.db import DailyGoal, daily_goal_for, get_session
from api.v1.schemas import DailyOut

router = APIRouter()

WATER_GLASS_ML = 250
WALK_STEPS = 1000


def _today() -> date:
    return datetime.now(timezone.utc).date()


async def _bump(db: AsyncSession, user_id: str, column: str, amount: int) -> DailyGoal:
    day = await daily_goal_for(db, user_id, _today())
    setattr(day, column, (getattr(day, column) or 0) + amount)
    await db.commit()
    return day


@router.get("/{user_id}/daily", response_model=DailyOut, summary="Targets and running totals for one day")
async def daily_status(
    user_id: str,
    day: date | None = None,
    caller: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> DailyOut:
    ensure_owner(user_id, caller)
    row = await daily_goal_for(db, user_id, day or _today())
    await db.commit()
    return DailyOut.model_validate(row, from_attributes=True)


@router.post("/{user_id}/daily/water", response_model=DailyOut, summary="Add a glass of water (+250 ml)")
async def add_water_glass(
    user_id: str,
    caller: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> DailyOut:
    ensure_owner(user_id, caller)
    return DailyOut.model_validate(await _bump(db, user_id, "water_intake", WATER_GLASS_ML))


@router.post("/{user_id}/daily/steps", response_model=DailyOut, summary="Add a walk (+1000 steps)")
async def add_walk(
    user_id: str,
    caller: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> DailyOut:
    ensure_owner(user_id, caller)
    return DailyOut.model_validate(await _bump(db, user_id, "steps", WALK_STEPS))
