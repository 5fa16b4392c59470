from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.progress import PERIOD_DAYS, summarize_progress
from services.auth import current_user_id, ensure_owner
from services.db import Profile, WeightLog, get_session, intake_history, weight_history
from api.v1.schemas import ProgressOut, WeightIn, WeightOut
from api.v1.schemas.progress import Period

router = APIRouter()


@router.post(
    "/{user_id}/weights",
    response_model=WeightOut,
    status_code=status.HTTP_201_CREATED,
    summary="Log a body-weight measurement",
)
async def log_weight(
    user_id: str,
    body: WeightIn,
    caller: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> WeightOut:
    ensure_owner(user_id, caller)
    if await db.get(Profile, user_id) is None:
        raise HTTPException(status_code=404, detail="Profile not found")

    entry = WeightLog(
        user_id=user_id,
        weight=body.weight,
        logged_at=body.logged_at or datetime.now(timezone.utc),
    )
    db.add(entry)
    await db.commit()
    return WeightOut.model_validate(entry, from_attributes=True)


@router.get(
    "/{user_id}/progress",
    response_model=ProgressOut,
    summary="Weight trend and average intake over a period",
)
async def progress(
    user_id: str,
    period: Period = "week",
    caller: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> ProgressOut:
    ensure_owner(user_id, caller)
    now = datetime.now(timezone.utc)
    since = now - timedelta(days=PERIOD_DAYS[period])

    summary = summarize_progress(
        await weight_history(db, user_id, since),
        await intake_history(db, user_id, since.date()),
        period=period,
        end=now,
    )
    return ProgressOut(period=period, **summary.__dict__)
