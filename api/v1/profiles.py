from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.nutrition_planner import NutritionPlanner
from services.auth import current_user_id, ensure_owner
from services.db import Profile, get_session, store_plan
from api.v1.plans import checked_profile
from api.v1.schemas import ProfileCreate, ProfileIn, ProfileOut

router = APIRouter()
_planner = NutritionPlanner()


# ───────────────────────── create ──────────────────────────
@router.post(
    "",
    response_model=ProfileOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_profile(
    body: ProfileCreate,
    caller: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> ProfileOut:
    ensure_owner(body.id, caller)
    if await db.get(Profile, body.id):
        raise HTTPException(status_code=409, detail="Profile already exists")

    plan = _planner.compute_plan(checked_profile(body.model_dump()))
    row = Profile(**body.model_dump())
    store_plan(row, plan)
    db.add(row)
    await db.commit()
    return ProfileOut.model_validate(row, from_attributes=True)


# ───────────────────────── fetch one ────────────────────────
@router.get("/{user_id}", response_model=ProfileOut)
async def fetch_profile(
    user_id: str,
    caller: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> ProfileOut:
    ensure_owner(user_id, caller)
    row = await db.get(Profile, user_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return ProfileOut.model_validate(row, from_attributes=True)


# ───────────────────────── upsert ───────────────────────────
@router.put("/{user_id}", response_model=ProfileOut)
async def upsert_profile(
    user_id: str,
    body: ProfileIn,
    caller: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> ProfileOut:
    """Any change to the inputs re-derives the stored daily targets."""
    ensure_owner(user_id, caller)
    payload = body.model_dump()
    plan = _planner.compute_plan(checked_profile(payload))

    row = await db.get(Profile, user_id)
    if row is None:                            # Insert
        row = Profile(id=user_id, **payload)
        db.add(row)
    else:
        for key, val in payload.items():
            setattr(row, key, val)

    store_plan(row, plan)
    await db.commit()
    await db.refresh(row)
    return ProfileOut.model_validate(row, from_attributes=True)
