# api/v1/plans.py
from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.nutrition_planner import (
    NutritionPlan,
    NutritionPlanner,
    UserProfile,
    activity_description,
    goal_description,
)
from core.progress import summarize_progress
from core.validation import validate_profile
from services.auth import current_user_id, ensure_owner
from services.db import (
    Profile,
    daily_goal_for,
    get_session,
    intake_history,
    profile_inputs,
    store_plan,
    weight_history,
)
from api.v1.schemas import AdjustIn, PlanResponse, ProfileIn

_LOG = logging.getLogger(__name__)

router = APIRouter()          # stateless, mounted at /plans
profile_router = APIRouter()  # mounted under /profiles
_planner = NutritionPlanner()


# ───────────────────────── helpers ──────────────────────────
def checked_profile(data: dict) -> UserProfile:
    """validate_profile() or 422 with every message."""
    res = validate_profile(data)
    if not res.ok:
        raise HTTPException(status_code=422, detail=res.errors)
    return res.profile  # type: ignore[return-value]


def plan_response(profile: UserProfile, plan: NutritionPlan) -> PlanResponse:
    return PlanResponse.model_validate(
        {
            "plan": asdict(plan),
            "bmi": asdict(_planner.bmi(profile)),
            "lean_body_mass": round(_planner.lean_body_mass(profile), 1),
            "goal_label": goal_description(profile.goal),
            "activity_label": activity_description(profile.activity_level),
        }
    )


async def load_profile(db: AsyncSession, user_id: str) -> tuple[Profile, UserProfile]:
    row = await db.get(Profile, user_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return row, checked_profile(profile_inputs(row))


# ───────────────────────── stateless ────────────────────────
@router.post("", response_model=PlanResponse, status_code=status.HTTP_200_OK)
def compute_plan(body: ProfileIn) -> PlanResponse:
    """Plan for an arbitrary profile; nothing is stored."""
    profile = checked_profile(body.model_dump())
    return plan_response(profile, _planner.compute_plan(profile))


# ───────────────────────── per user ─────────────────────────
@profile_router.get("/{user_id}/plan", response_model=PlanResponse)
async def current_plan(
    user_id: str,
    caller: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> PlanResponse:
    ensure_owner(user_id, caller)
    _, profile = await load_profile(db, user_id)
    return plan_response(profile, _planner.compute_plan(profile))


@profile_router.post("/{user_id}/plan/adjust", response_model=PlanResponse)
async def adjust_plan(
    user_id: str,
    body: AdjustIn,
    caller: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> PlanResponse:
    ensure_owner(user_id, caller)
    row, profile = await load_profile(db, user_id)

    # fill whatever the caller left out from the last week of logs
    now = datetime.now(timezone.utc)
    since = now - timedelta(days=7)
    week = summarize_progress(
        await weight_history(db, user_id, since),
        await intake_history(db, user_id, since.date()),
        end=now,
    )

    change = body.weight_change if body.weight_change is not None else week.weight_change
    if change is None:
        raise HTTPException(
            status_code=422,
            detail="No measured weight change for the last week; log a weight or pass weight_change",
        )
    current_weight = body.current_weight or week.current_weight or profile.weight
    avg_kcal = body.average_calories if body.average_calories is not None else week.average_calories

    updated, plan = _planner.adjust_plan(profile, current_weight, avg_kcal, change)
    _LOG.info("adjusted plan for %s: %d kcal", user_id, plan.daily_calories)

    row.weight = updated.weight
    store_plan(row, plan)
    today = await daily_goal_for(db, user_id, now.date())
    today.target_calories = plan.daily_calories
    today.target_proteins = plan.daily_proteins
    today.target_carbs = plan.daily_carbs
    today.target_fats = plan.daily_fats
    await db.commit()

    return plan_response(updated, plan)
