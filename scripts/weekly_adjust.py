"""
scripts/weekly_adjust.py
────────────────────────────────────────────────────────────────────────
Feed last week's real data back into each user's plan:

    python -m scripts.weekly_adjust            # all profiles
    python -m scripts.weekly_adjust --user ID  # one profile

Per user: summarise the last 7 days of weight logs + daily intake,
run `NutritionPlanner.adjust_plan()`, store the new weight and daily
targets, and seed today's `daily_goals` row with them.
"""
from __future__ import annotations

import asyncio
from argparse import ArgumentParser
from datetime import datetime, timedelta, timezone

from dotenv import load_dotenv
load_dotenv()

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.nutrition_planner import NutritionPlanner
from core.progress import summarize_progress
from core.validation import validate_profile
from services.db import (
    Profile,
    daily_goal_for,
    intake_history,
    profile_inputs,
    session_scope,
    store_plan,
    weight_history,
)

planner = NutritionPlanner()


async def _adjust_user(db: AsyncSession, user_id: str) -> None:
    # ── 1. profile ─────────────────────────────────────────
    row: Profile | None = await db.get(Profile, user_id)
    if not row:
        print(f"· skip {user_id} – profile not found")
        return

    checked = validate_profile(profile_inputs(row))
    if not checked.ok:
        print(f"· skip {user_id} – invalid profile: {'; '.join(checked.errors)}")
        return

    # ── 2. last week of logs ───────────────────────────────
    now = datetime.now(timezone.utc)
    since = now - timedelta(days=7)
    week = summarize_progress(
        await weight_history(db, user_id, since),
        await intake_history(db, user_id, since.date()),
        end=now,
    )
    if week.current_weight is None:
        print(f"· skip {user_id} – no weight logged in the last 7 days")
        return
    if week.weight_change is None:
        print(f"· skip {user_id} – no earlier weigh-in to measure a change against")
        return

    # ── 3. adjust + persist ────────────────────────────────
    updated, plan = planner.adjust_plan(
        checked.profile,  # type: ignore[arg-type]
        week.current_weight,
        week.average_calories,
        week.weight_change,
    )
    row.weight = updated.weight
    store_plan(row, plan)

    today = await daily_goal_for(db, user_id, now.date())
    today.target_calories = plan.daily_calories
    today.target_proteins = plan.daily_proteins
    today.target_carbs = plan.daily_carbs
    today.target_fats = plan.daily_fats
    await db.commit()
    print(
        f"✓ {user_id}: {week.weight_change:+.2f} kg last week → "
        f"{plan.daily_calories} kcal / P{plan.daily_proteins} C{plan.daily_carbs} F{plan.daily_fats}"
    )


# ───────────────────────────────
# CLI entrypoint
# ───────────────────────────────
async def _async_main() -> None:
    ap = ArgumentParser()
    ap.add_argument("--user", help="adjust only this profile id")
    args = ap.parse_args()

    async with session_scope() as db:
        if args.user:
            await _adjust_user(db, args.user)
        else:
            ids = (await db.execute(select(Profile.id))).scalars().all()
            for uid in ids:
                await _adjust_user(db, uid)


if __name__ == "__main__":  # pragma: no cover
    asyncio.run(_async_main())
