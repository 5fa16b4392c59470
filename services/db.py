"""
services/db.py
────────────────────────────────────────────────────────────────────────
* Async SQLAlchemy v2 setup
* Models that map to the five backend tables
  (profiles · meals · daily_goals · weight_logs · quick_foods)
* Small DAO helpers used by routers / scripts
"""
from __future__ import annotations

from contextlib import asynccontextmanager
import datetime as dt
from typing import Any, AsyncGenerator, AsyncIterator, Dict, List

from sqlalchemy import JSON, Date, DateTime, Float, Integer, String, UniqueConstraint, func, select
from sqlalchemy.ext.asyncio import (
    AsyncAttrs,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

from config import settings
from core.nutrition_planner import NutritionPlan

# ───────── connection helper ────────────────────────────────────────
_ENGINE: AsyncEngine | None = None
_SESSIONS: async_sessionmaker[AsyncSession] | None = None


def engine() -> AsyncEngine:
    global _ENGINE
    if _ENGINE is None:
        if not settings.database_url:
            raise RuntimeError("Set DATABASE_URL env var")
        _ENGINE = create_async_engine(settings.database_url, pool_pre_ping=True)
    return _ENGINE


def _sessionmaker() -> async_sessionmaker[AsyncSession]:
    global _SESSIONS
    if _SESSIONS is None:
        _SESSIONS = async_sessionmaker(engine(), expire_on_commit=False)
    return _SESSIONS


# ───────── declarative base ──────────────────────────────────────────
Base = declarative_base(cls=AsyncAttrs)


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String, primary_key=True)   # auth user id
    email: Mapped[str | None] = mapped_column(String)
    full_name: Mapped[str | None] = mapped_column(String)
    age: Mapped[int] = mapped_column(Integer)
    gender: Mapped[str] = mapped_column(String)
    height: Mapped[float] = mapped_column(Float)
    weight: Mapped[float] = mapped_column(Float)
    target_weight: Mapped[float | None] = mapped_column(Float)
    timeframe_months: Mapped[float | None] = mapped_column(Float)
    activity_level: Mapped[str] = mapped_column(String)
    goal: Mapped[str] = mapped_column(String, default="maintain")
    training_frequency: Mapped[int | None] = mapped_column(Integer)
    body_fat_percentage: Mapped[float | None] = mapped_column(Float)
    dietary_preferences: Mapped[list | None] = mapped_column(JSON)
    # last computed plan snapshot
    daily_calories: Mapped[int | None] = mapped_column(Integer)
    daily_proteins: Mapped[int | None] = mapped_column(Integer)
    daily_carbs: Mapped[int | None] = mapped_column(Integer)
    daily_fats: Mapped[int | None] = mapped_column(Integer)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class Meal(Base):
    __tablename__ = "meals"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(String, index=True)
    name: Mapped[str]
    meal_type: Mapped[str]            # breakfast / lunch / dinner / snacks
    calories: Mapped[float] = mapped_column(Float)
    proteins: Mapped[float] = mapped_column(Float)
    carbs: Mapped[float] = mapped_column(Float)
    fats: Mapped[float] = mapped_column(Float)
    consumed_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class DailyGoal(Base):
    __tablename__ = "daily_goals"
    __table_args__ = (UniqueConstraint("user_id", "date"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(String, index=True)
    date: Mapped[dt.date] = mapped_column(Date)
    target_calories: Mapped[int] = mapped_column(Integer, default=0)
    target_proteins: Mapped[int] = mapped_column(Integer, default=0)
    target_carbs: Mapped[int] = mapped_column(Integer, default=0)
    target_fats: Mapped[int] = mapped_column(Integer, default=0)
    consumed_calories: Mapped[float] = mapped_column(Float, default=0)
    consumed_proteins: Mapped[float] = mapped_column(Float, default=0)
    consumed_carbs: Mapped[float] = mapped_column(Float, default=0)
    consumed_fats: Mapped[float] = mapped_column(Float, default=0)
    water_intake: Mapped[int] = mapped_column(Integer, default=0)   # ml
    steps: Mapped[int] = mapped_column(Integer, default=0)


class WeightLog(Base):
    __tablename__ = "weight_logs"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(String, index=True)
    weight: Mapped[float] = mapped_column(Float)
    logged_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class QuickFoodRow(Base):
    __tablename__ = "quick_foods"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(String, index=True)
    name: Mapped[str]
    icon_name: Mapped[str] = mapped_column(String, default="Utensils")
    calories: Mapped[float] = mapped_column(Float)
    proteins: Mapped[float] = mapped_column(Float)
    carbs: Mapped[float] = mapped_column(Float)
    fats: Mapped[float] = mapped_column(Float)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


# ───────── DAO helpers ───────────────────────────────────────────────
PROFILE_FIELDS = (
    "age", "gender", "height", "weight", "target_weight", "timeframe_months",
    "activity_level", "goal", "training_frequency", "body_fat_percentage",
    "dietary_preferences",
)


def profile_inputs(row: Profile) -> Dict[str, Any]:
    """Planner-relevant columns of a profile row, ready for validation."""
    return {k: getattr(row, k) for k in PROFILE_FIELDS}


def store_plan(row: Profile, plan: NutritionPlan) -> None:
    row.daily_calories = plan.daily_calories
    row.daily_proteins = plan.daily_proteins
    row.daily_carbs = plan.daily_carbs
    row.daily_fats = plan.daily_fats


async def daily_goal_for(db: AsyncSession, user_id: str, day: dt.date) -> DailyGoal:
    """Fetch the (user, day) row, creating it seeded from the profile targets."""
    row = (
        await db.execute(
            select(DailyGoal).where(DailyGoal.user_id == user_id, DailyGoal.date == day)
        )
    ).scalar_one_or_none()
    if row is None:
        prof = await db.get(Profile, user_id)
        row = DailyGoal(
            user_id=user_id,
            date=day,
            target_calories=(prof.daily_calories or 0) if prof else 0,
            target_proteins=(prof.daily_proteins or 0) if prof else 0,
            target_carbs=(prof.daily_carbs or 0) if prof else 0,
            target_fats=(prof.daily_fats or 0) if prof else 0,
            consumed_calories=0,
            consumed_proteins=0,
            consumed_carbs=0,
            consumed_fats=0,
            water_intake=0,
            steps=0,
        )
        db.add(row)
    return row


async def weight_history(db: AsyncSession, user_id: str, since: dt.datetime) -> List[Dict[str, Any]]:
    """Weigh-ins since `since`, preceded by the last one before it (the reference)."""
    inside = (
        await db.execute(
            select(WeightLog)
            .where(WeightLog.user_id == user_id, WeightLog.logged_at >= since)
            .order_by(WeightLog.logged_at)
        )
    ).scalars().all()
    prior = (
        await db.execute(
            select(WeightLog)
            .where(WeightLog.user_id == user_id, WeightLog.logged_at < since)
            .order_by(WeightLog.logged_at.desc())
            .limit(1)
        )
    ).scalar_one_or_none()
    rows = ([prior] if prior else []) + list(inside)
    return [{"weight": w.weight, "logged_at": w.logged_at} for w in rows]


async def intake_history(db: AsyncSession, user_id: str, since: dt.date) -> List[Dict[str, Any]]:
    days = (
        await db.execute(
            select(DailyGoal)
            .where(DailyGoal.user_id == user_id, DailyGoal.date >= since)
            .order_by(DailyGoal.date)
        )
    ).scalars().all()
    return [{"date": d.date, "consumed_calories": d.consumed_calories} for d in days]


# ───────── session helpers ───────────────────────────────────────────

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with _sessionmaker()() as session:
        yield session


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """Same as `get_session` for scripts (`async with session_scope() as db`)."""
    async with _sessionmaker()() as session:
        yield session
