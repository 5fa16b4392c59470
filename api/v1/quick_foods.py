from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.models.meal import QuickFood
from core.quick_foods import icon_for, is_duplicate, merge_quick_foods
from services.auth import current_user_id, ensure_owner
from services.db import QuickFoodRow, get_session
from api.v1.schemas import QuickFoodIn

router = APIRouter()


# ───────────────────────── helpers ──────────────────────────
def _serialize(row: QuickFoodRow) -> QuickFood:
    return QuickFood(
        id=f"custom-{row.id}",
        name=row.name,
        icon=row.icon_name or "Utensils",
        calories=row.calories,
        proteins=row.proteins,
        carbs=row.carbs,
        fats=row.fats,
        user_id=row.user_id,
    )


async def _saved(db: AsyncSession, user_id: str) -> list[QuickFood]:
    rows = (
        await db.execute(
            select(QuickFoodRow)
            .where(QuickFoodRow.user_id == user_id)
            .order_by(QuickFoodRow.created_at.desc())
        )
    ).scalars().all()
    return [_serialize(r) for r in rows]


# ───────────────────────── read ─────────────────────────────
@router.get("/{user_id}/quick-foods", response_model=list[QuickFood])
async def list_quick_foods(
    user_id: str,
    caller: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> list[QuickFood]:
    ensure_owner(user_id, caller)
    return merge_quick_foods(await _saved(db, user_id))


# ───────────────────────── add ──────────────────────────────
@router.post(
    "/{user_id}/quick-foods",
    response_model=QuickFood,
    status_code=status.HTTP_201_CREATED,
)
async def add_quick_food(
    user_id: str,
    body: QuickFoodIn,
    response: Response,
    caller: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> QuickFood:
    ensure_owner(user_id, caller)
    existing = is_duplicate(body.name, await _saved(db, user_id))
    if existing is not None:
        response.status_code = status.HTTP_200_OK
        return existing

    row = QuickFoodRow(user_id=user_id, icon_name=icon_for(body.name), **body.model_dump())
    db.add(row)
    await db.commit()
    return _serialize(row)
