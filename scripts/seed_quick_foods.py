"""
Seed a user's custom quick foods into the `quick_foods` table.

Usage
-----

    # a small default trio
    python -m scripts.seed_quick_foods <USER_ID>

    # custom list (name, calories, proteins, carbs, fats) in a JSON file
    python -m scripts.seed_quick_foods <USER_ID> --file path/to/foods.json

Names the user already saved (case-insensitive) are skipped.
"""
from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path
from typing import Any, List

from sqlalchemy import select

from core.models.meal import QuickFood
from core.quick_foods import icon_for, is_duplicate
from services.db import QuickFoodRow, session_scope

# ────────────────────────────────────────────────────────────────────
_DEFAULT_FOODS: List[dict[str, Any]] = [
    {"name": "Yogurt Greco", "calories": 97, "proteins": 9, "carbs": 4, "fats": 5},
    {"name": "Banana", "calories": 89, "proteins": 1.1, "carbs": 23, "fats": 0.3},
    {"name": "Caffè con latte", "calories": 60, "proteins": 3, "carbs": 5, "fats": 3},
]


async def _seed(user_id: str, foods: list[dict[str, Any]]) -> None:
    async with session_scope() as db:
        rows = (
            await db.execute(select(QuickFoodRow).where(QuickFoodRow.user_id == user_id))
        ).scalars().all()
        saved = [QuickFood(id=str(r.id), name=r.name, calories=r.calories, proteins=r.proteins,
                           carbs=r.carbs, fats=r.fats) for r in rows]

        added = 0
        for f in foods:
            if is_duplicate(f["name"], saved):
                print(f"· skip «{f['name']}» – already saved")
                continue
            db.add(QuickFoodRow(user_id=user_id, icon_name=icon_for(f["name"]), **f))
            saved.append(QuickFood(id="new", **f))
            added += 1
        await db.commit()
    print(f"✓ inserted {added} quick foods for user {user_id}")


def _load_json(path: Path) -> list[dict[str, Any]]:
    data = json.loads(path.read_text())
    if not isinstance(data, list):
        raise ValueError("JSON file must contain a list of food dictionaries")
    return data


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("user_id", help="target user id")
    parser.add_argument(
        "--file",
        type=Path,
        help="optional JSON file with foods to seed (overrides defaults)",
    )
    args = parser.parse_args()

    foods = _load_json(args.file) if args.file else _DEFAULT_FOODS
    asyncio.run(_seed(args.user_id, foods))


if __name__ == "__main__":
    main()
