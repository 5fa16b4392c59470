"""
Built-in "quick foods" (one-tap logging) and helpers to merge them with a
user's own saved items.
"""

from __future__ import annotations

from typing import Any, Dict, List

from core.models.meal import QuickFood

DEFAULT_QUICK_FOODS: List[QuickFood] = [
    QuickFood(id="mela", name="Mela", icon="Apple", calories=52, proteins=0.3, carbs=14, fats=0.2),
    QuickFood(id="pizza", name="Pizza Margherita", icon="Pizza", calories=266, proteins=11, carbs=33, fats=10),
    QuickFood(id="insalata", name="Insalata Mista", icon="Salad", calories=35, proteins=2, carbs=7, fats=0.5),
    QuickFood(id="panino", name="Panino", icon="Sandwich", calories=250, proteins=10, carbs=30, fats=10),
    QuickFood(id="biscotti", name="Biscotti", icon="Cookie", calories=160, proteins=2, carbs=22, fats=7),
    QuickFood(id="bistecca", name="Bistecca", icon="Beef", calories=271, proteins=26, carbs=0, fats=18),
    QuickFood(id="salmone", name="Salmone", icon="Fish", calories=208, proteins=20, carbs=0, fats=13),
    QuickFood(id="uova", name="Uova", icon="Egg", calories=155, proteins=13, carbs=1, fats=11),
    QuickFood(id="latte", name="Latte", icon="Milk", calories=42, proteins=3.4, carbs=5, fats=1),
]

# keyword → icon, first substring hit wins
_ICONS: Dict[str, str] = {
    "mela": "Apple", "apple": "Apple",
    "pizza": "Pizza",
    "insalata": "Salad", "salad": "Salad",
    "panino": "Sandwich", "sandwich": "Sandwich", "bread": "Sandwich",
    "biscotti": "Cookie", "cookie": "Cookie", "cake": "Cookie",
    "bistecca": "Beef", "beef": "Beef", "carne": "Beef",
    "salmone": "Fish", "fish": "Fish", "pesce": "Fish",
    "uova": "Egg", "egg": "Egg",
    "latte": "Milk", "milk": "Milk",
    "caffè": "Coffee", "coffee": "Coffee",
    "carota": "Carrot", "carrot": "Carrot",
    "banana": "Banana",
}


def icon_for(name: str) -> str:
    low = name.lower()
    for key, icon in _ICONS.items():
        if key in low:
            return icon
    return "Utensils"


def is_duplicate(name: str, existing: List[QuickFood]) -> QuickFood | None:
    """Return the saved item with the same name (case-insensitive), if any."""
    low = name.strip().lower()
    return next((f for f in existing if f.name.strip().lower() == low), None)


def merge_quick_foods(custom: List[Dict[str, Any]] | List[QuickFood]) -> List[QuickFood]:
    """User items first (newest first as given), then the built-ins."""
    items = [c if isinstance(c, QuickFood) else QuickFood.model_validate(c) for c in custom]
    return [*items, *DEFAULT_QUICK_FOODS]
