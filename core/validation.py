"""
core/validation.py
────────────────────────────────────────────────────────────────────────
Boundary checks in front of `NutritionPlanner`.

The planner itself trusts its inputs; anything coming from a form, the
database or the API goes through `validate_profile()` first.  Out-of-range
values are reported, never raised.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from core.nutrition_planner import UserProfile

GENDERS = ("male", "female")
ACTIVITY_LEVELS = ("sedentary", "light", "moderate", "active", "very_active")
GOALS = ("lose_weight", "gain_weight", "maintain", "build_muscle")

# same ranges the onboarding form enforces
AGE_RANGE = (10, 120)
HEIGHT_RANGE = (100, 250)
WEIGHT_RANGE = (30, 300)
TIMEFRAME_RANGE = (1, 24)
TRAINING_RANGE = (0, 7)


@dataclass(frozen=True)
class ValidationResult:
    profile: UserProfile | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.profile is not None and not self.errors


def _number(data: Mapping[str, Any], key: str, errors: list[str]) -> float | None:
    raw = data.get(key)
    if raw is None:
        return None
    if isinstance(raw, bool):
        errors.append(f"{key} must be a number")
        return None
    try:
        val = float(raw)
    except (TypeError, ValueError):
        errors.append(f"{key} must be a number")
        return None
    if val != val or val in (float("inf"), float("-inf")):
        errors.append(f"{key} must be finite")
        return None
    return val


def _in_range(key: str, val: float | None, bounds: tuple[float, float], errors: list[str]) -> None:
    lo, hi = bounds
    if val is not None and not lo <= val <= hi:
        errors.append(f"{key} must be between {lo} and {hi}")


def validate_profile(data: Mapping[str, Any]) -> ValidationResult:
    """Build a `UserProfile` from loosely-typed input, or list what is wrong."""
    errors: list[str] = []

    for key in ("age", "height", "weight"):
        if data.get(key) is None:
            errors.append(f"{key} is required")

    age = _number(data, "age", errors)
    height = _number(data, "height", errors)
    weight = _number(data, "weight", errors)
    target = _number(data, "target_weight", errors)
    timeframe = _number(data, "timeframe_months", errors)
    body_fat = _number(data, "body_fat_percentage", errors)
    training = _number(data, "training_frequency", errors)

    _in_range("age", age, AGE_RANGE, errors)
    _in_range("height", height, HEIGHT_RANGE, errors)
    _in_range("weight", weight, WEIGHT_RANGE, errors)
    _in_range("target_weight", target, WEIGHT_RANGE, errors)
    _in_range("timeframe_months", timeframe, TIMEFRAME_RANGE, errors)
    _in_range("training_frequency", training, TRAINING_RANGE, errors)
    if body_fat is not None and not 0 <= body_fat < 100:
        errors.append("body_fat_percentage must be between 0 and 100")
    if age is not None and age != int(age):
        errors.append("age must be a whole number")
    if training is not None and training != int(training):
        errors.append("training_frequency must be a whole number")

    gender = str(data.get("gender") or "").lower()
    activity = str(data.get("activity_level") or "").lower()
    goal = str(data.get("goal") or "maintain").lower()
    if gender not in GENDERS:
        errors.append(f"gender must be one of {', '.join(GENDERS)}")
    if activity not in ACTIVITY_LEVELS:
        errors.append(f"activity_level must be one of {', '.join(ACTIVITY_LEVELS)}")
    if goal not in GOALS:
        errors.append(f"goal must be one of {', '.join(GOALS)}")

    if errors:
        return ValidationResult(errors=errors)

    prefs = data.get("dietary_preferences") or ()
    return ValidationResult(
        profile=UserProfile(
            age=int(age),  # type: ignore[arg-type]
            gender=gender,  # type: ignore[arg-type]
            height=height,  # type: ignore[arg-type]
            weight=weight,  # type: ignore[arg-type]
            activity_level=activity,  # type: ignore[arg-type]
            goal=goal,  # type: ignore[arg-type]
            target_weight=target,
            timeframe_months=timeframe,
            body_fat_percentage=body_fat,
            training_frequency=int(training) if training is not None else None,
            dietary_preferences=frozenset(str(t) for t in prefs),
        )
    )
