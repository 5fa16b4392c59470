"""
core/nutrition_planner.py
────────────────────────────────────────────────────────────────────────
Turns a user profile into a daily nutrition plan:

1. BMR  (Mifflin–St Jeor, revised Harris-Benedict coefficients)
2. TDEE (activity multiplier)
3. Calorie adjustment for the stated goal (capped deficit / surplus)
4. Macro split + safety floors (fat ≥ 20 % kcal, carbs ≥ 100 g)
5. Per-meal distribution
6. Recommendation strings

plus a weekly progress correction, BMI and a lean-mass estimate.

Pure arithmetic, no I/O.  Inputs are not validated here – see
`core.validation` for the boundary checks.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Literal

Logger = logging.getLogger(__name__)

Gender = Literal["male", "female"]
ActivityLevel = Literal["sedentary", "light", "moderate", "active", "very_active"]
Goal = Literal["lose_weight", "gain_weight", "maintain", "build_muscle"]

MEAL_SLOTS = ("breakfast", "lunch", "dinner", "snacks")

KCAL_PER_KG_FAT = 7700
WEEKS_PER_MONTH = 4.33
KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9
MIN_CARBS_G = 100


# ──────────────────────────────────────────────────────────────────────
#  Value objects
# ──────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class UserProfile:
    age: int
    gender: Gender
    height: float            # cm
    weight: float            # kg, current
    activity_level: ActivityLevel
    goal: Goal
    target_weight: float | None = None
    timeframe_months: float | None = None
    body_fat_percentage: float | None = None
    training_frequency: int | None = None   # training days / week
    dietary_preferences: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class MealTargets:
    calories: int
    proteins: int
    carbs: int
    fats: int


@dataclass(frozen=True)
class Macros:
    proteins: int
    carbs: int
    fats: int


@dataclass(frozen=True)
class NutritionPlan:
    daily_calories: int
    daily_proteins: int
    daily_carbs: int
    daily_fats: int
    meal_distribution: dict[str, MealTargets]
    recommendations: list[str]
    weekly_weight_change: float   # kg / week, negative = loss


@dataclass(frozen=True)
class BMIResult:
    value: float
    category: str


def _iround(x: float) -> int:
    """Nearest integer, halves rounded up (2.5 → 3)."""
    return int(math.floor(x + 0.5))


def _round_to(x: float, digits: int) -> float:
    """Half-up to `digits` decimals (0.125 → 0.13, where round() gives 0.12)."""
    scale = 10 ** digits
    return _iround(x * scale) / scale


# ──────────────────────────────────────────────────────────────────────
#  Planner
# ──────────────────────────────────────────────────────────────────────
class NutritionPlanner:
    """Source-of-truth for kcal, macros and meal split."""

    _ACTIVITY = {
        "sedentary": 1.2,      # little or no exercise
        "light": 1.375,        # light exercise 1-3 days/week
        "moderate": 1.55,      # moderate exercise 3-5 days/week
        "active": 1.725,       # hard exercise 6-7 days/week
        "very_active": 1.9,    # very hard exercise + physical job
    }

    _DEFAULT_SPLIT = {"breakfast": 0.25, "lunch": 0.35, "dinner": 0.30, "snacks": 0.10}
    _MUSCLE_SPLIT = {"breakfast": 0.30, "lunch": 0.30, "dinner": 0.25, "snacks": 0.15}
    _CUT_SPLIT = {"breakfast": 0.25, "lunch": 0.40, "dinner": 0.25, "snacks": 0.10}

    _GENERAL_TIPS = [
        "Bevi almeno 2-3 litri di acqua al giorno",
        "Mangia lentamente e mastica bene",
    ]
    _GOAL_TIPS = {
        "lose_weight": [
            "Includi proteine magre in ogni pasto",
            "Aumenta il consumo di verdure",
            "Evita zuccheri raffinati e bevande zuccherate",
            "Fai attività fisica regolare",
        ],
        "gain_weight": [
            "Aumenta gradualmente le porzioni",
            "Includi carboidrati complessi",
            "Fai spuntini tra i pasti principali",
            "Allenati con i pesi 3-4 volte a settimana",
        ],
        "maintain": [
            "Mantieni una dieta equilibrata",
            "Fai attività fisica moderata",
            "Monitora il peso settimanalmente",
        ],
    }
    _GOAL_TIPS["build_muscle"] = _GOAL_TIPS["gain_weight"]
    _ACTIVITY_TIPS = {
        "sedentary": ["Inizia con 30 minuti di camminata al giorno"],
        "very_active": [
            "Assicurati di riposare adeguatamente",
            "Monitora la frequenza cardiaca",
        ],
    }

    # --------------- public entrypoints ------------------------------
    def compute_plan(self, p: UserProfile) -> NutritionPlan:
        tdee = self.tdee(p)
        adjustment = self.calorie_adjustment(p)
        kcal = _iround(tdee + adjustment)
        Logger.debug("tdee=%.1f adjustment=%.1f kcal=%d", tdee, adjustment, kcal)

        return self._assemble(
            p,
            kcal,
            weekly_change=_round_to(adjustment * 7 / KCAL_PER_KG_FAT, 2),
        )

    def adjust_plan(
        self,
        p: UserProfile,
        current_weight: float,
        average_calories_last_week: float,
        weight_change_last_week: float,
    ) -> tuple[UserProfile, NutritionPlan]:
        """
        Re-plan after a week of real data.

        The baseline is computed from `p` as given; the ±200 kcal step is
        applied on top and macros are recomputed for `current_weight`.
        `average_calories_last_week` is accepted for callers that track it
        but does not enter the arithmetic.  The reported
        `weekly_weight_change` is the baseline's, not the corrected one.

        Returns the updated profile alongside the plan; `p` is untouched.
        """
        baseline = self.compute_plan(p)
        step = self._progress_step(p.goal, weight_change_last_week)
        kcal = baseline.daily_calories + step
        if step:
            Logger.info(
                "progress correction %+d kcal (goal=%s, last week %+.2f kg, avg %.0f kcal)",
                step, p.goal, weight_change_last_week, average_calories_last_week,
            )

        updated = replace(p, weight=current_weight)
        return updated, self._assemble(
            updated, kcal, weekly_change=baseline.weekly_weight_change
        )

    # --------------- BMR / TDEE --------------------------------------
    def bmr(self, p: UserProfile) -> float:
        if p.gender == "male":
            return 88.362 + 13.397 * p.weight + 4.799 * p.height - 5.677 * p.age
        return 447.593 + 9.247 * p.weight + 3.098 * p.height - 4.330 * p.age

    def tdee(self, p: UserProfile) -> float:
        return self.bmr(p) * self._ACTIVITY[p.activity_level]

    # --------------- Calories ----------------------------------------
    def calorie_adjustment(self, p: UserProfile) -> float:
        """Signed kcal delta added to TDEE.  build_muscle gets none."""
        tdee = self.tdee(p)

        if p.goal == "maintain":
            return 0.0

        if p.goal == "lose_weight" and p.target_weight and p.timeframe_months:
            weekly_loss = (p.weight - p.target_weight) / (p.timeframe_months * WEEKS_PER_MONTH)
            daily_deficit = weekly_loss * KCAL_PER_KG_FAT / 7
            return -min(abs(daily_deficit), 0.25 * tdee)

        if p.goal == "gain_weight" and p.target_weight and p.timeframe_months:
            weekly_gain = (p.target_weight - p.weight) / (p.timeframe_months * WEEKS_PER_MONTH)
            daily_surplus = weekly_gain * KCAL_PER_KG_FAT / 7
            # a target below current weight yields a deficit here, kept as-is
            return min(daily_surplus, 0.20 * tdee)

        if p.goal == "lose_weight":
            return -min(500, 0.20 * tdee)

        if p.goal == "gain_weight":
            return min(300, 0.15 * tdee)

        return 0.0

    # --------------- Macros ------------------------------------------
    def macros(self, p: UserProfile, kcal: float) -> Macros:
        if p.goal == "lose_weight":
            prot = max(1.6 * p.weight, 0.25 * kcal / KCAL_PER_G_PROTEIN)
            fat = 0.25 * kcal / KCAL_PER_G_FAT
            carbs = (kcal - prot * KCAL_PER_G_PROTEIN - fat * KCAL_PER_G_FAT) / KCAL_PER_G_CARBS
        elif p.goal in ("gain_weight", "build_muscle"):
            prot = max(2.0 * p.weight, 0.30 * kcal / KCAL_PER_G_PROTEIN)
            carbs = 0.45 * kcal / KCAL_PER_G_CARBS
            fat = (kcal - prot * KCAL_PER_G_PROTEIN - carbs * KCAL_PER_G_CARBS) / KCAL_PER_G_FAT
        else:
            prot = max(1.2 * p.weight, 0.20 * kcal / KCAL_PER_G_PROTEIN)
            carbs = 0.50 * kcal / KCAL_PER_G_CARBS
            fat = (kcal - prot * KCAL_PER_G_PROTEIN - carbs * KCAL_PER_G_CARBS) / KCAL_PER_G_FAT

        # floors, in this order: fat first, then carbs
        min_fat = 0.20 * kcal / KCAL_PER_G_FAT
        if fat < min_fat:
            fat = min_fat
            carbs = (kcal - prot * KCAL_PER_G_PROTEIN - fat * KCAL_PER_G_FAT) / KCAL_PER_G_CARBS

        if carbs < MIN_CARBS_G:
            carbs = MIN_CARBS_G
            fat = (kcal - prot * KCAL_PER_G_PROTEIN - carbs * KCAL_PER_G_CARBS) / KCAL_PER_G_FAT

        return Macros(proteins=_iround(prot), carbs=_iround(carbs), fats=_iround(fat))

    # --------------- Meal split --------------------------------------
    def meal_ratios(self, p: UserProfile) -> dict[str, float]:
        if p.goal == "build_muscle" and (p.training_frequency or 0) > 3:
            return self._MUSCLE_SPLIT
        if p.goal == "lose_weight":
            return self._CUT_SPLIT
        return self._DEFAULT_SPLIT

    def meal_distribution(
        self, p: UserProfile, kcal: int, proteins: int, carbs: int, fats: int
    ) -> dict[str, MealTargets]:
        return {
            slot: MealTargets(
                calories=_iround(kcal * ratio),
                proteins=_iround(proteins * ratio),
                carbs=_iround(carbs * ratio),
                fats=_iround(fats * ratio),
            )
            for slot, ratio in self.meal_ratios(p).items()
        }

    # --------------- Recommendations ---------------------------------
    def recommendations(self, p: UserProfile) -> list[str]:
        return [
            *self._GENERAL_TIPS,
            *self._GOAL_TIPS.get(p.goal, []),
            *self._ACTIVITY_TIPS.get(p.activity_level, []),
        ]

    # --------------- Body composition --------------------------------
    def bmi(self, p: UserProfile) -> BMIResult:
        value = p.weight / (p.height / 100) ** 2
        if value < 18.5:
            category = "Sottopeso"
        elif value < 25:
            category = "Normopeso"
        elif value < 30:
            category = "Sovrappeso"
        else:
            category = "Obesità"
        return BMIResult(value=_round_to(value, 1), category=category)

    def lean_body_mass(self, p: UserProfile) -> float:
        """
        Lean mass in kg.  Uses body-fat % when known; otherwise a rough
        BMI-based heuristic (not a clinical formula – display only).
        """
        if p.body_fat_percentage:
            return p.weight * (1 - p.body_fat_percentage / 100)

        bmi = self.bmi(p).value
        slope = 0.02 if p.gender == "male" else 0.025
        return p.weight * (1 - (bmi - 20) * slope)

    # --------------- internals ---------------------------------------
    @staticmethod
    def _progress_step(goal: str, weekly_change: float) -> int:
        if goal == "lose_weight":
            if weekly_change > -0.5:       # losing too slowly
                return -200
            if weekly_change < -1.0:       # losing too fast
                return 200
        elif goal in ("gain_weight", "build_muscle"):
            if weekly_change < 0.5:
                return 200
            if weekly_change > 1.0:
                return -200
        return 0

    def _assemble(self, p: UserProfile, kcal: int, weekly_change: float) -> NutritionPlan:
        m = self.macros(p, kcal)
        return NutritionPlan(
            daily_calories=kcal,
            daily_proteins=m.proteins,
            daily_carbs=m.carbs,
            daily_fats=m.fats,
            meal_distribution=self.meal_distribution(p, kcal, m.proteins, m.carbs, m.fats),
            recommendations=self.recommendations(p),
            weekly_weight_change=weekly_change,
        )


# ──────────────────────────────────────────────────────────────────────
#  Display helpers
# ──────────────────────────────────────────────────────────────────────
_GOAL_LABELS = {
    "lose_weight": "Perdita di peso",
    "gain_weight": "Aumento di peso",
    "maintain": "Mantenimento peso",
    "build_muscle": "Costruzione muscolare",
}

_ACTIVITY_LABELS = {
    "sedentary": "Sedentario",
    "light": "Leggermente attivo",
    "moderate": "Moderatamente attivo",
    "active": "Molto attivo",
    "very_active": "Estremamente attivo",
}


def goal_description(goal: str) -> str:
    return _GOAL_LABELS.get(goal, goal)


def activity_description(level: str) -> str:
    return _ACTIVITY_LABELS.get(level, level)


def format_calories(kcal: float) -> str:
    """it-IT grouping: 12345 → '12.345'."""
    return f"{_iround(kcal):,}".replace(",", ".")


def format_macros(grams: float) -> str:
    return f"{_iround(grams)}g"
