# tests/test_nutrition_planner.py
from __future__ import annotations

import math
from dataclasses import replace

import pytest

from core.nutrition_planner import (
    NutritionPlanner,
    UserProfile,
    _round_to,
    activity_description,
    format_calories,
    format_macros,
    goal_description,
)

planner = NutritionPlanner()

MALE_70KG = UserProfile(
    age=30,
    gender="male",
    height=175,
    weight=70,
    activity_level="moderate",
    goal="maintain",
)

FEMALE_60KG = UserProfile(
    age=28,
    gender="female",
    height=165,
    weight=60,
    activity_level="light",
    goal="maintain",
)

# 10 kg in 3 months, moderately active man
CUTTING = UserProfile(
    age=30,
    gender="male",
    height=175,
    weight=80,
    target_weight=70,
    timeframe_months=3,
    activity_level="moderate",
    goal="lose_weight",
    training_frequency=3,
)

ACTIVITY = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}


# ── BMR / TDEE ───────────────────────────────────────────────────────
def test_bmr_male():
    expected = 88.362 + 13.397 * 70 + 4.799 * 175 - 5.677 * 30   # 1695.667
    assert math.isclose(planner.bmr(MALE_70KG), expected, rel_tol=1e-9)
    assert math.isclose(planner.bmr(MALE_70KG), 1695.667, rel_tol=1e-6)


def test_bmr_female():
    expected = 447.593 + 9.247 * 60 + 3.098 * 165 - 4.330 * 28   # 1392.343
    assert math.isclose(planner.bmr(FEMALE_60KG), expected, rel_tol=1e-9)


@pytest.mark.parametrize("level,mult", ACTIVITY.items())
def test_tdee_scales_bmr(level, mult):
    p = replace(MALE_70KG, activity_level=level)
    assert math.isclose(planner.tdee(p), planner.bmr(p) * mult, rel_tol=1e-9)


# ── calorie adjustment ───────────────────────────────────────────────
def test_maintain_has_no_adjustment():
    assert planner.calorie_adjustment(MALE_70KG) == 0


def test_default_deficit_without_target():
    p = replace(MALE_70KG, goal="lose_weight")
    tdee = planner.tdee(p)                 # ≈ 2628, 20 % > 500
    assert planner.calorie_adjustment(p) == -min(500, 0.20 * tdee) == -500


def test_default_surplus_without_target():
    p = replace(MALE_70KG, goal="gain_weight")
    assert planner.calorie_adjustment(p) == 300


@pytest.mark.parametrize("months", [0.25, 0.5, 1, 2, 6, 12])
@pytest.mark.parametrize("to_lose", [1, 5, 20, 40])
def test_deficit_never_exceeds_quarter_of_tdee(months, to_lose):
    p = replace(CUTTING, target_weight=CUTTING.weight - to_lose, timeframe_months=months)
    adj = planner.calorie_adjustment(p)
    assert adj <= 0
    assert abs(adj) <= 0.25 * planner.tdee(p) + 1e-9


def test_huge_deficit_is_capped_exactly():
    p = replace(CUTTING, target_weight=50, timeframe_months=1)
    assert math.isclose(planner.calorie_adjustment(p), -0.25 * planner.tdee(p), rel_tol=1e-9)


@pytest.mark.parametrize("months", [0.5, 1, 3, 12])
@pytest.mark.parametrize("to_gain", [1, 5, 20])
def test_surplus_never_exceeds_fifth_of_tdee(months, to_gain):
    p = replace(MALE_70KG, goal="gain_weight", target_weight=70 + to_gain, timeframe_months=months)
    assert planner.calorie_adjustment(p) <= 0.20 * planner.tdee(p) + 1e-9


def test_gain_with_target_below_current_weight_passes_deficit_through():
    p = replace(CUTTING, goal="gain_weight")          # target 70 < weight 80
    expected = (70 - 80) / (3 * 4.33) * 7700 / 7      # ≈ −846.8, not clamped
    assert math.isclose(planner.calorie_adjustment(p), expected, rel_tol=1e-9)


def test_build_muscle_gets_no_calorie_adjustment():
    p = replace(MALE_70KG, goal="build_muscle", target_weight=80, timeframe_months=6)
    assert planner.calorie_adjustment(p) == 0
    assert planner.compute_plan(p).daily_calories == round(planner.tdee(p))


# ── end-to-end ───────────────────────────────────────────────────────
def test_cutting_plan_end_to_end():
    # TDEE 2835.94, deficit 846.8 kcal/day capped at 708.98
    plan = planner.compute_plan(CUTTING)

    assert plan.daily_calories == 2127
    assert plan.daily_proteins == 133      # 25 % of kcal beats 1.6 g/kg (128 g)
    assert plan.daily_fats == 59
    assert plan.daily_carbs == 266
    assert plan.weekly_weight_change == -0.64


def test_cutting_plan_meal_split():
    md = planner.compute_plan(CUTTING).meal_distribution

    assert list(md) == ["breakfast", "lunch", "dinner", "snacks"]
    assert md["breakfast"].calories == 532
    assert md["lunch"].calories == 851
    assert md["dinner"].calories == 532
    assert md["snacks"].calories == 213
    assert md["lunch"].proteins == 53


def test_maintain_plan_has_zero_expected_change():
    assert planner.compute_plan(MALE_70KG).weekly_weight_change == 0


# ── macro floors ─────────────────────────────────────────────────────
def test_fat_floor_raises_fat_and_recomputes_carbs():
    # heavy, short, sedentary lifter: remainder fat would be only 16 % of kcal
    p = UserProfile(age=60, gender="male", height=150, weight=120,
                    activity_level="sedentary", goal="build_muscle")
    plan = planner.compute_plan(p)

    assert plan.daily_calories == 2490
    assert plan.daily_proteins == 240
    assert plan.daily_fats == 55           # 20 % of 2490 / 9
    assert plan.daily_carbs == 258


def test_carb_floor_raises_carbs_and_recomputes_fat():
    p = UserProfile(age=70, gender="female", height=150, weight=140,
                    target_weight=100, timeframe_months=2,
                    activity_level="sedentary", goal="lose_weight")
    plan = planner.compute_plan(p)

    assert plan.daily_calories == 1713
    assert plan.daily_proteins == 224
    assert plan.daily_carbs == 100
    assert plan.daily_fats == 46


ALL_PROFILES = [
    replace(base, goal=goal, activity_level=level)
    for base in (MALE_70KG, FEMALE_60KG, CUTTING)
    for goal in ("lose_weight", "gain_weight", "maintain", "build_muscle")
    for level in ACTIVITY
]


@pytest.mark.parametrize("p", ALL_PROFILES)
def test_macro_floors_hold(p):
    plan = planner.compute_plan(p)
    # half a gram of rounding slack on fat
    assert plan.daily_fats * 9 >= 0.20 * plan.daily_calories - 4.5
    assert plan.daily_carbs >= 100


@pytest.mark.parametrize("p", ALL_PROFILES)
def test_meal_distribution_sums_to_daily_totals(p):
    plan = planner.compute_plan(p)
    md = plan.meal_distribution.values()
    assert abs(sum(m.calories for m in md) - plan.daily_calories) <= 2
    assert abs(sum(m.proteins for m in md) - plan.daily_proteins) <= 2
    assert abs(sum(m.carbs for m in md) - plan.daily_carbs) <= 2
    assert abs(sum(m.fats for m in md) - plan.daily_fats) <= 2


# ── meal ratios ──────────────────────────────────────────────────────
def test_meal_ratios_muscle_with_frequent_training():
    p = replace(MALE_70KG, goal="build_muscle", training_frequency=4)
    assert planner.meal_ratios(p) == {"breakfast": 0.30, "lunch": 0.30, "dinner": 0.25, "snacks": 0.15}


def test_meal_ratios_muscle_with_three_sessions_uses_default():
    p = replace(MALE_70KG, goal="build_muscle", training_frequency=3)
    assert planner.meal_ratios(p) == {"breakfast": 0.25, "lunch": 0.35, "dinner": 0.30, "snacks": 0.10}


def test_meal_ratios_cutting_has_big_lunch():
    assert planner.meal_ratios(CUTTING)["lunch"] == 0.40


# ── recommendations ──────────────────────────────────────────────────
@pytest.mark.parametrize("p", ALL_PROFILES)
def test_recommendations_start_with_general_tips(p):
    recs = planner.recommendations(p)
    assert recs[:2] == [
        "Bevi almeno 2-3 litri di acqua al giorno",
        "Mangia lentamente e mastica bene",
    ]


def test_recommendations_order_goal_then_activity():
    p = replace(CUTTING, activity_level="sedentary")
    recs = planner.recommendations(p)
    assert len(recs) == 7
    assert recs[2] == "Includi proteine magre in ogni pasto"
    assert recs[-1] == "Inizia con 30 minuti di camminata al giorno"


def test_recommendations_muscle_same_as_gain():
    gain = planner.recommendations(replace(MALE_70KG, goal="gain_weight"))
    muscle = planner.recommendations(replace(MALE_70KG, goal="build_muscle"))
    assert gain == muscle


def test_recommendations_very_active_adds_two_tips():
    recs = planner.recommendations(replace(MALE_70KG, activity_level="very_active"))
    assert recs[-2:] == ["Assicurati di riposare adeguatamente", "Monitora la frequenza cardiaca"]
    assert len(recs) == 2 + 3 + 2


# ── progress adjustment ──────────────────────────────────────────────
@pytest.mark.parametrize("change", [-0.5, -0.7, -1.0])
def test_on_track_loss_keeps_baseline_calories(change):
    baseline = planner.compute_plan(CUTTING)
    _, plan = planner.adjust_plan(CUTTING, CUTTING.weight, 2100, change)
    assert plan.daily_calories == baseline.daily_calories


@pytest.mark.parametrize(
    "goal,change,delta",
    [
        ("lose_weight", -0.2, -200),
        ("lose_weight", 0.3, -200),
        ("lose_weight", -1.5, 200),
        ("gain_weight", 0.2, 200),
        ("gain_weight", 1.5, -200),
        ("gain_weight", 0.7, 0),
        ("build_muscle", -0.1, 200),
        ("build_muscle", 1.2, -200),
        ("maintain", -2.0, 0),
        ("maintain", 2.0, 0),
    ],
)
def test_progress_steps(goal, change, delta):
    p = replace(MALE_70KG, goal=goal)
    baseline = planner.compute_plan(p)
    _, plan = planner.adjust_plan(p, p.weight, 2500, change)
    assert plan.daily_calories == baseline.daily_calories + delta


def test_adjust_returns_updated_profile_and_leaves_input_alone():
    updated, plan = planner.adjust_plan(CUTTING, 78, 2000, -0.2)

    assert updated.weight == 78
    assert CUTTING.weight == 80
    assert replace(updated, weight=80) == CUTTING
    # macros use the new weight: 1.6 g/kg × 78 = 124.8 g
    assert plan.daily_calories == 2127 - 200
    assert plan.daily_proteins == 125
    assert plan.daily_fats == 54
    assert plan.daily_carbs == 237


def test_adjust_reports_baseline_weekly_change():
    _, plan = planner.adjust_plan(CUTTING, 79, 2000, -0.1)
    assert plan.weekly_weight_change == planner.compute_plan(CUTTING).weekly_weight_change


def test_adjust_ignores_average_calories():
    _, a = planner.adjust_plan(CUTTING, 79, 1200, -0.1)
    _, b = planner.adjust_plan(CUTTING, 79, 3500, -0.1)
    assert a == b


# ── BMI / lean mass ──────────────────────────────────────────────────
@pytest.mark.parametrize(
    "weight,category",
    [
        (70, "Sottopeso"),     # 17.5
        (74, "Normopeso"),     # exactly 18.5
        (99, "Normopeso"),     # 24.75
        (100, "Sovrappeso"),   # exactly 25
        (120, "Obesità"),      # exactly 30
    ],
)
def test_bmi_categories_and_boundaries(weight, category):
    p = replace(MALE_70KG, height=200, weight=weight)
    assert planner.bmi(p).category == category


def test_bmi_rounded_to_one_decimal():
    assert planner.bmi(MALE_70KG).value == 22.9     # 22.857…


def test_lean_mass_from_body_fat():
    p = replace(CUTTING, body_fat_percentage=20)
    assert math.isclose(planner.lean_body_mass(p), 64.0)


def test_lean_mass_bmi_fallback_male():
    expected = 70 * (1 - (22.9 - 20) * 0.02)
    assert math.isclose(planner.lean_body_mass(MALE_70KG), expected, rel_tol=1e-9)


def test_lean_mass_bmi_fallback_female():
    bmi = planner.bmi(FEMALE_60KG).value            # 22.0
    expected = 60 * (1 - (bmi - 20) * 0.025)
    assert math.isclose(planner.lean_body_mass(FEMALE_60KG), expected, rel_tol=1e-9)


# ── display helpers ──────────────────────────────────────────────────
def test_display_helpers():
    assert format_calories(2127) == "2.127"
    assert format_calories(850) == "850"
    assert format_macros(132.6) == "133g"
    assert format_macros(2.5) == "3g"
    assert goal_description("lose_weight") == "Perdita di peso"
    assert goal_description("keto") == "keto"
    assert activity_description("very_active") == "Estremamente attivo"


def test_decimal_rounding_is_half_up():
    assert _round_to(0.125, 2) == 0.13          # round() gives 0.12
    assert _round_to(-0.125, 2) == -0.12
    assert planner.compute_plan(CUTTING).weekly_weight_change == -0.64
