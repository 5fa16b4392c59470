from datetime import datetime, timedelta, timezone

import pytest

from core.nutrition_planner import NutritionPlanner, UserProfile
from core.progress import summarize_progress

END = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _day(n: int) -> datetime:
    return END - timedelta(days=n)


WEIGHTS = [
    {"weight": 81.0, "logged_at": _day(20)},   # before the week
    {"weight": 80.0, "logged_at": _day(6)},
    {"weight": 79.6, "logged_at": _day(3)},
    {"weight": 79.2, "logged_at": _day(0)},
]

DAYS = [
    {"date": _day(2).date().isoformat(), "consumed_calories": 1900},
    {"date": _day(1).date().isoformat(), "consumed_calories": 2100},
    {"date": _day(0).date().isoformat(), "consumed_calories": 2001},
    {"date": _day(40).date().isoformat(), "consumed_calories": 3000},
]


def test_week_summary_measures_from_last_weigh_in_before_the_window():
    s = summarize_progress(WEIGHTS, DAYS, period="week", end=END)
    assert s.start_weight == 81.0
    assert s.current_weight == 79.2
    assert s.weight_change == pytest.approx(-1.8)
    assert s.trend == "down"
    assert s.days_logged == 3
    assert s.average_calories == 2000


def test_week_summary_without_earlier_logs_uses_first_in_window():
    s = summarize_progress(WEIGHTS[1:], DAYS, period="week", end=END)
    assert s.start_weight == 80.0
    assert s.weight_change == pytest.approx(-0.8)


def test_month_window_includes_older_logs():
    s = summarize_progress(WEIGHTS, DAYS, period="month", end=END)
    assert s.start_weight == 81.0
    assert s.weight_change == pytest.approx(-1.8)
    assert s.days_logged == 3


def test_log_order_does_not_matter():
    s = summarize_progress(list(reversed(WEIGHTS)), DAYS, end=END)
    assert s.current_weight == 79.2


def test_small_change_is_stable():
    logs = [{"weight": 70.0, "logged_at": _day(5)}, {"weight": 70.4, "logged_at": _day(1)}]
    s = summarize_progress(logs, [], end=END)
    assert s.trend == "stable"
    assert s.weight_change == pytest.approx(0.4)


def test_gain_is_up():
    logs = [{"weight": 70.0, "logged_at": _day(5)}, {"weight": 71.0, "logged_at": _day(1)}]
    assert summarize_progress(logs, [], end=END).trend == "up"


def test_weekly_weigh_in_is_measured():
    logs = [{"weight": 80.8, "logged_at": _day(8)}, {"weight": 80.0, "logged_at": _day(1)}]
    s = summarize_progress(logs, [], end=END)
    assert s.weight_change == pytest.approx(-0.8)
    assert s.trend == "down"


def test_measured_weekly_loss_keeps_cutting_plan_unchanged():
    cutting = UserProfile(
        age=30, gender="male", height=175, weight=80.8, target_weight=70,
        timeframe_months=3, activity_level="moderate", goal="lose_weight",
    )
    logs = [{"weight": 80.8, "logged_at": _day(8)}, {"weight": 80.0, "logged_at": _day(1)}]
    week = summarize_progress(logs, [], end=END)

    planner = NutritionPlanner()
    _, plan = planner.adjust_plan(cutting, week.current_weight, 2100, week.weight_change)
    assert plan.daily_calories == planner.compute_plan(cutting).daily_calories


def test_single_weight_has_no_measured_change():
    s = summarize_progress([{"weight": 75.0, "logged_at": _day(1)}], [], end=END)
    assert s.current_weight == 75.0
    assert s.weight_change is None
    assert s.trend == "stable"


def test_only_old_logs_mean_nothing_current():
    s = summarize_progress([{"weight": 75.0, "logged_at": _day(10)}], [], end=END)
    assert s.current_weight is None
    assert s.weight_change is None


def test_empty_inputs():
    s = summarize_progress([], [], end=END)
    assert s.current_weight is None
    assert s.weight_change is None
    assert s.average_calories == 0
    assert s.days_logged == 0


def test_naive_end_is_treated_as_utc():
    s = summarize_progress(WEIGHTS, DAYS, end=END.replace(tzinfo=None))
    assert s.current_weight == 79.2


def test_unknown_period():
    with pytest.raises(ValueError):
        summarize_progress([], [], period="decade")
