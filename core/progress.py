"""
core/progress.py
────────────────────────────────────────────────────────────────────────
Summarise weight logs + daily intake over a window (week / month / year).

The weekly summary is what feeds `NutritionPlanner.adjust_plan()`:

    current_weight   → last logged weight in the window
    average_calories → mean consumed kcal per logged day
    weight_change    → current − reference weight, or None if unmeasured

The reference is the last weigh-in *before* the window when there is one,
so a user who weighs in once a week still gets a measured change.  Without
it the first weigh-in inside the window is used, which needs at least two.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

import pandas as pd

_LOG = logging.getLogger(__name__)

PERIOD_DAYS = {"week": 7, "month": 30, "year": 365}
TREND_THRESHOLD_KG = 0.5


@dataclass(frozen=True)
class ProgressSummary:
    current_weight: float | None
    start_weight: float | None
    weight_change: float | None
    trend: str                # "up" | "down" | "stable"
    average_calories: int
    days_logged: int


def _window(period: str, end: datetime | None) -> tuple[pd.Timestamp, pd.Timestamp]:
    if period not in PERIOD_DAYS:
        raise ValueError(f"unknown period {period!r}")
    end_ts = pd.Timestamp(end or datetime.now(timezone.utc))
    if end_ts.tzinfo is None:
        end_ts = end_ts.tz_localize("UTC")
    return end_ts - timedelta(days=PERIOD_DAYS[period]), end_ts


def _trend(change: float | None) -> str:
    if change is None:
        return "stable"
    if change > TREND_THRESHOLD_KG:
        return "up"
    if change < -TREND_THRESHOLD_KG:
        return "down"
    return "stable"


def summarize_progress(
    weight_logs: List[Dict[str, Any]],
    daily_logs: List[Dict[str, Any]],
    period: str = "week",
    end: datetime | None = None,
) -> ProgressSummary:
    """
    `weight_logs`: dicts with `weight` and `logged_at`.
    `daily_logs`:  dicts with `date` and `consumed_calories`.
    """
    start, stop = _window(period, end)

    current = first = None
    change: float | None = None
    if weight_logs:
        wdf = pd.DataFrame(weight_logs)
        wdf["logged_at"] = pd.to_datetime(wdf["logged_at"], utc=True)
        wdf = wdf.dropna(subset=["weight"]).sort_values("logged_at")
        before = wdf[wdf["logged_at"] < start]
        inside = wdf[(wdf["logged_at"] >= start) & (wdf["logged_at"] <= stop)]
        if not inside.empty:
            current = float(inside["weight"].iloc[-1])
            if not before.empty:
                first = float(before["weight"].iloc[-1])
            else:
                first = float(inside["weight"].iloc[0])
            if not before.empty or len(inside) >= 2:
                change = round(current - first, 2)

    avg_kcal, days = 0, 0
    if daily_logs:
        ddf = pd.DataFrame(daily_logs)
        ddf["date"] = pd.to_datetime(ddf["date"], utc=True)
        ddf = ddf[(ddf["date"] >= start.normalize()) & (ddf["date"] <= stop)]
        per_day = ddf.groupby(ddf["date"].dt.date)["consumed_calories"].sum()
        days = int(per_day.size)
        if days:
            avg_kcal = int(round(float(per_day.mean())))

    _LOG.debug("progress %s: %s → %s kg, avg %d kcal over %d days",
               period, first, current, avg_kcal, days)
    return ProgressSummary(
        current_weight=current,
        start_weight=first,
        weight_change=change,
        trend=_trend(change),
        average_calories=avg_kcal,
        days_logged=days,
    )
