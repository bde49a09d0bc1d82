"""Derived numbers the dashboard, reports and goal cards show.

Every function here is pure: it takes plain lists of model objects (usually
from AppStore.snapshot()) and returns fresh values. Nothing is cached, so
callers simply recompute on each refresh.
"""
from datetime import date
from enum import Enum
from typing import Iterable, NamedTuple

from models.category import Category
from models.expense import Expense
from models.savings_goal import SavingsGoal
from stores.expense_store import sort_by_date_desc
from utils.constants import (
    ACTIVE_GOALS_LIMIT,
    DAYS_PER_MONTH_AVERAGE,
    GOAL_AT_RISK_PERCENT,
    GOAL_ON_TRACK_PERCENT,
    RECENT_EXPENSES_LIMIT,
    TOP_CATEGORIES_LIMIT,
    UNCATEGORIZED,
)
from utils.date_helpers import (
    format_month,
    month_range,
    months_between,
    parse_date,
    prev_month,
)


class GoalStatus(str, Enum):
    COMPLETED = "completed"
    OVERDUE = "overdue"
    ON_TRACK = "on_track"
    AT_RISK = "at_risk"
    BEHIND = "behind"


GOAL_STATUS_COLORS = {
    GoalStatus.COMPLETED: "#4CAF50",
    GoalStatus.OVERDUE:   "#F44336",
    GoalStatus.ON_TRACK:  "#4CAF50",
    GoalStatus.AT_RISK:   "#FF9800",
    GoalStatus.BEHIND:    "#2196F3",
}

GOAL_STATUS_LABELS = {
    GoalStatus.COMPLETED: "Completed",
    GoalStatus.OVERDUE:   "Overdue",
    GoalStatus.ON_TRACK:  "On track",
    GoalStatus.AT_RISK:   "At risk",
    GoalStatus.BEHIND:    "Behind",
}


class DateWindow(NamedTuple):
    """Inclusive calendar-day window; either bound may be None (open)."""
    start: str | None = None
    end: str | None = None

    @classmethod
    def for_month(cls, month: str) -> "DateWindow":
        first, last = month_range(month)
        return cls(first, last)

    def contains(self, date_str: str) -> bool:
        day = parse_date(date_str)
        if day is None:
            return False
        if self.start and day < parse_date(self.start):
            return False
        if self.end and day > parse_date(self.end):
            return False
        return True


class MonthlyTrend(NamedTuple):
    current_month_total: float
    previous_month_total: float
    percent_change: float


def _in_window(expenses: Iterable[Expense], window: DateWindow | None) -> list[Expense]:
    if window is None:
        return list(expenses)
    return [e for e in expenses if window.contains(e.date)]


def _month_of(expense: Expense) -> str | None:
    day = parse_date(expense.date)
    return format_month(day) if day else None


def total_for_window(expenses: Iterable[Expense], window: DateWindow | None = None) -> float:
    return sum((e.amount for e in _in_window(expenses, window)), 0.0)


def month_total(expenses: Iterable[Expense], month: str) -> float:
    return sum((e.amount for e in expenses if _month_of(e) == month), 0.0)


def category_total(
    expenses: Iterable[Expense],
    category_id: str,
    window: DateWindow | None = None,
) -> float:
    """Sum of amounts for one category; 0.0 when nothing matches."""
    return sum(
        (e.amount for e in _in_window(expenses, window) if e.category_id == category_id),
        0.0,
    )


def monthly_trend(expenses: Iterable[Expense], reference_date: date | str) -> MonthlyTrend:
    """Reference month vs. the month before it.

    percent_change is 0 when the previous month has no spending; there is
    nothing meaningful to compare against.
    """
    ref = parse_date(reference_date)
    if ref is None:
        raise ValueError(f"Invalid reference date: {reference_date}")
    expenses = list(expenses)
    current_month = format_month(ref)
    current = month_total(expenses, current_month)
    previous = month_total(expenses, prev_month(current_month))
    change = ((current - previous) / previous) * 100 if previous else 0.0
    return MonthlyTrend(current, previous, change)


def top_categories(
    expenses: Iterable[Expense],
    categories: Iterable[Category],
    n: int = TOP_CATEGORIES_LIMIT,
    window: DateWindow | None = None,
) -> list[tuple[Category, float]]:
    """Categories ranked by spending, highest first; ties keep category order."""
    scoped = _in_window(expenses, window)
    totals: dict[str, float] = {}
    for e in scoped:
        if e.category_id is not None:
            totals[e.category_id] = totals.get(e.category_id, 0.0) + e.amount
    ranked = sorted(
        ((c, totals.get(c.id, 0.0)) for c in categories),
        key=lambda pair: pair[1],
        reverse=True,
    )
    return ranked[:max(n, 0)]


def category_breakdown(
    expenses: Iterable[Expense],
    categories: Iterable[Category],
    window: DateWindow | None = None,
) -> list[dict]:
    """Return [{category_id, name, color, total}, ...] in category order.

    Spending on deleted categories is gathered in a trailing 'Uncategorized'
    row, present only when non-zero.
    """
    scoped = _in_window(expenses, window)
    categories = list(categories)
    known = {c.id for c in categories}
    rows = [
        {
            "category_id": c.id,
            "name": c.name,
            "color": c.color,
            "total": category_total(scoped, c.id),
        }
        for c in categories
    ]
    orphaned = sum((e.amount for e in scoped if e.category_id not in known), 0.0)
    if orphaned:
        rows.append({"category_id": None, "name": UNCATEGORIZED, "color": None, "total": orphaned})
    return rows


def monthly_series(
    expenses: Iterable[Expense],
    start_month: str,
    end_month: str,
) -> list[tuple[str, float]]:
    """[(YYYY-MM, total), ...] for every month in the inclusive range, zeros included."""
    totals: dict[str, float] = {}
    for e in expenses:
        month = _month_of(e)
        if month:
            totals[month] = totals.get(month, 0.0) + e.amount
    return [(m, totals.get(m, 0.0)) for m in months_between(start_month, end_month)]


def daily_average(expenses: Iterable[Expense], reference_date: date | str) -> float:
    ref = parse_date(reference_date)
    if ref is None:
        raise ValueError(f"Invalid reference date: {reference_date}")
    return month_total(expenses, format_month(ref)) / DAYS_PER_MONTH_AVERAGE


def recent_expenses(expenses: Iterable[Expense], n: int = RECENT_EXPENSES_LIMIT) -> list[Expense]:
    return sort_by_date_desc(list(expenses))[:max(n, 0)]


def goal_status(goal: SavingsGoal, today: date | None = None) -> GoalStatus:
    if goal.is_completed:
        return GoalStatus.COMPLETED
    if goal.is_overdue(today):
        return GoalStatus.OVERDUE
    progress = goal.progress_percent
    if progress >= GOAL_ON_TRACK_PERCENT:
        return GoalStatus.ON_TRACK
    if progress >= GOAL_AT_RISK_PERCENT:
        return GoalStatus.AT_RISK
    return GoalStatus.BEHIND


def active_goals(
    goals: Iterable[SavingsGoal],
    today: date | None = None,
    limit: int | None = ACTIVE_GOALS_LIMIT,
) -> list[SavingsGoal]:
    """Goals with no deadline or a deadline after today."""
    today = today or date.today()
    active = [
        g for g in goals
        if not g.deadline or (parse_date(g.deadline) or today) > today
    ]
    return active if limit is None else active[:limit]
