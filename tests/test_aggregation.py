from datetime import date

import pytest

from models.category import Category
from models.expense import Expense
from models.savings_goal import SavingsGoal
from services import aggregation
from services.aggregation import DateWindow, GoalStatus


def _expense(id, amount, day, category_id="food"):
    return Expense(id=id, amount=amount, category_id=category_id, date=day)


def _categories():
    return [
        Category(id="food", name="Food", color="#FF5722"),
        Category(id="travel", name="Travel", color="#2196F3"),
        Category(id="fun", name="Fun", color="#9C27B0"),
    ]


def _goal(current, target=100.0, deadline=None):
    return SavingsGoal(id="g", name="Goal", target_amount=target,
                       current_amount=current, deadline=deadline)


def test_monthly_trend_doubling_is_one_hundred_percent():
    expenses = [
        _expense("a", 10, "2024-02-10"),
        _expense("b", 20, "2024-03-05"),
    ]
    trend = aggregation.monthly_trend(expenses, date(2024, 3, 15))
    assert trend.current_month_total == 20
    assert trend.previous_month_total == 10
    assert trend.percent_change == pytest.approx(100.0)


def test_monthly_trend_with_empty_previous_month_is_zero():
    trend = aggregation.monthly_trend([_expense("a", 50, "2024-03-05")], "2024-03-20")
    assert trend.previous_month_total == 0
    assert trend.percent_change == 0


def test_monthly_trend_crosses_year_boundary():
    expenses = [_expense("a", 40, "2023-12-31"), _expense("b", 30, "2024-01-01")]
    trend = aggregation.monthly_trend(expenses, date(2024, 1, 10))
    assert trend.percent_change == pytest.approx(-25.0)


def test_category_total_with_no_matches_is_zero():
    assert aggregation.category_total([_expense("a", 5, "2024-01-01")], "travel") == 0


def test_category_total_respects_window():
    expenses = [
        _expense("a", 5, "2024-01-31"),
        _expense("b", 7, "2024-02-01"),
    ]
    window = DateWindow.for_month("2024-01")
    assert aggregation.category_total(expenses, "food", window) == 5


def test_top_categories_ranks_and_keeps_ties_in_category_order():
    expenses = [
        _expense("a", 30, "2024-01-02", "travel"),
        _expense("b", 10, "2024-01-03", "food"),
        _expense("c", 10, "2024-01-04", "fun"),
    ]
    top = aggregation.top_categories(expenses, _categories(), n=3)
    assert [(c.id, total) for c, total in top] == [("travel", 30), ("food", 10), ("fun", 10)]


def test_top_categories_includes_zero_totals_and_limits():
    top = aggregation.top_categories([_expense("a", 3, "2024-01-02", "fun")], _categories(), n=2)
    assert [(c.id, total) for c, total in top] == [("fun", 3), ("food", 0)]


def test_category_breakdown_collects_dangling_references():
    expenses = [
        _expense("a", 12, "2024-01-02", "food"),
        _expense("b", 8, "2024-01-03", "deleted"),
        _expense("c", 2, "2024-01-04", None),
    ]
    rows = aggregation.category_breakdown(expenses, _categories())
    assert rows[0] == {"category_id": "food", "name": "Food", "color": "#FF5722", "total": 12}
    assert rows[-1]["name"] == "Uncategorized"
    assert rows[-1]["total"] == 10
    assert len(rows) == 4


def test_monthly_series_fills_gaps_with_zero():
    expenses = [_expense("a", 5, "2024-01-10"), _expense("b", 6, "2024-03-01")]
    assert aggregation.monthly_series(expenses, "2024-01", "2024-03") == [
        ("2024-01", 5), ("2024-02", 0), ("2024-03", 6),
    ]


def test_daily_average_divides_month_total_by_thirty():
    expenses = [_expense("a", 60, "2024-02-01"), _expense("b", 30, "2024-02-28")]
    assert aggregation.daily_average(expenses, date(2024, 2, 10)) == pytest.approx(3.0)


def test_recent_expenses_newest_first():
    expenses = [_expense(str(i), i, f"2024-01-{i:02d}") for i in range(1, 8)]
    assert [e.id for e in aggregation.recent_expenses(expenses)] == ["7", "6", "5", "4", "3"]


def test_total_for_window():
    expenses = [_expense("a", 5, "2024-01-10"), _expense("b", 6, "2024-03-01")]
    assert aggregation.total_for_window(expenses) == 11
    assert aggregation.total_for_window(expenses, DateWindow(start="2024-02-01")) == 6


@pytest.mark.parametrize("current, deadline, expected", [
    (100, None, GoalStatus.COMPLETED),
    (10, "2024-01-01", GoalStatus.OVERDUE),
    (80, None, GoalStatus.ON_TRACK),
    (75, "2030-01-01", GoalStatus.ON_TRACK),
    (50, None, GoalStatus.AT_RISK),
    (49.9, None, GoalStatus.BEHIND),
])
def test_goal_status(current, deadline, expected):
    assert aggregation.goal_status(_goal(current, deadline=deadline), date(2024, 6, 1)) == expected


def test_completed_goal_past_deadline_is_completed_not_overdue():
    goal = _goal(100, deadline="2020-01-01")
    assert aggregation.goal_status(goal, date(2024, 6, 1)) == GoalStatus.COMPLETED


def test_active_goals_excludes_past_deadlines_and_limits():
    today = date(2024, 6, 1)
    goals = [
        SavingsGoal(id="past", name="Past", target_amount=10, deadline="2024-05-31"),
        SavingsGoal(id="today", name="Today", target_amount=10, deadline="2024-06-01"),
        SavingsGoal(id="open", name="Open", target_amount=10),
        SavingsGoal(id="later", name="Later", target_amount=10, deadline="2024-12-31"),
        SavingsGoal(id="much-later", name="Much later", target_amount=10, deadline="2026-01-01"),
        SavingsGoal(id="extra", name="Extra", target_amount=10),
    ]
    assert [g.id for g in aggregation.active_goals(goals, today)] == ["open", "later", "much-later"]
    assert len(aggregation.active_goals(goals, today, limit=None)) == 4


def test_recent_expenses_tolerates_unreadable_dates():
    expenses = [_expense("junk", 1, "garbage"), _expense("ok", 2, "2024-01-02")]
    assert [e.id for e in aggregation.recent_expenses(expenses)] == ["ok", "junk"]
