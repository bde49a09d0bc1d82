from datetime import date

import pytest

from models.category import Category
from models.expense import Expense
from models.savings_goal import SavingsGoal
from services.aggregation import GoalStatus
from services.report_service import ReportService
from stores.app_store import AppStore, Snapshot


def _service():
    store = AppStore()
    store.load(Snapshot(
        categories=(
            Category(id="food", name="Food", color="#FF5722"),
            Category(id="travel", name="Travel", color="#2196F3"),
        ),
        expenses=(
            Expense(id="e1", amount=30, category_id="food", date="2024-02-12"),
            Expense(id="e2", amount=60, category_id="travel", date="2024-03-03"),
            Expense(id="e3", amount=30, category_id="food", date="2024-03-20"),
        ),
        savings_goals=(
            SavingsGoal(id="g1", name="Trip", target_amount=100, current_amount=100),
            SavingsGoal(id="g2", name="Car", target_amount=100, current_amount=20, deadline="2024-01-01"),
            SavingsGoal(id="g3", name="House", target_amount=100, current_amount=60),
        ),
    ))
    return ReportService(store)


def test_dashboard_summary():
    summary = _service().get_dashboard_summary(date(2024, 3, 25))

    assert summary["month"] == "2024-03"
    assert summary["month_total"] == 90
    assert summary["previous_month_total"] == 30
    assert summary["trend_percent"] == pytest.approx(200.0)
    assert summary["daily_average"] == pytest.approx(3.0)
    assert [(c.id, t) for c, t in summary["top_categories"]] == [("travel", 60), ("food", 30)]
    assert [e.id for e in summary["recent_expenses"]] == ["e3", "e2", "e1"]
    assert [g.id for g in summary["active_goals"]] == ["g1", "g3"]


def test_category_breakdown_for_month():
    rows = _service().get_category_breakdown("2024-02")
    assert [(r["name"], r["total"]) for r in rows] == [("Food", 30), ("Travel", 0)]


def test_monthly_chart_data_ends_at_given_month():
    data = _service().get_monthly_chart_data(months=3, end_month="2024-03")
    assert data == [
        {"month": "2024-01", "total": 0},
        {"month": "2024-02", "total": 30},
        {"month": "2024-03", "total": 90},
    ]


def test_goal_cards_and_status_counts():
    service = _service()
    today = date(2024, 3, 25)
    cards = service.get_goal_cards(today)
    assert [(g.id, s) for g, s in cards] == [
        ("g1", GoalStatus.COMPLETED),
        ("g2", GoalStatus.OVERDUE),
        ("g3", GoalStatus.AT_RISK),
    ]
    counts = service.count_by_status(today)
    assert counts[GoalStatus.COMPLETED] == 1
    assert counts[GoalStatus.BEHIND] == 0
