from datetime import date

from services import aggregation
from services.aggregation import DateWindow, GoalStatus
from stores.app_store import AppStore
from utils.constants import REPORT_MONTHS, TOP_CATEGORIES_LIMIT
from utils.date_helpers import current_month_str, format_month, prev_month


class ReportService:
    """Read-side facade the tabs use: pulls a snapshot and runs the aggregations."""

    def __init__(self, store: AppStore):
        self._store = store

    def get_dashboard_summary(self, reference_date: date | None = None) -> dict:
        ref = reference_date or date.today()
        snap = self._store.snapshot()
        month = format_month(ref)
        trend = aggregation.monthly_trend(snap.expenses, ref)
        top = aggregation.top_categories(
            snap.expenses, snap.categories, TOP_CATEGORIES_LIMIT, DateWindow.for_month(month)
        )
        return {
            "month": month,
            "month_total": trend.current_month_total,
            "previous_month_total": trend.previous_month_total,
            "trend_percent": round(trend.percent_change, 2),
            "daily_average": aggregation.daily_average(snap.expenses, ref),
            "top_categories": top,
            "recent_expenses": aggregation.recent_expenses(snap.expenses),
            "active_goals": aggregation.active_goals(snap.savings_goals, ref),
        }

    def get_category_breakdown(self, month: str | None = None) -> list[dict]:
        """Return [{category_id, name, color, total}, ...] for the month's pie/bar chart."""
        snap = self._store.snapshot()
        window = DateWindow.for_month(month or current_month_str())
        return aggregation.category_breakdown(snap.expenses, snap.categories, window)

    def get_monthly_chart_data(self, months: int = REPORT_MONTHS, end_month: str | None = None) -> list[dict]:
        """Return [{month, total}, ...] for the last `months` months ending at end_month."""
        end = end_month or current_month_str()
        start = end
        for _ in range(max(months, 1) - 1):
            start = prev_month(start)
        snap = self._store.snapshot()
        return [
            {"month": m, "total": total}
            for m, total in aggregation.monthly_series(snap.expenses, start, end)
        ]

    def get_goal_cards(self, today: date | None = None) -> list[tuple]:
        """Return [(goal, status), ...] in goal order."""
        return [
            (g, aggregation.goal_status(g, today))
            for g in self._store.snapshot().savings_goals
        ]

    def count_by_status(self, today: date | None = None) -> dict[GoalStatus, int]:
        counts = {status: 0 for status in GoalStatus}
        for _, status in self.get_goal_cards(today):
            counts[status] += 1
        return counts

