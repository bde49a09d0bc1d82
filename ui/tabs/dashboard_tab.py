import customtkinter as ctk

from models.category import icon_glyph
from services.aggregation import GOAL_STATUS_COLORS, GOAL_STATUS_LABELS, goal_status
from services.report_service import ReportService
from stores.app_store import AppStore
from utils.currency import format_currency, format_percent
from utils.date_helpers import format_display_date, friendly_month


class DashboardTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        store: AppStore,
        report_service: ReportService,
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._store = store
        self._report_svc = report_service
        self._date_format = date_format

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_header()
        self._build_summary_cards()
        self._build_bottom_section()
        self._load()

    def refresh(self):
        self._load()

    def _build_header(self):
        header = ctk.CTkFrame(self, fg_color="transparent")
        header.grid(row=0, column=0, sticky="ew", padx=16, pady=(12, 0))
        self._greeting = ctk.CTkLabel(
            header, text="", font=ctk.CTkFont(size=15, weight="bold"), anchor="w"
        )
        self._greeting.pack(side="left")
        self._month_label = ctk.CTkLabel(header, text="", text_color="gray60")
        self._month_label.pack(side="right")

    def _build_summary_cards(self):
        self._card_frame = ctk.CTkFrame(self, fg_color="transparent")
        self._card_frame.grid(row=1, column=0, sticky="ew", padx=16, pady=12)
        self._card_frame.grid_columnconfigure((0, 1, 2), weight=1)

    def _build_bottom_section(self):
        bottom = ctk.CTkFrame(self, fg_color="transparent")
        bottom.grid(row=2, column=0, sticky="nsew", padx=16, pady=(0, 12))
        bottom.grid_columnconfigure((0, 1, 2), weight=1)
        bottom.grid_rowconfigure(0, weight=1)

        self._recent_frame = ctk.CTkScrollableFrame(bottom, label_text="Recent Expenses", height=240)
        self._recent_frame.grid(row=0, column=0, sticky="nsew", padx=(0, 8))

        self._top_frame = ctk.CTkScrollableFrame(bottom, label_text="Top Categories (This Month)", height=240)
        self._top_frame.grid(row=0, column=1, sticky="nsew", padx=8)

        self._goals_frame = ctk.CTkScrollableFrame(bottom, label_text="Active Savings Goals", height=240)
        self._goals_frame.grid(row=0, column=2, sticky="nsew", padx=(8, 0))

    def _load(self):
        summary = self._report_svc.get_dashboard_summary()
        currency = self._store.preferences.preferences.default_currency
        user = self._store.preferences.user

        self._greeting.configure(text=f"Welcome back, {user.name}" if user and user.name else "Welcome")
        self._month_label.configure(text=friendly_month(summary["month"]))

        # Summary cards
        for w in self._card_frame.winfo_children():
            w.destroy()
        trend = summary["trend_percent"]
        # Spending going up is bad news.
        trend_color = "#F44336" if trend > 0 else ("#4CAF50" if trend < 0 else "gray60")
        cards = [
            ("Spent This Month", format_currency(summary["month_total"], currency), "#F44336"),
            ("vs Last Month", format_percent(trend), trend_color),
            ("Daily Average", format_currency(summary["daily_average"], currency), "#2196F3"),
        ]
        for i, (label, text, color) in enumerate(cards):
            self._make_card(self._card_frame, i, label, text, color)

        # Recent expenses
        for w in self._recent_frame.winfo_children():
            w.destroy()
        recent = summary["recent_expenses"]
        if not recent:
            ctk.CTkLabel(self._recent_frame, text="No expenses yet.", text_color="gray60").pack(pady=20)
        for idx, exp in enumerate(recent):
            bg = ("gray90", "gray20") if idx % 2 == 0 else ("gray86", "gray24")
            f = ctk.CTkFrame(self._recent_frame, fg_color=bg, corner_radius=4)
            f.pack(fill="x", pady=1)
            f.grid_columnconfigure(1, weight=1)
            ctk.CTkLabel(
                f, text=format_display_date(exp.date, self._date_format), width=85, anchor="w"
            ).grid(row=0, column=0, padx=6, pady=3)
            ctk.CTkLabel(
                f, text=exp.notes or self._store.expenses.category_name(exp), anchor="w"
            ).grid(row=0, column=1, padx=4, sticky="ew")
            ctk.CTkLabel(
                f, text=format_currency(exp.amount, exp.currency),
                text_color="#F44336", anchor="e", width=90,
            ).grid(row=0, column=2, padx=6)

        # Top categories
        for w in self._top_frame.winfo_children():
            w.destroy()
        top = summary["top_categories"]
        if not top:
            ctk.CTkLabel(self._top_frame, text="No categories yet.", text_color="gray60").pack(pady=20)
        month_total = summary["month_total"]
        for cat, total in top:
            f = ctk.CTkFrame(self._top_frame, fg_color="transparent")
            f.pack(fill="x", pady=4, padx=4)
            top_row = ctk.CTkFrame(f, fg_color="transparent")
            top_row.pack(fill="x")
            ctk.CTkLabel(top_row, text=f"{icon_glyph(cat.icon)}  {cat.name}", anchor="w").pack(side="left")
            ctk.CTkLabel(
                top_row, text=format_currency(total, currency), anchor="e", text_color="gray60",
            ).pack(side="right")
            bar = ctk.CTkProgressBar(f, progress_color=cat.color or "#2196F3")
            bar.pack(fill="x", pady=2)
            bar.set(total / month_total if month_total else 0)

        # Active goals
        for w in self._goals_frame.winfo_children():
            w.destroy()
        goals = summary["active_goals"]
        if not goals:
            ctk.CTkLabel(self._goals_frame, text="No active goals.", text_color="gray60").pack(pady=20)
        for goal in goals:
            status = goal_status(goal)
            f = ctk.CTkFrame(self._goals_frame, fg_color="transparent")
            f.pack(fill="x", pady=4, padx=4)
            top_row = ctk.CTkFrame(f, fg_color="transparent")
            top_row.pack(fill="x")
            ctk.CTkLabel(top_row, text=goal.name, anchor="w").pack(side="left")
            ctk.CTkLabel(
                top_row, text=GOAL_STATUS_LABELS[status],
                text_color=GOAL_STATUS_COLORS[status], anchor="e",
            ).pack(side="right")
            bar = ctk.CTkProgressBar(f, progress_color=GOAL_STATUS_COLORS[status])
            bar.pack(fill="x", pady=2)
            bar.set(goal.progress_percent / 100)
            ctk.CTkLabel(
                f,
                text=(
                    f"{format_currency(goal.current_amount, goal.currency)} / "
                    f"{format_currency(goal.target_amount, goal.currency)}"
                ),
                text_color="gray60", font=ctk.CTkFont(size=11), anchor="w",
            ).pack(fill="x")

    def _make_card(self, parent, col, label, text, color):
        card = ctk.CTkFrame(parent, fg_color=("gray90", "gray20"), corner_radius=10)
        card.grid(row=0, column=col, padx=6, sticky="ew")
        card.grid_columnconfigure(0, weight=1)
        ctk.CTkLabel(
            card, text=label, font=ctk.CTkFont(size=12), text_color="gray60",
        ).grid(row=0, column=0, pady=(12, 0), padx=16)
        ctk.CTkLabel(
            card, text=text, font=ctk.CTkFont(size=20, weight="bold"), text_color=color,
        ).grid(row=1, column=0, pady=(4, 12), padx=16)
