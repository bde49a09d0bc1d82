import customtkinter as ctk

from models.savings_goal import SavingsGoal
from services.aggregation import GOAL_STATUS_COLORS, GOAL_STATUS_LABELS, GoalStatus
from services.report_service import ReportService
from services.sync_service import SyncService
from stores.app_store import AppStore
from ui.components.confirm_dialog import ConfirmDialog
from ui.components.progress_dialog import ProgressDialog
from ui.components.savings_goal_form import SavingsGoalForm
from utils.currency import format_currency
from utils.date_helpers import format_display_date
from utils.errors import FinanceTrackerError


class SavingsTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        store: AppStore,
        report_service: ReportService,
        sync_service: SyncService,
        notify_refresh,
        show_error,
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._store = store
        self._report_svc = report_service
        self._sync = sync_service
        self._notify_refresh = notify_refresh
        self._show_error = show_error
        self._date_format = date_format

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_toolbar()
        self._build_list()
        self._load()

    def refresh(self):
        self._load()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))

        ctk.CTkLabel(
            bar, text="Savings Goals",
            font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(side="left", padx=(12, 16), pady=8)
        ctk.CTkButton(bar, text="+ New Goal", command=self._open_add).pack(side="left", padx=4, pady=6)

        self._counts_label = ctk.CTkLabel(bar, text="", text_color="gray60")
        self._counts_label.pack(side="right", padx=12)

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        counts = self._report_svc.count_by_status()
        self._counts_label.configure(
            text=", ".join(
                f"{n} {GOAL_STATUS_LABELS[s].lower()}" for s, n in counts.items() if n
            )
        )

        cards = self._report_svc.get_goal_cards()
        if not cards:
            ctk.CTkLabel(
                self._scroll,
                text="No savings goals yet. Click '+ New Goal' to create one.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return

        for idx, (goal, status) in enumerate(cards):
            self._add_goal_card(idx, goal, status)

    def _add_goal_card(self, idx: int, goal: SavingsGoal, status: GoalStatus):
        color = GOAL_STATUS_COLORS[status]
        card = ctk.CTkFrame(self._scroll, fg_color=("gray90", "gray20"), corner_radius=8)
        card.grid(row=idx, column=0, sticky="ew", padx=4, pady=4)
        card.grid_columnconfigure(0, weight=1)

        top = ctk.CTkFrame(card, fg_color="transparent")
        top.grid(row=0, column=0, sticky="ew", padx=12, pady=(10, 2))
        ctk.CTkLabel(
            top, text=goal.name, font=ctk.CTkFont(size=13, weight="bold"), anchor="w",
        ).pack(side="left")
        ctk.CTkLabel(
            top, text=GOAL_STATUS_LABELS[status], text_color=color,
            font=ctk.CTkFont(size=11, weight="bold"),
        ).pack(side="left", padx=(8, 0))
        ctk.CTkLabel(
            top,
            text=(
                f"{format_currency(goal.current_amount, goal.currency)} / "
                f"{format_currency(goal.target_amount, goal.currency)}"
            ),
            text_color="gray60",
        ).pack(side="right")

        bar = ctk.CTkProgressBar(card, progress_color=color)
        bar.grid(row=1, column=0, sticky="ew", padx=12, pady=4)
        bar.set(goal.progress_percent / 100)

        bottom = ctk.CTkFrame(card, fg_color="transparent")
        bottom.grid(row=2, column=0, sticky="ew", padx=12, pady=(2, 10))
        detail = f"{goal.progress_percent:.0f}%"
        if not goal.is_completed:
            detail += f", {format_currency(goal.remaining, goal.currency)} to go"
        if goal.deadline:
            detail += f", due {format_display_date(goal.deadline, self._date_format)}"
        ctk.CTkLabel(bottom, text=detail, text_color="gray60", anchor="w").pack(side="left")

        ctk.CTkButton(
            bottom, text="Del", width=44, height=24,
            fg_color="#F44336", hover_color="#D32F2F",
            command=lambda g=goal: self._on_delete(g),
        ).pack(side="right")
        ctk.CTkButton(
            bottom, text="Edit", width=44, height=24,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda g=goal: self._open_edit(g),
        ).pack(side="right", padx=4)
        ctk.CTkButton(
            bottom, text="Update Progress", width=120, height=24,
            command=lambda g=goal: self._open_progress(g),
        ).pack(side="right")

    def _open_add(self):
        form = SavingsGoalForm(
            self.winfo_toplevel(), self._sync,
            default_currency=self._store.preferences.preferences.default_currency,
            date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("goal")

    def _open_edit(self, goal: SavingsGoal):
        form = SavingsGoalForm(
            self.winfo_toplevel(), self._sync, goal=goal, date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("goal")

    def _open_progress(self, goal: SavingsGoal):
        dlg = ProgressDialog(self.winfo_toplevel(), self._sync, goal)
        self.wait_window(dlg)
        if dlg.saved:
            self._notify_refresh("goal")

    def _on_delete(self, goal: SavingsGoal):
        dlg = ConfirmDialog(
            self.winfo_toplevel(),
            title="Delete Savings Goal",
            message=f"Delete '{goal.name}'? Its saved progress will be lost.",
        )
        if not dlg.result:
            return
        try:
            self._sync.remove_goal(goal.id)
        except FinanceTrackerError as e:
            self._show_error(f"Could not delete goal: {e}")
        self._notify_refresh("goal")
