import customtkinter as ctk

from models.savings_goal import ProgressMode, SavingsGoal
from services.sync_service import SyncService
from ui.components.confirm_dialog import center_on_master
from utils.currency import format_currency
from utils.errors import FinanceTrackerError

_MODE_LABELS = {
    "Add contribution": ProgressMode.INCREMENTAL,
    "Set saved amount": ProgressMode.ABSOLUTE,
}


class ProgressDialog(ctk.CTkToplevel):
    """Record savings progress; amounts past the target are capped at the target."""

    def __init__(self, master, sync_service: SyncService, goal: SavingsGoal, **kwargs):
        super().__init__(master, **kwargs)
        self._sync = sync_service
        self._goal = goal
        self.saved = False

        self.title(f"Update Progress: {goal.name}")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(
            self,
            text=(
                f"Saved {format_currency(goal.current_amount, goal.currency)} of "
                f"{format_currency(goal.target_amount, goal.currency)}"
            ),
            text_color="gray60",
        ).grid(row=0, column=0, columnspan=2, padx=16, pady=(16, 8), sticky="w")

        self._mode_var = ctk.StringVar(value=next(iter(_MODE_LABELS)))
        ctk.CTkSegmentedButton(
            self, values=list(_MODE_LABELS), variable=self._mode_var,
        ).grid(row=1, column=0, columnspan=2, padx=16, pady=4, sticky="ew")

        ctk.CTkLabel(self, text="Amount:").grid(row=2, column=0, padx=(16, 8), pady=4, sticky="e")
        self._amount_var = ctk.StringVar()
        entry = ctk.CTkEntry(self, textvariable=self._amount_var, width=160)
        entry.grid(row=2, column=1, padx=(0, 16), pady=4, sticky="ew")
        entry.bind("<Return>", lambda _e: self._on_save())

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=280, anchor="w",
        ).grid(row=3, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")

        buttons = ctk.CTkFrame(self, fg_color="transparent")
        buttons.grid(row=4, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            buttons, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        ctk.CTkButton(buttons, text="Update", width=90, command=self._on_save).pack(side="right")

        self.transient(master)
        self.grab_set()
        center_on_master(self)
        entry.focus_set()

    def _on_save(self):
        try:
            amount = float(self._amount_var.get().replace(",", ""))
        except ValueError:
            self._error_var.set("Amount must be a number.")
            return
        try:
            self._sync.update_goal_progress(
                self._goal.id, amount, _MODE_LABELS[self._mode_var.get()]
            )
        except FinanceTrackerError as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()
