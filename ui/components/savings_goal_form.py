import customtkinter as ctk

from models.savings_goal import SavingsGoal
from services.sync_service import SyncService
from ui.components.confirm_dialog import center_on_master
from ui.components.date_picker import DatePickerWidget
from utils.constants import CURRENCY_SYMBOLS
from utils.errors import FinanceTrackerError


class SavingsGoalForm(ctk.CTkToplevel):
    """Create or edit a savings goal. New goals always start at zero saved."""

    def __init__(
        self,
        master,
        sync_service: SyncService,
        goal: SavingsGoal | None = None,
        default_currency: str = "USD",
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._sync = sync_service
        self._goal = goal
        self.saved = False

        self.title("Edit Savings Goal" if goal else "New Savings Goal")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(self, text="Name:").grid(row=0, column=0, padx=(16, 8), pady=(16, 4), sticky="e")
        self._name_var = ctk.StringVar(value=goal.name if goal else "")
        ctk.CTkEntry(self, textvariable=self._name_var, width=200).grid(
            row=0, column=1, padx=(0, 16), pady=(16, 4), sticky="ew"
        )

        ctk.CTkLabel(self, text="Target:").grid(row=1, column=0, padx=(16, 8), pady=4, sticky="e")
        self._target_var = ctk.StringVar(value=f"{goal.target_amount:.2f}" if goal else "")
        ctk.CTkEntry(self, textvariable=self._target_var, width=200).grid(
            row=1, column=1, padx=(0, 16), pady=4, sticky="ew"
        )

        ctk.CTkLabel(self, text="Currency:").grid(row=2, column=0, padx=(16, 8), pady=4, sticky="e")
        currencies = list(CURRENCY_SYMBOLS)
        current = goal.currency if goal else default_currency
        if current not in currencies:
            currencies.append(current)
        self._currency_var = ctk.StringVar(value=current)
        ctk.CTkComboBox(
            self, values=currencies, variable=self._currency_var, width=200, state="readonly",
        ).grid(row=2, column=1, padx=(0, 16), pady=4, sticky="ew")

        ctk.CTkLabel(self, text="Deadline:").grid(row=3, column=0, padx=(16, 8), pady=4, sticky="e")
        self._deadline = DatePickerWidget(
            self, initial_date=goal.deadline if goal else None,
            date_format=date_format, optional=True,
        )
        self._deadline.grid(row=3, column=1, padx=(0, 16), pady=4, sticky="w")

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=300, anchor="w",
        ).grid(row=4, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")

        buttons = ctk.CTkFrame(self, fg_color="transparent")
        buttons.grid(row=5, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            buttons, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        ctk.CTkButton(buttons, text="Save", width=90, command=self._on_save).pack(side="right")

        self.transient(master)
        self.grab_set()
        center_on_master(self)

    def _on_save(self):
        if not self._deadline.is_valid():
            self._error_var.set("Invalid deadline.")
            return
        try:
            target = float(self._target_var.get().replace(",", ""))
        except ValueError:
            self._error_var.set("Target must be a number.")
            return
        fields = {
            "name": self._name_var.get(),
            "target_amount": target,
            "deadline": self._deadline.get() or None,
            "currency": self._currency_var.get(),
        }
        try:
            if self._goal:
                self._sync.update_goal(self._goal.id, **fields)
            else:
                self._sync.add_goal(**fields)
        except FinanceTrackerError as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()
