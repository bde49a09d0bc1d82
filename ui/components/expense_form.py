import customtkinter as ctk

from models.expense import Expense
from services.sync_service import SyncService
from stores.app_store import AppStore
from ui.components.confirm_dialog import center_on_master
from ui.components.date_picker import DatePickerWidget
from utils.constants import CURRENCY_SYMBOLS, RECURRING_FREQUENCIES, UNCATEGORIZED
from utils.date_helpers import today_str
from utils.errors import FinanceTrackerError


class ExpenseForm(ctk.CTkToplevel):
    """Add or edit an expense."""

    _last_date: str = today_str()  # reset to today on each app launch

    def __init__(
        self,
        master,
        store: AppStore,
        sync_service: SyncService,
        expense: Expense | None = None,
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._store = store
        self._sync = sync_service
        self._expense = expense
        self.saved = False

        self.title("Edit Expense" if expense else "Add Expense")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        self._categories = store.categories.get_all()
        cat_names = [c.name for c in self._categories]
        default_currency = store.preferences.preferences.default_currency

        r = 0
        self._label("Amount:", r, top=16)
        self._amount_var = ctk.StringVar(value=f"{expense.amount:.2f}" if expense else "")
        ctk.CTkEntry(self, textvariable=self._amount_var, width=200).grid(
            row=r, column=1, padx=(0, 16), pady=(16, 4), sticky="ew"
        )
        r += 1

        self._label("Currency:", r)
        currencies = list(CURRENCY_SYMBOLS)
        current_currency = expense.currency if expense else default_currency
        if current_currency not in currencies:
            currencies.append(current_currency)
        self._currency_var = ctk.StringVar(value=current_currency)
        ctk.CTkComboBox(
            self, values=currencies, variable=self._currency_var, width=200, state="readonly",
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._label("Category:", r)
        current_cat = store.categories.display_name(expense.category_id) if expense else ""
        if not current_cat and cat_names:
            current_cat = cat_names[0]
        values = cat_names if current_cat in cat_names else cat_names + [UNCATEGORIZED]
        self._cat_var = ctk.StringVar(value=current_cat or UNCATEGORIZED)
        ctk.CTkComboBox(
            self, values=values or [UNCATEGORIZED], variable=self._cat_var,
            width=200, state="readonly",
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._label("Date:", r)
        self._date_picker = DatePickerWidget(
            self,
            initial_date=expense.date if expense else ExpenseForm._last_date,
            date_format=date_format,
        )
        self._date_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        self._label("Notes:", r)
        self._notes_var = ctk.StringVar(value=expense.notes if expense else "")
        ctk.CTkEntry(self, textvariable=self._notes_var, width=200).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._recurring_var = ctk.BooleanVar(value=expense.is_recurring if expense else False)
        ctk.CTkCheckBox(
            self, text="Recurring", variable=self._recurring_var,
            command=self._on_recurring_toggle,
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        self._label("Frequency:", r)
        self._freq_var = ctk.StringVar(
            value=(expense.recurring_frequency if expense else None) or "monthly"
        )
        self._freq_combo = ctk.CTkComboBox(
            self, values=RECURRING_FREQUENCIES, variable=self._freq_var,
            width=200, state="readonly",
        )
        self._freq_combo.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1
        self._on_recurring_toggle()

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=300, anchor="w",
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        buttons = ctk.CTkFrame(self, fg_color="transparent")
        buttons.grid(row=r, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
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

    def _label(self, text, row, top=4):
        ctk.CTkLabel(self, text=text).grid(row=row, column=0, padx=(16, 8), pady=(top, 4), sticky="e")

    def _on_recurring_toggle(self):
        self._freq_combo.configure(state="readonly" if self._recurring_var.get() else "disabled")

    def _selected_category_id(self) -> str | None:
        name = self._cat_var.get()
        cat = next((c for c in self._categories if c.name == name), None)
        if cat:
            return cat.id
        # Keep a dangling reference rather than silently re-categorizing.
        return self._expense.category_id if self._expense else None

    def _on_save(self):
        if not self._date_picker.is_valid():
            self._error_var.set("Invalid date.")
            return
        try:
            amount = float(self._amount_var.get().replace(",", ""))
        except ValueError:
            self._error_var.set("Amount must be a number.")
            return
        is_recurring = self._recurring_var.get()
        fields = {
            "amount": amount,
            "category_id": self._selected_category_id(),
            "date": self._date_picker.get(),
            "notes": self._notes_var.get(),
            "currency": self._currency_var.get(),
            "is_recurring": is_recurring,
            "recurring_frequency": self._freq_var.get() if is_recurring else None,
        }
        try:
            if self._expense:
                self._sync.update_expense(self._expense.id, **fields)
            else:
                self._sync.add_expense(**fields)
        except FinanceTrackerError as e:
            self._error_var.set(str(e))
            return
        ExpenseForm._last_date = fields["date"]
        self.saved = True
        self.destroy()
