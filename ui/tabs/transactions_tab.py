import customtkinter as ctk

from models.category import icon_glyph
from models.expense import Expense
from services.sync_service import SyncService
from stores.app_store import AppStore
from ui.components.confirm_dialog import ConfirmDialog
from ui.components.date_picker import DatePickerWidget
from ui.components.expense_form import ExpenseForm
from utils.currency import format_currency
from utils.date_helpers import format_display_date
from utils.errors import FinanceTrackerError, ValidationError

_MAX_RENDERED_ROWS = 100
_ALL_CATEGORIES = "All categories"


class TransactionsTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        store: AppStore,
        sync_service: SyncService,
        notify_refresh,   # callable(scope)
        show_error,       # callable(message)
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._store = store
        self._sync = sync_service
        self._notify_refresh = notify_refresh
        self._show_error = show_error
        self._date_format = date_format

        self._category_var = ctk.StringVar(value=_ALL_CATEGORIES)
        self._min_var = ctk.StringVar()
        self._max_var = ctk.StringVar()
        self._search_var = ctk.StringVar()
        self._search_var.trace_add("write", lambda *_: self._apply_filter(search_term=self._search_var.get()))

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(3, weight=1)

        self._build_filter_bar()
        self._build_summary()
        self._build_header()
        self._build_list()
        self._load()

    def refresh(self):
        self._load()

    # ── Filter bar ──────────────────────────────────────────────────────────
    def _build_filter_bar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))

        ctk.CTkLabel(bar, text="From").grid(row=0, column=0, padx=(10, 4), pady=6)
        self._start_picker = DatePickerWidget(
            bar, date_format=self._date_format, optional=True,
            on_change=lambda d: self._apply_filter(start_date=d),
        )
        self._start_picker.grid(row=0, column=1, padx=4)

        ctk.CTkLabel(bar, text="To").grid(row=0, column=2, padx=(8, 4))
        self._end_picker = DatePickerWidget(
            bar, date_format=self._date_format, optional=True,
            on_change=lambda d: self._apply_filter(end_date=d),
        )
        self._end_picker.grid(row=0, column=3, padx=4)

        self._category_combo = ctk.CTkComboBox(
            bar, variable=self._category_var, width=150, state="readonly",
            command=lambda _: self._on_category_change(),
        )
        self._category_combo.grid(row=0, column=4, padx=8)

        ctk.CTkButton(
            bar, text="+ Add Expense", width=110, command=self._open_add_form,
        ).grid(row=0, column=5, padx=(8, 10), sticky="e")
        bar.grid_columnconfigure(5, weight=1)

        ctk.CTkLabel(bar, text="Min").grid(row=1, column=0, padx=(10, 4), pady=(0, 6))
        min_entry = ctk.CTkEntry(bar, textvariable=self._min_var, width=80)
        min_entry.grid(row=1, column=1, padx=4, pady=(0, 6), sticky="w")
        ctk.CTkLabel(bar, text="Max").grid(row=1, column=2, padx=(8, 4), pady=(0, 6))
        max_entry = ctk.CTkEntry(bar, textvariable=self._max_var, width=80)
        max_entry.grid(row=1, column=3, padx=4, pady=(0, 6), sticky="w")
        for entry in (min_entry, max_entry):
            entry.bind("<Return>", lambda _e: self._apply_amounts())
            entry.bind("<FocusOut>", lambda _e: self._apply_amounts())

        ctk.CTkEntry(
            bar, textvariable=self._search_var,
            placeholder_text="Search notes or category…", width=150,
        ).grid(row=1, column=4, padx=8, pady=(0, 6))

        ctk.CTkButton(
            bar, text="Clear Filters", width=110,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._clear_filters,
        ).grid(row=1, column=5, padx=(8, 10), pady=(0, 6), sticky="e")

    def _build_summary(self):
        self._summary_label = ctk.CTkLabel(self, text="", text_color="gray60", anchor="w")
        self._summary_label.grid(row=1, column=0, sticky="ew", padx=14, pady=(4, 0))

    # ── Column headers ───────────────────────────────────────────────────────
    def _build_header(self):
        hdr = ctk.CTkFrame(self, fg_color=("gray82", "gray22"), corner_radius=0)
        hdr.grid(row=2, column=0, sticky="ew", padx=8, pady=(4, 0))
        cols = [("Date", 85), ("Category", 150), ("Notes", 220),
                ("Recurring", 80), ("Amount", 100), ("Actions", 100)]
        for i, (label, width) in enumerate(cols):
            ctk.CTkLabel(
                hdr, text=label, width=width, anchor="w",
                font=ctk.CTkFont(weight="bold"),
            ).grid(row=0, column=i, padx=4, pady=4, sticky="w")

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=3, column=0, sticky="nsew", padx=8, pady=(0, 8))
        self._scroll.grid_columnconfigure(0, weight=1)

    # ── Filter handling ──────────────────────────────────────────────────────
    def _apply_filter(self, **changes):
        try:
            self._store.expenses.set_filter(**changes)
        except ValidationError as e:
            self._show_error(str(e))
            return
        self._load()

    def _apply_amounts(self):
        self._apply_filter(
            min_amount=self._min_var.get().strip() or None,
            max_amount=self._max_var.get().strip() or None,
        )

    def _on_category_change(self):
        name = self._category_var.get()
        cat = next((c for c in self._store.categories.get_all() if c.name == name), None)
        self._apply_filter(category_id=cat.id if cat else None)

    def _clear_filters(self):
        self._store.expenses.clear_filter()
        self._start_picker.set(None)
        self._end_picker.set(None)
        self._category_var.set(_ALL_CATEGORIES)
        self._min_var.set("")
        self._max_var.set("")
        # Setting the search var re-applies the (now empty) filter and reloads.
        self._search_var.set("")

    # ── List ─────────────────────────────────────────────────────────────────
    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        categories = self._store.categories.get_all()
        self._category_combo.configure(values=[_ALL_CATEGORIES] + [c.name for c in categories])
        active = self._store.expenses.filter.category_id
        if active is not None and self._store.categories.get(active) is None:
            # Filtered category was deleted; drop that constraint.
            self._store.expenses.set_filter(category_id=None)
            self._category_var.set(_ALL_CATEGORIES)

        rows = self._store.expenses.filtered()
        currency = self._store.preferences.preferences.default_currency
        total = sum(e.amount for e in rows)
        suffix = "" if self._store.expenses.filter.is_empty else " (filtered)"
        self._summary_label.configure(
            text=f"{len(rows)} expense(s), {format_currency(total, currency)} total{suffix}"
        )

        if not rows:
            message = (
                "No expenses yet. Use + Add Expense to record one."
                if len(self._store.expenses) == 0
                else "No expenses match the current filters."
            )
            ctk.CTkLabel(self._scroll, text=message, text_color="gray60").grid(row=0, column=0, pady=20)
            return

        for idx, exp in enumerate(rows[:_MAX_RENDERED_ROWS]):
            self._add_row(idx, exp)

        if len(rows) > _MAX_RENDERED_ROWS:
            ctk.CTkLabel(
                self._scroll,
                text=f"Showing {_MAX_RENDERED_ROWS} of {len(rows)} expenses. Narrow the filters to see more.",
                text_color="gray60",
                font=ctk.CTkFont(size=11),
            ).grid(row=_MAX_RENDERED_ROWS, column=0, pady=8)

    def _add_row(self, idx: int, exp: Expense):
        bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
        row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
        row.grid(row=idx, column=0, sticky="ew", pady=1, padx=2)

        ctk.CTkLabel(
            row, text=format_display_date(exp.date, self._date_format), width=85, anchor="w"
        ).grid(row=0, column=0, padx=4, pady=4)

        cat = self._store.categories.get(exp.category_id)
        cat_text = f"{icon_glyph(cat.icon)}  {cat.name}" if cat else self._store.expenses.category_name(exp)
        ctk.CTkLabel(row, text=cat_text, width=150, anchor="w").grid(row=0, column=1, padx=4)

        ctk.CTkLabel(row, text=exp.notes or "—", width=220, anchor="w").grid(row=0, column=2, padx=4)

        ctk.CTkLabel(
            row, text=(exp.recurring_frequency or "").title() if exp.is_recurring else "",
            width=80, anchor="w", text_color="#2196F3",
        ).grid(row=0, column=3, padx=4)

        ctk.CTkLabel(
            row, text=format_currency(exp.amount, exp.currency), width=100, anchor="e",
            text_color="#F44336",
        ).grid(row=0, column=4, padx=4)

        acts = ctk.CTkFrame(row, fg_color="transparent")
        acts.grid(row=0, column=5, padx=(4, 6))
        ctk.CTkButton(
            acts, text="Edit", width=44, height=24,
            command=lambda e=exp: self._open_edit_form(e),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Del", width=38, height=24,
            fg_color="#F44336", hover_color="#D32F2F",
            command=lambda e=exp: self._delete_expense(e),
        ).pack(side="left")

    # ── Actions ──────────────────────────────────────────────────────────────
    def _open_add_form(self):
        form = ExpenseForm(
            self.winfo_toplevel(), self._store, self._sync, date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("expense")

    def _open_edit_form(self, exp: Expense):
        form = ExpenseForm(
            self.winfo_toplevel(), self._store, self._sync,
            expense=exp, date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("expense")

    def _delete_expense(self, exp: Expense):
        dlg = ConfirmDialog(
            self.winfo_toplevel(),
            "Delete Expense",
            f"Delete this expense of {format_currency(exp.amount, exp.currency)}?",
        )
        if not dlg.result:
            return
        try:
            self._sync.remove_expense(exp.id)
        except FinanceTrackerError as e:
            self._show_error(f"Could not delete expense: {e}")
        self._notify_refresh("expense")
