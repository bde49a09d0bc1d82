import customtkinter as ctk
from tkcalendar import Calendar
import tkinter as tk
from tkinter import ttk
from datetime import date

from utils.date_helpers import format_date, format_display_date, parse_date, parse_display_date

_CALENDAR_COLORS = {
    "Dark":  {"bg": "#2b2b2b", "fg": "#ffffff"},
    "Light": {"bg": "#ffffff", "fg": "#000000"},
}
_SELECT_BG = "#1f6aa5"
_ERROR_BORDER = "#F44336"
_NORMAL_BORDER = ("gray65", "gray35")


class DatePickerWidget(ctk.CTkFrame):
    """Entry in the user's display format plus a calendar popup.

    .get() returns YYYY-MM-DD (or '' when empty/invalid); .set() takes
    YYYY-MM-DD. With optional=True an empty value is valid and a clear (✕)
    button is shown, which suits deadlines and filter bounds. on_change is
    called with the storage string whenever a valid date is committed.
    """

    def __init__(
        self,
        master,
        initial_date: str | None = None,
        date_format: str = "MM/DD/YYYY",
        optional: bool = False,
        on_change=None,
        width: int = 110,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self.grid_columnconfigure(0, weight=1)
        self._date_format = date_format
        self._optional = optional
        self._on_change = on_change
        self._popup: ctk.CTkToplevel | None = None

        self._var = tk.StringVar(
            value=format_display_date(initial_date, date_format) if initial_date else ""
        )
        self._entry = ctk.CTkEntry(self, textvariable=self._var, width=width)
        self._entry.grid(row=0, column=0, sticky="ew")
        self._entry.bind("<FocusOut>", self._commit)
        self._entry.bind("<Return>", self._commit)

        ctk.CTkButton(self, text="📅", width=32, command=self._toggle_popup).grid(
            row=0, column=1, padx=(4, 0)
        )
        if optional:
            ctk.CTkButton(
                self, text="✕", width=28,
                fg_color="transparent", border_width=1,
                text_color=("gray10", "gray90"),
                command=self.clear,
            ).grid(row=0, column=2, padx=(4, 0))

    # ── Public API ───────────────────────────────────────────────────────────
    def get(self) -> str:
        d = self._parsed()
        return format_date(d) if d else ""

    def set(self, date_str: str | None):
        d = parse_date(date_str) if date_str else None
        self._var.set(format_display_date(format_date(d), self._date_format) if d else "")
        self._entry.configure(border_color=_NORMAL_BORDER)

    def clear(self):
        self.set(None)
        if self._on_change:
            self._on_change("")

    def is_valid(self) -> bool:
        if not self._var.get().strip():
            return self._optional
        return self._parsed() is not None

    # ── Internals ────────────────────────────────────────────────────────────
    def _parsed(self) -> date | None:
        raw = self._var.get().strip()
        if not raw:
            return None
        return parse_display_date(raw, self._date_format) or parse_date(
            raw.replace("/", "-").replace(".", "-")
        )

    def _commit(self, _event=None):
        if not self._var.get().strip():
            self._entry.configure(border_color=_NORMAL_BORDER)
            if self._optional and self._on_change:
                self._on_change("")
            return
        d = self._parsed()
        if d is None:
            self._entry.configure(border_color=_ERROR_BORDER)
            return
        self.set(format_date(d))
        if self._on_change:
            self._on_change(format_date(d))

    def _toggle_popup(self):
        if self._popup is not None and self._popup.winfo_exists():
            self._close_popup()
            return

        colors = _CALENDAR_COLORS.get(ctk.get_appearance_mode(), _CALENDAR_COLORS["Light"])
        popup = ctk.CTkToplevel(self)
        popup.overrideredirect(True)
        popup.resizable(False, False)
        self._popup = popup

        style = ttk.Style(popup)
        style.theme_use("default")
        style.configure(
            "Calendar.Treeview",
            background=colors["bg"], foreground=colors["fg"], fieldbackground=colors["bg"],
        )

        current = self._parsed() or date.today()
        cal = Calendar(
            popup,
            selectmode="day",
            year=current.year,
            month=current.month,
            day=current.day,
            date_pattern="yyyy-mm-dd",
            background=colors["bg"],
            foreground=colors["fg"],
            headersbackground=colors["bg"],
            headersforeground=colors["fg"],
            selectbackground=_SELECT_BG,
            weekendbackground=colors["bg"],
            weekendforeground=colors["fg"],
            othermonthforeground="gray60",
            bordercolor=colors["bg"],
        )
        cal.pack(padx=4, pady=4)
        cal.bind("<<CalendarSelected>>", lambda _e: self._on_picked(cal.get_date()))

        self._entry.update_idletasks()
        x = self._entry.winfo_rootx()
        y = self._entry.winfo_rooty() + self._entry.winfo_height() + 2
        popup.geometry(f"+{x}+{y}")
        popup.bind("<FocusOut>", lambda _e: self._close_if_unfocused())

    def _on_picked(self, iso: str):
        self.set(iso)
        self._close_popup()
        if self._on_change:
            self._on_change(self.get())

    def _close_if_unfocused(self):
        popup = self._popup
        if popup is None or not popup.winfo_exists():
            return
        focused = popup.focus_get()
        if focused is None or not str(focused).startswith(str(popup)):
            self._close_popup()

    def _close_popup(self):
        if self._popup is not None and self._popup.winfo_exists():
            self._popup.destroy()
        self._popup = None
