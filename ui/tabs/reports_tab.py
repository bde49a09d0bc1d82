import customtkinter as ctk
import tkinter as tk
from matplotlib.figure import Figure
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg

from services.report_service import ReportService
from stores.app_store import AppStore
from utils.constants import REPORT_MONTHS
from utils.currency import format_currency, format_percent, format_signed
from utils.date_helpers import current_month_str, friendly_month, next_month, prev_month

_FALLBACK_COLOR = "#9E9E9E"
_BAR_COLOR = "#F44336"
_HIGHLIGHT_COLOR = "#2196F3"


def _theme_axes(fig, *axes):
    """Match the figure background and tick colors to the current appearance mode."""
    dark = ctk.get_appearance_mode() == "Dark"
    face = "#2b2b2b" if dark else "#e4e4e4"
    ink = "#aaaaaa" if dark else "#444444"
    fig.patch.set_facecolor(face)
    for ax in axes:
        ax.set_facecolor(face)
        ax.tick_params(colors=ink, labelsize=8)
        ax.title.set_color(ink)
        for spine in ax.spines.values():
            spine.set_edgecolor(ink)


def _short_amount(value, _pos=None) -> str:
    return f"{value / 1000:.0f}k" if abs(value) >= 1000 else f"{value:.0f}"


class ReportsTab(ctk.CTkFrame):
    """Month-by-month spending trend plus the category split for one month."""

    def __init__(self, master, store: AppStore, report_service: ReportService, **kwargs):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._store = store
        self._report_svc = report_service
        self._month = current_month_str()

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_month_nav()
        self._cards = ctk.CTkFrame(self, fg_color="transparent")
        self._cards.grid(row=1, column=0, sticky="ew", padx=16, pady=10)
        self._cards.grid_columnconfigure((0, 1, 2), weight=1)
        self._build_chart_area()
        self._load()

    def refresh(self):
        self._load()

    # ── Layout ───────────────────────────────────────────────────────────────
    def _build_month_nav(self):
        nav = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        nav.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))

        ctk.CTkButton(nav, text="◀", width=28, command=lambda: self._step(-1)).pack(
            side="left", padx=(12, 4), pady=8
        )
        self._month_label = ctk.CTkLabel(
            nav, text="", width=150, font=ctk.CTkFont(size=14, weight="bold"),
        )
        self._month_label.pack(side="left")
        ctk.CTkButton(nav, text="▶", width=28, command=lambda: self._step(1)).pack(side="left", padx=4)
        ctk.CTkButton(
            nav, text="This Month", width=90,
            fg_color="transparent", border_width=1, text_color=("gray10", "gray90"),
            command=self._jump_to_current,
        ).pack(side="right", padx=12)

    def _build_chart_area(self):
        area = ctk.CTkFrame(self, fg_color=("gray90", "gray20"), corner_radius=8)
        area.grid(row=2, column=0, sticky="nsew", padx=16, pady=(0, 12))
        area.grid_columnconfigure(0, weight=1)
        area.grid_rowconfigure(0, weight=1)

        # One figure: trend bars on the left, category pie on the right.
        self._fig = Figure(figsize=(8, 3.2), dpi=80, tight_layout=True)
        grid = self._fig.add_gridspec(1, 2, width_ratios=(3, 2))
        self._trend_ax = self._fig.add_subplot(grid[0, 0])
        self._split_ax = self._fig.add_subplot(grid[0, 1])
        self._canvas = FigureCanvasTkAgg(self._fig, master=area)
        self._canvas.get_tk_widget().grid(row=0, column=0, sticky="nsew", padx=8, pady=(8, 4))

        self._split_table = ctk.CTkScrollableFrame(area, fg_color="transparent", height=120)
        self._split_table.grid(row=1, column=0, sticky="ew", padx=8, pady=(0, 8))
        self._split_table.grid_columnconfigure(1, weight=1)

    def _make_card(self, column: int, title: str, value: str, color: str):
        card = ctk.CTkFrame(self._cards, fg_color=("gray90", "gray20"), corner_radius=10)
        card.grid(row=0, column=column, padx=6, sticky="ew")
        ctk.CTkLabel(card, text=title, text_color="gray60").pack(pady=(10, 0), padx=16)
        ctk.CTkLabel(
            card, text=value, text_color=color, font=ctk.CTkFont(size=18, weight="bold"),
        ).pack(pady=(4, 10), padx=16)

    # ── Navigation ───────────────────────────────────────────────────────────
    def _step(self, direction: int):
        self._month = next_month(self._month) if direction > 0 else prev_month(self._month)
        self._load()

    def _jump_to_current(self):
        self._month = current_month_str()
        self._load()

    # ── Data ─────────────────────────────────────────────────────────────────
    def _load(self):
        self._month_label.configure(text=friendly_month(self._month))
        currency = self._store.preferences.preferences.default_currency

        series = self._report_svc.get_monthly_chart_data(REPORT_MONTHS, self._month)
        totals = [point["total"] for point in series]
        current = totals[-1] if totals else 0.0
        previous = totals[-2] if len(totals) > 1 else 0.0
        change = (current - previous) / previous * 100 if previous else 0.0
        average = sum(totals) / len(totals) if totals else 0.0

        for w in self._cards.winfo_children():
            w.destroy()
        self._make_card(0, friendly_month(self._month), format_currency(current, currency), _BAR_COLOR)
        delta = f"{format_signed(current - previous, currency)} ({format_percent(change)})"
        self._make_card(1, "vs Previous", delta, _BAR_COLOR if change > 0 else "#4CAF50")
        self._make_card(
            2, f"{REPORT_MONTHS}-Month Average", format_currency(average, currency), _HIGHLIGHT_COLOR
        )

        split = sorted(
            (row for row in self._report_svc.get_category_breakdown(self._month) if row["total"] > 0),
            key=lambda row: row["total"],
            reverse=True,
        )
        self._fill_split_table(split, current, currency)
        # Draw after the canvas has its real size.
        self.after(50, lambda: self._draw(series, split))

    def _fill_split_table(self, split: list[dict], month_total: float, currency: str):
        for w in self._split_table.winfo_children():
            w.destroy()
        if not split:
            ctk.CTkLabel(self._split_table, text="No expenses recorded this month.",
                         text_color="gray60").grid(row=0, column=0, columnspan=3, pady=6)
            return
        for r, row in enumerate(split):
            tk.Label(self._split_table, bg=row["color"] or _FALLBACK_COLOR, width=2).grid(
                row=r, column=0, padx=(0, 6), pady=1
            )
            ctk.CTkLabel(self._split_table, text=row["name"], anchor="w").grid(
                row=r, column=1, sticky="w"
            )
            share = row["total"] / month_total * 100 if month_total else 0.0
            ctk.CTkLabel(
                self._split_table,
                text=f"{format_currency(row['total'], currency)}  ({share:.0f}%)",
                anchor="e", font=ctk.CTkFont(size=11),
            ).grid(row=r, column=2, sticky="e", padx=(0, 6))

    def _draw(self, series: list[dict], split: list[dict]):
        trend, pie = self._trend_ax, self._split_ax
        trend.clear()
        pie.clear()
        _theme_axes(self._fig, trend, pie)
        trend.set_title(f"Last {REPORT_MONTHS} months", fontsize=10)
        pie.set_title("By category", fontsize=10)

        if any(point["total"] for point in series):
            positions = range(len(series))
            colors = [_BAR_COLOR] * len(series)
            colors[-1] = _HIGHLIGHT_COLOR
            trend.bar(positions, [point["total"] for point in series], 0.6, color=colors)
            trend.set_xticks(list(positions))
            trend.set_xticklabels([point["month"][5:] for point in series])
            trend.yaxis.set_major_formatter(_short_amount)
        else:
            trend.text(0.5, 0.5, "No data", ha="center", va="center",
                       transform=trend.transAxes, color="gray")

        if split:
            pie.pie(
                [row["total"] for row in split],
                colors=[row["color"] or _FALLBACK_COLOR for row in split],
                startangle=90,
                wedgeprops={"linewidth": 1, "edgecolor": self._fig.get_facecolor()},
            )
            pie.set_aspect("equal")
        else:
            pie.set_axis_off()
            pie.text(0.5, 0.5, "No expense data", ha="center", va="center",
                     transform=pie.transAxes, color="gray")

        self._canvas.draw_idle()
