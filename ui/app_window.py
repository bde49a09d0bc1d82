import logging
import threading

import customtkinter as ctk

from services.report_service import ReportService
from services.sync_service import SyncService
from stores.app_store import AppStore
from ui.components.alert_banner import AlertBanner
from ui.tabs.categories_tab import CategoriesTab
from ui.tabs.dashboard_tab import DashboardTab
from ui.tabs.reports_tab import ReportsTab
from ui.tabs.savings_tab import SavingsTab
from ui.tabs.settings_tab import SettingsTab
from ui.tabs.transactions_tab import TransactionsTab
from utils.app_config import set_token
from utils.constants import APP_NAME, APP_WIDTH, APP_HEIGHT
from utils.errors import AuthError, FinanceTrackerError

logger = logging.getLogger(__name__)

_REFRESH_SCOPES: dict[str, set[str]] = {
    "expense":     {"dashboard", "transactions", "categories", "reports"},
    "category":    {"dashboard", "transactions", "categories", "reports"},
    "goal":        {"dashboard", "savings"},
    "preferences": {"dashboard", "transactions", "savings", "reports", "settings"},
    "full":        {"dashboard", "transactions", "categories", "savings",
                    "reports", "settings"},
}


class AppWindow(ctk.CTk):
    def __init__(
        self,
        store: AppStore,
        sync_service: SyncService,
        report_service: ReportService,
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._store = store
        self._sync = sync_service
        self._report_svc = report_service
        self._date_format = date_format
        self._reload_gen = 0

        self.title(APP_NAME)
        self.minsize(APP_WIDTH, APP_HEIGHT)
        self.geometry(f"{APP_WIDTH}x{APP_HEIGHT}")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_user_bar()
        self._build_banner_area()
        self._build_tabs()

    # ── User bar ────────────────────────────────────────────────────────────
    def _build_user_bar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray85", "gray15"), corner_radius=0, height=44)
        bar.grid(row=0, column=0, sticky="ew")
        bar.grid_propagate(False)

        self._user_label = ctk.CTkLabel(bar, text="", anchor="w")
        self._user_label.pack(side="left", padx=(12, 4), pady=8)
        self._update_user_label()

        self._sync_btn = ctk.CTkButton(
            bar, text="⟳ Sync", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.reload_from_server,
        )
        self._sync_btn.pack(side="right", padx=12)

        self._sync_status = ctk.CTkLabel(bar, text="", text_color="gray60")
        self._sync_status.pack(side="right", padx=4)

    def _update_user_label(self):
        user = self._store.preferences.user
        self._user_label.configure(text=f"{user.name}  ·  {user.email}" if user else "")

    def _build_banner_area(self):
        self._banner_frame = ctk.CTkFrame(self, fg_color="transparent", height=0)
        self._banner_frame.grid(row=1, column=0, sticky="ew", padx=8)

    def _build_tabs(self):
        self._tabview = ctk.CTkTabview(self)
        self._tabview.grid(row=2, column=0, sticky="nsew", padx=8, pady=(0, 8))

        tab_names = ["Dashboard", "Transactions", "Categories", "Savings Goals", "Reports", "Settings"]
        for tab_name in tab_names:
            self._tabview.add(tab_name)
            self._tabview.tab(tab_name).grid_columnconfigure(0, weight=1)
            self._tabview.tab(tab_name).grid_rowconfigure(0, weight=1)

        self._dashboard_tab = DashboardTab(
            self._tabview.tab("Dashboard"),
            store=self._store,
            report_service=self._report_svc,
            date_format=self._date_format,
        )
        self._dashboard_tab.grid(row=0, column=0, sticky="nsew")

        self._transactions_tab = TransactionsTab(
            self._tabview.tab("Transactions"),
            store=self._store,
            sync_service=self._sync,
            notify_refresh=self.notify_tabs_refresh,
            show_error=self.show_error,
            date_format=self._date_format,
        )
        self._transactions_tab.grid(row=0, column=0, sticky="nsew")

        self._categories_tab = CategoriesTab(
            self._tabview.tab("Categories"),
            store=self._store,
            sync_service=self._sync,
            notify_refresh=self.notify_tabs_refresh,
            show_error=self.show_error,
        )
        self._categories_tab.grid(row=0, column=0, sticky="nsew")

        self._savings_tab = SavingsTab(
            self._tabview.tab("Savings Goals"),
            store=self._store,
            report_service=self._report_svc,
            sync_service=self._sync,
            notify_refresh=self.notify_tabs_refresh,
            show_error=self.show_error,
            date_format=self._date_format,
        )
        self._savings_tab.grid(row=0, column=0, sticky="nsew")

        self._reports_tab = ReportsTab(
            self._tabview.tab("Reports"),
            store=self._store,
            report_service=self._report_svc,
        )
        self._reports_tab.grid(row=0, column=0, sticky="nsew")

        self._settings_tab = SettingsTab(
            self._tabview.tab("Settings"),
            store=self._store,
            sync_service=self._sync,
            notify_refresh=self.notify_tabs_refresh,
            on_logout=self.logout,
        )
        self._settings_tab.grid(row=0, column=0, sticky="nsew")

    # ── Refresh ──────────────────────────────────────────────────────────────
    def notify_tabs_refresh(self, scope: str = "full"):
        tabs = _REFRESH_SCOPES.get(scope, _REFRESH_SCOPES["full"])
        if "dashboard"    in tabs: self._dashboard_tab.refresh()
        if "transactions" in tabs: self._transactions_tab.refresh()
        if "categories"   in tabs: self._categories_tab.refresh()
        if "savings"      in tabs: self._savings_tab.refresh()
        if "reports"      in tabs: self._reports_tab.refresh()
        if "settings"     in tabs: self._settings_tab.refresh()
        self._update_user_label()

    # ── Server sync ──────────────────────────────────────────────────────────
    def reload_from_server(self):
        self._reload_gen += 1
        gen = self._reload_gen
        self._sync_btn.configure(state="disabled")
        self._sync_status.configure(text="Syncing…")

        def fetch():
            try:
                self._sync.load_all()
                error = None
            except FinanceTrackerError as e:
                error = e
            except Exception as e:
                logger.exception("Reload from server failed")
                error = e
            self.after(0, lambda: self._on_reload_done(gen, error))

        threading.Thread(target=fetch, daemon=True).start()

    def _on_reload_done(self, gen: int, error: Exception | None):
        if gen != self._reload_gen or not self.winfo_exists():
            return
        self._sync_btn.configure(state="normal")
        if isinstance(error, AuthError):
            self._sync_status.configure(text="")
            self.show_error("Your session has expired. Log out and sign in again.")
            return
        if error is not None:
            self._sync_status.configure(text="")
            self.show_error(f"Sync failed: {error}", "Retry", self.reload_from_server)
            return
        self._sync_status.configure(text="Up to date")
        self.notify_tabs_refresh("full")

    def logout(self):
        try:
            self._sync.logout()
        finally:
            set_token(None)
        logger.info("Logged out")
        self.destroy()

    # ── Banners ──────────────────────────────────────────────────────────────
    def show_error(self, message: str, action_text: str | None = None, action_cmd=None):
        for w in self._banner_frame.winfo_children():
            w.destroy()
        AlertBanner(
            self._banner_frame, message=message, severity="error",
            action_text=action_text, action_cmd=action_cmd, auto_dismiss_ms=8000,
        ).pack(fill="x", pady=2)
