import customtkinter as ctk

from services.sync_service import SyncService
from stores.app_store import AppStore
from ui.components.confirm_dialog import ConfirmDialog
from utils.app_config import get_api_base_url, get_setting, set_setting
from utils.constants import CURRENCY_SYMBOLS, THEMES
from utils.date_helpers import DATE_FORMAT_OPTIONS
from utils.errors import FinanceTrackerError

_NOTIFICATION_LABELS = {
    "bill_reminders": "Bill reminders",
    "budget_alerts": "Budget alerts",
    "goal_progress": "Savings goal progress",
}


class SettingsTab(ctk.CTkFrame):
    """Settings tab: profile, synced preferences, local display and server settings."""

    def __init__(
        self,
        master,
        store: AppStore,
        sync_service: SyncService,
        notify_refresh,
        on_logout,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._store = store
        self._sync = sync_service
        self._notify_refresh = notify_refresh
        self._on_logout = on_logout

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)

        scroll = ctk.CTkScrollableFrame(self, fg_color="transparent")
        scroll.grid(row=0, column=0, sticky="nsew")
        scroll.grid_columnconfigure(0, weight=1)

        self._build_profile_section(scroll)
        self._build_preferences_section(scroll)
        self._build_local_section(scroll)
        self._build_account_section(scroll)
        self.refresh()

    def refresh(self):
        """Re-read the signed-in user and preferences into the form."""
        user = self._store.preferences.user
        prefs = self._store.preferences.preferences
        self._name_var.set(user.name if user else "")
        self._bio_var.set((user.bio or "") if user else "")
        self._email_label.configure(text=user.email if user else "(not signed in)")
        self._theme_var.set(prefs.theme.title())
        self._currency_var.set(prefs.default_currency)
        for key, var in self._notify_vars.items():
            var.set(getattr(prefs.notifications, key))

    # ── Section 1: Profile ───────────────────────────────────────────────────

    def _build_profile_section(self, parent):
        section = self._make_section(parent, "Profile", row=0)

        ctk.CTkLabel(section, text="Email:", anchor="e", width=120).grid(
            row=0, column=0, padx=(8, 4), pady=6, sticky="e"
        )
        self._email_label = ctk.CTkLabel(section, text="", anchor="w", text_color="gray60")
        self._email_label.grid(row=0, column=1, padx=4, pady=6, sticky="w")

        ctk.CTkLabel(section, text="Name:", anchor="e", width=120).grid(
            row=1, column=0, padx=(8, 4), pady=6, sticky="e"
        )
        self._name_var = ctk.StringVar()
        ctk.CTkEntry(section, textvariable=self._name_var, width=240).grid(
            row=1, column=1, padx=4, pady=6, sticky="w"
        )

        ctk.CTkLabel(section, text="Bio:", anchor="e", width=120).grid(
            row=2, column=0, padx=(8, 4), pady=6, sticky="e"
        )
        self._bio_var = ctk.StringVar()
        ctk.CTkEntry(section, textvariable=self._bio_var, width=320).grid(
            row=2, column=1, padx=4, pady=6, sticky="w"
        )

        ctk.CTkButton(
            section, text="Save Profile", width=140, command=self._save_profile,
        ).grid(row=3, column=0, columnspan=2, pady=(10, 4))

        self._profile_status = ctk.CTkLabel(section, text="", font=ctk.CTkFont(size=11))
        self._profile_status.grid(row=4, column=0, columnspan=2, pady=(0, 8))

    def _save_profile(self):
        try:
            self._sync.update_profile(name=self._name_var.get().strip(), bio=self._bio_var.get().strip() or None)
        except FinanceTrackerError as e:
            self._profile_status.configure(text=str(e), text_color="#F44336")
            return
        self._profile_status.configure(text="Profile saved.", text_color="#4CAF50")
        self._notify_refresh("preferences")

    # ── Section 2: Preferences (synced to the server) ────────────────────────

    def _build_preferences_section(self, parent):
        section = self._make_section(parent, "Preferences", row=1)

        ctk.CTkLabel(section, text="Appearance:", anchor="e", width=120).grid(
            row=0, column=0, padx=(8, 4), pady=6, sticky="e"
        )
        self._theme_var = ctk.StringVar()
        ctk.CTkComboBox(
            section,
            values=[t.title() for t in THEMES],
            variable=self._theme_var,
            width=180,
            state="readonly",
        ).grid(row=0, column=1, padx=4, pady=6, sticky="w")

        ctk.CTkLabel(section, text="Default Currency:", anchor="e", width=120).grid(
            row=1, column=0, padx=(8, 4), pady=6, sticky="e"
        )
        self._currency_var = ctk.StringVar()
        ctk.CTkComboBox(
            section,
            values=list(CURRENCY_SYMBOLS),
            variable=self._currency_var,
            width=180,
        ).grid(row=1, column=1, padx=4, pady=6, sticky="w")

        ctk.CTkLabel(section, text="Notifications:", anchor="ne", width=120).grid(
            row=2, column=0, padx=(8, 4), pady=6, sticky="ne"
        )
        checks = ctk.CTkFrame(section, fg_color="transparent")
        checks.grid(row=2, column=1, padx=4, pady=6, sticky="w")
        self._notify_vars: dict[str, ctk.BooleanVar] = {}
        for key, label in _NOTIFICATION_LABELS.items():
            var = ctk.BooleanVar()
            ctk.CTkCheckBox(checks, text=label, variable=var).pack(anchor="w", pady=2)
            self._notify_vars[key] = var

        btns = ctk.CTkFrame(section, fg_color="transparent")
        btns.grid(row=3, column=0, columnspan=2, pady=(10, 4))
        ctk.CTkButton(btns, text="Save Preferences", width=140, command=self._save_preferences).pack(
            side="left", padx=4
        )
        ctk.CTkButton(
            btns, text="Reset to Defaults", width=140,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._reset_preferences,
        ).pack(side="left", padx=4)

        self._prefs_status = ctk.CTkLabel(section, text="", font=ctk.CTkFont(size=11))
        self._prefs_status.grid(row=4, column=0, columnspan=2, pady=(0, 8))

    def _save_preferences(self):
        self._push_preferences(
            theme=self._theme_var.get().lower(),
            default_currency=self._currency_var.get(),
            notifications={k: v.get() for k, v in self._notify_vars.items()},
        )

    def _reset_preferences(self):
        dlg = ConfirmDialog(
            self.winfo_toplevel(),
            title="Reset Preferences",
            message="Restore the default theme, currency and notification settings?",
            confirm_text="Reset",
            danger=False,
        )
        if dlg.result:
            self._push_preferences(
                theme="system",
                default_currency="USD",
                notifications={k: True for k in self._notify_vars},
            )

    def _push_preferences(self, **changes):
        try:
            prefs = self._sync.update_preferences(**changes)
        except FinanceTrackerError as e:
            self._prefs_status.configure(text=str(e), text_color="#F44336")
            self.refresh()
            return
        ctk.set_appearance_mode(prefs.theme)
        self._prefs_status.configure(text="Preferences saved.", text_color="#4CAF50")
        self._notify_refresh("preferences")

    # ── Section 3: This computer ─────────────────────────────────────────────

    def _build_local_section(self, parent):
        section = self._make_section(parent, "This Computer", row=2)

        ctk.CTkLabel(section, text="Date Format:", anchor="e", width=120).grid(
            row=0, column=0, padx=(8, 4), pady=6, sticky="e"
        )
        self._date_fmt_var = ctk.StringVar(value=get_setting("date_format", "MM/DD/YYYY"))
        ctk.CTkComboBox(
            section,
            values=DATE_FORMAT_OPTIONS,
            variable=self._date_fmt_var,
            width=180,
            state="readonly",
        ).grid(row=0, column=1, padx=4, pady=6, sticky="w")

        ctk.CTkLabel(section, text="Server URL:", anchor="e", width=120).grid(
            row=1, column=0, padx=(8, 4), pady=6, sticky="e"
        )
        self._api_url_var = ctk.StringVar(value=get_api_base_url())
        ctk.CTkEntry(section, textvariable=self._api_url_var, width=320).grid(
            row=1, column=1, padx=4, pady=6, sticky="w"
        )

        ctk.CTkLabel(
            section,
            text="These settings take effect on next app restart.",
            text_color="gray60",
            font=ctk.CTkFont(size=11),
            anchor="w",
        ).grid(row=2, column=0, columnspan=2, sticky="w", padx=8)

        ctk.CTkButton(
            section, text="Save", width=140, command=self._save_local,
        ).grid(row=3, column=0, columnspan=2, pady=(10, 4))

        self._local_status = ctk.CTkLabel(section, text="", font=ctk.CTkFont(size=11))
        self._local_status.grid(row=4, column=0, columnspan=2, pady=(0, 8))

    def _save_local(self):
        url = self._api_url_var.get().strip()
        if url and not url.startswith(("http://", "https://")):
            self._local_status.configure(text="Server URL must start with http:// or https://", text_color="#F44336")
            return
        try:
            set_setting("date_format", self._date_fmt_var.get())
            set_setting("api_base_url", url or None)
        except OSError as e:
            self._local_status.configure(text=f"Could not save settings: {e}", text_color="#F44336")
            return
        self._local_status.configure(text="Settings saved.", text_color="#4CAF50")

    # ── Section 4: Account ───────────────────────────────────────────────────

    def _build_account_section(self, parent):
        section = self._make_section(parent, "Account", row=3)
        ctk.CTkButton(
            section, text="Log Out", width=140,
            fg_color="#F44336", hover_color="#D32F2F",
            command=self._logout,
        ).grid(row=0, column=0, padx=8, pady=8, sticky="w")

    def _logout(self):
        dlg = ConfirmDialog(
            self.winfo_toplevel(),
            title="Log Out",
            message="Log out and close the app? You will need to sign in again next time.",
            confirm_text="Log Out",
        )
        if dlg.result:
            self._on_logout()

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _make_section(self, parent, title: str, row: int) -> ctk.CTkFrame:
        """Create a labelled card section and return its inner frame."""
        outer = ctk.CTkFrame(parent, corner_radius=8)
        outer.grid(row=row, column=0, sticky="ew", padx=12, pady=8)
        outer.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            outer,
            text=title,
            font=ctk.CTkFont(size=14, weight="bold"),
            anchor="w",
        ).grid(row=0, column=0, sticky="w", padx=12, pady=(10, 4))

        inner = ctk.CTkFrame(outer, fg_color="transparent")
        inner.grid(row=1, column=0, sticky="ew", padx=4, pady=(0, 8))
        inner.grid_columnconfigure(1, weight=1)
        return inner
