import logging
import os
import sys
import customtkinter as ctk

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from api.api_client import ApiClient
from api.auth_api import AuthApi
from api.category_api import CategoryApi
from api.expense_api import ExpenseApi
from api.savings_api import SavingsApi
from api.user_api import UserApi

from services.report_service import ReportService
from services.sync_service import SyncService
from stores.app_store import AppStore

from ui.app_window import AppWindow
from ui.components.login_dialog import LoginDialog
from utils.app_config import (
    get_api_base_url, get_log_level, get_setting, get_timeout,
    load_env, set_setting, set_token, get_token,
)
from utils.errors import AuthError, FinanceTrackerError

logger = logging.getLogger(__name__)


def _sign_in(sync: SyncService) -> bool:
    """Show the login window until the user signs in or closes it."""
    dialog = LoginDialog(sync, last_email=get_setting("last_email", ""))
    dialog.mainloop()
    if not dialog.token:
        return False
    set_token(dialog.token)
    set_setting("last_email", dialog.email)
    sync.load_all()
    if dialog.registered:
        sync.seed_default_categories()
    return True


def main():
    # ── Environment & logging ────────────────────────────────────────────────
    load_env()
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # ── API ──────────────────────────────────────────────────────────────────
    client = ApiClient(get_api_base_url(), token=get_token(), timeout=get_timeout())
    auth_api = AuthApi(client)
    category_api = CategoryApi(client)
    expense_api = ExpenseApi(client)
    savings_api = SavingsApi(client)
    user_api = UserApi(client)

    # ── State & services ─────────────────────────────────────────────────────
    store = AppStore()
    sync_svc = SyncService(
        store, category_api, expense_api, savings_api,
        user_api=user_api, auth_api=auth_api,
    )
    report_svc = ReportService(store)

    # ── Restore session or sign in ───────────────────────────────────────────
    loaded = False
    if client.is_authenticated:
        try:
            sync_svc.load_all()
            loaded = True
        except AuthError:
            logger.info("Saved session is no longer valid")
            client.token = None
            set_token(None)
        except FinanceTrackerError as e:
            logger.error("Could not load data from %s: %s", client.base_url, e)

    if not loaded:
        try:
            if not _sign_in(sync_svc):
                client.close()
                return
        except FinanceTrackerError as e:
            logger.error("Startup failed: %s", e)
            client.close()
            sys.exit(1)

    # ── Appearance ───────────────────────────────────────────────────────────
    ctk.set_appearance_mode(store.preferences.preferences.theme)
    ctk.set_default_color_theme("blue")
    date_format = get_setting("date_format", "MM/DD/YYYY")

    # ── Launch UI ────────────────────────────────────────────────────────────
    app = AppWindow(
        store=store,
        sync_service=sync_svc,
        report_service=report_svc,
        date_format=date_format,
    )

    def on_close():
        client.close()
        app.destroy()

    app.protocol("WM_DELETE_WINDOW", on_close)
    app.mainloop()


if __name__ == "__main__":
    main()
