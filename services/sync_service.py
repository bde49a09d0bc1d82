"""Keeps the in-memory AppStore and the REST API in step.

Every write is applied to the local store first (validated, with a temporary
client id for new records) and then sent to the server. When the server
answers, its record replaces the local one in place, so temporary ids turn
into server ids. When the call fails, the local change is undone exactly,
position included, and the error is re-raised for the UI to show.
"""
import logging

from api.auth_api import AuthApi
from api.category_api import CategoryApi
from api.expense_api import ExpenseApi
from api.savings_api import SavingsApi
from api.user_api import UserApi
from models.category import Category
from models.expense import Expense
from models.savings_goal import ProgressMode, SavingsGoal
from models.user import User, UserPreferences
from stores.app_store import AppStore, Snapshot
from utils.constants import DEFAULT_CATEGORIES
from utils.errors import NotFoundError

logger = logging.getLogger(__name__)


class SyncService:
    def __init__(
        self,
        store: AppStore,
        category_api: CategoryApi,
        expense_api: ExpenseApi,
        savings_api: SavingsApi,
        user_api: UserApi | None = None,
        auth_api: AuthApi | None = None,
    ):
        self._store = store
        self._category_api = category_api
        self._expense_api = expense_api
        self._savings_api = savings_api
        self._user_api = user_api
        self._auth_api = auth_api

    # ── Session ──────────────────────────────────────────────────────────────
    def login(self, email: str, password: str) -> tuple[str, User]:
        token, user = self._auth_api.login(email, password)
        self._store.preferences.set_user(user)
        return token, user

    def register(self, name: str, email: str, password: str) -> tuple[str, User]:
        token, user = self._auth_api.register(name, email, password)
        self._store.preferences.set_user(user)
        return token, user

    def logout(self):
        if self._auth_api:
            self._auth_api.logout()
        self._store.clear()

    def load_all(self) -> Snapshot:
        """Fetch every collection (and the current user) and replace the local state."""
        user = self._auth_api.me() if self._auth_api else self._store.preferences.user
        snapshot = Snapshot(
            categories=tuple(self._category_api.get_all()),
            expenses=tuple(self._expense_api.get_all()),
            savings_goals=tuple(self._savings_api.get_all()),
            user=user,
        )
        self._store.load(snapshot)
        logger.info(
            "Loaded %d categories, %d expenses, %d goals",
            len(snapshot.categories), len(snapshot.expenses), len(snapshot.savings_goals),
        )
        return snapshot

    def seed_default_categories(self) -> list[Category]:
        """Create the starter categories for an account that has none."""
        if len(self._store.categories):
            return []
        return [self.add_category(**cat) for cat in DEFAULT_CATEGORIES]

    # ── Categories ───────────────────────────────────────────────────────────
    def add_category(self, name: str, icon: str | None = None, color: str | None = None) -> Category:
        store = self._store.categories
        with self._store.lock:
            local = store.add(name, icon, color)
        return self._confirm_create(store, local, self._category_api.create)

    def update_category(self, category_id: str, **changes) -> Category:
        store = self._store.categories
        with self._store.lock:
            previous = store.get(category_id)
            updated = store.update(category_id, **changes)
        return self._confirm_update(store, previous, updated, self._category_api.update)

    def remove_category(self, category_id: str):
        self._confirm_remove(self._store.categories, category_id, self._category_api.delete)

    # ── Expenses ─────────────────────────────────────────────────────────────
    def add_expense(self, **fields) -> Expense:
        store = self._store.expenses
        with self._store.lock:
            local = store.add(**fields)
        return self._confirm_create(store, local, self._expense_api.create)

    def update_expense(self, expense_id: str, **changes) -> Expense:
        store = self._store.expenses
        with self._store.lock:
            previous = store.get(expense_id)
            updated = store.update(expense_id, **changes)
        return self._confirm_update(store, previous, updated, self._expense_api.update)

    def remove_expense(self, expense_id: str):
        self._confirm_remove(self._store.expenses, expense_id, self._expense_api.delete)

    # ── Savings goals ────────────────────────────────────────────────────────
    def add_goal(self, **fields) -> SavingsGoal:
        store = self._store.savings
        with self._store.lock:
            local = store.add(**fields)
        return self._confirm_create(store, local, self._savings_api.create)

    def update_goal(self, goal_id: str, **changes) -> SavingsGoal:
        store = self._store.savings
        with self._store.lock:
            previous = store.get(goal_id)
            updated = store.update(goal_id, **changes)
        return self._confirm_update(store, previous, updated, self._savings_api.update)

    def update_goal_progress(
        self,
        goal_id: str,
        amount: float,
        mode: ProgressMode | str = ProgressMode.ABSOLUTE,
    ) -> SavingsGoal:
        store = self._store.savings
        with self._store.lock:
            previous = store.get(goal_id)
            updated = store.update_progress(goal_id, amount, mode)
        return self._confirm_update(store, previous, updated, self._savings_api.update)

    def remove_goal(self, goal_id: str):
        self._confirm_remove(self._store.savings, goal_id, self._savings_api.delete)

    # ── User ─────────────────────────────────────────────────────────────────
    def update_preferences(self, **changes) -> UserPreferences:
        prefs_store = self._store.preferences
        with self._store.lock:
            previous_user = prefs_store.user
            previous_prefs = prefs_store.preferences
            new_prefs = prefs_store.update(**changes)
        if self._user_api is None or previous_user is None:
            return new_prefs
        try:
            user = self._user_api.update_preferences(new_prefs)
        except Exception:
            with self._store.lock:
                prefs_store.set_user(previous_user)
            logger.warning("Preference update rejected; restored %s", previous_prefs)
            raise
        with self._store.lock:
            prefs_store.set_user(user)
        return prefs_store.preferences

    def update_profile(self, **changes) -> User:
        prefs_store = self._store.preferences
        with self._store.lock:
            previous_user = prefs_store.user
            updated = prefs_store.update_profile(**changes)
        if self._user_api is None:
            return updated
        try:
            user = self._user_api.update_profile(updated)
        except Exception:
            with self._store.lock:
                prefs_store.set_user(previous_user)
            raise
        with self._store.lock:
            prefs_store.set_user(user)
        return user

    # ── Reconciliation ───────────────────────────────────────────────────────
    def _confirm_create(self, store, local, remote_create):
        try:
            saved = remote_create(local)
        except Exception:
            with self._store.lock:
                store.remove(local.id)
            logger.warning("Create of %s rejected; removed local copy", local.id)
            raise
        with self._store.lock:
            if store.get(local.id) is not None:
                store.replace(local.id, saved)
        return saved

    def _confirm_update(self, store, previous, updated, remote_update):
        try:
            saved = remote_update(updated)
        except Exception:
            with self._store.lock:
                if store.get(previous.id) is not None:
                    store.replace(previous.id, previous)
            logger.warning("Update of %s rejected; restored previous version", previous.id)
            raise
        with self._store.lock:
            if store.get(updated.id) is not None:
                store.replace(updated.id, saved)
        return saved

    def _confirm_remove(self, store, record_id: str, remote_delete):
        with self._store.lock:
            idx = store.index_of(record_id)
            if idx is None:
                return
            previous = store.get(record_id)
            store.remove(record_id)
        try:
            remote_delete(record_id)
        except NotFoundError:
            logger.info("%s was already gone on the server", record_id)
        except Exception:
            with self._store.lock:
                store.insert(previous, idx)
            logger.warning("Delete of %s rejected; restored at position %d", record_id, idx)
            raise
