import threading
from dataclasses import dataclass
from typing import Optional

from models.category import Category
from models.expense import Expense
from models.savings_goal import SavingsGoal
from models.user import User
from stores.category_store import CategoryStore
from stores.expense_store import ExpenseStore
from stores.preferences_store import PreferencesStore
from stores.savings_store import SavingsStore


@dataclass(frozen=True)
class Snapshot:
    """Read-only copy of every collection, as loaded from or handed to readers."""
    categories: tuple[Category, ...] = ()
    expenses: tuple[Expense, ...] = ()
    savings_goals: tuple[SavingsGoal, ...] = ()
    user: Optional[User] = None


class AppStore:
    """One session's state: every entity store, passed explicitly to consumers.

    Writers hold `lock` for the duration of a mutation; readers should work
    from `snapshot()` rather than the live stores.
    """

    def __init__(self):
        self.lock = threading.RLock()
        self.categories = CategoryStore()
        self.expenses = ExpenseStore(self.categories)
        self.savings = SavingsStore()
        self.preferences = PreferencesStore()

    def load(self, snapshot: Snapshot) -> None:
        with self.lock:
            self.categories.set_all(list(snapshot.categories))
            self.expenses.set_all(list(snapshot.expenses))
            self.savings.set_all(list(snapshot.savings_goals))
            if snapshot.user is not None:
                self.preferences.set_user(snapshot.user)

    def snapshot(self) -> Snapshot:
        with self.lock:
            return Snapshot(
                categories=tuple(self.categories.get_all()),
                expenses=tuple(self.expenses.get_all()),
                savings_goals=tuple(self.savings.get_all()),
                user=self.preferences.user,
            )

    def clear(self) -> None:
        """Drop everything (logout)."""
        with self.lock:
            self.categories.set_all([])
            self.expenses.set_all([])
            self.expenses.clear_filter()
            self.savings.set_all([])
            self.preferences.clear()
