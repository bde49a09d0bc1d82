from models.category import Category
from models.expense import Expense
from models.savings_goal import SavingsGoal
from models.user import User
from stores.app_store import AppStore, Snapshot


def _snapshot():
    return Snapshot(
        categories=(Category(id="c1", name="Food"),),
        expenses=(Expense(id="e1", amount=5.0, category_id="c1", date="2024-01-01"),),
        savings_goals=(SavingsGoal(id="g1", name="Trip", target_amount=100, current_amount=150),),
        user=User(id="u1", name="Sam", email="sam@example.com"),
    )


def test_load_replaces_all_collections():
    store = AppStore()
    store.load(_snapshot())

    assert store.categories.display_name("c1") == "Food"
    assert store.expenses.category_name(store.expenses.get("e1")) == "Food"
    assert store.savings.get("g1").current_amount == 100
    assert store.preferences.user.name == "Sam"


def test_snapshot_is_detached_from_later_writes():
    store = AppStore()
    store.load(_snapshot())
    snap = store.snapshot()

    store.expenses.add(amount=1, category_id="c1", date="2024-01-02")
    store.categories.remove("c1")

    assert len(snap.expenses) == 1
    assert len(snap.categories) == 1
    assert isinstance(snap.expenses, tuple)


def test_clear_drops_everything_including_filter():
    store = AppStore()
    store.load(_snapshot())
    store.expenses.set_filter(min_amount=3)

    store.clear()

    snap = store.snapshot()
    assert snap == Snapshot()
    assert store.expenses.filter.is_empty
