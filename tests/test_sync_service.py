from dataclasses import replace
from unittest.mock import MagicMock

import pytest

from models.category import Category
from models.expense import Expense
from models.savings_goal import ProgressMode, SavingsGoal
from models.user import User, UserPreferences
from api.category_api import CategoryApi
from api.expense_api import ExpenseApi
from api.savings_api import SavingsApi
from services.sync_service import SyncService
from stores.app_store import AppStore, Snapshot
from utils.errors import ApiError, ConflictError, NotFoundError, ValidationError


def _echo_with_id(server_id):
    """Fake API create/update: the server echoes the record under its own id."""
    return lambda record: replace(record, id=server_id)


def _echo():
    return lambda record: record


def _setup(**snapshot):
    store = AppStore()
    store.load(Snapshot(**snapshot))
    category_api, expense_api, savings_api = MagicMock(), MagicMock(), MagicMock()
    user_api, auth_api = MagicMock(), MagicMock()
    sync = SyncService(store, category_api, expense_api, savings_api,
                       user_api=user_api, auth_api=auth_api)
    return sync, store, category_api, expense_api, savings_api, user_api, auth_api


def _expenses():
    return (
        Expense(id="e1", amount=10, category_id="c1", date="2024-01-01"),
        Expense(id="e2", amount=20, category_id="c1", date="2024-01-02"),
        Expense(id="e3", amount=30, category_id="c1", date="2024-01-03"),
    )


def test_add_expense_swaps_temp_id_for_server_id():
    sync, store, _, expense_api, *_ = _setup()
    expense_api.create.side_effect = _echo_with_id("srv-1")

    saved = sync.add_expense(amount=12.5, category_id="c1", date="2024-02-01", notes="Lunch")

    assert saved.id == "srv-1"
    assert [e.id for e in store.expenses.get_all()] == ["srv-1"]
    sent = expense_api.create.call_args.args[0]
    assert sent.id != "srv-1"
    assert sent.notes == "Lunch"


def test_failed_create_removes_local_copy():
    sync, store, _, expense_api, *_ = _setup(expenses=_expenses())
    expense_api.create.side_effect = ApiError("boom", 500)

    with pytest.raises(ApiError):
        sync.add_expense(amount=1, category_id="c1", date="2024-02-01")

    assert [e.id for e in store.expenses.get_all()] == ["e1", "e2", "e3"]


def test_invalid_expense_never_reaches_the_server():
    sync, store, _, expense_api, *_ = _setup()
    with pytest.raises(ValidationError):
        sync.add_expense(amount=-4, category_id="c1", date="2024-02-01")
    expense_api.create.assert_not_called()
    assert len(store.expenses) == 0


def test_failed_update_restores_previous_record():
    sync, store, _, expense_api, *_ = _setup(expenses=_expenses())
    expense_api.update.side_effect = ValidationError("nope")

    with pytest.raises(ValidationError):
        sync.update_expense("e2", amount=99)

    assert store.expenses.get("e2").amount == 20
    assert store.expenses.index_of("e2") == 1


def test_successful_update_keeps_server_version():
    sync, store, _, expense_api, *_ = _setup(expenses=_expenses())
    expense_api.update.side_effect = lambda e: replace(e, notes="server says hi")

    sync.update_expense("e2", amount=99)

    assert store.expenses.get("e2").amount == 99
    assert store.expenses.get("e2").notes == "server says hi"


def test_failed_delete_restores_record_at_its_position():
    sync, store, _, expense_api, *_ = _setup(expenses=_expenses())
    expense_api.delete.side_effect = ApiError("offline")

    with pytest.raises(ApiError):
        sync.remove_expense("e2")

    assert [e.id for e in store.expenses.get_all()] == ["e1", "e2", "e3"]


def test_delete_of_record_already_gone_on_server_succeeds():
    sync, store, _, expense_api, *_ = _setup(expenses=_expenses())
    expense_api.delete.side_effect = NotFoundError("Expense", "e2")

    sync.remove_expense("e2")

    assert [e.id for e in store.expenses.get_all()] == ["e1", "e3"]


def test_delete_of_unknown_id_is_a_no_op():
    sync, _, _, expense_api, *_ = _setup(expenses=_expenses())
    sync.remove_expense("missing")
    expense_api.delete.assert_not_called()


def test_duplicate_category_conflict_rolls_back():
    sync, store, category_api, *_ = _setup(categories=(Category(id="c1", name="Food"),))
    category_api.create.side_effect = ConflictError("Category already exists")

    with pytest.raises(ConflictError):
        sync.add_category("Food")

    assert [c.id for c in store.categories.get_all()] == ["c1"]


def test_removing_category_leaves_expenses_uncategorized():
    sync, store, *_ = _setup(
        categories=(Category(id="c1", name="Food"),),
        expenses=_expenses(),
    )
    sync.remove_category("c1")

    assert len(store.expenses) == 3
    assert store.expenses.category_name(store.expenses.get("e1")) == "Uncategorized"


def test_goal_progress_is_clamped_before_sending():
    goal = SavingsGoal(id="g1", name="Trip", target_amount=80)
    sync, store, _, _, savings_api, *_ = _setup(savings_goals=(goal,))
    savings_api.update.side_effect = _echo()

    sync.update_goal_progress("g1", 50, ProgressMode.INCREMENTAL)
    sync.update_goal_progress("g1", 50, ProgressMode.INCREMENTAL)

    assert store.savings.get("g1").current_amount == 80
    assert savings_api.update.call_args.args[0].current_amount == 80


def test_failed_goal_progress_restores_amount():
    goal = SavingsGoal(id="g1", name="Trip", target_amount=80, current_amount=30)
    sync, store, _, _, savings_api, *_ = _setup(savings_goals=(goal,))
    savings_api.update.side_effect = ApiError("offline")

    with pytest.raises(ApiError):
        sync.update_goal_progress("g1", 10, ProgressMode.INCREMENTAL)

    assert store.savings.get("g1").current_amount == 30


def test_add_goal_starts_at_zero():
    sync, store, _, _, savings_api, *_ = _setup()
    savings_api.create.side_effect = _echo_with_id("srv-g")

    goal = sync.add_goal(name="Laptop", target_amount=1200)

    assert goal.id == "srv-g"
    assert goal.current_amount == 0
    assert store.savings.get("srv-g") is not None


def test_load_all_replaces_state():
    sync, store, category_api, expense_api, savings_api, _, auth_api = _setup(expenses=_expenses())
    category_api.get_all.return_value = [Category(id="c9", name="New")]
    expense_api.get_all.return_value = []
    savings_api.get_all.return_value = []
    auth_api.me.return_value = User(id="u1", name="Sam", email="sam@example.com")

    snap = sync.load_all()

    assert snap.categories[0].id == "c9"
    assert len(store.expenses) == 0
    assert store.preferences.user.name == "Sam"


def test_seed_default_categories_only_when_empty():
    sync, store, category_api, *_ = _setup()
    category_api.create.side_effect = lambda c: c

    created = sync.seed_default_categories()

    assert [c.name for c in created] == [
        "Food & Dining", "Transportation", "Shopping", "Bills & Utilities",
    ]
    assert sync.seed_default_categories() == []
    assert len(store.categories) == 4


def test_login_sets_user_and_logout_clears_store():
    sync, store, *_, auth_api = _setup(expenses=_expenses())
    user = User(id="u1", name="Sam", email="sam@example.com")
    auth_api.login.return_value = ("tok", user)

    assert sync.login("sam@example.com", "secret123") == ("tok", user)
    assert store.preferences.user == user

    sync.logout()
    auth_api.logout.assert_called_once()
    assert store.preferences.user is None
    assert len(store.expenses) == 0


def test_failed_preference_update_restores_previous_preferences():
    user = User(id="u1", name="Sam", email="sam@example.com",
                preferences=UserPreferences(theme="dark"))
    sync, store, *_ = _setup(user=user)
    user_api = sync._user_api
    user_api.update_preferences.side_effect = ApiError("offline")

    with pytest.raises(ApiError):
        sync.update_preferences(theme="light")

    assert store.preferences.preferences.theme == "dark"


def test_preference_update_uses_server_user():
    user = User(id="u1", name="Sam", email="sam@example.com")
    sync, store, *_ = _setup(user=user)
    server_user = replace(user, preferences=UserPreferences(theme="light", default_currency="INR"))
    sync._user_api.update_preferences.return_value = server_user

    prefs = sync.update_preferences(theme="light", default_currency="inr")

    sent = sync._user_api.update_preferences.call_args.args[0]
    assert sent.default_currency == "INR"
    assert prefs.theme == "light"
    assert store.preferences.user == server_user


def _sync_over_client(client):
    store = AppStore()
    sync = SyncService(store, CategoryApi(client), ExpenseApi(client), SavingsApi(client))
    return sync, store


def test_load_all_drops_unreadable_server_expenses():
    client = MagicMock()
    client.get.side_effect = lambda path: {
        "/api/categories": {"data": {"categories": []}},
        "/api/expenses": {"data": {"expenses": [
            {"_id": "e1", "amount": 5, "date": "2024-01-05"},
            {"_id": "e2", "amount": 6, "date": None},
            {"_id": "e3", "amount": -1, "date": "2024-01-06"},
        ]}},
        "/api/savings": {"data": {"goals": []}},
    }[path]
    sync, store = _sync_over_client(client)

    sync.load_all()

    assert [e.id for e in store.expenses.filtered()] == ["e1"]


def test_malformed_create_response_is_an_api_error_and_rolls_back():
    client = MagicMock()
    client.post.return_value = {"status": "success", "data": {}}
    sync, store = _sync_over_client(client)

    with pytest.raises(ApiError, match="Malformed server response"):
        sync.add_expense(amount=5, category_id=None, date="2024-01-05")

    assert len(store.expenses) == 0
