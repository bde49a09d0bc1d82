import pytest

from models.category import Category
from models.expense import Expense
from models.expense_filter import ExpenseFilter
from stores.category_store import CategoryStore
from stores.expense_store import ExpenseStore, matches_filter, sort_by_date_desc
from utils.errors import NotFoundError, ValidationError


def _categories():
    return CategoryStore([
        Category(id="food", name="Food"),
        Category(id="travel", name="Travel"),
    ])


def _expense(id, amount, date, category_id="food", notes=""):
    return Expense(id=id, amount=amount, category_id=category_id, date=date, notes=notes)


def _store():
    return ExpenseStore(_categories(), [
        _expense("e1", 12.5, "2024-03-01", notes="Lunch with team"),
        _expense("e2", 300.0, "2024-03-15", category_id="travel", notes="Train tickets"),
        _expense("e3", 45.0, "2024-03-31", notes="Groceries"),
        _expense("e4", 8.0, "2024-04-02", category_id="gone", notes="Coffee"),
    ])


def test_add_normalizes_and_appends():
    store = ExpenseStore(_categories())
    exp = store.add(amount="19.99", category_id="food", date="2024-05-06T10:30:00Z", currency="eur")

    assert exp.amount == 19.99
    assert exp.date == "2024-05-06"
    assert exp.currency == "EUR"
    assert store.get(exp.id) == exp


def test_add_rejects_negative_amount():
    store = ExpenseStore(_categories())
    with pytest.raises(ValidationError):
        store.add(amount=-1, category_id="food", date="2024-05-06")
    assert len(store) == 0


def test_add_rejects_bad_date():
    store = ExpenseStore(_categories())
    with pytest.raises(ValidationError):
        store.add(amount=1, category_id="food", date="06/05/2024")


def test_recurring_requires_valid_frequency():
    store = ExpenseStore(_categories())
    with pytest.raises(ValidationError):
        store.add(amount=10, category_id="food", date="2024-05-06", is_recurring=True)
    with pytest.raises(ValidationError):
        store.add(amount=10, category_id="food", date="2024-05-06",
                  is_recurring=True, recurring_frequency="hourly")
    exp = store.add(amount=10, category_id="food", date="2024-05-06",
                    is_recurring=True, recurring_frequency="monthly")
    assert exp.recurring_frequency == "monthly"


def test_non_recurring_drops_frequency():
    store = ExpenseStore(_categories())
    exp = store.add(amount=10, category_id="food", date="2024-05-06",
                    is_recurring=False, recurring_frequency="weekly")
    assert exp.recurring_frequency is None


def test_update_keeps_position_and_validates():
    store = _store()
    store.update("e2", amount=250)
    assert store.get("e2").amount == 250
    assert store.index_of("e2") == 1

    with pytest.raises(ValidationError):
        store.update("e2", amount=-5)
    assert store.get("e2").amount == 250

    with pytest.raises(NotFoundError):
        store.update("missing", amount=1)


def test_dangling_category_shows_uncategorized():
    store = _store()
    assert store.category_name(store.get("e4")) == "Uncategorized"
    assert store.category_name(store.get("e2")) == "Travel"


def test_filtered_without_filter_sorts_newest_first():
    assert [e.id for e in _store().filtered()] == ["e4", "e3", "e2", "e1"]


def test_end_date_includes_whole_day():
    store = _store()
    store.set_filter(start_date="2024-03-01", end_date="2024-03-31")
    assert [e.id for e in store.filtered()] == ["e3", "e2", "e1"]


def test_filter_by_category_and_amount_range():
    store = _store()
    store.set_filter(category_id="food", min_amount="10", max_amount=45)
    assert [e.id for e in store.filtered()] == ["e3", "e1"]


def test_search_matches_notes_and_category_name_case_insensitively():
    store = _store()
    store.set_filter(search_term="TRAVEL")
    assert [e.id for e in store.filtered()] == ["e2"]

    store.set_filter(search_term="coffee")
    assert [e.id for e in store.filtered()] == ["e4"]

    store.set_filter(search_term="uncategorized")
    assert [e.id for e in store.filtered()] == ["e4"]


def test_set_filter_merges_and_clear_resets():
    store = _store()
    store.set_filter(category_id="food")
    store.set_filter(min_amount=20)
    assert store.filter == ExpenseFilter(category_id="food", min_amount=20.0)

    store.clear_filter()
    assert store.filter.is_empty
    assert len(store.filtered()) == 4


def test_set_filter_rejects_unknown_fields_and_bad_values():
    store = _store()
    with pytest.raises(ValidationError):
        store.set_filter(colour="red")
    with pytest.raises(ValidationError):
        store.set_filter(start_date="not a date")
    with pytest.raises(ValidationError):
        store.set_filter(min_amount="ten")
    assert store.filter.is_empty


def test_sort_is_stable_for_equal_dates():
    expenses = [
        _expense("a", 1, "2024-01-02"),
        _expense("b", 2, "2024-01-05"),
        _expense("c", 3, "2024-01-02"),
        _expense("d", 4, "2024-01-05"),
    ]
    assert [e.id for e in sort_by_date_desc(expenses)] == ["b", "d", "a", "c"]


def test_matches_filter_empty_filter_matches_everything():
    assert matches_filter(_expense("a", 1, "2024-01-02"), ExpenseFilter())


def test_unreadable_dates_sort_last_instead_of_failing():
    expenses = [
        _expense("bad", 1, None),
        _expense("new", 2, "2024-03-02"),
        _expense("junk", 3, "garbage"),
        _expense("old", 4, "2024-01-01"),
    ]
    assert [e.id for e in sort_by_date_desc(expenses)] == ["new", "old", "bad", "junk"]


def test_set_all_skips_records_that_break_invariants():
    store = ExpenseStore(_categories())
    store.set_all([
        _expense("ok", "12.50", "2024-03-01T00:00:00.000Z"),
        _expense("negative", -5, "2024-03-02"),
        _expense("no-date", 5, None),
        Expense(id="label-only", amount=9, category_id="food", date="2024-03-03", is_recurring=True),
    ])

    assert [e.id for e in store.get_all()] == ["ok"]
    loaded = store.get("ok")
    assert loaded.amount == 12.5
    assert loaded.date == "2024-03-01"
    assert store.filtered() == [loaded]
