import pytest

from models.user import NotificationSettings, User, UserPreferences
from stores.preferences_store import PreferencesStore
from utils.errors import ValidationError


def _user():
    return User(
        id="u1", name="Sam", email="sam@example.com",
        preferences=UserPreferences(theme="dark", default_currency="EUR"),
    )


def test_defaults_without_user():
    store = PreferencesStore()
    assert not store.is_authenticated
    assert store.preferences == UserPreferences()


def test_set_user_exposes_their_preferences():
    store = PreferencesStore()
    store.set_user(_user())
    assert store.is_authenticated
    assert store.preferences.theme == "dark"


def test_update_merges_partially_and_keeps_user_in_step():
    store = PreferencesStore(_user())
    prefs = store.update(default_currency="gbp", notifications={"budget_alerts": False})

    assert prefs.theme == "dark"
    assert prefs.default_currency == "GBP"
    assert prefs.notifications == NotificationSettings(
        bill_reminders=True, budget_alerts=False, goal_progress=True
    )
    assert store.user.preferences == prefs


def test_update_rejects_bad_values_without_changing_state():
    store = PreferencesStore(_user())
    with pytest.raises(ValidationError):
        store.update(theme="neon")
    with pytest.raises(ValidationError):
        store.update(default_currency="  ")
    with pytest.raises(ValidationError):
        store.update(notifications={"sms": True})
    with pytest.raises(ValidationError):
        store.update(font_size=12)
    assert store.preferences.theme == "dark"
    assert store.preferences.default_currency == "EUR"


def test_update_profile_requires_user_and_name():
    store = PreferencesStore()
    with pytest.raises(ValidationError):
        store.update_profile(name="X")

    store.set_user(_user())
    assert store.update_profile(bio="Saving up").bio == "Saving up"
    with pytest.raises(ValidationError):
        store.update_profile(name=" ")


def test_reset_and_clear():
    store = PreferencesStore(_user())
    assert store.reset() == UserPreferences()
    assert store.user.preferences == UserPreferences()

    store.clear()
    assert store.user is None
    assert not store.is_authenticated
