from dataclasses import asdict, fields, replace
from typing import Optional

from models.user import NotificationSettings, User, UserPreferences
from utils.constants import THEMES
from utils.errors import ValidationError

_PREFERENCE_FIELDS = tuple(f.name for f in fields(UserPreferences))
_NOTIFICATION_FIELDS = tuple(f.name for f in fields(NotificationSettings))
_PROFILE_FIELDS = ("name", "bio", "profile_photo")


class PreferencesStore:
    """The signed-in user (injected after login) and their preferences.

    Preferences exist even with no user so the UI has a theme and currency
    to render the login screen with.
    """

    def __init__(self, user: User | None = None):
        self._user = user
        self._prefs = user.preferences if user else UserPreferences()

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def preferences(self) -> UserPreferences:
        return self._prefs

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def set_user(self, user: User | None) -> None:
        self._user = user
        self._prefs = user.preferences if user else UserPreferences()

    def clear(self) -> None:
        self.set_user(None)

    def update(self, **changes) -> UserPreferences:
        """Partial merge; `notifications` may itself be a partial dict."""
        unknown = set(changes) - set(_PREFERENCE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown preference(s): {', '.join(sorted(unknown))}")
        if "theme" in changes and changes["theme"] not in THEMES:
            raise ValidationError(f"Invalid theme: {changes['theme']}")
        if "default_currency" in changes:
            code = (changes["default_currency"] or "").strip().upper()
            if not code:
                raise ValidationError("Default currency cannot be empty.")
            changes["default_currency"] = code
        if "notifications" in changes:
            changes["notifications"] = self._merge_notifications(changes["notifications"])
        self._apply(replace(self._prefs, **changes))
        return self._prefs

    def update_profile(self, **changes) -> User:
        if self._user is None:
            raise ValidationError("No user is signed in.")
        unknown = set(changes) - set(_PROFILE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown profile field(s): {', '.join(sorted(unknown))}")
        if "name" in changes and not (changes["name"] or "").strip():
            raise ValidationError("Name cannot be empty.")
        self._user = replace(self._user, **changes)
        return self._user

    def reset(self) -> UserPreferences:
        self._apply(UserPreferences())
        return self._prefs

    def _merge_notifications(self, value) -> NotificationSettings:
        if isinstance(value, NotificationSettings):
            value = asdict(value)
        if not isinstance(value, dict):
            raise ValidationError("Notifications must be a mapping of setting → bool.")
        unknown = set(value) - set(_NOTIFICATION_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown notification setting(s): {', '.join(sorted(unknown))}")
        return replace(self._prefs.notifications, **{k: bool(v) for k, v in value.items()})

    def _apply(self, prefs: UserPreferences) -> None:
        self._prefs = prefs
        if self._user is not None:
            self._user = replace(self._user, preferences=prefs)
