from api.api_client import ApiClient, record_id, require_record
from models.user import NotificationSettings, User, UserPreferences
from utils.constants import DEFAULT_CURRENCY


def user_from_json(data: dict) -> User:
    prefs = data.get("preferences") or {}
    notes = prefs.get("notifications") or {}
    return User(
        id=record_id(data),
        name=data.get("name", ""),
        email=data.get("email", ""),
        bio=data.get("bio"),
        profile_photo=data.get("profilePhoto"),
        preferences=UserPreferences(
            theme=prefs.get("theme", "system"),
            default_currency=prefs.get("defaultCurrency") or DEFAULT_CURRENCY,
            notifications=NotificationSettings(
                bill_reminders=notes.get("billReminders", True),
                budget_alerts=notes.get("budgetAlerts", True),
                goal_progress=notes.get("goalProgress", True),
            ),
        ),
    )


def preferences_to_json(prefs: UserPreferences) -> dict:
    return {
        "theme": prefs.theme,
        "defaultCurrency": prefs.default_currency,
        "notifications": {
            "billReminders": prefs.notifications.bill_reminders,
            "budgetAlerts": prefs.notifications.budget_alerts,
            "goalProgress": prefs.notifications.goal_progress,
        },
    }


class UserApi:
    PATH = "/api/users/me"

    def __init__(self, client: ApiClient):
        self._client = client

    def update_preferences(self, prefs: UserPreferences) -> User:
        body = self._client.patch(self.PATH, {"preferences": preferences_to_json(prefs)})
        return user_from_json(require_record(body, "user"))

    def update_profile(self, user: User) -> User:
        body = self._client.patch(self.PATH, {
            "name": user.name,
            "bio": user.bio,
            "profilePhoto": user.profile_photo,
        })
        return user_from_json(require_record(body, "user"))
