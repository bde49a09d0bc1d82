from dataclasses import dataclass, field
from typing import Optional

from utils.constants import DEFAULT_CURRENCY


@dataclass
class NotificationSettings:
    bill_reminders: bool = True
    budget_alerts: bool = True
    goal_progress: bool = True


@dataclass
class UserPreferences:
    theme: str = "system"               # 'light' | 'dark' | 'system'
    default_currency: str = DEFAULT_CURRENCY
    notifications: NotificationSettings = field(default_factory=NotificationSettings)


@dataclass
class User:
    id: str
    name: str
    email: str
    bio: Optional[str] = None
    profile_photo: Optional[str] = None
    preferences: UserPreferences = field(default_factory=UserPreferences)
