APP_NAME = "Finance Tracker"
APP_WIDTH = 1200
APP_HEIGHT = 750

DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"
DEFAULT_CURRENCY = "USD"
DEFAULT_API_URL = "http://localhost:5000"
DEFAULT_TIMEOUT = 10.0
UNCATEGORIZED = "Uncategorized"

THEMES = ["light", "dark", "system"]
RECURRING_FREQUENCIES = ["daily", "weekly", "monthly", "yearly"]

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "INR": "₹",
    "JPY": "¥",
}

# Icon identifier → glyph shown next to the category name.
CATEGORY_ICONS = {
    "shopping_cart":   "🛒",
    "shopping_bag":    "🛍",
    "restaurant":      "🍽",
    "directions_car":  "🚗",
    "home":            "🏠",
    "local_hospital":  "🏥",
    "school":          "🎓",
    "local_movies":    "🎬",
    "flight_takeoff":  "✈",
    "pets":            "🐾",
    "sports_esports":  "🎮",
    "account_balance": "🏦",
    "receipt":         "🧾",
}
DEFAULT_ICON_GLYPH = "•"
DEFAULT_CATEGORY_ICON = "shopping_cart"

CATEGORY_COLORS = [
    "#f44336", "#e91e63", "#9c27b0", "#673ab7",
    "#3f51b5", "#2196f3", "#03a9f4", "#00bcd4",
    "#009688", "#4caf50", "#8bc34a", "#cddc39",
    "#ffeb3b", "#ffc107", "#ff9800", "#ff5722",
]

DEFAULT_CATEGORIES = [
    {"name": "Food & Dining",     "icon": "restaurant",     "color": "#FF5722"},
    {"name": "Transportation",    "icon": "directions_car", "color": "#2196F3"},
    {"name": "Shopping",          "icon": "shopping_bag",   "color": "#9C27B0"},
    {"name": "Bills & Utilities", "icon": "receipt",        "color": "#F44336"},
]

# Goal progress thresholds (percent) used for status classification.
GOAL_ON_TRACK_PERCENT = 75.0
GOAL_AT_RISK_PERCENT = 50.0

# Dashboard "daily average" divides the month total by a fixed day count.
DAYS_PER_MONTH_AVERAGE = 30
RECENT_EXPENSES_LIMIT = 5
ACTIVE_GOALS_LIMIT = 3
TOP_CATEGORIES_LIMIT = 5
REPORT_MONTHS = 6
