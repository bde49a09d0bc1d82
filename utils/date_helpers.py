"""Date handling shared by the stores, aggregations and widgets.

Storage form is always YYYY-MM-DD (months are YYYY-MM); the display format
is a per-computer preference and only matters at the widget boundary.
"""
import calendar
from datetime import date, datetime

from utils.constants import DATE_FORMAT, MONTH_FORMAT

# Display format key -> strftime pattern. First entry is the default.
DISPLAY_FORMATS = {
    "MM/DD/YYYY": "%m/%d/%Y",
    "DD/MM/YYYY": "%d/%m/%Y",
    "YYYY-MM-DD": "%Y-%m-%d",
    "DD.MM.YYYY": "%d.%m.%Y",
    "MM-DD-YYYY": "%m-%d-%Y",
}
DATE_FORMAT_OPTIONS = list(DISPLAY_FORMATS)
_DEFAULT_DISPLAY = DISPLAY_FORMATS[DATE_FORMAT_OPTIONS[0]]

_STORAGE_PATTERNS = ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d")


def today_str() -> str:
    return format_date(date.today())


def current_month_str() -> str:
    return format_month(date.today())


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def format_month(d: date) -> str:
    return d.strftime(MONTH_FORMAT)


def parse_date(value) -> date | None:
    """Parse a calendar date, returning None on failure.

    Accepts date/datetime objects, YYYY-MM-DD with '-', '/' or '.'
    separators, and ISO timestamps like '2024-01-05T00:00:00.000Z' (the
    time part is ignored).
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip().split("T", 1)[0]
    for pattern in _STORAGE_PATTERNS:
        try:
            return datetime.strptime(text, pattern).date()
        except ValueError:
            pass
    return None


def normalize_date(value) -> str | None:
    """Storage form of value, or None if it can't be read as a date."""
    d = parse_date(value)
    return format_date(d) if d else None


# ── Months ───────────────────────────────────────────────────────────────────

def parse_month(month_str: str) -> date | None:
    """First day of a YYYY-MM month, or None."""
    try:
        return datetime.strptime(month_str or "", MONTH_FORMAT).date()
    except ValueError:
        return None


def _require_month(month_str: str) -> date:
    first = parse_month(month_str)
    if first is None:
        raise ValueError(f"Invalid month: {month_str}")
    return first


def shift_month(month_str: str, delta: int) -> str:
    first = _require_month(month_str)
    year, month0 = divmod(first.year * 12 + first.month - 1 + delta, 12)
    return f"{year:04d}-{month0 + 1:02d}"


def prev_month(month_str: str) -> str:
    return shift_month(month_str, -1)


def next_month(month_str: str) -> str:
    return shift_month(month_str, 1)


def month_range(month_str: str) -> tuple[str, str]:
    """(first_day, last_day) of a YYYY-MM month, both YYYY-MM-DD."""
    first = _require_month(month_str)
    days = calendar.monthrange(first.year, first.month)[1]
    return format_date(first), format_date(first.replace(day=days))


def months_between(start_month: str, end_month: str) -> list[str]:
    """Every month from start_month to end_month inclusive; [] when start is later."""
    _require_month(start_month)
    _require_month(end_month)
    months = []
    month = start_month
    while month <= end_month:
        months.append(month)
        month = next_month(month)
    return months


def friendly_month(month_str: str) -> str:
    first = parse_month(month_str)
    return first.strftime("%B %Y") if first else month_str


# ── Display formats ──────────────────────────────────────────────────────────

def format_display_date(date_str: str, fmt_key: str = "MM/DD/YYYY") -> str:
    d = parse_date(date_str)
    if d is None:
        return date_str
    return d.strftime(DISPLAY_FORMATS.get(fmt_key, _DEFAULT_DISPLAY))


def parse_display_date(display_str: str, fmt_key: str) -> date | None:
    """Read a date typed in the display format, falling back to storage form."""
    if not display_str:
        return None
    try:
        return datetime.strptime(
            display_str.strip(), DISPLAY_FORMATS.get(fmt_key, _DEFAULT_DISPLAY)
        ).date()
    except ValueError:
        return parse_date(display_str)
