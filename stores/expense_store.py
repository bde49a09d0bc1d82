import datetime
import logging
import uuid
from dataclasses import fields, replace
from typing import Optional

from models.expense import Expense
from models.expense_filter import ExpenseFilter
from stores.category_store import CategoryStore
from utils.constants import DEFAULT_CURRENCY, RECURRING_FREQUENCIES, UNCATEGORIZED
from utils.date_helpers import normalize_date, parse_date
from utils.errors import NotFoundError, ValidationError

_EDITABLE_FIELDS = (
    "amount", "category_id", "date", "notes",
    "currency", "is_recurring", "recurring_frequency",
)
_FILTER_FIELDS = tuple(f.name for f in fields(ExpenseFilter))

logger = logging.getLogger(__name__)


def matches_filter(expense: Expense, expense_filter: ExpenseFilter, category_name: str = "") -> bool:
    """Pure predicate: does `expense` satisfy every constraint set in `expense_filter`?

    Dates compare at calendar-day granularity, so an end_date includes the
    whole of that day. The search term is matched case-insensitively against
    the resolved category name followed by the notes.
    """
    f = expense_filter
    if f.start_date or f.end_date:
        day = parse_date(expense.date)
        if day is None:
            return False
        if f.start_date and day < parse_date(f.start_date):
            return False
        if f.end_date and day > parse_date(f.end_date):
            return False
    if f.category_id is not None and expense.category_id != f.category_id:
        return False
    if f.min_amount is not None and expense.amount < f.min_amount:
        return False
    if f.max_amount is not None and expense.amount > f.max_amount:
        return False
    term = (f.search_term or "").strip().lower()
    if term:
        haystack = f"{category_name} {expense.notes or ''}".lower()
        if term not in haystack:
            return False
    return True


def sort_by_date_desc(expenses: list[Expense]) -> list[Expense]:
    """Most recent first; equal dates keep their existing (insertion) order.

    Unreadable dates sort last.
    """
    return sorted(expenses, key=lambda e: parse_date(e.date) or datetime.date.min, reverse=True)


class ExpenseStore:
    def __init__(
        self,
        category_store: CategoryStore | None = None,
        expenses: list[Expense] | None = None,
    ):
        self._categories = category_store
        self._items: list[Expense] = list(expenses or [])
        self._filter = ExpenseFilter()

    # ── Reads ────────────────────────────────────────────────────────────────
    def get_all(self) -> list[Expense]:
        return list(self._items)

    def get(self, expense_id: str) -> Optional[Expense]:
        return next((e for e in self._items if e.id == expense_id), None)

    def index_of(self, expense_id: str) -> int | None:
        for idx, exp in enumerate(self._items):
            if exp.id == expense_id:
                return idx
        return None

    def category_name(self, expense: Expense) -> str:
        if self._categories is None:
            return UNCATEGORIZED
        return self._categories.display_name(expense.category_id)

    def __len__(self) -> int:
        return len(self._items)

    # ── Mutations ────────────────────────────────────────────────────────────
    def add(
        self,
        amount: float,
        category_id: str | None,
        date: str,
        notes: str = "",
        currency: str = DEFAULT_CURRENCY,
        is_recurring: bool = False,
        recurring_frequency: str | None = None,
        expense_id: str | None = None,
    ) -> Expense:
        expense = self._validate(Expense(
            id=expense_id or str(uuid.uuid4()),
            amount=amount,
            category_id=category_id,
            date=date,
            notes=notes,
            currency=currency,
            is_recurring=is_recurring,
            recurring_frequency=recurring_frequency,
        ))
        if self.get(expense.id) is not None:
            raise ValidationError(f"Expense id '{expense.id}' is already in use.")
        self._items.append(expense)
        return expense

    def update(self, expense_id: str, **changes) -> Expense:
        idx = self.index_of(expense_id)
        if idx is None:
            raise NotFoundError("Expense", expense_id)
        unknown = set(changes) - set(_EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown expense field(s): {', '.join(sorted(unknown))}")
        updated = self._validate(replace(self._items[idx], **changes))
        self._items[idx] = updated
        return updated

    def remove(self, expense_id: str) -> None:
        self._items = [e for e in self._items if e.id != expense_id]

    def replace(self, expense_id: str, expense: Expense) -> Expense:
        idx = self.index_of(expense_id)
        if idx is None:
            raise NotFoundError("Expense", expense_id)
        self._items[idx] = expense
        return expense

    def insert(self, expense: Expense, index: int | None = None) -> None:
        if index is None or index >= len(self._items):
            self._items.append(expense)
        else:
            self._items.insert(max(index, 0), expense)

    def set_all(self, expenses: list[Expense]) -> None:
        """Replace the collection; records that fail validation are logged and skipped."""
        items = []
        for exp in expenses:
            try:
                items.append(self._validate(exp))
            except ValidationError as e:
                logger.warning("Skipping expense %s on load: %s", exp.id, e)
        self._items = items

    # ── Filtering ────────────────────────────────────────────────────────────
    @property
    def filter(self) -> ExpenseFilter:
        return self._filter

    def set_filter(self, **changes) -> ExpenseFilter:
        """Merge the given fields into the active filter; others keep their value."""
        unknown = set(changes) - set(_FILTER_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown filter field(s): {', '.join(sorted(unknown))}")
        for key in ("start_date", "end_date"):
            if changes.get(key):
                normalized = normalize_date(changes[key])
                if normalized is None:
                    raise ValidationError(f"Invalid date: {changes[key]}")
                changes[key] = normalized
            elif key in changes:
                changes[key] = None
        for key in ("min_amount", "max_amount"):
            if changes.get(key) in (None, ""):
                if key in changes:
                    changes[key] = None
                continue
            try:
                changes[key] = float(changes[key])
            except (TypeError, ValueError):
                raise ValidationError(f"Invalid amount: {changes[key]}")
        if "category_id" in changes and not changes["category_id"]:
            changes["category_id"] = None
        self._filter = replace(self._filter, **changes)
        return self._filter

    def clear_filter(self) -> None:
        self._filter = ExpenseFilter()

    def filtered(self) -> list[Expense]:
        matching = [
            e for e in self._items
            if matches_filter(e, self._filter, self.category_name(e))
        ]
        return sort_by_date_desc(matching)

    # ── Validation ───────────────────────────────────────────────────────────
    def _validate(self, expense: Expense) -> Expense:
        try:
            amount = float(expense.amount)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid amount: {expense.amount}")
        if amount < 0:
            raise ValidationError("Amount cannot be negative.")
        date = normalize_date(expense.date)
        if date is None:
            raise ValidationError("Invalid date format. Use YYYY-MM-DD.")
        is_recurring = bool(expense.is_recurring)
        frequency = expense.recurring_frequency or None
        if is_recurring:
            if frequency is None:
                raise ValidationError("Recurring expenses need a frequency.")
            if frequency not in RECURRING_FREQUENCIES:
                raise ValidationError(f"Invalid frequency: {frequency}")
        else:
            frequency = None
        return replace(
            expense,
            amount=amount,
            date=date,
            notes=(expense.notes or "").strip(),
            currency=(expense.currency or DEFAULT_CURRENCY).upper(),
            is_recurring=is_recurring,
            recurring_frequency=frequency,
            category_id=expense.category_id or None,
        )
