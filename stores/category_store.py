import uuid
from dataclasses import replace
from typing import Optional

from models.category import Category, is_valid_color, normalize_icon
from utils.constants import UNCATEGORIZED
from utils.errors import NotFoundError, ValidationError

_EDITABLE_FIELDS = ("name", "icon", "color")


class CategoryStore:
    """Ordered in-memory collection of the current user's categories.

    Name uniqueness is owned by the server; a duplicate surfaces as a
    ConflictError from the API layer, never as a silent local merge.
    """

    def __init__(self, categories: list[Category] | None = None):
        self._items: list[Category] = list(categories or [])

    # ── Reads ────────────────────────────────────────────────────────────────
    def get_all(self) -> list[Category]:
        return list(self._items)

    def get(self, category_id: str | None) -> Optional[Category]:
        if category_id is None:
            return None
        return next((c for c in self._items if c.id == category_id), None)

    def index_of(self, category_id: str) -> int | None:
        for idx, cat in enumerate(self._items):
            if cat.id == category_id:
                return idx
        return None

    def display_name(self, category_id: str | None) -> str:
        """Category name, or 'Uncategorized' for a missing or dangling reference."""
        cat = self.get(category_id)
        return cat.name if cat else UNCATEGORIZED

    def __len__(self) -> int:
        return len(self._items)

    # ── Mutations ────────────────────────────────────────────────────────────
    def add(
        self,
        name: str,
        icon: str | None = None,
        color: str | None = None,
        category_id: str | None = None,
    ) -> Category:
        category = self._validate(
            Category(id=category_id or str(uuid.uuid4()), name=name, icon=icon, color=color)
        )
        if self.get(category.id) is not None:
            raise ValidationError(f"Category id '{category.id}' is already in use.")
        self._items.append(category)
        return category

    def update(self, category_id: str, **changes) -> Category:
        idx = self.index_of(category_id)
        if idx is None:
            raise NotFoundError("Category", category_id)
        unknown = set(changes) - set(_EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown category field(s): {', '.join(sorted(unknown))}")
        updated = self._validate(replace(self._items[idx], **changes))
        self._items[idx] = updated
        return updated

    def remove(self, category_id: str) -> None:
        # Expenses keep their category_id; display falls back to 'Uncategorized'.
        self._items = [c for c in self._items if c.id != category_id]

    def replace(self, category_id: str, category: Category) -> Category:
        """Swap the record stored under category_id for `category`, keeping its position."""
        idx = self.index_of(category_id)
        if idx is None:
            raise NotFoundError("Category", category_id)
        self._items[idx] = category
        return category

    def insert(self, category: Category, index: int | None = None) -> None:
        if index is None or index >= len(self._items):
            self._items.append(category)
        else:
            self._items.insert(max(index, 0), category)

    def set_all(self, categories: list[Category]) -> None:
        self._items = list(categories)

    def _validate(self, category: Category) -> Category:
        name = (category.name or "").strip()
        if not name:
            raise ValidationError("Category name cannot be empty.")
        icon = None
        if category.icon:
            icon = normalize_icon(category.icon)
            if icon is None:
                raise ValidationError(f"Unknown icon: {category.icon}")
        color = (category.color or "").strip() or None
        if color and not color.startswith("#"):
            color = "#" + color
        if color and not is_valid_color(color):
            raise ValidationError(f"Invalid color: {category.color}")
        return replace(category, name=name, icon=icon, color=color)
