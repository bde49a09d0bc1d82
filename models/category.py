import re
from dataclasses import dataclass
from typing import Optional

from utils.constants import CATEGORY_ICONS, DEFAULT_ICON_GLYPH

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass
class Category:
    id: str
    name: str
    icon: Optional[str] = None     # key of CATEGORY_ICONS
    color: Optional[str] = None    # '#RRGGBB' or '#RGB'


def normalize_icon(icon: str | None) -> str | None:
    """Map an icon name to its CATEGORY_ICONS key.

    Accepts the canonical snake_case id or the older CamelCase spelling
    ('ShoppingCart' -> 'shopping_cart'). Returns None for unknown names.
    """
    if not icon:
        return None
    key = icon.strip()
    if key in CATEGORY_ICONS:
        return key
    key = _CAMEL_BOUNDARY.sub("_", key).lower()
    return key if key in CATEGORY_ICONS else None


def icon_glyph(icon: str | None) -> str:
    key = normalize_icon(icon)
    return CATEGORY_ICONS[key] if key else DEFAULT_ICON_GLYPH


def is_valid_color(color: str | None) -> bool:
    return bool(color) and bool(_HEX_COLOR.match(color))
