from dataclasses import dataclass
from typing import Optional

from utils.constants import DEFAULT_CURRENCY


@dataclass
class Expense:
    id: str
    amount: float
    category_id: Optional[str]          # may dangle after a category is deleted
    date: str                           # 'YYYY-MM-DD'
    notes: str = ""
    currency: str = DEFAULT_CURRENCY
    is_recurring: bool = False
    recurring_frequency: Optional[str] = None   # 'daily' | 'weekly' | 'monthly' | 'yearly'
