from dataclasses import dataclass
from enum import Enum
from datetime import date
from typing import Optional

from utils.constants import DEFAULT_CURRENCY
from utils.date_helpers import parse_date


@dataclass
class SavingsGoal:
    id: str
    name: str
    target_amount: float
    current_amount: float = 0.0
    deadline: Optional[str] = None      # 'YYYY-MM-DD'
    currency: str = DEFAULT_CURRENCY

    @property
    def progress_percent(self) -> float:
        if self.target_amount <= 0:
            return 100.0 if self.is_completed else 0.0
        return min(self.current_amount / self.target_amount * 100, 100.0)

    @property
    def is_completed(self) -> bool:
        return self.current_amount >= self.target_amount

    @property
    def remaining(self) -> float:
        return max(0.0, self.target_amount - self.current_amount)

    def is_overdue(self, on: date | None = None) -> bool:
        """True when the deadline is strictly before `on` (default today) and the goal is open."""
        deadline = parse_date(self.deadline) if self.deadline else None
        if deadline is None or self.is_completed:
            return False
        return deadline < (on or date.today())


class ProgressMode(str, Enum):
    ABSOLUTE = "absolute"       # set current_amount to the given amount
    INCREMENTAL = "incremental" # add the given amount to current_amount
