from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ExpenseFilter:
    """Active narrowing of the expense list. None means 'no constraint'."""
    start_date: Optional[str] = None    # 'YYYY-MM-DD', inclusive
    end_date: Optional[str] = None      # 'YYYY-MM-DD', inclusive through end of day
    category_id: Optional[str] = None
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None
    search_term: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return all(
            v in (None, "")
            for v in (
                self.start_date, self.end_date, self.category_id,
                self.min_amount, self.max_amount, self.search_term,
            )
        )
