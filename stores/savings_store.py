import uuid
from dataclasses import replace
from typing import Optional

from models.savings_goal import ProgressMode, SavingsGoal
from utils.constants import DEFAULT_CURRENCY
from utils.date_helpers import normalize_date
from utils.errors import NotFoundError, ValidationError

_EDITABLE_FIELDS = ("name", "target_amount", "current_amount", "deadline", "currency")


class SavingsStore:
    """Savings goals. current_amount is kept within [0, target_amount] after every write."""

    def __init__(self, goals: list[SavingsGoal] | None = None):
        self._items: list[SavingsGoal] = list(goals or [])

    def get_all(self) -> list[SavingsGoal]:
        return list(self._items)

    def get(self, goal_id: str) -> Optional[SavingsGoal]:
        return next((g for g in self._items if g.id == goal_id), None)

    def index_of(self, goal_id: str) -> int | None:
        for idx, goal in enumerate(self._items):
            if goal.id == goal_id:
                return idx
        return None

    def __len__(self) -> int:
        return len(self._items)

    def add(
        self,
        name: str,
        target_amount: float,
        deadline: str | None = None,
        currency: str = DEFAULT_CURRENCY,
        goal_id: str | None = None,
    ) -> SavingsGoal:
        goal = self._validate(SavingsGoal(
            id=goal_id or str(uuid.uuid4()),
            name=name,
            target_amount=target_amount,
            current_amount=0.0,
            deadline=deadline,
            currency=currency,
        ))
        if self.get(goal.id) is not None:
            raise ValidationError(f"Savings goal id '{goal.id}' is already in use.")
        self._items.append(goal)
        return goal

    def update(self, goal_id: str, **changes) -> SavingsGoal:
        idx = self.index_of(goal_id)
        if idx is None:
            raise NotFoundError("Savings goal", goal_id)
        unknown = set(changes) - set(_EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown savings goal field(s): {', '.join(sorted(unknown))}")
        updated = self._validate(replace(self._items[idx], **changes))
        self._items[idx] = updated
        return updated

    def update_progress(
        self,
        goal_id: str,
        amount: float,
        mode: ProgressMode | str = ProgressMode.ABSOLUTE,
    ) -> SavingsGoal:
        """Set (ABSOLUTE) or add to (INCREMENTAL) the saved amount, then clamp to the target.

        A negative increment would be a withdrawal, which is not supported.
        """
        idx = self.index_of(goal_id)
        if idx is None:
            raise NotFoundError("Savings goal", goal_id)
        try:
            mode = ProgressMode(mode)
        except ValueError:
            raise ValidationError(f"Invalid progress mode: {mode}")
        amount = _to_amount(amount)
        goal = self._items[idx]
        if mode is ProgressMode.INCREMENTAL:
            if amount < 0:
                raise ValidationError("Contribution cannot be negative.")
            new_amount = goal.current_amount + amount
        else:
            new_amount = amount
        updated = replace(goal, current_amount=_clamp(new_amount, goal.target_amount))
        self._items[idx] = updated
        return updated

    def remove(self, goal_id: str) -> None:
        self._items = [g for g in self._items if g.id != goal_id]

    def replace(self, goal_id: str, goal: SavingsGoal) -> SavingsGoal:
        idx = self.index_of(goal_id)
        if idx is None:
            raise NotFoundError("Savings goal", goal_id)
        self._items[idx] = goal
        return goal

    def insert(self, goal: SavingsGoal, index: int | None = None) -> None:
        if index is None or index >= len(self._items):
            self._items.append(goal)
        else:
            self._items.insert(max(index, 0), goal)

    def set_all(self, goals: list[SavingsGoal]) -> None:
        self._items = [replace(g, current_amount=_clamp(g.current_amount, g.target_amount)) for g in goals]

    def _validate(self, goal: SavingsGoal) -> SavingsGoal:
        name = (goal.name or "").strip()
        if not name:
            raise ValidationError("Goal name cannot be empty.")
        target = _to_amount(goal.target_amount)
        if target < 0:
            raise ValidationError("Target amount cannot be negative.")
        deadline = None
        if goal.deadline:
            deadline = normalize_date(goal.deadline)
            if deadline is None:
                raise ValidationError("Invalid deadline. Use YYYY-MM-DD.")
        return replace(
            goal,
            name=name,
            target_amount=target,
            current_amount=_clamp(_to_amount(goal.current_amount), target),
            deadline=deadline,
            currency=(goal.currency or DEFAULT_CURRENCY).upper(),
        )


def _to_amount(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid amount: {value}")


def _clamp(amount: float, target: float) -> float:
    return min(max(amount, 0.0), target)
