from api.api_client import ApiClient, read_rows, record_id, require_record, unwrap
from models.savings_goal import SavingsGoal
from utils.constants import DEFAULT_CURRENCY
from utils.date_helpers import normalize_date
from utils.errors import ApiError


class SavingsApi:
    PATH = "/api/savings"

    def __init__(self, client: ApiClient):
        self._client = client

    def _json_to_model(self, data: dict) -> SavingsGoal:
        if not isinstance(data, dict):
            raise ApiError(f"Malformed savings goal record: {data!r}")
        try:
            target = float(data.get("targetAmount", 0))
            current = float(data.get("currentAmount", 0))
        except (TypeError, ValueError):
            raise ApiError(f"Savings goal {record_id(data)} has an unreadable amount.")
        # 'targetDate' is the older name for the deadline.
        deadline = data.get("deadline") or data.get("targetDate")
        return SavingsGoal(
            id=record_id(data),
            name=data.get("name", ""),
            target_amount=target,
            current_amount=current,
            deadline=normalize_date(deadline) if deadline else None,
            currency=data.get("currency") or DEFAULT_CURRENCY,
        )

    def _model_to_json(self, goal: SavingsGoal) -> dict:
        return {
            "name": goal.name,
            "targetAmount": goal.target_amount,
            "currentAmount": goal.current_amount,
            "deadline": goal.deadline,
            "currency": goal.currency,
        }

    def get_all(self) -> list[SavingsGoal]:
        body = self._client.get(self.PATH)
        rows = unwrap(body, "goals") or unwrap(body, "savings")
        return read_rows(rows, self._json_to_model, "savings goal")

    def create(self, goal: SavingsGoal) -> SavingsGoal:
        body = self._client.post(self.PATH, self._model_to_json(goal))
        return self._json_to_model(require_record(body, "goal"))

    def update(self, goal: SavingsGoal) -> SavingsGoal:
        body = self._client.put(f"{self.PATH}/{goal.id}", self._model_to_json(goal))
        return self._json_to_model(require_record(body, "goal"))

    def delete(self, goal_id: str):
        self._client.delete(f"{self.PATH}/{goal_id}")
