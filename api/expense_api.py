from api.api_client import ApiClient, read_rows, record_id, require_record, unwrap
from models.expense import Expense
from utils.constants import DEFAULT_CURRENCY
from utils.date_helpers import normalize_date
from utils.errors import ApiError


class ExpenseApi:
    PATH = "/api/expenses"

    def __init__(self, client: ApiClient):
        self._client = client

    def _json_to_model(self, data: dict) -> Expense:
        if not isinstance(data, dict):
            raise ApiError(f"Malformed expense record: {data!r}")
        date = normalize_date(data.get("date"))
        if date is None:
            raise ApiError(f"Expense {record_id(data)} has an unreadable date: {data.get('date')!r}")
        try:
            amount = float(data.get("amount", 0))
        except (TypeError, ValueError):
            raise ApiError(f"Expense {record_id(data)} has an unreadable amount: {data.get('amount')!r}")
        # Older clients wrote 'description'; it is read as notes and never written back.
        notes = data.get("notes")
        if notes is None:
            notes = data.get("description", "")
        is_recurring = bool(data.get("isRecurring", False))
        return Expense(
            id=record_id(data),
            amount=amount,
            category_id=record_id(data.get("categoryId")),
            date=date,
            notes=notes or "",
            currency=data.get("currency") or DEFAULT_CURRENCY,
            is_recurring=is_recurring,
            recurring_frequency=data.get("recurringFrequency") if is_recurring else None,
        )

    def _model_to_json(self, expense: Expense) -> dict:
        payload = {
            "amount": expense.amount,
            "categoryId": expense.category_id,
            "date": expense.date,
            "notes": expense.notes,
            "currency": expense.currency,
            "isRecurring": expense.is_recurring,
        }
        if expense.is_recurring:
            payload["recurringFrequency"] = expense.recurring_frequency
        return payload

    def get_all(self) -> list[Expense]:
        body = self._client.get(self.PATH)
        return read_rows(unwrap(body, "expenses"), self._json_to_model, "expense")

    def create(self, expense: Expense) -> Expense:
        body = self._client.post(self.PATH, self._model_to_json(expense))
        return self._json_to_model(require_record(body, "expense"))

    def update(self, expense: Expense) -> Expense:
        body = self._client.put(f"{self.PATH}/{expense.id}", self._model_to_json(expense))
        return self._json_to_model(require_record(body, "expense"))

    def delete(self, expense_id: str):
        self._client.delete(f"{self.PATH}/{expense_id}")
