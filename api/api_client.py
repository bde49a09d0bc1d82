import logging

import requests

from utils.constants import DEFAULT_TIMEOUT
from utils.errors import (
    ApiError,
    AuthError,
    ConflictError,
    FinanceTrackerError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_CONFLICT_HINTS = ("duplicate", "already exists", "already registered")


class ApiClient:
    """Thin JSON-over-HTTP wrapper around the finance tracker REST API.

    Responses use the envelope {status, token?, data: {...}, message?}.
    Non-2xx responses and transport failures are raised as the app's own
    error types so callers never see a requests exception.
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._session = session or requests.Session()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def get(self, path: str) -> dict:
        return self.request("GET", path)

    def post(self, path: str, payload: dict | None = None) -> dict:
        return self.request("POST", path, payload)

    def put(self, path: str, payload: dict | None = None) -> dict:
        return self.request("PUT", path, payload)

    def patch(self, path: str, payload: dict | None = None) -> dict:
        return self.request("PATCH", path, payload)

    def delete(self, path: str) -> dict:
        return self.request("DELETE", path)

    def request(self, method: str, path: str, payload: dict | None = None) -> dict:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            resp = self._session.request(
                method,
                f"{self.base_url}{path}",
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise ApiError(f"Could not reach the server: {e}") from e

        logger.debug("%s %s -> %s", method, path, resp.status_code)
        body = _decode(resp)
        if not resp.ok:
            raise error_for_status(resp.status_code, body, path)
        return body

    def close(self):
        self._session.close()


def _decode(resp: requests.Response) -> dict:
    if resp.status_code == 204 or not resp.content:
        return {}
    try:
        body = resp.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {"data": body}


def error_for_status(status: int, body: dict, path: str = "") -> FinanceTrackerError:
    """Map an HTTP error response onto the app's error taxonomy."""
    message = body.get("message") or body.get("error") or f"Request failed ({status})."
    lowered = str(message).lower()
    if status == 409 or (status == 400 and any(h in lowered for h in _CONFLICT_HINTS)):
        return ConflictError(message)
    if status in (400, 422):
        return ValidationError(message)
    if status in (401, 403):
        return AuthError(message, status)
    if status == 404:
        return NotFoundError("Resource", path)
    return ApiError(message, status)


def unwrap(body: dict, key: str):
    """Pull body['data'][key] out of the response envelope (None if absent)."""
    data = body.get("data", body)
    if isinstance(data, dict):
        return data.get(key)
    return data


def record_id(data) -> str | None:
    """Server records carry '_id'; already-normalized ones carry 'id'."""
    if data is None:
        return None
    if isinstance(data, dict):
        value = data.get("id") or data.get("_id")
        return str(value) if value is not None else None
    return str(data)


def require_record(body: dict, key: str) -> dict:
    """Like unwrap, but a 2xx response without the record is an ApiError."""
    data = unwrap(body, key)
    if not isinstance(data, dict):
        raise ApiError(f"Malformed server response: no '{key}' record.")
    return data


def read_rows(rows, to_model, entity: str) -> list:
    """Map a list of server records, logging and dropping the unreadable ones."""
    models = []
    for row in rows or []:
        try:
            models.append(to_model(row))
        except ApiError as e:
            logger.warning("Skipping %s from server: %s", entity, e)
    return models
