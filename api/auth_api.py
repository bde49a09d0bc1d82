import logging

from api.api_client import ApiClient, require_record
from api.user_api import user_from_json
from models.user import User
from utils.errors import AuthError, ValidationError

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class AuthApi:
    PATH = "/api/auth"

    def __init__(self, client: ApiClient):
        self._client = client

    def register(self, name: str, email: str, password: str) -> tuple[str, User]:
        name, email = name.strip(), email.strip().lower()
        if not name:
            raise ValidationError("Name is required.")
        if "@" not in email:
            raise ValidationError("Please enter a valid email.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
            )
        body = self._client.post(
            f"{self.PATH}/register", {"name": name, "email": email, "password": password}
        )
        return self._accept(body)

    def login(self, email: str, password: str) -> tuple[str, User]:
        email = email.strip().lower()
        if "@" not in email:
            raise ValidationError("Please enter a valid email.")
        if not password:
            raise ValidationError("Password is required.")
        body = self._client.post(f"{self.PATH}/login", {"email": email, "password": password})
        return self._accept(body)

    def me(self) -> User:
        body = self._client.get(f"{self.PATH}/me")
        return user_from_json(require_record(body, "user"))

    def logout(self):
        self._client.token = None

    def _accept(self, body: dict) -> tuple[str, User]:
        token = body.get("token")
        if not token:
            raise AuthError("Server did not return a token.")
        self._client.token = token
        user = user_from_json(require_record(body, "user"))
        logger.info("Signed in as %s", user.email)
        return token, user
