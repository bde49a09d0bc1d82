from api.api_client import ApiClient, read_rows, record_id, require_record, unwrap
from models.category import Category, normalize_icon
from utils.constants import CATEGORY_COLORS, DEFAULT_CATEGORY_ICON
from utils.errors import ApiError


class CategoryApi:
    PATH = "/api/categories"

    def __init__(self, client: ApiClient):
        self._client = client

    def _json_to_model(self, data: dict) -> Category:
        if not isinstance(data, dict) or not data.get("name"):
            raise ApiError(f"Malformed category record: {data!r}")
        return Category(
            id=record_id(data),
            name=data["name"],
            icon=normalize_icon(data.get("icon")),
            color=data.get("color") or None,
        )

    def _model_to_json(self, category: Category) -> dict:
        # The server requires both icon and color.
        return {
            "name": category.name,
            "icon": category.icon or DEFAULT_CATEGORY_ICON,
            "color": category.color or CATEGORY_COLORS[0],
        }

    def get_all(self) -> list[Category]:
        body = self._client.get(self.PATH)
        return read_rows(unwrap(body, "categories"), self._json_to_model, "category")

    def create(self, category: Category) -> Category:
        body = self._client.post(self.PATH, self._model_to_json(category))
        return self._json_to_model(require_record(body, "category"))

    def update(self, category: Category) -> Category:
        body = self._client.put(f"{self.PATH}/{category.id}", self._model_to_json(category))
        return self._json_to_model(require_record(body, "category"))

    def delete(self, category_id: str):
        self._client.delete(f"{self.PATH}/{category_id}")
