"""Unit tests for the response envelope helpers."""

import json

from pydantic import BaseModel, ValidationError

from qc_tracker.core.keyed import ErrorKind, Pagination
from qc_tracker.server.api.responses import error_response, success_response, validation_error_response


class Item(BaseModel):
    code: str
    count: int


class TestEnvelope:
    def test_success_with_pagination(self):
        response = success_response(
            data=[Item(code="A1", count=1)], message="ok", pagination=Pagination.build(1, 10, 1)
        )
        body = json.loads(response.body)
        assert response.status_code == 200
        assert body["success"] is True
        assert body["data"] == [{"code": "A1", "count": 1}]
        assert body["pagination"]["totalPages"] == 1
        assert body["message"] == "ok"

    def test_success_without_data(self):
        body = json.loads(success_response(message="deleted").body)
        assert body == {"success": True, "message": "deleted"}

    def test_error(self):
        response = error_response(ErrorKind.NOT_FOUND, "missing", 404)
        assert response.status_code == 404
        assert json.loads(response.body) == {"success": False, "error": "NOT_FOUND", "message": "missing"}

    def test_validation_error_lists_fields(self):
        try:
            Item.model_validate({"code": "A1", "count": "many"})
        except ValidationError as exc:
            response = validation_error_response(exc)

        body = json.loads(response.body)
        assert response.status_code == 400
        assert body["error"] == "VALIDATION_ERROR"
        assert body["message"].startswith("count:")
        assert body["details"][0]["loc"] == ["count"]
