from fastapi.testclient import TestClient
from app.main import app
import pytest

client = TestClient(app)

def test_404_not_found():
    response = client.get("/non-existent-route")
    assert response.status_code == 404
    data = response.json()
    assert data["success"] is False
    assert "message" in data
    assert data["code"] == "HTTP_ERROR"

def test_validation_error_structure():
    from pydantic import BaseModel

    class Item(BaseModel):
        name: str
        price: int

    @app.post("/test-validation")
    def create_item(item: Item):
        return item

    response = client.post("/test-validation", json={"name": "foo", "price": "invalid"})
    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["code"] == "VALIDATION_ERROR"
    assert "price" in data["message"]
    assert len(data["details"]) > 0

@pytest.mark.parametrize("exc_name, status, code", [
    ("ValidationError", 400, "VALIDATION_ERROR"),
    ("InvalidStateError", 400, "INVALID_STATE"),
    ("AuthenticationError", 401, "AUTHENTICATION_FAILED"),
    ("ForbiddenError", 403, "FORBIDDEN"),
    ("ResourceNotFoundError", 404, "NOT_FOUND"),
    ("ConflictError", 409, "CONFLICT"),
])
def test_custom_exception(exc_name, status, code):
    from app.core import exceptions

    path = f"/test-custom-error/{exc_name}"

    @app.get(path)
    def trigger_custom_error():
        raise getattr(exceptions, exc_name)(message="Something specific")

    response = client.get(path)
    assert response.status_code == status
    data = response.json()
    assert data == {
        "success": False,
        "message": "Something specific",
        "code": code,
        "details": None,
    }

def test_unhandled_exception_is_wrapped():
    @app.get("/test-unhandled")
    def boom():
        raise RuntimeError("kaboom")

    response = TestClient(app, raise_server_exceptions=False).get("/test-unhandled")
    assert response.status_code == 500
    data = response.json()
    assert data["success"] is False
    assert data["code"] == "INTERNAL_ERROR"

def test_protected_route_without_cookie():
    response = client.get("/api/category/get-all")
    assert response.status_code == 401
    assert response.json()["message"] == "Not Authorised. Login Again"
