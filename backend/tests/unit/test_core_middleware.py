"""
Unit tests for CORS middleware and the uniform error handlers.
Version: 1.0.0
"""
import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from pydantic import BaseModel

from garage.core.exceptions import ShopifyUserError, TransportError, ValidationError
from garage.core.middleware import apply_cors, apply_exception_handlers


def _app_with_handlers() -> FastAPI:
    app = FastAPI()
    apply_exception_handlers(app)

    class Payload(BaseModel):
        count: int

    @app.get("/validation")
    def validation():
        raise ValidationError("customerId is required")

    @app.get("/user-errors")
    def user_errors():
        raise ShopifyUserError("metafieldsSet", [{"field": ["value"], "message": "Value is invalid"}])

    @app.get("/transport")
    def transport():
        raise TransportError("Shopify unreachable")

    @app.get("/http")
    def http():
        raise HTTPException(status_code=403, detail="Forbidden")

    @app.post("/body")
    def body(payload: Payload):
        return {"count": payload.count}

    return app


@pytest.mark.unit
class TestApplyCors:
    """Tests for the apply_cors middleware function."""

    def test_apply_cors_adds_middleware(self):
        """CORS middleware is attached to the FastAPI app."""
        app = FastAPI()
        apply_cors(app, ["*"])
        middleware_classes = [m.cls.__name__ for m in app.user_middleware]
        assert "CORSMiddleware" in middleware_classes

    def test_cors_allows_any_origin(self):
        """Wildcard origin is allowed."""
        app = FastAPI()
        apply_cors(app, ["*"])

        @app.get("/test")
        def test_endpoint():
            return {"ok": True}

        client = TestClient(app)
        resp = client.get("/test", headers={"Origin": "https://example.com"})
        assert resp.status_code == 200
        assert resp.headers.get("access-control-allow-origin") == "*"

    def test_configured_origin_only(self):
        """A configured origin is echoed; others get no CORS header."""
        app = FastAPI()
        apply_cors(app, ["https://shop.example.com"])

        @app.get("/test")
        def test_endpoint():
            return {"ok": True}

        client = TestClient(app)
        allowed = client.get("/test", headers={"Origin": "https://shop.example.com"})
        other = client.get("/test", headers={"Origin": "https://evil.example.com"})
        assert allowed.headers.get("access-control-allow-origin") == "https://shop.example.com"
        assert "access-control-allow-origin" not in other.headers

    def test_cors_preflight(self):
        """OPTIONS preflight requests are handled."""
        app = FastAPI()
        apply_cors(app, ["*"])

        @app.post("/test")
        def test_endpoint():
            return {"ok": True}

        client = TestClient(app)
        resp = client.options(
            "/test",
            headers={
                "Origin": "https://example.com",
                "Access-Control-Request-Method": "POST",
            },
        )
        assert resp.status_code == 200


@pytest.mark.unit
class TestExceptionHandlers:
    """Every failure is rendered as {"error": ..., "errors"?: [...]}."""

    @pytest.fixture
    def client(self):
        return TestClient(_app_with_handlers(), raise_server_exceptions=False)

    def test_validation_error(self, client):
        resp = client.get("/validation")
        assert resp.status_code == 400
        assert resp.json() == {"error": "customerId is required"}

    def test_user_errors_listed(self, client):
        resp = client.get("/user-errors")
        assert resp.status_code == 400
        assert resp.json() == {
            "error": "Value is invalid",
            "errors": [{"field": ["value"], "message": "Value is invalid"}],
        }

    def test_transport_error(self, client):
        resp = client.get("/transport")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Shopify unreachable"}

    def test_http_exception(self, client):
        resp = client.get("/http")
        assert resp.status_code == 403
        assert resp.json() == {"error": "Forbidden"}

    def test_unknown_route(self, client):
        resp = client.get("/nope")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Not Found"}

    def test_request_validation_is_400(self, client):
        resp = client.post("/body", json={"count": "many"})
        body = resp.json()
        assert resp.status_code == 400
        assert body["error"].startswith("count: ")
        assert body["errors"]
