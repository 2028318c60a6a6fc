"""
Tests for middleware and infrastructure components.
"""

import pytest
from unittest.mock import MagicMock
from fastapi import FastAPI
from fastapi.testclient import TestClient
from slowapi.middleware import SlowAPIMiddleware

from rest_api.core.middlewares import (
    SecurityHeadersMiddleware,
    ContentTypeValidationMiddleware,
    register_middlewares,
)
from shared.config.settings import settings
from shared.infrastructure.correlation import (
    CorrelationIdMiddleware,
    CorrelationIdFilter,
    get_request_id,
    request_id_var,
)
from shared.infrastructure.db import safe_commit, transaction_scope


# =============================================================================
# SecurityHeadersMiddleware Tests
# =============================================================================

class TestSecurityHeadersMiddleware:
    """Tests for security headers middleware."""

    @pytest.fixture
    def app_with_security_headers(self):
        """Create a test app with security headers middleware."""
        app = FastAPI()
        app.add_middleware(SecurityHeadersMiddleware)

        @app.get("/test")
        def test_endpoint():
            return {"message": "ok"}

        return app

    def test_adds_x_content_type_options(self, app_with_security_headers):
        """Should add X-Content-Type-Options: nosniff header."""
        client = TestClient(app_with_security_headers)
        response = client.get("/test")

        assert response.headers.get("X-Content-Type-Options") == "nosniff"

    def test_adds_x_frame_options(self, app_with_security_headers):
        client = TestClient(app_with_security_headers)
        response = client.get("/test")

        assert response.headers.get("X-Frame-Options") == "DENY"

    def test_adds_content_security_policy(self, app_with_security_headers):
        client = TestClient(app_with_security_headers)
        response = client.get("/test")

        assert "default-src 'none'" in response.headers.get("Content-Security-Policy", "")

    def test_adds_hsts_in_production(self, app_with_security_headers, monkeypatch):
        """Should add HSTS header only in production."""
        monkeypatch.setattr(settings, "environment", "production")

        client = TestClient(app_with_security_headers)
        response = client.get("/test")

        assert "max-age=31536000" in response.headers.get("Strict-Transport-Security", "")

    def test_no_hsts_outside_production(self, app_with_security_headers):
        client = TestClient(app_with_security_headers)
        response = client.get("/test")

        assert "Strict-Transport-Security" not in response.headers


# =============================================================================
# ContentTypeValidationMiddleware Tests
# =============================================================================

class TestContentTypeValidationMiddleware:
    """Tests for content-type validation middleware."""

    @pytest.fixture
    def app_with_content_validation(self):
        app = FastAPI()
        app.add_middleware(ContentTypeValidationMiddleware)

        @app.post("/test")
        def post_endpoint(data: dict):
            return {"message": "ok"}

        @app.get("/test")
        def get_endpoint():
            return {"message": "ok"}

        return app

    def test_allows_json_content_type(self, app_with_content_validation):
        client = TestClient(app_with_content_validation)
        response = client.post("/test", json={"key": "value"})

        assert response.status_code == 200

    def test_rejects_form_urlencoded(self, app_with_content_validation):
        client = TestClient(app_with_content_validation)
        response = client.post(
            "/test",
            data={"key": "value"},
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

        assert response.status_code == 415

    def test_rejects_unsupported_content_type(self, app_with_content_validation):
        """Should reject unsupported content types with 415."""
        client = TestClient(app_with_content_validation)
        response = client.post(
            "/test",
            content="some data",
            headers={"Content-Type": "text/plain"},
        )

        assert response.status_code == 415
        assert "Unsupported Media Type" in response.json()["message"]

    def test_allows_get_without_content_type(self, app_with_content_validation):
        client = TestClient(app_with_content_validation)
        response = client.get("/test")

        assert response.status_code == 200


# =============================================================================
# CorrelationIdMiddleware Tests
# =============================================================================

class TestCorrelationIdMiddleware:
    """Tests for correlation ID middleware."""

    @pytest.fixture
    def app_with_correlation(self):
        app = FastAPI()
        app.add_middleware(CorrelationIdMiddleware)

        @app.get("/test")
        def test_endpoint():
            return {"request_id": get_request_id()}

        return app

    def test_generates_request_id_when_not_provided(self, app_with_correlation):
        client = TestClient(app_with_correlation)
        response = client.get("/test")

        request_id = response.headers.get("X-Request-ID")
        assert request_id is not None
        assert len(request_id) == 36  # UUID v4 length

    def test_uses_provided_request_id(self, app_with_correlation):
        client = TestClient(app_with_correlation)
        custom_id = "my-custom-request-id-12345"
        response = client.get("/test", headers={"X-Request-ID": custom_id})

        assert response.headers.get("X-Request-ID") == custom_id

    def test_request_id_visible_to_handler(self, app_with_correlation):
        client = TestClient(app_with_correlation)
        response = client.get("/test", headers={"X-Request-ID": "abc"})

        assert response.json() == {"request_id": "abc"}


# =============================================================================
# CorrelationIdFilter Tests
# =============================================================================

class TestCorrelationIdFilter:
    """Tests for correlation ID logging filter."""

    def test_adds_request_id_to_log_record(self):
        filter_obj = CorrelationIdFilter()
        token = request_id_var.set("test-request-123")

        try:
            record = MagicMock()
            assert filter_obj.filter(record) is True
            assert record.request_id == "test-request-123"
        finally:
            request_id_var.reset(token)

    def test_uses_dash_when_no_request_id(self):
        filter_obj = CorrelationIdFilter()
        token = request_id_var.set("")

        try:
            record = MagicMock()
            assert filter_obj.filter(record) is True
            assert record.request_id == "-"
        finally:
            request_id_var.reset(token)


# =============================================================================
# safe_commit / transaction_scope Tests
# =============================================================================

class TestSafeCommit:
    """Tests for safe_commit utility."""

    def test_commits_successfully(self):
        mock_db = MagicMock()

        safe_commit(mock_db)

        mock_db.commit.assert_called_once()
        mock_db.rollback.assert_not_called()

    def test_rollbacks_on_error(self):
        mock_db = MagicMock()
        mock_db.commit.side_effect = Exception("Database error")

        with pytest.raises(Exception, match="Database error"):
            safe_commit(mock_db)

        mock_db.rollback.assert_called_once()


class TestTransactionScope:
    """Tests for transaction_scope context manager."""

    @pytest.fixture
    def mock_db(self):
        db = MagicMock()
        db.info = {}
        return db

    def test_commits_on_success(self, mock_db):
        with transaction_scope(mock_db) as db:
            assert db is mock_db

        mock_db.commit.assert_called_once()
        mock_db.rollback.assert_not_called()

    def test_rollbacks_and_reraises(self, mock_db):
        with pytest.raises(ValueError):
            with transaction_scope(mock_db):
                raise ValueError("boom")

        mock_db.rollback.assert_called_once()
        mock_db.commit.assert_not_called()

    def test_nested_scope_joins_outer_unit(self, mock_db):
        with transaction_scope(mock_db):
            with transaction_scope(mock_db):
                pass
            mock_db.commit.assert_not_called()

        mock_db.commit.assert_called_once()

    def test_nested_failure_rolls_back_once_at_outer_scope(self, mock_db):
        with pytest.raises(ValueError):
            with transaction_scope(mock_db):
                with transaction_scope(mock_db):
                    raise ValueError("boom")

        mock_db.rollback.assert_called_once()
        mock_db.commit.assert_not_called()
        assert mock_db.info["transaction_scope_depth"] == 0


# =============================================================================
# register_middlewares Tests
# =============================================================================

class TestRegisterMiddlewares:
    """Tests for middleware registration."""

    def test_registers_all_middlewares(self):
        app = FastAPI()

        register_middlewares(app)

        middleware_classes = [m.cls for m in app.user_middleware]
        assert SecurityHeadersMiddleware in middleware_classes
        assert ContentTypeValidationMiddleware in middleware_classes
        assert CorrelationIdMiddleware in middleware_classes
        assert SlowAPIMiddleware in middleware_classes
