import io

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.datastructures import FileStorage

from marketplace.services.storage_service import StorageService
from marketplace.utils.exceptions import NotFoundError, ConflictError, PermissionDeniedError


class TestErrorHandlers:
    """Test error handlers"""

    def test_400_error_handler(self, app):
        client = app.test_client()

        @app.route("/test-400")
        def test_400():
            from werkzeug.exceptions import BadRequest
            raise BadRequest()

        response = client.get("/test-400")
        assert response.status_code == 400
        assert response.json == {"error": "Bad request"}

    def test_404_error_handler(self, client):
        response = client.get("/nonexistent-route")

        assert response.status_code == 404
        assert response.json == {"error": "Resource not found"}

    def test_405_error_handler(self, client):
        response = client.delete("/health")

        assert response.status_code == 405
        assert response.json == {"error": "Method not allowed"}

    def test_500_error_handler(self, app):
        client = app.test_client()

        @app.route("/test-500")
        def test_500():
            raise Exception("Test error")

        response = client.get("/test-500")
        assert response.status_code == 500
        assert response.json == {"error": "An unexpected error occurred"}

    def test_integrity_error_handler(self, app):
        client = app.test_client()

        @app.route("/test-integrity")
        def test_integrity():
            raise IntegrityError("test", "test", "test")

        response = client.get("/test-integrity")
        assert response.status_code == 409
        assert response.json["error"] == "Database integrity error"

    def test_sqlalchemy_error_handler(self, app):
        client = app.test_client()

        @app.route("/test-db")
        def test_db():
            raise SQLAlchemyError("connection lost")

        response = client.get("/test-db")
        assert response.status_code == 500
        assert response.json == {"error": "Database error"}

    def test_service_errors_escaping_routes(self, app):
        client = app.test_client()

        @app.route("/test-not-found")
        def test_not_found():
            raise NotFoundError("Widget not found")

        @app.route("/test-conflict")
        def test_conflict():
            raise ConflictError("Widget already exists")

        @app.route("/test-forbidden")
        def test_forbidden():
            raise PermissionDeniedError("Not your widget")

        assert client.get("/test-not-found").status_code == 404
        assert client.get("/test-conflict").json == {"error": "Widget already exists"}
        assert client.get("/test-forbidden").status_code == 403

    def test_request_too_large(self, app, admin_headers):
        app.config["MAX_CONTENT_LENGTH"] = 1024
        client = app.test_client()

        response = client.post(
            "/api/category/",
            headers=admin_headers,
            data={"name": "Huge", "category_pictures": (io.BytesIO(b"x" * 4096), "huge.png")},
            content_type="multipart/form-data",
        )

        assert response.status_code == 413


class TestJWTErrors:

    def test_missing_token(self, client):
        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json == {"error": "Missing authorization header"}

    def test_malformed_token(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 422

    def test_refresh_token_rejected_for_access(self, client, client_user):
        login = client.post(
            "/api/auth/login",
            json={"phone_number": client_user.phone_number, "password": "password123"},
        )

        response = client.get(
            "/api/auth/me",
            headers={"Authorization": f"Bearer {login.json['refresh_token']}"},
        )

        assert response.status_code == 422


class TestAppRoutes:

    def test_index(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert "message" in response.json

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json == {"status": "healthy"}

    def test_serves_uploads(self, app, client):
        url = StorageService.save_file(
            FileStorage(stream=io.BytesIO(b"png-bytes"), filename="logo.png"), "brand"
        )

        response = client.get(url)

        assert response.status_code == 200
        assert response.data == b"png-bytes"

    def test_missing_upload(self, client):
        assert client.get("/uploads/nothing-here.png").status_code == 404
