import io

import pytest
from flask import request, jsonify
from flask_jwt_extended import create_access_token
from marshmallow import Schema, fields

from marketplace.enums import UserType
from marketplace.models import base
from marketplace.utils.decorators import role_required
from marketplace.utils.error_handlers import error_response
from marketplace.utils.exceptions import NotFoundError, ConflictError
from marketplace.utils.helpers import slugify, allowed_file, to_csv, dated_filename, attachment, utcnow
from marketplace.utils.validators import (
    validate_schema,
    validate_form,
    require_files,
    validate_pagination,
    pagination_meta,
    parse_bool_arg,
    parse_id,
    path_id,
)


class TestDecorators:
    """Test decorator utilities"""

    def test_role_required_success(self, app, client_user):
        token = create_access_token(identity=str(client_user.id))
        with app.test_request_context(headers={"Authorization": f"Bearer {token}"}):
            @role_required(UserType.CLIENT)
            def test_route(current_user):
                return jsonify({"id": current_user.id})

            response = test_route()
            assert response.status_code == 200
            assert response.json == {"id": client_user.id}

    def test_role_required_wrong_role(self, app, client_user):
        token = create_access_token(identity=str(client_user.id))
        with app.test_request_context(headers={"Authorization": f"Bearer {token}"}):
            @role_required(UserType.ADMIN)
            def test_route(current_user):
                return jsonify({"success": True})

            response, status = test_route()
            assert status == 403
            assert response.json == {"error": "Insufficient permissions"}

    def test_role_required_inactive_user(self, app, client_user):
        client_user.update(is_active=False)
        token = create_access_token(identity=str(client_user.id))
        with app.test_request_context(headers={"Authorization": f"Bearer {token}"}):
            @role_required(UserType.CLIENT)
            def test_route(current_user):
                return jsonify({"success": True})

            _, status = test_route()
            assert status == 403

    def test_path_id(self, app):
        @path_id("item_id", "item")
        def view(item_id):
            return jsonify({"item_id": item_id})

        with app.test_request_context():
            assert view(item_id="7").json == {"item_id": 7}
            response, status = view(item_id="seven")
            assert status == 400
            assert response.json == {"error": "Invalid item ID"}
            assert view(item_id="-3")[1] == 400


class TestValidators:
    """Test validator utilities"""

    def test_validate_pagination_default(self, app):
        with app.test_request_context():
            assert validate_pagination() == (1, 20)

    def test_validate_pagination_custom(self, app):
        with app.test_request_context("/?page=2&limit=10"):
            assert validate_pagination() == (2, 10)

    def test_validate_pagination_out_of_range(self, app):
        with app.test_request_context("/?page=0&limit=500"):
            assert validate_pagination() == (1, 20)

    def test_pagination_meta(self):
        assert pagination_meta(45, 2, 20) == {"page": 2, "limit": 20, "total": 45, "pages": 3}
        assert pagination_meta(0, 1, 20)["pages"] == 0

    def test_validate_schema_success(self, app):
        class TestSchema(Schema):
            name = fields.Str(required=True)

        @validate_schema(TestSchema)
        def test_route():
            return jsonify(request.validated_data)

        with app.test_request_context("/", method="POST", json={"name": "Test"}):
            response = test_route()
            assert response.json == {"name": "Test"}

    def test_validate_schema_failure(self, app):
        class TestSchema(Schema):
            name = fields.Str(required=True)

        @validate_schema(TestSchema)
        def test_route():
            return jsonify({"success": True})

        with app.test_request_context("/", method="POST", json={}):
            response, status = test_route()
            assert status == 400
            assert "name" in response.json["messages"]

    def test_validate_form_decodes_json_fields(self, app):
        class TestSchema(Schema):
            name = fields.Str(required=True)
            tags = fields.List(fields.Int())

        @validate_form(TestSchema, json_fields=("tags",))
        def test_route():
            return jsonify(request.validated_data)

        with app.test_request_context(
            "/", method="POST", data={"name": "Shop", "tags": "[1, 2]"}
        ):
            assert test_route().json == {"name": "Shop", "tags": [1, 2]}

    def test_validate_form_rejects_bad_json(self, app):
        class TestSchema(Schema):
            tags = fields.List(fields.Int())

        @validate_form(TestSchema, json_fields=("tags",))
        def test_route():
            return jsonify({"success": True})

        with app.test_request_context("/", method="POST", data={"tags": "{oops"}):
            response, status = test_route()
            assert status == 400
            assert response.json["messages"] == {"tags": ["tags must be valid JSON"]}

    def test_require_files(self, app):
        @require_files("cover", "document")
        def test_route():
            return jsonify({"success": True})

        with app.test_request_context(
            "/", method="POST", data={"cover": (io.BytesIO(b"img"), "cover.png")}
        ):
            response, status = test_route()
            assert status == 400
            assert list(response.json["messages"]) == ["document"]

    def test_parse_bool_arg(self, app):
        with app.test_request_context("/?a=true&b=False&c=1"):
            assert parse_bool_arg("a") is True
            assert parse_bool_arg("b") is False
            assert parse_bool_arg("c") is True
            assert parse_bool_arg("missing") is None

    def test_parse_id(self):
        assert parse_id("12") == 12
        assert parse_id("0") is None
        assert parse_id("abc") is None
        assert parse_id(None) is None


class TestHelpers:
    """Test helper functions"""

    def test_slugify(self):
        assert slugify("Hello World") == "hello-world"
        assert slugify("Test Product 123") == "test-product-123"

    def test_allowed_file(self):
        allowed = {"jpg", "png"}
        assert allowed_file("photo.JPG", allowed) is True
        assert allowed_file("script.exe", allowed) is False
        assert allowed_file("no_extension", allowed) is False

    def test_to_csv_quotes_values(self):
        text = to_csv(["Name", "Note"], [["Shop, Ltd", 'said "hi"']])

        assert text.splitlines() == ["Name,Note", '"Shop, Ltd","said ""hi"""']

    def test_dated_filename(self):
        name = dated_filename("orders", "pdf")

        assert name.startswith("orders-")
        assert name.endswith(".pdf")

    def test_utcnow_is_shared_with_models(self):
        assert base.utcnow is utcnow
        assert utcnow().utcoffset().total_seconds() == 0

    def test_attachment(self, app):
        response = attachment("a,b\n", "text/csv", "report.csv")

        assert response.mimetype == "text/csv"
        assert response.headers["Content-Disposition"] == 'attachment; filename="report.csv"'


class TestErrorResponse:

    @pytest.mark.parametrize(
        "error, status",
        [
            (NotFoundError("Missing"), 404),
            (ConflictError("Taken"), 409),
            (ValueError("Bad input"), 400),
        ],
    )
    def test_status_codes(self, app, error, status):
        with app.test_request_context():
            response, code = error_response(error)
            assert code == status
            assert response.json == {"error": str(error)}
