import os

from flask import Flask, jsonify, send_from_directory

from .extensions import db, migrate, jwt, ma
from .config import Config
from marketplace.utils.error_handlers import register_error_handlers
from marketplace.utils.logging import configure_logging
from marketplace.routes import register_blueprints


def create_app(config_class=Config):

    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app)

    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    ma.init_app(app)

    # Import models so metadata knows every table before create_all / migrations
    from marketplace import models  # noqa: F401

    register_blueprints(app)
    register_error_handlers(app)

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({"error": "Token has expired"}), 401

    @jwt.invalid_token_loader
    def invalid_token_callback(error):
        return jsonify({"error": "Invalid token"}), 422

    @jwt.unauthorized_loader
    def missing_token_callback(error):
        return jsonify({"error": "Missing authorization header"}), 401

    @app.route("/")
    def index():
        return {"message": "Welcome to the marketplace admin API"}, 200

    @app.route("/health")
    def health():
        return {"status": "healthy"}, 200

    @app.route("/uploads/<path:filename>")
    def uploaded_file(filename):
        return send_from_directory(os.path.abspath(app.config["UPLOAD_FOLDER"]), filename)

    return app
