import os
import logging
from flask import Flask, jsonify
from dotenv import load_dotenv
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

from tourney.config import config as config_by_name
from tourney.errors import EngineValidationError
from tourney.extensions import cors, ma, limiter


def create_app(config_name=None):
    load_dotenv()

    if config_name is None:
        config_name = os.getenv("FLASK_ENV", "development")

    app = Flask(__name__)
    config_class = config_by_name[config_name]
    app.config.from_object(config_class)

    # Validate production secrets
    if hasattr(config_class, "init_app"):
        config_class.init_app(app)

    # ── Logging ──────────────────────────────────────────────────────────
    level = logging.DEBUG if app.debug else getattr(logging, app.config["LOG_LEVEL"].upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    app.logger.setLevel(logging.INFO)

    # ── Extensions ───────────────────────────────────────────────────────
    cors.init_app(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"].split(",")}},
    )
    ma.init_app(app)
    limiter.init_app(app)

    # ── Error handlers ───────────────────────────────────────────────────
    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        return jsonify({"error": "Validation failed", "messages": e.messages}), 400

    @app.errorhandler(EngineValidationError)
    def handle_engine_error(e):
        return jsonify(e.to_dict()), 400

    @app.errorhandler(400)
    def bad_request(e):
        return jsonify({"error": e.description or "Bad request"}), 400

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Resource not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(429)
    def rate_limit_exceeded(e):
        return jsonify({"error": "Rate limit exceeded. Try again later."}), 429

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_generic_exception(e):
        app.logger.exception("Unhandled exception: %s", e)
        return jsonify({"error": "Internal server error"}), 500

    # ── Blueprints ───────────────────────────────────────────────────────
    from tourney.api.routes import api_bp

    app.register_blueprint(api_bp, url_prefix="/api")

    # ── Health check ─────────────────────────────────────────────────────
    @app.route("/health")
    def health():
        return jsonify({"status": "healthy"}), 200

    # ── CLI ───────────────────────────────────────────────────────────────
    from tourney.cli import engine_cli

    app.cli.add_command(engine_cli, "engine")

    return app
