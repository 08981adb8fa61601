# app.py - application factory
import logging
import os
from pathlib import Path

from flask import Flask, render_template
from flask_migrate import Migrate
from flask_wtf import CSRFProtect
from flask_wtf.csrf import CSRFError, generate_csrf
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError

from config import Config, database_url
from models import DatabaseUnavailableError, db
from routes.main_routes import main_bp
from routes.quiz_routes import quiz_bp
from services.quiz_service import QuizService
from services.quiz_state import QuizState

MIGRATIONS_DIR = Path(__file__).parent / "migrations"


def _configure_logging():
    # Basic logging configuration with LOG_LEVEL override
    log_level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, log_level_name, logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    return log_level_name


def _ensure_schema(app):
    """Verify the database answers, then make sure the questions table exists.

    - For local SQLite: auto-create the table if missing.
    - For other databases: if the table is missing, run the alembic migration once.
    """
    uri = app.config["SQLALCHEMY_DATABASE_URI"]
    with app.app_context():
        try:
            db.session.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise DatabaseUnavailableError(f"Failed to connect to the questions database: {e}") from e

        if inspect(db.engine).has_table("questions"):
            return

        if uri.startswith("sqlite:///"):
            db.create_all()
            app.logger.info("(Local) SQLite questions table initialized.")
            return

        from flask_migrate import upgrade

        app.logger.info("[migration-check] questions table missing; running alembic upgrade...")
        try:
            upgrade(directory=str(MIGRATIONS_DIR))
        except Exception as e:
            raise DatabaseUnavailableError(f"Database schema incomplete and automatic migration failed: {e}") from e
        if not inspect(db.engine).has_table("questions"):
            raise DatabaseUnavailableError("Migration upgrade ran but the questions table is still missing.")


def create_app(test_config: dict | None = None):
    """Build the quiz application.

    Raises ConfigurationError when DATABASE_URL is unusable and
    DatabaseUnavailableError when the database cannot be reached.
    """
    log_level_name = _configure_logging()

    app = Flask(__name__, template_folder="templates")
    app.config.from_object(Config)

    # Allow overriding config for testing
    if test_config:
        app.config.update(test_config)
        # Disable CSRF in tests to simplify form posting
        if app.config.get("TESTING"):
            app.config["WTF_CSRF_ENABLED"] = False

    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        app.config["SQLALCHEMY_DATABASE_URI"] = database_url()

    # SQLite in-memory (used by tests) doesn't support certain pool options; prune them
    uri = app.config["SQLALCHEMY_DATABASE_URI"]
    if uri.startswith("sqlite") and (":memory:" in uri):
        engine_opts = dict(app.config.get("SQLALCHEMY_ENGINE_OPTIONS", {}))
        # These options are for QueuePool and not meaningful for StaticPool used by memory SQLite
        for k in ("pool_timeout", "pool_recycle"):
            engine_opts.pop(k, None)
        app.config["SQLALCHEMY_ENGINE_OPTIONS"] = engine_opts

    # Initialize extensions
    db.init_app(app)
    Migrate(app, db, directory=str(MIGRATIONS_DIR))
    CSRFProtect(app)

    # The single quiz round of this process lives with the app, not in a module global
    app.extensions["quiz"] = QuizService(
        QuizState(),
        quiz_size=app.config["QUIZ_SIZE"],
        reset_on_start=app.config["QUIZ_RESET_ON_START"],
    )

    _ensure_schema(app)

    # Register blueprints
    app.register_blueprint(main_bp)
    app.register_blueprint(quiz_bp)

    # Inject csrf_token() helper for templates without FlaskForm
    @app.context_processor
    def inject_csrf_token():
        return dict(csrf_token=generate_csrf)

    # Error handlers
    @app.errorhandler(404)
    def not_found(e):
        return render_template("message.html", title="Not found", heading="Page not found", show_restart=True), 404

    @app.errorhandler(500)
    def internal_error(e):
        app.logger.exception("Unhandled server error")
        return render_template("message.html", title="Error", heading="Something went wrong", show_restart=True), 500

    @app.errorhandler(CSRFError)
    def handle_csrf_error(e):
        return (
            render_template(
                "message.html",
                title="Form expired",
                heading="Your session expired or the form is invalid. Please try again.",
                show_restart=True,
            ),
            400,
        )

    # Health check endpoint for uptime monitoring
    @app.route("/healthz", methods=["GET"])
    def healthz():
        status = {"status": "ok", "db": False}
        try:
            db.session.execute(text("SELECT 1"))
            status["db"] = True
        except SQLAlchemyError as e:
            db.session.rollback()
            app.logger.warning("healthz db ping failed: %s", e)
        # By default, return 200 with db=false to avoid flapping
        # Set HEALTHZ_STRICT=1 to return 503 when db is unreachable
        strict = os.environ.get("HEALTHZ_STRICT", "0") == "1"
        code = 200 if (status["db"] or not strict) else 503
        return status, code

    # Basic security headers
    @app.after_request
    def set_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        resp.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
        # Question images are hosted anywhere, inline styles live in the templates
        resp.headers.setdefault(
            "Content-Security-Policy",
            "default-src 'self'; style-src 'self' 'unsafe-inline'; img-src 'self' data: https: http:;",
        )
        return resp

    app.logger.info("startup log_level=%s db_url_scheme=%s", log_level_name, uri.split(":")[0])

    return app


"""Application factory only module.

Production: use `gunicorn wsgi:app` (see wsgi.py).
Local dev: `python wsgi.py`.
Tests: import create_app and instantiate explicitly; no server starts on import.
"""
