from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

import structlog
from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .common.logging_config import setup_logging
from .container import Container, build_container
from .core.constants import DEFAULT_TIME_ZONE, DEFAULT_UPCOMING_LIMIT
from .core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError
from .database.bootstrap import apply_schema, list_tables

from .attendance.controller import register as register_attendance
from .dashboard.controller import register as register_dashboard
from .requests.controller import register as register_requests
from .reservations.controller import register as register_reservations
from .schedules.controller import register as register_schedules
from .settlements.controller import register as register_settlements

logger = structlog.get_logger("cast_portal.http")

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        status = next((code for kind, code in _STATUS_BY_ERROR if isinstance(exc, kind)), 400)
        payload = {"error": str(exc)}
        if isinstance(exc, ConflictError) and exc.detail:
            payload["detail"] = exc.detail
        return jsonify(payload), status

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify({"error": exc.description}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("unhandled_error", error=str(exc))
        return jsonify({"error": "Internal server error"}), 500


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["TIME_ZONE"] = getattr(settings, "TIME_ZONE", DEFAULT_TIME_ZONE)
    app.json.ensure_ascii = False

    setup_logging(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        json_output=bool(getattr(settings, "LOG_JSON", True)),
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        container = build_container(
            db_config=db_config,
            time_zone=app.config["TIME_ZONE"],
            upcoming_limit=int(getattr(settings, "DASHBOARD_UPCOMING_LIMIT", DEFAULT_UPCOMING_LIMIT)),
            query_workers=int(getattr(settings, "QUERY_WORKERS", 6)),
        )
        logger.info(
            "app_configured",
            settings=settings_module,
            db=f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}",
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(container.conn, schema_path=schema_path)
            logger.info("schema_ready", tables=len(list_tables(container.conn)))

    _register_error_handlers(app)

    register_dashboard(app, container)
    register_reservations(app, container)
    register_attendance(app, container)
    register_requests(app, container)
    register_settlements(app, container)
    register_schedules(app, container)

    return app
