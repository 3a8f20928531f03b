from __future__ import annotations

import importlib
import logging
import os
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .database.bootstrap import apply_schema, ensure_default_admin, list_tables
from .database.connection import DBConfig

from .container import AppOptions, Container, build_container
from .core.constants import DEFAULT_AUTO_CLOCK_OUT_POLL_SECONDS
from .employees.controller import register as register_employees
from .jobs.scheduler import start_scheduler
from .payroll.controller import register as register_payroll
from .records.controller import register as register_records

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)


def _should_start_scheduler(app: Flask, settings) -> bool:
    if app.config.get("TESTING") or not getattr(settings, "AUTO_CLOCK_OUT_ENABLED", False):
        return False
    # the reloader parent process would otherwise run a second scheduler
    if app.config["DEBUG"] and os.environ.get("WERKZEUG_RUN_MAIN") != "true":
        return False
    return True


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, static_folder="../../../static")

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
    app.config["SESSION_COOKIE_SECURE"] = bool(getattr(settings, "COOKIE_SECURE", False))
    app.permanent_session_lifetime = timedelta(minutes=int(getattr(settings, "SESSION_TTL_MINUTES", 480)))

    options = AppOptions.from_settings(settings)

    if container is None:
        logger.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())

        if getattr(settings, "AUTO_INIT_DB", False):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            created = ensure_default_admin(
                db_config,
                username=getattr(settings, "ADMIN_USERNAME", "admin"),
                password=getattr(settings, "ADMIN_PASSWORD", "admin123"),
            )
            if created:
                logger.info("Default admin account created")

        container = build_container(db_config=db_config, options=options)

    app.extensions["timeclock"] = container

    @app.route("/", endpoint="index")
    def index():
        if app.static_folder and (Path(app.static_folder) / "index.html").exists():
            return app.send_static_file("index.html")
        return jsonify({"service": "timeclock", "status": "ok"})

    register_employees(app, container)
    register_records(app, container)
    register_payroll(app, container)

    if _should_start_scheduler(app, settings):
        start_scheduler(
            container.auto_clock_out_job,
            tz=container.tz,
            poll_seconds=int(
                getattr(settings, "AUTO_CLOCK_OUT_POLL_SECONDS", DEFAULT_AUTO_CLOCK_OUT_POLL_SECONDS)
            ),
        )
    else:
        logger.info("Auto clock-out scheduler not started")

    return app
