from __future__ import annotations

import importlib
import logging
from pathlib import Path

import click
from dotenv import load_dotenv
from flask import Flask

from .common.logging_config import setup_logging
from .config import get_settings_module
from .container import build_container
from .database.bootstrap import apply_schema
from .database.connection import DBConfig
from .missed_checkins.controller import register as register_missed_checkins

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def create_app(container=None) -> Flask:
    """App factory. Pass ``container`` to run against something other than MySQL."""

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    db_config = getattr(settings, "DB_CONFIG")

    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), json_output=bool(getattr(settings, "LOG_JSON", False)))

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            count = apply_schema(DBConfig.from_dict(db_config), schema_path=SCHEMA_PATH)
            logger.info("Schema ready (%d statements)", count)

        container = build_container(
            db_config=db_config,
            window_buffer_minutes=int(getattr(settings, "WINDOW_BUFFER_MINUTES", 2)),
            lookback_days=int(getattr(settings, "LOOKBACK_DAYS", 90)),
        )

    app.extensions["checkin_watch"] = container
    register_missed_checkins(app, container)

    @app.cli.command("detect-missed-check-ins")
    def detect_missed_check_ins():
        """Run one detection pass across all active companies."""

        summary = container.detector.run_detection_pass()
        if summary.skipped:
            click.echo("Skipped: a detection pass is already running")
            return
        click.echo(
            f"Detected {summary.detected} missed check-ins "
            f"({summary.companies_processed} companies processed, {summary.companies_failed} failed)"
        )

    return app
