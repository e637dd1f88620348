from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from .advances.controller import register as register_advances
from .common.http import register_error_handlers
from .config import get_settings_module
from .container import build_container
from .core.constants import DEFAULT_REPORT_TIMEZONE
from .logging_config import configure_logging
from .payroll.controller import register as register_payroll

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    tz_name = getattr(settings, "REPORT_TIMEZONE", DEFAULT_REPORT_TIMEZONE)
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["REPORT_TIMEZONE"] = tz_name

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), json_output=bool(getattr(settings, "LOG_JSON", False)))
    logger.info(
        "settings=%s db=%s@%s:%s/%s tz=%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        tz_name,
    )

    container = build_container(db_config=db_config, tz_name=tz_name)
    app.extensions["container"] = container

    register_error_handlers(app)
    register_payroll(app, container)
    register_advances(app, container)

    return app
