from __future__ import annotations

import importlib
import logging
from pathlib import Path
from types import ModuleType
from typing import Optional

import mysql.connector
from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .terminal.controller import register as register_terminal

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(settings: Optional[ModuleType] = None, *, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    if settings is None:
        settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        container = build_container(settings)
        if getattr(settings, "AUTO_INIT_DB", False):
            try:
                apply_schema(container.conn, schema_path=SCHEMA_PATH)
                logger.info("Schema ready (tables=%d)", len(list_tables(container.conn)))
            except mysql.connector.Error as e:
                logger.warning("Remote database unavailable, starting offline: %s", e)
        container.connectivity.poll()
        container.terminal.boot()
        poll = float(getattr(settings, "CONNECTIVITY_POLL_SECONDS", 15))
        container.scheduler.call_every(poll, container.connectivity.poll)
        container.scheduler.call_every(poll, container.presence_channel.sweep)

    app.extensions["clock_terminal"] = container
    register_terminal(app, container)
    return app
