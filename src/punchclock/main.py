from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .clock.controller import register as register_clock
from .common.http import register_error_handlers
from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_demo_users, list_tables
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    Passing a container skips every database side effect (schema, seed); tests
    use this to run the HTTP layer over in-memory repositories.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    token_minutes = int(getattr(settings, "TOKEN_EXPIRATION_MINUTES", 480))
    app.config["TOKEN_EXPIRATION_MINUTES"] = token_minutes
    app.permanent_session_lifetime = timedelta(minutes=token_minutes)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
        )

        container = build_container(
            db_config=db_config,
            secret_key=app.secret_key,
            token_expiration_minutes=token_minutes,
            token_refresh_max_age_days=int(getattr(settings, "TOKEN_REFRESH_MAX_AGE_DAYS", 7)),
            punch_lock_timeout_seconds=int(getattr(settings, "PUNCH_LOCK_TIMEOUT_SECONDS", 5)),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(container.conn)
            logger.info("Schema ready (tables=%d)", len(list_tables(container.conn)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_users(
                container.conn,
                admin_email=getattr(settings, "ADMIN_EMAIL"),
                admin_password=getattr(settings, "ADMIN_PASSWORD"),
            )

    app.extensions["punchclock"] = container

    register_error_handlers(app)
    register_users(app, container)
    register_clock(app, container)

    return app
