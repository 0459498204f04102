# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import atexit

from flask import Flask
from flask_cors import CORS

from eventgate.infrastructure.container import Container
from eventgate.infrastructure.db import Database
from eventgate.shared.config import AppConfig, load_config
from eventgate.shared.errors import register_error_handler
from eventgate.shared.logging import logger, setup_logging
from eventgate.shared.middleware.request_logger import configure_request_logging
from eventgate.shared.utils.clock import Clock, utc_now

EXTENSION_KEY = "eventgate"


def get_container(app: Flask) -> Container:
    return app.extensions[EXTENSION_KEY]


def create_app(config: AppConfig | None = None, *, clock: Clock = utc_now) -> Flask:
    config = config or load_config()
    setup_logging(config.log_level, json_logs=config.log_json)
    for warning in config.security_warnings():
        logger.warning(f"config: {warning}")

    database = Database(config.database).start()
    database.create_schema()
    atexit.register(database.dispose)

    container = Container(config=config, database=database, clock=clock)

    app = Flask(__name__)
    app.config.update(SECRET_KEY=config.secret_key)
    app.extensions[EXTENSION_KEY] = container

    register_error_handler(app, debug_mode=config.debug_logging)
    configure_request_logging(
        app,
        debug_mode=config.debug_logging,
        metrics_enabled=config.observability.metrics_enabled,
    )

    cors_kwargs: dict[str, object] = {
        "resources": {
            r"/auth/*": {"origins": config.security.allowed_origins},
            r"/short*": {"origins": config.security.allowed_origins},
            r"/user": {"origins": config.security.allowed_origins},
        }
    }
    if any(o != "*" for o in config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.user_controller.as_blueprint())
    app.register_blueprint(container.links_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cache-Control", "no-store")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )

        return resp

    logger.info("Flask app initialized")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
