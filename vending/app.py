# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from flask import Flask
from flask_cors import CORS

from vending.infrastructure.container import Container, container
from vending.infrastructure.db import init_db
from vending.shared.config import load_config
from vending.shared.logging import logger, setup_logging
from vending.shared.middleware.error_handler import configure_error_handling
from vending.shared.middleware.request_logger import configure_request_logging

_config = load_config()


def create_app(app_container: Container | None = None) -> Flask:
    services = app_container or container

    setup_logging(debug_mode=_config.debug_logging)
    init_db()

    app = Flask(__name__)
    app.config.update(SECRET_KEY=_config.secret_key)
    app.json.sort_keys = False

    configure_error_handling(app)
    configure_request_logging(app)
    services.authenticator.configure(app)

    CORS(
        app,
        resources={r"/v1/*": {"origins": _config.security.allowed_origins}},
        expose_headers=["Location", "WWW-Authenticate", "X-Request-ID"],
    )

    app.register_blueprint(services.misc_controller.as_blueprint())
    app.register_blueprint(services.users_controller.as_blueprint())
    app.register_blueprint(services.auth_controller.as_blueprint())
    app.register_blueprint(services.products_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cross-Origin-Resource-Policy", "same-origin")
        return resp

    logger.info(f"Flask app initialized (env={_config.app_env})")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=4000, debug=True)
