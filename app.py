# app.py

import logging

from flask import Flask
from flask.logging import default_handler
from flask_cors import CORS

from cropmarket.app_config import load_config
from cropmarket.errors import register_error_handlers
from cropmarket.register_blueprints import register_all_blueprints
from cropmarket.security import init_jwt
from cropmarket.services.auth_service import bcrypt
from cropmarket.store import init_store


def create_app(config=None, store=None):
    """
    Build the marketplace API. ``config`` overrides env-derived settings and
    ``store`` replaces the configured record store (tests inject both).
    """
    app = Flask(__name__)

    # -------------------------
    # Config & logging
    # -------------------------
    load_config(app, config)
    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app.logger.setLevel(app.config["LOG_LEVEL"])
    # records propagate to the root handler set up above
    app.logger.removeHandler(default_handler)

    CORS(app, resources={r"/*": {"origins": "*"}})

    # -------------------------
    # Storage
    # -------------------------
    init_store(app, store)

    # -------------------------
    # Auth: bcrypt + JWT
    # -------------------------
    bcrypt.init_app(app)
    init_jwt(app)

    # -------------------------
    # Errors & blueprints
    # -------------------------
    register_error_handlers(app)
    register_all_blueprints(app)

    return app


# Local run only
if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=3000, debug=True)
