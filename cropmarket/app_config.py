# cropmarket/app_config.py

import os
from datetime import timedelta


DEFAULT_IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_config(app, overrides=None):
    """
    Load all Flask configuration in a clean centralized way.

    Environment variables come first; ``overrides`` (a plain mapping) is applied
    last so tests and embedding code can inject secrets and paths explicitly.
    """
    # ------------------------------
    # Security Keys
    # ------------------------------
    # unset secrets fall back to a per-process random key
    app.config["SECRET_KEY"] = os.getenv("SECRET_KEY") or os.urandom(32).hex()
    app.config["JWT_SECRET_KEY"] = os.getenv("JWT_SECRET_KEY") or app.config["SECRET_KEY"]
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = timedelta(
        hours=float(os.getenv("TOKEN_TTL_HOURS", "6"))
    )
    app.config["JWT_TOKEN_LOCATION"] = ["headers"]
    app.config["JWT_HEADER_TYPE"] = "Bearer"
    app.config["BCRYPT_LOG_ROUNDS"] = int(os.getenv("BCRYPT_LOG_ROUNDS", "12"))

    # ------------------------------
    # Storage
    # ------------------------------
    app.config["RECORD_STORE"] = os.getenv("RECORD_STORE", "json").lower()
    app.config["DATA_DIR"] = os.getenv("DATA_DIR", os.path.join(os.getcwd(), "data"))
    app.config["MONGO_URI"] = os.getenv(
        "MONGO_URI",
        "mongodb://localhost:27017/crop_marketplace",
    )

    # ------------------------------
    # Uploads
    # ------------------------------
    app.config["UPLOAD_DIR"] = os.getenv("UPLOAD_DIR", os.path.join(os.getcwd(), "uploads"))
    app.config["MAX_CONTENT_LENGTH"] = int(float(os.getenv("MAX_UPLOAD_MB", "5")) * 1024 * 1024)
    app.config["ALLOWED_IMAGE_EXTENSIONS"] = set(DEFAULT_IMAGE_EXTENSIONS)

    # ------------------------------
    # Contracts / logging
    # ------------------------------
    app.config["CONTRACT_COMPRESS"] = _env_bool("CONTRACT_COMPRESS", True)
    app.config["LOG_LEVEL"] = os.getenv("LOG_LEVEL", "INFO").upper()

    if overrides:
        app.config.update(overrides)

    if not os.getenv("JWT_SECRET_KEY") and not os.getenv("SECRET_KEY") and "JWT_SECRET_KEY" not in (overrides or {}):
        app.logger.warning("No SECRET_KEY/JWT_SECRET_KEY set; using a random signing key")

    app.logger.info("Config loaded (store=%s)", app.config["RECORD_STORE"])
