# cropmarket/security.py
from __future__ import annotations

from functools import wraps

from flask import g, jsonify, request
from flask_jwt_extended import JWTManager, get_jwt, verify_jwt_in_request

from cropmarket.errors import Forbidden
from cropmarket.models.user_models import Capability, Identity
from cropmarket.services.auth_service import AuthService

jwt = JWTManager()

DENIED_MESSAGES = {
    Capability.CREATE_CROP: "Only farmers can upload crops",
}


def init_jwt(app):
    """
    Attach JWTManager and map its failures onto our taxonomy:
    no Authorization header -> 401, anything wrong with a presented token -> 403.
    """
    jwt.init_app(app)

    @jwt.unauthorized_loader
    def _missing(reason):
        # a header that is present but not "Bearer <token>" counts as malformed
        if request.headers.get("Authorization"):
            return jsonify(message="Invalid token"), 403
        return jsonify(message="Missing token"), 401

    @jwt.invalid_token_loader
    def _invalid(reason):
        return jsonify(message="Invalid token"), 403

    @jwt.expired_token_loader
    def _expired(jwt_header, jwt_payload):
        return jsonify(message="Token expired"), 403

    @jwt.revoked_token_loader
    def _revoked(jwt_header, jwt_payload):
        return jsonify(message="Token revoked"), 403

    @jwt.needs_fresh_token_loader
    def _not_fresh(jwt_header, jwt_payload):
        return jsonify(message="Fresh token required"), 403


def current_identity() -> Identity:
    return g.identity


def require_capability(capability: Capability):
    """Route guard: valid bearer token whose role grants ``capability``."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            identity = AuthService.identity_from_claims(get_jwt())
            if not identity.can(capability):
                raise Forbidden(DENIED_MESSAGES.get(capability, "Forbidden: insufficient role"))
            g.identity = identity
            return fn(*args, **kwargs)

        return wrapper

    return decorator
