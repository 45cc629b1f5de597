# cropmarket/routes/auth/auth_routes.py

from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from cropmarket.errors import StorageError
from cropmarket.routes._helpers import request_data
from cropmarket.services.auth_service import AuthService

# -------------------------------------------------------------------
# Blueprint
# -------------------------------------------------------------------
auth_bp = Blueprint("auth", __name__)


# -------------------------------------------------------------------
# JSON: Signup
# -------------------------------------------------------------------
@auth_bp.post("/signup")
def signup():
    try:
        AuthService.signup(request_data())
    except StorageError as e:
        current_app.logger.error("Error in signup: %s", e.message)
        return jsonify(message="Error creating user", error=e.message), 500

    return jsonify(message="User created successfully"), 201


# -------------------------------------------------------------------
# JSON: Login
# -------------------------------------------------------------------
@auth_bp.post("/login")
def login():
    try:
        out = AuthService.login(request_data())
    except StorageError as e:
        current_app.logger.error("Error logging in: %s", e.message)
        return jsonify(message="Error logging in"), 500

    return jsonify(token=out["token"], role=out["role"]), 200
