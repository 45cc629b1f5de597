# cropmarket/services/auth_service.py
from __future__ import annotations

from typing import Any, Dict

from flask import current_app
from flask_bcrypt import Bcrypt
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from pydantic import ValidationError as PydanticValidationError

from cropmarket.errors import Conflict, Forbidden, Unauthorized, ValidationError
from cropmarket.models.user_models import Identity, LoginModel, Role, SignupModel, User
from cropmarket.store import USERS, get_store

bcrypt = Bcrypt()

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def first_error(e: PydanticValidationError) -> str:
    err = e.errors()[0]
    field = ".".join(str(p) for p in err.get("loc", ())) or "body"
    return f"{field}: {err.get('msg', 'invalid value')}"


class AuthService:

    @staticmethod
    def hash_password(plaintext: str) -> str:
        if len(plaintext.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError("Password is too long")
        return bcrypt.generate_password_hash(plaintext).decode("utf-8")

    @staticmethod
    def verify_password(plaintext: str, password_hash: str) -> bool:
        if not password_hash:
            return False
        try:
            return bcrypt.check_password_hash(password_hash, plaintext)
        except ValueError:
            # malformed / foreign hash
            return False

    @staticmethod
    def issue_token(username: str, role: Role) -> str:
        return create_access_token(identity=username, additional_claims={"role": Role(role).value})

    @staticmethod
    def identity_from_claims(claims: Dict[str, Any]) -> Identity:
        try:
            return Identity(username=claims["sub"], role=claims.get("role"))
        except (KeyError, PydanticValidationError):
            raise Forbidden("Invalid token")

    @staticmethod
    def verify_token(token: str | None) -> Identity:
        """
        Decode a raw bearer token outside a request (CLI tools, tests).
        Routes go through security.require_capability, which verifies via
        flask_jwt_extended and ends in identity_from_claims like this does.
        A missing token is 401, a bad one is 403.
        """
        if not token:
            raise Unauthorized("Missing token")
        try:
            claims = decode_token(token)
        except (PyJWTError, JWTExtendedException):
            raise Forbidden("Invalid token")
        return AuthService.identity_from_claims(claims)

    # ------------------------------------------------------------------
    # Account lifecycle
    # ------------------------------------------------------------------
    @staticmethod
    def signup(data: Dict[str, Any]) -> User:
        try:
            payload = SignupModel(**data)
        except PydanticValidationError as e:
            raise ValidationError(first_error(e))
        except TypeError:
            raise ValidationError("Invalid request body")

        user = User(
            username=payload.username,
            passwordHash=AuthService.hash_password(payload.password),
            role=payload.role,
        )
        try:
            get_store().append(USERS, user.model_dump(mode="json"), unique_key="username")
        except Conflict:
            raise Conflict("Username already exists")

        current_app.logger.info("User %s signed up as %s", user.username, user.role.value)
        return user

    @staticmethod
    def find_user(username: str) -> User | None:
        for u in get_store().load_all(USERS):
            if u.get("username") == username:
                try:
                    return User(**u)
                except PydanticValidationError:
                    current_app.logger.warning("Skipping malformed user record %s", username)
                    return None
        return None

    @staticmethod
    def login(data: Dict[str, Any]) -> Dict[str, str]:
        try:
            payload = LoginModel(**data)
        except (PydanticValidationError, TypeError):
            raise ValidationError("Invalid credentials")

        user = AuthService.find_user(payload.username)
        if not user or not AuthService.verify_password(payload.password, user.passwordHash):
            current_app.logger.info("Failed login for %s", payload.username)
            raise ValidationError("Invalid credentials")

        current_app.logger.info("User %s logged in", user.username)
        return {"token": AuthService.issue_token(user.username, user.role), "role": user.role.value}
