# Overview: Signed, expiring access tokens.

"""
Access tokens are itsdangerous URL-safe timed signatures over a small payload:

    {"id": "<uuid4>", "user_id": 1, "role": "admin"}

They are signed with SECRET_KEY and expire TOKEN_DURATION seconds after
issue. Nothing is stored server-side; logout is not supported.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass

from flask import current_app
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from ..errors import DomainError, ErrorKind

TOKEN_SALT = "tillpoint-access-token"


@dataclass(frozen=True)
class TokenPayload:
    id: str
    user_id: int
    role: str


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=TOKEN_SALT)


def create_token(user) -> str:
    """Issue a token for a User instance (or any object with id and role)."""
    payload = {"id": str(uuid.uuid4()), "user_id": user.id, "role": user.role}
    try:
        return _serializer().dumps(payload)
    except (TypeError, ValueError) as exc:
        current_app.logger.exception("Failed to create access token")
        raise DomainError(ErrorKind.TOKEN_CREATION) from exc


def verify_token(token: str) -> TokenPayload:
    """
    Decode and check a token.

    Raises:
        DomainError(EXPIRED_TOKEN): signature is valid but older than TOKEN_DURATION
        DomainError(INVALID_TOKEN): anything else wrong with the token
    """
    try:
        data = _serializer().loads(token, max_age=current_app.config["TOKEN_DURATION"])
    except SignatureExpired as exc:
        raise DomainError(ErrorKind.EXPIRED_TOKEN) from exc
    except BadSignature as exc:
        raise DomainError(ErrorKind.INVALID_TOKEN) from exc

    try:
        return TokenPayload(id=data["id"], user_id=int(data["user_id"]), role=data["role"])
    except (KeyError, TypeError, ValueError) as exc:
        raise DomainError(ErrorKind.INVALID_TOKEN) from exc
