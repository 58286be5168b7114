# Overview: Request guards for API routes.

from functools import wraps
from flask import request, g

from .errors import DomainError, ErrorKind
from .services.token_service import verify_token

AUTHORIZATION_TYPE_BEARER = "bearer"


def _parse_bearer_token(header: str | None) -> str:
    if not header:
        raise DomainError(ErrorKind.EMPTY_AUTHORIZATION_HEADER)

    fields = header.split()
    if len(fields) != 2:
        raise DomainError(ErrorKind.INVALID_AUTHORIZATION_HEADER)

    if fields[0].lower() != AUTHORIZATION_TYPE_BEARER:
        raise DomainError(ErrorKind.INVALID_AUTHORIZATION_TYPE)

    return fields[1]


def require_auth(f):
    """
    Require a valid access token.

    Sets g.auth_payload (TokenPayload: id, user_id, role).

    Raises DomainError (401) for a missing or malformed Authorization header,
    an unsupported scheme, or an invalid/expired token.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = _parse_bearer_token(request.headers.get("Authorization"))
        g.auth_payload = verify_token(token)
        return f(*args, **kwargs)

    return decorated_function


def require_admin(f):
    """Require the authenticated user to be an admin. Apply after @require_auth."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        payload = getattr(g, "auth_payload", None)
        if payload is None:
            raise DomainError(ErrorKind.UNAUTHORIZED)
        if payload.role != "admin":
            raise DomainError(ErrorKind.FORBIDDEN)
        return f(*args, **kwargs)
    return decorated_function
