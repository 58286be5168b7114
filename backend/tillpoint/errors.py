# backend/tillpoint/errors.py
"""
Error taxonomy shared by services, guards and routes.

Every failure a caller can see is one ErrorKind. Each kind carries the
message shown to clients and the HTTP status it maps to, so routes never
compare exception identities.
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    INTERNAL = ("internal error", 500)
    NOT_FOUND = ("data not found", 404)
    CONFLICT = ("data conflicts with existing data in unique column", 409)
    NO_UPDATED_DATA = ("no data to update", 400)
    INSUFFICIENT_STOCK = ("product stock is not enough", 400)
    INSUFFICIENT_PAYMENT = ("total paid is less than total price", 400)
    INVALID_CREDENTIALS = ("invalid email or password", 401)
    UNAUTHORIZED = ("user is unauthorized to access the resource", 401)
    EMPTY_AUTHORIZATION_HEADER = ("authorization header is not provided", 401)
    INVALID_AUTHORIZATION_HEADER = ("authorization header format is invalid", 401)
    INVALID_AUTHORIZATION_TYPE = ("authorization type is not supported", 401)
    INVALID_TOKEN = ("access token is invalid", 401)
    EXPIRED_TOKEN = ("access token has expired", 401)
    FORBIDDEN = ("user is forbidden to access the resource", 403)
    TOKEN_CREATION = ("error creating token", 500)

    def __init__(self, message: str, status_code: int):
        self.message = message
        self.status_code = status_code


class DomainError(Exception):
    """Raised by services and guards; routes map `kind` to a response."""

    def __init__(self, kind: ErrorKind):
        super().__init__(kind.message)
        self.kind = kind

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def __repr__(self) -> str:
        return f"<DomainError {self.kind.name}>"
