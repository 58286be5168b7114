from __future__ import annotations

from ..errors import DomainError, ErrorKind
from ..extensions import db
from ..models import User
from .store import store_errors


def get_user_by_email(email: str) -> User:
    with store_errors("get User by email"):
        user = db.session.query(User).filter(User.email == email).first()
    if user is None:
        raise DomainError(ErrorKind.NOT_FOUND)
    return user
