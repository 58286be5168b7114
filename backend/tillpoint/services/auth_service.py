# Overview: Credential check and token issuance.

from ..errors import DomainError, ErrorKind
from ..repository.users import get_user_by_email
from .passwords import verify_password
from .token_service import create_token


def login(email: str, password: str) -> str:
    """
    Exchange email + password for an access token.

    Unknown email and wrong password both raise INVALID_CREDENTIALS so the
    response does not reveal which accounts exist. Always reads the store:
    the user cache never holds password hashes.
    """
    try:
        user = get_user_by_email(email)
    except DomainError as exc:
        if exc.kind is ErrorKind.NOT_FOUND:
            raise DomainError(ErrorKind.INVALID_CREDENTIALS) from exc
        raise

    if not verify_password(password, user.password):
        raise DomainError(ErrorKind.INVALID_CREDENTIALS)

    return create_token(user)
