# Overview: bcrypt password hashing.

"""
Passwords are hashed with bcrypt. The cost factor comes from
BCRYPT_ROUNDS (12 in production; tests lower it to keep the suite fast).
"""

import bcrypt
from flask import current_app


def hash_password(password: str) -> str:
    rounds = int(current_app.config.get("BCRYPT_ROUNDS", 12))
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    Returns False for a mismatch and for a malformed stored hash.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False
