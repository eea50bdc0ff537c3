"""
Password helpers:
- Argon2 hashing via argon2-cffi
- verification that never raises for a wrong password
"""
from __future__ import annotations

import logging

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from utils.errors import InternalError

logger = logging.getLogger(__name__)

ph = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a plaintext password against a stored Argon2 hash.

    Returns False on mismatch. Raises InternalError if the stored hash is
    malformed, since that is a storage problem and not a bad credential.
    """
    try:
        return ph.verify(password_hash, password)
    except VerifyMismatchError:
        return False
    except (InvalidHashError, VerificationError) as exc:
        logger.exception("Stored password hash could not be verified")
        raise InternalError("Something went wrong while verifying credentials") from exc
