"""
Password Hashing

passlib CryptContext configured from WELLNESS_SECURITY_PASSWORD_SCHEMES.
The first scheme hashes new passwords; older schemes still verify and
are flagged for rehash on the next successful login.

SECURITY: Plain passwords are never logged or stored.
"""

from functools import lru_cache
from typing import Optional

from passlib.context import CryptContext

from wellness.config import get_settings
from wellness.config.logging_config import get_logger

logger = get_logger(__name__)


@lru_cache()
def get_password_context() -> CryptContext:
    return CryptContext(
        schemes=get_settings().security.password_schemes,
        deprecated="auto",
    )


def hash_password(password: str) -> str:
    return get_password_context().hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """
    Check a password against a stored hash.

    Returns:
        False for missing or unrecognized hashes
    """
    if not password_hash:
        return False
    try:
        return get_password_context().verify(password, password_hash)
    except ValueError as e:
        logger.warning("Stored password hash not recognized", error=str(e))
        return False


def needs_rehash(password_hash: str) -> bool:
    return get_password_context().needs_update(password_hash)
