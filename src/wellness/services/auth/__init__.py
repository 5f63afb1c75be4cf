"""
Authentication services: password hashing, JWTs and account flows.
"""

from wellness.services.auth.auth_service import AuthResult, AuthService
from wellness.services.auth.passwords import hash_password, verify_password
from wellness.services.auth.token_service import TokenClaims, TokenService

__all__ = [
    "AuthResult",
    "AuthService",
    "TokenClaims",
    "TokenService",
    "hash_password",
    "verify_password",
]
