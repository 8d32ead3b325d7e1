"""
Security Module

Handles password hashing, JWT token generation/validation.
Uses industry-standard libraries (passlib with bcrypt, python-jose).

The signing secret and algorithm are passed in by the caller (they live on
the application's Settings), never read from a module-level global.

SECURITY NOTES:
- Passwords are hashed with bcrypt (slow by design to prevent brute force)
- JWT tokens expire after JWT_EXPIRES_MINUTES (one day by default)
- Token payload carries userId, role and tenantId; handlers trust only these
"""
from datetime import datetime, timedelta
from functools import lru_cache
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from passlib.context import CryptContext

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

DEFAULT_TOKEN_LIFETIME = timedelta(days=1)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Uses constant-time comparison to prevent timing attacks.
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Hash a password using bcrypt.

    NOTE: This is intentionally slow (100ms+). Don't call it in hot paths.
    """
    return pwd_context.hash(password)


@lru_cache()
def _dummy_hash() -> str:
    return pwd_context.hash("not-a-real-password")


def dummy_verify(plain_password: str) -> bool:
    """
    Burn the same bcrypt effort as a real check when no user matched,
    so response time does not reveal which emails exist. Always False.
    """
    pwd_context.verify(plain_password, _dummy_hash())
    return False


def create_access_token(
    data: Dict[str, Any],
    secret: str,
    algorithm: str = "HS256",
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a signed JWT access token.

    Adds exp and iat to the supplied claims. The claims are expected to be
    userId, role and tenantId.
    """
    to_encode = data.copy()

    now = datetime.utcnow()
    expire = now + (expires_delta if expires_delta is not None else DEFAULT_TOKEN_LIFETIME)

    to_encode.update({
        "exp": expire,
        "iat": now
    })

    return jwt.encode(to_encode, secret, algorithm=algorithm)


def decode_access_token(token: str, secret: str, algorithm: str = "HS256") -> Optional[Dict[str, Any]]:
    """
    Decode and verify a JWT token.

    Returns the payload if valid, None if invalid/expired/tampered.
    Signature and expiration are verified by python-jose.
    """
    try:
        return jwt.decode(token, secret, algorithms=[algorithm])
    except JWTError:
        return None
