"""
Bearer token verification.

Tokens are issued by the external identity provider; this module only checks
their signature and expiry with the shared secret.
"""

from datetime import timedelta
from typing import Any, Dict, Optional, Union

from jose import JWTError, jwt

from library_api.core.config import Settings
from library_api.core.db import utcnow


class TokenError(Exception):
    """Raised when a bearer token cannot be trusted."""


def decode_access_token(token: str, settings: Settings) -> Dict[str, Any]:
    """
    Decode and verify a JWT access token.

    Args:
        token: Raw token from the Authorization header
        settings: Application settings holding the key and algorithm

    Returns:
        Token claims

    Raises:
        TokenError: If the token is malformed, expired or has no subject
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        raise TokenError(str(e)) from e

    if not payload.get("sub"):
        raise TokenError("Token has no subject")
    return payload


def create_access_token(
    subject: Union[str, Any],
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign a token the way the identity provider does; used by tooling and tests."""
    expire = utcnow() + (expires_delta or timedelta(minutes=30))
    to_encode = {"exp": expire, "sub": str(subject)}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
