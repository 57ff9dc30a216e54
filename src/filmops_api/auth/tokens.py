"""Bearer token verification.

Tokens are issued by the login service; this module only checks their signature and
expiry and extracts the user id they were issued for.
"""

from typing import Any
from typing import Dict
from typing import Optional

import jwt
from loguru import logger


class InvalidTokenError(Exception):
    """Raised when a bearer token is missing, malformed, expired or unsigned."""


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Pull the token out of an ``Authorization`` header value.

    Parameters
    ----------
    authorization : str, optional
        Raw header value, expected as ``Bearer <token>``

    Returns
    -------
    str
        The token

    Raises
    ------
    InvalidTokenError
        If the header is absent or not a bearer credential
    """
    if not authorization:
        raise InvalidTokenError("Missing Authorization header")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise InvalidTokenError("Authorization header must be a Bearer token")

    return token.strip()


def decode_access_token(token: str, secret: str, algorithm: str = "HS256") -> Dict[str, Any]:
    """
    Verify a token and return its claims.

    Raises
    ------
    InvalidTokenError
        If the signature, expiry or payload is invalid
    """
    try:
        claims = jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.ExpiredSignatureError as e:
        logger.debug("Rejected expired bearer token")
        raise InvalidTokenError("Token has expired") from e
    except jwt.PyJWTError as e:
        logger.debug("Rejected invalid bearer token", error=str(e))
        raise InvalidTokenError("Invalid token") from e

    if "id" not in claims:
        raise InvalidTokenError("Token is missing the user id claim")

    return claims


def get_user_id_from_token(token: str, secret: str, algorithm: str = "HS256") -> int:
    """Verify a token and return the integer user id it names."""
    claims = decode_access_token(token, secret, algorithm)
    try:
        return int(claims["id"])
    except (TypeError, ValueError) as e:
        raise InvalidTokenError("Token user id claim is not an integer") from e
