"""
Access Tokens.

Stateless HS256 JWTs identifying a user. There is no login endpoint:
tokens are issued by `cli.py users create` and `cli.py users token`, and
the API only verifies them.

Claims: sub (user ID), type ("access"), aud (security.yaml), exp.
"""

from datetime import timedelta
from typing import Any

from jose import JWTError, jwt

from jotter.backend.core.config import get_app_config, get_settings
from jotter.backend.core.exceptions import AuthenticationError
from jotter.backend.core.logging import get_logger
from jotter.backend.core.utils import utc_now

logger = get_logger(__name__)

ACCESS_TOKEN_TYPE = "access"


def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """Sign an access token for `user_id`, valid for the configured lifetime by default."""
    jwt_config = get_app_config().security.jwt
    lifetime = expires_delta or timedelta(minutes=jwt_config.access_token_expire_minutes)
    claims = {
        "sub": user_id,
        "type": ACCESS_TOKEN_TYPE,
        "aud": jwt_config.audience,
        "exp": utc_now() + lifetime,
    }
    return jwt.encode(claims, get_settings().jwt_secret, algorithm=jwt_config.algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """
    Verify signature, audience and expiry, and return the claims.

    Raises:
        AuthenticationError: On any verification failure. The reason is
            logged but never returned to the client.
    """
    jwt_config = get_app_config().security.jwt
    try:
        return jwt.decode(
            token,
            get_settings().jwt_secret,
            algorithms=[jwt_config.algorithm],
            audience=jwt_config.audience,
        )
    except JWTError as e:
        logger.warning("Token decode failed", extra={"error": str(e)})
        raise AuthenticationError("Invalid or expired token") from e


def get_subject(payload: dict[str, Any]) -> str:
    """User ID from decoded claims, rejecting tokens of any other type."""
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise AuthenticationError("Invalid token type")
    subject = payload.get("sub")
    if not subject:
        raise AuthenticationError("Invalid token subject")
    return str(subject)


def verify_access_token(token: str) -> str:
    """Decode a bearer token and return the user ID it was issued for."""
    return get_subject(decode_token(token))
