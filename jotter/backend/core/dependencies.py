"""
FastAPI Dependencies.

Annotated aliases used in endpoint signatures:

    DbSession    request-scoped AsyncSession
    RequestId    the ID the middleware assigned to this request
    CurrentUser  the user named by the bearer token
"""

import uuid
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from jotter.backend.core.database import get_db_session
from jotter.backend.core.exceptions import AuthenticationError
from jotter.backend.core.logging import get_logger
from jotter.backend.core.security import verify_access_token
from jotter.backend.models.user import User
from jotter.backend.repositories.user import UserRepository

logger = get_logger(__name__)

DbSession = Annotated[AsyncSession, Depends(get_db_session)]

bearer_scheme = HTTPBearer(auto_error=False)


async def get_request_id(request: Request) -> str:
    """Request ID from the middleware, so envelopes match the X-Request-ID header."""
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


async def get_current_user(
    db: DbSession,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User:
    """
    Resolve the bearer token to a stored user.

    Raises:
        AuthenticationError: Token missing, invalid, expired, or naming a
            user that no longer exists
    """
    if credentials is None:
        raise AuthenticationError()

    user_id = verify_access_token(credentials.credentials)
    user = await UserRepository(db).get_by_id_or_none(user_id)
    if user is None:
        logger.warning("Token subject not found", extra={"user_id": user_id})
        raise AuthenticationError("Invalid or expired token")
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
