"""FastAPI authentication dependencies."""

from __future__ import annotations

import jwt
from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from myscience.auth.jwt import verify_token
from myscience.database import get_session
from myscience.db.models import User
from myscience.users.service import get_user_by_id

# auto_error=False: a missing header is a 401 here, not FastAPI's default.
_bearer = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
    db: AsyncSession = Depends(get_session),
) -> User:
    """Resolve the bearer token's ``sub`` to a User.

    Tokens are minted by the MyScience auth service; a valid token for a
    deleted account is treated like a bad token.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    try:
        payload = verify_token(credentials.credentials, expected_type="access")
    except jwt.InvalidTokenError as e:
        raise _unauthorized(str(e)) from e

    user = await get_user_by_id(db, payload["sub"])
    if user is None:
        raise _unauthorized("User not found")
    return user
