"""Authentication helpers and FastAPI security dependencies.

Sessions are bearer JWTs issued by `services.issue_token`. This module
offers two views of the same session lookup:

- `resolve_user` returns the authenticated `User` or `None`, for
  endpoints that shape their own unauthorized response.
- `get_current_user` is a FastAPI dependency that raises
  HTTPException(401) for any authentication issue.
"""

from typing import Optional
from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import jwt
from sqlmodel import Session
from .config import settings
from .database import get_session
from . import models, repositories

bearer_scheme = HTTPBearer(auto_error=False)


def decode_token(token: str) -> dict:
    """Decode and verify a JWT token.

    Returns the decoded payload on success or raises an HTTPException
    with status 401 on failure.
    """
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail='token expired')
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail='invalid token')


def resolve_user(session: Session, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[models.User]:
    """Return the user behind `credentials`, or `None` when there is no valid session."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        payload = decode_token(credentials.credentials)
    except HTTPException:
        return None
    user_id = payload.get('user_id')
    if not user_id:
        return None
    return repositories.UserRepository(session).get(user_id)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    db: Session = Depends(get_session),
) -> models.User:
    """FastAPI dependency that returns the authenticated user.

    The user is loaded through the request's own database session so
    controllers can modify it directly.
    """
    if credentials is None:
        raise HTTPException(status_code=401, detail='not authenticated')
    payload = decode_token(credentials.credentials)
    user_id = payload.get('user_id')
    if not user_id:
        raise HTTPException(status_code=401, detail='invalid token payload')
    user = repositories.UserRepository(db).get(user_id)
    if not user:
        raise HTTPException(status_code=401, detail='user not found')
    return user
