# storefront/auth/service.py
#
# Tokens are issued by the external identity provider; this module only
# verifies them and exposes the caller to the routers.

from datetime import timedelta, datetime, timezone
from typing import Annotated, Iterable, Optional
from uuid import uuid4
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
import jwt
from jwt import PyJWTError
import logging

from . import models
from ..core.config import settings
from ..core.exceptions import AuthenticationError, ForbiddenError

logger = logging.getLogger(__name__)

SECRET_KEY = settings.JWT_SECRET_KEY
ALGORITHM = settings.JWT_ALGORITHM

oauth2_bearer = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)


def create_access_token(
    user_id: str,
    email: Optional[str] = None,
    roles: Iterable[str] = (),
    expires_delta: Optional[timedelta] = None,
    full_name: Optional[str] = None,
) -> str:
    """Creates a JWT access token in the identity provider's format (local tooling and tests)."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    encode = {
        'id': str(user_id),
        'name': full_name,
        'roles': list(roles),
        'exp': expire,
        'scope': 'access_token',
        'jti': str(uuid4()),
    }
    # Registered 'sub' must be a string when present
    if email:
        encode['sub'] = email
    return jwt.encode(encode, SECRET_KEY, algorithm=ALGORITHM)


def verify_token(token: str) -> models.TokenData:
    """Decodes and verifies an access token."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except PyJWTError as e:
        logger.warning(f"JWT decode error: {e}")
        raise AuthenticationError(message="Invalid token")

    if payload.get('scope') != 'access_token':
        raise AuthenticationError(message="Invalid token scope")

    user_id = payload.get('id')
    if not user_id:
        raise AuthenticationError(message="User ID not found in token.")

    roles = payload.get('roles') or []
    if isinstance(roles, str):
        roles = [roles]

    return models.TokenData(
        user_id=str(user_id),
        email=payload.get('sub'),
        full_name=payload.get('name'),
        roles=roles,
        is_admin=settings.ADMIN_ROLE in roles,
    )


def get_current_user(token: Annotated[Optional[str], Depends(oauth2_bearer)]) -> models.TokenData:
    """FastAPI dependency to get the current user from a token."""
    if not token:
        raise AuthenticationError(message="Not authenticated")
    return verify_token(token)


def require_admin(current_user: Annotated[models.TokenData, Depends(get_current_user)]) -> models.TokenData:
    """FastAPI dependency that only lets administrators through."""
    if not current_user.is_admin:
        raise ForbiddenError("Administrator role required")
    return current_user


CurrentUser = Annotated[models.TokenData, Depends(get_current_user)]
AdminUser = Annotated[models.TokenData, Depends(require_admin)]
