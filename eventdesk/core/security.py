"""Bearer-token authentication gate.

Tokens are HS256 JWTs carrying ``user_id`` and ``role`` claims. The gate only
decodes the credential; it does not look the user up in the store.
"""

from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ValidationError

from eventdesk.core.config import Settings, get_settings, settings
from eventdesk.core.errors import ForbiddenError, UnauthorizedError
from eventdesk.models.users import UserRole

bearer_scheme = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    """Identity attached to an authenticated request."""

    user_id: int
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_organizer(self) -> bool:
        return self.role == UserRole.ORGANIZER


def create_access_token(
    *, user_id: int, role: str, expires_delta: timedelta | None = None, config: Settings = settings
) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload = {"sub": str(user_id), "user_id": user_id, "role": role, "exp": expire}
    return jwt.encode(payload, config.SECRET_KEY.get_secret_value(), algorithm=config.ALGORITHM)


def decode_access_token(token: str, config: Settings = settings) -> CurrentUser:
    """Decode a bearer token into a CurrentUser.

    Raises ForbiddenError for bad signatures, expired tokens and payloads
    missing the identity claims.
    """
    try:
        payload = jwt.decode(
            token, config.SECRET_KEY.get_secret_value(), algorithms=[config.ALGORITHM]
        )
        return CurrentUser(user_id=payload["user_id"], role=payload["role"])
    except (jwt.PyJWTError, KeyError, ValidationError):
        raise ForbiddenError("Invalid token")


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    config: Settings = Depends(get_settings),
) -> CurrentUser:
    if credentials is None:
        # HTTPBearer also yields None for other schemes; a credential that is present but unusable is invalid
        if request.headers.get("Authorization"):
            raise ForbiddenError("Invalid token")
        raise UnauthorizedError("Missing token")
    return decode_access_token(credentials.credentials, config)


def require_event_creator(
    current_user: CurrentUser = Depends(get_current_user),
    config: Settings = Depends(get_settings),
) -> CurrentUser:
    if config.REQUIRE_ORGANIZER_ROLE_FOR_CREATE and not (
        current_user.is_organizer or current_user.is_admin
    ):
        raise ForbiddenError("Only organizers can create events")
    return current_user
