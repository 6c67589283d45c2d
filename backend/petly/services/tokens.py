"""
JWT issuance and verification (PyJWT, HS256 by default).

Claims:
    sub       username
    id        local id of the shelter/adopter
    userType  "shelters" or "adopters"
    isAdmin   admin flag at issuance time
    exp       expiry (JWT_EXPIRE_MINUTES after issuance)
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

import jwt

from petly.config import settings
from petly.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

SHELTER_USER = "shelters"
ADOPTER_USER = "adopters"
USER_TYPES = (SHELTER_USER, ADOPTER_USER)


@dataclass(frozen=True)
class AuthenticatedUser:
    """The caller of one request, passed explicitly into each operation."""

    username: str
    id: int
    user_type: str
    is_admin: bool = False

    @property
    def is_shelter(self) -> bool:
        return self.user_type == SHELTER_USER

    @property
    def is_adopter(self) -> bool:
        return self.user_type == ADOPTER_USER


def create_token(record: Mapping[str, Any], user_type: str) -> str:
    if user_type not in USER_TYPES:
        raise ValueError(f"Unknown user type: {user_type}")
    payload = {
        "sub": record["username"],
        "id": record["id"],
        "userType": user_type,
        "isAdmin": bool(record.get("isAdmin", False)),
        "exp": datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expire_minutes),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> AuthenticatedUser:
    """
    Raises:
        UnauthorizedError: bad signature, expired, or missing claims
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except jwt.InvalidTokenError as e:
        logger.info("Rejected token: %s", str(e))
        raise UnauthorizedError("Invalid token")

    try:
        user = AuthenticatedUser(
            username=payload["sub"],
            id=int(payload["id"]),
            user_type=payload["userType"],
            is_admin=bool(payload.get("isAdmin", False)),
        )
    except (KeyError, TypeError, ValueError):
        raise UnauthorizedError("Invalid token")
    if user.user_type not in USER_TYPES:
        raise UnauthorizedError("Invalid token")
    return user
