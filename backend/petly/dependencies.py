"""
Petly Backend: Request Dependencies
=====================================

What:  FastAPI dependencies that build per-request collaborators and the
       authenticated caller.
How:   Route handlers declare what they need; FastAPI resolves the chain
       (session → executor → stores/catalog) once per request.

Authentication:
    The bearer token is decoded into an AuthenticatedUser that handlers
    receive as a parameter. There is no module-level "current user".

    get_current_user   optional: None when no Authorization header is sent
    require_user       any valid shelter/adopter token          (else 401)
    require_admin      admin token                              (else 403)
    require_shelter    shelter token, or any admin token        (else 403)
    require_adopter    adopter token                            (else 403)
"""

from typing import Any, Mapping, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from petly.database import get_db_session
from petly.exceptions import ForbiddenError, UnauthorizedError
from petly.services.breed_service import BreedStore
from petly.services.catalog_base import ExternalCatalog
from petly.services.email_service import EmailService, email_service
from petly.services.petfinder_service import PetfinderCatalog
from petly.services.query import QueryExecutor
from petly.services.tokens import AuthenticatedUser, decode_token

_bearer = HTTPBearer(auto_error=False)


# ── Collaborators ─────────────────────────────────────────────────────────

async def get_executor(session: AsyncSession = Depends(get_db_session)) -> QueryExecutor:
    return QueryExecutor(session)


async def get_catalog(db: QueryExecutor = Depends(get_executor)) -> ExternalCatalog:
    return PetfinderCatalog(breeds=BreedStore(db))


def get_email_service() -> EmailService:
    return email_service


# ── Authentication ────────────────────────────────────────────────────────

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> Optional[AuthenticatedUser]:
    if credentials is None:
        return None
    return decode_token(credentials.credentials)


async def require_user(
    user: Optional[AuthenticatedUser] = Depends(get_current_user),
) -> AuthenticatedUser:
    if user is None:
        raise UnauthorizedError("Authentication required")
    return user


async def require_admin(user: AuthenticatedUser = Depends(require_user)) -> AuthenticatedUser:
    if not user.is_admin:
        raise ForbiddenError("Admin access required")
    return user


async def require_shelter(user: AuthenticatedUser = Depends(require_user)) -> AuthenticatedUser:
    if not (user.is_shelter or user.is_admin):
        raise ForbiddenError("Shelter access required")
    return user


async def require_adopter(user: AuthenticatedUser = Depends(require_user)) -> AuthenticatedUser:
    if not user.is_adopter:
        raise ForbiddenError("Adopter access required")
    return user


# ── Ownership checks ──────────────────────────────────────────────────────

def ensure_shelter_or_admin(user: AuthenticatedUser, shelter_id: Any) -> None:
    """The caller is the shelter `shelter_id`, or an admin."""
    if user.is_admin:
        return
    if user.is_shelter and str(user.id) == str(shelter_id):
        return
    raise ForbiddenError(context={"shelter_id": str(shelter_id)})


def ensure_adopter_or_admin(user: AuthenticatedUser, adopter: Mapping[str, Any]) -> None:
    """
    The caller is the adopter row `adopter`, or an admin.

    Compared by id: usernames can change and be taken again by someone else.
    """
    if user.is_admin:
        return
    if user.is_adopter and user.id == adopter["id"]:
        return
    raise ForbiddenError(context={"username": adopter["username"]})
