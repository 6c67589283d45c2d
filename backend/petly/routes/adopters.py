"""
Petly Backend: Adopter Routes
===============================

What:  Adopter profiles, addressed by username, and an adopter's favorite dogs.
Who:   Frontend profile page and favorites page.

Access:
    GET list / GET one      any logged-in user
    POST, DELETE            admin
    PATCH, favorites        the adopter themself, or an admin
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from petly.dependencies import (
    ensure_adopter_or_admin,
    get_catalog,
    get_executor,
    require_admin,
    require_user,
)
from petly.exceptions import ForbiddenError
from petly.schemas.adopter import AdopterCreate, AdopterResponse, AdopterUpdate
from petly.schemas.auth import PasswordUpdate
from petly.schemas.common import DeletedResponse, ErrorResponse, PasswordUpdatedResponse
from petly.schemas.listings import DogSummary
from petly.services.catalog_base import ExternalCatalog
from petly.services.favorites import FavoritesLedger, resolve_favorite_dogs
from petly.services.query import QueryExecutor
from petly.services.stores import AdoptableDogStore, AdopterStore
from petly.services.tokens import AuthenticatedUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/adopters", tags=["Adopters"])

_NOT_FOUND = {404: {"description": "Adopter not found", "model": ErrorResponse}}


@router.get(
    "",
    response_model=List[AdopterResponse],
    summary="Search adopters",
)
async def list_adopters(
    username: Optional[str] = Query(default=None, description="Partial username match"),
    email: Optional[str] = Query(default=None, description="Partial email match"),
    db: QueryExecutor = Depends(get_executor),
    user: AuthenticatedUser = Depends(require_user),
):
    return await AdopterStore(db).find_all({"username": username, "email": email})


@router.get(
    "/{username}",
    response_model=AdopterResponse,
    responses=_NOT_FOUND,
    summary="Get an adopter with their favorite dog ids",
)
async def get_adopter(
    username: str,
    db: QueryExecutor = Depends(get_executor),
    user: AuthenticatedUser = Depends(require_user),
):
    return await AdopterStore(db).get(username)


@router.post(
    "",
    response_model=AdopterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Username already taken", "model": ErrorResponse}},
    summary="Create an adopter (admin)",
)
async def create_adopter(
    body: AdopterCreate,
    db: QueryExecutor = Depends(get_executor),
    admin: AuthenticatedUser = Depends(require_admin),
):
    adopter = await AdopterStore(db).create(body.to_store())
    logger.info("Admin %s created adopter %s", admin.username, adopter["username"])
    return adopter


@router.patch(
    "/{username}",
    response_model=AdopterResponse,
    responses={
        **_NOT_FOUND,
        400: {"description": "Empty or invalid update", "model": ErrorResponse},
        403: {"description": "Not this adopter or an admin", "model": ErrorResponse},
        409: {"description": "New username already taken", "model": ErrorResponse},
    },
    summary="Update an adopter's profile",
)
async def update_adopter(
    username: str,
    body: AdopterUpdate,
    db: QueryExecutor = Depends(get_executor),
    user: AuthenticatedUser = Depends(require_user),
):
    adopters = AdopterStore(db)
    target = await adopters.get(username)
    ensure_adopter_or_admin(user, target)
    data = body.to_store()
    if "isAdmin" in data and not user.is_admin:
        raise ForbiddenError("Only admins can change admin rights")
    return await adopters.update(target["id"], data)


@router.patch(
    "/{username}/password",
    response_model=PasswordUpdatedResponse,
    responses=_NOT_FOUND,
    summary="Change an adopter's password",
)
async def update_adopter_password(
    username: str,
    body: PasswordUpdate,
    db: QueryExecutor = Depends(get_executor),
    user: AuthenticatedUser = Depends(require_user),
):
    adopters = AdopterStore(db)
    target = await adopters.get(username)
    ensure_adopter_or_admin(user, target)
    return await adopters.update_password(target["id"], body.password)


@router.delete(
    "/{username}",
    response_model=DeletedResponse,
    responses=_NOT_FOUND,
    summary="Delete an adopter and their favorites (admin)",
)
async def delete_adopter(
    username: str,
    db: QueryExecutor = Depends(get_executor),
    admin: AuthenticatedUser = Depends(require_admin),
):
    return await AdopterStore(db).remove(username)


@router.get(
    "/{username}/favorites",
    response_model=List[DogSummary],
    responses=_NOT_FOUND,
    summary="An adopter's favorite dogs",
    description=(
        "Full dog records in the order they were favorited. Favorites whose "
        "dog no longer exists locally or on Petfinder are left out."
    ),
)
async def list_favorite_dogs(
    username: str,
    db: QueryExecutor = Depends(get_executor),
    catalog: ExternalCatalog = Depends(get_catalog),
    user: AuthenticatedUser = Depends(require_user),
):
    target = await AdopterStore(db).get(username)
    ensure_adopter_or_admin(user, target)
    dog_ids = await FavoritesLedger(db).list_favorite_dog_ids(target["id"])
    return await resolve_favorite_dogs(dog_ids, AdoptableDogStore(db), catalog)
