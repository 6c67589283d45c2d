"""
Petly Backend: Adoptable Dog Routes
=====================================

What:  Search and read dogs from both sources; create, update and delete
       local dogs.
How:   GET handlers go through the merger (local first, then Petfinder).
       Write handlers act on local dogs only, and only the owning shelter
       (or an admin) may change a dog.
Who:   Frontend dog search, dog detail and shelter dashboard.

Query parameters use the same camelCase names as the JSON bodies
(`breedId`, `goodWKids`, `shelterId`, ...). Compatibility filters accept
any tri-state spelling; "unknown" is the same as leaving the filter out.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from petly.dependencies import (
    ensure_shelter_or_admin,
    get_catalog,
    get_executor,
    require_shelter,
    require_user,
)
from petly.exceptions import NotFoundError, ValidationError
from petly.schemas.adoptable_dog import DogCreate, DogUpdate
from petly.schemas.common import DeletedResponse, ErrorResponse
from petly.schemas.listings import DogResponse, DogSummary
from petly.services.catalog_base import ExternalCatalog
from petly.services.merger import lookup_dog, search_dogs
from petly.services.query import QueryExecutor
from petly.services.stores import AdoptableDogStore
from petly.services.tokens import AuthenticatedUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dogs", tags=["Dogs"])

_OWNER_RESPONSES = {
    403: {"description": "Not the owning shelter or an admin", "model": ErrorResponse},
    404: {"description": "Dog not found", "model": ErrorResponse},
}


async def _owned_dog(store: AdoptableDogStore, dog_id: int, user: AuthenticatedUser) -> None:
    dog = await store.lookup(dog_id, hydrate=False)
    if dog is None:
        raise NotFoundError(resource="adoptable dog", resource_id=str(dog_id))
    ensure_shelter_or_admin(user, dog["shelterId"])


@router.get(
    "",
    response_model=List[DogSummary],
    responses={
        400: {"description": "Unparseable filter value", "model": ErrorResponse},
        502: {"description": "Petfinder failure", "model": ErrorResponse},
    },
    summary="Search local and Petfinder dogs",
)
async def list_dogs(
    name: Optional[str] = Query(default=None, description="Partial name match"),
    breed_id: Optional[str] = Query(default=None, alias="breedId"),
    gender: Optional[str] = Query(default=None),
    age: Optional[str] = Query(default=None),
    good_w_kids: Optional[str] = Query(default=None, alias="goodWKids"),
    good_w_dogs: Optional[str] = Query(default=None, alias="goodWDogs"),
    good_w_cats: Optional[str] = Query(default=None, alias="goodWCats"),
    shelter_id: Optional[str] = Query(default=None, alias="shelterId"),
    db: QueryExecutor = Depends(get_executor),
    catalog: ExternalCatalog = Depends(get_catalog),
    user: AuthenticatedUser = Depends(require_user),
):
    filters = {
        "name": name,
        "breedId": breed_id,
        "gender": gender,
        "age": age,
        "goodWKids": good_w_kids,
        "goodWDogs": good_w_dogs,
        "goodWCats": good_w_cats,
        "shelterId": shelter_id,
    }
    return await search_dogs(filters, AdoptableDogStore(db), catalog)


@router.get(
    "/{reference}",
    response_model=List[DogResponse],
    responses={404: {"description": "No dog with that reference", "model": ErrorResponse}},
    summary="Get a dog with its shelter",
    description=(
        "A numeric reference may name both a local dog and a Petfinder animal; "
        "every match is returned, local first."
    ),
)
async def get_dog(
    reference: str,
    db: QueryExecutor = Depends(get_executor),
    catalog: ExternalCatalog = Depends(get_catalog),
    user: AuthenticatedUser = Depends(require_user),
):
    matches = await lookup_dog(reference, AdoptableDogStore(db), catalog)
    if not matches:
        raise NotFoundError(resource="dog", resource_id=reference)
    return matches


@router.post(
    "",
    response_model=DogResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid field, breed or shelter", "model": ErrorResponse},
        403: {"description": "Not a shelter or an admin", "model": ErrorResponse},
    },
    summary="List a dog for adoption",
    description=(
        "Shelters list dogs under their own id. Admins may list a dog for any "
        "shelter and must name it with shelterId unless they are a shelter."
    ),
)
async def create_dog(
    body: DogCreate,
    db: QueryExecutor = Depends(get_executor),
    user: AuthenticatedUser = Depends(require_shelter),
):
    data = body.to_store()
    if data.get("shelterId") is None:
        if not user.is_shelter:
            raise ValidationError(message="shelterId is required", field="shelterId")
        data["shelterId"] = user.id
    ensure_shelter_or_admin(user, data["shelterId"])

    dog = await AdoptableDogStore(db).create(data)
    logger.info("%s listed dog %s", user.username, dog["id"])
    return dog


@router.patch(
    "/{dog_id}",
    response_model=DogResponse,
    responses={
        **_OWNER_RESPONSES,
        400: {"description": "Empty or invalid update", "model": ErrorResponse},
    },
    summary="Update a dog",
)
async def update_dog(
    dog_id: int,
    body: DogUpdate,
    db: QueryExecutor = Depends(get_executor),
    user: AuthenticatedUser = Depends(require_user),
):
    store = AdoptableDogStore(db)
    await _owned_dog(store, dog_id, user)
    return await store.update(dog_id, body.to_store())


@router.delete(
    "/{dog_id}",
    response_model=DeletedResponse,
    responses=_OWNER_RESPONSES,
    summary="Delete a dog",
)
async def delete_dog(
    dog_id: int,
    db: QueryExecutor = Depends(get_executor),
    user: AuthenticatedUser = Depends(require_user),
):
    store = AdoptableDogStore(db)
    await _owned_dog(store, dog_id, user)
    return await store.remove(dog_id)
