"""
Petly Backend: Shelter Routes
===============================

What:  Search, read, create, update and delete shelters; contact a shelter.
How:   Searches and single reads combine local shelters with Petfinder
       organizations (petly/services/merger.py). Writes only ever touch
       local shelters.
Who:   Frontend shelter list, shelter profile and shelter dashboard.

Access:
    GET                     any logged-in user
    POST, DELETE            admin
    PATCH                   the shelter itself, or an admin
    POST .../contact        any logged-in user
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from petly.dependencies import (
    ensure_shelter_or_admin,
    get_catalog,
    get_email_service,
    get_executor,
    require_admin,
    require_user,
)
from petly.exceptions import ForbiddenError, NotFoundError, ValidationError
from petly.schemas.auth import PasswordUpdate
from petly.schemas.common import DeletedResponse, ErrorResponse, PasswordUpdatedResponse
from petly.schemas.listings import ShelterResponse, ShelterSummary
from petly.schemas.shelter import (
    ContactShelterRequest,
    ContactShelterResponse,
    ShelterCreate,
    ShelterUpdate,
)
from petly.services.catalog_base import ExternalCatalog
from petly.services.email_service import EmailService
from petly.services.merger import lookup_shelter, search_shelters
from petly.services.query import QueryExecutor
from petly.services.stores import ShelterStore
from petly.services.tokens import AuthenticatedUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/shelters", tags=["Shelters"])


@router.get(
    "",
    response_model=List[ShelterSummary],
    responses={502: {"description": "Petfinder failure", "model": ErrorResponse}},
    summary="Search local and Petfinder shelters",
    description=(
        "Local shelters come first (ordered by name), followed by Petfinder "
        "organizations in the order Petfinder returned them. All filters are "
        "optional and combined with AND; text filters match case-insensitively."
    ),
)
async def list_shelters(
    name: Optional[str] = Query(default=None, description="Partial name match"),
    city: Optional[str] = Query(default=None),
    state: Optional[str] = Query(default=None, description="Two-letter state code"),
    postcode: Optional[str] = Query(default=None),
    db: QueryExecutor = Depends(get_executor),
    catalog: ExternalCatalog = Depends(get_catalog),
    user: AuthenticatedUser = Depends(require_user),
):
    filters = {"name": name, "city": city, "state": state, "postcode": postcode}
    return await search_shelters(filters, ShelterStore(db), catalog)


@router.get(
    "/{reference}",
    response_model=List[ShelterResponse],
    responses={404: {"description": "No shelter with that reference", "model": ErrorResponse}},
    summary="Get a shelter with its adoptable dogs",
    description=(
        "A numeric reference is tried as a local id, anything else as a local "
        "username; both are tried as a Petfinder organization id. Returns every "
        "match (local first)."
    ),
)
async def get_shelter(
    reference: str,
    db: QueryExecutor = Depends(get_executor),
    catalog: ExternalCatalog = Depends(get_catalog),
    user: AuthenticatedUser = Depends(require_user),
):
    matches = await lookup_shelter(reference, ShelterStore(db), catalog)
    if not matches:
        raise NotFoundError(resource="shelter", resource_id=reference)
    return matches


@router.post(
    "",
    response_model=ShelterSummary,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Username already taken", "model": ErrorResponse}},
    summary="Create a shelter (admin)",
)
async def create_shelter(
    body: ShelterCreate,
    db: QueryExecutor = Depends(get_executor),
    admin: AuthenticatedUser = Depends(require_admin),
):
    shelter = await ShelterStore(db).create(body.to_store())
    logger.info("Admin %s created shelter %s", admin.username, shelter["id"])
    return shelter


@router.patch(
    "/{shelter_id}",
    response_model=ShelterSummary,
    responses={
        400: {"description": "Empty or invalid update", "model": ErrorResponse},
        403: {"description": "Not this shelter or an admin", "model": ErrorResponse},
        404: {"description": "Shelter not found", "model": ErrorResponse},
    },
    summary="Update a shelter's profile",
)
async def update_shelter(
    shelter_id: int,
    body: ShelterUpdate,
    db: QueryExecutor = Depends(get_executor),
    user: AuthenticatedUser = Depends(require_user),
):
    ensure_shelter_or_admin(user, shelter_id)
    data = body.to_store()
    if "isAdmin" in data and not user.is_admin:
        raise ForbiddenError("Only admins can change admin rights")
    return await ShelterStore(db).update(shelter_id, data)


@router.patch(
    "/{shelter_id}/password",
    response_model=PasswordUpdatedResponse,
    responses={404: {"description": "Shelter not found", "model": ErrorResponse}},
    summary="Change a shelter's password",
)
async def update_shelter_password(
    shelter_id: int,
    body: PasswordUpdate,
    db: QueryExecutor = Depends(get_executor),
    user: AuthenticatedUser = Depends(require_user),
):
    ensure_shelter_or_admin(user, shelter_id)
    return await ShelterStore(db).update_password(shelter_id, body.password)


@router.delete(
    "/{shelter_id}",
    response_model=DeletedResponse,
    responses={404: {"description": "Shelter not found", "model": ErrorResponse}},
    summary="Delete a shelter and its dogs (admin)",
)
async def delete_shelter(
    shelter_id: int,
    db: QueryExecutor = Depends(get_executor),
    admin: AuthenticatedUser = Depends(require_admin),
):
    return await ShelterStore(db).remove(shelter_id)


@router.post(
    "/{reference}/contact",
    response_model=ContactShelterResponse,
    responses={
        404: {"description": "Shelter not found", "model": ErrorResponse},
        503: {"description": "Email could not be delivered", "model": ErrorResponse},
    },
    summary="Email a shelter",
    description=(
        "Sends the caller's message to the shelter's email address. The "
        "reference is resolved like GET /api/shelters/{reference}; the first "
        "match with an email address receives the message."
    ),
)
async def contact_shelter(
    reference: str,
    body: ContactShelterRequest,
    db: QueryExecutor = Depends(get_executor),
    catalog: ExternalCatalog = Depends(get_catalog),
    mailer: EmailService = Depends(get_email_service),
    user: AuthenticatedUser = Depends(require_user),
):
    matches = await lookup_shelter(reference, ShelterStore(db), catalog)
    if not matches:
        raise NotFoundError(resource="shelter", resource_id=reference)

    shelter_email = next((m["email"] for m in matches if m.get("email")), None)
    if shelter_email is None:
        raise ValidationError(
            message="This shelter has no email address",
            context={"shelter": reference},
        )

    kwargs = {"subject": body.subject} if body.subject else {}
    await mailer.send_contact_shelter(
        adopter_email=body.email,
        name=body.name,
        message=body.message,
        shelter_email=shelter_email,
        **kwargs,
    )
    return ContactShelterResponse(shelter_email=shelter_email)
