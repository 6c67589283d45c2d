"""
Petly Backend: Authentication Routes
======================================

What:  Registration and login for shelters and adopters.
How:   Both flows end in a signed JWT (see petly/services/tokens.py) that
       the client sends back as `Authorization: Bearer <token>`.
Who:   The frontend login/register pages.

Public registration never grants admin rights; admins are created through
POST /api/shelters or POST /api/adopters by an existing admin.
"""

import logging

from fastapi import APIRouter, Depends, status

from petly.dependencies import get_executor
from petly.schemas.adopter import AdopterRegister
from petly.schemas.auth import LoginRequest, TokenResponse
from petly.schemas.common import ErrorResponse
from petly.schemas.shelter import ShelterRegister
from petly.services.query import QueryExecutor
from petly.services.stores import AdopterStore, ShelterStore
from petly.services.tokens import ADOPTER_USER, SHELTER_USER, create_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

_REGISTER_RESPONSES = {
    400: {"description": "Invalid field or value", "model": ErrorResponse},
    409: {"description": "Username already taken", "model": ErrorResponse},
}
_LOGIN_RESPONSES = {
    401: {"description": "Invalid username/password", "model": ErrorResponse},
}


# ── Shelters ──────────────────────────────────────────────────────────────

@router.post(
    "/shelters/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_REGISTER_RESPONSES,
    summary="Register a shelter account",
)
async def register_shelter(
    body: ShelterRegister,
    db: QueryExecutor = Depends(get_executor),
) -> TokenResponse:
    shelter = await ShelterStore(db).create(body.to_store())
    return TokenResponse(token=create_token(shelter, SHELTER_USER))


@router.post(
    "/shelters/token",
    response_model=TokenResponse,
    responses=_LOGIN_RESPONSES,
    summary="Log in as a shelter",
)
async def login_shelter(
    body: LoginRequest,
    db: QueryExecutor = Depends(get_executor),
) -> TokenResponse:
    shelter = await ShelterStore(db).authenticate(body.username, body.password)
    logger.info("Shelter '%s' logged in", shelter["username"])
    return TokenResponse(token=create_token(shelter, SHELTER_USER))


# ── Adopters ──────────────────────────────────────────────────────────────

@router.post(
    "/adopters/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_REGISTER_RESPONSES,
    summary="Register an adopter account",
)
async def register_adopter(
    body: AdopterRegister,
    db: QueryExecutor = Depends(get_executor),
) -> TokenResponse:
    adopter = await AdopterStore(db).create(body.to_store())
    return TokenResponse(token=create_token(adopter, ADOPTER_USER))


@router.post(
    "/adopters/token",
    response_model=TokenResponse,
    responses=_LOGIN_RESPONSES,
    summary="Log in as an adopter",
)
async def login_adopter(
    body: LoginRequest,
    db: QueryExecutor = Depends(get_executor),
) -> TokenResponse:
    adopter = await AdopterStore(db).authenticate(body.username, body.password)
    logger.info("Adopter '%s' logged in", adopter["username"])
    return TokenResponse(token=create_token(adopter, ADOPTER_USER))
