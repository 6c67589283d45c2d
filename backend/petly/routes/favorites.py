"""
Favorite and unfavorite dogs as the logged-in adopter.

`dog_ref` is stored as given: a local dog id ("12") or a Petfinder animal id.
Dogs are not checked for existence here; favorites pointing at dogs that
have since disappeared are skipped when the list is read.

The favorite is recorded against the adopter id in the token, so a token
keeps acting for its own account after a username change.
"""

from fastapi import APIRouter, Depends, status

from petly.dependencies import get_executor, require_adopter
from petly.schemas.adopter import FavoriteResponse, UnfavoriteResponse
from petly.schemas.common import ErrorResponse
from petly.services.favorites import FavoritesLedger
from petly.services.query import QueryExecutor
from petly.services.tokens import AuthenticatedUser

router = APIRouter(prefix="/api/favorites", tags=["Favorites"])


@router.post(
    "/{dog_ref}",
    response_model=FavoriteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Already a favorite", "model": ErrorResponse}},
    summary="Favorite a dog",
)
async def favorite_dog(
    dog_ref: str,
    db: QueryExecutor = Depends(get_executor),
    adopter: AuthenticatedUser = Depends(require_adopter),
):
    return await FavoritesLedger(db).favorite(dog_ref, adopter.id)


@router.delete(
    "/{dog_ref}",
    response_model=UnfavoriteResponse,
    responses={404: {"description": "Not a favorite", "model": ErrorResponse}},
    summary="Remove a dog from favorites",
)
async def unfavorite_dog(
    dog_ref: str,
    db: QueryExecutor = Depends(get_executor),
    adopter: AuthenticatedUser = Depends(require_adopter),
):
    return await FavoritesLedger(db).unfavorite(dog_ref, adopter.id)
