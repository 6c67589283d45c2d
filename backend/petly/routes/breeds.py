"""GET /api/breeds: the breed lookup table, ordered by id (public)."""

from typing import List

from fastapi import APIRouter, Depends

from petly.dependencies import get_executor
from petly.schemas.common import BreedResponse
from petly.services.breed_service import BreedStore
from petly.services.query import QueryExecutor

router = APIRouter(prefix="/api", tags=["Breeds"])


@router.get(
    "/breeds",
    response_model=List[BreedResponse],
    summary="List dog breeds",
    description=(
        "Breeds usable as breedId on dogs and dog searches. The table is "
        "filled from Petfinder by `python -m petly.sync_breeds`."
    ),
)
async def list_breeds(db: QueryExecutor = Depends(get_executor)):
    return await BreedStore(db).list_breeds()
