"""
Petly Backend: Favorites Ledger
=================================

What:  The adopter ↔ dog "favorite" relation (table `fav_dogs`).
How:   Dog references are stored as text because a favorite may point at a
       local dog ("12") or a Petfinder dog ("58512345"). There is no foreign
       key to adoptable_dogs: deleting a dog never touches favorites, and
       favorites whose dog is gone everywhere are dropped when resolved.
Who:   Favorites routes and adopter hydration (`favoriteDogIds`).

Uniqueness:
    At most one entry per (adopter, dog). favorite() checks first and the
    UNIQUE(adopter_id, dog_id) constraint catches concurrent duplicates;
    both surface as DuplicateError.
"""

import logging
from typing import Any, Dict, List, Sequence, Union

from sqlalchemy.exc import IntegrityError

from petly.exceptions import DuplicateError, NotFoundError
from petly.services.catalog_base import ExternalCatalog
from petly.services.entity_store import EntityStore
from petly.services.merger import lookup_dog
from petly.services.query import QueryExecutor, Row

logger = logging.getLogger(__name__)

DogRef = Union[int, str]
AdopterRef = Union[int, str]


class FavoritesLedger:

    def __init__(self, db: QueryExecutor):
        self.db = db

    async def _adopter_id(self, adopter: AdopterRef) -> int:
        # An int is the adopter row id, a str their current username
        if isinstance(adopter, int):
            sql = "SELECT id FROM adopters WHERE id = $1"
        else:
            sql = "SELECT id FROM adopters WHERE username = $1"
        rows = await self.db.execute(sql, [adopter])
        if not rows:
            raise NotFoundError(resource="adopter", resource_id=str(adopter))
        return rows[0]["id"]

    async def _exists(self, adopter_id: int, dog_ref: str) -> bool:
        rows = await self.db.execute(
            "SELECT id FROM fav_dogs WHERE adopter_id = $1 AND dog_id = $2",
            [adopter_id, dog_ref],
        )
        return bool(rows)

    async def favorite(self, dog_id: DogRef, adopter: AdopterRef) -> Row:
        """
        Record that an adopter favorited a dog.

        Returns:
            {"adopterId": int, "dogId": str}

        Raises:
            NotFoundError:  unknown adopter
            DuplicateError: the pair already exists
        """
        adopter_id = await self._adopter_id(adopter)
        dog_ref = str(dog_id)

        if await self._exists(adopter_id, dog_ref):
            raise DuplicateError(
                "Duplicate favorite",
                context={"adopter": str(adopter), "dog_id": dog_ref},
            )

        try:
            rows = await self.db.mutate(
                'INSERT INTO fav_dogs (adopter_id, dog_id) VALUES ($1, $2) '
                'RETURNING adopter_id AS "adopterId", dog_id AS "dogId"',
                [adopter_id, dog_ref],
            )
        except IntegrityError:
            raise DuplicateError(
                "Duplicate favorite",
                context={"adopter": str(adopter), "dog_id": dog_ref},
            )
        logger.info("Adopter %s favorited dog %s", adopter, dog_ref)
        return rows[0]

    async def unfavorite(self, dog_id: DogRef, adopter: AdopterRef) -> Dict[str, str]:
        """
        Raises:
            NotFoundError: unknown adopter, or the pair does not exist
        """
        adopter_id = await self._adopter_id(adopter)
        dog_ref = str(dog_id)
        rows = await self.db.mutate(
            "DELETE FROM fav_dogs WHERE adopter_id = $1 AND dog_id = $2 RETURNING id",
            [adopter_id, dog_ref],
        )
        if not rows:
            raise NotFoundError(
                resource="favorite",
                context={"adopter": str(adopter), "dog_id": dog_ref},
            )
        logger.info("Adopter %s unfavorited dog %s", adopter, dog_ref)
        return {"unfavorited": dog_ref}

    async def list_favorite_dog_ids(self, adopter: AdopterRef) -> List[str]:
        """
        Dog references in the order they were favorited.

        References are always strings ("7", not 7): the same column holds
        local ids and Petfinder ids.
        """
        return await self.ids_for_adopter(await self._adopter_id(adopter))

    async def ids_for_adopter(self, adopter_id: int) -> List[str]:
        rows = await self.db.execute(
            "SELECT dog_id FROM fav_dogs WHERE adopter_id = $1 ORDER BY id", [adopter_id]
        )
        return [row["dog_id"] for row in rows]


async def resolve_favorite_dogs(
    dog_ids: Sequence[str],
    dogs: EntityStore,
    catalog: ExternalCatalog,
) -> List[Dict[str, Any]]:
    """
    Full dog records for favorite references, in favorite order.

    Each reference is looked up locally and remotely; references that
    resolve in neither source are skipped.
    """
    resolved: List[Dict[str, Any]] = []
    for dog_id in dog_ids:
        matches = await lookup_dog(dog_id, dogs, catalog)
        if not matches:
            logger.info("Skipping favorite %s: dog no longer exists", dog_id)
            continue
        resolved.extend(matches)
    return resolved
