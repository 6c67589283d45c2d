"""
Petly Backend: Breed Lookup Table
===================================

What:  Reads and maintains the `breeds` table (integer id → breed name).
Who:   - PetfinderCatalog resolves `breedId` filters to names before querying
         Petfinder, which indexes breeds by name.
       - GET /api/breeds lists the table for the frontend's breed picker.
       - The sync job (python -m petly.sync_breeds) fills it from Petfinder.
"""

import logging
from typing import List, Sequence

from petly.exceptions import NotFoundError
from petly.services.query import QueryExecutor, Row

logger = logging.getLogger(__name__)


class BreedStore:

    def __init__(self, db: QueryExecutor):
        self.db = db

    async def resolve(self, breed_id: int) -> str:
        """
        Breed name for a local breed id.

        Raises:
            NotFoundError: no breed has this id
        """
        rows = await self.db.execute("SELECT breed FROM breeds WHERE id = $1", [breed_id])
        if not rows:
            raise NotFoundError(resource="breed", resource_id=str(breed_id))
        return rows[0]["breed"]

    async def list_breeds(self) -> List[Row]:
        return await self.db.execute("SELECT id, breed FROM breeds ORDER BY id")

    async def sync_names(self, names: Sequence[str]) -> int:
        """
        Insert every name not already present, keeping remote order.

        New ids continue from the current maximum, so an empty table ends up
        with ids 1..n. Existing rows keep their ids because adoptable dogs
        reference them. All inserts commit together.

        Returns:
            Number of breeds inserted
        """
        rows = await self.db.execute('SELECT id, breed FROM breeds')
        known = {row["breed"] for row in rows}
        next_id = max((row["id"] for row in rows), default=0) + 1

        inserted = 0
        for name in names:
            if name in known:
                continue
            await self.db.execute(
                "INSERT INTO breeds (id, breed) VALUES ($1, $2)", [next_id, name]
            )
            known.add(name)
            next_id += 1
            inserted += 1

        await self.db.commit()
        logger.info("Breed sync inserted %d of %d remote breeds", inserted, len(names))
        return inserted
