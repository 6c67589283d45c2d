"""
Petly Backend: Breed Sync Job
===============================

What:  Fills the `breeds` table from Petfinder's dog breed list.
How:   Fetches the remote names (retried with exponential backoff and
       jitter), then inserts the ones the table does not have yet.
When:  Once after the first migration, then whenever Petfinder adds breeds.

Usage:
    python -m petly.sync_breeds             # fetch and insert
    python -m petly.sync_breeds --dry-run   # fetch and report only
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional, Sequence

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from petly.config import settings
from petly.database import async_session_factory, dispose_engine
from petly.exceptions import PetlyError, UpstreamError
from petly.main import setup_logging
from petly.services.breed_service import BreedStore
from petly.services.catalog_base import ExternalCatalog
from petly.services.petfinder_service import PetfinderCatalog
from petly.services.query import QueryExecutor

logger = logging.getLogger("petly.sync_breeds")


@retry(
    retry=retry_if_exception_type(UpstreamError),
    stop=stop_after_attempt(settings.retry_max_attempts),
    wait=wait_exponential_jitter(initial=settings.retry_min_wait, max=settings.retry_max_wait),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
async def fetch_breed_names(catalog: ExternalCatalog) -> List[str]:
    return await catalog.list_breed_names()


async def sync_breeds(catalog: ExternalCatalog, dry_run: bool = False) -> int:
    """
    Returns:
        Number of breeds inserted (0 for a dry run)
    """
    names = await fetch_breed_names(catalog)
    logger.info("Petfinder lists %d dog breeds", len(names))
    if dry_run:
        return 0

    async with async_session_factory() as session:
        return await BreedStore(QueryExecutor(session)).sync_names(names)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="python -m petly.sync_breeds",
        description="Fill the breeds table from Petfinder.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="fetch the breed list without writing to the database",
    )
    args = parser.parse_args(argv)
    setup_logging()

    async def run() -> int:
        try:
            return await sync_breeds(PetfinderCatalog(), dry_run=args.dry_run)
        finally:
            await dispose_engine()

    try:
        inserted = asyncio.run(run())
    except PetlyError as e:
        logger.error("Breed sync failed: %s", e.message)
        return 1
    logger.info("Breed sync complete: %d new breeds", inserted)
    return 0


if __name__ == "__main__":
    sys.exit(main())
