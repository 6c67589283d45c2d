"""
Petly Backend: Local/Remote Reconciliation
============================================

What:  Combines records from our own database with records from the remote
       catalog, both for searches and for single-entity lookups.
How:   Local and remote identity spaces never overlap (local ids are ints,
       remote ids are strings; see petly/services/identity.py), so records
       are concatenated, never de-duplicated.
Who:   Dog and shelter routes; the favorites resolver.

Ordering:
    Merged lists put local records first, then remote records, each side
    in the order its source returned it.

Session use:
    Searches run the local query before the remote call because the remote
    side may resolve a breed name through the same database session, and an
    AsyncSession allows one operation at a time. Single lookups only touch
    the network on the remote side, so both sides run concurrently.
"""

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from petly.services.catalog_base import ExternalCatalog
from petly.services.identity import LocalId, identity_of, local_candidate
from petly.services.entity_store import EntityStore

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


def merge_list(local: Sequence[Record], remote: Sequence[Record]) -> List[Record]:
    """Local records, then remote records. Either side may be empty."""
    return [*local, *remote]


def merge_one(local: Optional[Record], remote: Optional[Record]) -> List[Record]:
    """
    Whichever of the two lookups found something: zero, one or two records.
    A reference such as "7" may legitimately name a local and a remote entity.
    """
    return [record for record in (local, remote) if record is not None]


async def _absent() -> None:
    return None


# ── Searches ──────────────────────────────────────────────────────────────

async def search_dogs(
    filters: Mapping[str, Any],
    dogs: EntityStore,
    catalog: ExternalCatalog,
) -> List[Record]:
    local = await dogs.find_all(filters)
    remote = await catalog.list_dogs(filters)
    logger.info("Dog search: %d local, %d remote", len(local), len(remote))
    return merge_list(local, remote)


async def search_shelters(
    filters: Mapping[str, Any],
    shelters: EntityStore,
    catalog: ExternalCatalog,
) -> List[Record]:
    local = await shelters.find_all(filters)
    remote = await catalog.list_shelters(filters)
    logger.info("Shelter search: %d local, %d remote", len(local), len(remote))
    return merge_list(local, remote)


# ── Single lookups ────────────────────────────────────────────────────────

async def lookup_dog(reference: str, dogs: EntityStore, catalog: ExternalCatalog) -> List[Record]:
    """Every dog `reference` names, local first."""
    local_id = local_candidate(reference)
    local, remote = await asyncio.gather(
        dogs.lookup(local_id) if local_id is not None else _absent(),
        catalog.get_dog(reference),
    )
    return merge_one(local, remote)


async def lookup_shelter(
    reference: str,
    shelters: EntityStore,
    catalog: ExternalCatalog,
) -> List[Record]:
    """
    Every shelter `reference` names, local first.

    Numeric references are tried as a local id; anything else as a local
    username. Both are tried remotely as an organization id.
    """
    local_id = local_candidate(reference)
    local_key = local_id if local_id is not None else reference
    local, remote = await asyncio.gather(
        shelters.lookup(local_key),
        catalog.get_shelter(reference),
    )
    return merge_one(local, remote)


def source_of(record: Mapping[str, Any]) -> str:
    """'local' or 'remote', from the record's identity tag."""
    return "local" if isinstance(identity_of(record), LocalId) else "remote"
