"""
Petly Backend: Petfinder Catalog Client
=========================================

What:  Concrete ExternalCatalog backed by the Petfinder v2 REST API.
How:   Every public call opens its own httpx.AsyncClient, fetches a fresh
       bearer token (client-credentials grant) and issues one or more GETs
       with it. Tokens are never shared between call chains.
Who:   Created per request by petly.dependencies.get_catalog; used by the
       merger, the dog/shelter routes, the health check and the breed sync.

Filter translation (local → Petfinder):
    dogs:      name → name            breedId → breed (resolved to a name)
               gender → gender        age → age
               goodWKids → good_with_children
               goodWDogs → good_with_dogs
               goodWCats → good_with_cats   (tri-state → "true"/"false")
               shelterId → organization
    shelters:  name → name   city → query   state → state   postcode → location

Failure semantics:
    404 on a single-entity lookup      → None (absence, not an error)
    any other HTTP error status        → UpstreamError(status_code=<status>)
    transport failure / timeout        → UpstreamError(status_code=None)

When PETFINDER_API_KEY / PETFINDER_SECRET are not configured the catalog is
disabled: searches return [] and lookups return None without any network
traffic, so a development setup works with local data only.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional

import httpx

from petly.config import settings
from petly.exceptions import NotFoundError, UpstreamError, ValidationError
from petly.services.breed_service import BreedStore
from petly.services.catalog_base import ExternalCatalog, Record
from petly.services.tristate import coerce_tristate

logger = logging.getLogger(__name__)


DOG_FILTERS = ("name", "breedId", "gender", "age", "goodWKids", "goodWDogs", "goodWCats", "shelterId")
SHELTER_FILTERS = ("name", "city", "state", "postcode")

_DIRECT_DOG_PARAMS = {"name": "name", "gender": "gender", "age": "age", "shelterId": "organization"}
_FLAG_PARAMS = {
    "goodWKids": "good_with_children",
    "goodWDogs": "good_with_dogs",
    "goodWCats": "good_with_cats",
}
_SHELTER_PARAMS = {"name": "name", "city": "query", "state": "state", "postcode": "location"}


def _first_photo(photos: Optional[List[Dict[str, str]]], size: str) -> Optional[str]:
    if not photos:
        return None
    return photos[0].get(size) or photos[0].get("full")


def _remote_flag(value: Any) -> Optional[bool]:
    try:
        return coerce_tristate(value)
    except ValueError:
        return None


def _present(filters: Mapping[str, Any], name: str) -> bool:
    value = filters.get(name)
    return value is not None and value != ""


class PetfinderCatalog(ExternalCatalog):
    """
    Petfinder v2 client.

    Args:
        breeds:    breed resolver for `breedId` filters (required only when
                   such a filter is used)
        transport: httpx transport override; tests pass httpx.MockTransport
    """

    def __init__(
        self,
        breeds: Optional[BreedStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        api_key: Optional[str] = None,
        secret: Optional[str] = None,
        base_url: Optional[str] = None,
    ):
        self.breeds = breeds
        self.transport = transport
        self.api_key = settings.petfinder_api_key if api_key is None else api_key
        self.secret = settings.petfinder_secret if secret is None else secret
        self.base_url = base_url or settings.petfinder_base_url
        self.timeout = settings.petfinder_timeout

    @property
    def enabled(self) -> bool:
        return bool(self.api_key and self.secret)

    # ══════════════════════════════════════════════════════════════════════
    # HTTP plumbing
    # ══════════════════════════════════════════════════════════════════════

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        """An authenticated client for one call chain."""
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport,
        ) as client:
            payload = await self._request(
                client,
                "POST",
                "/oauth2/token",
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.api_key,
                    "client_secret": self.secret,
                },
            )
            client.headers["Authorization"] = f"Bearer {payload['access_token']}"
            yield client

    async def _request(
        self,
        client: httpx.AsyncClient,
        method: str,
        path: str,
        allow_missing: bool = False,
        **kwargs: Any,
    ) -> Optional[Dict[str, Any]]:
        start_time = time.time()
        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Petfinder %s %s failed: %s", method, path, str(e))
            raise UpstreamError(
                message="The pet catalog service could not be reached",
                context={"path": path, "error_type": type(e).__name__},
            )

        duration_ms = (time.time() - start_time) * 1000
        logger.debug("Petfinder %s %s → %d (%.0fms)", method, path, response.status_code, duration_ms)

        if response.status_code == 404 and allow_missing:
            return None
        if response.is_error:
            logger.warning("Petfinder %s %s returned %d", method, path, response.status_code)
            raise UpstreamError(status_code=response.status_code, context={"path": path})
        return response.json()

    # ══════════════════════════════════════════════════════════════════════
    # Normalization
    # ══════════════════════════════════════════════════════════════════════

    def _normalize_dog(self, animal: Mapping[str, Any]) -> Record:
        environment = animal.get("environment") or {}
        breeds = animal.get("breeds") or {}
        organization_id = animal.get("organization_id")
        return {
            "id": str(animal["id"]),
            "name": animal.get("name"),
            "breedId": None,
            "breed": breeds.get("primary"),
            "gender": animal.get("gender"),
            "age": animal.get("age"),
            "picture": _first_photo(animal.get("photos"), "medium") or settings.default_dog_picture,
            "description": animal.get("description") or "",
            "goodWKids": _remote_flag(environment.get("children")),
            "goodWDogs": _remote_flag(environment.get("dogs")),
            "goodWCats": _remote_flag(environment.get("cats")),
            "shelterId": str(organization_id) if organization_id else None,
        }

    def _normalize_shelter(self, organization: Mapping[str, Any]) -> Record:
        address = organization.get("address") or {}
        return {
            "id": str(organization["id"]),
            "name": organization.get("name"),
            "address": address.get("address1") or "",
            "city": address.get("city"),
            "state": address.get("state"),
            "postcode": address.get("postcode"),
            "phoneNumber": organization.get("phone"),
            "email": organization.get("email"),
            "logo": _first_photo(organization.get("photos"), "medium") or settings.default_shelter_logo,
            "description": organization.get("mission_statement") or "",
        }

    @staticmethod
    def _is_dog(animal: Mapping[str, Any]) -> bool:
        return str(animal.get("type") or "dog").lower() == "dog"

    # ══════════════════════════════════════════════════════════════════════
    # Filter translation
    # ══════════════════════════════════════════════════════════════════════

    async def _dog_params(self, filters: Mapping[str, Any]) -> Dict[str, Any]:
        unknown = sorted(name for name in filters if name not in DOG_FILTERS)
        if unknown:
            raise ValidationError(
                message=f"Unknown dog filter(s): {', '.join(unknown)}",
                context={"filters": unknown},
            )

        params: Dict[str, Any] = {"type": "dog", "limit": settings.petfinder_dog_limit}
        for name, param in _DIRECT_DOG_PARAMS.items():
            if _present(filters, name):
                params[param] = str(filters[name])

        if _present(filters, "breedId"):
            params["breed"] = await self._breed_name(filters["breedId"])

        for name, param in _FLAG_PARAMS.items():
            if not _present(filters, name):
                continue
            try:
                flag = coerce_tristate(filters[name])
            except ValueError as e:
                raise ValidationError(message=str(e), field=name)
            if flag is not None:
                params[param] = "true" if flag else "false"
        return params

    async def _breed_name(self, breed_id: Any) -> str:
        if self.breeds is None:
            raise ValidationError(message="Breed filtering is not available", field="breedId")
        try:
            return await self.breeds.resolve(int(breed_id))
        except ValueError:
            raise ValidationError(message="breedId must be an integer", field="breedId")

    # ══════════════════════════════════════════════════════════════════════
    # Catalog operations
    # ══════════════════════════════════════════════════════════════════════

    async def list_dogs(self, filters: Optional[Mapping[str, Any]] = None) -> List[Record]:
        """
        Remote dogs matching every present filter.

        A `breedId` unknown to the local breed table cannot match any remote
        dog, so it yields [] without calling Petfinder.
        """
        if not self.enabled:
            return []
        try:
            params = await self._dog_params(filters or {})
        except NotFoundError:
            return []

        async with self._session() as client:
            payload = await self._request(client, "GET", "/animals", params=params)
        dogs = [self._normalize_dog(animal) for animal in payload.get("animals", [])]
        logger.info("Petfinder returned %d dogs for %s", len(dogs), sorted(params))
        return dogs

    async def get_dog(self, dog_id: str) -> Optional[Record]:
        if not self.enabled:
            return None
        async with self._session() as client:
            payload = await self._request(client, "GET", f"/animals/{dog_id}", allow_missing=True)
            if payload is None or not self._is_dog(payload["animal"]):
                return None

            animal = payload["animal"]
            dog = self._normalize_dog(animal)
            shelter = None
            if animal.get("organization_id"):
                organization = await self._request(
                    client, "GET", f"/organizations/{animal['organization_id']}", allow_missing=True
                )
                if organization is not None:
                    shelter = self._normalize_shelter(organization["organization"])
            dog["shelter"] = shelter
        return dog

    async def list_shelters(self, filters: Optional[Mapping[str, Any]] = None) -> List[Record]:
        if not self.enabled:
            return []
        filters = filters or {}
        unknown = sorted(name for name in filters if name not in SHELTER_FILTERS)
        if unknown:
            raise ValidationError(
                message=f"Unknown shelter filter(s): {', '.join(unknown)}",
                context={"filters": unknown},
            )

        params: Dict[str, Any] = {"limit": settings.petfinder_shelter_limit}
        for name, param in _SHELTER_PARAMS.items():
            if _present(filters, name):
                params[param] = str(filters[name])

        async with self._session() as client:
            payload = await self._request(client, "GET", "/organizations", params=params)
        return [self._normalize_shelter(org) for org in payload.get("organizations", [])]

    async def get_shelter(self, shelter_id: str) -> Optional[Record]:
        if not self.enabled:
            return None
        async with self._session() as client:
            payload = await self._request(
                client, "GET", f"/organizations/{shelter_id}", allow_missing=True
            )
            if payload is None:
                return None
            shelter = self._normalize_shelter(payload["organization"])

            animals = await self._request(
                client,
                "GET",
                "/animals",
                params={
                    "organization": shelter["id"],
                    "type": "dog",
                    "limit": settings.petfinder_dog_limit,
                },
            )
        shelter["adoptableDogs"] = [self._normalize_dog(a) for a in animals.get("animals", [])]
        return shelter

    async def list_breed_names(self) -> List[str]:
        if not self.enabled:
            raise UpstreamError(message="Petfinder credentials are not configured")
        async with self._session() as client:
            payload = await self._request(client, "GET", "/types/dog/breeds")
        return [breed["name"] for breed in payload.get("breeds", [])]

    async def health_check(self) -> bool:
        """
        Fetches a token only; no search quota is spent.
        """
        if not self.enabled:
            return False
        try:
            async with self._session():
                return True
        except UpstreamError as e:
            logger.warning("Petfinder health check failed: %s", e.message)
            return False
