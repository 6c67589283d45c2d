"""
Petly Backend: Concrete Entity Stores
=======================================

Table declarations for shelters, adopters and adoptable dogs. All query
logic lives in EntityStore / CredentialedStore; these classes only name
columns, filters, defaults and the related collection each one hydrates:

    ShelterStore       → adoptableDogs   (local dogs owned by the shelter)
    AdopterStore       → favoriteDogIds  (favorites ledger references)
    AdoptableDogStore  → shelter         (owning shelter, without its dogs)
"""

from typing import Any, Dict, Optional

from petly.config import settings
from petly.services.entity_store import CredentialedStore, EntityStore, SearchFilter
from petly.services.favorites import FavoritesLedger
from petly.services.identity import LocalId
from petly.services.query import Row


# ══════════════════════════════════════════════════════════════════════════
# Shelters
# ══════════════════════════════════════════════════════════════════════════

class ShelterStore(CredentialedStore):
    resource = "shelter"
    table = "shelters"
    fields = (
        "id", "username", "name", "address", "city", "state", "postcode",
        "phoneNumber", "email", "logo", "description", "isAdmin",
    )
    field_aliases = {"phoneNumber": "phone_number", "isAdmin": "is_admin"}
    creatable = (
        "username", "password", "name", "address", "city", "state", "postcode",
        "phoneNumber", "email", "logo", "description", "isAdmin",
    )
    updatable = (
        "name", "address", "city", "state", "postcode",
        "phoneNumber", "email", "logo", "description", "isAdmin",
    )
    search_filters = (
        SearchFilter("name", "name"),
        SearchFilter("city", "city"),
        SearchFilter("state", "state"),
        SearchFilter("postcode", "postcode"),
    )
    order_by = "name, id"
    boolean_fields = ("isAdmin",)

    def defaults(self) -> Dict[str, Any]:
        return {
            "address": "",
            "postcode": "",
            "logo": settings.default_shelter_logo,
            "description": "",
            "isAdmin": False,
        }

    async def _hydrate(self, record: Row) -> Row:
        record["adoptableDogs"] = await AdoptableDogStore(self.db).find_all(
            {"shelterId": record["id"]}
        )
        return record


# ══════════════════════════════════════════════════════════════════════════
# Adopters
# ══════════════════════════════════════════════════════════════════════════

class AdopterStore(CredentialedStore):
    resource = "adopter"
    table = "adopters"
    fields = (
        "id", "username", "email", "picture", "description", "privateOutdoors",
        "numOfDogs", "preferredGender", "preferredAge", "isAdmin",
    )
    field_aliases = {
        "privateOutdoors": "private_outdoors",
        "numOfDogs": "num_of_dogs",
        "preferredGender": "preferred_gender",
        "preferredAge": "preferred_age",
        "isAdmin": "is_admin",
    }
    creatable = (
        "username", "password", "email", "picture", "description", "privateOutdoors",
        "numOfDogs", "preferredGender", "preferredAge", "isAdmin",
    )
    updatable = (
        "username", "email", "picture", "description", "privateOutdoors",
        "numOfDogs", "preferredGender", "preferredAge", "isAdmin",
    )
    search_filters = (
        SearchFilter("username", "username"),
        SearchFilter("email", "email"),
    )
    order_by = "username, id"
    boolean_fields = ("privateOutdoors", "isAdmin")

    def defaults(self) -> Dict[str, Any]:
        return {
            "picture": settings.default_adopter_picture,
            "description": "",
            "privateOutdoors": False,
            "numOfDogs": 0,
            "isAdmin": False,
        }

    async def _hydrate(self, record: Row) -> Row:
        record["favoriteDogIds"] = await FavoritesLedger(self.db).ids_for_adopter(record["id"])
        return record


# ══════════════════════════════════════════════════════════════════════════
# Adoptable Dogs
# ══════════════════════════════════════════════════════════════════════════

class AdoptableDogStore(EntityStore):
    resource = "adoptable dog"
    table = "adoptable_dogs"
    table_alias = "a"
    fields = (
        "id", "name", "breedId", "gender", "age", "picture", "description",
        "goodWKids", "goodWDogs", "goodWCats", "shelterId",
    )
    field_aliases = {
        "breedId": "breed_id",
        "goodWKids": "good_w_kids",
        "goodWDogs": "good_w_dogs",
        "goodWCats": "good_w_cats",
        "shelterId": "shelter_id",
    }
    creatable = (
        "name", "breedId", "gender", "age", "picture", "description",
        "goodWKids", "goodWDogs", "goodWCats", "shelterId",
    )
    updatable = (
        "name", "breedId", "gender", "age", "picture", "description",
        "goodWKids", "goodWDogs", "goodWCats",
    )
    search_filters = (
        SearchFilter("name", "a.name"),
        SearchFilter("breedId", "a.breed_id", kind="id"),
        SearchFilter("gender", "a.gender"),
        SearchFilter("age", "a.age"),
        SearchFilter("goodWKids", "a.good_w_kids", kind="flag"),
        SearchFilter("goodWDogs", "a.good_w_dogs", kind="flag"),
        SearchFilter("goodWCats", "a.good_w_cats", kind="flag"),
        SearchFilter("shelterId", "a.shelter_id", kind="id"),
    )
    order_by = "a.name, a.id"
    tristate_fields = ("goodWKids", "goodWDogs", "goodWCats")

    def defaults(self) -> Dict[str, Any]:
        return {"picture": settings.default_dog_picture, "description": ""}

    def select_sql(self) -> str:
        # Local dogs carry the joined breed name next to breedId
        return (
            f'SELECT {self.projection()}, b.breed AS "breed" '
            f"FROM adoptable_dogs a LEFT JOIN breeds b ON b.id = a.breed_id"
        )

    async def breed_name(self, breed_id: Optional[int]) -> Optional[str]:
        if breed_id is None:
            return None
        rows = await self.db.execute("SELECT breed FROM breeds WHERE id = $1", [breed_id])
        return rows[0]["breed"] if rows else None

    async def _complete(self, record: Row) -> Row:
        record["breed"] = await self.breed_name(record.get("breedId"))
        return record

    async def _hydrate(self, record: Row) -> Row:
        record["shelter"] = await ShelterStore(self.db).lookup(
            LocalId(record["shelterId"]), hydrate=False
        )
        return record
