"""
Petly Backend: Favorites Ledger Tests
=======================================

What:  favorite / unfavorite / list_favorite_dog_ids and resolving
       favorites to full dog records across both sources.
"""

import pytest
import pytest_asyncio

from conftest import remote_dog
from petly.exceptions import DuplicateError, NotFoundError
from petly.services.favorites import FavoritesLedger, resolve_favorite_dogs
from petly.services.stores import AdoptableDogStore, AdopterStore, ShelterStore


@pytest_asyncio.fixture
async def adopter(executor):
    return await AdopterStore(executor).create(
        {"username": "ann", "password": "secret1", "email": "ann@example.com"}
    )


@pytest.fixture
def ledger(executor):
    return FavoritesLedger(executor)


class TestFavoritesLedger:

    @pytest.mark.asyncio
    async def test_favorite_twice_is_duplicate(self, ledger, adopter):
        first = await ledger.favorite(7, "ann")
        assert first == {"adopterId": adopter["id"], "dogId": "7"}

        with pytest.raises(DuplicateError):
            await ledger.favorite(7, "ann")
        assert await ledger.list_favorite_dog_ids("ann") == ["7"]

    @pytest.mark.asyncio
    async def test_int_and_str_refs_are_the_same_favorite(self, ledger, adopter):
        await ledger.favorite(7, "ann")
        with pytest.raises(DuplicateError):
            await ledger.favorite("7", "ann")

    @pytest.mark.asyncio
    async def test_unfavorite_then_favorite_again(self, ledger, adopter):
        await ledger.favorite("7", "ann")
        assert await ledger.unfavorite("7", "ann") == {"unfavorited": "7"}
        assert await ledger.list_favorite_dog_ids("ann") == []
        await ledger.favorite("7", "ann")
        assert await ledger.list_favorite_dog_ids("ann") == ["7"]

    @pytest.mark.asyncio
    async def test_unfavorite_missing_pair(self, ledger, adopter):
        with pytest.raises(NotFoundError):
            await ledger.unfavorite("7", "ann")

    @pytest.mark.asyncio
    async def test_duplicate_caught_by_constraint(self, ledger, adopter, monkeypatch):
        await ledger.favorite("7", "ann")

        async def never_exists(adopter_id, dog_ref):
            return False

        monkeypatch.setattr(ledger, "_exists", never_exists)
        with pytest.raises(DuplicateError):
            await ledger.favorite("7", "ann")
        assert await ledger.list_favorite_dog_ids("ann") == ["7"]

    @pytest.mark.asyncio
    async def test_adopter_by_id_follows_renames(self, ledger, adopter, executor):
        await AdopterStore(executor).update("ann", {"username": "ann2"})
        await ledger.favorite("7", adopter["id"])
        assert await ledger.list_favorite_dog_ids("ann2") == ["7"]
        assert await ledger.unfavorite("7", adopter["id"]) == {"unfavorited": "7"}

    @pytest.mark.asyncio
    async def test_unknown_adopter_id(self, ledger):
        with pytest.raises(NotFoundError):
            await ledger.favorite("7", 999)

    @pytest.mark.asyncio
    async def test_unknown_adopter(self, ledger):
        with pytest.raises(NotFoundError):
            await ledger.favorite("7", "ghost")
        with pytest.raises(NotFoundError):
            await ledger.list_favorite_dog_ids("ghost")

    @pytest.mark.asyncio
    async def test_list_in_insertion_order(self, ledger, adopter):
        for ref in ("30", "abc", "4"):
            await ledger.favorite(ref, "ann")
        assert await ledger.list_favorite_dog_ids("ann") == ["30", "abc", "4"]

    @pytest.mark.asyncio
    async def test_favorites_are_per_adopter(self, ledger, adopter, executor):
        await AdopterStore(executor).create(
            {"username": "bob", "password": "secret2", "email": "bob@example.com"}
        )
        await ledger.favorite("7", "ann")
        await ledger.favorite("7", "bob")
        assert await ledger.list_favorite_dog_ids("bob") == ["7"]


@pytest.mark.asyncio
async def test_resolve_favorites_across_sources(executor, ledger, adopter, catalog):
    shelter = await ShelterStore(executor).create(
        {"username": "s1", "password": "pw1", "name": "Shelter One", "city": "Breck", "state": "CO"}
    )
    dogs = AdoptableDogStore(executor)
    local = await dogs.create({"name": "Lucy", "shelterId": shelter["id"]})
    catalog.dogs = [remote_dog("PF-1")]

    await ledger.favorite("PF-1", "ann")
    await ledger.favorite("gone", "ann")
    await ledger.favorite(local["id"], "ann")

    ids = await ledger.list_favorite_dog_ids("ann")
    resolved = await resolve_favorite_dogs(ids, dogs, catalog)

    # "gone" exists in neither source and is skipped
    assert [d["id"] for d in resolved] == ["PF-1", local["id"]]


@pytest.mark.asyncio
async def test_deleted_dog_keeps_favorite_until_resolved(executor, ledger, adopter, catalog):
    shelter = await ShelterStore(executor).create(
        {"username": "s1", "password": "pw1", "name": "Shelter One", "city": "Breck", "state": "CO"}
    )
    dogs = AdoptableDogStore(executor)
    local = await dogs.create({"name": "Lucy", "shelterId": shelter["id"]})
    await ledger.favorite(local["id"], "ann")

    await dogs.remove(local["id"])

    assert await ledger.list_favorite_dog_ids("ann") == [str(local["id"])]
    assert await resolve_favorite_dogs([str(local["id"])], dogs, catalog) == []
