"""
Petly Backend: Route Tests
============================

What:  The HTTP layer end to end: merged searches, ownership rules,
       favorites, contact email, health and error-status mapping.
How:   Real database (in-memory SQLite), FakeCatalog for Petfinder and
       FakeMailer for SMTP, all wired in by conftest.client.
"""

import pytest
import pytest_asyncio

from conftest import adopter_auth, remote_dog, remote_shelter, shelter_auth
from petly.exceptions import UpstreamError
from petly.services.stores import AdoptableDogStore, AdopterStore, ShelterStore


@pytest_asyncio.fixture
async def shelter(executor):
    return await ShelterStore(executor).create({
        "username": "s1", "password": "pw1", "name": "Shelter One",
        "city": "Breck", "state": "CO", "email": "hello@s1.example",
    })


@pytest_asyncio.fixture
async def other_shelter(executor):
    return await ShelterStore(executor).create({
        "username": "s2", "password": "pw2", "name": "Shelter Two", "city": "Vail", "state": "CO",
    })


@pytest_asyncio.fixture
async def admin(executor):
    return await ShelterStore(executor).create({
        "username": "root", "password": "pw0", "name": "Admin Shelter",
        "city": "Denver", "state": "CO", "isAdmin": True,
    })


@pytest_asyncio.fixture
async def adopter(executor):
    return await AdopterStore(executor).create(
        {"username": "ann", "password": "secret1", "email": "ann@example.com"}
    )


@pytest_asyncio.fixture
async def dog(executor, shelter, breeds):
    return await AdoptableDogStore(executor).create({
        "name": "Lucy", "breedId": breeds["Boxer"], "shelterId": shelter["id"],
        "goodWKids": True, "goodWDogs": True, "goodWCats": None,
    })


# ══════════════════════════════════════════════════════════════════════════
# Dogs
# ══════════════════════════════════════════════════════════════════════════

class TestDogRoutes:

    @pytest.mark.asyncio
    async def test_search_merges_local_then_remote(self, client, catalog, dog, adopter):
        catalog.dogs = [remote_dog("58512345")]
        response = await client.get("/api/dogs", headers=adopter_auth(adopter))

        assert response.status_code == 200
        body = response.json()
        assert [d["id"] for d in body] == [dog["id"], "58512345"]
        assert [d["source"] for d in body] == ["local", "remote"]
        assert body[0]["breed"] == "Boxer"
        assert body[0]["goodWCats"] is None

    @pytest.mark.asyncio
    async def test_search_passes_camel_case_filters(self, client, catalog, dog, adopter):
        response = await client.get(
            "/api/dogs",
            params={"goodWCats": "true", "breedId": "2"},
            headers=adopter_auth(adopter),
        )
        assert response.status_code == 200
        assert response.json() == []
        assert catalog.dog_filters[-1]["goodWCats"] == "true"
        assert catalog.dog_filters[-1]["breedId"] == "2"

    @pytest.mark.asyncio
    async def test_search_bad_flag(self, client, adopter):
        response = await client.get(
            "/api/dogs", params={"goodWKids": "sometimes"}, headers=adopter_auth(adopter)
        )
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_get_dog_with_shelter(self, client, dog, shelter, adopter):
        response = await client.get(f"/api/dogs/{dog['id']}", headers=adopter_auth(adopter))
        assert response.status_code == 200
        [found] = response.json()
        assert found["shelter"]["username"] == "s1"
        assert found["breedId"] == dog["breedId"]

    @pytest.mark.asyncio
    async def test_get_dog_missing(self, client, adopter):
        response = await client.get("/api/dogs/12345", headers=adopter_auth(adopter))
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_shelter_creates_dog_under_its_own_id(self, client, shelter, breeds):
        response = await client.post(
            "/api/dogs",
            json={"name": "Biscuit", "breedId": breeds["Beagle"], "goodWKids": "yes", "goodWCats": "unknown"},
            headers=shelter_auth(shelter),
        )
        assert response.status_code == 201
        body = response.json()
        assert body["shelterId"] == shelter["id"]
        assert body["breed"] == "Beagle"
        assert body["goodWKids"] is True
        assert body["goodWCats"] is None
        assert body["picture"] == "/assets/dog.png"

    @pytest.mark.asyncio
    async def test_shelter_cannot_create_for_another_shelter(self, client, shelter, other_shelter):
        response = await client.post(
            "/api/dogs",
            json={"name": "Biscuit", "shelterId": other_shelter["id"]},
            headers=shelter_auth(shelter),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_adopter_cannot_create_dog(self, client, adopter):
        response = await client.post(
            "/api/dogs", json={"name": "Biscuit"}, headers=adopter_auth(adopter)
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_breed_rejected(self, client, shelter, breeds):
        response = await client.post(
            "/api/dogs", json={"name": "Biscuit", "breedId": 99}, headers=shelter_auth(shelter)
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_owner_updates_dog(self, client, dog, shelter):
        response = await client.patch(
            f"/api/dogs/{dog['id']}", json={"goodWCats": False, "age": "Adult"},
            headers=shelter_auth(shelter),
        )
        assert response.status_code == 200
        assert response.json()["goodWCats"] is False
        assert response.json()["age"] == "Adult"

    @pytest.mark.asyncio
    async def test_empty_update(self, client, dog, shelter):
        response = await client.patch(f"/api/dogs/{dog['id']}", json={}, headers=shelter_auth(shelter))
        assert response.status_code == 400
        assert response.json()["message"] == "No data to update"

    @pytest.mark.asyncio
    async def test_other_shelter_cannot_touch_dog(self, client, dog, other_shelter):
        headers = shelter_auth(other_shelter)
        assert (await client.patch(f"/api/dogs/{dog['id']}", json={"age": "Senior"}, headers=headers)).status_code == 403
        assert (await client.delete(f"/api/dogs/{dog['id']}", headers=headers)).status_code == 403

    @pytest.mark.asyncio
    async def test_admin_deletes_any_dog(self, client, dog, admin):
        response = await client.delete(f"/api/dogs/{dog['id']}", headers=shelter_auth(admin))
        assert response.status_code == 200
        assert response.json() == {"deleted": str(dog["id"])}

    @pytest.mark.asyncio
    async def test_delete_missing_dog(self, client, shelter):
        response = await client.delete("/api/dogs/999", headers=shelter_auth(shelter))
        assert response.status_code == 404


# ══════════════════════════════════════════════════════════════════════════
# Shelters
# ══════════════════════════════════════════════════════════════════════════

class TestShelterRoutes:

    @pytest.mark.asyncio
    async def test_search_merges_and_hides_passwords(self, client, catalog, shelter, adopter):
        catalog.shelters = [remote_shelter()]
        response = await client.get(
            "/api/shelters", params={"state": "CO"}, headers=adopter_auth(adopter)
        )
        body = response.json()
        assert [s["id"] for s in body] == [shelter["id"], "CO123"]
        assert all("password" not in s for s in body)
        assert catalog.shelter_filters[-1]["state"] == "CO"

    @pytest.mark.asyncio
    async def test_get_shelter_by_username(self, client, shelter, dog, adopter):
        response = await client.get("/api/shelters/s1", headers=adopter_auth(adopter))
        [found] = response.json()
        assert found["id"] == shelter["id"]
        assert [d["id"] for d in found["adoptableDogs"]] == [dog["id"]]

    @pytest.mark.asyncio
    async def test_get_shelter_missing(self, client, adopter):
        response = await client.get("/api/shelters/nowhere", headers=adopter_auth(adopter))
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_shelter_updates_itself_but_not_admin_flag(self, client, shelter):
        headers = shelter_auth(shelter)
        ok = await client.patch(f"/api/shelters/{shelter['id']}", json={"phoneNumber": "555-0199"}, headers=headers)
        assert ok.status_code == 200
        assert ok.json()["phoneNumber"] == "555-0199"

        escalate = await client.patch(f"/api/shelters/{shelter['id']}", json={"isAdmin": True}, headers=headers)
        assert escalate.status_code == 403

    @pytest.mark.asyncio
    async def test_shelter_cannot_update_other_shelter(self, client, shelter, other_shelter):
        response = await client.patch(
            f"/api/shelters/{other_shelter['id']}", json={"name": "Mine"}, headers=shelter_auth(shelter)
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_password_change_then_login(self, client, shelter):
        response = await client.patch(
            f"/api/shelters/{shelter['id']}/password", json={"password": "newpass1"},
            headers=shelter_auth(shelter),
        )
        assert response.status_code == 200
        login = await client.post("/api/auth/shelters/token", json={"username": "s1", "password": "newpass1"})
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_admin_creates_and_deletes_shelter(self, client, admin):
        headers = shelter_auth(admin)
        created = await client.post(
            "/api/shelters",
            json={"username": "new", "password": "secret9", "name": "New", "city": "Aspen", "state": "CO"},
            headers=headers,
        )
        assert created.status_code == 201
        shelter_id = created.json()["id"]

        deleted = await client.delete(f"/api/shelters/{shelter_id}", headers=headers)
        assert deleted.json() == {"deleted": str(shelter_id)}

    @pytest.mark.asyncio
    async def test_contact_shelter(self, client, mailer, shelter, adopter):
        response = await client.post(
            "/api/shelters/s1/contact",
            json={"name": "Ann", "email": "ann@example.com", "message": "Is Lucy available?"},
            headers=adopter_auth(adopter),
        )
        assert response.status_code == 200
        assert response.json() == {"sent": True, "shelterEmail": "hello@s1.example"}
        assert mailer.sent[0]["shelter_email"] == "hello@s1.example"
        assert mailer.sent[0]["adopter_email"] == "ann@example.com"

    @pytest.mark.asyncio
    async def test_contact_shelter_without_email(self, client, other_shelter, adopter):
        response = await client.post(
            "/api/shelters/s2/contact",
            json={"name": "Ann", "email": "ann@example.com", "message": "Hi"},
            headers=adopter_auth(adopter),
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_contact_subject_must_be_one_line(self, client, mailer, shelter, adopter):
        response = await client.post(
            "/api/shelters/s1/contact",
            json={
                "name": "Ann", "email": "ann@example.com", "message": "Hi",
                "subject": "Hi\r\nBcc: someone@example.com",
            },
            headers=adopter_auth(adopter),
        )
        assert response.status_code == 422
        assert mailer.sent == []

    @pytest.mark.asyncio
    async def test_contact_delivery_failure(self, client, mailer, shelter, adopter):
        mailer.fail = True
        response = await client.post(
            "/api/shelters/s1/contact",
            json={"name": "Ann", "email": "ann@example.com", "message": "Hi"},
            headers=adopter_auth(adopter),
        )
        assert response.status_code == 503


# ══════════════════════════════════════════════════════════════════════════
# Adopters and favorites
# ══════════════════════════════════════════════════════════════════════════

class TestAdopterRoutes:

    @pytest.mark.asyncio
    async def test_get_adopter(self, client, adopter, shelter):
        response = await client.get("/api/adopters/ann", headers=shelter_auth(shelter))
        assert response.status_code == 200
        body = response.json()
        assert body["username"] == "ann"
        assert body["favoriteDogIds"] == []
        assert "password" not in body

    @pytest.mark.asyncio
    async def test_adopter_updates_self(self, client, adopter):
        response = await client.patch(
            "/api/adopters/ann", json={"numOfDogs": 2, "privateOutdoors": True},
            headers=adopter_auth(adopter),
        )
        assert response.status_code == 200
        assert response.json()["numOfDogs"] == 2
        assert response.json()["privateOutdoors"] is True

    @pytest.mark.asyncio
    async def test_adopter_cannot_update_someone_else(self, client, adopter, executor):
        await AdopterStore(executor).create({"username": "bob", "password": "secret2", "email": "bob@example.com"})
        response = await client.patch(
            "/api/adopters/bob", json={"description": "hacked"}, headers=adopter_auth(adopter)
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_favorites_flow(self, client, catalog, adopter, dog):
        headers = adopter_auth(adopter)
        catalog.dogs = [remote_dog("PF-9")]

        assert (await client.post("/api/favorites/PF-9", headers=headers)).status_code == 201
        again = await client.post("/api/favorites/PF-9", headers=headers)
        assert again.status_code == 409

        created = await client.post(f"/api/favorites/{dog['id']}", headers=headers)
        assert created.json() == {"adopterId": adopter["id"], "dogId": str(dog["id"])}

        favorites = await client.get("/api/adopters/ann/favorites", headers=headers)
        assert [d["id"] for d in favorites.json()] == ["PF-9", dog["id"]]

        removed = await client.delete("/api/favorites/PF-9", headers=headers)
        assert removed.json() == {"unfavorited": "PF-9"}
        missing = await client.delete("/api/favorites/PF-9", headers=headers)
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_admin_deletes_adopter(self, client, adopter, admin):
        response = await client.delete("/api/adopters/ann", headers=shelter_auth(admin))
        assert response.json() == {"deleted": "ann"}

    @pytest.mark.asyncio
    async def test_token_stays_with_account_after_rename(self, client, executor):
        first = await client.post(
            "/api/auth/adopters/register",
            json={"username": "alice", "password": "secret1", "email": "alice@example.com"},
        )
        old_token = {"Authorization": f"Bearer {first.json()['token']}"}
        renamed = await client.patch(
            "/api/adopters/alice", json={"username": "alice2"}, headers=old_token
        )
        assert renamed.status_code == 200

        # Someone else registers the freed username
        await client.post(
            "/api/auth/adopters/register",
            json={"username": "alice", "password": "secret2", "email": "newalice@example.com"},
        )

        patched = await client.patch(
            "/api/adopters/alice", json={"email": "taken@example.com"}, headers=old_token
        )
        assert patched.status_code == 403
        password = await client.patch(
            "/api/adopters/alice/password", json={"password": "changed1"}, headers=old_token
        )
        assert password.status_code == 403
        listing = await client.get("/api/adopters/alice/favorites", headers=old_token)
        assert listing.status_code == 403

        favorite = await client.post("/api/favorites/99", headers=old_token)
        assert favorite.status_code == 201

        adopters = AdopterStore(executor)
        original = await adopters.get("alice2")
        newcomer = await adopters.get("alice")
        assert favorite.json() == {"adopterId": original["id"], "dogId": "99"}
        assert original["favoriteDogIds"] == ["99"]
        assert newcomer["email"] == "newalice@example.com"
        assert newcomer["favoriteDogIds"] == []

        own = await client.patch(
            "/api/adopters/alice2", json={"description": "still me"}, headers=old_token
        )
        assert own.status_code == 200

    @pytest.mark.asyncio
    async def test_deleted_adopter_token_cannot_favorite(self, client, adopter, admin):
        await client.delete("/api/adopters/ann", headers=shelter_auth(admin))
        response = await client.post("/api/favorites/7", headers=adopter_auth(adopter))
        assert response.status_code == 404


# ══════════════════════════════════════════════════════════════════════════
# Health and error mapping
# ══════════════════════════════════════════════════════════════════════════

class TestHealthAndErrors:

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/api/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["petfinder"] == "available"
        assert "X-Request-ID" in response.headers

    @pytest.mark.asyncio
    async def test_health_degraded_when_catalog_down(self, client, catalog):
        catalog.healthy = False
        body = (await client.get("/api/health")).json()
        assert body["status"] == "degraded"
        assert body["petfinder"] == "unavailable"

    @pytest.mark.asyncio
    async def test_upstream_failure_is_502(self, client, catalog, adopter):
        async def broken(filters=None):
            raise UpstreamError(status_code=500)

        catalog.list_dogs = broken
        response = await client.get("/api/dogs", headers=adopter_auth(adopter))
        assert response.status_code == 502
        assert response.json()["details"]["upstream_status"] == 500

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client):
        response = await client.get("/api/breeds", headers={"X-Request-ID": "trace-1"})
        assert response.headers["X-Request-ID"] == "trace-1"
