"""
Chill Gamer Backend — HTTP Route Tests
=======================================

What:  End-to-end tests through the ASGI app (middleware, handlers, routes).
How:   HTTPX AsyncClient with ASGITransport; the database dependency is
       overridden with mock_db or memory_db (see conftest.py).

What we test:
    ✅ Banner, request id header, health (ok and partial)
    ✅ Review CRUD status codes and `{"error": ...}` bodies
    ✅ Malformed ids, bad minRating and duplicate watchlist entries → 400
    ✅ Review fields are stored exactly as sent
    ✅ Serverless cold start against an unreachable store → 503 / partial health
    ✅ Unknown user → 200 with null
"""

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from pymongo.errors import AutoReconnect, ServerSelectionTimeoutError

from chill_gamer.config import settings
from chill_gamer.database import Database
from chill_gamer.main import create_app

from conftest import make_cursor, make_mongo_client, make_update_result


class TestBannerAndHealth:

    @pytest.mark.asyncio
    async def test_banner(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        body = response.json()
        assert "is running!" in body["message"]
        assert body["database"] == "Connected to MongoDB"

    @pytest.mark.asyncio
    async def test_request_id_header_is_echoed(self, test_client):
        response = await test_client.get("/", headers={"X-Request-ID": "trace-42"})

        assert response.headers["X-Request-ID"] == "trace-42"

    @pytest.mark.asyncio
    async def test_health_reports_counts(self, test_client, mock_db):
        mock_db.games.count_documents.return_value = 12
        mock_db.reviews.count_documents.return_value = 30
        mock_db.users.count_documents.return_value = 4

        response = await test_client.get("/health")

        assert response.status_code == 200
        database = response.json()["database"]
        assert database["status"] == "Connected"
        assert (database["games"], database["reviews"], database["users"]) == (12, 30, 4)
        assert "reviews" in response.json()["endpoints"]

    @pytest.mark.asyncio
    async def test_health_partial_failure(self, test_client, mock_db):
        mock_db.games.count_documents.return_value = 12
        mock_db.reviews.count_documents.side_effect = ServerSelectionTimeoutError("no servers")

        response = await test_client.get("/health")

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "API running but database error"
        assert body["database"]["games"] == 12
        assert body["database"]["reviews"] is None


class TestReviewRoutes:

    @pytest.mark.asyncio
    async def test_list_reviews(self, test_client, mock_db):
        oid = ObjectId()
        mock_db.reviews.find.return_value = make_cursor([{"_id": oid, "gameTitle": "Hades"}])

        response = await test_client.get("/chill-gamer/reviews")

        assert response.status_code == 200
        assert response.json() == [{"_id": str(oid), "gameTitle": "Hades"}]

    @pytest.mark.asyncio
    async def test_unknown_review_is_404(self, test_client):
        response = await test_client.get(f"/chill-gamer/reviews/{ObjectId()}")

        assert response.status_code == 404
        assert response.json()["error"] == "Review not found"

    @pytest.mark.asyncio
    async def test_malformed_review_id_is_400(self, test_client):
        response = await test_client.get("/chill-gamer/reviews/xyz")

        assert response.status_code == 400
        assert "error" in response.json()

    @pytest.mark.asyncio
    async def test_highest_rated_is_not_treated_as_id(self, test_client, mock_db):
        response = await test_client.get("/chill-gamer/reviews/highest-rated")

        assert response.status_code == 200
        mock_db.reviews.find_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_unknown_review_reports_zero(self, test_client, mock_db):
        mock_db.reviews.update_one.return_value = make_update_result(matched=0, modified=0)

        response = await test_client.put(
            f"/chill-gamer/reviews/{ObjectId()}", json={"rating": 3}
        )

        assert response.status_code == 200
        assert response.json()["matchedCount"] == 0

    @pytest.mark.asyncio
    async def test_non_object_body_is_400(self, test_client):
        response = await test_client.post("/chill-gamer/reviews", json=["not", "a", "review"])

        assert response.status_code == 400
        assert response.json()["error"].startswith("body")

    @pytest.mark.asyncio
    async def test_review_fields_are_stored_as_sent(self, memory_client):
        payload = {"gameTitle": 123, "year": "2022", "rating": True, "platform": "PC"}

        created = await memory_client.post("/chill-gamer/reviews", json=payload)
        fetched = await memory_client.get(f"/chill-gamer/reviews/{created.json()['_id']}")

        assert created.status_code == 200
        for key, value in payload.items():
            assert fetched.json()[key] == value
            assert type(fetched.json()[key]) is type(value)

    @pytest.mark.asyncio
    async def test_create_get_delete_scenario(self, memory_client, sample_review):
        created = await memory_client.post("/chill-gamer/reviews", json=sample_review)
        assert created.status_code == 200
        review_id = created.json()["_id"]

        fetched = await memory_client.get(f"/chill-gamer/reviews/{review_id}")
        assert fetched.status_code == 200
        assert fetched.json()["gameTitle"] == "Elden Ring"
        assert fetched.json()["createdAt"] == fetched.json()["updatedAt"]

        deleted = await memory_client.delete(f"/chill-gamer/reviews/{review_id}")
        assert deleted.json()["deletedCount"] == 1

        gone = await memory_client.get(f"/chill-gamer/reviews/{review_id}")
        assert gone.status_code == 404


class TestSearchRoutes:

    @pytest.mark.asyncio
    async def test_bad_min_rating_is_400(self, test_client):
        response = await test_client.get("/chill-gamer/search/reviews?minRating=abc")

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_search_builds_filter(self, test_client, mock_db):
        response = await test_client.get(
            "/chill-gamer/search/reviews", params={"genre": "RPG", "minRating": "4"}
        )

        assert response.status_code == 200
        mock_db.reviews.find.assert_called_once_with({"genre": "RPG", "rating": {"$gte": 4.0}})

    @pytest.mark.asyncio
    async def test_genres(self, test_client, mock_db):
        mock_db.reviews.distinct.return_value = ["RPG"]

        response = await test_client.get("/chill-gamer/genres")

        assert response.json() == ["RPG"]


class TestWatchlistAndUserRoutes:

    @pytest.mark.asyncio
    async def test_duplicate_watchlist_entry_is_400(self, memory_client):
        entry = {"userEmail": "a@b.com", "gameTitle": "Celeste"}

        first = await memory_client.post("/chill-gamer/watchlist", json=entry)
        second = await memory_client.post("/chill-gamer/watchlist", json=entry)

        assert first.status_code == 200
        assert second.status_code == 400
        assert second.json()["error"] == "Already in watchlist"

        listed = await memory_client.get("/chill-gamer/watchlist/a@b.com")
        assert len(listed.json()) == 1

    @pytest.mark.asyncio
    async def test_unknown_user_is_null(self, test_client):
        response = await test_client.get("/chill-gamer/users/nobody@example.com")

        assert response.status_code == 200
        assert response.json() is None

    @pytest.mark.asyncio
    async def test_user_upsert_requires_email(self, test_client):
        response = await test_client.post("/chill-gamer/users", json={"name": "Anon"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_user_upsert(self, memory_client):
        response = await memory_client.post(
            "/chill-gamer/users", json={"email": "a@b.com", "name": "Ada"}
        )

        assert response.status_code == 200
        assert response.json()["result"]["upsertedCount"] == 1

        profile = await memory_client.get("/chill-gamer/users/a@b.com")
        assert profile.json()["role"] == "user"

    @pytest.mark.asyncio
    async def test_unknown_game_is_404(self, test_client):
        response = await test_client.get(f"/chill-gamer/games/{ObjectId()}")

        assert response.status_code == 404
        assert response.json()["error"] == "Game not found"


class TestServerlessColdStart:
    """First request connects; a failed connect must surface as 503 / partial health."""

    @pytest_asyncio.fixture
    async def cold_client(self, monkeypatch):
        monkeypatch.setattr(settings, "deployment_target", "serverless")
        client, _, index_target = make_mongo_client()
        index_target.create_index.side_effect = AutoReconnect("connection reset")
        app = create_app(database=Database("mongodb://test", "chill_gamer_test", client=client))
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
            yield http

    @pytest.mark.asyncio
    async def test_route_returns_503(self, cold_client):
        response = await cold_client.get("/chill-gamer/games")

        assert response.status_code == 503
        assert "error" in response.json()

    @pytest.mark.asyncio
    async def test_health_reports_partial_failure(self, cold_client):
        response = await cold_client.get("/health")

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "API running but database error"
        assert body["database"]["status"] == "Error"
        assert set(body["database"]["errors"]) == {"games", "reviews", "users"}
