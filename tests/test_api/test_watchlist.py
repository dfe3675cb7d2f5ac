"""Tests for watchlist API endpoints."""

from httpx import AsyncClient


class TestWatchlistMembership:
    """Tests for add, remove and check."""

    async def test_add_duplicate_remove(
        self, client: AsyncClient, make_user, make_movie, auth_headers
    ) -> None:
        user = await make_user()
        movie = await make_movie("Saved")
        headers = auth_headers(user)

        response = await client.post(f"/api/watchlist/{movie.id}", headers=headers)
        assert response.status_code == 201
        assert response.json()["movie"]["title"] == "Saved"

        response = await client.post(f"/api/watchlist/{movie.id}", headers=headers)
        assert response.status_code == 409

        response = await client.get(f"/api/watchlist/check/{movie.id}", headers=headers)
        assert response.json() == {"movie_id": movie.id, "in_watchlist": True}

        response = await client.delete(f"/api/watchlist/{movie.id}", headers=headers)
        assert response.status_code == 204

        response = await client.delete(f"/api/watchlist/{movie.id}", headers=headers)
        assert response.status_code == 404

    async def test_add_missing_movie(self, client: AsyncClient, make_user, auth_headers) -> None:
        user = await make_user()

        response = await client.post("/api/watchlist/9999", headers=auth_headers(user))

        assert response.status_code == 404

    async def test_check_missing_movie_is_false(
        self, client: AsyncClient, make_user, auth_headers
    ) -> None:
        user = await make_user()

        response = await client.get("/api/watchlist/check/9999", headers=auth_headers(user))

        assert response.status_code == 200
        assert response.json()["in_watchlist"] is False

    async def test_requires_token(self, client: AsyncClient) -> None:
        response = await client.get("/api/watchlist")

        assert response.status_code == 401


class TestWatchlistToggle:
    """Tests for toggling."""

    async def test_toggle_add_then_remove(
        self, client: AsyncClient, make_user, make_movie, auth_headers
    ) -> None:
        user = await make_user()
        movie = await make_movie()
        headers = auth_headers(user)
        url = f"/api/watchlist/{movie.id}/toggle"

        response = await client.post(url, json={"currently_present": False}, headers=headers)
        assert response.status_code == 200
        data = response.json()
        assert data["action"] == "added"
        assert data["in_watchlist"] is True
        assert data["entry"]["movie_id"] == movie.id

        response = await client.post(url, json={"currently_present": True}, headers=headers)
        data = response.json()
        assert data["action"] == "removed"
        assert data["in_watchlist"] is False
        assert data["entry"] is None

    async def test_stale_flag_conflicts(
        self, client: AsyncClient, make_user, make_movie, auth_headers
    ) -> None:
        user = await make_user()
        movie = await make_movie()
        headers = auth_headers(user)
        await client.post(f"/api/watchlist/{movie.id}", headers=headers)

        response = await client.post(
            f"/api/watchlist/{movie.id}/toggle", json={"currently_present": False}, headers=headers
        )

        assert response.status_code == 409


class TestWatchlistListing:
    """Tests for listing and stats."""

    async def test_list_and_stats(
        self, client: AsyncClient, make_user, make_movie, auth_headers
    ) -> None:
        user = await make_user()
        other = await make_user()
        drama = await make_movie("Drama one", genre="Drama")
        drama_two = await make_movie("Drama two", genre="Drama")
        comedy = await make_movie("Comedy one", genre="Comedy")
        for movie in (drama, drama_two, comedy):
            await client.post(f"/api/watchlist/{movie.id}", headers=auth_headers(user))
        await client.post(f"/api/watchlist/{comedy.id}", headers=auth_headers(other))

        response = await client.get("/api/watchlist", headers=auth_headers(user))
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert {entry["movie"]["title"] for entry in data["results"]} == {
            "Drama one",
            "Drama two",
            "Comedy one",
        }

        response = await client.get("/api/watchlist/stats", headers=auth_headers(user))
        assert response.status_code == 200
        stats = response.json()
        assert stats["total_movies"] == 3
        assert stats["genres"] == {"Drama": 2, "Comedy": 1}
        assert len(stats["recent_additions"]) == 3
