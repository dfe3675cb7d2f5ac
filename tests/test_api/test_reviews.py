"""Tests for review API endpoints."""

from httpx import AsyncClient
from sqlalchemy import func, select

from reelrank.models import Movie, Review
from reelrank.services import reviews
from reelrank.services.errors import AggregationError


async def cached_rating(session_factory, movie_id: int) -> str:
    async with session_factory() as session:
        movie = await session.scalar(select(Movie).where(Movie.id == movie_id))
        return str(movie.avg_rating)


class TestSubmitReview:
    """Tests for creating and replacing reviews."""

    async def test_create_then_update(
        self, client: AsyncClient, make_user, make_movie, auth_headers, session_factory
    ) -> None:
        user = await make_user()
        movie = await make_movie()
        url = f"/api/movies/{movie.id}/reviews"

        response = await client.post(
            url, json={"rating": 4, "review_text": "Solid"}, headers=auth_headers(user)
        )
        assert response.status_code == 201
        data = response.json()
        assert data["kind"] == "created"
        assert data["movie_avg_rating"] == "4.00"
        assert data["review"]["user"]["username"] == user.username
        review_id = data["review"]["id"]

        response = await client.post(
            url, json={"rating": 2, "review_text": "Changed my mind"}, headers=auth_headers(user)
        )
        assert response.status_code == 200
        data = response.json()
        assert data["kind"] == "updated"
        assert data["review"]["id"] == review_id
        assert data["review"]["review_text"] == "Changed my mind"
        assert data["movie_avg_rating"] == "2.00"

        assert await cached_rating(session_factory, movie.id) == "2.00"

    async def test_mean_over_several_users(
        self, client: AsyncClient, make_user, make_movie, auth_headers
    ) -> None:
        users = [await make_user() for _ in range(3)]
        movie = await make_movie()
        url = f"/api/movies/{movie.id}/reviews"

        averages = []
        for user, rating in zip(users, [4, 5, 3], strict=True):
            response = await client.post(url, json={"rating": rating}, headers=auth_headers(user))
            averages.append(response.json()["movie_avg_rating"])

        assert averages == ["4.00", "4.50", "4.00"]

    async def test_rating_out_of_range(
        self, client: AsyncClient, make_user, make_movie, auth_headers
    ) -> None:
        user = await make_user()
        movie = await make_movie()

        response = await client.post(
            f"/api/movies/{movie.id}/reviews", json={"rating": 6}, headers=auth_headers(user)
        )

        assert response.status_code == 400

    async def test_rating_must_be_integer(
        self, client: AsyncClient, make_user, make_movie, auth_headers
    ) -> None:
        user = await make_user()
        movie = await make_movie()

        response = await client.post(
            f"/api/movies/{movie.id}/reviews", json={"rating": "4"}, headers=auth_headers(user)
        )

        assert response.status_code == 422

    async def test_missing_movie(self, client: AsyncClient, make_user, auth_headers) -> None:
        user = await make_user()

        response = await client.post(
            "/api/movies/9999/reviews", json={"rating": 3}, headers=auth_headers(user)
        )

        assert response.status_code == 404

    async def test_requires_token(self, client: AsyncClient, make_movie) -> None:
        movie = await make_movie()

        response = await client.post(f"/api/movies/{movie.id}/reviews", json={"rating": 3})

        assert response.status_code == 401

    async def test_aggregation_failure_rolls_back(
        self,
        client: AsyncClient,
        make_user,
        make_movie,
        auth_headers,
        session_factory,
        monkeypatch,
        caplog,
    ) -> None:
        user = await make_user()
        movie = await make_movie()

        async def broken_recompute(db, movie_id):
            raise AggregationError(f"Failed to update rating for movie {movie_id}")

        monkeypatch.setattr(reviews.ratings, "recompute", broken_recompute)

        response = await client.post(
            f"/api/movies/{movie.id}/reviews", json={"rating": 4}, headers=auth_headers(user)
        )

        assert response.status_code == 500
        assert response.json()["detail"] == f"Failed to update rating for movie {movie.id}"
        async with session_factory() as session:
            assert await session.scalar(select(func.count()).select_from(Review)) == 0
        logged = [r for r in caplog.records if r.name == "reelrank.main"]
        assert logged[0].levelname == "ERROR"
        assert logged[0].exc_info is not None


class TestDeleteReview:
    """Tests for deleting reviews."""

    async def test_author_deletes(
        self, client: AsyncClient, make_user, make_movie, auth_headers, session_factory
    ) -> None:
        author = await make_user()
        other = await make_user()
        movie = await make_movie()
        url = f"/api/movies/{movie.id}/reviews"
        response = await client.post(url, json={"rating": 5}, headers=auth_headers(author))
        review_id = response.json()["review"]["id"]
        await client.post(url, json={"rating": 2}, headers=auth_headers(other))

        response = await client.delete(f"/api/reviews/{review_id}", headers=auth_headers(author))

        assert response.status_code == 200
        data = response.json()
        assert data["by_admin_override"] is False
        assert data["movie_avg_rating"] == "2.00"
        assert await cached_rating(session_factory, movie.id) == "2.00"

    async def test_other_user_forbidden(
        self, client: AsyncClient, make_user, make_movie, auth_headers, session_factory
    ) -> None:
        author = await make_user()
        intruder = await make_user()
        movie = await make_movie()
        response = await client.post(
            f"/api/movies/{movie.id}/reviews", json={"rating": 5}, headers=auth_headers(author)
        )
        review_id = response.json()["review"]["id"]

        response = await client.delete(
            f"/api/reviews/{review_id}", headers=auth_headers(intruder)
        )

        assert response.status_code == 403
        async with session_factory() as session:
            assert await session.get(Review, review_id) is not None
        assert await cached_rating(session_factory, movie.id) == "5.00"

    async def test_admin_override(
        self, client: AsyncClient, make_user, make_movie, auth_headers
    ) -> None:
        author = await make_user()
        admin = await make_user(is_admin=True)
        movie = await make_movie()
        response = await client.post(
            f"/api/movies/{movie.id}/reviews", json={"rating": 1}, headers=auth_headers(author)
        )
        review_id = response.json()["review"]["id"]

        response = await client.delete(f"/api/reviews/{review_id}", headers=auth_headers(admin))

        assert response.status_code == 200
        data = response.json()
        assert data["by_admin_override"] is True
        assert data["movie_avg_rating"] == "0.00"

    async def test_missing_review(self, client: AsyncClient, make_user, auth_headers) -> None:
        user = await make_user()

        response = await client.delete("/api/reviews/9999", headers=auth_headers(user))

        assert response.status_code == 404


class TestListReviews:
    """Tests for review listings."""

    async def test_movie_reviews(
        self, client: AsyncClient, make_user, make_movie, add_review
    ) -> None:
        user = await make_user()
        movie = await make_movie()
        await add_review(user, movie, 3)

        response = await client.get(f"/api/movies/{movie.id}/reviews")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["results"][0]["rating"] == 3

    async def test_movie_reviews_missing_movie(self, client: AsyncClient) -> None:
        response = await client.get("/api/movies/9999/reviews")

        assert response.status_code == 404

    async def test_my_reviews(
        self, client: AsyncClient, make_user, make_movie, add_review, auth_headers
    ) -> None:
        user = await make_user()
        other = await make_user()
        movie = await make_movie("Mine")
        await add_review(user, movie, 4)
        await add_review(other, movie, 2)

        response = await client.get("/api/reviews/mine", headers=auth_headers(user))

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["results"][0]["movie"]["title"] == "Mine"

    async def test_user_reviews(
        self, client: AsyncClient, make_user, make_movie, add_review
    ) -> None:
        user = await make_user()
        await add_review(user, await make_movie(), 5)

        response = await client.get(f"/api/users/{user.id}/reviews")

        assert response.status_code == 200
        assert response.json()["total"] == 1

    async def test_user_reviews_missing_user(self, client: AsyncClient) -> None:
        response = await client.get("/api/users/9999/reviews")

        assert response.status_code == 404
