from typing import Any, Callable

from fastapi.testclient import TestClient
import pytest


@pytest.mark.integration
class TestMovieApi:
    def test_list_movies__available_seats(
        self,
        client: TestClient,
        http_seed: dict[str, Any],
        auth_headers: Callable[[int], dict[str, str]],
    ) -> None:
        # Arrange
        client.post(
            '/api/bookings',
            json={
                'movie_id': http_seed['small_movie_id'],
                'seat_ids': [http_seed['small_seats']['A1']],
            },
            headers=auth_headers(http_seed['user_id']),
        )

        # Act
        response = client.get('/api/movies')

        # Assert
        assert response.status_code == 200
        movies = {movie['title']: movie for movie in response.json()}
        assert movies['Inception']['available_seats'] == 100
        assert movies['Spirited Away']['capacity'] == 2
        assert movies['Spirited Away']['available_seats'] == 1

    def test_seat_map__ordered_with_booked_flags(
        self, client: TestClient, http_seed: dict[str, Any]
    ) -> None:
        response = client.get(f'/api/movies/{http_seed["movie_id"]}')

        assert response.status_code == 200
        body = response.json()
        assert body['title'] == 'Inception'
        assert body['release_date'] == '2010-07-16'
        assert [seat['label'] for seat in body['seats']] == ['A1', 'A2', 'A3', 'B1']
        assert body['booked_count'] == 0
        assert body['available_seats'] == 100

    def test_seat_map__unknown_movie_404(
        self, client: TestClient, http_seed: dict[str, Any]
    ) -> None:
        response = client.get(f'/api/movies/{http_seed["movie_id"] + 1000}')

        assert response.status_code == 404
        assert response.json() == {'detail': 'Movie not found'}


@pytest.mark.integration
class TestOperationalEndpoints:
    def test_health(self, client: TestClient) -> None:
        response = client.get('/health')

        assert response.status_code == 200
        assert response.json()['status'] == 'healthy'
        assert response.json()['database'] == 'up'

    def test_metrics__booking_counters_exposed(
        self,
        client: TestClient,
        http_seed: dict[str, Any],
        auth_headers: Callable[[int], dict[str, str]],
    ) -> None:
        client.post(
            '/api/bookings',
            json={'movie_id': http_seed['movie_id'], 'seat_ids': [http_seed['seats']['B1']]},
            headers=auth_headers(http_seed['user_id']),
        )

        response = client.get('/metrics')

        assert response.status_code == 200
        assert 'cinema_booking_requests_total' in response.text
