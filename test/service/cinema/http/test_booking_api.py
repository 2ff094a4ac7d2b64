"""
HTTP API tests for /api/bookings

The app runs in a session-scoped TestClient; http_seed resets the tables before each test.
"""

from typing import Any, Callable

from fastapi.testclient import TestClient
import pytest


BOOKINGS_URL = '/api/bookings'


@pytest.fixture
def alice(http_seed: dict[str, Any], auth_headers: Callable[[int], dict[str, str]]):
    return auth_headers(http_seed['user_id'])


@pytest.fixture
def bob(http_seed: dict[str, Any], auth_headers: Callable[[int], dict[str, str]]):
    return auth_headers(http_seed['other_user_id'])


def _book(client: TestClient, headers: dict[str, str], movie_id: int, seat_ids: list[int]):
    return client.post(
        BOOKINGS_URL, json={'movie_id': movie_id, 'seat_ids': seat_ids}, headers=headers
    )


@pytest.mark.integration
class TestCreateBooking:
    def test_book_seats__201_with_booking_id(
        self, client: TestClient, http_seed: dict[str, Any], alice: dict[str, str]
    ) -> None:
        # Act
        response = _book(client, alice, http_seed['movie_id'], [http_seed['seats']['A1']])

        # Assert
        assert response.status_code == 201
        booking_id = response.json()['booking_id']

        confirmation = client.get(f'{BOOKINGS_URL}/{booking_id}', headers=alice)
        assert confirmation.status_code == 200
        assert confirmation.json()['movie_title'] == 'Inception'
        assert confirmation.json()['seat_labels'] == ['A1']
        assert confirmation.json()['seat_count'] == 1

    def test_seat_already_booked__409_naming_seat(
        self,
        client: TestClient,
        http_seed: dict[str, Any],
        alice: dict[str, str],
        bob: dict[str, str],
    ) -> None:
        # Arrange
        seats = http_seed['seats']
        assert _book(client, bob, http_seed['movie_id'], [seats['A2']]).status_code == 201

        # Act
        response = _book(client, alice, http_seed['movie_id'], [seats['A1'], seats['A2']])

        # Assert
        assert response.status_code == 409
        assert response.json()['seat_ids'] == [seats['A2']]
        assert response.json()['seat_labels'] == ['A2']

        seat_map = client.get(f'/api/movies/{http_seed["movie_id"]}').json()
        booked = [seat['label'] for seat in seat_map['seats'] if seat['is_booked']]
        assert booked == ['A2']

    @pytest.mark.parametrize(
        'body',
        [
            pytest.param({'movie_id': 1, 'seat_ids': []}, id='empty_seats'),
            pytest.param({'movie_id': 1, 'seat_ids': ['A1']}, id='non_integer_seat'),
            pytest.param({'movie_id': 1, 'seat_ids': [1, 1]}, id='duplicate_seat'),
            pytest.param({'seat_ids': [1]}, id='missing_movie'),
            pytest.param({'movie_id': 1, 'seat_ids': 'A1'}, id='seat_ids_not_a_list'),
        ],
    )
    def test_malformed_request__400(
        self, client: TestClient, alice: dict[str, str], body: dict[str, Any]
    ) -> None:
        response = client.post(BOOKINGS_URL, json=body, headers=alice)

        assert response.status_code == 400

    def test_unknown_movie__404(
        self, client: TestClient, http_seed: dict[str, Any], alice: dict[str, str]
    ) -> None:
        response = _book(client, alice, http_seed['movie_id'] + 1000, [http_seed['seats']['A1']])

        assert response.status_code == 404

    def test_session_for_unknown_user__404(
        self,
        client: TestClient,
        http_seed: dict[str, Any],
        auth_headers: Callable[[int], dict[str, str]],
    ) -> None:
        ghost = auth_headers(http_seed['user_id'] + 999)

        response = _book(client, ghost, http_seed['movie_id'], [http_seed['seats']['A1']])

        assert response.status_code == 404
        assert response.json() == {'detail': 'User not found'}

    def test_without_session__401(self, client: TestClient, http_seed: dict[str, Any]) -> None:
        response = _book(client, {}, http_seed['movie_id'], [http_seed['seats']['A1']])

        assert response.status_code == 401


@pytest.mark.integration
class TestReadBookings:
    def test_other_users_booking__404(
        self,
        client: TestClient,
        http_seed: dict[str, Any],
        alice: dict[str, str],
        bob: dict[str, str],
    ) -> None:
        booking_id = _book(
            client, alice, http_seed['movie_id'], [http_seed['seats']['A1']]
        ).json()['booking_id']

        response = client.get(f'{BOOKINGS_URL}/{booking_id}', headers=bob)

        assert response.status_code == 404

    def test_invalid_booking_reference__400(
        self, client: TestClient, alice: dict[str, str]
    ) -> None:
        response = client.get(f'{BOOKINGS_URL}/not-a-uuid', headers=alice)

        assert response.status_code == 400

    def test_my_bookings__newest_first(
        self, client: TestClient, http_seed: dict[str, Any], alice: dict[str, str]
    ) -> None:
        # Arrange
        first = _book(
            client, alice, http_seed['movie_id'], [http_seed['seats']['A1']]
        ).json()['booking_id']
        second = _book(
            client, alice, http_seed['small_movie_id'], list(http_seed['small_seats'].values())
        ).json()['booking_id']

        # Act
        response = client.get(f'{BOOKINGS_URL}/my_bookings', headers=alice)

        # Assert
        assert response.status_code == 200
        history = response.json()
        assert [entry['booking_id'] for entry in history] == [second, first]
        assert history[0]['movie_title'] == 'Spirited Away'
        assert history[0]['seat_labels'] == ['A1', 'A2']

    def test_my_bookings__empty_for_new_user(
        self, client: TestClient, bob: dict[str, str]
    ) -> None:
        response = client.get(f'{BOOKINGS_URL}/my_bookings', headers=bob)

        assert response.status_code == 200
        assert response.json() == []
