from inspect import signature

import pytest

from src.platform.logging.loguru_io import Logger
from src.platform.logging.loguru_io_config import access_log_level, booking_id_var
from src.platform.logging.loguru_io_utils import (
    MASK,
    bind_call_arguments,
    mask_sensitive,
    truncate_content,
)


@pytest.mark.unit
class TestLoguruIoUtils:
    def test_mask_sensitive__nested_keys_and_repr(self) -> None:
        data = {'email': 'a@b.c', 'password': 'hunter2', 'nested': [{'token': 'abc'}]}

        assert mask_sensitive(data) == {
            'email': 'a@b.c',
            'password': MASK,
            'nested': [{'token': MASK}],
        }
        assert mask_sensitive("User(password='hunter2')") == f"User(password='{MASK}')"

    def test_truncate_content(self) -> None:
        assert truncate_content('x' * 10, max_length=4) == 'xxxx...(+6 chars)'
        assert truncate_content(12345, max_length=2) == 12345

    def test_bind_call_arguments__drops_self(self) -> None:
        class Repo:
            def list_seats(self, *, movie_id: int) -> None: ...

        repo = Repo()
        sig = signature(Repo.list_seats)

        assert bind_call_arguments(sig, (repo,), {'movie_id': 3}) == {'movie_id': 3}

    @pytest.mark.parametrize(
        ('message', 'level'),
        [
            ('127.0.0.1 - "POST /api/bookings HTTP/1.1" - 201 - 8ms', 'SUCCESS'),
            ('127.0.0.1 - "POST /api/bookings HTTP/1.1" - 409 - 3ms', 'ERROR'),
            ('127.0.0.1 - "GET /health HTTP/1.1" - 503 - 1ms', 'CRITICAL'),
            ('Booking service started', None),
        ],
    )
    def test_access_log_level(self, message: str, level: str | None) -> None:
        assert access_log_level(message) == level


@pytest.mark.unit
class TestLoggerIo:
    def test_booking_context__scoped_booking_id(self) -> None:
        with Logger.booking_context('01936d8f-5e73-7c4e-a9c5-123456789abc'):
            assert booking_id_var.get() == '01936d8f-5e73-7c4e-a9c5-123456789abc'

        assert booking_id_var.get() == ''

    @pytest.mark.asyncio
    async def test_io__coroutine_result_and_error_passthrough(self) -> None:
        @Logger.io
        async def seats_left(capacity: int, booked: int) -> int:
            if booked > capacity:
                raise ValueError('overbooked')
            return capacity - booked

        assert await seats_left(10, 3) == 7
        with pytest.raises(ValueError, match='overbooked'):
            await seats_left(1, 2)

    @pytest.mark.asyncio
    async def test_io__async_generator_streams_all_items(self) -> None:
        @Logger.io
        async def labels():
            for label in ('A1', 'A2'):
                yield label

        assert [label async for label in labels()] == ['A1', 'A2']
