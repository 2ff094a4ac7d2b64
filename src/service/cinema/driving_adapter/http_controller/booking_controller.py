from typing import List

from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.platform.types import UtilsUUID7
from src.service.cinema.app.command.book_seats_use_case import BookSeatsUseCase
from src.service.cinema.app.query.get_booking_confirmation_use_case import (
    GetBookingConfirmationUseCase,
)
from src.service.cinema.app.query.list_user_bookings_use_case import ListUserBookingsUseCase
from src.service.cinema.driving_adapter.http_controller.auth.current_user import (
    get_current_user_id,
)
from src.service.cinema.driving_adapter.http_controller.schema.booking_schema import (
    BookingConfirmationResponse,
    BookingCreatedResponse,
    BookingCreateRequest,
    BookingHistoryResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


# Declared before '/{booking_id}' so the literal path wins
@router.get('/my_bookings', status_code=status.HTTP_200_OK)
@Logger.io
async def list_my_bookings(
    user_id: int = Depends(get_current_user_id),
    use_case: ListUserBookingsUseCase = Depends(ListUserBookingsUseCase.depends),
) -> List[BookingHistoryResponse]:
    entries = await use_case.list_user_bookings(user_id=user_id)
    return [
        BookingHistoryResponse(
            booking_id=entry.booking_id,
            movie_title=entry.movie_title,
            booking_time=entry.booking_time,
            seat_labels=entry.seat_labels,
        )
        for entry in entries
    ]


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def book_seats(
    request: BookingCreateRequest,
    user_id: int = Depends(get_current_user_id),
    use_case: BookSeatsUseCase = Depends(BookSeatsUseCase.depends),
) -> BookingCreatedResponse:
    with tracer.start_as_current_span('controller.book_seats') as span:
        span.set_attribute('movie_id', request.movie_id)
        span.set_attribute('user_id', user_id)
        span.set_attribute('seat_count', len(request.seat_ids))

        booking_id = await use_case.book_seats(
            movie_id=request.movie_id,
            user_id=user_id,
            seat_ids=request.seat_ids,
        )

        span.set_attribute('booking.id', str(booking_id))
        return BookingCreatedResponse(booking_id=booking_id)


@router.get('/{booking_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def get_booking_confirmation(
    booking_id: UtilsUUID7,
    user_id: int = Depends(get_current_user_id),
    use_case: GetBookingConfirmationUseCase = Depends(GetBookingConfirmationUseCase.depends),
) -> BookingConfirmationResponse:
    detail = await use_case.get_confirmation(booking_id=booking_id, user_id=user_id)
    return BookingConfirmationResponse(
        booking_id=detail.booking_id,
        movie_id=detail.movie_id,
        movie_title=detail.movie_title,
        seat_labels=detail.seat_labels,
        seat_count=detail.seat_count,
        booking_time=detail.booking_time,
    )
