from datetime import datetime
from typing import List

from pydantic import BaseModel, Field, StrictInt

from src.platform.types import UtilsUUID7


class BookingCreateRequest(BaseModel):
    model_config = {
        'json_schema_extra': {'examples': [{'movie_id': 1, 'seat_ids': [1, 2]}]},
    }

    movie_id: StrictInt
    # Emptiness, duplicates and the per-booking limit are checked by the booking use case
    seat_ids: List[StrictInt] = Field(default_factory=list)


class BookingCreatedResponse(BaseModel):
    model_config = {
        'json_schema_extra': {'example': {'booking_id': '01936d8f-5e73-7c4e-a9c5-123456789abc'}},
    }

    booking_id: UtilsUUID7  # UUID7, also the confirmation reference


class BookingConfirmationResponse(BaseModel):
    booking_id: UtilsUUID7
    movie_id: int
    movie_title: str
    seat_labels: List[str]
    seat_count: int
    booking_time: datetime


class BookingHistoryResponse(BaseModel):
    booking_id: UtilsUUID7
    movie_title: str
    booking_time: datetime
    seat_labels: List[str]
