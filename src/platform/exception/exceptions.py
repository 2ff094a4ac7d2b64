from typing import Sequence


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class ValidationError(DomainError):
    """Malformed request, raised before the store is touched"""

    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class SeatsUnavailableError(ConflictError):
    """One or more requested seats are already claimed by another booking"""

    def __init__(
        self,
        seat_ids: Sequence[int],
        seat_labels: Sequence[str] = (),
        *,
        message: str | None = None,
    ) -> None:
        self.seat_ids = sorted(seat_ids)
        self.seat_labels = list(seat_labels)
        names = ', '.join(self.seat_labels) or ', '.join(str(i) for i in self.seat_ids)
        super().__init__(message or f'Seats already booked: {names}')


class TransientStoreError(CustomBaseError):
    """Lock timeout, deadlock or dropped connection - the whole booking can be retried"""

    def __init__(self, message: str = 'Booking service is busy, please retry later') -> None:
        super().__init__(message, 503)


class AuthenticationError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 401)
