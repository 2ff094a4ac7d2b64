from prometheus_client import Counter, Gauge, Histogram


class BookingResult:
    SUCCESS = 'success'
    UNAVAILABLE = 'unavailable'
    TRANSIENT = 'transient'
    INVALID = 'invalid'
    NOT_FOUND = 'not_found'


class BookingMetrics:
    """
    Cinema Booking Core Metrics Collector

    Tracks the seat booking transaction: outcomes, latency and retries
    """

    def __init__(self):
        # ========== Seat Booking Business Metrics ==========
        self.booking_requests = Counter(
            'cinema_booking_requests_total',
            'Total seat booking requests',
            ['movie_id', 'result'],  # result: success/unavailable/transient/invalid/not_found
        )

        self.booking_duration = Histogram(
            'cinema_booking_duration_seconds',
            'Seat booking transaction time, retries included',
            ['movie_id'],
            buckets=[0.005, 0.01, 0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0],
        )

        self.booking_retries = Counter(
            'cinema_booking_retries_total',
            'Booking attempts restarted after a transient store failure',
            ['movie_id'],
        )

        self.seats_booked = Counter(
            'cinema_seats_booked_total',
            'Seats claimed by committed bookings',
            ['movie_id'],
        )

        self.concurrent_bookings = Gauge(
            'cinema_concurrent_bookings', 'Active booking transactions', ['movie_id']
        )

    # ========== Helper Methods ==========

    def record_booking(self, *, movie_id: int, result: str, duration: float, seat_count: int = 0):
        self.booking_requests.labels(movie_id=movie_id, result=result).inc()
        self.booking_duration.labels(movie_id=movie_id).observe(duration)
        if result == BookingResult.SUCCESS and seat_count:
            self.seats_booked.labels(movie_id=movie_id).inc(seat_count)

    def record_retry(self, *, movie_id: int):
        self.booking_retries.labels(movie_id=movie_id).inc()


# Global metrics instance
metrics = BookingMetrics()
