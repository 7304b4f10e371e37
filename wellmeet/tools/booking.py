"""
In-memory reservation backend.

Stands in for the WellMeet reservation, recommendation, and notification
endpoints in the console demo and in tests. It exposes the same async
methods as ``WellmeetClient`` so flows can be pointed at either.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from wellmeet.errors import ServiceError
from wellmeet.schemas.booking_schema import BookingRecord, BookingStatus, ReservationRequest
from wellmeet.schemas.notification_schema import Notification
from wellmeet.schemas.restaurant_schema import RestaurantCandidate
from wellmeet.tools.catalog import RESTAURANTS, candidates_for_text

logger = logging.getLogger(__name__)

CONFIRMATION_PREFIX = "WM"


class InMemoryReservationService:
    """Dict-backed reservation store plus a canned notification feed."""

    def __init__(self, notifications: Optional[list[Notification]] = None) -> None:
        self._bookings: dict[str, BookingRecord] = {}
        self._notifications: dict[str, Notification] = {
            n.id: n.model_copy() for n in (notifications or [])
        }
        self._sequence = 0

    # ------------------------------------------------------------------ #
    # Recommendation
    # ------------------------------------------------------------------ #

    async def recommend(self, query: str) -> list[RestaurantCandidate]:
        return candidates_for_text(query)

    # ------------------------------------------------------------------ #
    # Reservations
    # ------------------------------------------------------------------ #

    def _require(self, reservation_id: str) -> BookingRecord:
        record = self._bookings.get(reservation_id)
        if record is None:
            raise ServiceError(f"Reservation {reservation_id} not found.", status_code=404)
        return record

    async def create_reservation(self, request: ReservationRequest) -> BookingRecord:
        """Create a new pending booking and return it with a confirmation number."""
        self._sequence += 1
        created_at = datetime.now(timezone.utc)
        restaurant = RESTAURANTS.get(request.restaurant_id)
        record = BookingRecord(
            id=uuid.uuid4().hex[:8],
            restaurant_id=request.restaurant_id,
            restaurant_name=restaurant.name if restaurant else "",
            date=request.date,
            time=request.time,
            party_size=request.party_size,
            estimated_cost=request.estimated_cost or 0,
            status=BookingStatus.PENDING,
            confirmation_number=(
                f"{CONFIRMATION_PREFIX}{request.date:%y%m%d}{self._sequence:03d}"
            ),
            special_request=request.special_request or None,
            created_at=created_at,
        )
        self._bookings[record.id] = record
        logger.info(
            "Booking created: %s at %s on %s %s",
            record.confirmation_number, record.restaurant_id, record.date, record.time,
        )
        return record

    async def get_reservation(self, reservation_id: str) -> BookingRecord:
        return self._require(reservation_id)

    async def list_reservations(self) -> list[BookingRecord]:
        return sorted(self._bookings.values(), key=lambda r: r.created_at, reverse=True)

    async def update_reservation(
        self, reservation_id: str, request: ReservationRequest
    ) -> BookingRecord:
        """Apply modified date/time/party/request to an existing booking."""
        current = self._require(reservation_id)
        if current.status not in (BookingStatus.PENDING, BookingStatus.CONFIRMED):
            raise ServiceError(
                f"Reservation {reservation_id} can no longer be modified.", status_code=409
            )
        updates = {
            "date": request.date,
            "time": request.time,
            "party_size": request.party_size,
            "special_request": request.special_request or None,
        }
        if request.estimated_cost is not None:
            updates["estimated_cost"] = request.estimated_cost
        record = current.model_copy(update=updates)
        self._bookings[reservation_id] = record
        logger.info("Booking modified: %s to %s %s", reservation_id, record.date, record.time)
        return record

    async def cancel_reservation(self, reservation_id: str) -> Optional[BookingRecord]:
        current = self._require(reservation_id)
        record = current.model_copy(update={"status": BookingStatus.CANCELLED})
        self._bookings[reservation_id] = record
        logger.info("Booking cancelled: %s", reservation_id)
        return record

    def seed(self, record: BookingRecord) -> BookingRecord:
        """Insert an existing booking as-is (e.g. a completed past visit)."""
        self._bookings[record.id] = record
        return record

    # ------------------------------------------------------------------ #
    # Notifications
    # ------------------------------------------------------------------ #

    async def list_notifications(self) -> list[Notification]:
        return [n.model_copy() for n in self._notifications.values()]

    async def mark_notification_read(self, notification_id: str) -> None:
        if notification_id not in self._notifications:
            raise ServiceError(f"Notification {notification_id} not found.", status_code=404)
        self._notifications[notification_id].is_read = True

    async def mark_all_notifications_read(self) -> None:
        for notification in self._notifications.values():
            notification.is_read = True

    def reset(self) -> None:
        """Clear all bookings. Used by test fixtures for isolation."""
        self._bookings.clear()
        self._sequence = 0
