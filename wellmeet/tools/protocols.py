"""Boundary shapes of the services the dialog and booking flows consume.

``WellmeetClient`` talks to the real endpoints; ``InMemoryReservationService``
stands in for them offline. Both satisfy every protocol here.
"""

from typing import Optional, Protocol

from wellmeet.schemas.booking_schema import BookingRecord, ReservationRequest
from wellmeet.schemas.notification_schema import Notification
from wellmeet.schemas.restaurant_schema import RestaurantCandidate


class RecommendService(Protocol):
    async def recommend(self, query: str) -> list[RestaurantCandidate]: ...


class ReservationService(Protocol):
    async def create_reservation(self, request: ReservationRequest) -> BookingRecord: ...

    async def update_reservation(
        self, reservation_id: str, request: ReservationRequest
    ) -> BookingRecord: ...

    async def cancel_reservation(self, reservation_id: str) -> Optional[BookingRecord]: ...


class NotificationService(Protocol):
    async def list_notifications(self) -> list[Notification]: ...

    async def mark_notification_read(self, notification_id: str) -> None: ...

    async def mark_all_notifications_read(self) -> None: ...
