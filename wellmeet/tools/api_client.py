"""
HTTP client for the WellMeet REST services.

Wraps the recommendation, reservation, and notification endpoints the
dialog and booking flows consume. Every call adds the ``memberId`` query
parameter and validates the body into the package's pydantic models.

Failures are split the way the UI reports them:
    - TransportError: the service could not be reached
    - ServiceError: non-2xx status or a body that does not parse
"""

import logging
from typing import Any, Optional

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from wellmeet.config import settings
from wellmeet.errors import ServiceError, TransportError
from wellmeet.schemas.booking_schema import BookingRecord, ReservationRequest
from wellmeet.schemas.notification_schema import Notification
from wellmeet.schemas.restaurant_schema import RestaurantCandidate

logger = logging.getLogger(__name__)

_CANDIDATE_LIST = TypeAdapter(list[RestaurantCandidate])
_BOOKING_LIST = TypeAdapter(list[BookingRecord])
_NOTIFICATION_LIST = TypeAdapter(list[Notification])


class WellmeetClient:
    """Async client for the consumed WellMeet endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        member_id: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or settings.api.base_url).rstrip("/")
        self.member_id = member_id or settings.api.member_id
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout or settings.api.timeout_sec,
            headers={"Content-Type": "application/json"},
            params={"memberId": self.member_id},
            transport=transport,
        )

    async def __aenter__(self) -> "WellmeetClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------ #
    # Request plumbing
    # ------------------------------------------------------------------ #

    async def _request(
        self, method: str, path: str, json: Optional[dict[str, Any]] = None
    ) -> Any:
        """Send a request and return the decoded JSON body (None when empty)."""
        try:
            response = await self._client.request(method, path, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            error_text = e.response.text[:200] if e.response.text else ""
            logger.warning("%s %s returned %s", method, path, status_code)
            raise ServiceError(
                f"WellMeet API returned error {status_code}: {error_text}",
                status_code=status_code,
            ) from e
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise TransportError(f"WellMeet API request failed: {e}") from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ServiceError(
                f"WellMeet API returned a non-JSON body for {method} {path}",
                status_code=response.status_code,
            ) from e

    @staticmethod
    def _parse(adapter_or_model: Any, data: Any, what: str) -> Any:
        try:
            if isinstance(adapter_or_model, TypeAdapter):
                return adapter_or_model.validate_python(data)
            return adapter_or_model.model_validate(data)
        except ValidationError as e:
            raise ServiceError(f"Malformed {what} in WellMeet API response") from e

    @staticmethod
    def _dump(model: BaseModel) -> dict[str, Any]:
        return model.model_dump(mode="json", by_alias=True, exclude_none=True)

    # ------------------------------------------------------------------ #
    # Recommendation
    # ------------------------------------------------------------------ #

    async def recommend(self, query: str) -> list[RestaurantCandidate]:
        """POST /recommend with a free-text query."""
        data = await self._request("POST", "/recommend", json={"query": query})
        return self._parse(_CANDIDATE_LIST, data, "recommendation list")

    # ------------------------------------------------------------------ #
    # Reservations
    # ------------------------------------------------------------------ #

    async def create_reservation(self, request: ReservationRequest) -> BookingRecord:
        data = await self._request("POST", "/reservation", json=self._dump(request))
        record = self._parse(BookingRecord, data, "reservation")
        logger.info("Reservation created: %s (%s)", record.id, record.confirmation_number)
        return record

    async def get_reservation(self, reservation_id: str) -> BookingRecord:
        data = await self._request("GET", f"/reservation/{reservation_id}")
        return self._parse(BookingRecord, data, "reservation")

    async def list_reservations(self) -> list[BookingRecord]:
        data = await self._request("GET", "/reservation")
        return self._parse(_BOOKING_LIST, data, "reservation list")

    async def update_reservation(
        self, reservation_id: str, request: ReservationRequest
    ) -> BookingRecord:
        data = await self._request(
            "PUT", f"/reservation/{reservation_id}", json=self._dump(request)
        )
        return self._parse(BookingRecord, data, "reservation")

    async def cancel_reservation(self, reservation_id: str) -> Optional[BookingRecord]:
        """DELETE /reservation/{id}. Returns the updated record when the body carries one."""
        data = await self._request("DELETE", f"/reservation/{reservation_id}")
        if data is None:
            return None
        return self._parse(BookingRecord, data, "reservation")

    # ------------------------------------------------------------------ #
    # Notifications
    # ------------------------------------------------------------------ #

    async def list_notifications(self) -> list[Notification]:
        data = await self._request("GET", "/notifications")
        return self._parse(_NOTIFICATION_LIST, data, "notification list")

    async def mark_notification_read(self, notification_id: str) -> None:
        await self._request("PUT", f"/notifications/{notification_id}/read")

    async def mark_all_notifications_read(self) -> None:
        await self._request("PUT", "/notifications/read-all")
