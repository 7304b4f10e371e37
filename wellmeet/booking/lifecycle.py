"""
Booking lifecycle: status model and allowed-action matrix.

    pending    -> modify (stays pending), cancel -> cancelled
    confirmed  -> modify (stays confirmed), cancel -> cancelled
    completed  -> rebook (new draft, record untouched), review
    cancelled  -> nothing

Every transition that talks to the reservation service is
server-confirmed with optimistic rollback: the local snapshot flips
first, the call is awaited, and on failure the previous snapshot is
restored before the error propagates. While a call is in flight all
further actions on the booking are refused.
"""

import datetime as dt
import inspect
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Union

from wellmeet.booking.bridge import QuickReservationBridge
from wellmeet.booking.draft import BookingDraftBuilder
from wellmeet.errors import ActionNotAllowedError
from wellmeet.logging_context import get_session_logger
from wellmeet.schemas.booking_schema import BookingRecord, BookingStatus, RestaurantRef
from wellmeet.tools.protocols import ReservationService

logger = get_session_logger(__name__)


class BookingAction(str, Enum):
    MODIFY = "modify"
    CANCEL = "cancel"
    REBOOK = "rebook"
    REVIEW = "review"


ALLOWED_ACTIONS: dict[BookingStatus, tuple[BookingAction, ...]] = {
    BookingStatus.PENDING: (BookingAction.MODIFY, BookingAction.CANCEL),
    BookingStatus.CONFIRMED: (BookingAction.MODIFY, BookingAction.CANCEL),
    BookingStatus.COMPLETED: (BookingAction.REBOOK, BookingAction.REVIEW),
    BookingStatus.CANCELLED: (),
}

# Status changes the restaurant side may push onto an existing booking.
SERVER_TRANSITIONS: dict[BookingStatus, tuple[BookingStatus, ...]] = {
    BookingStatus.PENDING: (BookingStatus.CONFIRMED, BookingStatus.CANCELLED),
    BookingStatus.CONFIRMED: (BookingStatus.COMPLETED, BookingStatus.CANCELLED),
    BookingStatus.COMPLETED: (),
    BookingStatus.CANCELLED: (),
}

ConfirmCallback = Callable[[BookingRecord], Union[bool, Awaitable[bool]]]


@dataclass(frozen=True)
class ReviewRequest:
    """Target of a review written for a completed visit."""
    booking_id: str
    restaurant_id: str


class BookingLifecycle:
    """Governs the actions available on one existing booking."""

    def __init__(self, record: BookingRecord, service: ReservationService) -> None:
        self._record = record
        self._service = service
        self._busy = False

    @property
    def record(self) -> BookingRecord:
        return self._record

    @property
    def status(self) -> BookingStatus:
        return self._record.status

    @property
    def busy(self) -> bool:
        """True while a service call for this booking is in flight."""
        return self._busy

    def allowed_actions(self) -> list[BookingAction]:
        if self._busy:
            return []
        return list(ALLOWED_ACTIONS[self._record.status])

    def can(self, action: BookingAction) -> bool:
        return action in self.allowed_actions()

    def is_terminal(self) -> bool:
        return self._record.status in (BookingStatus.COMPLETED, BookingStatus.CANCELLED)

    def _require(self, action: BookingAction) -> None:
        if self._busy:
            raise ActionNotAllowedError(
                f"Booking {self._record.id} has a request in flight"
            )
        if action not in ALLOWED_ACTIONS[self._record.status]:
            raise ActionNotAllowedError(
                f"Cannot {action.value} a {self._record.status.value} booking"
            )

    async def _commit(
        self,
        optimistic: BookingRecord,
        call: Callable[[], Awaitable[Optional[BookingRecord]]],
    ) -> BookingRecord:
        """Show ``optimistic`` locally, await ``call``, roll back on failure."""
        previous = self._record
        self._record = optimistic
        self._busy = True
        try:
            confirmed = await call()
        except BaseException:
            self._record = previous
            logger.warning("Rolled back booking %s after failed update", previous.id)
            raise
        finally:
            self._busy = False
        self._record = confirmed if confirmed is not None else optimistic
        return self._record

    # ------------------------------------------------------------------ #
    # Actions
    # ------------------------------------------------------------------ #

    async def cancel(self, confirm: ConfirmCallback) -> bool:
        """
        Cancel the booking after an explicit yes/no confirmation.

        Args:
            confirm: Asked with the current record; may be sync or async.

        Returns:
            True if the booking was cancelled, False if the user declined.

        Raises:
            ActionNotAllowedError: If cancel is not allowed right now.
        """
        self._require(BookingAction.CANCEL)
        answer = confirm(self._record)
        if inspect.isawaitable(answer):
            answer = await answer
        if not answer:
            logger.debug("Cancel of booking %s declined", self._record.id)
            return False

        self._require(BookingAction.CANCEL)
        optimistic = self._record.model_copy(update={"status": BookingStatus.CANCELLED})
        await self._commit(
            optimistic, lambda: self._service.cancel_reservation(self._record.id)
        )
        logger.info("Booking %s cancelled", self._record.id)
        return True

    def modify(self, today: Optional[dt.date] = None) -> BookingDraftBuilder:
        """Open a draft pre-populated from this booking."""
        self._require(BookingAction.MODIFY)
        return BookingDraftBuilder.from_record(self._record, today=today)

    async def submit_modification(self, draft: BookingDraftBuilder) -> Optional[BookingRecord]:
        """
        Submit a modification draft, updating this booking in place.

        Returns:
            The updated record, or None when the draft is not yet eligible.
        """
        if draft.booking_id != self._record.id:
            raise ValueError("Draft does not modify this booking")
        self._require(BookingAction.MODIFY)
        if not draft.can_submit:
            return None

        optimistic = self._record.model_copy(update={
            "date": draft.date,
            "time": draft.time,
            "party_size": draft.party_size,
            "estimated_cost": (
                self._record.estimated_cost if draft.request_cost is None else draft.request_cost
            ),
            "special_request": draft.special_request or None,
        })
        record = await self._commit(optimistic, lambda: draft.submit(self._service))
        logger.info("Booking %s modified to %s %s", record.id, record.date, record.time)
        return record

    def rebook(
        self,
        bridge: Optional[QuickReservationBridge] = None,
        today: Optional[dt.date] = None,
    ) -> BookingDraftBuilder:
        """Start an independent new draft at the same restaurant."""
        self._require(BookingAction.REBOOK)
        restaurant = RestaurantRef(
            id=self._record.restaurant_id, name=self._record.restaurant_name
        )
        return BookingDraftBuilder(restaurant, bridge=bridge, today=today)

    def review(self) -> ReviewRequest:
        self._require(BookingAction.REVIEW)
        return ReviewRequest(
            booking_id=self._record.id, restaurant_id=self._record.restaurant_id
        )

    def sync(self, record: BookingRecord) -> BookingRecord:
        """Adopt a freshly fetched snapshot of this booking.

        Raises:
            ValueError: If ``record`` is a different booking.
            ActionNotAllowedError: If its status is not reachable from the current one.
        """
        if record.id != self._record.id:
            raise ValueError("Snapshot belongs to a different booking")
        current = self._record.status
        if record.status != current and record.status not in SERVER_TRANSITIONS[current]:
            raise ActionNotAllowedError(
                f"Booking {record.id} cannot move from {current.value} to {record.status.value}"
            )
        self._record = record
        return record
