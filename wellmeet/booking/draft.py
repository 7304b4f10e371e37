"""
Reservation draft builder.

Owns the reservation form's derived state for one restaurant: date,
time slot, party composition, special request, notification toggles,
and the two mandatory consent flags. Cost and submit eligibility are
derived from the current fields on every read, never stored.

A draft is checked against the QuickReservationBridge exactly once,
when it is built. Submitting is terminal: after a successful submit
(or while one is in flight) every mutation raises DraftLockedError.

Usage:
    draft = BookingDraftBuilder(RestaurantRef(id="1", name="라비올로"), bridge)
    draft.select_quick_date("내일")
    draft.select_time("19:00")
    draft.set_policy_consent(True)
    draft.set_privacy_consent(True)
    record = await draft.submit(service)
"""

import datetime as dt
from dataclasses import dataclass
from typing import Optional, Union

from wellmeet.booking.bridge import QuickReservationBridge
from wellmeet.config import settings
from wellmeet.errors import DraftLockedError
from wellmeet.logging_context import get_session_logger
from wellmeet.prompts.booking_messages import QUICK_DATE_LABELS, WEEKDAY_LABELS
from wellmeet.schemas.booking_schema import (
    BookingRecord,
    QuickReservationPayload,
    ReservationDraft,
    ReservationRequest,
    RestaurantRef,
)
from wellmeet.tools.protocols import ReservationService
from wellmeet.utils import parse_party_size

logger = get_session_logger(__name__)

ADULT_PRICE = 150_000
CHILD_PRICE = 75_000

MIN_ADULTS = 1
MIN_CHILDREN = 0

LUNCH_SLOTS: tuple[str, ...] = ("11:30", "12:00", "12:30", "13:00", "13:30")
DINNER_SLOTS: tuple[str, ...] = (
    "17:30", "18:00", "18:30", "19:00", "19:30", "20:00", "20:30", "21:00",
)

NOTIFY_CHANNELS = ("sms", "email", "reminder")


def estimate_cost(adults: int, children: int) -> int:
    """Estimated bill in won: 150,000 per adult, 75,000 per child."""
    return adults * ADULT_PRICE + children * CHILD_PRICE


@dataclass(frozen=True)
class QuickDate:
    """A relative date shortcut shown above the calendar picker."""
    label: str
    value: dt.date


class BookingDraftBuilder:
    """Assembles and validates one ReservationDraft."""

    def __init__(
        self,
        restaurant: RestaurantRef,
        bridge: Optional[QuickReservationBridge] = None,
        today: Optional[dt.date] = None,
    ) -> None:
        self._today = today or dt.date.today()
        self._draft = ReservationDraft(restaurant=restaurant)
        self._booking_id: Optional[str] = None
        self._booked_party_size: Optional[int] = None
        self._submitting = False
        self._submitted = False
        self.record: Optional[BookingRecord] = None

        if bridge is not None:
            payload = bridge.take()
            if payload is not None:
                self._apply_prefill(payload)

    @classmethod
    def from_record(
        cls, record: BookingRecord, today: Optional[dt.date] = None
    ) -> "BookingDraftBuilder":
        """Build a modification draft pre-populated from an existing booking."""
        builder = cls(
            RestaurantRef(id=record.restaurant_id, name=record.restaurant_name),
            today=today,
        )
        builder._booking_id = record.id
        builder._booked_party_size = record.party_size
        builder._draft.date = record.date
        builder._draft.time = record.time
        builder._draft.adults = record.party_size
        builder._draft.special_request = record.special_request or ""
        return builder

    def _apply_prefill(self, payload: QuickReservationPayload) -> None:
        if payload.date is not None:
            self._draft.date = payload.date
        if payload.time is not None:
            if payload.time in LUNCH_SLOTS or payload.time in DINNER_SLOTS:
                self._draft.time = payload.time
            else:
                logger.debug("Ignoring prefill time outside the slot grids: %s", payload.time)
        count = parse_party_size(payload.party_size_bucket)
        if count is not None:
            self._draft.adults = max(MIN_ADULTS, count)
        logger.info("Draft prefilled from quick reservation payload")

    def _ensure_editable(self) -> None:
        if self._submitted:
            raise DraftLockedError("Draft has already been submitted")
        if self._submitting:
            raise DraftLockedError("Draft submission is in progress")

    # ------------------------------------------------------------------ #
    # Read-only view
    # ------------------------------------------------------------------ #

    @property
    def restaurant(self) -> RestaurantRef:
        return self._draft.restaurant

    @property
    def booking_id(self) -> Optional[str]:
        """Id of the booking this draft modifies, or None for a new booking."""
        return self._booking_id

    @property
    def is_modification(self) -> bool:
        return self._booking_id is not None

    @property
    def date(self) -> Optional[dt.date]:
        return self._draft.date

    @property
    def time(self) -> Optional[str]:
        return self._draft.time

    @property
    def adults(self) -> int:
        return self._draft.adults

    @property
    def children(self) -> int:
        return self._draft.children

    @property
    def party_size(self) -> int:
        return self._draft.adults + self._draft.children

    @property
    def estimated_cost(self) -> int:
        return estimate_cost(self._draft.adults, self._draft.children)

    @property
    def request_cost(self) -> Optional[int]:
        """Cost to send with the request.

        None while a modification keeps the booked party size: the record's
        adult/child split is unknown, so its price stands.
        """
        if self._booked_party_size is not None and self.party_size == self._booked_party_size:
            return None
        return self.estimated_cost

    @property
    def special_request(self) -> str:
        return self._draft.special_request

    @property
    def notify(self) -> dict[str, bool]:
        return self._draft.notify.model_dump()

    @property
    def policy_consent(self) -> bool:
        return self._draft.consent.policy

    @property
    def privacy_consent(self) -> bool:
        return self._draft.consent.privacy

    @property
    def can_submit(self) -> bool:
        """Date, time, and both mandatory consents are set."""
        return bool(
            self._draft.date
            and self._draft.time
            and self._draft.consent.policy
            and self._draft.consent.privacy
        )

    @property
    def submit_enabled(self) -> bool:
        """Whether the submit control should be clickable right now."""
        return self.can_submit and not self._submitting and not self._submitted

    @property
    def submitted(self) -> bool:
        return self._submitted

    @property
    def submitting(self) -> bool:
        return self._submitting

    # ------------------------------------------------------------------ #
    # Date
    # ------------------------------------------------------------------ #

    def quick_dates(self) -> list[QuickDate]:
        """Today, tomorrow, and the day after, relative to the draft's clock."""
        return [
            QuickDate(label=label, value=self._today + dt.timedelta(days=offset))
            for offset, label in enumerate(
                QUICK_DATE_LABELS[: settings.booking.quick_date_count]
            )
        ]

    def select_quick_date(self, label: str) -> dt.date:
        for quick in self.quick_dates():
            if quick.label == label:
                return self.select_date(quick.value)
        raise ValueError(f"Unknown quick date: {label}")

    def select_date(self, value: Union[dt.date, str]) -> dt.date:
        """Set the date from the calendar picker (a date or an ISO string)."""
        self._ensure_editable()
        if isinstance(value, str):
            value = dt.date.fromisoformat(value)
        if value < self._today:
            raise ValueError(f"Cannot reserve a past date: {value.isoformat()}")
        self._draft.date = value
        return value

    def format_selected_date(self) -> str:
        """Render the selected date the way the form header shows it."""
        value = self._draft.date
        if value is None:
            return ""
        weekday = WEEKDAY_LABELS[value.weekday()]
        base = f"{value.month}/{value.day}"
        offset = (value - self._today).days
        if 0 <= offset < len(QUICK_DATE_LABELS):
            return f"{QUICK_DATE_LABELS[offset]} ({base}, {weekday})"
        return f"{base} ({weekday})"

    # ------------------------------------------------------------------ #
    # Time
    # ------------------------------------------------------------------ #

    def select_time(self, slot: str) -> str:
        """Select a lunch or dinner slot; only one slot is ever selected."""
        self._ensure_editable()
        if slot not in LUNCH_SLOTS and slot not in DINNER_SLOTS:
            raise ValueError(f"Unknown time slot: {slot}")
        self._draft.time = slot
        return slot

    @property
    def selected_lunch_slot(self) -> Optional[str]:
        return self._draft.time if self._draft.time in LUNCH_SLOTS else None

    @property
    def selected_dinner_slot(self) -> Optional[str]:
        return self._draft.time if self._draft.time in DINNER_SLOTS else None

    # ------------------------------------------------------------------ #
    # Party composition
    # ------------------------------------------------------------------ #

    def increment_adults(self) -> int:
        self._ensure_editable()
        self._draft.adults += 1
        return self._draft.adults

    def decrement_adults(self) -> int:
        self._ensure_editable()
        if self._draft.adults > MIN_ADULTS:
            self._draft.adults -= 1
        return self._draft.adults

    def increment_children(self) -> int:
        self._ensure_editable()
        self._draft.children += 1
        return self._draft.children

    def decrement_children(self) -> int:
        self._ensure_editable()
        if self._draft.children > MIN_CHILDREN:
            self._draft.children -= 1
        return self._draft.children

    # ------------------------------------------------------------------ #
    # Request, notifications, consent
    # ------------------------------------------------------------------ #

    def set_special_request(self, text: str) -> None:
        self._ensure_editable()
        self._draft.special_request = text.strip()

    def set_notification(self, channel: str, enabled: bool) -> None:
        self._ensure_editable()
        if channel not in NOTIFY_CHANNELS:
            raise ValueError(f"Unknown notification channel: {channel}")
        setattr(self._draft.notify, channel, enabled)

    def toggle_notification(self, channel: str) -> bool:
        current = self.notify.get(channel)
        if current is None:
            raise ValueError(f"Unknown notification channel: {channel}")
        self.set_notification(channel, not current)
        return not current

    def set_policy_consent(self, agreed: bool) -> None:
        self._ensure_editable()
        self._draft.consent.policy = agreed

    def set_privacy_consent(self, agreed: bool) -> None:
        self._ensure_editable()
        self._draft.consent.privacy = agreed

    # ------------------------------------------------------------------ #
    # Submission
    # ------------------------------------------------------------------ #

    def to_request(self) -> ReservationRequest:
        """Build the create/modify wire request. Requires date and time."""
        if self._draft.date is None or self._draft.time is None:
            raise ValueError("Date and time must be selected before building a request")
        return ReservationRequest(
            restaurant_id=self._draft.restaurant.id,
            date=self._draft.date,
            time=self._draft.time,
            party_size=self.party_size,
            special_request=self._draft.special_request or None,
            estimated_cost=self.request_cost,
        )

    async def submit(self, service: ReservationService) -> Optional[BookingRecord]:
        """
        Send the draft to the reservation service.

        Returns:
            The created (or modified) BookingRecord, or None when the
            draft is not yet eligible for submission.

        Raises:
            DraftLockedError: If the draft is submitting or already submitted.
            ServiceError, TransportError: Propagated from the service; the
                draft stays editable so the user can retry.
        """
        self._ensure_editable()
        if not self.can_submit:
            logger.debug("Submit blocked: draft incomplete")
            return None

        request = self.to_request()
        self._submitting = True
        try:
            if self._booking_id is not None:
                record = await service.update_reservation(self._booking_id, request)
            else:
                record = await service.create_reservation(request)
        finally:
            self._submitting = False

        self._submitted = True
        self.record = record
        logger.info(
            "Draft submitted for %s: booking %s (%s)",
            self._draft.restaurant.id, record.id, record.confirmation_number,
        )
        return record
