"""
One-shot handoff channel for quick reservation prefill.

An upstream flow (the recommendation dialog or a listing page) offers a
payload; the next reservation draft takes it. ``take`` reads and clears
in one step, so a payload can be applied to at most one draft.
"""

from typing import Optional

from wellmeet.logging_context import get_session_logger
from wellmeet.schemas.booking_schema import QuickReservationPayload

logger = get_session_logger(__name__)


class QuickReservationBridge:
    """Single-slot, single-consumer prefill channel."""

    def __init__(self) -> None:
        self._payload: Optional[QuickReservationPayload] = None

    @property
    def pending(self) -> bool:
        return self._payload is not None

    def offer(self, payload: QuickReservationPayload) -> None:
        """Store a payload for the next draft, replacing any unconsumed one."""
        if self._payload is not None:
            logger.info("Replacing unconsumed quick reservation payload")
        self._payload = payload
        logger.debug("Quick reservation payload offered: %s", payload)

    def take(self) -> Optional[QuickReservationPayload]:
        """Return the pending payload and clear it."""
        payload, self._payload = self._payload, None
        if payload is not None:
            logger.debug("Quick reservation payload consumed")
        return payload
