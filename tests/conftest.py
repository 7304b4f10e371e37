"""Shared test fixtures and helpers."""

import datetime as dt
from datetime import datetime, timezone
from typing import Optional

import pytest

from wellmeet.booking.bridge import QuickReservationBridge
from wellmeet.booking.draft import BookingDraftBuilder
from wellmeet.conversation.dialog import DialogController, DialogMode
from wellmeet.conversation.slot_manager import SlotManager
from wellmeet.conversation.state_machine import DialogState, DialogStateMachine
from wellmeet.errors import ServiceError, TransportError
from wellmeet.schemas.booking_schema import BookingRecord, BookingStatus, RestaurantRef
from wellmeet.schemas.restaurant_schema import RestaurantCandidate
from wellmeet.tools.booking import InMemoryReservationService
from wellmeet.tools.matcher import RecommendationMatcher

TODAY = dt.date(2025, 7, 18)


@pytest.fixture
def state_machine():
    return DialogStateMachine()


@pytest.fixture
def free_text_state_machine():
    return DialogStateMachine(DialogState.FREE_TEXT_QUERY)


@pytest.fixture
def slot_manager():
    return SlotManager()


@pytest.fixture
def service():
    return InMemoryReservationService()


@pytest.fixture
def bridge():
    return QuickReservationBridge()


@pytest.fixture
def matcher(service):
    return RecommendationMatcher(service)


@pytest.fixture
def dialog(matcher, bridge):
    return DialogController(matcher, mode=DialogMode.FIXED, thinking_delay=0, bridge=bridge)


@pytest.fixture
def free_text_dialog(matcher, bridge):
    return DialogController(matcher, mode=DialogMode.FREE_TEXT, thinking_delay=0, bridge=bridge)


@pytest.fixture
def restaurant():
    return RestaurantRef(id="1", name="라비올로")


@pytest.fixture
def draft(restaurant):
    return BookingDraftBuilder(restaurant, today=TODAY)


def fill_ready(draft: BookingDraftBuilder) -> BookingDraftBuilder:
    """Set every field submit eligibility depends on."""
    draft.select_quick_date("내일")
    draft.select_time("19:00")
    draft.set_policy_consent(True)
    draft.set_privacy_consent(True)
    return draft


def make_record(
    status: BookingStatus = BookingStatus.CONFIRMED,
    booking_id: str = "b1",
    party_size: int = 2,
    special_request: Optional[str] = "창가 자리로 부탁드려요",
) -> BookingRecord:
    """Helper to create a BookingRecord with sensible defaults."""
    return BookingRecord(
        id=booking_id,
        restaurant_id="1",
        restaurant_name="라비올로",
        date=dt.date(2025, 7, 20),
        time="19:00",
        party_size=party_size,
        estimated_cost=party_size * 150000,
        status=status,
        confirmation_number="WM250720001",
        special_request=special_request,
        created_at=datetime(2025, 7, 18, 14, 30, tzinfo=timezone.utc),
    )


def make_candidate(candidate_id: str = "c1", name: str = "테스트 식당") -> RestaurantCandidate:
    return RestaurantCandidate(
        id=candidate_id,
        name=name,
        category="한식",
        price_range="8-12만원",
        rating=4.2,
        review_count=10,
        location="성수동",
        rationale="테스트용",
    )


class StubRecommendService:
    """Recommend service returning canned candidates or raising a canned error."""

    def __init__(self, candidates=None, error: Optional[Exception] = None) -> None:
        self.candidates = list(candidates or [])
        self.error = error
        self.queries: list[str] = []

    async def recommend(self, query: str) -> list[RestaurantCandidate]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.candidates)


class FailingReservationService(InMemoryReservationService):
    """In-memory backend whose writes fail with a configurable error."""

    def __init__(self, error: Exception) -> None:
        super().__init__()
        self.error = error

    async def create_reservation(self, request):
        raise self.error

    async def update_reservation(self, reservation_id, request):
        raise self.error

    async def cancel_reservation(self, reservation_id):
        raise self.error


SERVICE_FAILURE = ServiceError("WellMeet API returned error 500: boom", status_code=500)
TRANSPORT_FAILURE = TransportError("WellMeet API request failed: connection refused")
