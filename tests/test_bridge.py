"""Tests for the one-shot quick reservation handoff."""

import datetime as dt

from wellmeet.schemas.booking_schema import QuickReservationPayload


class TestQuickReservationBridge:
    def test_empty_bridge(self, bridge):
        assert not bridge.pending
        assert bridge.take() is None

    def test_take_clears(self, bridge):
        bridge.offer(QuickReservationPayload(party_size_bucket="2명"))
        assert bridge.pending
        assert bridge.take().party_size_bucket == "2명"
        assert not bridge.pending
        assert bridge.take() is None

    def test_offer_replaces_unconsumed_payload(self, bridge):
        bridge.offer(QuickReservationPayload(party_size_bucket="2명"))
        bridge.offer(QuickReservationPayload(party_size_bucket="4명", time="18:00"))
        payload = bridge.take()
        assert payload.party_size_bucket == "4명"
        assert payload.time == "18:00"

    def test_payload_accepts_wire_alias(self):
        payload = QuickReservationPayload.model_validate(
            {"date": "2025-07-20", "time": "19:00", "partySize": "5명 이상"}
        )
        assert payload.date == dt.date(2025, 7, 20)
        assert payload.party_size_bucket == "5명 이상"
