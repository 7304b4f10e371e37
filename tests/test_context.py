"""Tests for the per-user app context and the notification feed."""

import logging

import pytest

from wellmeet.context import AppContext, UserProfile
from wellmeet.errors import ServiceError
from wellmeet.logging_context import SessionIdFilter, get_session_id, get_session_logger
from wellmeet.schemas.notification_schema import Notification
from wellmeet.tools.booking import InMemoryReservationService
from wellmeet.tools.notifications import NotificationFeed


@pytest.fixture
def feed():
    service = InMemoryReservationService(notifications=[
        Notification(id="n1", title="예약 확정"),
        Notification(id="n2", title="리뷰 요청"),
        Notification(id="n3", title="이벤트", is_read=True),
    ])
    return NotificationFeed(service)


@pytest.fixture
def context(feed):
    return AppContext(notifications=feed)


class TestNotificationFeed:
    @pytest.mark.asyncio
    async def test_unread_count_after_refresh(self, feed):
        assert feed.unread_count == 0
        await feed.refresh()
        assert feed.unread_count == 2

    @pytest.mark.asyncio
    async def test_mark_read(self, feed):
        await feed.refresh()
        await feed.mark_read("n1")
        assert feed.unread_count == 1
        await feed.refresh()
        assert feed.unread_count == 1

    @pytest.mark.asyncio
    async def test_mark_unknown_fails_without_local_change(self, feed):
        await feed.refresh()
        with pytest.raises(ServiceError):
            await feed.mark_read("missing")
        assert feed.unread_count == 2

    @pytest.mark.asyncio
    async def test_mark_all_read(self, feed):
        await feed.refresh()
        await feed.mark_all_read()
        assert feed.unread_count == 0


class TestAppContext:
    def test_new_context_has_own_bridge(self, feed):
        assert AppContext(notifications=feed).bridge is not AppContext(notifications=feed).bridge

    def test_sign_in_and_update_profile(self, context):
        context.sign_in(UserProfile(id="1", name="김웰밋"))
        user = context.update_profile(phone="010-1234-5678")
        assert user.phone == "010-1234-5678"

    def test_update_profile_requires_user(self, context):
        with pytest.raises(RuntimeError):
            context.update_profile(name="누구")

    def test_profile_id_is_not_editable(self, context):
        context.sign_in(UserProfile(id="1", name="김웰밋"))
        with pytest.raises(ValueError):
            context.update_profile(id="2")

    def test_toggle_favorite(self, context):
        assert context.toggle_favorite("1") is True
        assert context.is_favorite("1")
        assert context.toggle_favorite("1") is False
        assert not context.is_favorite("1")

    @pytest.mark.asyncio
    async def test_unread_notifications(self, context):
        await context.notifications.refresh()
        assert context.unread_notifications == 2

    def test_activate_sets_session_id(self, context):
        context.activate()
        assert get_session_id() == context.session_id
        assert context.session_id.startswith("SES-")


class TestSessionLogger:
    def test_filter_attached_once(self):
        logger = get_session_logger("wellmeet.test.session")
        get_session_logger("wellmeet.test.session")
        assert sum(isinstance(f, SessionIdFilter) for f in logger.filters) == 1

    def test_filter_adds_session_id(self, context):
        context.activate()
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        SessionIdFilter().filter(record)
        assert record.session_id == context.session_id
