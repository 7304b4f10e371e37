"""Cached notification feed used for unread counters near entry points."""

import logging

from wellmeet.schemas.notification_schema import Notification
from wellmeet.tools.protocols import NotificationService

logger = logging.getLogger(__name__)


class NotificationFeed:
    """Local copy of the notification list with server-confirmed read marks."""

    def __init__(self, service: NotificationService) -> None:
        self._service = service
        self._items: list[Notification] = []

    @property
    def items(self) -> list[Notification]:
        return list(self._items)

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self._items if not n.is_read)

    async def refresh(self) -> list[Notification]:
        self._items = await self._service.list_notifications()
        logger.debug("Notification feed refreshed: %d items, %d unread",
                     len(self._items), self.unread_count)
        return self.items

    async def mark_read(self, notification_id: str) -> None:
        await self._service.mark_notification_read(notification_id)
        self._items = [
            n.model_copy(update={"is_read": True}) if n.id == notification_id else n
            for n in self._items
        ]

    async def mark_all_read(self) -> None:
        await self._service.mark_all_notifications_read()
        self._items = [n.model_copy(update={"is_read": True}) for n in self._items]
