"""
Per-user application context.

Replaces app-wide mutable state (current user, favorites, notifications,
the quick reservation handoff) with one explicit object that each flow
receives by reference. Every change goes through a method here.
"""

from dataclasses import dataclass, field
from typing import Optional

from wellmeet.booking.bridge import QuickReservationBridge
from wellmeet.logging_context import get_session_logger, new_session_id, set_session_id
from wellmeet.tools.notifications import NotificationFeed

logger = get_session_logger(__name__)


@dataclass
class UserProfile:
    """The signed-in member as the profile store returns it."""
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None


@dataclass
class AppContext:
    """Explicit state shared by the dialog, draft, and booking flows of one user."""
    notifications: NotificationFeed
    user: Optional[UserProfile] = None
    bridge: QuickReservationBridge = field(default_factory=QuickReservationBridge)
    favorites: set[str] = field(default_factory=set)
    session_id: str = field(default_factory=new_session_id)

    def activate(self) -> None:
        """Tag log records from the current async context with this session."""
        set_session_id(self.session_id)

    def sign_in(self, user: UserProfile) -> None:
        self.user = user
        logger.info("Signed in as member %s", user.id)

    def update_profile(self, **changes: str) -> UserProfile:
        if self.user is None:
            raise RuntimeError("No user is signed in")
        for key, value in changes.items():
            if not hasattr(self.user, key) or key == "id":
                raise ValueError(f"Unknown profile field: {key}")
            setattr(self.user, key, value)
        return self.user

    def toggle_favorite(self, restaurant_id: str) -> bool:
        """Flip a restaurant's favorite flag and return the new value."""
        if restaurant_id in self.favorites:
            self.favorites.discard(restaurant_id)
            return False
        self.favorites.add(restaurant_id)
        return True

    def is_favorite(self, restaurant_id: str) -> bool:
        return restaurant_id in self.favorites

    @property
    def unread_notifications(self) -> int:
        return self.notifications.unread_count
