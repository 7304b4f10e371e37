from wellmeet.booking.bridge import QuickReservationBridge
from wellmeet.booking.draft import BookingDraftBuilder, QuickDate, estimate_cost
from wellmeet.booking.lifecycle import BookingAction, BookingLifecycle, ReviewRequest

__all__ = [
    "QuickReservationBridge",
    "BookingDraftBuilder",
    "QuickDate",
    "estimate_cost",
    "BookingLifecycle",
    "BookingAction",
    "ReviewRequest",
]
