"""Reservation draft, booking record, and handoff payload models."""

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RestaurantRef(BaseModel):
    """The minimal restaurant identity a reservation needs."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""


class QuickReservationPayload(BaseModel):
    """Prefill captured by the chat or listing flow for the next draft."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    date: Optional[dt.date] = None
    time: Optional[str] = None
    party_size_bucket: Optional[str] = Field(default=None, alias="partySize")


class NotifyPrefs(BaseModel):
    sms: bool = True
    email: bool = True
    reminder: bool = True


class Consent(BaseModel):
    policy: bool = False
    privacy: bool = False


class ReservationDraft(BaseModel):
    """Mutable form state while the reservation page is open."""

    model_config = ConfigDict(validate_assignment=True)

    restaurant: RestaurantRef
    date: Optional[dt.date] = None
    time: Optional[str] = None
    adults: int = Field(default=1, ge=1)
    children: int = Field(default=0, ge=0)
    special_request: str = ""
    notify: NotifyPrefs = Field(default_factory=NotifyPrefs)
    consent: Consent = Field(default_factory=Consent)


class ReservationRequest(BaseModel):
    """Wire shape for creating or modifying a reservation."""

    model_config = ConfigDict(populate_by_name=True)

    restaurant_id: str = Field(alias="restaurantId")
    date: dt.date
    time: str
    party_size: int = Field(alias="partySize", ge=1)
    special_request: Optional[str] = Field(default=None, alias="specialRequest")
    estimated_cost: Optional[int] = Field(default=None, alias="estimatedCost", ge=0)


class BookingRecord(BaseModel):
    """A created booking. Only its status changes outside of modify."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    restaurant_id: str = Field(alias="restaurantId")
    restaurant_name: str = Field(default="", alias="restaurantName")
    date: dt.date
    time: str
    party_size: int = Field(alias="partySize", ge=1)
    estimated_cost: int = Field(alias="estimatedCost", ge=0)
    status: BookingStatus = BookingStatus.PENDING
    confirmation_number: Optional[str] = Field(default=None, alias="confirmationNumber")
    special_request: Optional[str] = Field(default=None, alias="specialRequest")
    created_at: dt.datetime = Field(alias="createdAt")
