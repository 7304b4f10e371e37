"""Restaurant candidate and recommendation query models."""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class RestaurantCandidate(BaseModel):
    """Immutable snapshot of a recommended restaurant."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    category: str
    price_range: str = Field(alias="priceRange")
    rating: float
    review_count: int = Field(default=0, alias="reviewCount")
    location: str
    rationale: str = Field(default="", alias="reason")


class SlotAnswers(BaseModel):
    """Clarifying answers collected by the fixed-question dialog."""

    model_config = ConfigDict(frozen=True)

    occasion: Optional[str] = None
    party_size: Optional[str] = None
    budget: Optional[str] = None


class FreeTextQuery(BaseModel):
    """A single unstructured recommendation request."""

    model_config = ConfigDict(frozen=True)

    text: str


MatchInput = Union[SlotAnswers, FreeTextQuery]


class MatchOutcome(str, Enum):
    RESULTS = "results"
    EMPTY = "empty"
    SERVICE_ERROR = "service_error"
    TRANSPORT_ERROR = "transport_error"


class MatchResult(BaseModel):
    """Classified result of one matcher call."""

    model_config = ConfigDict(frozen=True)

    outcome: MatchOutcome
    candidates: tuple[RestaurantCandidate, ...] = ()
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome in (MatchOutcome.RESULTS, MatchOutcome.EMPTY)
