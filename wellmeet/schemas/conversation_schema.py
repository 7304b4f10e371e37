"""Conversation turn and session models."""

from datetime import datetime, timezone
from typing import Optional
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from wellmeet.schemas.restaurant_schema import RestaurantCandidate


class Speaker(str, Enum):
    ASSISTANT = "assistant"
    USER = "user"


class TurnKind(str, Enum):
    PLAIN = "plain"
    CHOICE_PROMPT = "choice_prompt"
    CANDIDATE_LIST = "candidate_list"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Turn(BaseModel):
    """A single turn in the conversation. Never mutated after insertion."""

    model_config = ConfigDict(frozen=True)

    speaker: Speaker
    content: str
    kind: TurnKind = TurnKind.PLAIN
    options: tuple[str, ...] = ()
    candidates: tuple[RestaurantCandidate, ...] = ()
    timestamp: datetime = Field(default_factory=_now)


class ConversationSession(BaseModel):
    """Append-only turn log of one dialog."""

    turns: list[Turn] = Field(default_factory=list)

    def append(self, turn: Turn) -> Turn:
        self.turns.append(turn)
        return turn

    def last_assistant_turn(self) -> Optional[Turn]:
        for turn in reversed(self.turns):
            if turn.speaker == Speaker.ASSISTANT:
                return turn
        return None
