"""
Recommendation dialog controller.

Owns one conversation: the append-only turn log, the dialog state
machine, and the slot answers. Two variants share this one controller
and are selected by ``DialogMode``:

    FIXED      - greeting, then party size and budget questions with
                 quick-reply chips; the third reply triggers exactly one
                 matcher call with all collected answers.
    FREE_TEXT  - each message goes verbatim to the matcher and the
                 classified outcome picks the reply.

After a user turn is appended the controller "thinks" for a fixed delay
before the assistant turn lands. Input is disabled for that interval:
``send_message`` returns None without appending anything, so turns can
never interleave.
"""

import asyncio
import datetime as dt
from enum import Enum
from typing import Optional

from wellmeet.booking.bridge import QuickReservationBridge
from wellmeet.config import settings
from wellmeet.conversation.slot_manager import SlotManager
from wellmeet.conversation.state_machine import (
    DialogState,
    DialogStateMachine,
    DialogTrigger,
)
from wellmeet.logging_context import get_session_logger
from wellmeet.prompts import dialog_messages as msg
from wellmeet.schemas.booking_schema import QuickReservationPayload
from wellmeet.schemas.conversation_schema import (
    ConversationSession,
    Speaker,
    Turn,
    TurnKind,
)
from wellmeet.schemas.restaurant_schema import (
    FreeTextQuery,
    MatchOutcome,
    MatchResult,
    RestaurantCandidate,
    SlotAnswers,
)
from wellmeet.tools.matcher import RecommendationMatcher

logger = get_session_logger(__name__)


class DialogMode(str, Enum):
    FIXED = "fixed"
    FREE_TEXT = "free_text"


_FAILURE_MESSAGES = {
    MatchOutcome.SERVICE_ERROR: msg.SERVICE_ERROR,
    MatchOutcome.TRANSPORT_ERROR: msg.TRANSPORT_ERROR,
}


class DialogController:
    """Drives one recommendation conversation."""

    def __init__(
        self,
        matcher: RecommendationMatcher,
        mode: Optional[DialogMode] = None,
        thinking_delay: Optional[float] = None,
        bridge: Optional[QuickReservationBridge] = None,
    ) -> None:
        self.mode = mode or DialogMode(settings.dialog.mode)
        self._matcher = matcher
        self._thinking_delay = (
            settings.dialog.thinking_delay_sec if thinking_delay is None else thinking_delay
        )
        self._bridge = bridge
        self._sm = DialogStateMachine(
            DialogState.INITIAL if self.mode == DialogMode.FIXED else DialogState.FREE_TEXT_QUERY
        )
        self._slots = SlotManager()
        self._session = ConversationSession()
        self._thinking = False
        self.last_result: Optional[MatchResult] = None
        self._greet()

    def _greet(self) -> None:
        greeting = msg.GREETING if self.mode == DialogMode.FIXED else msg.FREE_TEXT_GREETING
        self._session.append(Turn(speaker=Speaker.ASSISTANT, content=greeting))

    # ------------------------------------------------------------------ #
    # Read-only view
    # ------------------------------------------------------------------ #

    @property
    def state(self) -> DialogState:
        return self._sm.current_state

    @property
    def turns(self) -> tuple[Turn, ...]:
        return tuple(self._session.turns)

    @property
    def answers(self) -> SlotAnswers:
        return self._slots.to_answers()

    @property
    def is_thinking(self) -> bool:
        return self._thinking

    @property
    def input_enabled(self) -> bool:
        return not self._thinking

    @property
    def quick_replies(self) -> tuple[str, ...]:
        """Chips offered by the latest assistant turn, if it defines any."""
        last = self._session.last_assistant_turn()
        return last.options if last is not None else ()

    @property
    def candidates(self) -> tuple[RestaurantCandidate, ...]:
        """Candidates attached to the most recent candidate-list turn."""
        for turn in reversed(self._session.turns):
            if turn.kind == TurnKind.CANDIDATE_LIST:
                return turn.candidates
        return ()

    def state_trace(self) -> list[str]:
        return self._sm.get_state_trace()

    # ------------------------------------------------------------------ #
    # Input
    # ------------------------------------------------------------------ #

    async def send_message(self, text: str) -> Optional[Turn]:
        """
        Append a user turn and, after the thinking delay, the assistant reply.

        Returns:
            The assistant turn, or None when the text is blank or input
            is disabled because a reply is still pending.
        """
        content = text.strip()
        if not content:
            return None
        if self._thinking:
            logger.debug("Input disabled while thinking; message not accepted")
            return None

        self._session.append(Turn(speaker=Speaker.USER, content=content))
        self._thinking = True
        try:
            await asyncio.sleep(self._thinking_delay)
            reply = await self._respond(content)
        finally:
            self._thinking = False
        return self._session.append(reply)

    async def select_quick_reply(self, option: str) -> Optional[Turn]:
        """Equivalent to typing the chip's label."""
        if option not in self.quick_replies:
            raise ValueError(f"'{option}' is not offered by the current turn")
        return await self.send_message(option)

    def reset(self) -> None:
        """Discard turns and answers and start over from the greeting."""
        if self._thinking:
            raise RuntimeError("Cannot reset while a reply is pending")
        self._sm.reset()
        self._slots.reset()
        self._session = ConversationSession()
        self.last_result = None
        self._greet()
        logger.debug("Dialog reset")

    # ------------------------------------------------------------------ #
    # Replies
    # ------------------------------------------------------------------ #

    async def _respond(self, content: str) -> Turn:
        if self._sm.is_terminal():
            return Turn(speaker=Speaker.ASSISTANT, content=msg.ASK_AGAIN)
        if self.mode == DialogMode.FIXED:
            return await self._advance_fixed(content)
        return await self._answer_free_text(content)

    async def _advance_fixed(self, content: str) -> Turn:
        self._slots.fill_next(content)
        self._sm.transition(DialogTrigger.USER_REPLIED)

        next_slot = self._slots.get_next_empty_slot()
        if next_slot is not None:
            return Turn(
                speaker=Speaker.ASSISTANT,
                content=next_slot.question,
                kind=TurnKind.CHOICE_PROMPT,
                options=next_slot.options,
            )

        answers = self._slots.to_answers()
        result = await self._matcher.match(answers)
        self.last_result = result
        logger.info(
            "Fixed dialog complete: %s / %s -> %d candidates",
            answers.party_size, answers.budget, len(result.candidates),
        )
        if result.outcome == MatchOutcome.RESULTS:
            content = msg.build_recommendation_message(len(result.candidates), answers.occasion or "")
        elif result.outcome == MatchOutcome.EMPTY:
            content = msg.NO_STOCKED_MATCH
        else:
            content = _FAILURE_MESSAGES[result.outcome]
        return Turn(
            speaker=Speaker.ASSISTANT,
            content=content,
            kind=TurnKind.CANDIDATE_LIST,
            candidates=result.candidates,
        )

    async def _answer_free_text(self, content: str) -> Turn:
        result = await self._matcher.match(FreeTextQuery(text=content))
        self.last_result = result

        if result.outcome == MatchOutcome.RESULTS:
            self._sm.transition(DialogTrigger.MATCH_FOUND)
            return Turn(
                speaker=Speaker.ASSISTANT,
                content=msg.build_recommendation_message(len(result.candidates)),
                kind=TurnKind.CANDIDATE_LIST,
                candidates=result.candidates,
            )
        if result.outcome == MatchOutcome.EMPTY:
            self._sm.transition(DialogTrigger.MATCH_EMPTY)
            return Turn(speaker=Speaker.ASSISTANT, content=msg.NO_MATCH)

        self._sm.transition(DialogTrigger.MATCH_FAILED)
        return Turn(speaker=Speaker.ASSISTANT, content=_FAILURE_MESSAGES[result.outcome])

    # ------------------------------------------------------------------ #
    # Handoff
    # ------------------------------------------------------------------ #

    def request_reservation(
        self,
        candidate_id: str,
        date: Optional[dt.date] = None,
        time: Optional[str] = None,
    ) -> RestaurantCandidate:
        """
        Hand a recommended candidate over to the reservation flow.

        Offers a QuickReservationPayload carrying the collected party-size
        bucket (plus any date/time) to the bridge and returns the candidate
        the reservation page should open.

        Raises:
            ValueError: If the candidate was not recommended in this dialog.
        """
        for candidate in self.candidates:
            if candidate.id == candidate_id:
                break
        else:
            raise ValueError(f"Candidate {candidate_id} was not recommended in this dialog")

        if self._bridge is not None:
            self._bridge.offer(QuickReservationPayload(
                date=date,
                time=time,
                party_size_bucket=self._slots.get_slot_value("party_size"),
            ))
        logger.info("Reservation requested for candidate %s", candidate_id)
        return candidate
