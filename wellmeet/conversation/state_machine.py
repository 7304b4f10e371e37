"""
Finite state machine for the recommendation dialog.

Two entry points share one transition table: the fixed-question path
(INITIAL -> ASKING_PARTY_SIZE -> ASKING_BUDGET -> COMPLETE) and the
single-shot free-text path (FREE_TEXT_QUERY -> COMPLETE | NO_MATCH |
SERVICE_ERROR). COMPLETE is terminal and idempotent: further replies
keep the dialog where it is.

Usage:
    sm = DialogStateMachine()
    sm.transition(DialogTrigger.USER_REPLIED)
    assert sm.current_state == DialogState.ASKING_PARTY_SIZE
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class DialogState(str, Enum):
    """All possible states of a recommendation dialog."""
    INITIAL = "initial"
    ASKING_PARTY_SIZE = "asking_party_size"
    ASKING_BUDGET = "asking_budget"
    COMPLETE = "complete"
    FREE_TEXT_QUERY = "free_text_query"
    NO_MATCH = "no_match"
    SERVICE_ERROR = "service_error"


class DialogTrigger(str, Enum):
    """Events that cause state transitions."""
    USER_REPLIED = "user_replied"
    MATCH_FOUND = "match_found"
    MATCH_EMPTY = "match_empty"
    MATCH_FAILED = "match_failed"


@dataclass(frozen=True)
class Transition:
    """A single valid state transition."""
    from_state: DialogState
    to_state: DialogState
    trigger: DialogTrigger


@dataclass
class StateEntry:
    """Recorded history entry for a state visit."""
    state: DialogState
    entered_at: datetime
    trigger: Optional[DialogTrigger] = None


class InvalidTransitionError(Exception):
    """Raised when a transition is not valid from the current state."""


# States from which a free-text query may be (re)submitted.
_FREE_TEXT_READY = (
    DialogState.FREE_TEXT_QUERY,
    DialogState.NO_MATCH,
    DialogState.SERVICE_ERROR,
)


class DialogStateMachine:
    """Deterministic state machine controlling dialog flow."""

    TRANSITIONS: list[Transition] = [
        # --- Fixed questions: one step per reply, whatever the reply says ---
        Transition(DialogState.INITIAL, DialogState.ASKING_PARTY_SIZE,
                   DialogTrigger.USER_REPLIED),
        Transition(DialogState.ASKING_PARTY_SIZE, DialogState.ASKING_BUDGET,
                   DialogTrigger.USER_REPLIED),
        Transition(DialogState.ASKING_BUDGET, DialogState.COMPLETE,
                   DialogTrigger.USER_REPLIED),

        # --- Terminal ---
        Transition(DialogState.COMPLETE, DialogState.COMPLETE,
                   DialogTrigger.USER_REPLIED),

        # --- Free text: classified matcher outcome ---
        *[
            Transition(ready, to_state, trigger)
            for ready in _FREE_TEXT_READY
            for to_state, trigger in (
                (DialogState.COMPLETE, DialogTrigger.MATCH_FOUND),
                (DialogState.NO_MATCH, DialogTrigger.MATCH_EMPTY),
                (DialogState.SERVICE_ERROR, DialogTrigger.MATCH_FAILED),
            )
        ],
    ]

    def __init__(self, initial_state: DialogState = DialogState.INITIAL) -> None:
        if initial_state not in (DialogState.INITIAL, DialogState.FREE_TEXT_QUERY):
            raise ValueError(f"Dialog cannot start in '{initial_state.value}'")
        self._initial_state = initial_state
        self._current_state = initial_state
        self._history: list[StateEntry] = [
            StateEntry(state=initial_state, entered_at=datetime.now(timezone.utc))
        ]

    @property
    def current_state(self) -> DialogState:
        return self._current_state

    @property
    def initial_state(self) -> DialogState:
        return self._initial_state

    def transition(self, trigger: DialogTrigger) -> DialogState:
        """
        Execute a state transition.

        Args:
            trigger: The event triggering the transition.

        Returns:
            The new dialog state.

        Raises:
            InvalidTransitionError: If no valid transition exists.
        """
        for t in self.TRANSITIONS:
            if t.from_state == self._current_state and t.trigger == trigger:
                old_state = self._current_state
                self._current_state = t.to_state
                self._history.append(StateEntry(
                    state=self._current_state,
                    entered_at=datetime.now(timezone.utc),
                    trigger=trigger,
                ))
                logger.debug(
                    "Dialog transition: %s -> %s (trigger: %s)",
                    old_state.value, self._current_state.value, trigger.value,
                )
                return self._current_state

        valid = [t.value for t in self.get_valid_triggers()]
        raise InvalidTransitionError(
            f"No valid transition from '{self._current_state.value}' "
            f"with trigger '{trigger.value}'. Valid triggers: {valid}"
        )

    def get_valid_triggers(self) -> list[DialogTrigger]:
        """Return all triggers valid from the current state."""
        return [t.trigger for t in self.TRANSITIONS if t.from_state == self._current_state]

    def get_history(self) -> list[StateEntry]:
        """Return the full state transition history."""
        return list(self._history)

    def get_state_trace(self) -> list[str]:
        """Return ordered list of state names visited."""
        return [entry.state.value for entry in self._history]

    def is_terminal(self) -> bool:
        return self._current_state == DialogState.COMPLETE

    def accepts_free_text(self) -> bool:
        """Check if a free-text query can be submitted now."""
        return self._current_state in _FREE_TEXT_READY

    def reset(self) -> None:
        """Return to the initial state and start a fresh history."""
        self._current_state = self._initial_state
        self._history = [
            StateEntry(state=self._initial_state, entered_at=datetime.now(timezone.utc))
        ]
