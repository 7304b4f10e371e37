"""
Slot manager for the fixed-question recommendation dialog.

Slots are collected strictly in definition order, one per user reply.
Any non-empty reply is accepted: the dialog never re-asks a question,
so there is no validation of what the answer means. Normalization only
maps typed replies onto the quick-reply bucket labels when they clearly
name one, which is what the catalog lookup keys on.

Usage:
    manager = SlotManager()
    manager.fill_next("데이트")
    manager.fill_next("2명")
    manager.fill_next("12-20만원")
    answers = manager.to_answers()
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from wellmeet.prompts.dialog_messages import (
    BUDGET_OPTIONS,
    BUDGET_QUESTION,
    PARTY_SIZE_OPTIONS,
    PARTY_SIZE_QUESTION,
)
from wellmeet.schemas.restaurant_schema import SlotAnswers
from wellmeet.utils import normalize_label, parse_party_size, party_bucket_label

logger = logging.getLogger(__name__)


class SlotStatus(str, Enum):
    """Lifecycle status of a slot value."""

    EMPTY = "empty"
    COLLECTED = "collected"


def _normalize_party_size(value: str) -> str:
    count = parse_party_size(value)
    return party_bucket_label(count) if count else value


def _normalize_budget(value: str) -> str:
    key = normalize_label(value)
    for option in BUDGET_OPTIONS:
        if normalize_label(option) == key:
            return option
    return value


@dataclass(frozen=True)
class SlotDefinition:
    """Schema for a single slot to collect.

    ``question`` and ``options`` describe the assistant turn that asks
    for this slot; the opening slot is asked by the greeting instead.
    """

    name: str
    display_name: str
    question: str = ""
    options: tuple[str, ...] = ()
    normalizer: Optional[Callable[[str], str]] = None


@dataclass
class SlotValue:
    """Current state of a collected slot."""

    raw_value: Optional[str] = None
    normalized_value: Optional[str] = None
    status: SlotStatus = SlotStatus.EMPTY


class SlotManager:
    """Collects clarifying answers in a fixed order."""

    SLOT_DEFINITIONS: list[SlotDefinition] = [
        SlotDefinition(
            name="occasion",
            display_name="상황",
        ),
        SlotDefinition(
            name="party_size",
            display_name="인원",
            question=PARTY_SIZE_QUESTION,
            options=PARTY_SIZE_OPTIONS,
            normalizer=_normalize_party_size,
        ),
        SlotDefinition(
            name="budget",
            display_name="예산",
            question=BUDGET_QUESTION,
            options=BUDGET_OPTIONS,
            normalizer=_normalize_budget,
        ),
    ]

    def __init__(self) -> None:
        self.slots: dict[str, SlotValue] = {
            defn.name: SlotValue() for defn in self.SLOT_DEFINITIONS
        }

    def _get_definition(self, name: str) -> SlotDefinition:
        for defn in self.SLOT_DEFINITIONS:
            if defn.name == name:
                return defn
        raise ValueError(f"Unknown slot: {name}")

    def set_slot(self, name: str, raw_value: str) -> str:
        """Store a reply for ``name`` and return its normalized value.

        Raises:
            ValueError: If the slot is unknown or the reply is blank.
        """
        defn = self._get_definition(name)
        value = raw_value.strip()
        if not value:
            raise ValueError(f"Empty reply for slot '{name}'")

        slot = self.slots[name]
        slot.raw_value = raw_value
        slot.normalized_value = defn.normalizer(value) if defn.normalizer else value
        slot.status = SlotStatus.COLLECTED
        logger.debug("Slot '%s' set to '%s'", name, slot.normalized_value)
        return slot.normalized_value

    def fill_next(self, raw_value: str) -> SlotDefinition:
        """Store a reply into the next empty slot and return that slot's definition."""
        defn = self.get_next_empty_slot()
        if defn is None:
            raise ValueError("All slots are already collected")
        self.set_slot(defn.name, raw_value)
        return defn

    def get_next_empty_slot(self) -> Optional[SlotDefinition]:
        """Get the next slot that hasn't been answered."""
        for defn in self.SLOT_DEFINITIONS:
            if self.slots[defn.name].status == SlotStatus.EMPTY:
                return defn
        return None

    def all_filled(self) -> bool:
        return all(s.status == SlotStatus.COLLECTED for s in self.slots.values())

    def get_slot_value(self, name: str) -> Optional[str]:
        """Get the normalized value of a slot."""
        return self.slots[name].normalized_value

    def to_answers(self) -> SlotAnswers:
        """Snapshot the collected values as an immutable SlotAnswers."""
        return SlotAnswers(**self.to_dict())

    def to_dict(self) -> dict[str, Any]:
        """Export collected slot values as a flat dict."""
        return {
            d.name: self.slots[d.name].normalized_value
            for d in self.SLOT_DEFINITIONS
            if self.slots[d.name].normalized_value is not None
        }

    def reset(self) -> None:
        """Discard every collected answer."""
        for name in self.slots:
            self.slots[name] = SlotValue()
