from wellmeet.conversation.intent import Vibe, classify_vibe
from wellmeet.conversation.slot_manager import SlotManager, SlotStatus
from wellmeet.conversation.state_machine import (
    DialogState,
    DialogStateMachine,
    DialogTrigger,
)

__all__ = [
    "DialogStateMachine",
    "DialogState",
    "DialogTrigger",
    "SlotManager",
    "SlotStatus",
    "Vibe",
    "classify_vibe",
]
