"""
Offline console demo: chat for a recommendation, then reserve it.

Runs the real dialog controller, matcher, quick reservation bridge,
draft builder, and booking lifecycle against the in-memory reservation
backend. No network calls.

Usage:
    python console_demo.py
    python console_demo.py --scenario booking
    python console_demo.py --scenario free_text
    python console_demo.py --scenario no_match
"""

import argparse
import asyncio
from typing import Optional

from wellmeet.booking.draft import BookingDraftBuilder
from wellmeet.booking.lifecycle import BookingAction, BookingLifecycle
from wellmeet.config import settings
from wellmeet.context import AppContext, UserProfile
from wellmeet.conversation.dialog import DialogController, DialogMode
from wellmeet.conversation.state_machine import DialogState
from wellmeet.errors import ServiceError, TransportError
from wellmeet.prompts.booking_messages import CANCEL_CONFIRMATION, status_label
from wellmeet.schemas.booking_schema import RestaurantRef
from wellmeet.schemas.notification_schema import Notification
from wellmeet.tools.booking import InMemoryReservationService
from wellmeet.tools.matcher import RecommendationMatcher
from wellmeet.tools.notifications import NotificationFeed
from wellmeet.utils import format_won

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

DEMO_NOTIFICATIONS = [
    Notification(id="n1", title="예약 확정", message="라비올로 예약이 확정되었어요.", type="booking"),
    Notification(id="n2", title="리뷰 요청", message="더 키친 방문은 어떠셨나요?", type="review"),
    Notification(id="n3", title="이벤트", message="신규 오마카세 10% 할인", type="promo", is_read=True),
]

YES = ("y", "yes", "네", "예", "응")


class ConsoleSession:
    """Plays one chat-to-booking journey in the terminal."""

    SCENARIOS: dict[str, tuple[DialogMode, list[str]]] = {
        "booking": (DialogMode.FIXED, [
            "여자친구랑 기념일 데이트",
            "2명",
            "12-20만원",
            "1",
            "내일",
            "19:00",
            "2 0",
            "창가 자리로 부탁드려요",
            "y",
            "y",
            "y",
        ]),
        "free_text": (DialogMode.FREE_TEXT, [
            "조용하게 대화하기 좋은 곳",
            "1",
            "오늘",
            "12:30",
            "1 0",
            "",
            "y",
            "n",
        ]),
        "no_match": (DialogMode.FIXED, [
            "친구들이랑 회식",
            "3명",
            "8-12만원",
        ]),
    }

    def __init__(self, mode: Optional[DialogMode] = None, thinking_delay: Optional[float] = None) -> None:
        self.service = InMemoryReservationService(notifications=DEMO_NOTIFICATIONS)
        self.context = AppContext(notifications=NotificationFeed(self.service))
        self.context.sign_in(UserProfile(id=settings.api.member_id, name="김웰밋"))
        self.dialog = DialogController(
            RecommendationMatcher(self.service),
            mode=mode,
            thinking_delay=thinking_delay,
            bridge=self.context.bridge,
        )
        self.draft: Optional[BookingDraftBuilder] = None
        self.lifecycle: Optional[BookingLifecycle] = None
        self._phase = "chat"
        self._pending_cancel: Optional[str] = None

    def assistant_say(self, text: str) -> None:
        print(f"{GREEN}{BOLD}[WellMeet]{RESET} {GREEN}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    @property
    def finished(self) -> bool:
        return self._phase == "done"

    # ------------------------------------------------------------------ #
    # Runners
    # ------------------------------------------------------------------ #

    async def _start(self, title: str) -> None:
        self.context.activate()
        await self.context.notifications.refresh()
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  {settings.app_name.upper()} - {title}{RESET}")
        print(f"{BOLD}  읽지 않은 알림 {self.context.unread_notifications}개{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        print()
        self.assistant_say(self.dialog.turns[0].content)

    def _finish(self) -> None:
        print(f"\n{BOLD}{'=' * 60}{RESET}")
        print(f"{DIM}  Dialog trace: {' -> '.join(self.dialog.state_trace())}{RESET}")
        if self.lifecycle is not None:
            record = self.lifecycle.record
            print(f"{DIM}  Booking {record.confirmation_number}: {status_label(record.status)}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    async def run_scenario(self, scenario: str) -> None:
        """Auto-play a pre-scripted scenario for demo purposes."""
        _, steps = self.SCENARIOS[scenario]
        await self._start(f"Scenario: {scenario}")
        for step in steps:
            if self.finished:
                break
            print(f"\n{BLUE}[User] {RESET}{step}")
            await self.process_input(step)
        self._finish()

    async def run(self) -> None:
        await self._start("Console Demo (type 'quit' to exit)")
        while not self.finished:
            user_input = input(f"\n{BLUE}[User] {RESET}").strip()
            if user_input.lower() in ("quit", "exit", "q"):
                print(f"\n{DIM}Session ended.{RESET}")
                break
            await self.process_input(user_input)
        self._finish()

    # ------------------------------------------------------------------ #
    # Phases
    # ------------------------------------------------------------------ #

    async def process_input(self, text: str) -> None:
        handler = getattr(self, f"_handle_{self._phase}")
        try:
            await handler(text)
        except ValueError as e:
            self.assistant_say(f"{RED}{e}{RESET}")

    async def _handle_chat(self, text: str) -> None:
        reply = await self.dialog.send_message(text)
        if reply is None:
            return
        self.assistant_say(reply.content)
        if reply.options:
            self.system_log("Quick replies: " + " | ".join(reply.options))
        for index, candidate in enumerate(reply.candidates, start=1):
            print(
                f"  {YELLOW}{index}. {candidate.name}{RESET} "
                f"({candidate.category}, {candidate.price_range}, ★{candidate.rating}) "
                f"{DIM}{candidate.rationale}{RESET}"
            )
        self.system_log(f"State: {self.dialog.state.value}")
        if reply.candidates:
            self.assistant_say("예약할 곳의 번호를 입력해주세요.")
            self._phase = "pick"
        elif self.dialog.state == DialogState.COMPLETE:
            self._phase = "done"

    async def _handle_pick(self, text: str) -> None:
        candidates = self.dialog.candidates
        index = int(text) - 1 if text.isdigit() else -1
        if not 0 <= index < len(candidates):
            raise ValueError("목록에 있는 번호를 입력해주세요.")
        candidate = self.dialog.request_reservation(candidates[index].id)
        self.draft = BookingDraftBuilder(
            RestaurantRef(id=candidate.id, name=candidate.name), bridge=self.context.bridge
        )
        self.system_log(f"Draft opened for {candidate.name}, adults={self.draft.adults}")
        labels = ", ".join(q.label for q in self.draft.quick_dates())
        self.assistant_say(f"언제 방문하시나요? ({labels} 또는 YYYY-MM-DD)")
        self._phase = "date"

    async def _handle_date(self, text: str) -> None:
        quick_labels = [q.label for q in self.draft.quick_dates()]
        if text in quick_labels:
            self.draft.select_quick_date(text)
        else:
            self.draft.select_date(text)
        self.system_log(f"Date: {self.draft.format_selected_date()}")
        self.assistant_say("몇 시로 예약할까요? (점심 11:30-13:30, 저녁 17:30-21:00)")
        self._phase = "time"

    async def _handle_time(self, text: str) -> None:
        self.draft.select_time(text)
        self.assistant_say("성인과 어린이 인원을 입력해주세요. (예: 2 1)")
        self._phase = "party"

    async def _handle_party(self, text: str) -> None:
        parts = text.split()
        if len(parts) != 2 or not all(p.isdigit() for p in parts):
            raise ValueError("'성인 어린이' 형식으로 입력해주세요.")
        adults, children = (int(p) for p in parts)
        while self.draft.adults < adults:
            self.draft.increment_adults()
        while self.draft.adults > max(adults, 1):
            self.draft.decrement_adults()
        while self.draft.children < children:
            self.draft.increment_children()
        while self.draft.children > children:
            self.draft.decrement_children()
        self.system_log(
            f"Party {self.draft.party_size}, estimated {format_won(self.draft.estimated_cost)}"
        )
        self.assistant_say("요청사항이 있으신가요? (없으면 엔터)")
        self._phase = "request"

    async def _handle_request(self, text: str) -> None:
        self.draft.set_special_request(text)
        self.assistant_say("예약 정책과 개인정보 처리에 모두 동의하시나요? (y/n)")
        self._phase = "consent"

    async def _handle_consent(self, text: str) -> None:
        agreed = text.lower() in YES
        self.draft.set_policy_consent(agreed)
        self.draft.set_privacy_consent(agreed)
        if not self.draft.submit_enabled:
            self.assistant_say("필수 항목에 동의해야 예약할 수 있어요. (y/n)")
            return
        try:
            record = await self.draft.submit(self.service)
        except (ServiceError, TransportError) as e:
            self.assistant_say(f"{RED}예약 요청에 실패했어요: {e}{RESET}")
            return
        self.lifecycle = BookingLifecycle(record, self.service)
        self.assistant_say(
            f"예약 요청이 완료됐어요! 확인번호 {record.confirmation_number} "
            f"({status_label(record.status)})"
        )
        actions = ", ".join(a.value for a in self.lifecycle.allowed_actions())
        self.system_log(f"Allowed actions: {actions}")
        self.assistant_say("예약을 취소하시겠어요? (y/n)")
        self._phase = "booked"

    async def _handle_booked(self, text: str) -> None:
        if text.lower() not in YES or not self.lifecycle.can(BookingAction.CANCEL):
            self._phase = "done"
            return
        self.assistant_say(f"{CANCEL_CONFIRMATION} (y/n)")
        self._phase = "cancel_confirm"

    async def _handle_cancel_confirm(self, text: str) -> None:
        cancelled = await self.lifecycle.cancel(lambda record: text.lower() in YES)
        if cancelled:
            self.assistant_say("예약이 취소되었어요.")
        else:
            self.assistant_say("예약을 유지할게요.")
        self._phase = "done"


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Offline console demo")
    parser.add_argument(
        "--scenario",
        choices=sorted(ConsoleSession.SCENARIOS),
        default=None,
        help="Auto-play a pre-scripted scenario instead of interactive mode",
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in DialogMode],
        default=None,
        help="Dialog variant for interactive mode (defaults to DIALOG_MODE)",
    )
    args = parser.parse_args(argv)

    if args.scenario:
        mode, _ = ConsoleSession.SCENARIOS[args.scenario]
        session = ConsoleSession(mode=mode, thinking_delay=0.3)
        asyncio.run(session.run_scenario(args.scenario))
    else:
        session = ConsoleSession(mode=DialogMode(args.mode) if args.mode else None)
        asyncio.run(session.run())


if __name__ == "__main__":
    main()
