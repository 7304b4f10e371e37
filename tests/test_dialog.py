"""Tests for the recommendation dialog controller."""

import asyncio
import datetime as dt

import pytest

from wellmeet.conversation.dialog import DialogController, DialogMode
from wellmeet.conversation.state_machine import DialogState
from wellmeet.prompts import dialog_messages as msg
from wellmeet.schemas.conversation_schema import Speaker, TurnKind
from wellmeet.tools.matcher import RecommendationMatcher

from tests.conftest import (
    SERVICE_FAILURE,
    TRANSPORT_FAILURE,
    StubRecommendService,
    make_candidate,
)


async def _answer_all(dialog, *replies):
    turn = None
    for reply in replies:
        turn = await dialog.send_message(reply)
    return turn


class TestGreeting:
    def test_fixed_dialog_greets(self, dialog):
        assert len(dialog.turns) == 1
        assert dialog.turns[0].speaker == Speaker.ASSISTANT
        assert dialog.turns[0].content == msg.GREETING
        assert dialog.state == DialogState.INITIAL

    def test_free_text_dialog_greets(self, free_text_dialog):
        assert free_text_dialog.turns[0].content == msg.FREE_TEXT_GREETING
        assert free_text_dialog.state == DialogState.FREE_TEXT_QUERY

    def test_greeting_offers_no_chips(self, dialog):
        assert dialog.quick_replies == ()


class TestFixedDialog:
    @pytest.mark.asyncio
    async def test_party_size_question_follows_first_reply(self, dialog):
        turn = await dialog.send_message("데이트")
        assert turn.content == msg.PARTY_SIZE_QUESTION
        assert turn.kind == TurnKind.CHOICE_PROMPT
        assert dialog.quick_replies == msg.PARTY_SIZE_OPTIONS
        assert dialog.state == DialogState.ASKING_PARTY_SIZE

    @pytest.mark.asyncio
    async def test_budget_question_follows_second_reply(self, dialog):
        turn = await _answer_all(dialog, "데이트", "2명")
        assert turn.content == msg.BUDGET_QUESTION
        assert dialog.quick_replies == msg.BUDGET_OPTIONS
        assert dialog.state == DialogState.ASKING_BUDGET

    @pytest.mark.asyncio
    async def test_third_reply_completes_with_one_match_call(self, dialog, matcher):
        turn = await _answer_all(dialog, "데이트", "2명", "12-20만원")
        assert dialog.state == DialogState.COMPLETE
        assert matcher.calls == 1
        assert turn.kind == TurnKind.CANDIDATE_LIST
        assert [c.id for c in turn.candidates] == ["1", "2", "3"]
        assert turn.content == "'데이트'에 어울리는 3곳을 추천드려요! 🎉"

    @pytest.mark.asyncio
    async def test_no_matcher_call_before_last_answer(self, dialog, matcher):
        await _answer_all(dialog, "데이트", "2명")
        assert matcher.calls == 0

    @pytest.mark.asyncio
    async def test_unstocked_pair_completes_with_empty_list(self, dialog):
        turn = await _answer_all(dialog, "가족 모임", "3명", "8-12만원")
        assert dialog.state == DialogState.COMPLETE
        assert turn.candidates == ()
        assert turn.content == msg.NO_STOCKED_MATCH

    @pytest.mark.asyncio
    async def test_unrecognized_reply_still_advances(self, dialog):
        await dialog.send_message("데이트")
        await dialog.send_message("잘 모르겠어요")
        assert dialog.state == DialogState.ASKING_BUDGET
        assert dialog.answers.party_size == "잘 모르겠어요"

    @pytest.mark.asyncio
    async def test_reply_after_complete_asks_again(self, dialog, matcher):
        await _answer_all(dialog, "데이트", "2명", "12-20만원")
        turn = await dialog.send_message("하나 더")
        assert turn.content == msg.ASK_AGAIN
        assert dialog.state == DialogState.COMPLETE
        assert matcher.calls == 1
        assert [c.id for c in dialog.candidates] == ["1", "2", "3"]

    @pytest.mark.asyncio
    async def test_turns_alternate_after_greeting(self, dialog):
        await _answer_all(dialog, "데이트", "2명", "12-20만원")
        speakers = [t.speaker for t in dialog.turns]
        assert speakers == [Speaker.ASSISTANT] + [Speaker.USER, Speaker.ASSISTANT] * 3


class TestInput:
    @pytest.mark.asyncio
    async def test_blank_message_ignored(self, dialog):
        assert await dialog.send_message("   ") is None
        assert len(dialog.turns) == 1
        assert dialog.state == DialogState.INITIAL

    @pytest.mark.asyncio
    async def test_input_disabled_while_thinking(self, matcher):
        dialog = DialogController(matcher, mode=DialogMode.FIXED, thinking_delay=0.05)
        pending = asyncio.create_task(dialog.send_message("데이트"))
        await asyncio.sleep(0)

        assert dialog.is_thinking
        assert not dialog.input_enabled
        assert await dialog.send_message("2명") is None

        await pending
        assert dialog.input_enabled
        assert len(dialog.turns) == 3
        assert dialog.state == DialogState.ASKING_PARTY_SIZE

    @pytest.mark.asyncio
    async def test_quick_reply_sends_label(self, dialog):
        await dialog.send_message("데이트")
        turn = await dialog.select_quick_reply("5명 이상")
        assert dialog.answers.party_size == "5명 이상"
        assert turn.content == msg.BUDGET_QUESTION

    @pytest.mark.asyncio
    async def test_quick_reply_must_be_offered(self, dialog):
        await dialog.send_message("데이트")
        with pytest.raises(ValueError):
            await dialog.select_quick_reply("12-20만원")

    @pytest.mark.asyncio
    async def test_reset_starts_over(self, dialog):
        await _answer_all(dialog, "데이트", "2명")
        dialog.reset()
        assert len(dialog.turns) == 1
        assert dialog.state == DialogState.INITIAL
        assert dialog.answers.occasion is None


class TestFreeTextDialog:
    @pytest.mark.asyncio
    async def test_results_complete_dialog(self, free_text_dialog):
        turn = await free_text_dialog.send_message("기념일 데이트할 곳")
        assert free_text_dialog.state == DialogState.COMPLETE
        assert turn.kind == TurnKind.CANDIDATE_LIST
        assert [c.id for c in turn.candidates] == ["1", "2", "3"]

    @pytest.mark.asyncio
    async def test_empty_result_goes_to_no_match(self, free_text_dialog):
        turn = await free_text_dialog.send_message("아무거나")
        assert free_text_dialog.state == DialogState.NO_MATCH
        assert turn.content == msg.NO_MATCH

    @pytest.mark.asyncio
    async def test_retry_after_no_match(self, free_text_dialog):
        await free_text_dialog.send_message("아무거나")
        await free_text_dialog.send_message("조용한 곳")
        assert free_text_dialog.state == DialogState.COMPLETE

    @pytest.mark.asyncio
    async def test_service_failure_message(self):
        matcher = RecommendationMatcher(StubRecommendService(error=SERVICE_FAILURE))
        dialog = DialogController(matcher, mode=DialogMode.FREE_TEXT, thinking_delay=0)
        turn = await dialog.send_message("데이트")
        assert dialog.state == DialogState.SERVICE_ERROR
        assert turn.content == msg.SERVICE_ERROR

    @pytest.mark.asyncio
    async def test_transport_failure_message_is_distinct(self):
        matcher = RecommendationMatcher(StubRecommendService(error=TRANSPORT_FAILURE))
        dialog = DialogController(matcher, mode=DialogMode.FREE_TEXT, thinking_delay=0)
        turn = await dialog.send_message("데이트")
        assert dialog.state == DialogState.SERVICE_ERROR
        assert turn.content == msg.TRANSPORT_ERROR
        assert msg.TRANSPORT_ERROR != msg.SERVICE_ERROR

    @pytest.mark.asyncio
    async def test_service_order_preserved(self):
        stub = StubRecommendService([make_candidate("b", "B"), make_candidate("a", "A")])
        dialog = DialogController(
            RecommendationMatcher(stub), mode=DialogMode.FREE_TEXT, thinking_delay=0,
        )
        turn = await dialog.send_message("아무 곳이나")
        assert [c.id for c in turn.candidates] == ["b", "a"]
        assert stub.queries == ["아무 곳이나"]


class TestReservationHandoff:
    @pytest.mark.asyncio
    async def test_request_offers_party_bucket(self, dialog, bridge):
        await _answer_all(dialog, "데이트", "2명", "12-20만원")
        candidate = dialog.request_reservation("2", date=dt.date(2025, 7, 20), time="19:00")
        assert candidate.id == "2"

        payload = bridge.take()
        assert payload.party_size_bucket == "2명"
        assert payload.date == dt.date(2025, 7, 20)
        assert payload.time == "19:00"

    @pytest.mark.asyncio
    async def test_request_rejects_unrecommended_candidate(self, dialog, bridge):
        await _answer_all(dialog, "데이트", "2명", "12-20만원")
        with pytest.raises(ValueError):
            dialog.request_reservation("8")
        assert not bridge.pending
