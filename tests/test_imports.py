"""Tests for import chains and module integrity.

Ensures all public modules can be imported without errors and
that re-exports from __init__.py files work correctly.
"""

import pytest


class TestSchemaImports:
    def test_import_restaurant_schema(self):
        from wellmeet.schemas.restaurant_schema import MatchOutcome, RestaurantCandidate
        assert MatchOutcome.EMPTY == "empty"
        assert RestaurantCandidate is not None

    def test_import_booking_schema(self):
        from wellmeet.schemas.booking_schema import BookingStatus, ReservationRequest
        assert BookingStatus.PENDING == "pending"
        assert ReservationRequest is not None

    def test_import_conversation_schema(self):
        from wellmeet.schemas.conversation_schema import ConversationSession, Speaker
        assert Speaker.ASSISTANT == "assistant"
        assert ConversationSession().turns == []
        assert "answers" not in ConversationSession.model_fields


class TestPackageExports:
    def test_conversation_package(self):
        from wellmeet.conversation import DialogStateMachine, SlotManager, classify_vibe
        assert DialogStateMachine().current_state.value == "initial"
        assert SlotManager().get_next_empty_slot().name == "occasion"
        assert callable(classify_vibe)

    def test_booking_package(self):
        from wellmeet.booking import (
            BookingAction,
            BookingDraftBuilder,
            BookingLifecycle,
            QuickReservationBridge,
            estimate_cost,
        )
        assert estimate_cost(2, 1) == 375000
        assert not QuickReservationBridge().pending
        assert BookingAction.CANCEL.value == "cancel"
        assert BookingDraftBuilder is not None
        assert BookingLifecycle is not None


class TestConfigImport:
    def test_import_config(self):
        from wellmeet.config import settings
        assert settings.dialog.mode in ("fixed", "free_text")
        assert settings.api.base_url.startswith("http")
        assert 1 <= settings.booking.quick_date_count <= 3


class TestConsoleDemo:
    def test_console_session_imports(self):
        from console_demo import ConsoleSession
        session = ConsoleSession(thinking_delay=0)
        assert session.dialog.state.value in ("initial", "free_text_query")
        assert not session.finished

    @pytest.mark.asyncio
    @pytest.mark.parametrize("scenario", ["booking", "free_text", "no_match"])
    async def test_scenarios_play_to_the_end(self, scenario, capsys):
        from console_demo import ConsoleSession
        mode, _ = ConsoleSession.SCENARIOS[scenario]
        session = ConsoleSession(mode=mode, thinking_delay=0)
        await session.run_scenario(scenario)
        assert session.finished
        assert "Dialog trace" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_booking_scenario_cancels(self, capsys):
        from console_demo import ConsoleSession
        from wellmeet.schemas.booking_schema import BookingStatus
        mode, _ = ConsoleSession.SCENARIOS["booking"]
        session = ConsoleSession(mode=mode, thinking_delay=0)
        await session.run_scenario("booking")
        assert session.lifecycle.status == BookingStatus.CANCELLED


class TestEntryPoint:
    @pytest.fixture
    def console_args(self, monkeypatch):
        import console_demo
        seen = []
        monkeypatch.setattr(console_demo, "main", lambda argv=None: seen.append(argv))
        return seen

    def test_flags_without_subcommand_reach_console(self, console_args):
        from main import main
        main(["--mode", "free_text"])
        assert console_args == [["--mode", "free_text"]]

    def test_console_subcommand(self, console_args):
        from main import main
        main(["console", "--mode", "fixed"])
        assert console_args == [["--mode", "fixed"]]

    def test_scenario_subcommand(self, console_args):
        from main import main
        main(["scenario", "booking"])
        assert console_args == [["--scenario", "booking"]]
