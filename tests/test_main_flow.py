import pytest

from order_bot.config import NluSettings
from order_bot.core.flow_controller import TurnResponse
from order_bot.core.main_flow import MainFlowDialog
from order_bot.core.order_form import OrderFormDialog
from order_bot.models.dialog import FrameKind, TurnStatus
from order_bot.models.order import OrderRecord
from order_bot.nlu.order_recognizer import OrderRecognizer
from order_bot.utils.messages import (
    DATE_PROMPT,
    ITEM_PROMPT,
    NLU_UNAVAILABLE,
    RESTART_PROMPT,
    WELCOME_PROMPT,
)

from conftest import prediction


def test_main_flow_requires_a_recognizer():
    with pytest.raises(ValueError, match="recognizer"):
        MainFlowDialog(None, OrderFormDialog())


def test_main_flow_requires_an_order_form():
    with pytest.raises(ValueError, match="order_form"):
        MainFlowDialog(OrderRecognizer(), None)


def test_capability_flag_is_fixed_at_construction(fake_nlu):
    configured = OrderRecognizer(settings=NluSettings(), client=fake_nlu)
    assert MainFlowDialog(configured, OrderFormDialog()).nlu_enabled is True
    assert MainFlowDialog(configured, OrderFormDialog(), nlu_enabled=False).nlu_enabled is False
    assert MainFlowDialog(OrderRecognizer(settings=NluSettings()), OrderFormDialog()).nlu_enabled is False


def test_first_greeting_is_the_welcome_prompt(nlu_controller):
    response = nlu_controller.start_session("m1")

    assert response.messages == [WELCOME_PROMPT]
    assert response.status == TurnStatus.WAITING


def test_first_message_without_greeting_only_triggers_the_welcome(nlu_controller, fake_nlu):
    """A session that starts with a user message gets greeted; the message is not sent to the NLU."""
    response = nlu_controller.handle_turn("m2", "hi")

    assert response.messages == [WELCOME_PROMPT]
    assert fake_nlu.queries == []


def test_start_session_mid_conversation_repeats_the_pending_question(nlu_controller, fake_nlu):
    nlu_controller.start_session("m3")
    fake_nlu.queue(prediction(deliver="rice", item="rice"))
    nlu_controller.handle_turn("m3", "Deliver rice")

    assert nlu_controller.start_session("m3").messages == [DATE_PROMPT]
    assert nlu_controller.state_manager.get_or_create("m3").order_in_progress().item == "rice"


def test_unrecognized_intent_restarts_with_different_greeting(nlu_controller, fake_nlu):
    nlu_controller.start_session("m4")
    fake_nlu.queue(prediction(top_intent="None"))

    response = nlu_controller.handle_turn("m4", "what's the weather like?")

    assert response.messages == [
        "Sorry, I didn't get that. Please try asking in a different way (intent was None)",
        RESTART_PROMPT,
    ]
    assert nlu_controller.state_manager.get_or_create("m4").active_kinds() == [FrameKind.MAIN_FLOW]


def test_unsupported_item_warns_then_asks_for_the_item(nlu_controller, fake_nlu):
    nlu_controller.start_session("m5")
    fake_nlu.queue(prediction(deliver="a bicycle"))

    response = nlu_controller.handle_turn("m5", "Deliver a bicycle")

    assert response.messages == ["Sorry but the following items are not deliverable: a bicycle", ITEM_PROMPT]


def test_nlu_failure_falls_back_to_manual_slot_filling(nlu_controller, fake_nlu, nlu_error):
    nlu_controller.start_session("m6")
    fake_nlu.queue(nlu_error)

    response = nlu_controller.handle_turn("m6", "Deliver rice tomorrow")

    assert response.messages == [NLU_UNAVAILABLE, ITEM_PROMPT]
    # The bot keeps going: the next turn still works end to end.
    assert nlu_controller.handle_turn("m6", "rice").messages == [DATE_PROMPT]


def test_restart_loop_keeps_using_the_restart_greeting(nlu_controller, fake_nlu):
    nlu_controller.start_session("m7")

    for _ in range(3):
        fake_nlu.queue(prediction(deliver="rice", item="rice", timex="2020-03-21"))
        nlu_controller.handle_turn("m7", "Deliver rice tomorrow")
        response = nlu_controller.handle_turn("m7", "yes")
        assert response.messages == ["I have ordered you rice tomorrow.", RESTART_PROMPT]

    state = nlu_controller.state_manager.get_or_create("m7")
    assert state.completed_orders == 3
    assert state.active_kinds() == [FrameKind.MAIN_FLOW]


def test_history_records_both_sides(nlu_controller, fake_nlu):
    nlu_controller.start_session("m8")
    fake_nlu.queue(prediction(top_intent="None"))
    nlu_controller.handle_turn("m8", "hello there")

    history = nlu_controller.state_manager.get_or_create("m8").conversation_history
    assert [m.role for m in history] == ["bot", "user", "bot", "bot"]
    assert history[1].content == "hello there"


def test_turn_response_joins_messages():
    response = TurnResponse(session_id="x", messages=["a", "b"])
    assert response.assistant_message == "a\n\nb"


def test_interleaved_sessions_keep_their_own_orders(nlu_controller, fake_nlu):
    """Two conversations on one controller never see each other's record or counters."""
    nlu_controller.start_session("a")
    nlu_controller.start_session("b")

    fake_nlu.queue(prediction(deliver="10 kg rice", item="rice", timex="2020-03-22"))
    assert nlu_controller.handle_turn("a", "Deliver 10 kg rice on March 22, 2020").messages == [
        "Please confirm, I have you ordering: rice on: March 22, 2020. Is this correct?"
    ]

    fake_nlu.queue(prediction(deliver="sugar", item="sugar"))
    assert nlu_controller.handle_turn("b", "Deliver sugar").messages == [DATE_PROMPT]

    assert nlu_controller.handle_turn("b", "March 30, 2020").messages == [
        "Please confirm, I have you ordering: sugar on: March 30, 2020. Is this correct?"
    ]
    assert nlu_controller.handle_turn("a", "yes").messages == ["I have ordered you rice this Sunday.", RESTART_PROMPT]

    a = nlu_controller.state_manager.get_or_create("a")
    b = nlu_controller.state_manager.get_or_create("b")
    assert a.completed_orders == 1
    assert b.completed_orders == 0
    assert a.order_in_progress() is None
    assert b.order_in_progress() == OrderRecord(item="sugar", delivery_date="2020-03-30")

    assert nlu_controller.handle_turn("b", "yes").messages == [
        "I have ordered you sugar on March 30, 2020.",
        RESTART_PROMPT,
    ]
    assert b.completed_orders == 1
    assert a.completed_orders == 1
