import pytest

from order_bot.models.dialog import PromptKind
from order_bot.models.order import OrderRecord
from order_bot.utils.messages import build_confirm_prompt, build_order_placed_message
from order_bot.utils.prompt_recognizers import recognize, recognize_confirm, recognize_text

from conftest import TODAY


@pytest.mark.parametrize("text", ["yes", "Yes please!", "y", "yeah sure", "OK", "correct."])
def test_confirm_yes(text):
    result = recognize_confirm(text)
    assert result.succeeded and result.value is True


@pytest.mark.parametrize("text", ["no", "No thanks", "nope", "n", "wrong"])
def test_confirm_no(text):
    result = recognize_confirm(text)
    assert result.succeeded and result.value is False


@pytest.mark.parametrize("text", ["", "maybe", "rice", "123"])
def test_confirm_unrecognized(text):
    assert not recognize_confirm(text).succeeded


def test_text_prompt_keeps_reply_verbatim():
    result = recognize_text("  bicycle ")
    assert result.succeeded and result.value == "bicycle"


def test_text_prompt_rejects_blank():
    assert not recognize_text("   ").succeeded


def test_dispatch_by_prompt_kind():
    assert recognize(PromptKind.DATE, "March 22, 2020", today=TODAY).value == "2020-03-22"
    assert recognize(PromptKind.CONFIRM, "yes").value is True
    assert recognize(PromptKind.TEXT, "rice").value == "rice"


def test_item_lists_are_joined_naturally():
    assert OrderRecord(item=["rice"]).item_text() == "rice"
    assert OrderRecord(item=["rice", "sugar"]).item_text() == "rice and sugar"
    assert OrderRecord(item=["rice", "sugar", "wheat"]).item_text() == "rice, sugar and wheat"


def test_confirm_prompt_mentions_item_and_date():
    text = build_confirm_prompt(OrderRecord(item="rice", delivery_date="2020-03-22"))
    assert text == "Please confirm, I have you ordering: rice on: March 22, 2020. Is this correct?"


@pytest.mark.parametrize(
    "timex,expected",
    [
        ("2020-03-21", "I have ordered you rice tomorrow."),
        ("2020-03-24", "I have ordered you rice next Tuesday."),
        ("2020-04-15", "I have ordered you rice on April 15, 2020."),
    ],
)
def test_order_placed_message_only_says_on_for_absolute_dates(timex, expected):
    record = OrderRecord(item="rice", delivery_date=timex)
    assert build_order_placed_message(record, TODAY) == expected
