# Role: Deterministic user-facing texts. Flows ask for texts here instead of formatting inline,
# so wording stays consistent across the main flow, the order form and the date resolver.

from __future__ import annotations

from datetime import date
from typing import List

import order_bot.config as config
from order_bot.models.order import OrderRecord
from order_bot.utils.timex import TimexProperty

WELCOME_PROMPT = 'What can I help you with today?\nSay something like "Deliver 10 kg rice on March 22, 2020"'
RESTART_PROMPT = "What else can I do for you?"

NLU_NOT_CONFIGURED = (
    "NOTE: the language service is not configured. To enable all capabilities, "
    "add `NLU_APP_ID`, `NLU_API_KEY` and `NLU_API_HOST` to the .env file."
)
NLU_UNAVAILABLE = "Sorry, I couldn't reach the language service. Let's fill in your order step by step."

ITEM_PROMPT = "What would you like to order?"

DATE_PROMPT = "When would you like your order delivered?"
DATE_REPROMPT = "I'm sorry, to make your order please enter a full delivery date including Day Month and Year."
DATE_GIVE_UP = "Sorry, I still couldn't work out the delivery date. Let's start over."

CONFIRM_RETRY_SUFFIX = "(Please answer yes or no.)"

HELP_MESSAGE = (
    "I can arrange a delivery for you. Tell me what you'd like and when, "
    'for example "Deliver 10 kg rice on March 22, 2020". Say "cancel" to stop this order.'
)
CANCELLING_MESSAGE = "Cancelling..."


def build_confirm_prompt(record: OrderRecord) -> str:
    date_text = TimexProperty.parse(record.delivery_date).describe() if record.delivery_date else ""
    return f"Please confirm, I have you ordering: {record.item_text()} on: {date_text}. Is this correct?"


def build_confirm_retry(prompt_text: str) -> str:
    return f"{prompt_text} {CONFIRM_RETRY_SUFFIX}"


# Relative renderings read as "on ... tomorrow" otherwise.
_RELATIVE_PREFIXES = ("today", "tomorrow", "yesterday", "this ", "next ", "last ")


def build_order_placed_message(record: OrderRecord, today: date) -> str:
    natural = TimexProperty.parse(record.delivery_date).to_natural_language(today)
    when = natural if natural.startswith(_RELATIVE_PREFIXES) else f"on {natural}"
    return f"I have ordered you {record.item_text()} {when}."


def build_unsupported_items_message(unsupported: List[str]) -> str:
    if config.DEBUG:
        print("UNSUPPORTED ITEMS:", unsupported)
    return f"Sorry but the following items are not deliverable: {', '.join(unsupported)}"


def build_didnt_understand_message(intent_label: str) -> str:
    return f"Sorry, I didn't get that. Please try asking in a different way (intent was {intent_label})"
