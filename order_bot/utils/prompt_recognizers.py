# Role: Turns a raw user reply into the value a pending prompt is waiting for (text, yes/no, or date TIMEX).
# A failed recognition means "ask again", never an exception.

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from order_bot.models.dialog import PromptKind
from order_bot.utils.date_parsing import parse_date_text

_YES = {
    "yes",
    "y",
    "yeah",
    "yep",
    "yup",
    "sure",
    "ok",
    "okay",
    "correct",
    "right",
    "confirm",
    "affirmative",
    "true",
}

_NO = {
    "no",
    "n",
    "nope",
    "nah",
    "negative",
    "incorrect",
    "wrong",
    "false",
}


@dataclass(frozen=True)
class PromptRecognition:
    succeeded: bool
    value: Any = None


def recognize_text(text: str) -> PromptRecognition:
    cleaned = (text or "").strip()
    return PromptRecognition(succeeded=bool(cleaned), value=cleaned or None)


def recognize_confirm(text: str) -> PromptRecognition:
    # "Yes please!" -> True, "nope." -> False, "maybe" -> not recognized.
    words = re.findall(r"[a-z]+", (text or "").lower())
    if not words:
        return PromptRecognition(succeeded=False)

    if words[0] in _YES:
        return PromptRecognition(succeeded=True, value=True)
    if words[0] in _NO:
        return PromptRecognition(succeeded=True, value=False)

    return PromptRecognition(succeeded=False)


def recognize_date(text: str, today: Optional[date] = None) -> PromptRecognition:
    timex = parse_date_text(text, today=today)
    return PromptRecognition(succeeded=timex is not None, value=timex)


def recognize(kind: PromptKind, text: str, today: Optional[date] = None) -> PromptRecognition:
    if kind == PromptKind.CONFIRM:
        return recognize_confirm(text)
    if kind == PromptKind.DATE:
        return recognize_date(text, today=today)
    return recognize_text(text)
