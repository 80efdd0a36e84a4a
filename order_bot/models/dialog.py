# Role: Typed contract for the explicit dialog stack. Each DialogFrame is one pending continuation
# (which flow, which step, the record in progress and the prompt we are waiting on).

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from order_bot.models.order import OrderRecord


class FrameKind(str, Enum):
    MAIN_FLOW = "main_flow"
    ORDER_FORM = "order_form"
    DATE_RESOLVER = "date_resolver"


class PromptKind(str, Enum):
    TEXT = "text"
    CONFIRM = "confirm"
    DATE = "date"


class TurnStatus(str, Enum):
    EMPTY = "empty"
    WAITING = "waiting"
    COMPLETE = "complete"
    CANCELLED = "cancelled"


class DialogFrame(BaseModel):
    kind: FrameKind
    step_index: int = 0
    record: Optional[OrderRecord] = None
    options: Dict[str, Any] = Field(default_factory=dict)

    # Key line: a frame waiting on user input remembers how to parse it and what to re-ask.
    pending_prompt: Optional[PromptKind] = None
    prompt_text: Optional[str] = None
    retry_text: Optional[str] = None
    attempts: int = 0


@dataclass(frozen=True)
class DialogTurnResult:
    status: TurnStatus
    result: Any = None
