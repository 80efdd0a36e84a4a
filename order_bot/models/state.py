# Role: Per-session state container. Holds the dialog stack (pending continuations) and conversation history,
# plus small bookkeeping fields used by the API snapshot.

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field

from order_bot.models.dialog import DialogFrame, FrameKind
from order_bot.models.message import Message
from order_bot.models.order import OrderRecord


class State(BaseModel):
    session_id: str
    dialog_stack: List[DialogFrame] = Field(default_factory=list)
    conversation_history: List[Message] = Field(default_factory=list)

    turn_count: int = 0
    completed_orders: int = 0

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def active_kinds(self) -> List[FrameKind]:
        return [frame.kind for frame in self.dialog_stack]

    def order_in_progress(self) -> Optional[OrderRecord]:
        # Key line: the innermost frame carrying a record is the order the user is filling in.
        for frame in reversed(self.dialog_stack):
            if frame.kind == FrameKind.ORDER_FORM and frame.record is not None:
                return frame.record
        return None
