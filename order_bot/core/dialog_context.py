# Role: One turn's view over a session's dialog stack. Flows push/pop continuations through it and write their
# outgoing messages to its outbox; the FlowController creates one per incoming user message.

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from order_bot.models.dialog import DialogFrame, DialogTurnResult, FrameKind, TurnStatus
from order_bot.models.order import OrderRecord
from order_bot.models.state import State

if TYPE_CHECKING:
    from order_bot.core.waterfall import WaterfallDialog


class DialogContext:
    def __init__(
        self,
        state: State,
        dialogs: Mapping[FrameKind, "WaterfallDialog"],
        user_message: str = "",
        today: Optional[date] = None,
    ) -> None:
        self.state = state
        self.user_message = user_message or ""
        self.today = today or date.today()
        self._dialogs = dialogs
        self.outbox: List[str] = []

    @property
    def stack(self) -> List[DialogFrame]:
        return self.state.dialog_stack

    @property
    def active_frame(self) -> Optional[DialogFrame]:
        return self.stack[-1] if self.stack else None

    def send(self, text: str) -> None:
        if text and text.strip():
            self.outbox.append(text)

    def dialog_for(self, frame: DialogFrame) -> "WaterfallDialog":
        # Key line: an unregistered kind is a wiring bug, so let the KeyError surface.
        return self._dialogs[frame.kind]

    def begin_dialog(
        self,
        kind: FrameKind,
        *,
        record: Optional[OrderRecord] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> DialogTurnResult:
        frame = DialogFrame(kind=kind, record=record, options=dict(options or {}))
        self.stack.append(frame)
        return self.dialog_for(frame).begin(self, frame)

    def continue_dialog(self) -> DialogTurnResult:
        # 1) Empty stack -> caller decides what to start
        # 2) Give every frame (outermost first) a chance to intercept the message (cancel / help)
        # 3) Otherwise the top frame consumes the message
        if not self.stack:
            return DialogTurnResult(status=TurnStatus.EMPTY)

        for frame in list(self.stack):
            interrupted = self.dialog_for(frame).interrupt(self, frame)
            if interrupted is not None:
                return interrupted

        frame = self.stack[-1]
        return self.dialog_for(frame).continue_turn(self, frame)

    def end_dialog(self, result: Any = None) -> DialogTurnResult:
        # Pop the finished continuation and hand its result to whoever started it.
        if self.stack:
            self.stack.pop()

        parent = self.active_frame
        if parent is None:
            return DialogTurnResult(status=TurnStatus.COMPLETE, result=result)
        return self.dialog_for(parent).resume(self, parent, result)

    def replace_dialog(self, kind: FrameKind, *, options: Optional[Dict[str, Any]] = None) -> DialogTurnResult:
        if self.stack:
            self.stack.pop()
        return self.begin_dialog(kind, options=options)

    def cancel_frame(self, frame: DialogFrame) -> DialogTurnResult:
        # Unwind everything above `frame` and `frame` itself; the parent resumes with no result.
        while self.stack:
            popped = self.stack.pop()
            if popped is frame:
                break

        parent = self.active_frame
        if parent is None:
            return DialogTurnResult(status=TurnStatus.CANCELLED)
        return self.dialog_for(parent).resume(self, parent, None)
