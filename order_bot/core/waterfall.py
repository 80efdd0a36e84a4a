# Role: Base class for step-by-step flows. A flow is an ordered list of step methods; each step either
# prompts (and waits for the next user message), starts a child flow, or moves on with a value.

from __future__ import annotations

from typing import Any, Callable, List, Optional

import order_bot.config as config
from order_bot.core.dialog_context import DialogContext
from order_bot.models.dialog import DialogFrame, DialogTurnResult, FrameKind, PromptKind, TurnStatus
from order_bot.utils.prompt_recognizers import recognize

Step = Callable[[DialogContext, DialogFrame, Any], DialogTurnResult]


class WaterfallDialog:
    kind: FrameKind

    # 0 = keep re-prompting forever.
    max_prompt_attempts: int = 0

    def __init__(self) -> None:
        self.steps: List[Step] = []

    @property
    def children(self) -> List["WaterfallDialog"]:
        return []

    # ---- lifecycle (called by DialogContext) ----

    def begin(self, dc: DialogContext, frame: DialogFrame) -> DialogTurnResult:
        frame.step_index = 0
        return self._run_step(dc, frame, None)

    def continue_turn(self, dc: DialogContext, frame: DialogFrame) -> DialogTurnResult:
        # 1) Parse the reply for the pending prompt
        # 2) Invalid -> re-ask (or give up once max_prompt_attempts is reached)
        # 3) Valid -> clear the prompt and run the next step with the parsed value
        if frame.pending_prompt is None:
            return DialogTurnResult(status=TurnStatus.WAITING)

        recognized = recognize(frame.pending_prompt, dc.user_message, today=dc.today)
        valid = recognized.succeeded and self.validate_prompt(dc, frame, recognized.value)

        if not valid:
            frame.attempts += 1
            if config.DEBUG:
                print(f"PROMPT RETRY: {self.kind.value} {frame.pending_prompt.value} attempt={frame.attempts}")

            if self.max_prompt_attempts and frame.attempts >= self.max_prompt_attempts:
                frame.pending_prompt = None
                return self.on_attempts_exhausted(dc, frame)

            dc.send(frame.retry_text or frame.prompt_text or "")
            return DialogTurnResult(status=TurnStatus.WAITING)

        frame.pending_prompt = None
        frame.attempts = 0
        return self.next(dc, frame, recognized.value)

    def resume(self, dc: DialogContext, frame: DialogFrame, result: Any) -> DialogTurnResult:
        # A child flow ended: its result feeds the next step of this flow.
        return self.next(dc, frame, result)

    def interrupt(self, dc: DialogContext, frame: DialogFrame) -> Optional[DialogTurnResult]:
        return None

    # ---- helpers for steps ----

    def next(self, dc: DialogContext, frame: DialogFrame, result: Any = None) -> DialogTurnResult:
        frame.step_index += 1
        return self._run_step(dc, frame, result)

    def prompt(
        self,
        dc: DialogContext,
        frame: DialogFrame,
        kind: PromptKind,
        text: str,
        retry_text: Optional[str] = None,
    ) -> DialogTurnResult:
        frame.pending_prompt = kind
        frame.prompt_text = text
        frame.retry_text = retry_text
        frame.attempts = 0
        dc.send(text)
        return DialogTurnResult(status=TurnStatus.WAITING)

    def reprompt(self, dc: DialogContext, frame: DialogFrame) -> None:
        if frame.pending_prompt is not None and frame.prompt_text:
            dc.send(frame.prompt_text)

    def validate_prompt(self, dc: DialogContext, frame: DialogFrame, value: Any) -> bool:
        return True

    def on_attempts_exhausted(self, dc: DialogContext, frame: DialogFrame) -> DialogTurnResult:
        return dc.end_dialog(None)

    def _run_step(self, dc: DialogContext, frame: DialogFrame, result: Any) -> DialogTurnResult:
        if frame.step_index >= len(self.steps):
            return dc.end_dialog(result)
        return self.steps[frame.step_index](dc, frame, result)
