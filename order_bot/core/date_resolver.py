# Role: Sub-flow that turns a possibly missing or ambiguous delivery date into a definite one.
# It keeps asking until the user gives a full calendar date (optionally capped by DATE_PROMPT_MAX_ATTEMPTS).

from __future__ import annotations

from typing import Any, Optional

import order_bot.config as config
from order_bot.core.dialog_context import DialogContext
from order_bot.core.waterfall import WaterfallDialog
from order_bot.models.dialog import DialogFrame, DialogTurnResult, FrameKind, PromptKind
from order_bot.utils.messages import DATE_GIVE_UP, DATE_PROMPT, DATE_REPROMPT
from order_bot.utils.timex import TimexProperty


class DateResolverDialog(WaterfallDialog):
    kind = FrameKind.DATE_RESOLVER

    def __init__(self, max_attempts: Optional[int] = None) -> None:
        super().__init__()
        self.max_prompt_attempts = config.date_prompt_max_attempts() if max_attempts is None else max(max_attempts, 0)
        self.steps = [self.initial_step, self.final_step]

    def initial_step(self, dc: DialogContext, frame: DialogFrame, result: Any) -> DialogTurnResult:
        # 1) No date yet -> ask for one (failed attempts get the stricter re-prompt)
        # 2) Date present but ambiguous (e.g. no year) -> ask straight away with the re-prompt
        # 3) Definite -> done
        timex = frame.options.get("date")

        if not timex:
            return self.prompt(dc, frame, PromptKind.DATE, DATE_PROMPT, retry_text=DATE_REPROMPT)

        if not TimexProperty.parse(timex).is_definite:
            if config.DEBUG:
                print(f"DATE RESOLVER: '{timex}' is ambiguous -> re-prompt")
            return self.prompt(dc, frame, PromptKind.DATE, DATE_REPROMPT)

        return self.next(dc, frame, timex)

    def final_step(self, dc: DialogContext, frame: DialogFrame, result: Any) -> DialogTurnResult:
        return dc.end_dialog(result)

    def validate_prompt(self, dc: DialogContext, frame: DialogFrame, value: Any) -> bool:
        # Key line: a parse that lacks year, month or day is not accepted.
        return isinstance(value, str) and TimexProperty.parse(value).is_definite

    def on_attempts_exhausted(self, dc: DialogContext, frame: DialogFrame) -> DialogTurnResult:
        dc.send(DATE_GIVE_UP)
        return dc.end_dialog(None)
