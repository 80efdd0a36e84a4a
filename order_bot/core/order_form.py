# Role: The order form. Fills OrderRecord.item and OrderRecord.delivery_date (skipping anything the NLU
# already provided), asks for confirmation, and ends with the record (confirmed) or with nothing (declined/cancelled).
# Also owns the cancel/help interruptions for as long as an order is in progress.

from __future__ import annotations

from typing import Any, Optional

import order_bot.config as config
from order_bot.core.date_resolver import DateResolverDialog
from order_bot.core.dialog_context import DialogContext
from order_bot.core.waterfall import WaterfallDialog
from order_bot.models.dialog import DialogFrame, DialogTurnResult, FrameKind, PromptKind, TurnStatus
from order_bot.models.order import OrderRecord
from order_bot.utils.messages import (
    CANCELLING_MESSAGE,
    HELP_MESSAGE,
    ITEM_PROMPT,
    build_confirm_prompt,
    build_confirm_retry,
)
from order_bot.utils.timex import is_ambiguous

_CANCEL_WORDS = {"cancel", "quit", "stop"}
_HELP_WORDS = {"help", "?"}


class OrderFormDialog(WaterfallDialog):
    kind = FrameKind.ORDER_FORM

    def __init__(self, date_resolver: Optional[DateResolverDialog] = None) -> None:
        super().__init__()
        self.date_resolver = date_resolver or DateResolverDialog()
        self.steps = [self.item_step, self.delivery_date_step, self.confirm_step, self.final_step]

    @property
    def children(self) -> list:
        return [self.date_resolver]

    def begin(self, dc: DialogContext, frame: DialogFrame) -> DialogTurnResult:
        # Work on a private copy: the caller's record is never mutated by an abandoned form.
        frame.record = frame.record.model_copy(deep=True) if frame.record is not None else OrderRecord()
        return super().begin(dc, frame)

    def item_step(self, dc: DialogContext, frame: DialogFrame, result: Any) -> DialogTurnResult:
        record = frame.record
        if not record.has_item():
            return self.prompt(dc, frame, PromptKind.TEXT, ITEM_PROMPT)
        return self.next(dc, frame, record.item)

    def delivery_date_step(self, dc: DialogContext, frame: DialogFrame, result: Any) -> DialogTurnResult:
        record = frame.record
        record.item = result

        if not record.delivery_date or is_ambiguous(record.delivery_date):
            return dc.begin_dialog(FrameKind.DATE_RESOLVER, options={"date": record.delivery_date})
        return self.next(dc, frame, record.delivery_date)

    def confirm_step(self, dc: DialogContext, frame: DialogFrame, result: Any) -> DialogTurnResult:
        # The date resolver gave up -> the whole form ends without an order.
        if result is None:
            return dc.end_dialog(None)

        record = frame.record
        record.delivery_date = result

        text = build_confirm_prompt(record)
        return self.prompt(dc, frame, PromptKind.CONFIRM, text, retry_text=build_confirm_retry(text))

    def final_step(self, dc: DialogContext, frame: DialogFrame, result: Any) -> DialogTurnResult:
        if result is True:
            return dc.end_dialog(frame.record.model_copy(deep=True))
        return dc.end_dialog(None)

    def interrupt(self, dc: DialogContext, frame: DialogFrame) -> Optional[DialogTurnResult]:
        # 1) "cancel" -> unwind this form (and the date resolver above it) with no result
        # 2) "help" -> explain, then repeat whatever question is pending; the form stays where it was
        text = dc.user_message.strip().lower().rstrip("!.")

        if text in _CANCEL_WORDS:
            if config.DEBUG:
                print("INTERRUPT: cancel ->", [f.kind.value for f in dc.stack])
            dc.send(CANCELLING_MESSAGE)
            return dc.cancel_frame(frame)

        if text in _HELP_WORDS:
            if config.DEBUG:
                print("INTERRUPT: help")
            dc.send(HELP_MESSAGE)
            top = dc.active_frame
            if top is not None:
                dc.dialog_for(top).reprompt(dc, top)
            return DialogTurnResult(status=TurnStatus.WAITING)

        return None
