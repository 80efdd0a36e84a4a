# Role: Top-level loop of the bot. Greets, runs intent extraction (when available), pre-fills an order,
# delegates to the order form, reports the result and restarts itself with a different greeting.

from __future__ import annotations

from typing import Any, Optional

import order_bot.config as config
from order_bot.core.dialog_context import DialogContext
from order_bot.core.order_form import OrderFormDialog
from order_bot.core.waterfall import WaterfallDialog
from order_bot.models.dialog import DialogFrame, DialogTurnResult, FrameKind, PromptKind
from order_bot.models.intent import Intent
from order_bot.models.order import OrderRecord
from order_bot.nlu.luis_client import NluServiceError
from order_bot.nlu.order_recognizer import DeliverEntities, OrderRecognizer, unsupported_items
from order_bot.utils.messages import (
    NLU_NOT_CONFIGURED,
    NLU_UNAVAILABLE,
    RESTART_PROMPT,
    WELCOME_PROMPT,
    build_didnt_understand_message,
    build_order_placed_message,
    build_unsupported_items_message,
)


class MainFlowDialog(WaterfallDialog):
    kind = FrameKind.MAIN_FLOW

    def __init__(
        self,
        recognizer: Optional[OrderRecognizer],
        order_form: Optional[OrderFormDialog],
        nlu_enabled: Optional[bool] = None,
    ) -> None:
        super().__init__()

        # Key lines: both collaborators are mandatory; the bot refuses to start without them.
        if recognizer is None:
            raise ValueError("[MainFlowDialog]: Missing parameter 'recognizer' is required")
        if order_form is None:
            raise ValueError("[MainFlowDialog]: Missing parameter 'order_form' is required")

        self.recognizer = recognizer
        self.order_form = order_form

        # Capability flag decided once, here; steps never re-query the recognizer for it.
        self.nlu_enabled = recognizer.is_configured if nlu_enabled is None else bool(nlu_enabled)

        self.steps = [self.intro_step, self.act_step, self.final_step]

    @property
    def children(self) -> list:
        return [self.order_form]

    def intro_step(self, dc: DialogContext, frame: DialogFrame, result: Any) -> DialogTurnResult:
        if not self.nlu_enabled:
            dc.send(NLU_NOT_CONFIGURED)
            return self.next(dc, frame)

        text = frame.options.get("restart_msg") or WELCOME_PROMPT
        return self.prompt(dc, frame, PromptKind.TEXT, text)

    def act_step(self, dc: DialogContext, frame: DialogFrame, result: Any) -> DialogTurnResult:
        # 1) No NLU -> manual slot filling with an empty record
        # 2) NLU down -> tell the user, then manual slot filling for this turn
        # 3) PlaceOrder -> pre-fill item/date from entities (warn about items outside the catalog)
        # 4) Anything else -> "didn't understand", skip the form this time
        record = OrderRecord()

        if not self.nlu_enabled:
            return dc.begin_dialog(FrameKind.ORDER_FORM, record=record)

        try:
            recognized = self.recognizer.execute_query(result or "")
        except (NluServiceError, ValueError) as e:
            if config.DEBUG:
                print("\n!!! NLU ERROR !!!")
                print(repr(e))
                print("!!! END ERROR !!!\n")
            dc.send(NLU_UNAVAILABLE)
            return dc.begin_dialog(FrameKind.ORDER_FORM, record=record)

        if recognized.top_intent() == Intent.PLACE_ORDER:
            deliver_entities = self.recognizer.get_deliver_entities(recognized)
            self.show_warning_for_unsupported_items(dc, deliver_entities)

            record.item = deliver_entities.item_list
            record.delivery_date = self.recognizer.get_delivery_date(recognized)

            if config.DEBUG:
                print("NLU extracted these order details:", record.model_dump())

            return dc.begin_dialog(FrameKind.ORDER_FORM, record=record)

        dc.send(build_didnt_understand_message(recognized.label))
        return self.next(dc, frame)

    def show_warning_for_unsupported_items(self, dc: DialogContext, entities: DeliverEntities) -> None:
        unsupported = unsupported_items(entities)
        if unsupported:
            dc.send(build_unsupported_items_message(unsupported))

    def final_step(self, dc: DialogContext, frame: DialogFrame, result: Any) -> DialogTurnResult:
        # A cancelled or declined form hands back None: nothing to report.
        if isinstance(result, OrderRecord):
            dc.send(build_order_placed_message(result, dc.today))
            dc.state.completed_orders += 1

        return dc.replace_dialog(FrameKind.MAIN_FLOW, options={"restart_msg": RESTART_PROMPT})
