# Role: Orchestrator for one conversation turn. It glues together:
# session state, the dialog stack (main flow -> order form -> date resolver), and the outgoing messages.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, List, Optional

import order_bot.config as config
from order_bot.core.date_resolver import DateResolverDialog
from order_bot.core.dialog_context import DialogContext
from order_bot.core.main_flow import MainFlowDialog
from order_bot.core.order_form import OrderFormDialog
from order_bot.core.state_manager import StateManager
from order_bot.core.waterfall import WaterfallDialog
from order_bot.models.dialog import DialogTurnResult, FrameKind, TurnStatus
from order_bot.models.state import State
from order_bot.nlu.order_recognizer import OrderRecognizer


@dataclass(frozen=True)
class TurnResponse:
    session_id: str
    messages: List[str] = field(default_factory=list)
    status: TurnStatus = TurnStatus.WAITING

    @property
    def assistant_message(self) -> str:
        return "\n\n".join(self.messages)


class FlowController:
    def __init__(
        self,
        state_manager: Optional[StateManager] = None,
        recognizer: Optional[OrderRecognizer] = None,
        main_flow: Optional[MainFlowDialog] = None,
        order_form: Optional[OrderFormDialog] = None,
        date_resolver: Optional[DateResolverDialog] = None,
        today_provider: Optional[Callable[[], date]] = None,
    ) -> None:
        # Key line: dependencies are injectable for testing/mocking.
        self.state_manager = state_manager or StateManager()
        self.recognizer = recognizer or OrderRecognizer()
        self.order_form = order_form or OrderFormDialog(date_resolver or DateResolverDialog())
        self.main_flow = main_flow or MainFlowDialog(self.recognizer, self.order_form)
        self.today_provider = today_provider or date.today

        self.dialogs: Dict[FrameKind, WaterfallDialog] = {}
        self._register(self.main_flow)

    def _register(self, dialog: WaterfallDialog) -> None:
        # Walk main flow -> order form -> date resolver so every kind that can be pushed is resolvable.
        self.dialogs[dialog.kind] = dialog
        for child in dialog.children:
            self._register(child)

    def _context(self, state: State, user_message: str = "") -> DialogContext:
        return DialogContext(state, self.dialogs, user_message=user_message, today=self.today_provider())

    def start_session(self, session_id: str) -> TurnResponse:
        # Greets without waiting for a first user message (used by the CLI).
        with self.state_manager.session_lock(session_id):
            state = self.state_manager.get_or_create(session_id)
            dc = self._context(state)

            top = dc.active_frame
            if top is None:
                result = dc.begin_dialog(FrameKind.MAIN_FLOW)
            else:
                # Already mid-conversation: repeat the pending question instead of consuming an empty reply.
                dc.dialog_for(top).reprompt(dc, top)
                result = DialogTurnResult(status=TurnStatus.WAITING)

            return self._finish(state, dc, result, user_message=None)

    def handle_turn(self, session_id: str, user_message: str) -> TurnResponse:
        # 1) Load state, record the user message
        # 2) Let the active flow consume it (interruptions first)
        # 3) Nothing active -> start the main flow (this message only triggers the greeting)
        # 4) Record bot messages and return them
        with self.state_manager.session_lock(session_id):
            state = self.state_manager.get_or_create(session_id)
            self.state_manager.add_message(session_id, role="user", content=user_message)

            dc = self._context(state, user_message)
            result = dc.continue_dialog()
            if result.status == TurnStatus.EMPTY:
                result = dc.begin_dialog(FrameKind.MAIN_FLOW)

            self.state_manager.increment_turn(state)
            return self._finish(state, dc, result, user_message=user_message)

    def _finish(
        self,
        state: State,
        dc: DialogContext,
        result: DialogTurnResult,
        user_message: Optional[str],
    ) -> TurnResponse:
        for text in dc.outbox:
            self.state_manager.add_message(state.session_id, role="bot", content=text)

        if config.DEBUG:
            print("\n--- FLOW DEBUG ---")
            print("SESSION:", state.session_id)
            print("USER MESSAGE:", user_message)
            print("TURN COUNT:", state.turn_count)
            print("STATUS:", result.status.value)
            print("DIALOG STACK:", [f"{f.kind.value}@{f.step_index}" for f in state.dialog_stack])
            record = state.order_in_progress()
            print("ORDER IN PROGRESS:", record.model_dump() if record else None)
            print("OUTBOX:", dc.outbox)
            print("------------------\n")

        return TurnResponse(session_id=state.session_id, messages=list(dc.outbox), status=result.status)
