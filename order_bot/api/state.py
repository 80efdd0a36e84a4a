# Role: Read-only transparency endpoint for the UI.
# Does NOT change any flow logic. Only exposes the current dialog stack and order-in-progress by session_id.

from fastapi import APIRouter
from pydantic import BaseModel

from order_bot.api.deps import flow_controller

router = APIRouter(tags=["state"])


class StateSnapshot(BaseModel):
    session_id: str
    active_dialogs: list[str]
    order_in_progress: dict | None
    completed_orders: int
    turn_count: int


@router.get("/state/{session_id}", response_model=StateSnapshot)
def get_state(session_id: str) -> StateSnapshot:
    state = flow_controller.state_manager.get_or_create(session_id)
    record = state.order_in_progress()
    return StateSnapshot(
        session_id=session_id,
        active_dialogs=[kind.value for kind in state.active_kinds()],
        order_in_progress=record.model_dump() if record is not None else None,
        completed_orders=state.completed_orders,
        turn_count=state.turn_count,
    )
