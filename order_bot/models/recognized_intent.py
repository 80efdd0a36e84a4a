# Role: Normalized output of one NLU query. Produced per utterance and consumed immediately by the main flow;
# it is never stored in session state.

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from order_bot.models.intent import Intent


class RecognizedIntent(BaseModel):
    text: str
    label: str = Intent.NONE.value
    score: float = 0.0

    # Keys: "deliver" (raw phrase), "itemList" (canonical item), "datetime" (TIMEX date).
    entities: Dict[str, Any] = Field(default_factory=dict)

    def top_intent(self) -> Optional[Intent]:
        try:
            return Intent(self.label)
        except ValueError:
            return None
