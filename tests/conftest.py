from datetime import date
from typing import Any, Dict, List, Optional

import pytest

from order_bot.config import NluSettings
from order_bot.core.date_resolver import DateResolverDialog
from order_bot.core.flow_controller import FlowController
from order_bot.core.state_manager import StateManager
from order_bot.nlu.luis_client import NluServiceError
from order_bot.nlu.order_recognizer import OrderRecognizer

# A Friday. 2020-03-22 is the Sunday of the same week.
TODAY = date(2020, 3, 20)


def prediction(
    top_intent: str = "PlaceOrder",
    deliver: Optional[str] = None,
    item: Optional[str] = None,
    timex: Optional[str] = None,
    score: float = 0.95,
) -> Dict[str, Any]:
    """Build a raw prediction payload shaped like the NLU service's v3 response."""
    entities: Dict[str, Any] = {"$instance": {}}

    if deliver is not None:
        entities["$instance"]["Deliver"] = [{"text": deliver, "startIndex": 8, "length": len(deliver)}]
        deliver_entity: Dict[str, Any] = {"$instance": {}}
        if item is not None:
            deliver_entity["ItemList"] = [[item]]
        entities["Deliver"] = [deliver_entity]

    if timex is not None:
        entities["datetimeV2"] = [{"type": "date", "values": [{"timex": timex, "resolution": []}]}]

    return {
        "query": "",
        "prediction": {
            "topIntent": top_intent,
            "intents": {top_intent: {"score": score}},
            "entities": entities,
        },
    }


class FakeNluClient:
    """Stands in for NluClient: returns queued payloads (or raises queued errors) and records queries."""

    def __init__(self, *responses: Any) -> None:
        self.responses: List[Any] = list(responses)
        self.queries: List[str] = []

    def queue(self, response: Any) -> None:
        self.responses.append(response)

    def predict(self, utterance: str) -> Dict[str, Any]:
        self.queries.append(utterance)
        if not self.responses:
            return prediction(top_intent="None")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def fake_nlu() -> FakeNluClient:
    return FakeNluClient()


@pytest.fixture
def nlu_controller(fake_nlu: FakeNluClient) -> FlowController:
    """Controller whose intent extractor is configured (backed by the fake client)."""
    recognizer = OrderRecognizer(settings=NluSettings(), client=fake_nlu)
    return FlowController(
        state_manager=StateManager(),
        recognizer=recognizer,
        date_resolver=DateResolverDialog(max_attempts=0),
        today_provider=lambda: TODAY,
    )


@pytest.fixture
def offline_controller() -> FlowController:
    """Controller without NLU credentials: manual slot filling only."""
    recognizer = OrderRecognizer(settings=NluSettings())
    return FlowController(
        state_manager=StateManager(),
        recognizer=recognizer,
        date_resolver=DateResolverDialog(max_attempts=0),
        today_provider=lambda: TODAY,
    )


@pytest.fixture
def nlu_error() -> NluServiceError:
    return NluServiceError("NLU request failed: connection refused")
