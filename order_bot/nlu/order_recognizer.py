# Role: The bot's intent extractor. Wraps the NLU client, normalizes a raw prediction into a RecognizedIntent
# (top intent + deliver / itemList / datetime entities) and exposes small accessors the main flow consumes.

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import order_bot.config as config
from order_bot.config import NluSettings
from order_bot.models.intent import Intent
from order_bot.models.recognized_intent import RecognizedIntent
from order_bot.nlu.luis_client import NluClient


@dataclass(frozen=True)
class DeliverEntities:
    deliver: Optional[str] = None
    item_list: Optional[str] = None


class OrderRecognizer:
    """
    Intent extraction for the order bot.

    Contract:
    - If the NLU credentials are incomplete the recognizer is "unconfigured": is_configured is False
      and execute_query must not be called.
    - Raw predictions are parsed defensively; missing or oddly shaped entities simply come back as None.
    """

    def __init__(self, settings: Optional[NluSettings] = None, client: Optional[NluClient] = None) -> None:
        self.settings = settings if settings is not None else config.nlu_settings()
        self._client = client
        if self._client is None and self.settings.is_configured:
            self._client = NluClient(self.settings)

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    def execute_query(self, utterance: str) -> RecognizedIntent:
        if self._client is None:
            raise RuntimeError("OrderRecognizer is not configured; check is_configured before querying.")

        raw = self._client.predict(utterance)
        result = self._normalize(utterance, raw)

        if config.DEBUG:
            print("\n--- ORDER RECOGNIZER ---")
            print("UTTERANCE:", utterance)
            print("TOP INTENT:", result.label, f"({result.score:.2f})")
            print("ENTITIES:", result.entities)
            print("------------------------\n")

        return result

    def get_deliver_entities(self, result: RecognizedIntent) -> DeliverEntities:
        deliver = result.entities.get("deliver")
        item_list = result.entities.get("itemList") if deliver else None
        return DeliverEntities(deliver=deliver, item_list=item_list)

    def get_delivery_date(self, result: RecognizedIntent) -> Optional[str]:
        # TIMEX date only; any time part was already dropped during normalization.
        return result.entities.get("datetime")

    def _normalize(self, utterance: str, raw: Dict[str, Any]) -> RecognizedIntent:
        prediction = self._parse_dict(raw.get("prediction"))
        intents = self._parse_dict(prediction.get("intents"))

        label = prediction.get("topIntent")
        if not isinstance(label, str) or not label.strip():
            label = Intent.NONE.value

        score = self._parse_score(self._parse_dict(intents.get(label)).get("score"))

        entities_raw = self._parse_dict(prediction.get("entities"))
        entities: Dict[str, Any] = {}

        deliver = self._deliver_text(entities_raw)
        if deliver:
            entities["deliver"] = deliver
            item = self._first_item(entities_raw)
            if item:
                entities["itemList"] = item

        timex = self._first_timex(entities_raw)
        if timex:
            entities["datetime"] = timex

        return RecognizedIntent(text=utterance, label=label.strip(), score=score, entities=entities)

    def _deliver_text(self, entities: Dict[str, Any]) -> Optional[str]:
        instances = self._parse_dict(entities.get("$instance"))
        first = self._first(instances.get("Deliver"))
        text = first.get("text") if isinstance(first, dict) else None
        return text.strip() if isinstance(text, str) and text.strip() else None

    def _first_item(self, entities: Dict[str, Any]) -> Optional[str]:
        # Deliver[0].ItemList is a list of lists of canonical values: [["rice"]].
        deliver = self._first(entities.get("Deliver"))
        if not isinstance(deliver, dict):
            return None
        value = self._first(self._first(deliver.get("ItemList")))
        return value.strip() if isinstance(value, str) and value.strip() else None

    def _first_timex(self, entities: Dict[str, Any]) -> Optional[str]:
        # v3 shape: datetimeV2[0].values[0].timex; older shape: datetime[0].timex[0].
        timex: Any = None

        v3 = self._first(entities.get("datetimeV2"))
        if isinstance(v3, dict):
            value = self._first(v3.get("values"))
            if isinstance(value, dict):
                timex = value.get("timex")

        if timex is None:
            v2 = self._first(entities.get("datetime"))
            if isinstance(v2, dict):
                timex = self._first(v2.get("timex"))

        if not isinstance(timex, str) or not timex.strip():
            return None
        return timex.strip().split("T")[0] or None

    def _first(self, value: Any) -> Any:
        if isinstance(value, list) and value:
            return value[0]
        return None

    def _parse_dict(self, value: Any) -> Dict[str, Any]:
        return value if isinstance(value, dict) else {}

    def _parse_score(self, value: Any) -> float:
        try:
            s = float(value)
        except (TypeError, ValueError):
            return 0.0
        return min(max(s, 0.0), 1.0)


def unsupported_items(entities: DeliverEntities) -> List[str]:
    # A deliver phrase without a canonical item means the service saw "something to deliver"
    # that is not in the catalog.
    if entities.deliver and not entities.item_list:
        return [entities.deliver]
    return []
