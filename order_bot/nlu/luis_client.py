# Role: Minimal wrapper around a LUIS-style prediction endpoint. Centralizes URL building, timeout and error
# handling, so the rest of the code calls a single method: predict(utterance).

from __future__ import annotations

from typing import Any, Dict, Optional

import requests

import order_bot.config as config
from order_bot.config import NluSettings


class NluServiceError(RuntimeError):
    """Raised when the NLU service cannot produce a usable prediction (network, HTTP or payload error)."""


class NluClient:
    _PREDICT_PATH = "/luis/prediction/v3.0/apps/{app_id}/slots/{slot}/predict"

    def __init__(self, settings: Optional[NluSettings] = None, slot: str = "production") -> None:
        # Key line: never build a client from partial credentials; callers check is_configured first.
        self.settings = settings or config.nlu_settings()
        if not self.settings.is_configured:
            raise RuntimeError("Missing NLU_APP_ID / NLU_API_KEY / NLU_API_HOST in environment or .env")

        self.slot = slot
        self.session = requests.Session()

    @property
    def endpoint(self) -> str:
        host = (self.settings.api_host or "").strip().rstrip("/")
        if not host.startswith(("http://", "https://")):
            host = f"https://{host}"
        return host + self._PREDICT_PATH.format(app_id=self.settings.app_id, slot=self.slot)

    def predict(self, utterance: str) -> Dict[str, Any]:
        # 1) Validate utterance
        # 2) Call the prediction endpoint (bounded by timeout)
        # 3) Validate JSON shape (must carry a "prediction" object)
        if not utterance or not utterance.strip():
            raise ValueError("Utterance must be non-empty.")

        params = {
            "subscription-key": self.settings.api_key,
            "query": utterance.strip(),
            "show-all-intents": "true",
            "verbose": "false",
        }

        try:
            r = self.session.get(self.endpoint, params=params, timeout=self.settings.timeout_seconds)
            r.raise_for_status()
            payload = r.json()
        except requests.RequestException as e:
            raise NluServiceError(f"NLU request failed: {e}") from e
        except ValueError as e:
            raise NluServiceError(f"NLU returned a non-JSON body: {e}") from e

        if not isinstance(payload, dict) or not isinstance(payload.get("prediction"), dict):
            raise NluServiceError("NLU response has no 'prediction' object.")

        if config.DEBUG:
            print("\n--- NLU CLIENT ---")
            print("QUERY:", utterance)
            print("RAW PREDICTION:", payload.get("prediction"))
            print("------------------\n")

        return payload
