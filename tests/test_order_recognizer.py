import pytest
import requests

from order_bot.config import NluSettings
from order_bot.models.intent import Intent
from order_bot.nlu.luis_client import NluClient, NluServiceError
from order_bot.nlu.order_recognizer import DeliverEntities, OrderRecognizer, unsupported_items

from conftest import FakeNluClient, prediction

CONFIGURED = NluSettings(app_id="app-123", api_key="key-abc", api_host="westus.api.cognitive.microsoft.com")


class FakeResponse:
    def __init__(self, payload=None, status_code=200, json_error=None):
        self._payload = payload
        self.status_code = status_code
        self._json_error = json_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self._json_error is not None:
            raise self._json_error
        return self._payload


def test_place_order_entities_are_normalized():
    """Deliver phrase, canonical item and date TIMEX come out of the raw prediction."""
    fake = FakeNluClient(prediction(deliver="10 kg rice", item="rice", timex="2020-03-22"))
    recognizer = OrderRecognizer(settings=NluSettings(), client=fake)

    result = recognizer.execute_query("Deliver 10 kg rice on March 22, 2020")

    assert result.top_intent() == Intent.PLACE_ORDER
    assert result.score == pytest.approx(0.95)
    assert recognizer.get_deliver_entities(result) == DeliverEntities(deliver="10 kg rice", item_list="rice")
    assert recognizer.get_delivery_date(result) == "2020-03-22"
    assert fake.queries == ["Deliver 10 kg rice on March 22, 2020"]


def test_time_part_of_datetime_is_dropped():
    fake = FakeNluClient(prediction(timex="2020-03-22T10"))
    result = OrderRecognizer(settings=NluSettings(), client=fake).execute_query("tomorrow at 10")
    assert result.entities["datetime"] == "2020-03-22"


def test_older_datetime_entity_shape_is_supported():
    raw = {"prediction": {"topIntent": "PlaceOrder", "entities": {"datetime": [{"timex": ["XXXX-03-22"]}]}}}
    recognizer = OrderRecognizer(settings=NluSettings(), client=FakeNluClient(raw))
    result = recognizer.execute_query("march 22")
    assert recognizer.get_delivery_date(result) == "XXXX-03-22"


def test_unmapped_deliver_phrase_is_reported_as_unsupported():
    fake = FakeNluClient(prediction(deliver="a bicycle"))
    recognizer = OrderRecognizer(settings=NluSettings(), client=fake)

    entities = recognizer.get_deliver_entities(recognizer.execute_query("deliver a bicycle"))

    assert entities == DeliverEntities(deliver="a bicycle", item_list=None)
    assert unsupported_items(entities) == ["a bicycle"]


def test_item_is_ignored_without_a_deliver_phrase():
    assert unsupported_items(DeliverEntities()) == []
    raw = prediction()
    raw["prediction"]["entities"]["Deliver"] = [{"ItemList": [["rice"]]}]
    result = OrderRecognizer(settings=NluSettings(), client=FakeNluClient(raw)).execute_query("rice")
    assert "itemList" not in result.entities


def test_missing_top_intent_defaults_to_none():
    raw = {"prediction": {"intents": {}, "entities": {}}}
    result = OrderRecognizer(settings=NluSettings(), client=FakeNluClient(raw)).execute_query("hello")
    assert result.label == "None"
    assert result.top_intent() == Intent.NONE
    assert result.entities == {}


def test_unknown_label_has_no_top_intent():
    result = OrderRecognizer(settings=NluSettings(), client=FakeNluClient(prediction("BookFlight"))).execute_query("x")
    assert result.label == "BookFlight"
    assert result.top_intent() is None


def test_incomplete_credentials_mean_unconfigured():
    recognizer = OrderRecognizer(settings=NluSettings(app_id="app", api_key="key"))
    assert not recognizer.is_configured
    with pytest.raises(RuntimeError):
        recognizer.execute_query("Deliver rice")


def test_full_credentials_build_a_client():
    recognizer = OrderRecognizer(settings=CONFIGURED)
    assert recognizer.is_configured


def test_client_refuses_unconfigured_settings():
    with pytest.raises(RuntimeError):
        NluClient(NluSettings())


def test_client_endpoint_adds_scheme():
    client = NluClient(CONFIGURED)
    assert client.endpoint == (
        "https://westus.api.cognitive.microsoft.com/luis/prediction/v3.0/apps/app-123/slots/production/predict"
    )


def test_client_sends_query_with_timeout(monkeypatch):
    client = NluClient(CONFIGURED)
    calls = {}

    def fake_get(url, params=None, timeout=None):
        calls.update(url=url, params=params, timeout=timeout)
        return FakeResponse(prediction())

    monkeypatch.setattr(client.session, "get", fake_get)
    payload = client.predict("  Deliver rice  ")

    assert payload["prediction"]["topIntent"] == "PlaceOrder"
    assert calls["params"]["query"] == "Deliver rice"
    assert calls["params"]["subscription-key"] == "key-abc"
    assert calls["timeout"] == CONFIGURED.timeout_seconds


@pytest.mark.parametrize(
    "behavior",
    [
        requests.ConnectionError("connection refused"),
        requests.Timeout("read timed out"),
        FakeResponse(status_code=503),
        FakeResponse(json_error=ValueError("Expecting value")),
        FakeResponse({"error": "no prediction here"}),
    ],
)
def test_client_wraps_failures_in_service_error(monkeypatch, behavior):
    client = NluClient(CONFIGURED)

    def fake_get(url, params=None, timeout=None):
        if isinstance(behavior, Exception):
            raise behavior
        return behavior

    monkeypatch.setattr(client.session, "get", fake_get)
    with pytest.raises(NluServiceError):
        client.predict("Deliver rice")


def test_client_rejects_blank_utterance():
    with pytest.raises(ValueError):
        NluClient(CONFIGURED).predict("  ")
