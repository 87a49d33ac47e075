import pytest
import requests
from structlog.testing import capture_logs

import feed
from models import AircraftObservation


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise requests.exceptions.JSONDecodeError("Expecting value", self.text, 0)
        return self._payload

    def close(self):
        pass


@pytest.fixture
def calls():
    return []


def _patch_get(monkeypatch, calls, response=None, exc=None):
    def fake_get(url, headers=None, timeout=None):
        calls.append({"url": url, "headers": headers, "timeout": timeout})
        if exc is not None:
            raise exc
        return response

    monkeypatch.setattr(feed.requests, "get", fake_get)


def test_fetch_decodes_aircraft(monkeypatch, calls):
    payload = {
        "ac": [
            {"hex": "43c6f1", "category": "a7", "flight": "ASCOT12 ", "track": 91.2, "dir": 270.0, "dst": 11.5},
            {"hex": "", "dst": 3.0},
            {"hex": "406b92"},
        ]
    }
    _patch_get(monkeypatch, calls, FakeResponse(payload=payload))

    aircraft = feed.fetch_aircraft("http://feed", timeout=5)

    assert aircraft == [
        AircraftObservation(
            hex="43c6f1",
            category="a7",
            flight="ASCOT12",
            track=91.2,
            bearing_to_observer=270.0,
            range_nm=11.5,
        )
    ]
    assert calls[0]["timeout"] == 5
    assert calls[0]["headers"]["Accept"] == "application/json"


def test_network_error_is_empty_batch(monkeypatch, calls):
    _patch_get(monkeypatch, calls, exc=requests.ConnectionError("refused"))
    with capture_logs() as logs:
        assert feed.fetch_aircraft("http://feed") == []
    assert logs[0]["event"] == "adsb_request_failed"


def test_bad_status_is_empty_batch(monkeypatch, calls):
    _patch_get(monkeypatch, calls, FakeResponse(status_code=503))
    with capture_logs() as logs:
        assert feed.fetch_aircraft("http://feed") == []
    assert logs[0]["event"] == "adsb_bad_status_code"
    assert logs[0]["status_code"] == 503


def test_malformed_json_is_empty_batch(monkeypatch, calls):
    _patch_get(monkeypatch, calls, FakeResponse(text="<html>"))
    with capture_logs() as logs:
        assert feed.fetch_aircraft("http://feed") == []
    assert logs[0]["event"] == "adsb_json_decode_failed"
    assert logs[0]["raw_body"] == "<html>"


def test_missing_ac_list(monkeypatch, calls):
    _patch_get(monkeypatch, calls, FakeResponse(payload={"now": 1, "total": 0}))
    assert feed.fetch_aircraft("http://feed") == []


@pytest.mark.parametrize(
    "payload",
    [
        {"ac": [{"hex": 123, "dst": 5.0}]},
        {"ac": [{"hex": "abc", "dst": 5.0, "category": 7}]},
        {"ac": ["abc", 42, None]},
    ],
)
def test_odd_records_never_raise(monkeypatch, calls, payload):
    _patch_get(monkeypatch, calls, FakeResponse(payload=payload))
    aircraft = feed.fetch_aircraft("http://feed")
    assert all(isinstance(ac, AircraftObservation) for ac in aircraft)


def test_non_string_category_kept_as_blank(monkeypatch, calls):
    _patch_get(monkeypatch, calls, FakeResponse(payload={"ac": [{"hex": "abc", "dst": 5.0, "category": 7}]}))
    (ac,) = feed.fetch_aircraft("http://feed")
    assert ac.hex == "abc"
    assert ac.category == ""


@pytest.mark.parametrize("ac_value", [5, "ac", {"hex": "abc"}])
def test_non_list_ac_is_empty_batch(monkeypatch, calls, ac_value):
    _patch_get(monkeypatch, calls, FakeResponse(payload={"ac": ac_value}))
    with capture_logs() as logs:
        assert feed.fetch_aircraft("http://feed") == []
    assert logs[0]["event"] == "adsb_json_decode_failed"


def test_non_object_payload_is_empty_batch(monkeypatch, calls):
    _patch_get(monkeypatch, calls, FakeResponse(payload=[1, 2, 3], text="[1, 2, 3]"))
    with capture_logs() as logs:
        assert feed.fetch_aircraft("http://feed") == []
    assert logs[0]["event"] == "adsb_json_decode_failed"
