"""
HTTP client tests against a fake requests session.
"""

import sys
import os
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import json

import pytest
import requests

from emergency_guide.api_client import ApiClient
from emergency_guide.config import Settings
from emergency_guide.errors import ApiStatusError, ApiTransportError, PayloadError
from tests.cases import FULL_GUIDANCE, TWO_HOSPITALS


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        if text is None:
            text = json.dumps(body) if body is not None else ""
        self.text = text
        self.content = text.encode("utf-8")

    def json(self):
        return json.loads(self.text)


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.headers = {}
        self.calls = []

    def post(self, url, json=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


SETTINGS = Settings(api_base_url="https://er.example.org", timeout=(2.0, 9.0))


def test_guidance_request_shape():
    session = FakeSession(FakeResponse(body=FULL_GUIDANCE))
    client = ApiClient(SETTINGS, session=session)

    guidance = client.get_emergency_guidance("chest pain")

    assert guidance.immediate_actions[0] == "Call emergency services"
    assert session.calls == [
        {
            "url": "https://er.example.org/api/emergency-guidance",
            "json": {"symptom": "chest pain"},
            "timeout": (2.0, 9.0),
        }
    ]


def test_hospital_request_shape():
    session = FakeSession(FakeResponse(body=TWO_HOSPITALS))
    client = ApiClient(SETTINGS, session=session)

    result = client.get_hospital_recommendations("chest pain", 37.5, 127.0)

    assert result.ranks() == [1, 2]
    assert session.calls[0]["url"] == "https://er.example.org/api/hospitals/recommend"
    assert session.calls[0]["json"] == {"symptom": "chest pain", "lat": 37.5, "lon": 127.0}


def test_empty_body_is_no_guidance():
    client = ApiClient(SETTINGS, session=FakeSession(FakeResponse(body=None)))

    assert client.get_emergency_guidance("headache") is None


def test_non_2xx_raises_status_error_with_detail():
    session = FakeSession(FakeResponse(status_code=503, body={"detail": "model warming up"}))
    client = ApiClient(SETTINGS, session=session)

    with pytest.raises(ApiStatusError) as exc:
        client.get_emergency_guidance("fainting")

    assert exc.value.status_code == 503
    assert exc.value.message == "Server returned 503: model warming up"


def test_non_json_error_body():
    session = FakeSession(FakeResponse(status_code=502, text="Bad Gateway"))
    client = ApiClient(SETTINGS, session=session)

    with pytest.raises(ApiStatusError) as exc:
        client.get_hospital_recommendations("fainting", 1.0, 2.0)

    assert exc.value.detail == "Bad Gateway"


def test_connection_error_raises_transport_error():
    client = ApiClient(SETTINGS, session=FakeSession(error=requests.ConnectionError("refused")))

    with pytest.raises(ApiTransportError):
        client.get_emergency_guidance("fainting")


def test_timeout_raises_transport_error():
    client = ApiClient(SETTINGS, session=FakeSession(error=requests.Timeout("slow")))

    with pytest.raises(ApiTransportError) as exc:
        client.get_hospital_recommendations("fainting", 1.0, 2.0)

    assert "did not respond" in exc.value.message


def test_undecodable_body_raises_payload_error():
    client = ApiClient(SETTINGS, session=FakeSession(FakeResponse(text="<html>")))

    with pytest.raises(PayloadError):
        client.get_emergency_guidance("fainting")


def test_malformed_hospitals_raise_payload_error():
    client = ApiClient(SETTINGS, session=FakeSession(FakeResponse(body={"hospitals": {"rank": 1}})))

    with pytest.raises(PayloadError):
        client.get_hospital_recommendations("fainting", 1.0, 2.0)
