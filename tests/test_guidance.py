"""
Guidance fetcher tests.
"""

import sys
import os
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from emergency_guide.errors import ApiStatusError, EmptySymptomError, PayloadError
from emergency_guide.guidance import (
    DEFAULT_GUIDANCE_ERROR,
    GuidanceFetcher,
    select_guidance_content,
)
from emergency_guide.models import FALLBACK_STEPS, DefaultGuidance, EmergencyGuidance, FetchedGuidance
from emergency_guide.state import SessionState
from tests.cases import CHEST_PAIN_GUIDANCE, FakeClient


def test_success_stores_guidance():
    state = SessionState()
    client = FakeClient(guidance=CHEST_PAIN_GUIDANCE)

    guidance = GuidanceFetcher(client).request_guidance(state, "  chest pain ")

    assert client.guidance_calls == ["chest pain"]
    assert state.guidance is guidance
    assert state.guidance.immediate_actions == ["Call emergency services", "Keep patient still"]
    assert state.guidance_error is None
    assert state.is_loading_guidance is False


@pytest.mark.parametrize("symptom", ["", "   ", "\n\t", None])
def test_empty_symptom_rejected_before_network(symptom):
    state = SessionState()
    client = FakeClient(guidance=CHEST_PAIN_GUIDANCE)

    with pytest.raises(EmptySymptomError):
        GuidanceFetcher(client).request_guidance(state, symptom)

    assert client.guidance_calls == []
    assert state.guidance_generation == 0


def test_failure_stores_message():
    state = SessionState()
    client = FakeClient(guidance=ApiStatusError("Server returned 500", status_code=500))

    result = GuidanceFetcher(client).request_guidance(state, "fainting")

    assert result is None
    assert state.guidance is None
    assert state.guidance_error == "Server returned 500"
    assert state.is_loading_guidance is False


def test_malformed_payload_is_a_failure():
    state = SessionState()
    client = FakeClient(guidance=["not", "an", "object"])

    GuidanceFetcher(client).request_guidance(state, "fainting")

    assert state.guidance is None
    assert state.guidance_error


def test_unexpected_error_without_text_uses_default_message():
    state = SessionState()
    client = FakeClient(guidance=RuntimeError())

    GuidanceFetcher(client).request_guidance(state, "fainting")

    assert state.guidance_error == DEFAULT_GUIDANCE_ERROR


def test_new_request_clears_previous_error():
    state = SessionState(guidance_error="old failure")
    client = FakeClient(guidance=CHEST_PAIN_GUIDANCE)

    GuidanceFetcher(client).request_guidance(state, "chest pain")

    assert state.guidance_error is None
    assert state.guidance_generation == 1


def test_stale_response_is_discarded():
    state = SessionState()

    class SupersedingClient(FakeClient):
        def get_emergency_guidance(self, symptom):
            # A newer request starts while this one is in flight
            state.guidance_generation += 1
            return super().get_emergency_guidance(symptom)

    client = SupersedingClient(guidance=CHEST_PAIN_GUIDANCE)

    assert GuidanceFetcher(client).request_guidance(state, "chest pain") is None
    assert state.guidance is None


def test_select_content_is_exclusive():
    fetched = select_guidance_content(EmergencyGuidance(immediate_actions=["Call"]))
    default = select_guidance_content(None)

    assert isinstance(fetched, FetchedGuidance) and not fetched.is_default
    assert isinstance(default, DefaultGuidance) and default.is_default
    assert list(default.steps) == FALLBACK_STEPS
    assert len(default.steps) == 5


def test_select_content_treats_empty_guidance_as_default():
    assert select_guidance_content(EmergencyGuidance()).is_default


def test_payload_error_message_surfaces():
    state = SessionState()
    client = FakeClient(guidance=PayloadError("The server response could not be read."))

    GuidanceFetcher(client).request_guidance(state, "burn")

    assert state.guidance_error == "The server response could not be read."
