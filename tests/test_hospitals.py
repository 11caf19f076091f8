"""
Hospital fetcher tests: guard, wholesale replacement, no synthetic fallback.
"""

import sys
import os
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from emergency_guide.errors import ApiTransportError
from emergency_guide.hospitals import (
    EMPTY_MESSAGE,
    UNAVAILABLE_MESSAGE,
    HospitalFetcher,
    hospital_list_view,
)
from emergency_guide.models import Location
from emergency_guide.state import SessionState
from tests.cases import TWO_HOSPITALS, FakeClient, hospital_payload

SEOUL = Location(latitude=37.5665, longitude=126.9780)


def test_fetch_requires_both_inputs():
    client = FakeClient(hospitals=TWO_HOSPITALS)
    fetcher = HospitalFetcher(client)

    only_symptom = SessionState(submitted_symptom="chest pain")
    only_location = SessionState(location=SEOUL)

    assert fetcher.ensure_recommendations(only_symptom) is False
    assert fetcher.ensure_recommendations(only_location) is False
    assert client.hospital_calls == []


def test_request_hospitals_skips_without_location():
    client = FakeClient(hospitals=TWO_HOSPITALS)
    state = SessionState()

    assert HospitalFetcher(client).request_hospitals(state, "chest pain", None) is None
    assert client.hospital_calls == []
    assert state.hospital_error is None


def test_fetch_when_both_present():
    client = FakeClient(hospitals=TWO_HOSPITALS)
    state = SessionState(submitted_symptom="chest pain", location=SEOUL)

    assert HospitalFetcher(client).ensure_recommendations(state) is True

    assert client.hospital_calls == [("chest pain", 37.5665, 126.9780)]
    assert state.hospital_result.ranks() == [1, 2]
    assert state.is_loading_hospitals is False


def test_no_refetch_for_same_inputs():
    client = FakeClient(hospitals=TWO_HOSPITALS)
    state = SessionState(submitted_symptom="chest pain", location=SEOUL)
    fetcher = HospitalFetcher(client)

    fetcher.ensure_recommendations(state)
    assert fetcher.ensure_recommendations(state) is False

    assert len(client.hospital_calls) == 1


def test_refetch_when_symptom_changes():
    client = FakeClient(hospitals=TWO_HOSPITALS)
    state = SessionState(submitted_symptom="chest pain", location=SEOUL)
    fetcher = HospitalFetcher(client)

    fetcher.ensure_recommendations(state)
    state.submitted_symptom = "burn injury"
    fetcher.ensure_recommendations(state)

    assert [call[0] for call in client.hospital_calls] == ["chest pain", "burn injury"]


def test_result_replaced_wholesale_and_expansion_reset():
    client = FakeClient(hospitals=TWO_HOSPITALS)
    state = SessionState(submitted_symptom="chest pain", location=SEOUL)
    fetcher = HospitalFetcher(client)

    fetcher.ensure_recommendations(state)
    state.expansion.toggle(2)

    client.hospitals = {"hospitals": [hospital_payload(1, hospital_name="Other Hospital")]}
    state.submitted_symptom = "fainting"
    fetcher.ensure_recommendations(state)

    assert [h.hospital_name for h in state.hospital_result.hospitals] == ["Other Hospital"]
    assert state.expansion.expanded_rank is None


def test_failure_shows_error_and_no_hospitals():
    client = FakeClient(hospitals=ApiTransportError("Could not reach the server"))
    state = SessionState(submitted_symptom="chest pain", location=SEOUL)

    HospitalFetcher(client).ensure_recommendations(state)
    view = hospital_list_view(state)

    assert state.hospital_error == "Could not reach the server"
    assert view.status == "error"
    assert view.hospitals == []


def test_failure_drops_previous_result():
    client = FakeClient(hospitals=TWO_HOSPITALS)
    state = SessionState(submitted_symptom="chest pain", location=SEOUL)
    fetcher = HospitalFetcher(client)
    fetcher.ensure_recommendations(state)

    client.hospitals = ApiTransportError("Could not reach the server")
    state.submitted_symptom = "fainting"
    fetcher.ensure_recommendations(state)

    assert state.hospital_result is None


def test_failed_inputs_are_not_retried_every_render():
    client = FakeClient(hospitals=ApiTransportError("down"))
    state = SessionState(submitted_symptom="chest pain", location=SEOUL)
    fetcher = HospitalFetcher(client)

    fetcher.ensure_recommendations(state)
    fetcher.ensure_recommendations(state)

    assert len(client.hospital_calls) == 1


def test_view_unavailable_without_location():
    state = SessionState(submitted_symptom="chest pain")

    view = hospital_list_view(state)

    assert view.status == "unavailable"
    assert view.message == UNAVAILABLE_MESSAGE
    assert view.error is None


def test_view_empty_result():
    client = FakeClient(hospitals={"hospitals": []})
    state = SessionState(submitted_symptom="chest pain", location=SEOUL)
    HospitalFetcher(client).ensure_recommendations(state)

    view = hospital_list_view(state)

    assert view.status == "empty"
    assert view.message == EMPTY_MESSAGE


def test_loading_flag_only_set_while_request_in_flight():
    state = SessionState(submitted_symptom="chest pain", location=SEOUL)
    seen = []

    class RecordingClient(FakeClient):
        def get_hospital_recommendations(self, symptom, lat, lon):
            seen.append(state.is_loading_hospitals)
            return super().get_hospital_recommendations(symptom, lat, lon)

    HospitalFetcher(RecordingClient(hospitals=TWO_HOSPITALS)).ensure_recommendations(state)

    assert seen == [True]
    assert state.is_loading_hospitals is False
    assert hospital_list_view(state).status == "results"


def test_duplicate_ranks_show_error_and_no_hospitals():
    payload = {"hospitals": [hospital_payload(1), hospital_payload(2, rank=1)]}
    state = SessionState(submitted_symptom="chest pain", location=SEOUL)

    HospitalFetcher(FakeClient(hospitals=payload)).ensure_recommendations(state)
    view = hospital_list_view(state)

    assert view.status == "error"
    assert "Duplicate ranks" in view.error
    assert view.hospitals == []
