"""
Emergency Guide
Symptom intake → emergency guidance → ranked hospital recommendations.

Run with: streamlit run app.py
"""

import html
import logging

import streamlit as st

from emergency_guide.api_client import ApiClient
from emergency_guide.config import Settings, configure_logging, load_settings
from emergency_guide.guidance import GuidanceFetcher
from emergency_guide.hospitals import HospitalFetcher
from emergency_guide.location import GeolocationOptions, LocationProvider
from emergency_guide.map_utils import render_location_map
from emergency_guide.models import QUICK_SYMPTOMS
from emergency_guide.session import ViewStateController
from emergency_guide.state import SessionState, ViewState
from emergency_guide.ui_utils import (
    hospitals_dataframe,
    render_guidance_content,
    render_guidance_error,
    render_hospital_card,
)

logger = logging.getLogger(__name__)

SESSION_KEY = "emergency_guide_session"
TEXT_KEY = "symptom_text_input"


# =============================================================================
# Page config
# =============================================================================

st.set_page_config(
    page_title="Emergency Guide",
    page_icon="🚑",
    layout="centered",
    initial_sidebar_state="collapsed",
)

st.markdown(
    """
<style>
.block-container { max-width: 760px; }

.hero { text-align: center; margin-bottom: 24px; }
.hero-icon {
  width: 64px; height: 64px; border-radius: 50%;
  background: #ef4444; color: white; font-size: 2rem; font-weight: 800;
  display: flex; align-items: center; justify-content: center; margin: 0 auto 12px auto;
}

.info-card {
  background: rgba(255, 255, 255, 0.02);
  border: 1px solid rgba(148, 163, 184, 0.3);
  border-radius: 10px;
  padding: 12px 14px;
  margin: 10px 0;
}
.card-label { font-size: 0.8rem; opacity: 0.7; margin-bottom: 4px; }

.warning-banner {
  background: rgba(245, 158, 11, 0.1);
  border: 1px solid #f59e0b;
  border-radius: 8px;
  padding: 12px 14px;
  margin: 10px 0;
  color: #b45309;
}

.summary-card {
  background: rgba(59, 130, 246, 0.08);
  border: 1px solid #3b82f6;
  border-radius: 8px;
  padding: 12px 14px;
  margin: 10px 0;
}

.action-card {
  background: #ef4444;
  color: white;
  border-radius: 10px;
  padding: 14px 16px;
  margin: 10px 0;
}
.action-card h3 { color: white; margin: 0 0 8px 0; font-size: 1.2rem; }

.donot-card {
  background: rgba(249, 115, 22, 0.08);
  border: 1px solid #f97316;
  border-radius: 8px;
  padding: 12px 14px;
  margin: 10px 0;
}
.donot-card ul, .action-card ul { margin: 0; padding-left: 18px; }

.step-item { display: flex; align-items: flex-start; gap: 14px; margin: 8px 0; }
.step-number {
  min-width: 28px; height: 28px; border-radius: 50%;
  background: #f97316; color: white; font-weight: 700;
  display: flex; align-items: center; justify-content: center;
}

.section-header {
  background: #3b82f6;
  color: white;
  border-radius: 18px 18px 0 0;
  padding: 18px 16px 12px 16px;
  margin: 24px 0 12px 0;
}
.section-header h2 { color: white; margin: 0 0 4px 0; }

.hospital-card { display: flex; align-items: flex-start; gap: 14px; margin-top: 12px; }
.rank-badge {
  min-width: 44px; height: 44px; border-radius: 50%;
  background: #facc15; color: white; font-weight: 800; font-size: 1.1rem;
  display: flex; align-items: center; justify-content: center;
}
.hospital-name { font-size: 1.1rem; font-weight: 700; margin-bottom: 2px; }

.gauge-row { display: flex; gap: 12px; flex-wrap: wrap; }
.gauge { position: relative; text-align: center; width: 100px; }
.gauge-value { position: absolute; top: 26px; left: 0; right: 0; font-size: 1.3rem; font-weight: 800; }
.gauge-label { font-size: 0.75rem; opacity: 0.8; }

.muted { opacity: 0.7; font-size: 0.9rem; }
</style>
""",
    unsafe_allow_html=True,
)


# =============================================================================
# Session wiring
# =============================================================================

@st.cache_resource(show_spinner=False)
def get_settings() -> Settings:
    settings = load_settings()
    configure_logging(settings)
    logger.info(f"Backend: {settings.api_base_url}")
    return settings


@st.cache_resource(show_spinner=False)
def get_api_client(_settings: Settings) -> ApiClient:
    return ApiClient(_settings)


def get_controller(settings: Settings) -> ViewStateController:
    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = SessionState()
    if TEXT_KEY not in st.session_state:
        st.session_state[TEXT_KEY] = st.session_state[SESSION_KEY].symptom_text

    client = get_api_client(settings)
    return ViewStateController(
        st.session_state[SESSION_KEY],
        GuidanceFetcher(client),
        HospitalFetcher(client),
    )


# =============================================================================
# Callbacks
# =============================================================================

def on_text_change(controller: ViewStateController):
    controller.set_free_text(st.session_state[TEXT_KEY])


def on_quick_symptom(controller: ViewStateController, phrase: str):
    controller.select_quick_symptom(phrase)
    st.session_state[TEXT_KEY] = phrase


def on_new_symptom(controller: ViewStateController):
    controller.new_symptom()
    st.session_state[TEXT_KEY] = ""


# =============================================================================
# Views
# =============================================================================

def render_intake(controller: ViewStateController):
    state = controller.state

    st.markdown(
        """
<div class="hero">
  <div class="hero-icon">!</div>
  <h1>Emergency</h1>
  <div class="muted">Tell us what is happening</div>
</div>
""",
        unsafe_allow_html=True,
    )

    st.text_area(
        "Describe the symptom",
        key=TEXT_KEY,
        placeholder="The patient lost consciousness",
        height=120,
        on_change=on_text_change,
        args=(controller,),
    )

    st.markdown("#### Or pick one")
    cols = st.columns(2)
    for i, phrase in enumerate(QUICK_SYMPTOMS):
        with cols[i % 2]:
            st.button(
                phrase,
                key=f"quick_{i}",
                type="primary" if state.selected_quick_symptom == phrase else "secondary",
                on_click=on_quick_symptom,
                args=(controller, phrase),
                use_container_width=True,
            )

    if state.prompt_message:
        st.warning(state.prompt_message)

    label = (
        "Loading hospitals for the patient..."
        if state.is_loading_guidance
        else "Find hospitals for the patient"
    )
    if st.button(label, type="primary", disabled=state.is_loading_guidance, use_container_width=True):
        with st.spinner("Loading the emergency guide..."):
            opened = controller.submit()
        if opened or state.prompt_message:
            st.rerun()


def render_guide(controller: ViewStateController):
    state = controller.state

    st.markdown(
        f"""
<div class="info-card">
  <div class="card-label">Reported symptom</div>
  <div style="font-size: 1.2rem; font-weight: 700;">{html.escape(state.submitted_symptom) or "No symptom"}</div>
</div>
""",
        unsafe_allow_html=True,
    )

    if state.guidance_error:
        render_guidance_error(state.guidance_error)

    render_guidance_content(controller.guidance_content())

    st.markdown(
        """
<div class="section-header">
  <h2>Recommended hospitals</h2>
  <div style="font-size: 0.9rem; opacity: 0.9;">Ranked from the patient's condition and each hospital's current capacity.</div>
</div>
""",
        unsafe_allow_html=True,
    )

    with st.spinner("Loading hospital information..."):
        controller.load_hospitals()

    view = controller.hospital_view()
    if view.status == "error":
        st.warning(f"⚠️ Failed to load hospital recommendations: {view.error}")
    elif view.status in ("empty", "unavailable"):
        st.info(view.message)
    elif view.status == "results":
        for hospital in view.hospitals:
            render_hospital_card(
                hospital,
                expanded=state.expansion.is_expanded(hospital.rank),
                on_toggle=controller.toggle_hospital,
            )

        with st.expander("Compare all hospitals", expanded=False):
            st.dataframe(hospitals_dataframe(view.hospitals), use_container_width=True, hide_index=True)

    if state.location is not None:
        with st.expander("Your location", expanded=False):
            render_location_map(state.location)

    st.markdown("<div style='height: 16px;'></div>", unsafe_allow_html=True)
    st.button(
        "↻ Enter a new symptom",
        on_click=on_new_symptom,
        args=(controller,),
    )


# =============================================================================
# Main App
# =============================================================================

def main():
    settings = get_settings()
    controller = get_controller(settings)
    state = controller.state

    LocationProvider(options=GeolocationOptions.from_settings(settings)).resolve(state)

    with st.sidebar:
        st.markdown("### System Status")
        st.caption(f"Backend: {settings.api_base_url}")
        if state.location is not None:
            st.caption(f"Location: {state.location.latitude:.5f}, {state.location.longitude:.5f}")
        elif state.location_settled:
            st.caption("Location: unavailable")
        else:
            st.caption("Location: waiting for the browser...")

    if state.view == ViewState.GUIDE:
        render_guide(controller)
    else:
        render_intake(controller)


if __name__ == "__main__":
    main()
