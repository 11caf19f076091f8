"""
UI Utilities for the Emergency Guide.
Formatting helpers and the Guide screen building blocks (guidance cards,
hospital cards, bed gauges, overview table).
"""

import html
from typing import Callable, List

import pandas as pd
import streamlit as st

from .models import (
    NO_ACTIONS_MESSAGE,
    DefaultGuidance,
    GuidanceContent,
    RecommendedHospital,
)

GAUGE_CIRCUMFERENCE = 226.2  # 2 * pi * r for r = 36


# =============================================================================
# Formatting
# =============================================================================

def format_distance(distance_km: float) -> str:
    return f"{distance_km:.2f} km"


def format_travel_time(travel_time_min: float) -> str:
    return f"about {travel_time_min:.1f} min"


def format_accept_prob(accept_prob: float) -> str:
    """
    Examples:
        >>> format_accept_prob(0.876)
        '87.6%'
    """
    return f"{accept_prob * 100:.1f}%"


def format_availability(available: bool) -> str:
    return "✓ Available" if available else "✗ Unavailable"


def hospitals_dataframe(hospitals: List[RecommendedHospital]) -> pd.DataFrame:
    """Overview table of the ranked list, in service order."""
    return pd.DataFrame(
        [
            {
                "Rank": h.rank,
                "Hospital": h.hospital_name,
                "Distance (km)": round(h.distance_km, 2),
                "Travel (min)": round(h.travel_time_min, 1),
                "Acceptance": format_accept_prob(h.accept_prob),
                "ER beds": f"{h.er_beds}/{h.total_er_beds}",
                "ICU beds": f"{h.icu_beds}/{h.total_icu_beds}",
            }
            for h in hospitals
        ],
        columns=["Rank", "Hospital", "Distance (km)", "Travel (min)", "Acceptance", "ER beds", "ICU beds"],
    )


# =============================================================================
# Guidance
# =============================================================================

def render_guidance_error(error: str):
    st.markdown(
        f"""
<div class="warning-banner">
  <div>⚠️ Failed to load the emergency guide: {html.escape(error)}</div>
  <div class="muted" style="font-size: 0.8rem; margin-top: 4px;">Showing the basic first-aid guide instead.</div>
</div>
""",
        unsafe_allow_html=True,
    )


def render_guidance_content(content: GuidanceContent):
    """Render either the fetched guidance or the generic procedure, never both."""

    if isinstance(content, DefaultGuidance):
        _render_action_card([])
        st.markdown("### General Emergency")
        steps = "".join(
            f'<div class="step-item"><div class="step-number">{i}</div><div>{html.escape(step)}</div></div>'
            for i, step in enumerate(content.steps, start=1)
        )
        st.markdown(f'<div class="info-card">{steps}</div>', unsafe_allow_html=True)
        return

    guidance = content.guidance

    if guidance.situation_summary:
        st.markdown(
            f"""
<div class="summary-card">
  <div class="card-label">Situation summary</div>
  <div>{html.escape(guidance.situation_summary)}</div>
</div>
""",
            unsafe_allow_html=True,
        )

    _render_action_card(guidance.immediate_actions)

    if guidance.do_not_do:
        items = "".join(f"<li>✗ {html.escape(item)}</li>" for item in guidance.do_not_do)
        st.markdown(
            f"""
<div class="donot-card">
  <div class="card-label">⚠️ Do not</div>
  <ul>{items}</ul>
</div>
""",
            unsafe_allow_html=True,
        )


def _render_action_card(actions: List[str]):
    if actions:
        body = "<ul>" + "".join(f"<li>{html.escape(a)}</li>" for a in actions) + "</ul>"
    else:
        body = f'<div style="text-align: center;">{NO_ACTIONS_MESSAGE}</div>'
    st.markdown(
        f"""
<div class="action-card">
  <h3>! Do this now</h3>
  {body}
</div>
""",
        unsafe_allow_html=True,
    )


# =============================================================================
# Hospitals
# =============================================================================

def bed_gauge_html(count: int, ratio: float, color: str, label: str) -> str:
    dash = ratio * GAUGE_CIRCUMFERENCE
    return f"""
<div class="gauge">
  <svg width="80" height="80" style="transform: rotate(-90deg);">
    <circle cx="40" cy="40" r="36" stroke="#e5e7eb" stroke-width="6" fill="none" />
    <circle cx="40" cy="40" r="36" stroke="{color}" stroke-width="6" fill="none"
            stroke-dasharray="{dash:.1f} {GAUGE_CIRCUMFERENCE}" />
  </svg>
  <div class="gauge-value" style="color: {color};">{count}</div>
  <div class="gauge-label">{label}</div>
</div>
"""


def render_hospital_card(
    hospital: RecommendedHospital,
    expanded: bool,
    on_toggle: Callable[[int], None],
):
    """Summary row, 'Details' toggle and (when expanded) the detail panel."""

    phone = f" &nbsp; 📞 {html.escape(hospital.hospital_phone)}" if hospital.hospital_phone else ""
    st.markdown(
        f"""
<div class="hospital-card">
  <div class="rank-badge">{hospital.rank}</div>
  <div>
    <div class="hospital-name">{html.escape(hospital.hospital_name)}</div>
    <div class="muted">📍 {format_distance(hospital.distance_km)} &nbsp; 🕐 {format_travel_time(hospital.travel_time_min)}{phone}</div>
  </div>
</div>
""",
        unsafe_allow_html=True,
    )

    st.button(
        f"Details {'▲' if expanded else '▼'}",
        key=f"toggle_hospital_{hospital.rank}_{hospital.hospital_id}",
        on_click=on_toggle,
        args=(hospital.rank,),
        use_container_width=True,
    )

    if expanded:
        render_hospital_detail(hospital)


def render_hospital_detail(hospital: RecommendedHospital):
    st.markdown("**AI assessment**")
    col1, col2 = st.columns([3, 1])
    with col1:
        st.caption("Acceptance probability")
        st.progress(hospital.accept_bar_ratio)
    with col2:
        st.metric("Accept", format_accept_prob(hospital.accept_prob))

    st.markdown("**Available beds**")
    gauges = [
        bed_gauge_html(hospital.er_beds, hospital.er_ratio, "#3b82f6", "Emergency room"),
        bed_gauge_html(hospital.icu_beds, hospital.icu_ratio, "#10b981", "ICU"),
    ]
    if hospital.trauma_icu_beds > 0:
        gauges.append(
            bed_gauge_html(hospital.trauma_icu_beds, hospital.trauma_icu_ratio, "#ef4444", "Trauma ICU")
        )
    st.markdown(f'<div class="gauge-row">{"".join(gauges)}</div>', unsafe_allow_html=True)

    st.markdown("**Equipment**")
    col1, col2 = st.columns(2)
    with col1:
        st.markdown(f"CT scanner: **{format_availability(hospital.ct_available)}**")
    with col2:
        st.markdown(f"Ventilator: **{format_availability(hospital.ventilator_available)}**")

    st.markdown("**Distance**")
    st.markdown(
        f"Distance: **{format_distance(hospital.distance_km)}** &nbsp;|&nbsp; "
        f"Estimated travel time: **{format_travel_time(hospital.travel_time_min)}**",
        unsafe_allow_html=True,
    )

    if hospital.hospital_phone:
        st.markdown("**Contact**")
        st.markdown(f"Phone: **{hospital.hospital_phone}**")
