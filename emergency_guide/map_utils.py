import folium
from streamlit_folium import st_folium
from typing import Optional

from .models import Location


def build_location_map(location: Location, zoom_start: int = 14) -> folium.Map:
    """
    Build a Folium map centred on the user's position.

    The accuracy circle is only drawn when the browser reported one.
    """
    m = folium.Map(location=[location.latitude, location.longitude], zoom_start=zoom_start)

    folium.Marker(
        [location.latitude, location.longitude],
        popup="<b>YOUR LOCATION</b>",
        tooltip="Current Location",
        icon=folium.Icon(color="red", icon="user", prefix="fa"),
    ).add_to(m)

    if location.accuracy_m:
        folium.Circle(
            radius=location.accuracy_m,
            location=[location.latitude, location.longitude],
            color="#ef4444",
            fill=True,
            fill_opacity=0.15,
        ).add_to(m)

    return m


def render_location_map(location: Optional[Location], height: int = 260):
    """Render the position map, or nothing if the location is unknown."""
    if location is None:
        return
    st_folium(build_location_map(location), width="100%", height=height, returned_objects=[])
