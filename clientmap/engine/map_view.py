"""
Map View - Client Markers on an OpenStreetMap Tile Map
Keeps one folium map for its lifetime. Record markers are torn down and rebuilt
whenever the collection changes; a separate transient marker follows the record
currently open in the form.
"""

import html
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

try:
    import folium
    FOLIUM_AVAILABLE = True
except ImportError:
    FOLIUM_AVAILABLE = False
    logging.warning("folium library not installed. Map view will show a placeholder.")

from clientmap.bus.events import EventBus, EVENT_CLIENTS_CHANGED, EVENT_EDIT_LOCATION_CHANGED
from clientmap.config import config
from clientmap.models import ClientRecord

logger = logging.getLogger(__name__)

TILES = 'OpenStreetMap'
ATTRIBUTION = '© OpenStreetMap'
SELECTED_POPUP = 'Selected location'

PLACEHOLDER_HTML = (
    '<div style="width:100%;height:500px;display:flex;align-items:center;'
    'justify-content:center;color:#94a3b8;background:#f8fafc;">'
    'Map unavailable (folium not installed)</div>'
)


def _escape(value) -> str:
    return html.escape('' if value is None else str(value))


def popup_html(client: ClientRecord) -> str:
    """Popup body: name, phone, address and a directions link."""
    return f"""
    <div style="font-family: sans-serif; font-size: 14px; min-width: 160px;">
      <b style="display:block; margin-bottom: 4px; font-size: 16px;">{_escape(client.name)}</b>
      <div style="color: #475569; margin-bottom: 4px; font-size: 12px;">{_escape(client.phone)}</div>
      <div style="color: #64748b; font-style: italic; margin-bottom: 10px; font-size: 12px;">{_escape(client.address)}</div>
      <a href="{_escape(client.directions_url)}" target="_blank" rel="noopener noreferrer"
         style="display:block; text-align:center; background-color:#3b82f6; color:white; padding:8px;
                border-radius:8px; text-decoration:none; font-weight:bold; font-size:12px;">Directions</a>
    </div>
    """


class MapView:
    """Lazily created folium map plus the two marker sets drawn on it."""

    def __init__(self):
        self._map = None
        self._markers: List = []
        self._temp_marker = None
        self._unsubscribe: List = []
        self.center: Tuple[float, float] = (config.MAP_DEFAULT_LAT, config.MAP_DEFAULT_LNG)
        self.zoom: int = config.MAP_DEFAULT_ZOOM

    @property
    def available(self) -> bool:
        return FOLIUM_AVAILABLE

    @property
    def marker_count(self) -> int:
        return len(self._markers)

    @property
    def has_temp_marker(self) -> bool:
        return self._temp_marker is not None

    def bind(self, bus: EventBus):
        """Redraw on controller events until unbind()."""
        self.unbind()
        self._unsubscribe = [
            bus.on(EVENT_CLIENTS_CHANGED, lambda data: self.set_clients(data.get('clients', []))),
            bus.on(EVENT_EDIT_LOCATION_CHANGED, lambda data: self.set_temp_location(data.get('location'))),
        ]

    def unbind(self):
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe = []

    def _get_map(self):
        if self._map is None:
            self._map = folium.Map(location=list(self.center), zoom_start=self.zoom, tiles=None)
            folium.TileLayer(TILES, attr=ATTRIBUTION).add_to(self._map)
            logger.debug("Map instance created")
        return self._map

    def _remove_layer(self, layer):
        self._get_map()._children.pop(layer.get_name(), None)

    def set_clients(self, clients: Iterable[ClientRecord]):
        """Drop every record marker and add one per client that has coordinates."""
        if not self.available:
            return
        fmap = self._get_map()
        for marker in self._markers:
            self._remove_layer(marker)
        self._markers = []

        for client in clients:
            try:
                if not client.has_location:
                    continue
                marker = folium.Marker(
                    [client.lat, client.lng],
                    popup=folium.Popup(popup_html(client), max_width=300),
                    tooltip=str(client.name) if client.name else None,
                )
            except (TypeError, ValueError) as e:
                logger.error(f"Skipping marker for client {client.id}: {e}")
                continue
            marker.add_to(fmap)
            self._markers.append(marker)

        logger.debug(f"Map markers rebuilt: {len(self._markers)}")

    def set_temp_location(self, location: Optional[Tuple[float, float]]):
        """Show (and zoom to) the location being edited, or clear it when None."""
        if not self.available:
            return
        if self._temp_marker is not None:
            self._remove_layer(self._temp_marker)
            self._temp_marker = None

        if location is None:
            return

        lat, lng = location
        self._temp_marker = folium.Marker(
            [lat, lng],
            popup=folium.Popup(SELECTED_POPUP, show=True),
            icon=folium.Icon(color='red'),
        )
        self._temp_marker.add_to(self._get_map())
        self.set_view((lat, lng), config.MAP_FOCUS_ZOOM)

    def set_view(self, center: Tuple[float, float], zoom: int):
        self.center = center
        self.zoom = zoom
        if self.available:
            fmap = self._get_map()
            fmap.location = list(center)
            fmap.options['zoom'] = zoom

    def render(self) -> str:
        """Standalone HTML document for the current map state."""
        if not self.available:
            return PLACEHOLDER_HTML
        return self._get_map().get_root().render()

    def save(self, path=None) -> Path:
        path = Path(path or config.MAP_OUTPUT)
        path.write_text(self.render(), encoding='utf-8')
        logger.info(f"Map written to {path}")
        return path
