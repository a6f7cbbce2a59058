"""
Client Controller - Session State and Round-Trip Orchestration
Owns the authoritative client list, the loading flag, the active banner, the
search term, the form's edit target and the delete confirmation gate.

Saves are followed by a full reload (no local merge). Deletes are applied
locally on success and reconciled with a full reload on failure.
"""

import logging
import time
from typing import Callable, List, Optional, Tuple

from clientmap.bus.events import (
    EventBus,
    EVENT_CLIENTS_CHANGED, EVENT_EDIT_LOCATION_CHANGED,
)
from clientmap.engine.confirm import ConfirmDialog
from clientmap.engine.form import ClientForm
from clientmap.errors import error_text
from clientmap.models import ClientRecord, Banner, BANNER_SUCCESS, BANNER_ERROR

logger = logging.getLogger(__name__)

BANNER_SECONDS = 4.0

DELETE_TITLE = "Delete client?"
DELETE_MESSAGE = "This cannot be undone. Are you sure you want to permanently delete this record?"


def filter_clients(clients: List[ClientRecord], term: str) -> List[ClientRecord]:
    """Case-insensitive substring match on name or company. Empty term keeps everything."""
    term = (term or '').lower()
    return [
        c for c in clients
        if term in str(c.name or '').lower() or term in str(c.company or '').lower()
    ]


class ClientController:
    """
    Args:
        adapter: object with fetch_all(), save(record), delete(id)
        bus: event bus views subscribe to; a private one is created if omitted
        clock: monotonic seconds, injectable for banner expiry
        locator: geolocation provider handed to the form (None = unsupported)
    """

    def __init__(self, adapter, bus: Optional[EventBus] = None,
                 clock: Callable[[], float] = time.monotonic, locator=None):
        self.adapter = adapter
        self.bus = bus or EventBus()
        self.clock = clock

        self.clients: List[ClientRecord] = []
        self.loading = False
        self.search_term = ''
        self.form_open = False
        self.editing: Optional[ClientRecord] = None
        self.delete_target: Optional[str] = None
        self.dialog = ConfirmDialog(DELETE_TITLE, DELETE_MESSAGE)
        self.form = ClientForm(
            on_submit=self.save,
            on_close=self.close_form,
            notify=self.show_banner,
            locator=locator,
        )
        self._banner: Optional[Banner] = None

    # -------------------------------------------------------------------------
    # Banner
    # -------------------------------------------------------------------------

    def show_banner(self, type: str, message: str):
        self._banner = Banner(type=type, message=message, expires_at=self.clock() + BANNER_SECONDS)
        log = logger.error if type == BANNER_ERROR else logger.info
        log(f"Banner [{type}]: {message}")

    @property
    def banner(self) -> Optional[Banner]:
        if self._banner is not None and self.clock() >= self._banner.expires_at:
            self._banner = None
        return self._banner

    # -------------------------------------------------------------------------
    # Collection
    # -------------------------------------------------------------------------

    def _set_clients(self, clients: List[ClientRecord]):
        self.clients = clients
        self.bus.emit(EVENT_CLIENTS_CHANGED, {'clients': list(clients)})

    def load(self) -> bool:
        """
        Replace the collection with whatever the sheet holds now.
        Returns: False when the fetch failed (the old collection is kept)
        """
        self.loading = True
        try:
            self._set_clients(self.adapter.fetch_all())
        except Exception as e:
            self.show_banner(BANNER_ERROR, f"Error loading data: {error_text(e)}")
            return False
        finally:
            self.loading = False
        return True

    @property
    def filtered_clients(self) -> List[ClientRecord]:
        return filter_clients(self.clients, self.search_term)

    def set_search(self, term: str):
        self.search_term = term or ''

    def get_client(self, client_id: str) -> Optional[ClientRecord]:
        for c in self.clients:
            if c.id == client_id:
                return c
        return None

    # -------------------------------------------------------------------------
    # Save
    # -------------------------------------------------------------------------

    def save(self, record: ClientRecord):
        """Persist, then reload everything. Re-raises so the form stays open on failure."""
        try:
            self.adapter.save(record)
        except Exception as e:
            self.show_banner(BANNER_ERROR, error_text(e))
            raise

        self.load()
        self.show_banner(BANNER_SUCCESS, "Client updated" if record.id else "Client created")

    # -------------------------------------------------------------------------
    # Form
    # -------------------------------------------------------------------------

    def open_form(self, record: Optional[ClientRecord] = None) -> ClientForm:
        """Open the form for a new client (record=None) or for editing one."""
        self.editing = record
        self.form_open = True
        self.form.open(record)
        self.bus.emit(EVENT_EDIT_LOCATION_CHANGED, {'location': self.temp_location})
        return self.form

    def close_form(self):
        self.form_open = False
        self.editing = None
        self.bus.emit(EVENT_EDIT_LOCATION_CHANGED, {'location': None})

    @property
    def temp_location(self) -> Optional[Tuple[float, float]]:
        """Coordinates of the record open for editing, if it has any."""
        return self.editing.location if self.editing else None

    # -------------------------------------------------------------------------
    # Delete
    # -------------------------------------------------------------------------

    def request_delete(self, client_id: str):
        self.delete_target = client_id
        self.dialog.show()

    def cancel_delete(self):
        self.delete_target = None
        self.dialog.hide()

    def confirm_delete(self) -> bool:
        """
        Run the delete behind the confirmation gate.
        Returns: True if the record was removed
        """
        client_id = self.delete_target
        if not client_id:
            return False

        self.dialog.begin()
        try:
            self.adapter.delete(client_id)
        except Exception as e:
            self.show_banner(BANNER_ERROR, f"Error deleting: {error_text(e)}")
            self.dialog.end()
            self.cancel_delete()
            self.load()
            return False

        self._set_clients([c for c in self.clients if c.id != client_id])
        self.show_banner(BANNER_SUCCESS, "Client deleted")
        self.cancel_delete()
        return True
