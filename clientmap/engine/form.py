"""
Client Form - Draft State for Create/Edit
Owns a working copy of one record plus the submitting/locating flags.
Persistence and notifications are delegated to callbacks supplied by the controller.
"""

import dataclasses
import logging
from typing import Callable, Optional

from clientmap.errors import GeolocationError, ValidationError
from clientmap.models import ClientRecord, BANNER_SUCCESS, BANNER_ERROR, new_client_record

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('name', 'phone')
EDITABLE_FIELDS = tuple(f.name for f in dataclasses.fields(ClientRecord) if f.name != 'id')

MSG_NO_GEOLOCATION = "Geolocation not supported on this device"
MSG_LOCATION_OK = "Location obtained"
MSG_LOCATION_FAILED = "Could not get location. Check permissions."


class ClientForm:
    """
    Create/edit form for a single client.

    Args:
        on_submit: called with the draft; raises to signal failure (banner already shown)
        on_close: called after a successful submit or an explicit close
        notify: (type, message) banner callback
        locator: object with current_position() -> (lat, lng), or None if unavailable
    """

    def __init__(
        self,
        on_submit: Callable[[ClientRecord], None],
        on_close: Callable[[], None],
        notify: Callable[[str, str], None],
        locator=None,
    ):
        self.on_submit = on_submit
        self.on_close = on_close
        self.notify = notify
        self.locator = locator

        self.is_open = False
        self.editing = False
        self.draft: ClientRecord = new_client_record()
        self.submitting = False
        self.locating = False

    def open(self, initial: Optional[ClientRecord] = None):
        """Start a draft from the record being edited, or from blank defaults."""
        self.draft = dataclasses.replace(initial) if initial else new_client_record()
        self.editing = initial is not None
        self.submitting = False
        self.locating = False
        self.is_open = True

    @property
    def title(self) -> str:
        return "Edit Client" if self.editing else "New Client"

    def set_field(self, name: str, value):
        if name not in EDITABLE_FIELDS:
            raise ValueError(f"Unknown client field: {name}")
        if name in ('lat', 'lng'):
            value = float(value) if value not in (None, '') else None
        setattr(self.draft, name, value)

    def geolocate(self):
        """Ask the device for its position and write both coordinates into the draft."""
        if self.locator is None:
            self.notify(BANNER_ERROR, MSG_NO_GEOLOCATION)
            return

        self.locating = True
        try:
            lat, lng = self.locator.current_position()
        except GeolocationError as e:
            logger.warning(f"Geolocation failed: {e}")
            self.notify(BANNER_ERROR, MSG_LOCATION_FAILED)
            return
        finally:
            self.locating = False

        self.draft.lat = lat
        self.draft.lng = lng
        self.notify(BANNER_SUCCESS, MSG_LOCATION_OK)

    def validate(self):
        missing = [f for f in REQUIRED_FIELDS if not str(getattr(self.draft, f) or '').strip()]
        if missing:
            raise ValidationError(f"Required fields missing: {', '.join(missing)}")

    def submit(self) -> bool:
        """
        Hand the draft to on_submit.
        Returns: True if saved (form closed), False if it stays open.
        """
        if self.submitting:
            logger.debug("submit ignored: already submitting")
            return False

        self.validate()
        self.submitting = True
        try:
            self.on_submit(self.draft)
        except Exception as e:
            # The controller has already raised the banner
            logger.debug(f"submit failed, keeping form open: {e}")
            return False
        finally:
            self.submitting = False

        self.close()
        return True

    def close(self):
        self.is_open = False
        self.draft = new_client_record()
        self.on_close()
