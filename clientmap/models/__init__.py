"""
Data Models
Dataclasses for the client record and UI notifications. Pure Python, no transport logic.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from clientmap.config import config

# Values exactly as the sheet stores them, with English labels for display
CATEGORY_CHOICES = ['Cliente', 'Prospecto', 'Proveedor']
STATUS_CHOICES = ['Activo', 'Inactivo', 'Pendiente']

CATEGORY_LABELS = {'Cliente': 'Client', 'Prospecto': 'Prospect', 'Proveedor': 'Supplier'}
STATUS_LABELS = {'Activo': 'Active', 'Inactivo': 'Inactive', 'Pendiente': 'Pending'}

DEFAULT_CATEGORY = 'Cliente'
DEFAULT_STATUS = 'Activo'

BANNER_SUCCESS = 'success'
BANNER_ERROR = 'error'


@dataclass
class ClientRecord:
    """One client row. id is None until the sheet assigns one."""
    id: Optional[str] = None
    name: str = ''
    phone: str = ''
    email: str = ''
    company: str = ''
    national_id: str = ''
    address: str = ''
    category: str = DEFAULT_CATEGORY
    status: str = DEFAULT_STATUS
    notes: str = ''
    lat: Optional[float] = None
    lng: Optional[float] = None

    @property
    def has_location(self) -> bool:
        """True when both coordinates are set and non-zero."""
        return bool(self.lat) and bool(self.lng) and math.isfinite(self.lat) and math.isfinite(self.lng)

    @property
    def location(self) -> Optional[Tuple[float, float]]:
        return (self.lat, self.lng) if self.has_location else None

    @property
    def directions_url(self) -> Optional[str]:
        if not self.has_location:
            return None
        return config.DIRECTIONS_URL_TEMPLATE.format(lat=self.lat, lng=self.lng)


@dataclass
class Banner:
    """Transient success/error notification. expires_at is on the controller's clock."""
    type: str
    message: str
    expires_at: float = 0.0

    @property
    def is_error(self) -> bool:
        return self.type == BANNER_ERROR


def new_client_record() -> ClientRecord:
    """Blank draft used when the form opens for a new client."""
    return ClientRecord(
        name='', phone='', email='', company='', national_id='', address='',
        category=DEFAULT_CATEGORY, status=DEFAULT_STATUS, notes='',
        lat=None, lng=None,
    )
