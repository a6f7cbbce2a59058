"""
Sheets Adapter - Data Access Over the Apps Script Endpoint
Translates between ClientRecord and the sheet's lowercase column names,
and makes one HTTP round trip per call. No retries, no batching.
"""

import json
import logging
import math
from typing import List, Optional, Dict, Any
from urllib.parse import urlparse

import requests

from clientmap.config import config
from clientmap.errors import ConfigurationError, RemoteError, error_text
from clientmap.models import ClientRecord

logger = logging.getLogger(__name__)

PLACEHOLDER_URL = 'INSERT_GOOGLE_SCRIPT_URL_HERE'

# Apps Script web apps take the JSON body as text/plain
POST_HEADERS = {'Content-Type': 'text/plain;charset=utf-8'}

ACTION_CREATE = 'create'
ACTION_UPDATE = 'update'
ACTION_DELETE = 'delete'

# ClientRecord attribute -> sheet column
FIELD_MAP = {
    'name': 'nombre',
    'phone': 'telefono',
    'email': 'email',
    'company': 'empresa',
    'national_id': 'cedula',
    'address': 'direccion',
    'category': 'categoria',
    'status': 'estado',
    'notes': 'notas',
    'lat': 'lat',
    'lng': 'lng',
}


def _parse_coord(value: Any) -> Optional[float]:
    """Sheet coordinates arrive as numeric strings; blanks, zero and junk become None."""
    if not value:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number == 0:
        return None
    return number


def _parse_id(value: Any) -> Optional[str]:
    """Ids come back as numbers or strings depending on the sheet; keep them as text."""
    if value is None or value == '':
        return None
    return str(value)


def _text(value: Any) -> str:
    """Sheets turns numeric-looking cells (phones, IDs) into JSON numbers; keep them as text."""
    return '' if value is None else str(value)


def record_from_sheet(item: Dict[str, Any]) -> ClientRecord:
    """Map one sheet row onto a ClientRecord. Partial coordinates pass through as-is."""
    texts = {attr: _text(item.get(column)) for attr, column in FIELD_MAP.items() if attr not in ('lat', 'lng')}
    return ClientRecord(
        id=_parse_id(item.get('id')),
        **texts,
        lat=_parse_coord(item.get('lat')),
        lng=_parse_coord(item.get('lng')),
    )


def record_to_sheet(record: ClientRecord) -> Dict[str, Any]:
    return {column: getattr(record, attr) for attr, column in FIELD_MAP.items()}


def _unwrap(response) -> Dict[str, Any]:
    """Decode the {status, data|message} envelope, raising RemoteError on status 'error'."""
    result = response.json()
    if not isinstance(result, dict):
        raise RemoteError(f"Unexpected response from Sheets: {result!r}")
    if result.get('status') == 'error':
        raise RemoteError(error_text(result.get('message')))
    return result


class SheetsAdapter:
    """Read/create/update/delete against a single configured Apps Script URL."""

    def __init__(self, url: Optional[str] = None):
        self.url = config.SHEETS_SCRIPT_URL if url is None else url

    def check_url(self):
        """Raise ConfigurationError unless the endpoint is a usable http(s) URL."""
        if not self.url or PLACEHOLDER_URL in self.url:
            raise ConfigurationError(
                "Incomplete configuration: the script URL is not valid. Set SHEETS_SCRIPT_URL in .env."
            )
        parsed = urlparse(self.url)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise ConfigurationError(f"Incomplete configuration: '{self.url}' is not an http(s) URL.")

    def fetch_all(self) -> List[ClientRecord]:
        """GET every row from the sheet."""
        self.check_url()
        try:
            result = _unwrap(requests.get(self.url))
        except (requests.exceptions.RequestException, ValueError, RemoteError) as e:
            logger.error(f"Error fetching from Sheets: {e}")
            raise RemoteError(error_text(e)) from e

        data = result.get('data')
        if not isinstance(data, list):
            logger.warning("Sheets response carried no row list, treating as empty")
            return []

        clients = [record_from_sheet(item) for item in data]
        logger.info(f"Fetched {len(clients)} clients from Sheets")
        return clients

    def save(self, record: ClientRecord) -> Dict[str, Any]:
        """
        Create when the record has no id, otherwise update.
        Returns: the decoded response envelope
        """
        self.check_url()

        payload = {'action': ACTION_UPDATE if record.id else ACTION_CREATE}
        if record.id:
            payload['id'] = record.id
        payload['data'] = record_to_sheet(record)

        result = self._post(payload)
        logger.info(f"Saved client ({payload['action']}) {record.id or record.name!r}")
        return result

    def delete(self, client_id: str) -> Dict[str, Any]:
        """Delete one row by id."""
        self.check_url()
        self._post({'action': ACTION_DELETE, 'id': client_id})
        logger.info(f"Deleted client ID {client_id}")
        return {'status': 'success'}

    def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        action = payload['action']
        try:
            response = requests.post(
                self.url,
                data=json.dumps(payload, ensure_ascii=False).encode('utf-8'),
                headers=POST_HEADERS,
            )
            return _unwrap(response)
        except (requests.exceptions.RequestException, ValueError, RemoteError) as e:
            logger.error(f"Error on Sheets '{action}': {e}")
            raise RemoteError(error_text(e)) from e
