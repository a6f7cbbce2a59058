"""
Error taxonomy and error-text normalisation.
Everything user-visible about a failure goes through error_text() before it reaches a banner.
"""

import json
from typing import Any

UNKNOWN_ERROR = "Unknown error (no details)"

# Checked in order on dicts and arbitrary objects
_MESSAGE_FIELDS = ('message', 'error', 'error_description', 'description', 'details')


class ClientMapError(Exception):
    """Base class for all client map errors."""


class ConfigurationError(ClientMapError):
    """The sheets endpoint is missing or still a placeholder."""


class RemoteError(ClientMapError):
    """Non-success status from the sheet, or the HTTP call itself failed."""


class ValidationError(ClientMapError):
    """A required form field is empty."""


class GeolocationError(ClientMapError):
    """The device refused or failed to report its position."""


def error_text(error: Any) -> str:
    """Turn any failure value into a readable string."""
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    if isinstance(error, str):
        return error
    if error is None:
        return UNKNOWN_ERROR

    for field in _MESSAGE_FIELDS:
        if isinstance(error, dict):
            msg = error.get(field)
        else:
            msg = getattr(error, field, None)
        if msg and isinstance(msg, str):
            return msg

    try:
        rendered = json.dumps(error, ensure_ascii=False)
    except (TypeError, ValueError):
        return UNKNOWN_ERROR
    if rendered in ('{}', '[]'):
        return UNKNOWN_ERROR
    return rendered
