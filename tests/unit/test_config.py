"""
Unit tests for application configuration (clientmap/config.py).

Config is a class with attributes set at class-body parse time, and a module-level
singleton created immediately after. Testing different env var states requires
re-importing the module, with load_dotenv mocked to a no-op so a .env file on disk
doesn't override what we set in the test environment.
"""

import importlib
import logging
import sys
from unittest.mock import patch

SCRIPT_URL = 'https://script.google.com/macros/s/abc123/exec'


def _reload_config(env_overrides: dict):
    """
    Import clientmap.config fresh under a specific environment.
    Always restores the original module in sys.modules afterward.
    """
    original = sys.modules.get('clientmap.config')
    try:
        with patch.dict('os.environ', env_overrides, clear=True), \
             patch('dotenv.load_dotenv'):
            sys.modules.pop('clientmap.config', None)
            return importlib.import_module('clientmap.config')
    finally:
        if original is not None:
            sys.modules['clientmap.config'] = original
        elif 'clientmap.config' in sys.modules:
            del sys.modules['clientmap.config']


# ---------------------------------------------------------------------------
# SHEETS_SCRIPT_URL
# ---------------------------------------------------------------------------

def test_missing_script_url_does_not_raise_at_import():
    mod = _reload_config({})
    assert mod.Config.SHEETS_SCRIPT_URL == ''


def test_missing_script_url_logs_warning(caplog):
    with caplog.at_level(logging.WARNING, logger='clientmap.config'):
        _reload_config({})
    assert any('SHEETS_SCRIPT_URL' in r.message for r in caplog.records)


def test_script_url_is_read():
    mod = _reload_config({'SHEETS_SCRIPT_URL': SCRIPT_URL})
    assert mod.config.SHEETS_SCRIPT_URL == SCRIPT_URL


def test_plain_http_script_url_warns(caplog):
    with caplog.at_level(logging.WARNING, logger='clientmap.config'):
        _reload_config({'SHEETS_SCRIPT_URL': 'http://example.com/exec'})
    assert any('HTTPS' in r.message for r in caplog.records)


def test_https_script_url_no_warning(caplog):
    with caplog.at_level(logging.WARNING, logger='clientmap.config'):
        _reload_config({'SHEETS_SCRIPT_URL': SCRIPT_URL})
    assert not [r for r in caplog.records if r.name == 'clientmap.config']


# ---------------------------------------------------------------------------
# Default values
# ---------------------------------------------------------------------------

def test_map_defaults():
    mod = _reload_config({'SHEETS_SCRIPT_URL': SCRIPT_URL})
    assert mod.Config.MAP_DEFAULT_LAT == -32.522
    assert mod.Config.MAP_DEFAULT_LNG == -55.765
    assert mod.Config.MAP_DEFAULT_ZOOM == 6
    assert mod.Config.MAP_FOCUS_ZOOM == 16
    assert mod.Config.MAP_OUTPUT == 'clients_map.html'


def test_directions_template_default():
    mod = _reload_config({'SHEETS_SCRIPT_URL': SCRIPT_URL})
    assert mod.Config.DIRECTIONS_URL_TEMPLATE.format(lat=1, lng=2) == \
        'https://www.google.com/maps/dir/?api=1&destination=1,2'


def test_geolocation_defaults():
    mod = _reload_config({'SHEETS_SCRIPT_URL': SCRIPT_URL})
    assert mod.Config.GEOLOCATION_PROVIDER == 'ip'
    assert mod.Config.GEOLOCATION_URL == 'http://ip-api.com/json/'


# ---------------------------------------------------------------------------
# Custom env var values are picked up
# ---------------------------------------------------------------------------

def test_custom_map_center_and_zoom():
    mod = _reload_config({
        'SHEETS_SCRIPT_URL': SCRIPT_URL,
        'MAP_DEFAULT_LAT': '-34.9',
        'MAP_DEFAULT_LNG': '-56.16',
        'MAP_FOCUS_ZOOM': '14',
    })
    assert mod.Config.MAP_DEFAULT_LAT == -34.9
    assert mod.Config.MAP_DEFAULT_LNG == -56.16
    assert mod.Config.MAP_FOCUS_ZOOM == 14


def test_geolocation_provider_is_lowercased():
    mod = _reload_config({'SHEETS_SCRIPT_URL': SCRIPT_URL, 'GEOLOCATION_PROVIDER': 'NONE'})
    assert mod.Config.GEOLOCATION_PROVIDER == 'none'
