"""
Shared fixtures and step definitions for BDD tests.

- runner, mock_adapter, context: available to all scenario files in this directory
- no_logging: autouse, prevents log file creation during tests
- no_geolocation: autouse, the CLI sees a device without geolocation
- 'the output contains' step: shared across all feature files
"""

import pytest
from unittest.mock import MagicMock, patch
from click.testing import CliRunner
from pytest_bdd import then, parsers


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def mock_adapter():
    adapter = MagicMock()
    adapter.fetch_all.return_value = []
    adapter.save.return_value = {"status": "success"}
    adapter.delete.return_value = {"status": "success"}
    with patch("clientmap.cli.main.SheetsAdapter", return_value=adapter):
        yield adapter


@pytest.fixture
def context():
    """Mutable dict shared between Given/When/Then steps within a scenario."""
    return {}


@pytest.fixture(autouse=True)
def no_logging():
    with patch("clientmap.cli.main.configure_logging"):
        yield


@pytest.fixture(autouse=True)
def no_geolocation():
    with patch("clientmap.cli.main.get_locator", return_value=None):
        yield


@then(parsers.parse('the output contains "{text}"'))
def output_contains(context, text):
    assert text in context["result"].output, (
        f"Expected {text!r} in output:\n{context['result'].output}"
    )
