"""
Shared test fixtures.
"""

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str):
    with open(FIXTURES_DIR / name, "r", encoding="utf-8") as f:
        return json.load(f)


def make_response(status_code=200, data=None, text=""):
    """Create a requests.Response-like mock."""
    response = MagicMock()
    response.status_code = status_code
    if data is None:
        response.json.side_effect = ValueError("No JSON")
    else:
        response.json.return_value = data
    response.text = text
    return response


@pytest.fixture
def fields_json():
    """Schema without subtables."""
    return load_fixture("fields.json")["properties"]


@pytest.fixture
def subtable_fields_json():
    """Schema with a subtable and a primary mark entry."""
    return load_fixture("subtable_fields.json")["properties"]


@pytest.fixture
def transport():
    """Transport mock returning an empty JSON object."""
    mock = MagicMock()
    mock.request.return_value = make_response(200, {})
    return mock
