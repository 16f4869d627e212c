"""Shared fixtures for parser tests."""

import json
from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# --- Round exports (anonymized) ---

@pytest.fixture
def round_json():
    path = FIXTURES_DIR / "round.json"
    return path.read_bytes()


@pytest.fixture
def round_json_data(round_json):
    return json.loads(round_json)


@pytest.fixture
def round_csv():
    path = FIXTURES_DIR / "round.csv"
    return path.read_bytes()
