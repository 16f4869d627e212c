"""Tests for the round export anonymizer script."""

import json
import sys
from pathlib import Path

import pytest

from scripts.anonymize_ballots import (
    SEED,
    apply_replacements,
    discover_visitors,
    generate_fake_visitors,
    main,
)

FIXTURES_DIR = Path(__file__).parent / "test_parsers" / "fixtures"


@pytest.fixture
def round_data():
    return json.loads((FIXTURES_DIR / "round.json").read_text(encoding="utf-8"))


class TestAnonymize:
    def test_discover_visitors(self, round_data):
        assert discover_visitors(round_data) == {
            "jessica21", "mmorris", "tylerbrown", "ashley58",
        }

    def test_mapping_is_unique_and_fresh(self, round_data):
        visitors = discover_visitors(round_data)
        mapping = generate_fake_visitors(visitors, SEED)
        assert set(mapping) == visitors
        assert len(set(mapping.values())) == len(visitors)
        assert not set(mapping.values()) & visitors

    def test_mapping_is_deterministic(self, round_data):
        visitors = discover_visitors(round_data)
        assert generate_fake_visitors(visitors, SEED) == generate_fake_visitors(visitors, SEED)

    def test_apply_replacements(self, round_data):
        mapping = {"jessica21": "anon1", "mmorris": "anon2",
                   "tylerbrown": "anon3", "ashley58": "anon4"}
        result = apply_replacements(round_data, mapping)
        assert discover_visitors(result) == {"anon1", "anon2", "anon3", "anon4"}
        assert result["candidates"][0]["addedBy"] == "anon1"
        assert [b["visitorId"] for b in result["ballots"]].count("anon4") == 2
        # Scores and films untouched; input not mutated
        assert result["ballots"][0]["votes"] == round_data["ballots"][0]["votes"]
        assert round_data["ballots"][0]["visitorId"] == "jessica21"

    def test_main_writes_output(self, tmp_path, monkeypatch, capsys):
        output = tmp_path / "anon.json"
        monkeypatch.setattr(sys, "argv", [
            "anonymize_ballots.py", str(FIXTURES_DIR / "round.json"), "-o", str(output),
        ])
        main()
        result = json.loads(output.read_text(encoding="utf-8"))
        assert not discover_visitors(result) & {"jessica21", "mmorris"}
        assert "All visitors successfully replaced." in capsys.readouterr().out
