"""Tests for the JSON round export parser."""

import json
from datetime import datetime, timezone

import pytest
from filmclub.parsers.base import BallotValidationError
from filmclub.parsers.json_export import JsonExportParser


def encode(data: dict) -> bytes:
    return json.dumps(data).encode("utf-8")


class TestJsonExportParser:
    def setup_method(self):
        self.parser = JsonExportParser()

    # --- can_parse ---

    def test_can_parse_json_filename(self):
        assert self.parser.can_parse("round-2026-10-17.json")
        assert self.parser.can_parse("ROUND.JSON")

    def test_can_parse_json_url(self):
        assert self.parser.can_parse("https://example.com/exports/round.json")
        assert self.parser.can_parse("https://example.com/exports/round.json?token=abc")

    def test_cannot_parse_other_extensions(self):
        assert not self.parser.can_parse("round.csv")
        assert not self.parser.can_parse("https://example.com/round")

    def test_can_parse_content(self, round_json):
        assert self.parser.can_parse_content(round_json, "upload")

    def test_cannot_parse_content_without_ballots(self):
        assert not self.parser.can_parse_content(b'{"films": []}', "upload")
        assert not self.parser.can_parse_content(b"voter,submitted_at", "upload")

    # --- parse ---

    def test_parse_round_id(self, round_json):
        snapshot = self.parser.parse("round.json", round_json)
        assert snapshot.round_id == "round-2026-10-17"

    def test_parse_candidates(self, round_json):
        snapshot = self.parser.parse("round.json", round_json)
        assert [(c.id, c.title, c.nominator) for c in snapshot.candidates] == [
            ("film-alien", "Alien", "jessica21"),
            ("film-heat", "Heat", "mmorris"),
            ("film-paddington", "Paddington 2", "tylerbrown"),
        ]

    def test_resubmitted_ballot_keeps_latest(self, round_json):
        snapshot = self.parser.parse("round.json", round_json)
        assert snapshot.num_ballots == 4
        [ashley] = [b for b in snapshot.ballots if b.voter_id == "ashley58"]
        assert ashley.score_for("film-paddington") == 3
        assert ashley.submitted_at == datetime(2026, 10, 17, 20, 15, tzinfo=timezone.utc)

    def test_omitted_vote_stays_omitted(self, round_json):
        snapshot = self.parser.parse("round.json", round_json)
        [tyler] = [b for b in snapshot.ballots if b.voter_id == "tylerbrown"]
        assert [v.candidate_id for v in tyler.votes] == ["film-alien", "film-paddington"]

    def test_firestore_timestamp(self, round_json):
        snapshot = self.parser.parse("round.json", round_json)
        [mmorris] = [b for b in snapshot.ballots if b.voter_id == "mmorris"]
        assert mmorris.submitted_at == datetime.fromtimestamp(1792260300, tz=timezone.utc)

    def test_films_key_accepted(self):
        snapshot = self.parser.parse("round.json", encode({
            "films": [{"id": "f1", "title": "Alien"}],
            "ballots": [],
        }))
        assert [c.id for c in snapshot.candidates] == ["f1"]
        assert snapshot.round_id is None

    def test_title_defaults_to_id(self):
        snapshot = self.parser.parse_data({"candidates": [{"id": "f1"}], "ballots": []})
        assert snapshot.candidates[0].title == "f1"

    # --- errors ---

    def test_invalid_json(self):
        with pytest.raises(ValueError, match="Not valid JSON"):
            self.parser.parse("round.json", b"{not json")

    def test_missing_candidates(self):
        with pytest.raises(ValueError, match="candidates"):
            self.parser.parse_data({"ballots": []})

    def test_missing_ballots(self):
        with pytest.raises(ValueError, match="ballots"):
            self.parser.parse_data({"candidates": []})

    def test_top_level_must_be_object(self):
        with pytest.raises(ValueError, match="JSON object"):
            self.parser.parse("round.json", b"[1, 2]")

    def test_ballot_without_votes_array(self):
        with pytest.raises(BallotValidationError, match="visitorId and votes"):
            self.parser.parse_data({
                "candidates": [{"id": "f1"}],
                "ballots": [{"visitorId": "v1", "votes": "f1=3"}],
            })

    def test_vote_without_score(self):
        with pytest.raises(BallotValidationError, match="filmId and score"):
            self.parser.parse_data({
                "candidates": [{"id": "f1"}],
                "ballots": [{"visitorId": "v1", "votes": [{"filmId": "f1"}]}],
            })

    def test_score_out_of_range(self):
        with pytest.raises(BallotValidationError, match="between 0 and 3"):
            self.parser.parse_data({
                "candidates": [{"id": "f1"}],
                "ballots": [{"visitorId": "v1", "votes": [{"filmId": "f1", "score": 4}]}],
            })

    def test_fractional_score(self):
        with pytest.raises(BallotValidationError, match="Invalid score"):
            self.parser.parse_data({
                "candidates": [{"id": "f1"}],
                "ballots": [{"visitorId": "v1", "votes": [{"filmId": "f1", "score": 2.5}]}],
            })

    def test_vote_for_unknown_film(self):
        with pytest.raises(BallotValidationError, match="unknown film f9"):
            self.parser.parse_data({
                "candidates": [{"id": "f1"}],
                "ballots": [{"visitorId": "v1", "votes": [{"filmId": "f9", "score": 1}]}],
            })

    def test_candidates_must_be_list(self):
        with pytest.raises(ValueError, match="'candidates' must be a list"):
            self.parser.parse_data({"candidates": {"id": "f1"}, "ballots": []})

    def test_ballots_must_be_list(self):
        with pytest.raises(ValueError, match="'ballots' must be a list"):
            self.parser.parse_data({"candidates": [], "ballots": "v1"})

    def test_candidate_must_be_object(self):
        with pytest.raises(ValueError, match="Candidate must be an object"):
            self.parser.parse_data({"candidates": ["f1"], "ballots": []})

    def test_ballot_must_be_object(self):
        with pytest.raises(BallotValidationError, match="Ballot must be an object"):
            self.parser.parse_data({"candidates": [{"id": "f1"}], "ballots": ["v1"]})

    def test_vote_must_be_object(self):
        with pytest.raises(BallotValidationError, match="filmId and score"):
            self.parser.parse_data({
                "candidates": [{"id": "f1"}],
                "ballots": [{"visitorId": "v1", "votes": ["f1"]}],
            })
