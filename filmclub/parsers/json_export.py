"""Parser for JSON exports of a voting round."""

import json
import re

from filmclub.models import Ballot, Candidate, RoundSnapshot, Vote
from filmclub.parsers import register_parser
from filmclub.parsers.base import (
    BallotValidationError,
    SnapshotParser,
    parse_score,
    parse_timestamp,
    validate_snapshot,
)


@register_parser
class JsonExportParser(SnapshotParser):
    """Parser for a round exported from the document store as JSON.

    Expected shape (camelCase keys, as stored):

        {
          "roundId": "abc123",
          "candidates": [{"id": "f1", "title": "Alien", "addedBy": "v1"}],
          "ballots": [
            {"visitorId": "v1",
             "votes": [{"filmId": "f1", "score": 3}],
             "submittedAt": "2026-10-17T19:30:00Z"}
          ]
        }

    "films" is accepted in place of "candidates", and "submittedAt" may be a
    Firestore timestamp ({"_seconds": ..., "_nanoseconds": ...}).
    """

    FILENAME_PATTERN = re.compile(r"\.json(\?.*)?$", re.IGNORECASE)

    FORMAT_DESCRIPTION = "JSON round export (roundId, candidates, ballots)"

    def can_parse(self, source: str) -> bool:
        return bool(self.FILENAME_PATTERN.search(source))

    def can_parse_content(self, content: bytes, filename: str) -> bool:
        """Tell-tale sign: a JSON object with a "ballots" key."""
        head = content.lstrip()[:1]
        return head == b"{" and b'"ballots"' in content

    def parse(self, source: str, content: bytes) -> RoundSnapshot:
        try:
            data = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ValueError(f"Not valid JSON: {e}") from e
        return self.parse_data(data)

    def parse_data(self, data: dict) -> RoundSnapshot:
        """Build a snapshot from already-decoded export data."""
        if not isinstance(data, dict):
            raise ValueError("Expected a JSON object at the top level")

        raw_candidates = data.get("candidates", data.get("films"))
        if raw_candidates is None:
            raise ValueError("Missing 'candidates' in export")
        raw_ballots = data.get("ballots")
        if raw_ballots is None:
            raise ValueError("Missing 'ballots' in export")

        if not isinstance(raw_candidates, list):
            raise ValueError("'candidates' must be a list")
        if not isinstance(raw_ballots, list):
            raise ValueError("'ballots' must be a list")

        candidates = [self._parse_candidate(c) for c in raw_candidates]
        ballots = [self._parse_ballot(b) for b in raw_ballots]

        return validate_snapshot(data.get("roundId"), candidates, ballots)

    @staticmethod
    def _parse_candidate(raw: dict) -> Candidate:
        if not isinstance(raw, dict):
            raise ValueError(f"Candidate must be an object: {raw!r}")
        try:
            film_id = str(raw["id"])
        except (KeyError, TypeError):
            raise ValueError(f"Candidate without an id: {raw!r}") from None
        return Candidate(
            id=film_id,
            title=raw.get("title") or film_id,
            nominator=raw.get("addedBy", raw.get("nominator")),
        )

    @staticmethod
    def _parse_ballot(raw: dict) -> Ballot:
        if not isinstance(raw, dict):
            raise BallotValidationError(f"Ballot must be an object: {raw!r}")
        voter_id = raw.get("visitorId", raw.get("voterId"))
        votes = raw.get("votes")
        if not voter_id or not isinstance(votes, list):
            raise BallotValidationError(
                "Invalid ballot. Provide visitorId and votes array."
            )

        parsed_votes = []
        for vote in votes:
            if not isinstance(vote, dict):
                raise BallotValidationError("Each vote must have filmId and score")
            film_id = vote.get("filmId", vote.get("candidateId"))
            if not film_id or "score" not in vote:
                raise BallotValidationError("Each vote must have filmId and score")
            parsed_votes.append(Vote(candidate_id=str(film_id),
                                     score=parse_score(vote["score"])))

        return Ballot(
            voter_id=str(voter_id),
            votes=tuple(parsed_votes),
            submitted_at=parse_timestamp(raw.get("submittedAt")),
        )
