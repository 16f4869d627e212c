"""Abstract base class for snapshot parsers, plus shared validation."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime, timezone

from filmclub.models import Ballot, Candidate, RoundSnapshot

logger = logging.getLogger(__name__)

MIN_SCORE = 0
MAX_SCORE = 3


class BallotValidationError(ValueError):
    """Raised when an exported round contains ballots the tally cannot accept.

    Covers out-of-range scores, votes for films that are not standing in the
    round, and duplicate candidates.
    """
    pass


class SnapshotParser(ABC):
    """Abstract base class for parsing exported voting rounds.

    Each parser handles one export format. Parsers are registered via the
    @register_parser decorator in filmclub/parsers/__init__.py.
    """

    @abstractmethod
    def can_parse(self, source: str) -> bool:
        """Check if this parser can handle the given source.

        Args:
            source: URL or filename to check

        Returns:
            True if this parser can handle the source, False otherwise
        """
        pass

    def can_parse_content(self, content: bytes, filename: str) -> bool:
        """Check if this parser can handle the given file content.

        Used when the source name gives nothing away (uploads, bare URLs).
        """
        return False

    @abstractmethod
    def parse(self, source: str, content: bytes) -> RoundSnapshot:
        """Parse the content into a validated RoundSnapshot.

        Raises:
            BallotValidationError: If ballots break the voting rules
            ValueError: If the content cannot be parsed
        """
        pass


def parse_timestamp(value) -> datetime | None:
    """Parse an ISO-8601 string or a Firestore {_seconds, _nanoseconds} dict."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, dict):
        seconds = value.get("_seconds", value.get("seconds"))
        if seconds is None:
            raise ValueError(f"Unrecognised timestamp: {value!r}")
        nanos = value.get("_nanoseconds", value.get("nanoseconds", 0))
        return datetime.fromtimestamp(seconds + nanos / 1e9, tz=timezone.utc)
    if isinstance(value, str):
        # fromisoformat() accepts a trailing "Z" from Python 3.11
        return datetime.fromisoformat(value)
    raise ValueError(f"Unrecognised timestamp: {value!r}")


def parse_score(value) -> int:
    """Convert a raw score to int, rejecting anything outside 0-3."""
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise BallotValidationError(f"Invalid score: {value!r}")
    try:
        score = int(value)
    except (TypeError, ValueError):
        raise BallotValidationError(f"Invalid score: {value!r}") from None
    if not MIN_SCORE <= score <= MAX_SCORE:
        raise BallotValidationError(
            f"Vote scores must be between {MIN_SCORE} and {MAX_SCORE} (got {score})"
        )
    return score


def _sort_key(ballot: Ballot) -> datetime:
    submitted = ballot.submitted_at
    if submitted is None:
        return datetime.min.replace(tzinfo=timezone.utc)
    if submitted.tzinfo is None:
        return submitted.replace(tzinfo=timezone.utc)
    return submitted


def validate_snapshot(
    round_id: str | None,
    candidates: Iterable[Candidate],
    ballots: Iterable[Ballot],
) -> RoundSnapshot:
    """Check ballots against the voting rules and build a snapshot.

    A voter who resubmitted keeps only their latest ballot. Ballot order
    otherwise follows the export.

    Raises:
        BallotValidationError: On duplicate candidates, votes for unknown
            films, or scores outside 0-3
    """
    candidates = tuple(candidates)
    candidate_ids = set()
    for candidate in candidates:
        if candidate.id in candidate_ids:
            raise BallotValidationError(f"Duplicate candidate: {candidate.id}")
        candidate_ids.add(candidate.id)

    latest: dict[str, Ballot] = {}
    for ballot in ballots:
        for vote in ballot.votes:
            if vote.candidate_id not in candidate_ids:
                raise BallotValidationError(
                    f"Ballot from {ballot.voter_id} votes for unknown film "
                    f"{vote.candidate_id}"
                )
            if not MIN_SCORE <= vote.score <= MAX_SCORE:
                raise BallotValidationError(
                    f"Vote scores must be between {MIN_SCORE} and {MAX_SCORE} "
                    f"(got {vote.score})"
                )

        previous = latest.get(ballot.voter_id)
        if previous is not None:
            logger.info("Voter %s submitted more than once; keeping latest ballot",
                        ballot.voter_id)
            if _sort_key(ballot) < _sort_key(previous):
                continue
        latest[ballot.voter_id] = ballot

    return RoundSnapshot(
        round_id=round_id,
        candidates=candidates,
        ballots=tuple(latest.values()),
    )
