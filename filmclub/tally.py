"""Orchestrator: parse a round export and run a tally strategy on it."""

import logging
from dataclasses import dataclass
from typing import Any

from filmclub.config import get_settings
from filmclub.models import RoundSnapshot, TallyResult
from filmclub.parsers import detect_parser, detect_parser_by_content, get_supported_formats
from filmclub.parsers.base import BallotValidationError
from filmclub.voting import UnknownStrategyError, get_strategy
from filmclub.voting.base import TallyStrategy

logger = logging.getLogger(__name__)


@dataclass
class RoundTally:
    """A snapshot together with the result computed from it."""
    snapshot: RoundSnapshot
    result: TallyResult

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "roundId": self.snapshot.round_id,
            "candidates": [
                {"id": c.id, "title": c.title, "addedBy": c.nominator}
                for c in self.snapshot.candidates
            ],
            "numCandidates": self.snapshot.num_candidates,
            "numBallots": self.snapshot.num_ballots,
            "results": self.result.to_dict(),
        }


class TallyError(Exception):
    """Error while tallying a round; the message is safe to show users."""
    pass


def resolve_strategy(algorithm: str | None = None) -> TallyStrategy:
    """Look up a strategy by name, falling back to the configured default.

    Raises:
        TallyError: If the name is not a string or no strategy has it
    """
    name = algorithm or get_settings().algorithm
    if not isinstance(name, str):
        raise TallyError(f"Unknown voting algorithm: {name!r}")
    try:
        return get_strategy(name)
    except UnknownStrategyError as e:
        raise TallyError(str(e)) from e


def tally_snapshot(snapshot: RoundSnapshot, algorithm: str | None = None) -> RoundTally:
    """Run a tally strategy over a validated snapshot.

    Args:
        snapshot: Candidates and ballots for the round
        algorithm: Strategy name; defaults to the configured one

    Raises:
        TallyError: If the round has no candidates or the strategy is unknown
    """
    if snapshot.num_candidates == 0:
        raise TallyError("There are no nominated films to tally.")

    strategy = resolve_strategy(algorithm)

    result = strategy.compute_result(snapshot.ballots, snapshot.candidates)
    logger.info(
        "Round %s: %d ballots, winner=%s, condorcet=%s",
        snapshot.round_id, result.total_ballots, result.winner_id or "None",
        result.is_condorcet_winner,
    )
    return RoundTally(snapshot=snapshot, result=result)


def tally_round(source: str, content: bytes, algorithm: str | None = None) -> RoundTally:
    """Parse a round export and tally it.

    Args:
        source: URL or filename (used to detect the appropriate parser)
        content: Raw bytes of the export

    Returns:
        RoundTally with the parsed snapshot and the result

    Raises:
        TallyError: If no parser is found, the ballots are invalid, or
            parsing fails
    """
    # Find appropriate parser: try source matching first, then content detection
    parser = detect_parser(source)
    if parser is None:
        parser = detect_parser_by_content(content, source)
    if parser is None:
        raise TallyError(
            f"We couldn't determine the export format.\n\n{get_supported_formats()}"
        )

    try:
        snapshot = parser.parse(source, content)
    except BallotValidationError as e:
        raise TallyError(str(e)) from e
    except Exception as e:
        raise TallyError(f"Failed to parse ballots: {e}") from e

    return tally_snapshot(snapshot, algorithm)
