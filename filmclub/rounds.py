"""Opening and closing weekly voting rounds."""

import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone

from filmclub.config import ClubConfig
from filmclub.films import mark_film_as_watched
from filmclub.history import HistoryRecord, build_history_record
from filmclub.models import Ballot, Film, RoundSnapshot, TallyResult, VotingRound
from filmclub.tally import resolve_strategy, tally_snapshot

logger = logging.getLogger(__name__)


class RoundStateError(RuntimeError):
    """Raised when a round is not in the state an operation needs."""
    pass


@dataclass
class ClosedRound:
    """Everything that changes when a round closes.

    Attributes:
        round: The round, now closed, with winner and ballot count set
        result: Normalised tally result to store with the round
        films: All films, with the winner marked as watched
        history: Denormalised record for the history page
    """
    round: VotingRound
    result: TallyResult
    films: list[Film]
    history: HistoryRecord


def _sunday_first_weekday(moment: datetime) -> int:
    # datetime.weekday() is 0 = Monday; the club schedule uses 0 = Sunday
    return (moment.weekday() + 1) % 7


def next_close_time(start: datetime, close_day: int, close_time: str) -> datetime:
    """Next occurrence of `close_day` at `close_time` strictly after `start`.

    Args:
        start: Moment to count from (its tzinfo is kept)
        close_day: 0 = Sunday ... 6 = Saturday
        close_time: "HH:mm"
    """
    hours, minutes = (int(part) for part in close_time.split(":"))
    result = start.replace(hour=hours, minute=minutes, second=0, microsecond=0)

    days_until_close = close_day - _sunday_first_weekday(start)
    # Earlier in the week, or later today than the close time: next week
    if days_until_close < 0 or (days_until_close == 0 and result <= start):
        days_until_close += 7

    return result + timedelta(days=days_until_close)


def open_round(
    films: Sequence[Film],
    config: ClubConfig,
    existing_rounds: Sequence[VotingRound] = (),
    now: datetime | None = None,
    round_id: str | None = None,
) -> VotingRound | None:
    """Open a new round over the currently nominated films.

    Returns:
        The new round, or None if a round is already open or nothing is
        nominated
    """
    if any(r.is_open for r in existing_rounds):
        logger.info("Voting round already open. Skipping.")
        return None

    candidate_count = sum(1 for f in films if f.status == "nominated")
    if candidate_count == 0:
        logger.info("No nominated films. Skipping voting round.")
        return None

    now = now or datetime.now(timezone.utc)
    schedule = config.voting_schedule
    voting_round = VotingRound(
        id=round_id or f"round-{uuid.uuid4().hex}",
        status="open",
        opened_at=now,
        closes_at=next_close_time(now, schedule.close_day, schedule.close_time),
        candidate_count=candidate_count,
    )
    logger.info("Voting round opened: %s (closes at %s, %d films)",
                voting_round.id, voting_round.closes_at.isoformat(), candidate_count)
    return voting_round


def close_round(
    voting_round: VotingRound,
    ballots: Sequence[Ballot],
    films: Sequence[Film],
    now: datetime | None = None,
    algorithm: str | None = None,
) -> ClosedRound:
    """Tally a round, mark the winner watched and build its history record.

    Candidates are the films still nominated at close time. Ballot scores
    for films that are no longer nominated are ignored by the tally.

    Raises:
        RoundStateError: If the round is not open
        TallyError: If the algorithm is unknown
    """
    if not voting_round.is_open:
        raise RoundStateError(f"Voting round {voting_round.id} is not open")

    now = now or datetime.now(timezone.utc)
    candidates = tuple(f.to_candidate() for f in films if f.status == "nominated")
    logger.info("Closing voting round %s: %d ballots, %d candidates",
                voting_round.id, len(ballots), len(candidates))

    if candidates:
        snapshot = RoundSnapshot(voting_round.id, candidates, tuple(ballots))
        result = tally_snapshot(snapshot, algorithm).result
    else:
        # Every film was withdrawn mid-round; close without a winner
        logger.warning("Voting round %s has no nominated films left", voting_round.id)
        strategy = resolve_strategy(algorithm)
        result = strategy.compute_result(tuple(ballots), ())

    updated_films = []
    for film in films:
        if film.id == result.winner_id:
            film = mark_film_as_watched(film, now)
            logger.info('Marked "%s" as watched', film.title)
        updated_films.append(film)

    closed = replace(
        voting_round,
        status="closed",
        closed_at=now,
        winner_id=result.winner_id,
        is_condorcet_winner=result.is_condorcet_winner,
        total_ballots=result.total_ballots,
    )

    return ClosedRound(
        round=closed,
        result=result,
        films=updated_films,
        history=build_history_record(closed, result, list(films), archived_at=now),
    )
