"""Voting history: closed rounds with film details embedded for display."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from filmclub.config import get_settings
from filmclub.models import Film, PairwiseComparison, Ranking, TallyResult, VotingRound

UNKNOWN_TITLE = "Unknown Film"
UNKNOWN_NOMINATOR = "Unknown"


@dataclass
class HistoryRanking:
    """A ranking joined with the film's title and nominator."""
    ranking: Ranking
    title: str
    nominated_by: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = self.ranking.to_dict()
        data["title"] = self.title
        if self.nominated_by is not None:
            data["nominatedBy"] = self.nominated_by
        return data


@dataclass
class HistoryRecord:
    """Archived result of one closed round.

    Unlike TallyResult, this is denormalised: winner and rankings carry the
    film titles so the history page needs no further lookups.
    """
    round_id: str
    opened_at: datetime
    closed_at: datetime | None
    total_ballots: int
    candidate_count: int
    winner: dict[str, str] | None
    is_condorcet_winner: bool
    algorithm_name: str
    rankings: list[HistoryRanking]
    pairwise_comparisons: list[PairwiseComparison]
    archived_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "roundId": self.round_id,
            "openedAt": self.opened_at.isoformat(),
            "closedAt": self.closed_at.isoformat() if self.closed_at else None,
            "totalBallots": self.total_ballots,
            "candidateCount": self.candidate_count,
            "winner": self.winner,
            "condorcetWinner": self.is_condorcet_winner,
            "algorithm": self.algorithm_name,
            "rankings": [r.to_dict() for r in self.rankings],
            "pairwiseComparisons": [c.to_dict() for c in self.pairwise_comparisons],
            "archivedAt": self.archived_at.isoformat(),
        }


def build_history_record(
    voting_round: VotingRound,
    result: TallyResult,
    films: list[Film],
    archived_at: datetime | None = None,
) -> HistoryRecord:
    """Join film details onto a round's result for archiving.

    Films missing from `films` (deleted since the round closed) are shown
    as "Unknown Film".
    """
    films_by_id = {f.id: f for f in films}

    rankings = []
    for ranking in result.rankings:
        film = films_by_id.get(ranking.candidate_id)
        rankings.append(HistoryRanking(
            ranking=ranking,
            title=film.title if film else UNKNOWN_TITLE,
            nominated_by=film.added_by if film else None,
        ))

    winner = None
    if result.winner_id:
        film = films_by_id.get(result.winner_id)
        winner = {
            "filmId": result.winner_id,
            "title": film.title if film else UNKNOWN_TITLE,
            "nominatedBy": film.added_by if film else UNKNOWN_NOMINATOR,
        }

    return HistoryRecord(
        round_id=voting_round.id,
        opened_at=voting_round.opened_at,
        closed_at=voting_round.closed_at,
        total_ballots=result.total_ballots,
        candidate_count=voting_round.candidate_count,
        winner=winner,
        is_condorcet_winner=result.is_condorcet_winner,
        algorithm_name=result.algorithm_name,
        rankings=rankings,
        pairwise_comparisons=result.pairwise_comparisons,
        archived_at=archived_at or datetime.now(timezone.utc),
    )


def get_voting_history(
    records: list[HistoryRecord], limit: int | None = None
) -> list[HistoryRecord]:
    """Most recently closed first, at most `limit` records (default from settings)."""
    if limit is None:
        limit = get_settings().history_limit
    ordered = sorted(
        records,
        key=lambda r: r.closed_at or r.opened_at,
        reverse=True,
    )
    return ordered[:limit]
