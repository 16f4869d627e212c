"""Core data models for ballots, candidates and tally results."""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Self


@dataclass(frozen=True)
class Candidate:
    """A film standing in a voting round.

    Attributes:
        id: Film identifier (unique within a round)
        title: Display title
        nominator: Visitor who nominated the film, if known
    """
    id: str
    title: str
    nominator: str | None = None


@dataclass(frozen=True)
class Vote:
    """A single score given to one candidate (0 = lowest, 3 = highest)."""
    candidate_id: str
    score: int


@dataclass(frozen=True)
class Ballot:
    """All votes cast by one visitor in a round.

    A ballot may leave candidates out; an omitted candidate counts as a
    score of 0 on that ballot.

    Example:
        >>> ballot = Ballot(
        ...     voter_id="v1",
        ...     votes=(Vote("A", 3), Vote("B", 1)),
        ...     submitted_at=datetime(2026, 10, 17, 19, 30),
        ... )
        >>> ballot.score_for("A"), ballot.score_for("C")
        (3, 0)
    """
    voter_id: str
    votes: tuple[Vote, ...]
    submitted_at: datetime | None = None

    def score_for(self, candidate_id: str) -> int:
        """Get the score this ballot gives a candidate (0 if absent)."""
        for vote in self.votes:
            if vote.candidate_id == candidate_id:
                return vote.score
        return 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "visitorId": self.voter_id,
            "votes": [
                {"filmId": v.candidate_id, "score": v.score} for v in self.votes
            ],
            "submittedAt": (
                self.submitted_at.isoformat() if self.submitted_at else None
            ),
        }


@dataclass
class PairwiseComparison:
    """Head-to-head tally between two candidates.

    a_wins + b_wins + ties always equals the number of ballots.
    """
    candidate_a: str
    candidate_b: str
    a_wins: int = 0
    b_wins: int = 0
    ties: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "filmA": self.candidate_a,
            "filmB": self.candidate_b,
            "filmAWins": self.a_wins,
            "filmBWins": self.b_wins,
            "ties": self.ties,
        }


@dataclass
class Ranking:
    """A candidate's final position and the metrics behind it."""
    candidate_id: str
    rank: int
    total_score: int
    average_score: float
    pairwise_wins: int
    pairwise_losses: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "filmId": self.candidate_id,
            "rank": self.rank,
            "totalScore": self.total_score,
            "averageScore": self.average_score,
            "pairwiseWins": self.pairwise_wins,
            "pairwiseLosses": self.pairwise_losses,
        }


@dataclass
class TallyResult:
    """Result from a tally strategy.

    Attributes:
        winner_id: Rank-1 candidate, or None when no ballots were cast
        is_condorcet_winner: True if the winner beat every other candidate
            head-to-head
        rankings: Rankings ordered by rank (1 first)
        pairwise_comparisons: One entry per unordered candidate pair
        total_ballots: Number of ballots tallied
        algorithm_name: Human-readable name of the strategy
    """
    winner_id: str | None
    is_condorcet_winner: bool
    rankings: list[Ranking]
    pairwise_comparisons: list[PairwiseComparison]
    total_ballots: int
    algorithm_name: str

    def get_rank(self, candidate_id: str) -> int | None:
        """Get the 1-indexed rank for a candidate, or None if not found."""
        for r in self.rankings:
            if r.candidate_id == candidate_id:
                return r.rank
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON shape stored alongside a closed round."""
        return {
            "winner": self.winner_id,
            "condorcetWinner": self.is_condorcet_winner,
            "rankings": [r.to_dict() for r in self.rankings],
            "pairwiseComparisons": [c.to_dict() for c in self.pairwise_comparisons],
            "totalBallots": self.total_ballots,
            "algorithm": self.algorithm_name,
        }


@dataclass(frozen=True)
class RoundSnapshot:
    """Point-in-time read of a round's candidates and ballots."""
    round_id: str | None
    candidates: tuple[Candidate, ...]
    ballots: tuple[Ballot, ...]

    @property
    def num_candidates(self) -> int:
        return len(self.candidates)

    @property
    def num_ballots(self) -> int:
        return len(self.ballots)


@dataclass(frozen=True)
class Film:
    """A nominated or watched film."""
    id: str
    title: str
    added_by: str
    added_at: datetime
    status: str = "nominated"  # "nominated" | "watched"
    watched_at: datetime | None = None

    def to_candidate(self) -> Candidate:
        return Candidate(id=self.id, title=self.title, nominator=self.added_by)

    def with_status(self, status: str, watched_at: datetime | None) -> Self:
        return replace(self, status=status, watched_at=watched_at)


@dataclass
class VotingRound:
    """One weekly voting round.

    Attributes:
        id: Round identifier
        status: "open" or "closed"
        opened_at: When voting opened
        closes_at: Scheduled close time
        candidate_count: Number of nominated films when the round opened
        closed_at: Actual close time (closed rounds only)
        winner_id: Winning film id (closed rounds only)
        is_condorcet_winner: Whether the winner was a Condorcet winner
        total_ballots: Ballots counted at close
    """
    id: str
    status: str
    opened_at: datetime
    closes_at: datetime
    candidate_count: int
    closed_at: datetime | None = None
    winner_id: str | None = None
    is_condorcet_winner: bool = False
    total_ballots: int = 0

    @property
    def is_open(self) -> bool:
        return self.status == "open"
