"""Shared test helpers."""

from datetime import datetime, timedelta

from filmclub.models import Ballot, Candidate, TallyResult, Vote

BASE_TIME = datetime(2026, 10, 17, 19, 0)


def make_candidates(*ids: str) -> list[Candidate]:
    """Build candidates titled after their ids ("A" -> "Film A")."""
    return [Candidate(id=i, title=f"Film {i}") for i in ids]


def make_ballots(score_table: dict[str, dict[str, int]]) -> list[Ballot]:
    """Build ballots from a compact score table.

    Args:
        score_table: {voter_id: {candidate_id: score}}; a candidate left out
            of a voter's dict is an omitted vote

    Returns:
        Ballots in table order, submitted a minute apart.
    """
    return [
        Ballot(
            voter_id=voter,
            votes=tuple(Vote(cid, score) for cid, score in scores.items()),
            submitted_at=BASE_TIME + timedelta(minutes=n),
        )
        for n, (voter, scores) in enumerate(score_table.items())
    ]


def ranking_ids(result: TallyResult) -> list[str]:
    """Candidate ids in rank order."""
    return [r.candidate_id for r in result.rankings]
