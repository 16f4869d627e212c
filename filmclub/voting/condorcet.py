"""Condorcet (pairwise majority) tally."""

import logging
from collections.abc import Sequence

from filmclub.models import Ballot, Candidate, PairwiseComparison, Ranking, TallyResult
from filmclub.voting import register_tally_strategy
from filmclub.voting.base import TallyStrategy

logger = logging.getLogger(__name__)


@register_tally_strategy
class CondorcetTally(TallyStrategy):
    """Condorcet method over 0-3 score ballots.

    Every pair of films is compared head-to-head: a ballot prefers A over B
    if it scores A higher. The film preferred by more ballots wins the
    pair. A film that wins every pair is the Condorcet winner.

    Algorithm:
    1. For each pair (A, B), in candidate order, count ballots preferring
       A, preferring B, and scoring them equally (missing vote = 0)
    2. Award a pairwise win to the side with more ballot preferences;
       an even split awards nothing
    3. Rank by pairwise wins, then by total score (descending)
    4. If wins and total score both tie, the candidate order is kept

    Step 3's total-score tiebreak is what resolves Condorcet paradoxes
    (cycles where no film beats all others).

    Complexity: O(n² · b) for n candidates and b ballots.
    """

    key = "condorcet"

    @property
    def name(self) -> str:
        return "Condorcet"

    @property
    def description(self) -> str:
        return (
            "Selects the film that would beat every other film in head-to-head "
            "comparisons. Uses total score as tiebreaker if no clear winner exists."
        )

    def compute_result(
        self, ballots: Sequence[Ballot], candidates: Sequence[Candidate]
    ) -> TallyResult:
        if not ballots:
            return TallyResult(
                winner_id=None,
                is_condorcet_winner=False,
                rankings=[],
                pairwise_comparisons=[],
                total_ballots=0,
                algorithm_name=self.name,
            )

        num_ballots = len(ballots)
        candidate_ids = [c.id for c in candidates]

        # Score table: one row per ballot, absent votes filled with 0.
        # Votes for films outside the candidate list are never looked up.
        scores = [
            {cid: ballot.score_for(cid) for cid in candidate_ids}
            for ballot in ballots
        ]
        totals = {cid: sum(row[cid] for row in scores) for cid in candidate_ids}

        if len(candidates) == 1:
            only = candidate_ids[0]
            return TallyResult(
                winner_id=only,
                is_condorcet_winner=True,
                rankings=[
                    Ranking(
                        candidate_id=only,
                        rank=1,
                        total_score=totals[only],
                        average_score=totals[only] / num_ballots,
                        pairwise_wins=0,
                        pairwise_losses=0,
                    )
                ],
                pairwise_comparisons=[],
                total_ballots=num_ballots,
                algorithm_name=self.name,
            )

        comparisons = self._pairwise_comparisons(candidate_ids, scores)
        wins, losses = self._pairwise_records(candidate_ids, comparisons)

        rankings = [
            Ranking(
                candidate_id=cid,
                rank=0,  # assigned after sorting
                total_score=totals[cid],
                average_score=totals[cid] / num_ballots,
                pairwise_wins=wins[cid],
                pairwise_losses=losses[cid],
            )
            for cid in candidate_ids
        ]

        # sorted() stays stable with reverse=True, so full ties keep candidate order
        rankings = sorted(
            rankings,
            key=lambda r: (r.pairwise_wins, r.total_score),
            reverse=True,
        )
        for position, ranking in enumerate(rankings):
            ranking.rank = position + 1

        if not rankings:
            logger.debug("No candidates to rank across %d ballots", num_ballots)
            return TallyResult(
                winner_id=None,
                is_condorcet_winner=False,
                rankings=[],
                pairwise_comparisons=[],
                total_ballots=num_ballots,
                algorithm_name=self.name,
            )

        top = rankings[0]
        is_condorcet_winner = top.pairwise_wins == len(candidate_ids) - 1
        logger.debug(
            "Tallied %d ballots over %d candidates: winner=%s condorcet=%s",
            num_ballots, len(candidate_ids), top.candidate_id, is_condorcet_winner,
        )

        return TallyResult(
            winner_id=top.candidate_id,
            is_condorcet_winner=is_condorcet_winner,
            rankings=rankings,
            pairwise_comparisons=comparisons,
            total_ballots=num_ballots,
            algorithm_name=self.name,
        )

    @staticmethod
    def _pairwise_comparisons(
        candidate_ids: list[str], scores: list[dict[str, int]]
    ) -> list[PairwiseComparison]:
        """Compare every pair (i < j) across all ballots."""
        comparisons = []
        for i, film_a in enumerate(candidate_ids):
            for film_b in candidate_ids[i + 1:]:
                comparison = PairwiseComparison(candidate_a=film_a, candidate_b=film_b)
                for row in scores:
                    if row[film_a] > row[film_b]:
                        comparison.a_wins += 1
                    elif row[film_b] > row[film_a]:
                        comparison.b_wins += 1
                    else:
                        comparison.ties += 1
                comparisons.append(comparison)
        return comparisons

    @staticmethod
    def _pairwise_records(
        candidate_ids: list[str], comparisons: list[PairwiseComparison]
    ) -> tuple[dict[str, int], dict[str, int]]:
        """Count head-to-head victories and defeats per candidate."""
        wins = {cid: 0 for cid in candidate_ids}
        losses = {cid: 0 for cid in candidate_ids}
        for c in comparisons:
            if c.a_wins > c.b_wins:
                wins[c.candidate_a] += 1
                losses[c.candidate_b] += 1
            elif c.b_wins > c.a_wins:
                wins[c.candidate_b] += 1
                losses[c.candidate_a] += 1
            # An even split is neither a win nor a loss
        return wins, losses
