"""Abstract base class for tally strategies."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from filmclub.models import Ballot, Candidate, TallyResult


class TallyStrategy(ABC):
    """Abstract base class for tally strategies.

    Each strategy computes a ranked result from a snapshot of ballots and
    candidates. Strategies are registered via the @register_tally_strategy
    decorator in filmclub/voting/__init__.py and looked up by `key`.

    Implementations must be pure: the same ballots and candidates, in the
    same order, always produce the same result.
    """

    #: Registry key used by get_strategy()
    key: str = ""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of this strategy."""
        pass

    @property
    def description(self) -> str:
        """Optional description of how this strategy works."""
        return ""

    @abstractmethod
    def compute_result(
        self, ballots: Sequence[Ballot], candidates: Sequence[Candidate]
    ) -> TallyResult:
        """Compute the ranked result for a round.

        Args:
            ballots: One ballot per voter; order does not matter
            candidates: Films standing in the round; order breaks exact ties

        Returns:
            TallyResult with rankings and pairwise comparisons
        """
        pass
