"""Shared fixtures for tally strategy tests."""

import pytest
from tests.conftest import make_ballots, make_candidates


@pytest.fixture
def clear_winner():
    """Dataset 1: Clear winner, 3 voters, 4 films.

         v1  v2  v3
    A     3   3   2
    B     2   1   3
    C     1   2   1
    D     0   0   0

    A beats everyone 2-1 or 3-0; order A, B, C, D.
    """
    return make_ballots({
        "v1": {"A": 3, "B": 2, "C": 1, "D": 0},
        "v2": {"A": 3, "B": 1, "C": 2, "D": 0},
        "v3": {"A": 2, "B": 3, "C": 1, "D": 0},
    }), make_candidates("A", "B", "C", "D")


@pytest.fixture
def rock_paper_scissors():
    """Dataset 2: Perfect cycle, 3 voters, 3 films.

         v1  v2  v3
    A     3   1   2
    B     2   3   1
    C     1   2   3

    A>B, B>C, C>A, each 2-1. Equal totals (6), so input order stands.
    """
    return make_ballots({
        "v1": {"A": 3, "B": 2, "C": 1},
        "v2": {"A": 1, "B": 3, "C": 2},
        "v3": {"A": 2, "B": 1, "C": 3},
    }), make_candidates("A", "B", "C")


@pytest.fixture
def cycle_with_totals():
    """Dataset 3: Same cycle as dataset 2, but totals differ.

         v1  v2  v3
    A     3   0   2   = 5
    B     2   3   1   = 6
    C     1   2   3   = 6

    Everyone is 1-1 head-to-head; B and C lead on total and keep input order.
    """
    return make_ballots({
        "v1": {"A": 3, "B": 2, "C": 1},
        "v2": {"A": 0, "B": 3, "C": 2},
        "v3": {"A": 2, "B": 1, "C": 3},
    }), make_candidates("A", "B", "C")


@pytest.fixture
def split_pair():
    """Dataset 4: Two films, one ballot each way and one tie.

         v1  v2  v3
    A     3   2   1
    B     1   2   3
    """
    return make_ballots({
        "v1": {"A": 3, "B": 1},
        "v2": {"A": 2, "B": 2},
        "v3": {"A": 1, "B": 3},
    }), make_candidates("A", "B")


@pytest.fixture
def sparse_ballots():
    """Dataset 5: Voters skip films, 4 voters, 3 films.

         v1  v2  v3  v4
    A     3   -   1   -
    B     -   2   2   3
    C     1   1   -   -
    """
    return make_ballots({
        "v1": {"A": 3, "C": 1},
        "v2": {"B": 2, "C": 1},
        "v3": {"A": 1, "B": 2},
        "v4": {"B": 3},
    }), make_candidates("A", "B", "C")


@pytest.fixture
def all_datasets(clear_winner, rock_paper_scissors, cycle_with_totals,
                 split_pair, sparse_ballots):
    return [clear_winner, rock_paper_scissors, cycle_with_totals,
            split_pair, sparse_ballots]
