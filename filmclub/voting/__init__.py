"""Tally strategies for turning ballots into a ranked result."""

from .base import TallyStrategy

# Strategy registry - keyed by lower-cased TallyStrategy.key
_strategies: dict[str, type[TallyStrategy]] = {}

DEFAULT_STRATEGY = "condorcet"


class UnknownStrategyError(KeyError):
    """Raised when no tally strategy is registered under a name."""

    def __str__(self) -> str:
        return f"Unknown voting algorithm: {self.args[0]}"


def register_tally_strategy(strategy_class: type[TallyStrategy]) -> type[TallyStrategy]:
    """Decorator to register a tally strategy class under its key."""
    _strategies[strategy_class.key.lower()] = strategy_class
    return strategy_class


def get_strategy(name: str) -> TallyStrategy:
    """Return an instance of the strategy registered under `name`.

    Lookup is case-insensitive.

    Raises:
        UnknownStrategyError: If no strategy has that name
    """
    try:
        strategy_class = _strategies[name.lower()]
    except KeyError:
        raise UnknownStrategyError(name) from None
    return strategy_class()


def get_default_strategy() -> TallyStrategy:
    """Return the default strategy (Condorcet)."""
    return get_strategy(DEFAULT_STRATEGY)


def list_strategies() -> list[str]:
    """Return the keys of all registered strategies."""
    return list(_strategies)


# Import built-in strategies so they register themselves
from . import condorcet  # noqa: E402, F401
