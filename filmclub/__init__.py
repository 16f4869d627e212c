"""Film club voting: ballots in, ranked Condorcet results out."""
