"""Online log template mining with the Drain algorithm, with masking and Redis storage."""

__version__ = "0.1.0"

__all__ = ["cli", "cluster", "drain", "errors", "masking", "miner", "persistence", "tokens"]