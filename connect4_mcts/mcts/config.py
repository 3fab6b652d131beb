"""
Configuration for Monte Carlo Tree Search (MCTS).

This module defines the configuration parameters for the MCTS engine:
the iteration and wall-clock budgets, the UCT exploration constant, the
random seed and whether the search tree is kept between moves.
"""
from dataclasses import dataclass, fields
from typing import Optional

from connect4_mcts.core.constants import (
    DEFAULT_MCTS_ITERATIONS, DEFAULT_UCT_CONSTANT, DEFAULT_TIME_LIMIT
)


@dataclass
class MCTSConfig:
    """
    Configuration parameters for Monte Carlo Tree Search.

    At least one of ``iterations`` and ``time_limit`` must be set. When
    both are set the search stops at whichever is reached first.
    """
    # Budget
    iterations: Optional[int] = DEFAULT_MCTS_ITERATIONS
    """Number of MCTS iterations per move (None = bounded by time only)"""

    time_limit: Optional[float] = None
    """Optional time limit in seconds (None = bounded by iterations only)"""

    # Search parameters
    exploration_weight: float = DEFAULT_UCT_CONSTANT
    """UCT exploration constant"""

    seed: Optional[int] = None
    """Seed for the rollout random number generator (None = system entropy)"""

    # Tree reuse
    reuse_tree: bool = True
    """Keep the search tree between moves"""

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.iterations is None and self.time_limit is None:
            raise ValueError("at least one of iterations and time_limit must be set")

        if self.iterations is not None and self.iterations <= 0:
            raise ValueError("iterations must be positive or None")

        if self.time_limit is not None and self.time_limit <= 0:
            raise ValueError("time_limit must be positive or None")

        if self.exploration_weight < 0:
            raise ValueError("exploration_weight must not be negative")

    @classmethod
    def default(cls) -> 'MCTSConfig':
        """
        Get the default configuration.

        Returns:
            Default MCTSConfig object
        """
        return cls()

    @classmethod
    def fast(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for speed (fewer iterations).

        Returns:
            Fast MCTSConfig object
        """
        return cls(iterations=1000)

    @classmethod
    def deep(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for deep search.

        Returns:
            Deep MCTSConfig object
        """
        return cls(iterations=50_000)

    @classmethod
    def timed(cls, seconds: float = DEFAULT_TIME_LIMIT) -> 'MCTSConfig':
        """
        Get a configuration bounded only by wall-clock time.

        Args:
            seconds: Time budget per move

        Returns:
            Timed MCTSConfig object
        """
        return cls(iterations=None, time_limit=seconds)

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'MCTSConfig':
        """
        Create a configuration from a dictionary.

        Args:
            config_dict: Dictionary of configuration parameters

        Returns:
            MCTSConfig object
        """
        # Filter out any keys that aren't valid parameters
        names = {f.name for f in fields(cls)}
        valid_params = {k: v for k, v in config_dict.items() if k in names}
        return cls(**valid_params)

    def to_dict(self) -> dict:
        """
        Convert the configuration to a dictionary.

        Returns:
            Dictionary of configuration parameters
        """
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def __str__(self) -> str:
        params = [f"{name}={value}" for name, value in self.to_dict().items()]
        return f"MCTSConfig({', '.join(params)})"
