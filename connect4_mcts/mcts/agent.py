"""
Monte Carlo Tree Search Agent for Connect-Four.

This module provides the MCTSAgent class, which keeps one search tree
alive across the moves of a game. After every real move the agent moves
its root to the matching child so that statistics gathered by earlier
searches keep paying off, and it falls back to a fresh tree when the
game reaches a position the tree never saw.
"""
from typing import Dict, List, NamedTuple, Optional, Tuple, Any
import logging
import random

from connect4_mcts.core.bitboard import State
from connect4_mcts.core.moves import move_column
from connect4_mcts.mcts.node import GameTree
from connect4_mcts.mcts.config import MCTSConfig
from connect4_mcts.mcts.search import mcts_search, get_principal_variation

LOGGER = logging.getLogger(__name__)


class SearchResult(NamedTuple):
    """Outcome of one engine move."""
    state: State
    """State after the chosen move"""
    value: float
    """Average outcome of the move for the engine: 0 loss, 1 even, 2 win"""
    index: int
    """Index of the chosen node, which is now the tree's root"""
    column: int
    """Column the engine played"""


class MCTSAgent:
    """
    Monte Carlo Tree Search agent for playing Connect-Four.

    The agent owns its random number generator; pass ``rng`` to control
    the simulations (for instance with a seeded or scripted generator in
    tests), otherwise one is seeded from ``config.seed``.
    """

    def __init__(
        self,
        config: Optional[MCTSConfig] = None,
        name: str = "MCTS Agent",
        verbose: bool = False,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize an MCTS agent.

        Args:
            config: MCTS configuration parameters
            name: Name of the agent
            verbose: Whether to print a summary after each search
            rng: Random source for the simulations
        """
        self.config = config or MCTSConfig()
        self.name = name
        self.verbose = verbose
        self.rng = rng if rng is not None else random.Random(self.config.seed)

        # Search tree carried over between moves
        self.tree: Optional[GameTree] = None

        # Statistics from the most recent search
        self.last_stats: Dict[str, Any] = {}

        # History of all moves and their statistics
        self.move_history: List[Tuple[int, Dict[str, Any]]] = []

    def select_move(self, state: State) -> SearchResult:
        """
        Search from a position and play the best move.

        The chosen child becomes the root of the tree.

        Args:
            state: Current position, with the engine to move

        Returns:
            SearchResult for the chosen move

        Raises:
            RuntimeError: If the position is already decided
        """
        reused = self._prepare_root(state)
        root_state = self.tree.root_state

        best, stats = mcts_search(self.tree, self.config, self.rng)
        node = self.tree[best]
        result = SearchResult(
            state=node.state,
            value=node.value,
            index=best,
            column=move_column(root_state, node.state),
        )

        stats["reused_tree"] = reused
        stats["principal_variation"] = get_principal_variation(self.tree)
        self.last_stats = stats
        self.move_history.append((result.column, stats))

        self.tree.set_root(best)

        if self.verbose:
            self._print_search_info(result, stats)

        return result

    def observe(self, state: State) -> bool:
        """
        Follow an opponent move in the search tree.

        Args:
            state: Position after the opponent's move

        Returns:
            True if the position was already in the tree and its statistics
            were kept, False if the tree had to be rebuilt
        """
        if self.tree is None:
            return False
        if not self.config.reuse_tree:
            self.tree = None
            return False

        child = self.tree.find_child(self.tree.root, state)
        if child is not None:
            self.tree.set_root(child)
            return True

        LOGGER.info("Opponent reached an unexplored position; rebuilding the search tree")
        self.tree = GameTree(state)
        return False

    def _prepare_root(self, state: State) -> bool:
        """
        Make sure the tree is rooted at ``state``.

        Returns:
            True if existing statistics were kept
        """
        if self.config.reuse_tree and self.tree is not None:
            if self.tree.root_state == state:
                return self.tree.root_node.visits > 0
            # the caller skipped observe(); the position may still be a child
            return self.observe(state)
        self.tree = GameTree(state)
        return False

    def reset(self) -> None:
        """Drop the search tree and all statistics."""
        self.tree = None
        self.last_stats = {}
        self.move_history = []

    def _print_search_info(self, result: SearchResult, stats: Dict[str, Any]) -> None:
        """
        Print information about the search.

        Args:
            result: Selected move
            stats: Search statistics
        """
        print(f"\n{self.name} plays column {result.column} (value {result.value:.3f})")
        print(f"Iterations: {stats['iterations']}")
        print(f"Time: {stats['time_elapsed']:.3f}s ({stats['iterations_per_second']:.1f} it/s)")
        print(f"Nodes: {stats['node_count']}, max depth: {stats['max_depth']}")

        print("\nColumns:")
        for column, action in sorted(stats["actions"].items()):
            print(f"  {column}: {action['visits']} visits, {action['value']:.3f} value")

    def __str__(self) -> str:
        if self.config.iterations is None:
            budget = f"{self.config.time_limit}s"
        else:
            budget = f"{self.config.iterations} iterations"
        return f"{self.name} (MCTS, {budget})"


class MCTSAgentFactory:
    """
    Factory for creating MCTS agents of different strengths.
    """

    @staticmethod
    def create_fast() -> MCTSAgent:
        return MCTSAgent(config=MCTSConfig.fast(), name="Fast MCTS")

    @staticmethod
    def create_standard() -> MCTSAgent:
        return MCTSAgent(config=MCTSConfig.default(), name="Standard MCTS")

    @staticmethod
    def create_strong() -> MCTSAgent:
        return MCTSAgent(config=MCTSConfig.deep(), name="Strong MCTS")

    @staticmethod
    def create_timed(seconds: float) -> MCTSAgent:
        return MCTSAgent(config=MCTSConfig.timed(seconds), name=f"Timed MCTS ({seconds}s)")

    @staticmethod
    def create_custom(
        iterations: Optional[int] = 10_000,
        time_limit: Optional[float] = None,
        exploration_weight: float = 2.0,
        seed: Optional[int] = None,
        reuse_tree: bool = True,
        name: str = "Custom MCTS"
    ) -> MCTSAgent:
        """
        Create a custom MCTS agent.

        Args:
            iterations: Number of MCTS iterations per move
            time_limit: Optional time limit in seconds
            exploration_weight: UCT exploration constant
            seed: Seed for the simulations
            reuse_tree: Keep the search tree between moves
            name: Name of the agent

        Returns:
            MCTSAgent
        """
        config = MCTSConfig(
            iterations=iterations,
            time_limit=time_limit,
            exploration_weight=exploration_weight,
            seed=seed,
            reuse_tree=reuse_tree,
        )
        return MCTSAgent(config=config, name=name)
