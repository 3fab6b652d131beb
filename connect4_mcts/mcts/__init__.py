"""
Monte Carlo Tree Search (MCTS) implementation for Connect-Four.

The MCTS algorithm works by:

1. Selection: Starting from the root node, descend through fully expanded
   nodes by UCT value.
2. Expansion: Create a child node for the next untried move.
3. Simulation: From the new node, play random moves to the end of the game.
4. Backpropagation: Update the statistics of all nodes on the path with the result.

The tree lives in an index-addressed arena (GameTree) so that the agent can
keep it between moves and continue searching below the position actually
reached.
"""

from connect4_mcts.mcts.node import Node, GameTree
from connect4_mcts.mcts.agent import MCTSAgent, MCTSAgentFactory, SearchResult
from connect4_mcts.mcts.search import (
    mcts_search,
    run_iteration,
    select_node,
    expand_node,
    simulate_game,
    backpropagate,
    best_child,
    uct_value
)
from connect4_mcts.mcts.config import MCTSConfig

# Default configuration
DEFAULT_CONFIG = MCTSConfig(
    iterations=10_000,        # Number of MCTS iterations per move
    exploration_weight=2.0,   # UCT exploration constant
    time_limit=None,          # Optional time limit in seconds (None = no limit)
    reuse_tree=True           # Keep the search tree between moves
)

__all__ = [
    'MCTSAgent',
    'MCTSAgentFactory',
    'SearchResult',
    'Node',
    'GameTree',
    'MCTSConfig',
    'mcts_search',
    'run_iteration',
    'select_node',
    'expand_node',
    'simulate_game',
    'backpropagate',
    'best_child',
    'uct_value',
    'DEFAULT_CONFIG'
]
