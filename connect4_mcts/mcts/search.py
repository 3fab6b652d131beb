"""
Monte Carlo Tree Search (MCTS) algorithm for Connect-Four.

This module implements the core MCTS algorithm with the four standard phases:
1. Selection: Descend through fully expanded nodes by UCT value
2. Expansion: Create one child for the next untried move
3. Simulation: Play random moves until the game ends
4. Backpropagation: Update statistics from the new node up to the root

Outcome codes are always expressed from the point of view of the player
who moved into a node (0 loss, 1 draw, 2 win), so a parent compares its
children directly and every step up the tree flips the code.
"""
from __future__ import annotations
from typing import Dict, List, Optional, Tuple, Any
import logging
import math
import random
import time

from connect4_mcts.core.bitboard import State, is_winning, is_full
from connect4_mcts.core.constants import (
    FLIP_OUTCOME, OUTCOME_WIN, OUTCOME_DRAW, DEFAULT_UCT_CONSTANT
)
from connect4_mcts.core.moves import get_moves, move_column
from connect4_mcts.mcts.node import GameTree
from connect4_mcts.mcts.config import MCTSConfig

LOGGER = logging.getLogger(__name__)


def uct_value(
    tree: GameTree,
    parent: int,
    child: int,
    exploration_weight: float = DEFAULT_UCT_CONSTANT
) -> float:
    """
    Calculate the UCT value of a child node.

    UCT = score / visits + C * sqrt(log2(parent_visits) / visits)

    Args:
        tree: Search tree
        parent: Index of the parent node
        child: Index of the child node
        exploration_weight: Exploration constant C

    Returns:
        UCT value

    Raises:
        RuntimeError: If the parent has never been visited
    """
    parent_visits = tree[parent].visits
    if parent_visits <= 0:
        raise RuntimeError("UCT evaluated under a parent with no visits")
    node = tree[child]
    exploitation = node.score / node.visits
    exploration = math.sqrt(math.log2(parent_visits) / node.visits)
    return exploitation + exploration_weight * exploration


def select_node(
    tree: GameTree,
    index: int,
    exploration_weight: float = DEFAULT_UCT_CONSTANT
) -> int:
    """
    Descend from a node while it is fully expanded.

    Selection stops at the first node that is terminal, has no legal
    moves, or still has an untried move.

    Args:
        tree: Search tree
        index: Node to start from
        exploration_weight: Exploration constant C

    Returns:
        Index of the node where selection stopped
    """
    node = tree[index]
    while not node.is_terminal() and node.moves and node.is_fully_expanded():
        best_child: Optional[int] = None
        best_value = -math.inf
        for child in node.children:
            value = uct_value(tree, index, child, exploration_weight)
            if best_child is None or value > best_value:
                best_child = child
                best_value = value
        index = best_child
        node = tree[index]
    return index


def expand_node(tree: GameTree, index: int) -> int:
    """
    Add a child for the next untried move of a node.

    Args:
        tree: Search tree
        index: Node where selection stopped

    Returns:
        Index of the new child, or ``index`` itself when the node is
        terminal, has no moves, or is already fully expanded
    """
    node = tree[index]
    if node.is_terminal() or not node.moves or node.is_fully_expanded():
        return index
    return tree.add_node(node.next_untried(), parent=index)


def simulate_game(state: State, rng: random.Random) -> Tuple[int, int]:
    """
    Play uniformly random moves from a state until the game ends.

    Args:
        state: Starting position
        rng: Random source; only ``randrange`` is used

    Returns:
        Tuple of (outcome code for the player who moved into ``state``,
        number of random moves played)
    """
    to_move, just_moved = state
    steps = 0
    while True:
        if is_winning(just_moved):
            outcome = OUTCOME_WIN
            break
        if is_full(to_move, just_moved):
            outcome = OUTCOME_DRAW
            break
        moves = get_moves(to_move, just_moved)
        to_move, just_moved = moves[rng.randrange(len(moves))]
        steps += 1
    # each ply played hands the outcome to the other player
    if steps % 2:
        outcome = FLIP_OUTCOME[outcome]
    return outcome, steps


def backpropagate(tree: GameTree, index: int, outcome: int) -> int:
    """
    Update statistics from a node up to the root.

    Args:
        tree: Search tree
        index: Node the simulation started from
        outcome: Outcome code for the player who moved into that node

    Returns:
        Number of nodes updated
    """
    updated = 0
    for current in tree.path_to_root(index):
        node = tree[current]
        node.visits += 1
        node.score += outcome
        outcome = FLIP_OUTCOME[outcome]
        updated += 1
    return updated


def run_iteration(
    tree: GameTree,
    rng: random.Random,
    exploration_weight: float = DEFAULT_UCT_CONSTANT
) -> int:
    """
    Run one full MCTS iteration from the tree's root.

    Returns:
        Index of the node the simulation was started from
    """
    selected = select_node(tree, tree.root, exploration_weight)
    working = expand_node(tree, selected)
    outcome, _ = simulate_game(tree[working].state, rng)
    backpropagate(tree, working, outcome)
    return working


def best_child(tree: GameTree, index: Optional[int] = None) -> int:
    """
    Pick the child with the highest average outcome.

    Ties go to the child created first.

    Args:
        tree: Search tree
        index: Parent node (default: the root)

    Returns:
        Index of the best child

    Raises:
        RuntimeError: If the node has no children
    """
    node = tree[tree.root if index is None else index]
    if not node.children:
        raise RuntimeError("Cannot pick a move from a node with no children")
    best: Optional[int] = None
    best_value = -math.inf
    for child in node.children:
        value = tree[child].value
        if best is None or value > best_value:
            best = child
            best_value = value
    return best


def mcts_search(
    tree: GameTree,
    config: Optional[MCTSConfig] = None,
    rng: Optional[random.Random] = None
) -> Tuple[int, Dict[str, Any]]:
    """
    Run Monte Carlo Tree Search from the tree's root.

    The budget is checked at the top of every iteration, so a timed
    search may overrun its deadline by at most one iteration. At least
    one iteration always runs.

    Args:
        tree: Search tree; its statistics are extended in place
        config: MCTS configuration parameters
        rng: Random source for the simulations

    Returns:
        Tuple of (index of the best root child, search statistics)

    Raises:
        RuntimeError: If the root position is already decided
    """
    if config is None:
        config = MCTSConfig()
    if rng is None:
        rng = random.Random(config.seed)

    root = tree.root_node
    if root.is_terminal() or not root.moves:
        raise RuntimeError(f"Cannot search from a finished position ({root.status.name})")

    stats: Dict[str, Any] = {
        "iterations": 0,
        "max_depth": 0,
        "time_elapsed": 0.0,
        "stopped_early": False,
    }

    start_time = time.perf_counter()
    deadline = start_time + config.time_limit if config.time_limit is not None else None

    while config.iterations is None or stats["iterations"] < config.iterations:
        if (deadline is not None and stats["iterations"] > 0
                and time.perf_counter() >= deadline):
            stats["stopped_early"] = True
            break

        working = run_iteration(tree, rng, config.exploration_weight)

        stats["iterations"] += 1
        stats["max_depth"] = max(stats["max_depth"], tree.depth(working))

    best = best_child(tree)

    stats["time_elapsed"] = time.perf_counter() - start_time
    stats["iterations_per_second"] = stats["iterations"] / max(0.001, stats["time_elapsed"])
    stats["node_count"] = tree.count_nodes()
    stats["actions"] = get_action_statistics(tree)

    LOGGER.debug(
        "Searched %d iterations in %.3fs (%d nodes, depth %d); best column %d value %.3f",
        stats["iterations"], stats["time_elapsed"], stats["node_count"],
        stats["max_depth"], move_column(tree.root_state, tree[best].state), tree[best].value,
    )
    return best, stats


def get_principal_variation(tree: GameTree, max_depth: int = 10) -> List[Tuple[int, float]]:
    """
    Get the principal variation (most visited path) from the root.

    This is useful for analysis and debugging.

    Args:
        tree: Search tree
        max_depth: Maximum depth to explore

    Returns:
        List of (column, value) pairs along the most visited path
    """
    result = []
    current = tree.root
    while tree[current].children and len(result) < max_depth:
        child = max(tree[current].children, key=lambda c: tree[c].visits)
        column = move_column(tree[current].state, tree[child].state)
        result.append((column, tree[child].value))
        current = child
    return result


def get_action_statistics(tree: GameTree) -> Dict[int, Dict[str, float]]:
    """
    Get statistics for every expanded move at the root.

    Args:
        tree: Search tree

    Returns:
        Dictionary mapping column numbers to visits, score, value and UCT value
    """
    result = {}
    root = tree.root
    for child in tree[root].children:
        node = tree[child]
        column = move_column(tree[root].state, node.state)
        result[column] = {
            "visits": node.visits,
            "score": node.score,
            "value": node.value,
            "uct": uct_value(tree, root, child),
        }
    return result
