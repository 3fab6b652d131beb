"""
Connect-Four MCTS - a Monte Carlo Tree Search engine for Connect-Four.

This package provides a bitboard implementation of the Connect-Four rules
and an MCTS agent that plays against a human from the command line,
keeping its search tree between moves.
"""

__version__ = "0.1.0"
__author__ = "Connect-Four MCTS Team"

# Make key components available at package level
from connect4_mcts.core.bitboard import State, GameStatus, get_status, is_winning
from connect4_mcts.core.moves import get_moves, IllegalMoveError
from connect4_mcts.core.game import Game, GameResult
from connect4_mcts.mcts.agent import MCTSAgent, SearchResult
from connect4_mcts.mcts.config import MCTSConfig

# Version info as a tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split('.')))
