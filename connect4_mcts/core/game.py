"""
Game record for Connect-Four.

The search works on relative states that forget which player is which.
This module keeps the absolute picture around them: whose turn it is,
the sequence of states played, and who won.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional

import numpy as np

from connect4_mcts.core.bitboard import (
    State, EMPTY_STATE, GameStatus, get_status, to_grid
)
from connect4_mcts.core.constants import PLAYER_SYMBOLS, COLUMNS
from connect4_mcts.core.moves import (
    IllegalMoveError, apply_cell_move, drop_piece, get_moves, move_column
)


class GameResult(Enum):
    """Enum representing possible game results."""
    IN_PROGRESS = auto()
    WINNER = auto()
    DRAW = auto()


@dataclass
class Game:
    """
    A Connect-Four game between player 0 (moves first) and player 1.

    ``state`` is always the relative pair used by the search, so it can be
    handed to an agent as is.
    """
    state: State = EMPTY_STATE
    turn_count: int = 0
    history: List[State] = field(default_factory=list)

    def __post_init__(self):
        if not self.history:
            self.history = [self.state]

    @property
    def current_player(self) -> int:
        """ID of the player about to move."""
        return self.turn_count % 2

    @property
    def status(self) -> GameStatus:
        return get_status(*self.state)

    @property
    def game_over(self) -> bool:
        return self.status.is_terminal

    @property
    def result(self) -> GameResult:
        status = self.status
        if status is GameStatus.PLAYING:
            return GameResult.IN_PROGRESS
        if status is GameStatus.DRAW:
            return GameResult.DRAW
        return GameResult.WINNER

    @property
    def winner(self) -> Optional[int]:
        """
        Get the ID of the winning player.

        Returns:
            Player ID, or None if the game is drawn or still running
        """
        status = self.status
        if status is GameStatus.LOST:
            # the player who just moved made the line
            return 1 - self.current_player
        if status is GameStatus.WON:
            return self.current_player
        return None

    @property
    def last_column(self) -> Optional[int]:
        if len(self.history) < 2:
            return None
        return move_column(self.history[-2], self.history[-1])

    def legal_states(self) -> List[State]:
        return get_moves(*self.state)

    def apply_state(self, new_state: State) -> None:
        """
        Advance the game to a successor state.

        Args:
            new_state: Must be one of ``legal_states()``

        Raises:
            IllegalMoveError: If the game is over or the state is not reachable
                in one move
        """
        if self.game_over:
            raise IllegalMoveError("The game is already over")
        if new_state not in self.legal_states():
            raise IllegalMoveError("State is not reachable with a single legal move")
        self.state = new_state
        self.turn_count += 1
        self.history.append(new_state)

    def drop(self, column: int) -> State:
        """Play a column for the current player and return the new state."""
        self.apply_state(drop_piece(self.state, column))
        return self.state

    def play_cell(self, x: int, y: int) -> State:
        """Play a cell coordinate for the current player and return the new state."""
        self.apply_state(apply_cell_move(self.state, x, y))
        return self.state

    def to_grid(self) -> np.ndarray:
        """Absolute grid: 1 for player 0's stones, 2 for player 1's."""
        return to_grid(self.state, first_to_move=self.current_player == 0)

    def get_game_statistics(self) -> Dict[str, Any]:
        stats: Dict[str, Any] = {
            "turns": self.turn_count,
            "result": self.result.name,
        }
        if self.winner is not None:
            stats["winner"] = self.winner
        return stats

    def __str__(self) -> str:
        grid = self.to_grid()
        lines = ["".join(PLAYER_SYMBOLS[cell] for cell in row) for row in grid[::-1]]
        lines.append("".join(str(x) for x in range(COLUMNS)))
        return "\n".join(lines)
