"""
Human versus engine session.

The session alternates a human player and an MCTSAgent on one Game. It
contains no search logic: it forwards every human move to the agent so
the search tree follows the real game, and hands every engine move to a
caller-supplied sink.
"""
from __future__ import annotations
from typing import Callable, Optional
import logging

from connect4_mcts.core.bitboard import State
from connect4_mcts.core.game import Game
from connect4_mcts.mcts.agent import MCTSAgent, SearchResult

LOGGER = logging.getLogger(__name__)

HumanMoveReader = Callable[[Game], State]
EngineMoveSink = Callable[[Game, SearchResult], None]


class GameSession:
    """
    A game between a human and the engine.

    ``human_player`` is 0 when the human moves first and 1 otherwise.
    """

    def __init__(self, agent: MCTSAgent, human_player: int = 0, game: Optional[Game] = None):
        if human_player not in (0, 1):
            raise ValueError("human_player must be 0 or 1")
        self.agent = agent
        self.human_player = human_player
        self.game = game or Game()
        self.tree_hits = 0
        self.tree_misses = 0

    @property
    def human_to_move(self) -> bool:
        return self.game.current_player == self.human_player

    def human_move(self, state: State) -> None:
        """
        Apply a human move and let the agent follow it.

        Args:
            state: Position after the human's move

        Raises:
            IllegalMoveError: If the state does not follow from the current one
        """
        self.game.apply_state(state)
        if self.agent.tree is None:
            return
        if self.agent.observe(state):
            self.tree_hits += 1
        else:
            self.tree_misses += 1

    def engine_move(self) -> SearchResult:
        """Search, play the engine's move and return it."""
        result = self.agent.select_move(self.game.state)
        self.game.apply_state(result.state)
        return result

    def play(
        self,
        read_human_move: HumanMoveReader,
        on_engine_move: Optional[EngineMoveSink] = None
    ) -> Game:
        """
        Play until the game is decided.

        Args:
            read_human_move: Returns the position after the human's move;
                it is responsible for validating input and re-prompting
            on_engine_move: Receives each engine move with its evaluation

        Returns:
            The finished game
        """
        LOGGER.info("Starting game: human is player %d, engine is %s", self.human_player, self.agent)
        while not self.game.game_over:
            if self.human_to_move:
                self.human_move(read_human_move(self.game))
            else:
                result = self.engine_move()
                if on_engine_move is not None:
                    on_engine_move(self.game, result)
        LOGGER.info(
            "Game over after %d moves: %s (tree reused %d times, rebuilt %d times)",
            self.game.turn_count, self.game.result.name, self.tree_hits, self.tree_misses,
        )
        return self.game
