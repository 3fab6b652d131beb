"""
Batch evaluation of the MCTS engine.

Plays a series of games between the engine and an opponent (a uniformly
random player, or a second engine with its own budget), alternating who
moves first, and reports wins, draws and losses.

Example usage:
    connect4-evaluate --games 20 --iterations 2000
    connect4-evaluate --games 10 --iterations 5000 --opponent mcts --opponent-iterations 500
"""
import argparse
import logging
import random
from typing import Any, Dict, Optional, Protocol

from tqdm import tqdm

from connect4_mcts.core.bitboard import State
from connect4_mcts.core.game import Game
from connect4_mcts.core.moves import get_moves, move_column
from connect4_mcts.mcts.agent import MCTSAgent, SearchResult
from connect4_mcts.mcts.config import MCTSConfig

LOGGER = logging.getLogger(__name__)


class Player(Protocol):
    name: str

    def select_move(self, state: State) -> SearchResult: ...

    def observe(self, state: State) -> bool: ...

    def reset(self) -> None: ...


class RandomAgent:
    """Plays a uniformly random legal move."""

    def __init__(self, name: str = "Random Agent", seed: Optional[int] = None):
        self.name = name
        self.rng = random.Random(seed)

    def select_move(self, state: State) -> SearchResult:
        moves = get_moves(*state)
        if not moves:
            raise RuntimeError("No legal moves available")
        choice = self.rng.randrange(len(moves))
        return SearchResult(moves[choice], 1.0, -1, move_column(state, moves[choice]))

    def observe(self, state: State) -> bool:
        return False

    def reset(self) -> None:
        pass

    def __str__(self) -> str:
        return self.name


def play_match(first: Player, second: Player) -> Game:
    """
    Play one game to the end.

    Args:
        first: Player 0, moves first
        second: Player 1

    Returns:
        The finished game
    """
    players = (first, second)
    for player in players:
        player.reset()

    game = Game()
    while not game.game_over:
        mover = players[game.current_player]
        result = mover.select_move(game.state)
        game.apply_state(result.state)
        players[game.current_player].observe(game.state)
    return game


def evaluate_agent(agent: Player, opponent: Player, num_games: int = 20) -> Dict[str, Any]:
    """
    Evaluate an agent against an opponent.

    The agent moves first in even-numbered games and second in the others.

    Args:
        agent: Agent under evaluation
        opponent: Opponent
        num_games: Number of games to play

    Returns:
        Dictionary of results from the agent's point of view
    """
    print(f"Evaluating {agent} against {opponent} for {num_games} games...")

    wins = losses = draws = 0
    total_moves = 0

    pbar = tqdm(total=num_games, desc="Evaluating")
    for i in range(num_games):
        agent_player = i % 2
        if agent_player == 0:
            game = play_match(agent, opponent)
        else:
            game = play_match(opponent, agent)

        total_moves += game.turn_count
        if game.winner is None:
            draws += 1
        elif game.winner == agent_player:
            wins += 1
        else:
            losses += 1
        LOGGER.debug("Game %d: %s in %d moves", i, game.result.name, game.turn_count)

        pbar.update(1)
        pbar.set_postfix({"wins": wins, "draws": draws, "losses": losses})
    pbar.close()

    return {
        "games": num_games,
        "wins": wins,
        "draws": draws,
        "losses": losses,
        "win_rate": wins / num_games if num_games else 0.0,
        "average_moves": total_moves / num_games if num_games else 0.0,
    }


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Evaluate the Connect-Four MCTS engine")
    parser.add_argument("--games", type=int, default=20, help="Number of games")
    parser.add_argument("--iterations", type=int, default=2000,
                        help="MCTS iterations per move for the engine")
    parser.add_argument("--time-limit", type=float, default=None,
                        help="Seconds of search per move for the engine")
    parser.add_argument("--opponent", type=str, default="random", choices=["random", "mcts"],
                        help="Type of opponent")
    parser.add_argument("--opponent-iterations", type=int, default=500,
                        help="MCTS iterations per move for an MCTS opponent")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Python logging level")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING))

    agent = MCTSAgent(
        config=MCTSConfig(iterations=args.iterations or None, time_limit=args.time_limit,
                          seed=args.seed),
        name="MCTS",
    )
    if args.opponent == "mcts":
        opponent_seed = None if args.seed is None else args.seed + 1
        opponent: Player = MCTSAgent(
            config=MCTSConfig(iterations=args.opponent_iterations, seed=opponent_seed),
            name="MCTS Opponent",
        )
    else:
        opponent = RandomAgent(seed=args.seed)

    stats = evaluate_agent(agent, opponent, num_games=args.games)

    print("\nResults:")
    print(f"  Wins: {stats['wins']}")
    print(f"  Draws: {stats['draws']}")
    print(f"  Losses: {stats['losses']}")
    print(f"  Win rate: {stats['win_rate']:.2%}")
    print(f"  Average game length: {stats['average_moves']:.1f} moves")


if __name__ == "__main__":
    main()
