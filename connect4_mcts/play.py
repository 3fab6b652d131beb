"""
Interactive Connect-Four game against the MCTS engine.

Example usage:
    # Play with the default budget of 10,000 iterations per move
    connect4-play

    # Let the engine think for one second per move, engine moves first
    connect4-play --time-limit 1.0 --engine-first

Enter a move either as a column number ("3") or as a cell coordinate
("3 0", column then row, row 0 at the bottom).
"""
import argparse
import logging
import os
import sys
from typing import Optional

from connect4_mcts.core.bitboard import State
from connect4_mcts.core.constants import COLUMNS, ROWS
from connect4_mcts.core.game import Game, GameResult
from connect4_mcts.core.moves import IllegalMoveError, apply_cell_move, drop_piece
from connect4_mcts.mcts.agent import MCTSAgent, SearchResult
from connect4_mcts.mcts.config import MCTSConfig
from connect4_mcts.session import GameSession


# ANSI color codes for terminal output
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    GREY = "\033[90m"

    @staticmethod
    def player_color(player: int) -> str:
        """Get ANSI color code for a player's stones."""
        if player == 1:
            return Colors.RED
        elif player == 2:
            return Colors.YELLOW
        return Colors.GREY


def parse_args(argv=None):
    """Parse command-line arguments for game configuration."""
    parser = argparse.ArgumentParser(description="Play Connect-Four against an MCTS engine")

    # Search budget
    parser.add_argument("--iterations", type=int, default=10_000,
                        help="MCTS iterations per move (0 = bounded by --time-limit only)")
    parser.add_argument("--time-limit", type=float, default=None,
                        help="Seconds of search per move")
    parser.add_argument("--exploration", type=float, default=2.0,
                        help="UCT exploration constant")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the engine's random simulations")
    parser.add_argument("--no-reuse", action="store_true",
                        help="Rebuild the search tree before every engine move")

    # Game configuration
    parser.add_argument("--engine-first", action="store_true",
                        help="Engine plays the first move")
    parser.add_argument("--no-color", action="store_true",
                        help="Disable colored output")
    parser.add_argument("--debug", action="store_true",
                        help="Show search statistics after each engine move")
    parser.add_argument("--log-level", type=str, default="WARNING",
                        help="Python logging level")

    return parser.parse_args(argv)


def create_agent(args) -> MCTSAgent:
    """Create the engine from command-line arguments."""
    config = MCTSConfig(
        iterations=args.iterations or None,
        time_limit=args.time_limit,
        exploration_weight=args.exploration,
        seed=args.seed,
        reuse_tree=not args.no_reuse,
    )
    return MCTSAgent(config=config, name="MCTS", verbose=args.debug)


def render_board(game: Game, use_color: bool = True) -> str:
    """Render the board with player 0 as X and player 1 as O."""
    symbols = {0: ".", 1: "X", 2: "O"}
    lines = []
    for row in game.to_grid()[::-1]:
        cells = []
        for cell in row:
            cell = int(cell)
            if use_color:
                cells.append(f"{Colors.player_color(cell)}{symbols[cell]}{Colors.RESET}")
            else:
                cells.append(symbols[cell])
        lines.append(" ".join(cells))
    lines.append(" ".join(str(x) for x in range(COLUMNS)))
    return "\n".join(lines)


def parse_move(text: str, state: State) -> State:
    """
    Turn a line of user input into the resulting state.

    Raises:
        IllegalMoveError: If the input is malformed or the move is illegal
    """
    parts = text.split()
    try:
        numbers = [int(part) for part in parts]
    except ValueError:
        raise IllegalMoveError(f"Expected numbers, got {text!r}") from None

    if len(numbers) == 1:
        return drop_piece(state, numbers[0])
    if len(numbers) == 2:
        return apply_cell_move(state, numbers[0], numbers[1])
    raise IllegalMoveError("Enter a column, or a column and a row")


def get_human_move(game: Game) -> State:
    """Prompt until the human enters a legal move."""
    prompt = f"\nYour move (column 0-{COLUMNS - 1}, or 'x y' with y 0-{ROWS - 1}): "
    while True:
        text = input(prompt).strip()
        if text.lower() in ("q", "quit", "exit"):
            raise KeyboardInterrupt
        try:
            return parse_move(text, game.state)
        except IllegalMoveError as e:
            print(f"Invalid move: {e}")


def play_game(args) -> Optional[GameResult]:
    """Play one game of Connect-Four against the engine."""
    use_color = not args.no_color
    agent = create_agent(args)
    session = GameSession(agent, human_player=1 if args.engine_first else 0)
    print(f"Playing against: {agent}")

    def read_human_move(game: Game) -> State:
        print("\n" + render_board(game, use_color))
        return get_human_move(game)

    def show_engine_move(game: Game, result: SearchResult) -> None:
        print(f"\n{agent.name} plays column {result.column} (evaluation {result.value:.3f})")

    game = session.play(read_human_move, show_engine_move)

    print("\n" + render_board(game, use_color))
    print("\n" + Colors.BOLD + "=== GAME OVER ===" + Colors.RESET)
    if game.result == GameResult.DRAW:
        print(Colors.BOLD + Colors.YELLOW + "It's a draw!" + Colors.RESET)
    elif game.winner == session.human_player:
        print(Colors.BOLD + Colors.GREEN + "You win!" + Colors.RESET)
    else:
        print(Colors.BOLD + Colors.RED + f"{agent.name} wins!" + Colors.RESET)
    print(f"Total moves: {game.turn_count}")
    return game.result


def main(argv=None):
    """Main function."""
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING))

    # Set up colored output for Windows
    if os.name == 'nt' and not args.no_color:
        os.system('color')

    print(Colors.BOLD + Colors.CYAN + "Welcome to Connect-Four!" + Colors.RESET)

    try:
        play_game(args)
        while True:
            play_again = input("\nPlay again? (y/n): ").lower()
            if play_again in ['y', 'yes']:
                play_game(args)
            elif play_again in ['n', 'no']:
                print("Thanks for playing!")
                break
            else:
                print("Please enter 'y' or 'n'.")
    except (KeyboardInterrupt, EOFError):
        print("\nGame interrupted by user.")
        sys.exit(0)


if __name__ == "__main__":
    main()
