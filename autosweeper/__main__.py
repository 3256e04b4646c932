"""Headless autoplayer: python -m autosweeper --width 30 --height 16 --bombs 99"""

import argparse
import logging
import random
from typing import List, Optional

from .analysis import new_game
from .config import SolverConfig
from .engine import GameCondition
from .events import Event
from .solver import AutoPlayer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="autosweeper",
        description="Let the inference engine play Minesweeper.",
    )
    parser.add_argument("--width", type=int, default=30)
    parser.add_argument("--height", type=int, default=16)
    parser.add_argument("--bombs", type=int, default=99)
    parser.add_argument("--games", type=int, default=1)
    parser.add_argument("--seed", type=int, default=-1, help="Base RNG seed; <0 uses OS entropy")
    parser.add_argument("--threads", type=int, default=1, help="Worker-pool size")
    parser.add_argument("--partition-scale", type=float, default=3.0,
                        help="Search-scale limit for splitting mines across groups")
    parser.add_argument("--group-scale", type=float, default=4.0,
                        help="Search-scale limit for enumerating one group")
    parser.add_argument("--skip", type=int, default=0,
                        help="Print the board every N frames (0 = only at the end)")
    parser.add_argument("--verbose", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = SolverConfig(
            thread_count=args.threads,
            partition_scale_limit=args.partition_scale,
            group_scale_limit=args.group_scale,
            guess_seed=max(args.seed, 0),
        )
    except ValueError as exc:
        print(f"Invalid configuration: {exc}")
        return 2
    if args.games <= 0:
        print("Invalid configuration: --games must be positive.")
        return 2

    rng = random.Random(None if args.seed < 0 else args.seed)
    wins = 0
    for game in range(1, args.games + 1):
        try:
            board, first_click = new_game(args.width, args.height, args.bombs, rng)
        except ValueError as exc:
            print(f"Invalid board: {exc}")
            return 2

        with AutoPlayer(board, config) as player:
            player.apply(Event.click(*first_click), "first_move")
            while not board.condition.is_terminal:
                player.step()
                if args.skip > 0 and player.frames % args.skip == 0:
                    print(board.format_board())
                    print()
            payload = player.payload()

        won = board.condition is GameCondition.WON
        wins += won
        print(board.format_board(reveal_all=True))
        print(
            f"[game {game}] {'WIN' if won else 'LOSE'} after {payload['frames']} frames, "
            f"{payload['guess_count']} guesses"
        )

    print(f"Win rate: {wins}/{args.games} ({wins / args.games * 100:.1f}%)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
