"""Analysis and benchmarking tools for the autoplayer."""

import random
from typing import Dict, List, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np

from .config import SolverConfig
from .engine import Board, GameCondition
from .solver import AutoPlayer

LEVELS: Dict[str, Tuple[int, int, int]] = {
    "beginner": (9, 9, 10),
    "intermediate": (16, 16, 40),
    "expert": (30, 16, 99),
}

_AVERAGED_KEYS = (
    "guess_count",
    "frames",
    "deterministic_clicks",
    "deterministic_flags",
    "zero_risk_clicks",
    "closure_moves",
    "enumeration_passes",
    "uniform_passes",
    "revealed_cells_count",
    "flagged_count",
)


def new_game(
    width: int,
    height: int,
    bomb_count: int,
    rng: Optional[random.Random] = None,
) -> Tuple[Board, Tuple[int, int]]:
    """
    Create a random board whose centre cell and its neighbors are mine-free.

    Returns:
        The board and the centre cell, to be used as the opening click.
    """
    centre = (width // 2, height // 2)
    safe = {centre}
    if width * height - 9 >= bomb_count:
        # Safe zone = first click + its neighbors, when the board has room for it.
        safe |= {
            (centre[0] + dx, centre[1] + dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1)
        }
    board = Board.random(width, height, bomb_count, rng=rng, safe_cells=safe)
    return board, centre


def run_solver_single_test(
    width: int,
    height: int,
    bomb_count: int,
    *,
    config: Optional[SolverConfig] = None,
    seed: Optional[int] = None,
    show_boards: bool = False,
) -> Dict[str, object]:
    """
    Run one end-to-end game with AutoPlayer on a fresh random board.

    Args:
        width: Board width.
        height: Board height.
        bomb_count: Total number of mines on the board.
        config: Solver configuration.
        seed: Seed for mine placement; None for OS entropy.
        show_boards: If True, print the final board with mines visible.

    Returns:
        The autoplayer's payload augmented with "status" (-1 loss, 1 win).
    """
    board, first_click = new_game(width, height, bomb_count, random.Random(seed))
    with AutoPlayer(board, config) as player:
        condition, payload = player.solve(first_click=first_click)

    if show_boards:
        print(board.format_board(reveal_all=True))
        print()
        print(f"Finished with status {condition.value}, {payload['guess_count']} guesses.")

    out = dict(payload)
    out["status"] = condition.value
    return out


def run_solver_many_tests(
    width: int,
    height: int,
    bomb_count: int,
    runs: int,
    *,
    config: Optional[SolverConfig] = None,
    seed: Optional[int] = None,
) -> Dict[str, float]:
    """
    Run many independent games and return averaged metrics plus win rate.

    Args:
        width: Board width.
        height: Board height.
        bomb_count: Total number of mines on the board.
        runs: Number of independent games to run, must be > 0.
        config: Solver configuration shared by every game.
        seed: Base seed; game i uses seed + i. None for OS entropy.

    Returns:
        Averages of the payload counters (prefixed with "avg_"), plus:
        - win_rate
        - guesses_per_game_won (NaN if no game was won)
        - deterministic_fraction: share of moves made by the strategies
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    metrics = np.zeros((runs, len(_AVERAGED_KEYS)), dtype=float)
    wins = np.zeros(runs, dtype=bool)

    for i in range(runs):
        payload = run_solver_single_test(
            width,
            height,
            bomb_count,
            config=config,
            seed=None if seed is None else seed + i,
        )
        status = payload["status"]
        if status not in (GameCondition.WON.value, GameCondition.LOST.value):
            raise RuntimeError(f"Unexpected solver status: {status}")

        wins[i] = status == GameCondition.WON.value
        metrics[i] = [float(payload[k]) for k in _AVERAGED_KEYS]  # type: ignore[arg-type]

    means = metrics.mean(axis=0)
    out: Dict[str, float] = {f"avg_{k}": float(v) for k, v in zip(_AVERAGED_KEYS, means)}
    out["win_rate"] = float(wins.mean())

    guesses = metrics[:, _AVERAGED_KEYS.index("guess_count")]
    out["guesses_per_game_won"] = (
        float(guesses[wins].mean()) if wins.any() else float("nan")
    )

    deterministic = (
        out["avg_deterministic_clicks"] + out["avg_deterministic_flags"]
    )
    total_moves = (
        deterministic
        + out["avg_zero_risk_clicks"]
        + out["avg_closure_moves"]
        + out["avg_guess_count"]
    )
    out["deterministic_fraction"] = deterministic / total_moves if total_moves else 0.0
    return out


def run_solver_difficulty_analysis(
    runs: int,
    *,
    config: Optional[SolverConfig] = None,
    seed: Optional[int] = None,
    show: bool = True,
) -> Dict[str, Dict[str, float]]:
    """
    Run aggregated solver tests on standard Minesweeper difficulty levels and plot summaries.

    Args:
        runs: Number of independent games to run per difficulty level.
        config: Solver configuration.
        seed: Base seed for reproducible runs.
        show: If True, display the figures.

    Returns:
        Mapping from level name to statistics dict returned by run_solver_many_tests().

    Standard difficulty levels:
        - Beginner: 9x9, 10 mines
        - Intermediate: 16x16, 40 mines
        - Expert: 30x16, 99 mines
    """
    results: Dict[str, Dict[str, float]] = {}
    for level, (w, h, m) in LEVELS.items():
        results[level] = run_solver_many_tests(w, h, m, runs, config=config, seed=seed)

    level_names: List[str] = list(LEVELS)
    x = np.arange(len(level_names))
    bar_w = 0.2

    # 1) Move mix (by source)
    plt.figure()  # type: ignore[misc]
    for offset, (key, label) in zip(
        (-1.5, -0.5, 0.5, 1.5),
        (
            ("avg_deterministic_clicks", "deterministic clicks"),
            ("avg_deterministic_flags", "deterministic flags"),
            ("avg_zero_risk_clicks", "zero-risk clicks"),
            ("avg_guess_count", "guesses"),
        ),
    ):
        values = [results[n][key] for n in level_names]
        plt.bar(x + offset * bar_w, values, width=bar_w, label=label)  # type: ignore[misc]
    plt.xticks(x, level_names)  # type: ignore[misc]
    plt.ylabel("Average moves per game")  # type: ignore[misc]
    plt.title("Moves by source (per game)")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()

    # 2) Guesses per game
    plt.figure()  # type: ignore[misc]
    plt.bar(x, [results[n]["avg_guess_count"] for n in level_names])  # type: ignore[misc]
    plt.xticks(x, level_names)  # type: ignore[misc]
    plt.ylabel("Average guesses")  # type: ignore[misc]
    plt.title("Guesses per game by difficulty level")  # type: ignore[misc]
    plt.tight_layout()

    # 3) Win rate by level
    plt.figure()  # type: ignore[misc]
    plt.bar(x, [results[n]["win_rate"] for n in level_names])  # type: ignore[misc]
    plt.xticks(x, level_names)  # type: ignore[misc]
    plt.ylabel("Win rate")  # type: ignore[misc]
    plt.ylim(0.0, 1.0)  # type: ignore[misc]
    plt.title("Win rate by difficulty level")  # type: ignore[misc]
    plt.tight_layout()

    if show:
        plt.show()  # type: ignore[misc]

    return results
