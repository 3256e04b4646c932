"""
Quickstart example for the Minesweeper Autoplayer.

This script demonstrates basic usage of the engine.
"""

import random

from autosweeper import (
    AutoPlayer,
    Board,
    Event,
    GameCondition,
    ProbabilityEngine,
    Solver,
    SolverConfig,
    run_solver_many_tests,
)
from autosweeper.analysis import new_game


def main():
    print("=" * 60)
    print("Minesweeper Autoplayer - Quickstart Example")
    print("=" * 60)

    # Example 1: Solve a single game
    print("\n1. Solving a single Intermediate game (16x16, 40 mines)...")
    print("-" * 60)

    board, first_click = new_game(16, 16, 40, random.Random(7))
    with AutoPlayer(board, SolverConfig(thread_count=4)) as player:
        condition, payload = player.solve(first_click=first_click)

    result = "WON" if condition is GameCondition.WON else "LOST"
    print(f"Result: {result}")
    print(f"Frames: {payload['frames']}")
    print(f"Deterministic clicks: {payload['deterministic_clicks']}")
    print(f"Deterministic flags: {payload['deterministic_flags']}")
    print(f"Zero-risk clicks: {payload['zero_risk_clicks']}")
    print(f"Guesses: {payload['guess_count']}")

    # Example 2: Show final board state
    print("\n2. Final board state:")
    print("-" * 60)
    print(board.format_board(reveal_all=True))

    # Example 3: Drive the engine by hand
    print("\n3. One frame, step by step...")
    print("-" * 60)

    board = Board(5, 5, [(4, 4), (0, 4)])
    solver = Solver()
    engine = ProbabilityEngine()
    for x, y in [(0, 0), (1, 0), (2, 0)]:
        board.click(x, y)
        solver.update(board, Event.click(x, y))

    moves = solver.next_clicks(board)
    print(f"Deterministic moves: {[str(m) for m in moves]}")
    if not moves:
        choice = engine.choose(board)
        print(f"Engine move: {choice.event} (guess: {choice.guessed}, method: {choice.method})")

    # Example 4: Run multiple games for statistics
    print("\n4. Running 20 Beginner games for win rate statistics...")
    print("-" * 60)

    results = run_solver_many_tests(9, 9, 10, runs=20, seed=0)
    print(f"Win rate: {results['win_rate']*100:.1f}%")
    print(f"Average guesses per game: {results['avg_guess_count']:.2f}")
    print(f"Deterministic share of moves: {results['deterministic_fraction']*100:.1f}%")

    print("\n" + "=" * 60)
    print("Done! See DESIGN.md for how the engine is put together.")
    print("=" * 60)


if __name__ == "__main__":
    main()
