"""
Minesweeper Autoplayer

An inference engine that plays Minesweeper on its own:
- Exhausted-clue detection: a clue whose mines are all flagged frees its other neighbors
- Bijection detection: a clue with exactly as many hidden neighbors as missing mines
- Probability engine: exhaustive enumeration of clue-consistent mine placements
  per independent group, picking a zero-risk cell or the least risky guess
"""

from .engine import (
    Board,
    Cell,
    CellState,
    GameCondition,
    InconsistentBoardError,
    Visibility,
)
from .events import NO_EVENT, Event, EventKind
from .combinatorics import combinations, mine_partitions, search_scale
from .config import SolverConfig
from .strategies import BijectionDetection, ExhaustedClueDetection, Strategy
from .probability import ProbabilityEngine, ProbabilityResult
from .solver import AutoPlayer, Solver
from .analysis import (
    run_solver_single_test,
    run_solver_many_tests,
    run_solver_difficulty_analysis,
)

__version__ = "1.0.0"

__all__ = [
    # Board model
    "Board",
    "Cell",
    "CellState",
    "GameCondition",
    "InconsistentBoardError",
    "Visibility",
    # Moves
    "Event",
    "EventKind",
    "NO_EVENT",
    # Combinatorics
    "combinations",
    "mine_partitions",
    "search_scale",
    # Solving
    "SolverConfig",
    "Strategy",
    "ExhaustedClueDetection",
    "BijectionDetection",
    "Solver",
    "ProbabilityEngine",
    "ProbabilityResult",
    "AutoPlayer",
    # Analysis functions
    "run_solver_single_test",
    "run_solver_many_tests",
    "run_solver_difficulty_analysis",
]
