"""Solver orchestration and the frame-driven autoplayer."""

import logging
from collections import deque
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any, Deque, Dict, List, Optional, Sequence, Set, Tuple

from .config import SolverConfig
from .engine import Board, GameCondition, Visibility
from .events import Event, EventKind
from .probability import ProbabilityEngine
from .strategies import BijectionDetection, ExhaustedClueDetection, Strategy

logger = logging.getLogger(__name__)


class Solver:
    """
    Runs a fixed list of deterministic strategies and merges their moves.

    Holds no deduction logic of its own. Strategy order only decides which
    move comes first when several are possible.
    """

    def __init__(
        self,
        strategies: Optional[Sequence[Strategy]] = None,
        config: Optional[SolverConfig] = None,
        executor: Optional[Executor] = None,
    ) -> None:
        self.config: SolverConfig = config or SolverConfig()
        self.executor: Optional[Executor] = executor
        if strategies is None:
            strategies = [
                ExhaustedClueDetection(batch=self.config.batch_moves),
                BijectionDetection(batch=self.config.batch_moves),
            ]
        self.strategies: List[Strategy] = list(strategies)

    def next_clicks(self, board: Board) -> List[Event]:
        """
        Collect every strategy's moves for `board`.

        Results are concatenated in strategy order with NONE entries and
        repeated moves removed.
        """
        events: List[Event] = []
        seen: Set[Event] = set()
        for strategy in self.strategies:
            for event in strategy.attempt(board, self.executor):
                if event.is_none or event in seen:
                    continue
                seen.add(event)
                events.append(event)
        return events

    def update(self, board: Board, event: Event) -> None:
        """Forward an applied event to every strategy."""
        for strategy in self.strategies:
            strategy.update(board, event)


class AutoPlayer:
    """
    Plays a board to the end: deterministic moves first, then deferred
    zero-risk clicks, then the probability engine.

    Every applied move is reported back to the solver with one update() call.
    """

    def __init__(self, board: Board, config: Optional[SolverConfig] = None) -> None:
        """
        Bind an autoplayer to a board.

        Args:
            board: The board to play; it is mutated in place.
            config: Solver configuration. thread_count > 1 starts a thread
                pool that lives until close().
        """
        self.board: Board = board
        self.config: SolverConfig = config or SolverConfig()

        self._executor: Optional[ThreadPoolExecutor] = None
        if self.config.thread_count > 1:
            self._executor = ThreadPoolExecutor(max_workers=self.config.thread_count)

        self.solver: Solver = Solver(config=self.config, executor=self._executor)
        self.engine: ProbabilityEngine = ProbabilityEngine(self.config, self._executor)
        # zero-risk moves found by the engine, with the method that found them
        self.saved_moves: Deque[Tuple[Event, str]] = deque()

        # Metrics / counters (for analysis)
        self.frames: int = 0
        self.deterministic_clicks: int = 0
        self.deterministic_flags: int = 0
        self.zero_risk_clicks: int = 0
        self.closure_moves: int = 0
        self.enumeration_passes: int = 0
        self.uniform_passes: int = 0
        self.moves_sequence: List[Tuple[int, int, str]] = []

        # Step-by-step history for replay functionality
        self.steps_history: List[Dict[str, Any]] = []

    @property
    def guess_count(self) -> int:
        return self.engine.guess_count

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "AutoPlayer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Move application
    # -------------------------------------------------------------------------

    def apply(self, event: Event, method: str = "external") -> None:
        """Apply one move to the board and notify the solver."""
        if event.pos is None:
            return

        x, y = event.pos
        if event.kind is EventKind.CLICK:
            self.board.click(x, y)
            self.moves_sequence.append((x, y, "S"))
        else:
            self.board.flag(x, y)
            self.moves_sequence.append((x, y, "M"))

        self._record_step(event, method)
        self.solver.update(self.board, event)

    def _record_step(self, event: Event, method: str) -> None:
        """Record a step for replay functionality."""
        if not self.config.record_steps:
            return
        self.steps_history.append({
            "action": "reveal" if event.kind is EventKind.CLICK else "mark",
            "cell": event.pos,
            "method": method,
            "step_number": len(self.steps_history),
            "snapshot": self.board.snapshot(),
        })

    def _still_unknown(self, event: Event) -> bool:
        if event.pos is None:
            return False
        cell = self.board.at(*event.pos)
        return cell is not None and cell.visibility is Visibility.UNKNOWN

    # -------------------------------------------------------------------------
    # Main loop
    # -------------------------------------------------------------------------

    def step(self) -> List[Event]:
        """
        Play one frame and return the moves applied.

        Stops early as soon as the game reaches a terminal condition.
        """
        if self.board.condition.is_terminal:
            return []
        self.frames += 1

        applied: List[Event] = []
        for event in self.solver.next_clicks(self.board):
            # an earlier move in this batch may already have resolved the cell
            if not self._still_unknown(event):
                continue
            self.apply(event, "deterministic")
            applied.append(event)
            if event.kind is EventKind.CLICK:
                self.deterministic_clicks += 1
            else:
                self.deterministic_flags += 1
            if self.board.condition.is_terminal:
                return applied
        if applied:
            return applied

        while self.saved_moves:
            event, method = self.saved_moves.popleft()
            if not self._still_unknown(event):
                continue
            self._count_engine_move(method, guessed=False)
            self.apply(event, method)
            return [event]

        result = self.engine.choose(self.board)
        if result.method == "enumeration":
            self.enumeration_passes += 1
        elif result.method == "uniform":
            self.uniform_passes += 1
        self._count_engine_move(result.method, result.guessed)

        self.apply(result.event, "guess" if result.guessed else result.method)
        self.saved_moves.extend((event, result.method) for event in result.deferred)
        return [result.event]

    def _count_engine_move(self, method: str, guessed: bool) -> None:
        if method == "closure":
            self.closure_moves += 1
        elif not guessed:
            self.zero_risk_clicks += 1

    def solve(
        self,
        first_click: Optional[Tuple[int, int]] = None,
        max_frames: Optional[int] = None,
    ) -> Tuple[GameCondition, Dict[str, Any]]:
        """
        Play until the game is won or lost.

        Args:
            first_click: Optional opening click, applied before the first frame.
            max_frames: Optional frame budget.

        Returns:
            Tuple of (condition, payload) where payload is the metrics dictionary.

        Raises:
            RuntimeError: If max_frames runs out before the game ends.
        """
        if first_click is not None:
            self.apply(Event.click(*first_click), "first_move")

        while not self.board.condition.is_terminal:
            if max_frames is not None and self.frames >= max_frames:
                raise RuntimeError(f"Game still in progress after {max_frames} frames.")
            self.step()

        condition = self.board.condition
        logger.info(
            "game %s, with %d guesses",
            "won" if condition is GameCondition.WON else "lost",
            self.guess_count,
        )
        return condition, self.payload()

    def payload(self) -> Dict[str, Any]:
        """Metrics collected so far."""
        revealed = sum(
            1 for cell in self.board.cells if cell.visibility is Visibility.REVEALED
        )
        return {
            "guess_count": self.guess_count,
            "frames": self.frames,
            "deterministic_clicks": self.deterministic_clicks,
            "deterministic_flags": self.deterministic_flags,
            "zero_risk_clicks": self.zero_risk_clicks,
            "closure_moves": self.closure_moves,
            "enumeration_passes": self.enumeration_passes,
            "uniform_passes": self.uniform_passes,
            "revealed_cells_count": revealed,
            "flagged_count": self.board.flagged_count,
            "moves_sequence": self.moves_sequence,
            "steps_history": self.steps_history,
        }
