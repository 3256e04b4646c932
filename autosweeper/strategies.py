"""Deterministic deduction strategies over an incrementally tracked frontier."""

from abc import ABC, abstractmethod
from concurrent.futures import Executor
from typing import List, Optional, Set, Tuple

from .engine import Board, Visibility
from .events import NO_EVENT, Event, EventKind
from .utils import fan_out

Position = Tuple[int, int]


class Strategy(ABC):
    """
    A deduction rule that proposes moves from the cells on its frontier.

    The frontier is the set of positions the strategy still considers worth
    inspecting. It starts empty and is grown by update() as moves land on
    the board; cells proven useless during attempt() are dropped. Each
    instance owns its frontier exclusively.
    """

    def __init__(self, batch: bool = True) -> None:
        self.batch: bool = batch
        self.frontier: Set[Position] = set()

    @abstractmethod
    def inspect(self, board: Board, x: int, y: int) -> Tuple[Event, bool]:
        """
        Evaluate one frontier cell.

        Must not mutate the strategy, so that cells can be inspected
        concurrently.

        Returns:
            (event, exhausted): the proposed move (NO_EVENT if none) and
            whether the cell can be dropped from the frontier for good.
        """

    def attempt(self, board: Board, executor: Optional[Executor] = None) -> List[Event]:
        """
        Inspect the frontier and return the moves it proves.

        Cells are visited in row-major order. In batch mode every frontier
        cell is inspected (fanned out over the executor when one is given)
        and each contributes at most one move; otherwise inspection stops at
        the first move found.
        """
        cells = sorted(self.frontier, key=lambda p: (p[1], p[0]))

        if not self.batch:
            for pos in cells:
                event, exhausted = self.inspect(board, *pos)
                if exhausted:
                    self.frontier.discard(pos)
                if not event.is_none:
                    return [event]
            return []

        results = fan_out(lambda pos: self.inspect(board, *pos), cells, executor)

        events: List[Event] = []
        for pos, (event, exhausted) in zip(cells, results):
            if exhausted:
                self.frontier.discard(pos)
            if not event.is_none:
                events.append(event)
        return events

    def update(self, board: Board, event: Event) -> None:
        """Grow or shrink the frontier after `event` was applied to `board`."""
        if event.pos is None:
            return

        x, y = event.pos
        if event.kind is EventKind.CLICK:
            if board.in_bounds(x, y):
                self.frontier.add((x, y))
            self.frontier.update(board.neighbors(x, y))
        elif event.kind is EventKind.FLAG:
            # a flagged cell never yields moves, but a neighbor may now be unblocked
            self.frontier.discard((x, y))
            self.frontier.update(board.neighbors(x, y))


class ExhaustedClueDetection(Strategy):
    """
    Clue n with n flagged neighbors: every other unknown neighbor is safe.

    Emits a Click on the first such neighbor; a satisfied clue with no unknown
    neighbors left is exhausted.
    """

    def inspect(self, board: Board, x: int, y: int) -> Tuple[Event, bool]:
        cell = board.at(x, y)
        if cell is None or cell.visibility is not Visibility.REVEALED:
            return NO_EVENT, True

        if board.count_neighbors(x, y, Visibility.FLAGGED) != cell.clue:
            return NO_EVENT, False

        for nx, ny in board.neighbors(x, y):
            if board.cells[board.index(nx, ny)].visibility is Visibility.UNKNOWN:
                return Event.click(nx, ny), False

        return NO_EVENT, True


class BijectionDetection(Strategy):
    """
    Clue n with unknown + flagged neighbors == n: every unknown neighbor is a mine.

    Emits a Flag on the first such neighbor; a clue whose mines are all
    flagged is exhausted.
    """

    def inspect(self, board: Board, x: int, y: int) -> Tuple[Event, bool]:
        cell = board.at(x, y)
        if cell is None or cell.visibility is not Visibility.REVEALED:
            return NO_EVENT, True

        flagged = 0
        unknown: List[Position] = []
        for nx, ny in board.neighbors(x, y):
            visibility = board.cells[board.index(nx, ny)].visibility
            if visibility is Visibility.FLAGGED:
                flagged += 1
            elif visibility is Visibility.UNKNOWN:
                unknown.append((nx, ny))

        if flagged >= cell.clue:
            return NO_EVENT, True
        if flagged + len(unknown) != cell.clue:
            return NO_EVENT, False

        return Event.flag(*unknown[0]), False
