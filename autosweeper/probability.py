"""Combinatorial mine-probability estimation and least-risk move selection."""

import logging
import random
from collections import Counter, deque
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Deque, Dict, List, Optional, Sequence, Set, Tuple

import numpy as np

from .combinatorics import combinations, mine_partitions, search_scale
from .config import SolverConfig
from .engine import Board, Visibility
from .events import Event
from .utils import fan_out

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


@dataclass
class Group:
    """
    Unknown cells linked through shared revealed clues.

    Attributes:
        members: Indices into the unknown-cell list the group was built from.
        clues: Flat board indices of the revealed cells bordering the group.
    """

    members: List[int]
    clues: List[int]

    def __len__(self) -> int:
        return len(self.members)


@dataclass
class Histogram:
    """Per-cell mine tallies over the enumerated, clue-consistent hypotheses."""

    cells: List[Position]
    tallies: np.ndarray
    method: str  # "enumeration" or "uniform"
    valid_combinations: int = 0


@dataclass
class ProbabilityResult:
    """
    The engine's answer for one board position.

    Attributes:
        event: Move to apply now.
        deferred: Further moves that are just as safe, to be applied on later
            frames without recomputation.
        guessed: True if no cell was provably safe and `event` is a guess.
        method: "closure", "enumeration" or "uniform".
        histogram: The tallies behind the choice (None for closure moves).
    """

    event: Event
    deferred: List[Event]
    guessed: bool
    method: str
    histogram: Optional[Histogram] = None


def group_unknown_cells(board: Board, cells: Sequence[Position]) -> List[Group]:
    """
    Partition unknown cells into mutually independent groups.

    Two cells share a group when some revealed cell neighbors both; groups
    are the transitive closure of that relation, grown breadth-first from
    the first ungrouped cell. Cells with no revealed neighbor end up alone.
    No revealed clue borders cells of two different groups.
    """
    index_of: Dict[Position, int] = {pos: i for i, pos in enumerate(cells)}
    grouped = [False] * len(cells)
    groups: List[Group] = []

    for seed in range(len(cells)):
        if grouped[seed]:
            continue
        grouped[seed] = True

        queue: Deque[int] = deque([seed])
        members: List[int] = []
        clues: Set[int] = set()

        while queue:
            i = queue.popleft()
            members.append(i)
            x, y = cells[i]
            for nx, ny in board.neighbors(x, y):
                ni = board.index(nx, ny)
                if board.cells[ni].visibility is not Visibility.REVEALED or ni in clues:
                    continue
                clues.add(ni)
                for ox, oy in board.neighbors(nx, ny):
                    j = index_of.get((ox, oy))
                    if j is not None and not grouped[j]:
                        grouped[j] = True
                        queue.append(j)

        groups.append(Group(sorted(members), sorted(clues)))

    return groups


def tally_group(
    board: Board,
    base: Sequence[bool],
    flat_cells: Sequence[int],
    clues: Sequence[int],
    mine_count: int,
) -> Tuple[np.ndarray, int]:
    """
    Enumerate every placement of mine_count mines over flat_cells.

    Each placement is written into a private copy of `base` and checked with
    board.validate() against `clues`.

    Returns:
        (tally, valid): per-cell count of consistent placements putting a mine
        there, and the number of consistent placements.
    """
    hypothesis = list(base)
    tally = np.zeros(len(flat_cells), dtype=np.int64)
    valid = 0
    previous: List[int] = []

    for combo in combinations(len(flat_cells), mine_count):
        for j in previous:
            hypothesis[flat_cells[j]] = False
        for j in combo:
            hypothesis[flat_cells[j]] = True
        previous = combo

        if board.validate(hypothesis, clues):
            valid += 1
            for j in combo:
                tally[j] += 1

    return tally, valid


class ProbabilityEngine:
    """
    Picks a move when no deterministic strategy can: a provably safe cell if
    the enumeration finds one, otherwise the cell with the smallest mine tally.
    """

    def __init__(
        self,
        config: Optional[SolverConfig] = None,
        executor: Optional[Executor] = None,
    ) -> None:
        self.config: SolverConfig = config or SolverConfig()
        self.executor: Optional[Executor] = executor
        self.rng: random.Random = random.Random(self.config.guess_seed)
        self.guess_count: int = 0

    def choose(self, board: Board) -> ProbabilityResult:
        """
        Choose the next move for `board`.

        Raises:
            ValueError: If the board has no unknown cells left.
        """
        cells = board.unknown_cells()
        if not cells:
            raise ValueError("No unknown cells left to choose from.")

        closure = self._mine_count_closure(cells, board.remaining_mines())
        if closure is not None:
            return closure

        return self.select(self.histogram(board, cells))

    def _mine_count_closure(
        self, cells: List[Position], remaining: int
    ) -> Optional[ProbabilityResult]:
        """Moves forced by the global mine count alone."""
        if remaining == 0:
            events = [Event.click(x, y) for x, y in cells]
        elif remaining == len(cells):
            events = [Event.flag(x, y) for x, y in cells]
        else:
            return None

        logger.debug("mine count closure: %d unknown, %d remaining", len(cells), remaining)
        return ProbabilityResult(events[0], events[1:], False, "closure")

    def histogram(self, board: Board, cells: Optional[List[Position]] = None) -> Histogram:
        """
        Tally, for every unknown cell, the consistent hypotheses placing a mine there.

        The remaining mine budget is split across groups in every possible
        way; each group then enumerates its placements for its share. A group
        whose placements are too many to enumerate adds 1 to each of its
        cells per split instead. When the splits themselves are too many,
        every cell gets the same tally.
        """
        if cells is None:
            cells = board.unknown_cells()

        remaining = board.remaining_mines()
        groups = group_unknown_cells(board, cells)
        uniform = Histogram(cells, np.ones(len(cells), dtype=np.int64), "uniform")

        k = len(groups)
        scale = search_scale(remaining + k - 1, k - 1)
        logger.debug(
            "unknown: %d, remaining mines: %d, groups: %d, partition scale: %.2f",
            len(cells), remaining, k, scale,
        )
        if k > 1 and scale >= self.config.partition_scale_limit:
            return uniform

        sizes = [len(g) for g in groups]
        splits = Counter()
        for split in mine_partitions(remaining, k):
            if all(count <= size for count, size in zip(split, sizes)):
                for g, count in enumerate(split):
                    splits[(g, count)] += 1

        if not splits:
            logger.warning(
                "no way to place %d mines in %d unknown cells; guessing uniformly",
                remaining, len(cells),
            )
            return uniform

        base = board.states()
        for x, y in cells:
            base[board.index(x, y)] = False

        pairs = sorted(splits)

        def evaluate(pair: Tuple[int, int]) -> Tuple[np.ndarray, Optional[int]]:
            g, count = pair
            group = groups[g]
            if search_scale(len(group), count) >= self.config.group_scale_limit:
                return np.ones(len(group), dtype=np.int64), None
            flat = [board.index(*cells[i]) for i in group.members]
            return tally_group(board, base, flat, group.clues, count)

        results = fan_out(evaluate, pairs, self.executor)

        tallies = np.zeros(len(cells), dtype=np.int64)
        valid_total = 0
        enumerated: Set[int] = set()
        consistent: Set[int] = set()
        for (g, count), (tally, valid) in zip(pairs, results):
            weight = splits[(g, count)]
            tallies[groups[g].members] += weight * tally
            if valid is None:
                continue
            enumerated.add(g)
            if valid:
                consistent.add(g)
            valid_total += weight * valid

        contradicted = enumerated - consistent
        if contradicted:
            logger.warning(
                "%d group(s) have no placement consistent with the clues; guessing uniformly",
                len(contradicted),
            )
            return uniform

        method = "enumeration" if enumerated else "uniform"
        return Histogram(cells, tallies, method, valid_total)

    def select(self, histogram: Histogram) -> ProbabilityResult:
        """
        Pick the lowest-tally cell; ties go to the first cell in row-major order.

        A zero tally means no consistent hypothesis puts a mine there: that
        cell is clicked and every other zero-tally cell is deferred. Otherwise
        the pick is a guess and counts towards guess_count. A uniform
        histogram carries no information, so its guess is drawn at random
        from the lowest-tally cells.
        """
        cells, tallies = histogram.cells, histogram.tallies
        order = np.argsort(tallies, kind="stable")
        best = int(order[0])
        x, y = cells[best]

        if tallies[best] == 0:
            deferred: List[Event] = []
            for i in order[1:]:
                if tallies[i] != 0:
                    break
                deferred.append(Event.click(*cells[int(i)]))
            logger.debug("zero-risk click at (%d, %d), %d deferred", x, y, len(deferred))
            return ProbabilityResult(Event.click(x, y), deferred, False, histogram.method, histogram)

        if histogram.method == "uniform":
            lowest = [int(i) for i in order if tallies[i] == tallies[best]]
            best = self.rng.choice(lowest)
            x, y = cells[best]

        self.guess_count += 1
        logger.debug(
            "guessed %s at (%d, %d) with tally %d of %d",
            histogram.method, x, y, int(tallies[best]), histogram.valid_combinations,
        )
        return ProbabilityResult(Event.click(x, y), [], True, histogram.method, histogram)
