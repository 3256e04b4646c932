"""Minesweeper board model: cells, geometry, reveal/flag mutation and clue validation."""

import random
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import (
    Collection,
    Deque,
    Iterable,
    List,
    Optional,
    Sequence,
    Set,
    Tuple,
)

from .utils import get_index_neighborhoods, get_neighborhoods


class CellState(Enum):
    EMPTY = 0
    MINE = 1


class Visibility(Enum):
    UNKNOWN = "unknown"
    FLAGGED = "flagged"
    REVEALED = "revealed"
    EXPOSED = "exposed"  # a clicked mine; terminal


class GameCondition(Enum):
    IN_PROGRESS = 0
    WON = 1
    LOST = -1

    @property
    def is_terminal(self) -> bool:
        return self is not GameCondition.IN_PROGRESS


class InconsistentBoardError(RuntimeError):
    """A revealed clue disagrees with the true mine layout around it."""


@dataclass
class Cell:
    state: CellState = CellState.EMPTY
    visibility: Visibility = Visibility.UNKNOWN
    clue: Optional[int] = None  # set once, when the cell is revealed

    @property
    def is_mine(self) -> bool:
        return self.state is CellState.MINE


class Board:
    """Rectangular Minesweeper grid stored as a flat list indexed y*width+x."""

    def __init__(
        self,
        width: int,
        height: int,
        mines: Iterable[Tuple[int, int]],
    ) -> None:
        """
        Build a board with mines at the given positions; every cell starts unknown.

        Args:
            width: Board width (number of columns), must be > 0.
            height: Board height (number of rows), must be > 0.
            mines: Mine coordinates (x, y). Duplicates are ignored.

        Raises:
            ValueError: If dimensions are invalid, a mine lies outside the
                board, or there are no mines at all.
        """
        if width <= 0 or height <= 0:
            raise ValueError("Width and height must be positive.")

        self.width: int = width
        self.height: int = height
        self.cells: List[Cell] = [Cell() for _ in range(width * height)]

        mine_set: Set[Tuple[int, int]] = set(mines)
        for mx, my in mine_set:
            if not self.in_bounds(mx, my):
                raise ValueError(f"Mine ({mx}, {my}) is outside the board.")
            self.cells[my * width + mx].state = CellState.MINE

        if not mine_set:
            raise ValueError("A board needs at least one mine.")

        self.bomb_count: int = len(mine_set)
        self.flagged_count: int = 0
        self.condition: GameCondition = GameCondition.IN_PROGRESS

        self._neighborhoods = get_neighborhoods(width, height)
        self._index_neighborhoods = get_index_neighborhoods(width, height)

    @classmethod
    def random(
        cls,
        width: int,
        height: int,
        bomb_count: int,
        rng: Optional[random.Random] = None,
        safe_cells: Collection[Tuple[int, int]] = (),
    ) -> "Board":
        """
        Place bomb_count mines uniformly at random, never on safe_cells.

        Args:
            width: Board width.
            height: Board height.
            bomb_count: Number of mines to place, must be > 0.
            rng: Random source; a fresh unseeded one when omitted.
            safe_cells: Cells guaranteed to stay mine-free (e.g. the first
                click and its neighborhood).

        Raises:
            ValueError: If the mines cannot fit outside the safe cells.
        """
        if width <= 0 or height <= 0:
            raise ValueError("Width and height must be positive.")
        if bomb_count <= 0:
            raise ValueError("bomb_count must be positive.")

        safe = set(safe_cells)
        eligible: List[Tuple[int, int]] = [
            (x, y)
            for y in range(height)
            for x in range(width)
            if (x, y) not in safe
        ]
        if bomb_count > len(eligible):
            raise ValueError(
                f"Cannot place {bomb_count} mines in {len(eligible)} eligible cells."
            )

        rng = rng or random.Random()
        return cls(width, height, rng.sample(eligible, bomb_count))

    # -------------------------------------------------------------------------
    # Geometry and queries
    # -------------------------------------------------------------------------

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def index(self, x: int, y: int) -> int:
        return y * self.width + x

    def position(self, i: int) -> Tuple[int, int]:
        return i % self.width, i // self.width

    def at(self, x: int, y: int) -> Optional[Cell]:
        """Return the cell at (x, y), or None when (x, y) is not on the board."""
        if not self.in_bounds(x, y):
            return None
        return self.cells[y * self.width + x]

    def neighbors(self, x: int, y: int) -> Tuple[Tuple[int, int], ...]:
        """Return the in-bounds 8-neighborhood of (x, y); empty for off-board input."""
        if not self.in_bounds(x, y):
            return ()
        return self._neighborhoods[(x, y)]

    def remaining_mines(self) -> int:
        return self.bomb_count - self.flagged_count

    def count_neighbors(self, x: int, y: int, visibility: Visibility) -> int:
        """Count neighbors of (x, y) currently showing the given visibility."""
        return sum(
            1
            for nx, ny in self.neighbors(x, y)
            if self.cells[ny * self.width + nx].visibility is visibility
        )

    def mine_neighbor_count(self, x: int, y: int) -> int:
        return sum(
            1 for nx, ny in self.neighbors(x, y) if self.cells[ny * self.width + nx].is_mine
        )

    def unknown_cells(self) -> List[Tuple[int, int]]:
        """All cells still showing UNKNOWN, in row-major order."""
        return [
            self.position(i)
            for i, cell in enumerate(self.cells)
            if cell.visibility is Visibility.UNKNOWN
        ]

    def revealed_indices(self) -> List[int]:
        return [
            i
            for i, cell in enumerate(self.cells)
            if cell.visibility is Visibility.REVEALED
        ]

    def states(self) -> List[bool]:
        """Copy of the mine-state array (True = mine), flat and row-major."""
        return [cell.is_mine for cell in self.cells]

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def click(self, x: int, y: int, flood: bool = False) -> List[Tuple[int, int]]:
        """
        Reveal (x, y).

        Clicking a mine loses the game and exposes that mine. Clicking an
        unknown safe cell reveals it with its mine-neighbor count. Off-board,
        already revealed or flagged targets, and any click after the game
        has ended, are silent no-ops.

        Args:
            x: X-coordinate of the cell to reveal.
            y: Y-coordinate of the cell to reveal.
            flood: If True, a revealed 0 keeps revealing its unknown
                neighbors breadth-first.

        Returns:
            Newly revealed positions, in reveal order.
        """
        if self.condition.is_terminal:
            return []

        cell = self.at(x, y)
        if cell is None or cell.visibility is not Visibility.UNKNOWN:
            return []

        if cell.is_mine:
            cell.visibility = Visibility.EXPOSED
            self.condition = GameCondition.LOST
            return []

        frontier: Deque[Tuple[int, int]] = deque([(x, y)])
        visited: Set[Tuple[int, int]] = {(x, y)}
        revealed: List[Tuple[int, int]] = []

        while frontier:
            cx, cy = frontier.popleft()
            current = self.cells[cy * self.width + cx]
            if current.visibility is not Visibility.UNKNOWN or current.is_mine:
                continue

            current.clue = self.mine_neighbor_count(cx, cy)
            current.visibility = Visibility.REVEALED
            revealed.append((cx, cy))

            if flood and current.clue == 0:
                for nx, ny in self.neighbors(cx, cy):
                    if (nx, ny) in visited:
                        continue
                    visited.add((nx, ny))
                    frontier.append((nx, ny))

        return revealed

    def flag(self, x: int, y: int) -> None:
        """
        Mark (x, y) as flagged.

        Any unknown cell may be flagged, mine or not, but only a mine advances
        the win condition: the game is won once every mine carries a flag.
        Off-board, revealed or already-flagged targets are no-ops.
        """
        if self.condition.is_terminal:
            return

        cell = self.at(x, y)
        if cell is None or cell.visibility is not Visibility.UNKNOWN:
            return

        if cell.is_mine:
            self.flagged_count += 1
            if self.flagged_count == self.bomb_count:
                self.condition = GameCondition.WON

        cell.visibility = Visibility.FLAGGED

    # -------------------------------------------------------------------------
    # Consistency
    # -------------------------------------------------------------------------

    def validate(
        self,
        hypothetical: Sequence[bool],
        clues: Optional[Iterable[int]] = None,
    ) -> bool:
        """
        Check a hypothetical mine layout against the revealed clues.

        Only clues already on the board are consulted; the truth of unknown
        or flagged cells is never read.

        Args:
            hypothetical: Flat mine-state array (True = mine), same layout as
                states().
            clues: Flat indices of revealed cells to check. Defaults to every
                revealed cell.

        Returns:
            True if every checked clue equals its mine-neighbor count under
            the hypothesis.
        """
        if len(hypothetical) != len(self.cells):
            raise ValueError(
                f"Hypothesis has {len(hypothetical)} cells, board has {len(self.cells)}."
            )

        indices = self.revealed_indices() if clues is None else clues
        for i in indices:
            expected = self.cells[i].clue
            count = 0
            for j in self._index_neighborhoods[i]:
                if hypothetical[j]:
                    count += 1
            if count != expected:
                return False
        return True

    def check_consistency(self) -> None:
        """
        Raise InconsistentBoardError if any stored clue is wrong.

        A failure here means the board was mutated incorrectly; the solver
        itself trusts stored clues.
        """
        for i, cell in enumerate(self.cells):
            if cell.visibility is not Visibility.REVEALED:
                continue
            x, y = self.position(i)
            if cell.is_mine:
                raise InconsistentBoardError(f"Mine at ({x}, {y}) is marked revealed.")
            actual = self.mine_neighbor_count(x, y)
            if cell.clue != actual:
                raise InconsistentBoardError(
                    f"Clue at ({x}, {y}) is {cell.clue}, but {actual} neighbors are mines."
                )

    # -------------------------------------------------------------------------
    # Display methods
    # -------------------------------------------------------------------------

    _ANSI_RESET = "\033[0m"
    _ANSI_COORD = "\033[96m"
    _ANSI_MINE = "\033[91m"

    def _c(self, s: str) -> str:
        """Wrap string in coordinate color."""
        return f"{self._ANSI_COORD}{s}{self._ANSI_RESET}"

    def _m(self, s: str) -> str:
        """Wrap string in mine color (red)."""
        return f"{self._ANSI_MINE}{s}{self._ANSI_RESET}"

    def symbol(self, x: int, y: int, reveal_all: bool = False) -> str:
        """
        One-character view of a cell.

        '.' unknown, 'F' flagged, '0'-'8' revealed clue, '!' exposed mine;
        with reveal_all, hidden mines show as 'M'.
        """
        cell = self.cells[y * self.width + x]
        if cell.visibility is Visibility.REVEALED:
            return str(cell.clue)
        if cell.visibility is Visibility.EXPOSED:
            return "!"
        if cell.visibility is Visibility.FLAGGED:
            return "F"
        if reveal_all and cell.is_mine:
            return "M"
        return "."

    def snapshot(self, reveal_all: bool = False) -> List[List[str]]:
        """Row-major grid of symbol() values."""
        return [
            [self.symbol(x, y, reveal_all) for x in range(self.width)]
            for y in range(self.height)
        ]

    def format_board(self, reveal_all: bool = False) -> str:
        """
        Render the board as a multi-line string for terminal display.

        Args:
            reveal_all: If True, show the hidden mines as well.

        Returns:
            A formatted multi-line string with coordinate labels and the board grid.
        """
        w, h = self.width, self.height

        def cell_str(x: int, y: int) -> str:
            s = self.symbol(x, y, reveal_all)
            if s in ("M", "!"):
                return self._m(s)
            return s

        # Header: x coordinates
        header_cells = " ".join(f"{x:2d}" for x in range(w))
        out = [self._c("   ") + self._c(header_cells)]

        # Separator line
        sep = self._c("   " + "-" * (3 * w - 1))
        out.append(sep)

        # Rows with y coordinate at left
        for y in range(h):
            row_cells = " ".join(f" {cell_str(x, y)}" for x in range(w))
            out.append(self._c(f"{y:2d} ") + self._c("|") + row_cells)

        return "\n".join(out)
