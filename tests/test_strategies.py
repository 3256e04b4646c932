"""Unit tests for the deterministic strategies."""

import unittest
from concurrent.futures import ThreadPoolExecutor

from autosweeper.engine import Board, GameCondition
from autosweeper.events import NO_EVENT, Event, EventKind
from autosweeper.strategies import BijectionDetection, ExhaustedClueDetection, Strategy


def _apply(board: Board, strategy: Strategy, event: Event) -> None:
    """Apply a move to the board, then notify the strategy, as the autoplayer does."""
    x, y = event.pos
    if event.kind is EventKind.CLICK:
        board.click(x, y)
    else:
        board.flag(x, y)
    strategy.update(board, event)


def _row_board() -> Board:
    """5x1 board with mines at both ends and the middle three cells to be clicked."""
    return Board(5, 1, [(0, 0), (4, 0)])


class TestFrontier(unittest.TestCase):
    """Tests for Strategy.update frontier maintenance."""

    def test_starts_empty(self) -> None:
        strategy = ExhaustedClueDetection()
        self.assertEqual(strategy.frontier, set())
        self.assertEqual(strategy.attempt(Board(3, 3, [(0, 0)])), [])

    def test_click_adds_cell_and_neighbors(self) -> None:
        board = Board(4, 4, [(3, 3)])
        strategy = BijectionDetection()
        _apply(board, strategy, Event.click(0, 0))
        self.assertEqual(strategy.frontier, {(0, 0), (1, 0), (0, 1), (1, 1)})

    def test_flag_removes_cell_and_adds_neighbors(self) -> None:
        board = Board(4, 4, [(3, 3)])
        strategy = BijectionDetection()
        strategy.frontier = {(3, 3), (0, 0)}
        _apply(board, strategy, Event.flag(3, 3))
        self.assertEqual(strategy.frontier, {(0, 0), (2, 2), (3, 2), (2, 3)})

    def test_none_and_off_board_events(self) -> None:
        board = Board(4, 4, [(3, 3)])
        strategy = ExhaustedClueDetection()
        strategy.update(board, NO_EVENT)
        strategy.update(board, Event.click(9, 9))
        self.assertEqual(strategy.frontier, set())

    def test_frontiers_are_not_shared(self) -> None:
        board = Board(3, 1, [(0, 0)])
        exhausted = ExhaustedClueDetection()
        bijection = BijectionDetection()
        board.click(2, 0)
        exhausted.update(board, Event.click(2, 0))
        bijection.update(board, Event.click(2, 0))

        exhausted.attempt(board)
        self.assertEqual(bijection.frontier, {(1, 0), (2, 0)})
        self.assertIsNot(exhausted.frontier, bijection.frontier)


class TestExhaustedClueDetection(unittest.TestCase):
    """Tests for the exhausted-clue rule."""

    def test_satisfied_clue_frees_last_neighbor(self) -> None:
        # (1, 0) shows 1, its mine at (0, 0) is flagged, (2, 0) is still unknown
        board = Board(4, 1, [(0, 0), (3, 0)])
        strategy = ExhaustedClueDetection()
        _apply(board, strategy, Event.click(1, 0))
        _apply(board, strategy, Event.flag(0, 0))

        self.assertEqual(board.at(1, 0).clue, 1)
        self.assertEqual(strategy.attempt(board), [Event.click(2, 0)])
        self.assertEqual(strategy.frontier, {(1, 0)})

    def test_exhausted_cells_are_dropped(self) -> None:
        board = Board(4, 1, [(0, 0), (3, 0)])
        strategy = ExhaustedClueDetection()
        for event in (Event.click(1, 0), Event.flag(0, 0), Event.click(2, 0)):
            _apply(board, strategy, event)

        self.assertEqual(strategy.attempt(board), [])
        self.assertEqual(strategy.frontier, {(2, 0)})

    def test_unsatisfied_clue_stays_on_frontier(self) -> None:
        board = Board(3, 1, [(0, 0)])
        strategy = ExhaustedClueDetection()
        _apply(board, strategy, Event.click(1, 0))

        self.assertEqual(strategy.attempt(board), [])
        self.assertEqual(strategy.frontier, {(1, 0)})

    def test_zero_clue_clicks_one_neighbor_per_attempt(self) -> None:
        board = Board(3, 3, [(2, 2)])
        strategy = ExhaustedClueDetection()
        _apply(board, strategy, Event.click(0, 0))

        self.assertEqual(strategy.attempt(board), [Event.click(1, 0)])


class TestBijectionDetection(unittest.TestCase):
    """Tests for the bijection rule."""

    def test_clue_two_with_two_unknowns_flags_both(self) -> None:
        board = Board(3, 1, [(0, 0), (2, 0)])
        strategy = BijectionDetection()
        _apply(board, strategy, Event.click(1, 0))
        self.assertEqual(board.at(1, 0).clue, 2)

        flagged = []
        for _ in range(3):
            events = strategy.attempt(board)
            if not events:
                break
            self.assertEqual(len(events), 1)
            flagged.extend(events)
            _apply(board, strategy, events[0])

        self.assertEqual(flagged, [Event.flag(0, 0), Event.flag(2, 0)])
        self.assertIs(board.condition, GameCondition.WON)

    def test_fully_flagged_clue_is_dropped(self) -> None:
        board = Board(3, 1, [(0, 0)])
        strategy = BijectionDetection()
        _apply(board, strategy, Event.click(1, 0))
        _apply(board, strategy, Event.flag(0, 0))

        self.assertEqual(strategy.attempt(board), [])
        self.assertNotIn((1, 0), strategy.frontier)

    def test_batch_and_first_only(self) -> None:
        batch_board, first_board = _row_board(), _row_board()
        batch, first_only = BijectionDetection(), BijectionDetection(batch=False)
        for board, strategy in ((batch_board, batch), (first_board, first_only)):
            for x in (1, 2, 3):
                _apply(board, strategy, Event.click(x, 0))

        self.assertEqual(batch.attempt(batch_board), [Event.flag(0, 0), Event.flag(4, 0)])
        self.assertEqual(first_only.attempt(first_board), [Event.flag(0, 0)])
        self.assertIn((3, 0), first_only.frontier)

    def test_thread_pool_gives_same_moves(self) -> None:
        inline_board, pooled_board = _row_board(), _row_board()
        inline, pooled = BijectionDetection(), BijectionDetection()
        for board, strategy in ((inline_board, inline), (pooled_board, pooled)):
            for x in (1, 2, 3):
                _apply(board, strategy, Event.click(x, 0))

        with ThreadPoolExecutor(max_workers=4) as executor:
            pooled_events = pooled.attempt(pooled_board, executor)

        self.assertEqual(pooled_events, inline.attempt(inline_board))
        self.assertEqual(pooled.frontier, inline.frontier)


if __name__ == "__main__":
    unittest.main()
