"""Tests for configuration, move values, the command line and the analysis helpers."""

import contextlib
import io
import math
import unittest
from unittest import mock

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from autosweeper import analysis  # noqa: E402
from autosweeper.__main__ import main  # noqa: E402
from autosweeper.config import SolverConfig  # noqa: E402
from autosweeper.events import NO_EVENT, Event, EventKind  # noqa: E402


class TestSolverConfig(unittest.TestCase):

    def test_defaults(self) -> None:
        config = SolverConfig()
        self.assertEqual(config.thread_count, 1)
        self.assertTrue(config.batch_moves)
        self.assertFalse(config.record_steps)
        self.assertEqual(config.guess_seed, 0)

    def test_rejects_invalid_values(self) -> None:
        for kwargs in (
            {"thread_count": 0},
            {"partition_scale_limit": 0.0},
            {"group_scale_limit": -1.0},
        ):
            with self.assertRaises(ValueError, msg=kwargs):
                SolverConfig(**kwargs)


class TestEvent(unittest.TestCase):

    def test_constructors_and_text(self) -> None:
        self.assertEqual(Event.click(1, 2), Event(EventKind.CLICK, (1, 2)))
        self.assertEqual(str(Event.click(1, 2)), "Click(1, 2)")
        self.assertEqual(str(Event.flag(0, 3)), "Flag(0, 3)")
        self.assertEqual(str(NO_EVENT), "None")
        self.assertTrue(NO_EVENT.is_none)
        self.assertFalse(Event.flag(0, 0).is_none)

    def test_position_must_match_kind(self) -> None:
        with self.assertRaises(ValueError):
            Event(EventKind.NONE, (0, 0))
        with self.assertRaises(ValueError):
            Event(EventKind.CLICK)

    def test_events_are_hashable(self) -> None:
        self.assertEqual(len({Event.click(1, 1), Event.click(1, 1), Event.flag(1, 1)}), 2)


class TestCommandLine(unittest.TestCase):

    def _run(self, *argv: str):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = main(list(argv))
        return code, out.getvalue()

    def test_plays_games_and_reports_win_rate(self) -> None:
        code, text = self._run(
            "--width", "9", "--height", "9", "--bombs", "10", "--games", "2", "--seed", "3"
        )
        self.assertEqual(code, 0)
        self.assertIn("[game 1]", text)
        self.assertIn("[game 2]", text)
        self.assertIn("Win rate:", text)

    def test_rejects_bad_thread_count(self) -> None:
        code, text = self._run("--threads", "0")
        self.assertEqual(code, 2)
        self.assertIn("Invalid configuration", text)

    def test_rejects_overfull_board(self) -> None:
        code, text = self._run("--width", "3", "--height", "3", "--bombs", "9")
        self.assertEqual(code, 2)
        self.assertIn("Invalid board", text)

    def test_rejects_zero_games(self) -> None:
        code, _ = self._run("--games", "0")
        self.assertEqual(code, 2)


class TestAnalysis(unittest.TestCase):

    def tearDown(self) -> None:
        plt.close("all")

    def test_new_game_keeps_opening_safe(self) -> None:
        board, centre = analysis.new_game(9, 9, 10)
        self.assertEqual(centre, (4, 4))
        self.assertEqual(board.mine_neighbor_count(*centre), 0)
        self.assertFalse(board.at(*centre).is_mine)

    def test_single_test_reports_status(self) -> None:
        result = analysis.run_solver_single_test(9, 9, 10, seed=1)
        self.assertIn(result["status"], (1, -1))
        self.assertIn("guess_count", result)

    def test_many_tests_aggregate(self) -> None:
        stats = analysis.run_solver_many_tests(5, 5, 3, runs=3, seed=0)
        self.assertTrue(0.0 <= stats["win_rate"] <= 1.0)
        self.assertTrue(0.0 < stats["deterministic_fraction"] <= 1.0)
        self.assertGreaterEqual(stats["avg_frames"], 1.0)
        if stats["win_rate"] == 0.0:
            self.assertTrue(math.isnan(stats["guesses_per_game_won"]))

    def test_many_tests_needs_runs(self) -> None:
        with self.assertRaises(ValueError):
            analysis.run_solver_many_tests(5, 5, 3, runs=0)

    def test_difficulty_analysis_plots_each_level(self) -> None:
        tiny = {"small": (5, 5, 3), "medium": (6, 6, 5)}
        with mock.patch.object(analysis, "LEVELS", tiny):
            results = analysis.run_solver_difficulty_analysis(2, seed=0, show=False)

        self.assertEqual(set(results), {"small", "medium"})
        self.assertEqual(len(plt.get_fignums()), 3)


if __name__ == "__main__":
    unittest.main()
