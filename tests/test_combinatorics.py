"""Unit tests for combination enumeration and search-scale estimates."""

import itertools
import math
import unittest

from autosweeper.combinatorics import (
    combinations,
    log_factorial,
    mine_partitions,
    partition_count,
    search_scale,
)


class TestCombinations(unittest.TestCase):
    """Tests for combinatorics.combinations."""

    def test_ten_choose_three(self) -> None:
        combos = list(combinations(10, 3))
        self.assertEqual(len(combos), 120)
        self.assertEqual(combos[0], [0, 1, 2])
        self.assertEqual(combos[-1], [7, 8, 9])
        self.assertEqual(len({tuple(c) for c in combos}), 120)
        for combo in combos:
            self.assertTrue(all(a < b for a, b in zip(combo, combo[1:])), combo)

    def test_lexicographic_order(self) -> None:
        combos = list(combinations(7, 4))
        self.assertEqual(combos, sorted(combos))

    def test_matches_itertools(self) -> None:
        for n in range(0, 8):
            for r in range(0, n + 1):
                expected = [list(c) for c in itertools.combinations(range(n), r)]
                self.assertEqual(list(combinations(n, r)), expected, (n, r))

    def test_edge_cases(self) -> None:
        self.assertEqual(list(combinations(5, 0)), [[]])
        self.assertEqual(list(combinations(0, 0)), [[]])
        self.assertEqual(list(combinations(4, 4)), [[0, 1, 2, 3]])
        self.assertEqual(list(combinations(3, 4)), [])

    def test_is_lazy_and_yields_copies(self) -> None:
        gen = combinations(1000, 500)
        first = next(gen)
        second = next(gen)
        self.assertEqual(first[-1], 499)
        self.assertEqual(second[-1], 500)

    def test_negative_arguments_raise(self) -> None:
        with self.assertRaises(ValueError):
            list(combinations(-1, 0))
        with self.assertRaises(ValueError):
            list(combinations(3, -1))


class TestMinePartitions(unittest.TestCase):
    """Tests for combinatorics.mine_partitions."""

    def test_three_groups_ten_mines(self) -> None:
        splits = list(mine_partitions(10, 3))
        for split in splits:
            self.assertEqual(len(split), 3)
            self.assertTrue(all(count >= 0 for count in split), split)
            self.assertEqual(sum(split), 10)

        self.assertEqual(len(splits), partition_count(10, 3))
        self.assertEqual(len(splits), math.comb(12, 2))
        self.assertEqual(len({tuple(s) for s in splits}), len(splits))

    def test_every_distribution_appears(self) -> None:
        splits = {tuple(s) for s in mine_partitions(4, 3)}
        expected = {
            (a, b, 4 - a - b) for a in range(5) for b in range(5 - a)
        }
        self.assertEqual(splits, expected)
        self.assertIn((0, 4, 0), splits)

    def test_single_group_gets_everything(self) -> None:
        self.assertEqual(list(mine_partitions(7, 1)), [[7]])

    def test_zero_budget(self) -> None:
        self.assertEqual(list(mine_partitions(0, 3)), [[0, 0, 0]])

    def test_invalid_arguments(self) -> None:
        with self.assertRaises(ValueError):
            list(mine_partitions(5, 0))
        with self.assertRaises(ValueError):
            list(mine_partitions(-1, 2))


class TestSearchScale(unittest.TestCase):
    """Tests for the log-scale combination-size estimate."""

    def test_log_factorial_close_to_exact(self) -> None:
        self.assertEqual(log_factorial(0), 0.0)
        for n in (1, 2, 5, 10, 50, 200):
            self.assertAlmostEqual(log_factorial(n), math.lgamma(n + 1), places=3)

    def test_matches_log10_of_binomial(self) -> None:
        for n, r in [(10, 3), (20, 10), (100, 20), (480, 99), (64, 1)]:
            exact = math.log10(math.comb(n, r))
            self.assertAlmostEqual(search_scale(n, r), exact, delta=0.01, msg=(n, r))

    def test_single_choice_and_out_of_range(self) -> None:
        self.assertEqual(search_scale(5, 0), 0.0)
        self.assertEqual(search_scale(5, 5), 0.0)
        self.assertEqual(search_scale(3, 4), math.inf)
        self.assertEqual(search_scale(3, -1), math.inf)


if __name__ == "__main__":
    unittest.main()
