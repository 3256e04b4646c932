"""Combination enumeration, mine-budget partitions and combination-size estimates."""

import math
from typing import Iterator, List

_LN_PI_HALF = math.log(math.pi) / 2.0
_LN_10 = math.log(10.0)


def combinations(n: int, r: int) -> Iterator[List[int]]:
    """
    Lazily yield every strictly increasing r-length index list drawn from range(n).

    Lists come out in lexicographic order, starting at [0, 1, ..., r-1]. Each
    step increments the right-most index that can still grow and resets the
    indices to its right to consecutive values. Enumeration ends once the
    left-most index would have to exceed n - r.

    r == 0 yields a single empty list; r == n yields the full range once;
    r > n yields nothing. Each yielded list is a fresh copy.

    Raises:
        ValueError: If n or r is negative.
    """
    if n < 0 or r < 0:
        raise ValueError("n and r must be non-negative.")
    if r > n:
        return

    state = list(range(r))
    while True:
        yield list(state)

        i = r - 1
        while i >= 0 and state[i] == n - r + i:
            i -= 1
        if i < 0:
            return

        state[i] += 1
        for j in range(i + 1, r):
            state[j] = state[j - 1] + 1


def mine_partitions(total: int, groups: int) -> Iterator[List[int]]:
    """
    Yield every way to split a mine budget across a number of groups.

    The split is described by groups - 1 cut points in 0..total; per-group
    counts are the consecutive differences between 0, the cut points and
    total. Cut points may coincide so that a group can receive no mines:
    the cuts are drawn as combinations(total + groups - 1, groups - 1) with
    the i-th index shifted down by i, which makes them non-decreasing.

    Every yielded list has `groups` non-negative entries summing to `total`,
    and each distribution appears exactly once.

    Raises:
        ValueError: If groups < 1 or total < 0.
    """
    if groups < 1:
        raise ValueError("groups must be at least 1.")
    if total < 0:
        raise ValueError("total must be non-negative.")

    for cuts in combinations(total + groups - 1, groups - 1):
        bounds = [0] + [c - i for i, c in enumerate(cuts)] + [total]
        yield [b - a for a, b in zip(bounds, bounds[1:])]


def partition_count(total: int, groups: int) -> int:
    """Number of lists mine_partitions(total, groups) yields."""
    return math.comb(total + groups - 1, groups - 1)


def log_factorial(n: float) -> float:
    """
    Continuous approximation of ln(n!).

    f(n) = n ln n - n + ln(n (1 + 4n (1 + 2n))) / 6 + ln(pi) / 2, with f(0) = 0.
    """
    if n <= 0:
        return 0.0
    return (
        n * math.log(n)
        - n
        + math.log(n * (1.0 + 4.0 * n * (1.0 + 2.0 * n))) / 6.0
        + _LN_PI_HALF
    )


def search_scale(n: int, r: int) -> float:
    """
    Estimated number of decimal digits of C(n, r), i.e. log10(C(n, r)).

    Returns 0.0 for the single-choice cases r == 0 and r == n, and +inf when
    r is out of range (there is nothing to enumerate, but it is never
    tractable either).
    """
    if r < 0 or r > n:
        return math.inf
    if r == 0 or r == n:
        return 0.0
    return (log_factorial(n) - log_factorial(r) - log_factorial(n - r)) / _LN_10
