"""Shared helpers: cached grid geometry and worker-pool fan-out."""

from concurrent.futures import Executor
from typing import Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

T = TypeVar("T")
R = TypeVar("R")

# Module-level caches keyed by (width, height)
_NEIGHBORHOODS_CACHE: Dict[
    Tuple[int, int],
    Dict[Tuple[int, int], Tuple[Tuple[int, int], ...]]
] = {}
_INDEX_NEIGHBORHOODS_CACHE: Dict[
    Tuple[int, int], Tuple[Tuple[int, ...], ...]
] = {}


def get_neighborhoods(
    width: int, height: int
) -> Dict[Tuple[int, int], Tuple[Tuple[int, int], ...]]:
    """
    Precompute and cache 8-connected neighbor coordinates for every cell in a grid.

    Offsets that would leave the grid (including negative coordinates) are
    dropped, so edge and corner cells have fewer neighbors and nothing wraps.

    Args:
        width: Grid width (number of columns). Must be positive.
        height: Grid height (number of rows). Must be positive.

    Returns:
        Mapping from each cell (x, y) to a tuple of valid neighboring
        coordinates (nx, ny) under 8-connectivity.

    Raises:
        ValueError: If width or height is non-positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive.")

    key = (width, height)
    cached = _NEIGHBORHOODS_CACHE.get(key)
    if cached is not None:
        return cached

    neighborhoods: Dict[Tuple[int, int], Tuple[Tuple[int, int], ...]] = {}
    for y in range(height):
        for x in range(width):
            nbrs: List[Tuple[int, int]] = []
            for dy in (-1, 0, 1):
                for dx in (-1, 0, 1):
                    if dx == 0 and dy == 0:
                        continue
                    nx, ny = x + dx, y + dy
                    if 0 <= nx < width and 0 <= ny < height:
                        nbrs.append((nx, ny))
            neighborhoods[(x, y)] = tuple(nbrs)

    _NEIGHBORHOODS_CACHE[key] = neighborhoods
    return neighborhoods


def get_index_neighborhoods(
    width: int, height: int
) -> Tuple[Tuple[int, ...], ...]:
    """
    Same geometry as get_neighborhoods(), expressed as flat indices y*width+x.

    Entry i of the result holds the flat indices of the neighbors of cell i.
    """
    key = (width, height)
    cached = _INDEX_NEIGHBORHOODS_CACHE.get(key)
    if cached is not None:
        return cached

    neighborhoods = get_neighborhoods(width, height)
    by_index = tuple(
        tuple(ny * width + nx for nx, ny in neighborhoods[(x, y)])
        for y in range(height)
        for x in range(width)
    )

    _INDEX_NEIGHBORHOODS_CACHE[key] = by_index
    return by_index


def fan_out(
    fn: Callable[[T], R],
    items: Iterable[T],
    executor: Optional[Executor] = None,
) -> List[R]:
    """
    Apply fn to every item, on the executor when one is given.

    Results always come back in input order, so callers can reduce them
    deterministically no matter how the workers were scheduled.
    """
    if executor is None:
        return [fn(item) for item in items]
    return list(executor.map(fn, items))
