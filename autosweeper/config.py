"""Tuning knobs for the solver and the autoplayer."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SolverConfig:
    """
    Solver configuration. None of these settings change which moves are
    provably safe; they trade throughput against guess quality.

    Attributes:
        thread_count: Worker-pool size for fan-out. 1 runs everything inline.
        batch_moves: If True, each strategy returns one move per productive
            frontier cell; if False, only the first move it finds.
        partition_scale_limit: Largest search scale (estimated decimal digits
            of the candidate count) for which the mine budget is split
            exhaustively across groups.
        group_scale_limit: Largest search scale for which a single group's
            mine placements are enumerated exhaustively.
        record_steps: If True, the autoplayer keeps a per-move history with
            board snapshots for replay.
        guess_seed: Seed for the random pick among equally likely cells
            when the engine falls back to uniform tallies.
    """

    thread_count: int = 1
    batch_moves: bool = True
    partition_scale_limit: float = 3.0
    group_scale_limit: float = 4.0
    record_steps: bool = False
    guess_seed: int = 0

    def __post_init__(self) -> None:
        if self.thread_count < 1:
            raise ValueError("thread_count must be at least 1.")
        if self.partition_scale_limit <= 0:
            raise ValueError("partition_scale_limit must be positive.")
        if self.group_scale_limit <= 0:
            raise ValueError("group_scale_limit must be positive.")
