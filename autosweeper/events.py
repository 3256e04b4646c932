"""Moves exchanged between the board, the strategies and the caller."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class EventKind(Enum):
    CLICK = "click"
    FLAG = "flag"
    NONE = "none"


@dataclass(frozen=True)
class Event:
    """
    A tagged move: reveal a cell, flag a cell, or no suggestion.

    The same value is produced by the engine and fed back to it through
    update() once the move has been applied to the board.
    """

    kind: EventKind
    pos: Optional[Tuple[int, int]] = None

    def __post_init__(self) -> None:
        if self.kind is EventKind.NONE and self.pos is not None:
            raise ValueError("A NONE event cannot carry a position.")
        if self.kind is not EventKind.NONE and self.pos is None:
            raise ValueError(f"A {self.kind.value} event needs a position.")

    @classmethod
    def click(cls, x: int, y: int) -> "Event":
        return cls(EventKind.CLICK, (x, y))

    @classmethod
    def flag(cls, x: int, y: int) -> "Event":
        return cls(EventKind.FLAG, (x, y))

    @property
    def is_none(self) -> bool:
        return self.kind is EventKind.NONE

    def __str__(self) -> str:
        if self.pos is None:
            return "None"
        return f"{self.kind.value.capitalize()}{self.pos}"


NO_EVENT = Event(EventKind.NONE)
