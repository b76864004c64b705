

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class TileType(Enum):
    ENTRANCE = "e"
    EXIT = "x"
    CORRIDOR = "."
    WALL = "#"


@dataclass(frozen=True)
class Position:
    """Cartesian maze coordinate: x grows to the right, y grows upwards."""

    x: int
    y: int

    def as_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def move(self, dx: int, dy: int) -> "Position":
        return Position(self.x + dx, self.y + dy)

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


class Direction(Enum):
    NORTH = (0, 1)
    EAST = (1, 0)
    SOUTH = (0, -1)
    WEST = (-1, 0)

    @property
    def delta(self) -> Tuple[int, int]:
        return self.value

    @property
    def opposite(self) -> "Direction":
        dx, dy = self.value
        return Direction((-dx, -dy))


# Neighbour scan order used by the route finder; the first navigable wins
CARDINAL_ORDER = (Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST)
