

from __future__ import annotations

from .errors import ErrorKind, MazeError
from .types import TileType

CHAR_TO_TILE = {t.value: t for t in TileType}

DEAD_END_SYMBOL = "-"
LIVE_ROUTE_SYMBOL = "*"


class Tile:
    """One maze cell.

    The kind is fixed at construction. ``visited`` and ``dead_end`` are
    one-way flags set by a route finder; a visited tile is no longer
    navigable, so every tile is entered at most once per maze.

    Tiles compare by identity: two corridors are never equal to each other.
    """

    __slots__ = ("_kind", "visited", "dead_end")

    def __init__(self, kind: TileType, visited: bool = False, dead_end: bool = False):
        if dead_end and not visited:
            raise ValueError("a dead-end tile must also be visited")
        self._kind = kind
        self.visited = visited
        self.dead_end = dead_end

    @property
    def kind(self) -> TileType:
        return self._kind

    @property
    def symbol(self) -> str:
        return self._kind.value

    def is_navigable(self) -> bool:
        return self._kind != TileType.WALL and not self.visited

    def mark_visited(self) -> None:
        self.visited = True

    def mark_dead_end(self) -> None:
        if not self.visited:
            raise ValueError("cannot mark an unvisited tile as a dead end")
        self.dead_end = True

    def route_symbol(self) -> str:
        if self.visited and self.dead_end:
            return DEAD_END_SYMBOL
        if self.visited:
            return LIVE_ROUTE_SYMBOL
        return self.symbol

    def __str__(self) -> str:
        return self.symbol

    def __repr__(self) -> str:
        return f"Tile({self._kind.name}, visited={self.visited}, dead_end={self.dead_end})"


def classify(symbol: str) -> Tile:
    kind = CHAR_TO_TILE.get(symbol)
    if kind is None:
        raise MazeError(ErrorKind.UNRECOGNIZED_SYMBOL, f"Unknown symbol {symbol!r}.")
    return Tile(kind)
